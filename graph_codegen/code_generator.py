"""
Code Generator for node graphs.

This module walks a node graph along its control-flow edges and renders it as
source code in any registered language. The traversal is language-agnostic:
statement shapes, operators, literals and program boilerplate all come from a
``LanguageConfig``, and what each node kind emits comes from the node
registry.

Generation is total. Unknown node kinds become comments, unconnected inputs
fall back to properties, socket defaults and zero values, and cyclic graphs
terminate because every node is emitted at most once per run.
"""

import inspect
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

from .config import CodegenSettings
from .language_catalog import build_default_language_registry
from .language_config import LanguageConfig, LanguageRegistry, substitute
from .models import Edge, Graph, GraphNode
from .node_registry import NodeRegistry, build_default_registry
from .sockets import Socket, SocketType


INT_PATTERN = re.compile(r'[+-]?\d+')
FLOAT_PATTERN = re.compile(r'[+-]?(\d+\.\d*|\.\d+)([eE][+-]?\d+)?|[+-]?\d+[eE][+-]?\d+')


def is_quoted(text: str) -> bool:
    """Check whether text is already a quoted string literal."""
    return len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'")


def infer_value_type(value: Any, kind: SocketType = SocketType.ANY) -> str:
    """Infer the declared type of a literal: int, float, string, boolean or any."""
    if value is None:
        return {SocketType.NUMBER: 'int', SocketType.STRING: 'string',
                SocketType.BOOLEAN: 'boolean'}.get(kind, 'any')
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, int):
        return 'int'
    if isinstance(value, float):
        return 'float'
    text = str(value).strip()
    if kind is SocketType.STRING or is_quoted(text):
        return 'string'
    if text.lower() in ('true', 'false'):
        return 'boolean'
    if INT_PATTERN.fullmatch(text):
        return 'int'
    if FLOAT_PATTERN.fullmatch(text):
        return 'float'
    return 'any'


def find_entry_points(graph: Graph) -> List[GraphNode]:
    """Return the nodes where control flow can start, in graph order.

    A node is an entry point when it has no flow inputs, or when none of its
    flow inputs has an incoming edge.
    """
    fed: Set[Tuple[str, str]] = {(e.target, e.target_socket) for e in graph.edges}
    entries = []
    for node in graph.nodes:
        if not any((node.id, s.id) in fed for s in node.flow_inputs()):
            entries.append(node)
    return entries


@dataclass
class GenerationResult:
    """Generated source text plus what an editor needs to present it."""
    code: str
    language: str
    file_extension: str
    syntax_id: str
    warnings: List[str] = field(default_factory=list)
    fallback_language: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'language': self.language,
            'file_extension': self.file_extension,
            'syntax_id': self.syntax_id,
            'warnings': list(self.warnings),
            'fallback_language': self.fallback_language,
        }


@dataclass
class BlockFrame:
    """A block handler suspended while one of its slots is processed.

    Block handlers are generators: they open a block, yield the name of the
    output whose nodes form its body, and resume once that body is emitted.
    """
    node: GraphNode
    steps: Iterator[str]
    indent_level: int
    slot_start: Optional[int] = None


class GenerationSession:
    """State for one generation run.

    Holds the output buffer, the indent depth, the visited set and the
    declared names. Node handlers receive the session and emit through its
    primitives. A session is used once and then discarded.
    """

    def __init__(self, graph: Graph, config: LanguageConfig, registry: NodeRegistry,
                 settings: CodegenSettings):
        self.graph = graph
        self.config = config
        self.registry = registry
        self.settings = settings
        self.logger = logging.getLogger(__name__)

        self.lines: List[str] = []
        self.indent_level = 0
        self.visited: Set[str] = set()
        self.variables: Set[str] = set()
        self.functions: Set[str] = set()
        self.temporaries: Dict[str, str] = {}
        self.warnings: List[str] = []
        self._expanding: Set[str] = set()

        self._nodes: Dict[str, GraphNode] = {}
        for node in graph.nodes:
            self._nodes.setdefault(node.id, node)
        self._incoming: Dict[Tuple[str, str], List[Edge]] = {}
        self._outgoing: Dict[Tuple[str, str], List[Edge]] = {}
        for edge in graph.edges:
            self._incoming.setdefault((edge.target, edge.target_socket), []).append(edge)
            self._outgoing.setdefault((edge.source, edge.source_socket), []).append(edge)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> str:
        """Generate the complete program text."""
        if not self.graph.nodes:
            return '\n'.join(self.config.comment(self.settings.empty_graph_message)) + '\n'

        self.lines.extend(self.config.comment(self.settings.header_for(self.config.name)))
        self.lines.append('')
        if self.config.standard_header:
            self.lines.extend(self.config.standard_header)

        self.indent_level = self.config.formatting.body_indent
        entries = find_entry_points(self.graph) or list(self.graph.nodes)
        self.logger.debug("Generating %s from %d entry points", self.config.name, len(entries))
        for node in entries:
            self.process(node)

        self.lines.extend(self.config.standard_footer)
        while self.lines and self.lines[-1] == '':
            self.lines.pop()
        return '\n'.join(self.lines) + '\n'

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def process(self, node: GraphNode) -> None:
        """Emit a node and then everything reachable along its flow outputs.

        Nodes and suspended block handlers share one work stack, so neither
        long flow chains nor deeply nested blocks grow the call stack.
        """
        stack: List[Union[GraphNode, BlockFrame]] = [node]
        while stack:
            current = stack.pop()
            if isinstance(current, BlockFrame):
                self._resume(current, stack)
                continue
            if current.id in self.visited:
                continue
            self.visited.add(current.id)
            frame = self._emit_node(current)
            if frame is not None:
                self._resume(frame, stack)
            else:
                stack.extend(reversed(self._flow_successors(current)))

    def has_connection(self, node: GraphNode, socket_key: str) -> bool:
        """Check whether an output (or, failing that, input) socket has an edge."""
        socket = node.find_output(socket_key)
        if socket is not None:
            return bool(self._outgoing.get((node.id, socket.id)))
        socket = node.find_input(socket_key)
        if socket is not None:
            return bool(self._incoming.get((node.id, socket.id)))
        return False

    def _emit_node(self, node: GraphNode) -> Optional[BlockFrame]:
        comment = node.properties.get('comment')
        if comment:
            self.emit_comment(str(comment))

        spec = self.registry.get(node.kind_name)
        if spec is None:
            self.emit_comment(f"Unsupported node type: {node.kind_name}")
            self.warn(f"Unsupported node type {node.kind_name} on node {node.id}")
            return None
        indent_level = self.indent_level
        try:
            steps = spec.handler(node, self)
        except Exception as e:
            self._fail(node, e, indent_level)
            return None
        if inspect.isgenerator(steps):
            return BlockFrame(node, steps, indent_level)
        return None

    def _resume(self, frame: BlockFrame, stack: List[Any]) -> None:
        """Run a block handler up to its next slot, or to completion."""
        if frame.slot_start is not None:
            self._fill_empty_block(frame.slot_start)
        try:
            slot = next(frame.steps)
        except StopIteration:
            slot = None
        except Exception as e:
            self._fail(frame.node, e, frame.indent_level)
            slot = None
        if slot is None:
            stack.extend(reversed(self._flow_successors(frame.node)))
            return
        frame.slot_start = len(self.lines)
        stack.append(frame)
        stack.extend(reversed(self._slot_targets(frame.node, slot)))

    def _fail(self, node: GraphNode, error: Exception, indent_level: int) -> None:
        """Close blocks the failed handler left open and mark the failure."""
        self.logger.error("Handler for %s failed on node %s", node.kind_name, node.id, exc_info=error)
        while self.indent_level > indent_level:
            self.close_block()
        self.indent_level = indent_level
        self.emit_comment(f"Failed to generate node {node.id}: {error}")
        self.warn(f"Generation failed for node {node.id}: {error}")

    def _fill_empty_block(self, start: int) -> None:
        if len(self.lines) == start and self.config.formatting.empty_block:
            self.emit_statement(self.config.formatting.empty_block)

    def _slot_targets(self, node: GraphNode, socket_key: str) -> List[GraphNode]:
        socket = node.find_output(socket_key)
        if socket is None:
            return []
        targets = []
        for edge in self._outgoing.get((node.id, socket.id), []):
            target = self._target_of(edge)
            if target is not None:
                targets.append(target)
        return targets

    def _flow_successors(self, node: GraphNode) -> List[GraphNode]:
        successors = []
        for socket in node.flow_outputs():
            successors.extend(self._slot_targets(node, socket.id))
        return successors

    def _target_of(self, edge: Edge) -> Optional[GraphNode]:
        target = self._nodes.get(edge.target)
        if target is None:
            self.warn(f"Edge {edge.id} points at missing node {edge.target}")
        return target

    # ------------------------------------------------------------------
    # Emission primitives
    # ------------------------------------------------------------------

    def emit_line(self, text: str = '') -> None:
        if not text:
            self.lines.append('')
            return
        self.lines.append(self.config.formatting.indent * self.indent_level + text)

    def emit_statement(self, text: str) -> None:
        """Emit a statement, one terminated line per line of text."""
        terminator = self.config.formatting.statement_end
        for line in text.split('\n'):
            if line and terminator and not line.endswith(terminator):
                line += terminator
            self.emit_line(line)

    def emit_comment(self, text: str) -> None:
        if '\n' in text:
            for line in self.config.multiline_comment(text):
                self.emit_line(line)
            return
        for line in self.config.comment(text):
            self.emit_line(line)

    def open_block(self, header: str) -> None:
        self.emit_line(header)
        block_start = self.config.formatting.block_start
        if block_start and not header.rstrip().endswith(block_start):
            self.emit_line(block_start)
        self.indent_level += 1

    def continue_block(self, line: str) -> None:
        """Emit a line between two bodies of one block, e.g. ``else``."""
        self.indent_level -= 1
        self.emit_line(line)
        self.indent_level += 1

    def close_block(self, end: Optional[str] = None) -> None:
        self.indent_level -= 1
        token = self.config.formatting.block_end if end is None else end
        if token:
            self.emit_line(token)

    def template(self, key: str, **values: str) -> str:
        """Fill one of the language's statement templates."""
        return substitute(self.config.statement(key), **values)

    def warn(self, message: str) -> None:
        self.logger.warning(message)
        self.warnings.append(message)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def define_variable(self, name: str, value: str, type_hint: str = 'any') -> None:
        """Declare ``name`` the first time it is bound, assign it afterwards."""
        if name in self.variables:
            line = self.template('assignment', name=name, value=value)
        else:
            self.variables.add(name)
            line = self.template('variable_definition', name=name, value=value,
                                 type=self.config.type_name(type_hint))
        self.emit_statement(line)

    def temporary_name(self, node: GraphNode) -> str:
        return '_temp_' + re.sub(r'\W', '_', node.id)

    def bind_temporary(self, node: GraphNode, value: str, type_hint: str = 'any') -> str:
        name = self.temporary_name(node)
        self.temporaries[node.id] = name
        self.define_variable(name, value, type_hint)
        return name

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, node: GraphNode, socket_key: str, fallback: Optional[str] = None) -> str:
        """Render the value feeding one input of ``node``.

        A connected input renders its source: a variable name, an operator
        expression or its temporary, a registered reference, or a label built
        from the source node and socket. An unconnected input uses a property
        named like the socket, then the socket default, then ``fallback``,
        then the zero value of the socket's kind.
        """
        socket = node.find_input(socket_key)
        if socket is not None:
            for edge in self._incoming.get((node.id, socket.id), []):
                reference = self._reference(edge)
                if reference is not None:
                    return reference
        kind = socket.kind if socket is not None else SocketType.ANY
        value = self.raw_value(node, socket_key)
        if value is not None:
            return self.render_value(value, kind)
        if fallback is not None:
            return fallback
        return self.zero_value(kind)

    def resolve_identifier(self, node: GraphNode, socket_key: str, fallback: str) -> str:
        """Resolve an input used as a name, without quoting it."""
        socket = node.find_input(socket_key)
        text = None
        if socket is not None and self._incoming.get((node.id, socket.id)):
            text = self.resolve(node, socket_key)
        else:
            value = self.raw_value(node, socket_key)
            if value is not None:
                text = str(value)
        if text is None:
            return fallback
        text = text.strip().strip('"\'').strip()
        return text or fallback

    def raw_value(self, node: GraphNode, socket_key: str) -> Any:
        """Return the unrendered property or socket default for an input."""
        socket = node.find_input(socket_key)
        keys = [socket_key]
        if socket is not None:
            keys += [socket.id, socket.name.lower()]
        for key in keys:
            if node.properties.get(key) is not None:
                return node.properties[key]
        if socket is not None and socket.default_value is not None:
            return socket.default_value
        return None

    def infer_type(self, node: GraphNode, socket_key: str) -> str:
        """Infer the declared type of the value feeding an input."""
        socket = node.find_input(socket_key)
        if socket is not None:
            for edge in self._incoming.get((node.id, socket.id), []):
                source = self._nodes.get(edge.source)
                source_socket = source.find_output(edge.source_socket) if source else None
                if source_socket is not None:
                    return {SocketType.STRING: 'string',
                            SocketType.BOOLEAN: 'boolean'}.get(source_socket.kind, 'any')
        kind = socket.kind if socket is not None else SocketType.ANY
        return infer_value_type(self.raw_value(node, socket_key), kind)

    def render_value(self, value: Any, kind: SocketType) -> str:
        """Render a property or default value for a socket of ``kind``.

        Text on string sockets is quoted unless it already is a literal. Text
        on any other socket is taken as a source expression.
        """
        if isinstance(value, (bool, int, float)):
            return self.config.render_literal(value)
        text = str(value)
        if kind is SocketType.STRING:
            return text if is_quoted(text) else self.config.quote_string(text)
        if not text.strip():
            return self.zero_value(kind)
        if kind is SocketType.BOOLEAN and text.strip().lower() in ('true', 'false'):
            return self.config.render_bool(text.strip().lower() == 'true')
        return text

    def zero_value(self, kind: SocketType) -> str:
        if kind is SocketType.NUMBER:
            return self.config.render_number(0)
        if kind is SocketType.STRING:
            return self.config.quote_string('')
        if kind is SocketType.BOOLEAN:
            return self.config.render_bool(False)
        return self.config.render_null()

    def expression_for(self, node: GraphNode) -> str:
        """Render an operator node's expression from its resolved operands."""
        spec = self.registry.get(node.kind_name)
        self._expanding.add(node.id)
        try:
            return spec.expression(node, self)
        finally:
            self._expanding.discard(node.id)

    def structural_label(self, node: GraphNode, socket: Socket) -> str:
        label = re.sub(r'\W+', '_', f"{node.label or node.kind_name}_{socket.name}").strip('_')
        return label.lower() or 'value'

    def _reference(self, edge: Edge) -> Optional[str]:
        source = self._nodes.get(edge.source)
        if source is None:
            self.warn(f"Edge {edge.id} reads from missing node {edge.source}")
            return None
        socket = source.find_output(edge.source_socket)
        if socket is None:
            self.warn(f"Edge {edge.id} reads from missing socket {edge.source}.{edge.source_socket}")
            return None

        if source.id not in self.visited:
            self.process(source)

        spec = self.registry.get(source.kind_name)
        if spec is None:
            return self.structural_label(source, socket)
        if spec.expression is not None:
            if source.id in self.temporaries:
                return self.temporaries[source.id]
            if not self.config.inline_expressions or source.id in self._expanding:
                return self.temporary_name(source)
            nested = bool(self._expanding)
            text = self.expression_for(source)
            return f"({text})" if nested else text
        if spec.reference is not None and source.id not in self._expanding:
            # a reference may resolve its own inputs, which can lead back here
            self._expanding.add(source.id)
            try:
                text = spec.reference(source, socket, self)
            finally:
                self._expanding.discard(source.id)
            if text:
                return text
        return self.structural_label(source, socket)


class CodeGenerator:
    """Renders node graphs as source code in any registered language.

    One generator can serve many runs, including concurrent ones: all per-run
    state lives in a fresh ``GenerationSession``.
    """

    def __init__(self, node_registry: Optional[NodeRegistry] = None,
                 language_registry: Optional[LanguageRegistry] = None,
                 settings: Optional[CodegenSettings] = None):
        self.settings = settings or CodegenSettings()
        self.node_registry = node_registry or build_default_registry()
        self.language_registry = language_registry or \
            build_default_language_registry(self.settings.default_language)
        self.logger = logging.getLogger(__name__)

    def generate(self, graph: Union[Graph, Dict[str, Any]], language: Optional[str] = None) -> GenerationResult:
        """Generate code for ``graph`` in ``language``.

        Unknown language names fall back to the default language; the result
        records the substitution in its warnings.
        """
        if isinstance(graph, dict):
            graph = Graph.from_dict(graph, self.node_registry)
        config, fallback = self.language_registry.resolve(language)

        session = GenerationSession(graph, config, self.node_registry, self.settings)
        if fallback:
            session.warnings.append(f"Unknown language {language!r}, generated {config.name} instead")
        code = session.run()

        self.logger.info("Generated %s code for %d nodes (%d warnings)",
                         config.name, len(graph.nodes), len(session.warnings))
        return GenerationResult(
            code=code,
            language=config.name,
            file_extension=config.file_extension,
            syntax_id=config.syntax_id,
            warnings=session.warnings,
            fallback_language=fallback,
        )

    def generate_code(self, graph: Union[Graph, Dict[str, Any]], language: Optional[str] = None) -> str:
        """Generate code and return only the source text."""
        return self.generate(graph, language).code

    def available_languages(self) -> List[str]:
        return self.language_registry.names()


def generate_code(graph: Union[Graph, Dict[str, Any]], language: Optional[str] = None) -> str:
    """Generate code with the built-in node and language catalogs."""
    return CodeGenerator().generate_code(graph, language)
