"""
Core data models for the graph code generator.

This module defines the node graph a user assembles in the editor: nodes with
typed sockets, the edges between them, and the graph container with the lookup
helpers the validator and the generator rely on. Graphs round-trip through
plain dictionaries so they can travel as JSON, including the ReactFlow-shaped
payloads produced by the browser editor.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Tuple, Optional, Union
from enum import Enum
import uuid

from .exceptions import GraphFormatError
from .sockets import Socket, SocketType, SocketDirection, create_socket, are_compatible


class NodeKind(Enum):
    """Enumeration of the built-in node kinds."""
    # Flow control
    IF_STATEMENT = "if_statement"
    FOR_LOOP = "for_loop"
    WHILE_LOOP = "while_loop"

    # Functions
    FUNCTION_DEFINITION = "function_definition"
    FUNCTION_CALL = "function_call"
    RETURN = "return"

    # Logic
    AND = "and"
    OR = "or"
    NOT = "not"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"

    # Arithmetic
    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"

    # Variables
    VARIABLE_DEFINITION = "variable_definition"
    VARIABLE_GETTER = "variable_getter"
    CONSTANT = "constant"

    # Input/Output
    PRINT = "print"
    USER_INPUT = "user_input"


def parse_kind(value: Union[str, NodeKind]) -> Union[NodeKind, str]:
    """Map a kind name onto ``NodeKind``, keeping unknown names as strings."""
    if isinstance(value, NodeKind):
        return value
    try:
        return NodeKind(value)
    except ValueError:
        return str(value)


def kind_key(kind: Union[str, NodeKind]) -> str:
    """Return the string key used to look a kind up in a registry."""
    return kind.value if isinstance(kind, NodeKind) else str(kind)


@dataclass
class Edge:
    """A directed link from an output socket to an input socket."""
    source: str
    source_socket: str
    target: str
    target_socket: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'source': self.source,
            'source_socket': self.source_socket,
            'target': self.target,
            'target_socket': self.target_socket,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Edge':
        """Create an edge from either snake_case or ReactFlow handle keys."""
        if not isinstance(data, dict):
            raise GraphFormatError("Edge entry must be an object", {'entry': repr(data)})
        source = data.get('source')
        target = data.get('target')
        source_socket = data.get('source_socket', data.get('sourceHandle'))
        target_socket = data.get('target_socket', data.get('targetHandle'))
        if not source or not target or source_socket is None or target_socket is None:
            raise GraphFormatError("Edge is missing an endpoint", {'edge': data})
        kwargs = {}
        if data.get('id'):
            kwargs['id'] = str(data['id'])
        return cls(
            source=str(source),
            source_socket=str(source_socket),
            target=str(target),
            target_socket=str(target_socket),
            **kwargs
        )


@dataclass
class GraphNode:
    """A computation node placed on the canvas."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    kind: Union[NodeKind, str] = NodeKind.PRINT
    label: str = ""
    inputs: List[Socket] = field(default_factory=list)
    outputs: List[Socket] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)
    position: Tuple[float, float] = (0.0, 0.0)

    @property
    def kind_name(self) -> str:
        return kind_key(self.kind)

    def find_input(self, key: str) -> Optional[Socket]:
        """Find an input socket by id, or by lower-cased display name."""
        return _find_socket(self.inputs, key)

    def find_output(self, key: str) -> Optional[Socket]:
        """Find an output socket by id, or by lower-cased display name."""
        return _find_socket(self.outputs, key)

    def flow_inputs(self) -> List[Socket]:
        return [s for s in self.inputs if s.is_flow]

    def flow_outputs(self) -> List[Socket]:
        return [s for s in self.outputs if s.is_flow]

    @property
    def has_flow(self) -> bool:
        """Whether the node takes part in control flow at all."""
        return any(s.is_flow for s in self.inputs + self.outputs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'kind': self.kind_name,
            'label': self.label,
            'inputs': [s.to_dict() for s in self.inputs],
            'outputs': [s.to_dict() for s in self.outputs],
            'properties': dict(self.properties),
            'position': {'x': self.position[0], 'y': self.position[1]},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], registry=None) -> 'GraphNode':
        """Create a node from a dictionary.

        Both the flat form written by ``to_dict`` and the ReactFlow form
        (node payload under ``data``) are accepted. When the payload carries
        no socket lists and ``registry`` knows the kind, the sockets come from
        the registry's factory for that kind.
        """
        if not isinstance(data, dict):
            raise GraphFormatError("Node entry must be an object", {'entry': repr(data)})
        node_id = data.get('id')
        if not node_id:
            raise GraphFormatError("Node is missing an id", {'node': data})

        payload = data.get('data') if isinstance(data.get('data'), dict) else {}
        kind_value = data.get('kind') or payload.get('type') or data.get('type')
        if not kind_value:
            raise GraphFormatError(f"Node {node_id} has no kind", {'node_id': node_id})

        properties: Dict[str, Any] = {}
        properties.update(payload.get('properties') or {})
        properties.update(data.get('properties') or {})
        label = data.get('label') or payload.get('label') or ''
        raw_inputs = data.get('inputs', payload.get('inputs'))
        raw_outputs = data.get('outputs', payload.get('outputs'))

        if raw_inputs is None and raw_outputs is None and registry is not None \
                and registry.get(kind_value) is not None:
            node = registry.create_node(kind_value, node_id=str(node_id),
                                        properties=properties, label=label or None)
        else:
            node = cls(
                id=str(node_id),
                kind=parse_kind(kind_value),
                label=label,
                inputs=_parse_sockets(raw_inputs or [], SocketDirection.INPUT, node_id),
                outputs=_parse_sockets(raw_outputs or [], SocketDirection.OUTPUT, node_id),
                properties=properties,
            )
        node.position = _parse_position(data.get('position'))
        return node


@dataclass
class Graph:
    """An ordered collection of nodes and the edges between them."""
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def add_node(self, node: GraphNode) -> GraphNode:
        """Add a node to the graph and return it."""
        self.nodes.append(node)
        return node

    def connect(self, source_id: str, source_socket: str,
                target_id: str, target_socket: str) -> Optional[Edge]:
        """Connect two sockets if their types are compatible.

        Returns the new edge, or None when either endpoint is missing or the
        sockets are incompatible.
        """
        source_node = self.get_node(source_id)
        target_node = self.get_node(target_id)
        if source_node is None or target_node is None:
            return None
        source = source_node.find_output(source_socket)
        target = target_node.find_input(target_socket)
        if not are_compatible(source, target):
            return None
        edge = Edge(source=source_id, source_socket=source.id,
                    target=target_id, target_socket=target.id)
        self.edges.append(edge)
        return edge

    def to_dict(self) -> Dict[str, Any]:
        return {
            'nodes': [n.to_dict() for n in self.nodes],
            'edges': [e.to_dict() for e in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], registry=None) -> 'Graph':
        """Load a graph from a dictionary with ``nodes`` and ``edges`` lists."""
        if not isinstance(data, dict):
            raise GraphFormatError("Graph payload must be an object")
        raw_nodes = data.get('nodes') or []
        raw_edges = data.get('edges') or []
        if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
            raise GraphFormatError("Graph 'nodes' and 'edges' must be lists")
        return cls(
            nodes=[GraphNode.from_dict(n, registry) for n in raw_nodes],
            edges=[Edge.from_dict(e) for e in raw_edges],
        )


def _find_socket(sockets: List[Socket], key: str) -> Optional[Socket]:
    for socket in sockets:
        if socket.id == key:
            return socket
    for socket in sockets:
        if socket.matches(key):
            return socket
    return None


def _parse_sockets(raw: List[Any], direction: SocketDirection, node_id: str) -> List[Socket]:
    sockets = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get('id'):
            raise GraphFormatError(f"Node {node_id} has a malformed socket", {'socket': repr(entry)})
        try:
            kind = SocketType.parse(entry.get('type', entry.get('kind', 'any')))
        except ValueError as e:
            raise GraphFormatError(str(e), {'node_id': node_id}) from e
        sockets.append(create_socket(
            str(entry['id']),
            str(entry.get('name', entry['id'])),
            kind,
            direction,
            entry.get('default', entry.get('defaultValue')),
        ))
    return sockets


def _parse_position(raw: Any) -> Tuple[float, float]:
    if isinstance(raw, dict):
        return (float(raw.get('x', 0)), float(raw.get('y', 0)))
    if isinstance(raw, (list, tuple)) and len(raw) == 2:
        return (float(raw[0]), float(raw[1]))
    return (0.0, 0.0)
