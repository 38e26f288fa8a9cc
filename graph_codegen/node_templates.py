"""
Node templates for the built-in catalog.

A template is a pure factory describing a node's sockets and default
properties, plus the functions that turn a node of that shape into code.
Operator nodes share parameterized factories; every other kind has its own.

Generation functions receive the node and the active ``GenerationSession``
and emit through the session's primitives, never by writing text directly.
Block handlers are generators that yield the output whose nodes form the
next body; the session emits that body and then resumes the handler.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional

from .language_config import substitute
from .models import GraphNode
from .sockets import Socket, SocketType, SocketDirection, create_socket


class NodeShape:
    """Sockets and default properties of a freshly created node."""

    def __init__(self):
        self.inputs: List[Socket] = []
        self.outputs: List[Socket] = []
        self.properties: Dict[str, Any] = {}

    def add_input(self, socket_id: str, name: str, kind: SocketType, default: Any = None):
        """Add an input socket; its default is mirrored into the properties."""
        self.inputs.append(create_socket(socket_id, name, kind, SocketDirection.INPUT, default))
        if default is not None:
            self.properties.setdefault(socket_id, default)
        return self

    def add_output(self, socket_id: str, name: str, kind: SocketType):
        self.outputs.append(create_socket(socket_id, name, kind, SocketDirection.OUTPUT))
        return self

    def set_property(self, key: str, value: Any):
        self.properties[key] = value
        return self

    def flow_in(self):
        return self.add_input('flow_in', 'Flow In', SocketType.FLOW)

    def flow_out(self):
        return self.add_output('flow_out', 'Flow Out', SocketType.FLOW)


Factory = Callable[[], NodeShape]


# ============================================================================
# Factories
# ============================================================================

def binary_operation(input_kind: SocketType, output_kind: SocketType,
                     default_a: Any = 0, default_b: Any = 0) -> Factory:
    """Factory for two-operand operators (arithmetic, logic, comparison)."""
    def factory() -> NodeShape:
        return (NodeShape()
                .add_input('a', 'A', input_kind, default_a)
                .add_input('b', 'B', input_kind, default_b)
                .add_output('result', 'Result', output_kind))
    return factory


def unary_operation(input_kind: SocketType, output_kind: SocketType, default: Any = None) -> Factory:
    def factory() -> NodeShape:
        return (NodeShape()
                .add_input('value', 'Value', input_kind, default)
                .add_output('result', 'Result', output_kind))
    return factory


def if_statement() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('condition', 'Condition', SocketType.BOOLEAN, False)
            .add_output('then', 'Then', SocketType.FLOW)
            .add_output('else', 'Else', SocketType.FLOW)
            .flow_out())


def for_loop() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('start', 'Start', SocketType.NUMBER, 0)
            .add_input('end', 'End', SocketType.NUMBER, 10)
            .add_input('step', 'Step', SocketType.NUMBER, 1)
            .add_input('variable', 'Variable', SocketType.STRING, 'i')
            .add_output('body', 'Body', SocketType.FLOW)
            .flow_out()
            .add_output('index', 'Index', SocketType.NUMBER))


def while_loop() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('condition', 'Condition', SocketType.BOOLEAN, False)
            .add_output('body', 'Body', SocketType.FLOW)
            .flow_out())


def function_definition() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_output('body', 'Body', SocketType.FLOW)
            .flow_out()
            .set_property('name', 'my_function')
            .set_property('parameters', ''))


def function_call() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .flow_out()
            .add_output('result', 'Result', SocketType.ANY)
            .set_property('name', 'my_function')
            .set_property('arguments', ''))


def return_statement() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('value', 'Value', SocketType.ANY))


def variable_definition() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('name', 'Name', SocketType.STRING, 'my_var')
            .add_input('value', 'Value', SocketType.ANY, 0)
            .flow_out()
            .add_output('variable', 'Variable', SocketType.ANY))


def variable_getter() -> NodeShape:
    return (NodeShape()
            .add_input('name', 'Name', SocketType.STRING, 'my_var')
            .add_output('value', 'Value', SocketType.ANY))


def constant() -> NodeShape:
    return (NodeShape()
            .add_output('value', 'Value', SocketType.ANY)
            .set_property('value', 0)
            .set_property('type', SocketType.NUMBER.value))


def print_statement() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('value', 'Value', SocketType.ANY, '"Hello, World!"')
            .flow_out())


def user_input() -> NodeShape:
    return (NodeShape()
            .flow_in()
            .add_input('prompt', 'Prompt', SocketType.STRING, 'Enter a value: ')
            .flow_out()
            .add_output('value', 'Value', SocketType.STRING)
            .set_property('variable', 'user_input'))


# ============================================================================
# Expressions
# ============================================================================

def binary_expression(operator: str, symbol: str):
    """Build the expression function for a two-operand operator."""
    def expression(node: GraphNode, session) -> str:
        template = session.config.operator(operator) or f"$left {symbol} $right"
        return substitute(template,
                          left=session.resolve(node, 'a'),
                          right=session.resolve(node, 'b'))
    return expression


def not_expression(node: GraphNode, session) -> str:
    value = session.resolve(node, 'value')
    template = session.config.operator('not')
    if template is None:
        # languages without a unary not compare against false
        return substitute(session.config.operator('equal'),
                          left=value, right=session.config.render_bool(False))
    return substitute(template, value=value)


# ============================================================================
# Generation handlers
# ============================================================================

def generate_expression(node: GraphNode, session) -> None:
    """Bind an operator node to a temporary unless the language inlines it."""
    if session.config.inline_expressions:
        return
    output = node.outputs[0] if node.outputs else None
    hint = {SocketType.BOOLEAN: 'boolean', SocketType.STRING: 'string'}.get(
        output.kind if output else SocketType.ANY, 'any')
    session.bind_temporary(node, session.expression_for(node), hint)


def generate_nothing(node: GraphNode, session) -> None:
    """Value-only nodes are rendered where they are read."""


def generate_if(node: GraphNode, session) -> Iterator[str]:
    condition = session.resolve(node, 'condition')
    session.open_block(session.template('if', condition=condition))
    yield 'then'
    if session.has_connection(node, 'else'):
        session.continue_block(session.template('else'))
        yield 'else'
    session.close_block()


def generate_for(node: GraphNode, session) -> Iterator[str]:
    header = session.template(
        'for',
        variable=session.resolve_identifier(node, 'variable', 'i'),
        start=session.resolve(node, 'start'),
        end=session.resolve(node, 'end'),
        step=session.resolve(node, 'step'),
    )
    session.open_block(header)
    yield 'body'
    session.close_block()


def generate_while(node: GraphNode, session) -> Iterator[str]:
    session.open_block(session.template('while', condition=session.resolve(node, 'condition')))
    yield 'body'
    session.close_block()


def generate_function_definition(node: GraphNode, session) -> Iterator[str]:
    name = session.resolve_identifier(node, 'name', 'my_function')
    parameters = session.raw_value(node, 'parameters')
    session.functions.add(name)
    session.open_block(session.template('function_definition', name=name,
                                        parameters=str(parameters or '')))
    yield 'body'
    session.close_block(session.config.function_end)


def generate_function_call(node: GraphNode, session) -> None:
    name = session.resolve_identifier(node, 'name', 'my_function')
    arguments = session.raw_value(node, 'arguments')
    call = session.template('function_call', name=name, arguments=str(arguments or ''))
    if session.has_connection(node, 'result'):
        session.bind_temporary(node, call)
    else:
        session.emit_statement(call)


def generate_return(node: GraphNode, session) -> None:
    value = session.resolve(node, 'value', fallback='')
    session.emit_statement(session.template('return', value=value).rstrip())


def generate_variable_definition(node: GraphNode, session) -> None:
    name = session.resolve_identifier(node, 'name', 'my_var')
    value = session.resolve(node, 'value')
    session.define_variable(name, value, session.infer_type(node, 'value'))


def generate_print(node: GraphNode, session) -> None:
    session.emit_statement(session.template('print', value=session.resolve(node, 'value')))


def generate_user_input(node: GraphNode, session) -> None:
    variable = session.resolve_identifier(node, 'variable', 'user_input')
    prompt = session.resolve(node, 'prompt')
    session.emit_statement(session.template('input', variable=variable, prompt=prompt))
    session.variables.add(variable)


# ============================================================================
# Reference hooks
# ============================================================================
# Called when another node reads one of this node's data outputs.

def variable_reference(node: GraphNode, socket: Socket, session) -> Optional[str]:
    return session.resolve_identifier(node, 'name', 'my_var')


def loop_index_reference(node: GraphNode, socket: Socket, session) -> Optional[str]:
    return session.resolve_identifier(node, 'variable', 'i')


def input_reference(node: GraphNode, socket: Socket, session) -> Optional[str]:
    return session.resolve_identifier(node, 'variable', 'user_input')


def call_result_reference(node: GraphNode, socket: Socket, session) -> Optional[str]:
    return session.temporaries.get(node.id) or session.temporary_name(node)


def constant_reference(node: GraphNode, socket: Socket, session) -> Optional[str]:
    kind = node.properties.get('type', SocketType.ANY.value)
    try:
        kind = SocketType.parse(kind)
    except ValueError:
        kind = SocketType.ANY
    value = node.properties.get('value')
    if value is None:
        return session.zero_value(kind)
    return session.render_value(value, kind)
