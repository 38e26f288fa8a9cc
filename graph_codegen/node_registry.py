"""
Node registry for the graph code generator.

Maps every node kind to its display metadata, the factory that builds its
sockets and default properties, and the functions that generate code for it.
Registries are plain objects: build one with ``build_default_registry()`` and
pass it to the validator and the generator, or register extra kinds on it.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from . import node_templates as templates
from .exceptions import RegistryError
from .models import GraphNode, NodeKind, kind_key, parse_kind
from .sockets import SocketType


class NodeCategory(Enum):
    """Palette groups for node kinds."""
    FLOW_CONTROL = "Flow Control"
    FUNCTIONS = "Functions"
    LOGIC = "Logic"
    ARITHMETIC = "Arithmetic"
    VARIABLES = "Variables"
    IO = "Input/Output"


@dataclass
class NodeSpec:
    """Registration record for one node kind.

    ``handler`` emits the node's statements. ``expression`` marks a pure
    expression node and renders its operator template. ``reference`` renders
    the value of one of the node's data outputs when another node reads it.
    """
    kind: str
    label: str
    category: NodeCategory
    factory: templates.Factory
    handler: Callable[..., None]
    description: str = ""
    reference: Optional[Callable[..., Optional[str]]] = None
    expression: Optional[Callable[..., str]] = None

    def describe(self) -> Dict[str, Any]:
        shape = self.factory()
        return {
            'kind': self.kind,
            'label': self.label,
            'category': self.category.value,
            'description': self.description,
            'inputs': [s.to_dict() for s in shape.inputs],
            'outputs': [s.to_dict() for s in shape.outputs],
            'properties': dict(shape.properties),
        }


class NodeRegistry:
    """Kind-indexed collection of node specs."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._specs: Dict[str, NodeSpec] = {}

    def register(self, spec: NodeSpec, replace: bool = False) -> NodeSpec:
        """Register a node spec under its kind."""
        key = kind_key(spec.kind)
        if key in self._specs and not replace:
            raise RegistryError(f"Node kind {key} is already registered", key)
        self._specs[key] = spec
        self.logger.debug("Registered node kind %s", key)
        return spec

    def get(self, kind: Union[str, NodeKind, None]) -> Optional[NodeSpec]:
        if kind is None:
            return None
        return self._specs.get(kind_key(kind))

    def handler_for(self, kind: Union[str, NodeKind]) -> Optional[Callable[..., None]]:
        spec = self.get(kind)
        return spec.handler if spec else None

    def create_node(self, kind: Union[str, NodeKind], node_id: Optional[str] = None,
                    properties: Optional[Dict[str, Any]] = None, label: Optional[str] = None,
                    position: Tuple[float, float] = (0.0, 0.0)) -> GraphNode:
        """Instantiate a node of ``kind`` with its default sockets and properties."""
        spec = self.get(kind)
        if spec is None:
            raise RegistryError(f"Unknown node kind: {kind_key(kind)}", kind_key(kind))
        shape = spec.factory()
        merged = dict(shape.properties)
        merged.update(properties or {})
        return GraphNode(
            id=node_id or str(uuid.uuid4()),
            kind=parse_kind(spec.kind),
            label=label or spec.label,
            inputs=shape.inputs,
            outputs=shape.outputs,
            properties=merged,
            position=position,
        )

    def kinds(self) -> List[str]:
        return list(self._specs)

    def by_category(self) -> Dict[str, List[NodeSpec]]:
        """Group registered specs by palette category, in registration order."""
        grouped: Dict[str, List[NodeSpec]] = {}
        for spec in self._specs.values():
            grouped.setdefault(spec.category.value, []).append(spec)
        return grouped

    def describe(self) -> List[Dict[str, Any]]:
        return [spec.describe() for spec in self._specs.values()]

    def __contains__(self, kind: Union[str, NodeKind]) -> bool:
        return self.get(kind) is not None

    def __len__(self) -> int:
        return len(self._specs)


# ============================================================================
# Built-in catalog
# ============================================================================

# kind -> (label, operator key, fallback symbol, input kind, output kind, default b)
BINARY_OPERATORS = {
    NodeKind.ADD: ("Add", 'add', '+', SocketType.NUMBER, SocketType.NUMBER, 0),
    NodeKind.SUBTRACT: ("Subtract", 'subtract', '-', SocketType.NUMBER, SocketType.NUMBER, 0),
    NodeKind.MULTIPLY: ("Multiply", 'multiply', '*', SocketType.NUMBER, SocketType.NUMBER, 0),
    NodeKind.DIVIDE: ("Divide", 'divide', '/', SocketType.NUMBER, SocketType.NUMBER, 1),
    NodeKind.MODULO: ("Modulo", 'modulo', '%', SocketType.NUMBER, SocketType.NUMBER, 1),
    NodeKind.AND: ("And", 'and', '&&', SocketType.BOOLEAN, SocketType.BOOLEAN, False),
    NodeKind.OR: ("Or", 'or', '||', SocketType.BOOLEAN, SocketType.BOOLEAN, False),
    NodeKind.GREATER_THAN: ("Greater Than", 'greater_than', '>', SocketType.NUMBER, SocketType.BOOLEAN, 0),
    NodeKind.LESS_THAN: ("Less Than", 'less_than', '<', SocketType.NUMBER, SocketType.BOOLEAN, 0),
    NodeKind.EQUAL: ("Equal", 'equal', '==', SocketType.ANY, SocketType.BOOLEAN, 0),
    NodeKind.NOT_EQUAL: ("Not Equal", 'not_equal', '!=', SocketType.ANY, SocketType.BOOLEAN, 0),
}

ARITHMETIC_KINDS = (NodeKind.ADD, NodeKind.SUBTRACT, NodeKind.MULTIPLY, NodeKind.DIVIDE, NodeKind.MODULO)


def _register_operators(registry: NodeRegistry) -> None:
    for kind, (label, operator, symbol, input_kind, output_kind, default_b) in BINARY_OPERATORS.items():
        default_a = False if input_kind is SocketType.BOOLEAN else 0
        category = NodeCategory.ARITHMETIC if kind in ARITHMETIC_KINDS else NodeCategory.LOGIC
        registry.register(NodeSpec(
            kind=kind.value,
            label=label,
            category=category,
            description=f"Computes A {symbol} B",
            factory=templates.binary_operation(input_kind, output_kind, default_a, default_b),
            handler=templates.generate_expression,
            expression=templates.binary_expression(operator, symbol),
        ))
    registry.register(NodeSpec(
        kind=NodeKind.NOT.value,
        label="Not",
        category=NodeCategory.LOGIC,
        description="Negates a boolean value",
        factory=templates.unary_operation(SocketType.BOOLEAN, SocketType.BOOLEAN, False),
        handler=templates.generate_expression,
        expression=templates.not_expression,
    ))


def build_default_registry() -> NodeRegistry:
    """Create a registry holding the built-in node catalog."""
    registry = NodeRegistry()

    # Flow control
    registry.register(NodeSpec(
        NodeKind.IF_STATEMENT.value, "If Statement", NodeCategory.FLOW_CONTROL,
        templates.if_statement, templates.generate_if,
        description="Runs the Then branch when the condition holds, otherwise Else",
    ))
    registry.register(NodeSpec(
        NodeKind.FOR_LOOP.value, "For Loop", NodeCategory.FLOW_CONTROL,
        templates.for_loop, templates.generate_for,
        description="Counts from Start up to End by Step",
        reference=templates.loop_index_reference,
    ))
    registry.register(NodeSpec(
        NodeKind.WHILE_LOOP.value, "While Loop", NodeCategory.FLOW_CONTROL,
        templates.while_loop, templates.generate_while,
        description="Repeats the body while the condition holds",
    ))

    # Functions
    registry.register(NodeSpec(
        NodeKind.FUNCTION_DEFINITION.value, "Function Definition", NodeCategory.FUNCTIONS,
        templates.function_definition, templates.generate_function_definition,
        description="Defines a named function whose body follows the Body output",
    ))
    registry.register(NodeSpec(
        NodeKind.FUNCTION_CALL.value, "Function Call", NodeCategory.FUNCTIONS,
        templates.function_call, templates.generate_function_call,
        description="Calls a function by name",
        reference=templates.call_result_reference,
    ))
    registry.register(NodeSpec(
        NodeKind.RETURN.value, "Return", NodeCategory.FUNCTIONS,
        templates.return_statement, templates.generate_return,
        description="Returns a value from the enclosing function",
    ))

    _register_operators(registry)

    # Variables
    registry.register(NodeSpec(
        NodeKind.VARIABLE_DEFINITION.value, "Variable Definition", NodeCategory.VARIABLES,
        templates.variable_definition, templates.generate_variable_definition,
        description="Declares or reassigns a variable",
        reference=templates.variable_reference,
    ))
    registry.register(NodeSpec(
        NodeKind.VARIABLE_GETTER.value, "Get Variable", NodeCategory.VARIABLES,
        templates.variable_getter, templates.generate_nothing,
        description="Reads a variable by name",
        reference=templates.variable_reference,
    ))
    registry.register(NodeSpec(
        NodeKind.CONSTANT.value, "Constant", NodeCategory.VARIABLES,
        templates.constant, templates.generate_nothing,
        description="A literal value",
        reference=templates.constant_reference,
    ))

    # Input/Output
    registry.register(NodeSpec(
        NodeKind.PRINT.value, "Print", NodeCategory.IO,
        templates.print_statement, templates.generate_print,
        description="Writes a value to standard output",
    ))
    registry.register(NodeSpec(
        NodeKind.USER_INPUT.value, "User Input", NodeCategory.IO,
        templates.user_input, templates.generate_user_input,
        description="Reads a line of text into a variable",
        reference=templates.input_reference,
    ))

    return registry
