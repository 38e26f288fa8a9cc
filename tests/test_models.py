"""
Unit tests for graph data models.
"""

import pytest
from hypothesis import given, strategies as st
from graph_codegen.exceptions import GraphFormatError
from graph_codegen.models import Graph, GraphNode, Edge, NodeKind, parse_kind, kind_key
from graph_codegen.node_registry import build_default_registry
from graph_codegen.sockets import SocketType


class TestGraphNode:
    """Test cases for GraphNode."""

    def setup_method(self):
        self.registry = build_default_registry()

    def test_find_sockets_by_id_and_name(self):
        """Sockets are found by id first, then by lower-cased name."""
        node = self.registry.create_node(NodeKind.IF_STATEMENT, node_id='if1')

        assert node.find_input('condition').kind is SocketType.BOOLEAN
        assert node.find_input('Condition').id == 'condition'
        assert node.find_output('then').is_flow
        assert node.find_output('Flow Out').id == 'flow_out'
        assert node.find_input('missing') is None

    def test_flow_helpers(self):
        """Flow sockets are separated from data sockets."""
        node = self.registry.create_node(NodeKind.FOR_LOOP)

        assert [s.id for s in node.flow_inputs()] == ['flow_in']
        assert [s.id for s in node.flow_outputs()] == ['body', 'flow_out']
        assert node.has_flow

    def test_value_node_has_no_flow(self):
        """Operator nodes only carry data."""
        node = self.registry.create_node(NodeKind.ADD)
        assert not node.has_flow

    def test_unknown_kind_kept_as_string(self):
        """Kinds outside the catalog survive as plain strings."""
        assert parse_kind('teleport') == 'teleport'
        assert parse_kind('print') is NodeKind.PRINT
        assert kind_key(NodeKind.PRINT) == 'print'


class TestGraph:
    """Test cases for Graph."""

    def setup_method(self):
        self.registry = build_default_registry()
        self.graph = Graph()
        self.graph.add_node(self.registry.create_node(NodeKind.ADD, node_id='add1'))
        self.graph.add_node(self.registry.create_node(NodeKind.PRINT, node_id='p1'))
        self.graph.add_node(self.registry.create_node(NodeKind.USER_INPUT, node_id='in1'))

    def test_connect_compatible_sockets(self):
        """A number output connects to an 'any' input."""
        edge = self.graph.connect('add1', 'result', 'p1', 'value')

        assert edge is not None
        assert self.graph.edges == [edge]

    def test_connect_rejects_incompatible_sockets(self):
        """A number output does not connect to a string input."""
        assert self.graph.connect('add1', 'result', 'in1', 'prompt') is None
        assert self.graph.edges == []

    def test_connect_rejects_missing_nodes(self):
        assert self.graph.connect('nope', 'result', 'p1', 'value') is None

    def test_connect_by_display_name(self):
        """Socket names resolve to socket ids on the new edge."""
        edge = self.graph.connect('add1', 'Result', 'p1', 'Value')

        assert edge.source_socket == 'result'
        assert edge.target_socket == 'value'

    def test_round_trip_through_dict(self):
        """A graph survives to_dict/from_dict unchanged."""
        self.graph.connect('add1', 'result', 'p1', 'value')
        self.graph.get_node('p1').properties['comment'] = 'show it'

        loaded = Graph.from_dict(self.graph.to_dict())

        assert loaded.to_dict() == self.graph.to_dict()
        assert loaded.get_node('add1').kind is NodeKind.ADD


class TestGraphLoading:
    """Test cases for loading editor payloads."""

    def test_reactflow_payload_expands_sockets_from_registry(self):
        """Nodes without socket lists get them from the registry."""
        data = {
            'nodes': [
                {'id': 'v1', 'type': 'custom', 'position': {'x': 10, 'y': 20},
                 'data': {'type': 'variable_definition', 'label': 'Define x',
                          'properties': {'name': 'x', 'value': 10}}},
                {'id': 'p1', 'data': {'type': 'print'}},
            ],
            'edges': [
                {'id': 'e1', 'source': 'v1', 'sourceHandle': 'flow_out',
                 'target': 'p1', 'targetHandle': 'flow_in'},
            ],
        }

        graph = Graph.from_dict(data, build_default_registry())

        node = graph.get_node('v1')
        assert node.kind is NodeKind.VARIABLE_DEFINITION
        assert node.label == 'Define x'
        assert node.properties['name'] == 'x'
        assert node.find_input('value') is not None
        assert node.position == (10.0, 20.0)
        assert graph.edges[0].source_socket == 'flow_out'
        assert graph.edges[0].target_socket == 'flow_in'

    def test_explicit_sockets_are_parsed(self):
        """Socket lists in the payload are used as given."""
        data = {'nodes': [{
            'id': 'n1', 'kind': 'mystery',
            'inputs': [{'id': 'in', 'name': 'In', 'type': 'number', 'default': 3}],
            'outputs': [{'id': 'out', 'type': 'flow'}],
        }]}

        node = Graph.from_dict(data).nodes[0]

        assert node.kind == 'mystery'
        assert node.inputs[0].default_value == 3
        assert node.inputs[0].kind is SocketType.NUMBER
        assert node.outputs[0].name == 'out'

    @pytest.mark.parametrize('payload', [
        [],
        {'nodes': 'not a list'},
        {'nodes': [{'kind': 'print'}]},
        {'nodes': [{'id': 'n1'}]},
        {'nodes': [{'id': 'n1', 'kind': 'print', 'inputs': [{'id': 'x', 'type': 'complex'}]}]},
        {'nodes': [], 'edges': [{'source': 'a', 'target': 'b'}]},
    ])
    def test_malformed_payloads_raise(self, payload):
        """Malformed payloads raise GraphFormatError."""
        with pytest.raises(GraphFormatError):
            Graph.from_dict(payload)


@given(st.floats(allow_nan=False, allow_infinity=False),
       st.floats(allow_nan=False, allow_infinity=False))
def test_node_position_property(x, y):
    """Property test: positions of any finite coordinates survive loading."""
    data = {'id': 'n1', 'kind': 'print', 'inputs': [], 'outputs': [], 'position': {'x': x, 'y': y}}
    node = GraphNode.from_dict(data)
    assert node.position == (x, y)
