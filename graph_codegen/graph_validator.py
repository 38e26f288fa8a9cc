"""
Structural validation of node graphs.

The validator reports problems as a list of typed, node-addressed findings and
never raises on graph content. Code generation does not depend on it: an
invalid graph still generates, the validator only tells the editor what to
highlight.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

from .models import Edge, Graph, GraphNode
from .sockets import are_compatible


class IssueType(Enum):
    """Kinds of structural problems."""
    CYCLE = "cycle"
    DISCONNECTED = "disconnected"
    MISSING_INPUTS = "missingInputs"
    TOO_MANY_INPUTS = "tooManyInputs"
    MISSING_OUTPUTS = "missingOutputs"
    TOO_MANY_OUTPUTS = "tooManyOutputs"
    MISSING_DEPENDENCY = "missingDependency"
    DANGLING_EDGE = "danglingEdge"
    INCOMPATIBLE_EDGE = "incompatibleEdge"
    UNKNOWN_KIND = "unknownKind"


@dataclass
class ValidationIssue:
    type: IssueType
    message: str
    node_id: Optional[str] = None
    dependency_id: Optional[str] = None
    edge_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'type': self.type.value, 'message': self.message}
        if self.node_id is not None:
            data['node_id'] = self.node_id
        if self.dependency_id is not None:
            data['dependency_id'] = self.dependency_id
        if self.edge_id is not None:
            data['edge_id'] = self.edge_id
        return data


@dataclass
class ValidationResult:
    valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)

    def of_type(self, issue_type: IssueType) -> List[ValidationIssue]:
        return [e for e in self.errors if e.type is issue_type]

    def to_dict(self) -> Dict[str, Any]:
        return {'valid': self.valid, 'errors': [e.to_dict() for e in self.errors]}


class GraphValidator:
    """Checks graphs for cycles, disconnected nodes, arity and dependencies.

    Arity and dependency constraints are read from node properties:
    ``min_inputs``, ``max_inputs``, ``min_outputs``, ``max_outputs`` and
    ``dependencies`` (a list of node ids that must feed the node directly).
    When a node registry is supplied, nodes of unregistered kinds are
    reported as well.
    """

    def __init__(self, registry=None):
        self.registry = registry
        self.logger = logging.getLogger(__name__)

    def validate_graph(self, graph: Graph) -> ValidationResult:
        return self.validate(graph.nodes, graph.edges)

    def validate(self, nodes: Iterable[GraphNode], edges: Iterable[Edge]) -> ValidationResult:
        """Run every check and collect the findings."""
        nodes = list(nodes)
        edges = list(edges)
        node_ids = {n.id for n in nodes}
        errors: List[ValidationIssue] = []

        errors.extend(self._check_edges(nodes, edges))
        usable = [e for e in edges if e.source in node_ids and e.target in node_ids]

        errors.extend(self._detect_cycles(nodes, usable))
        errors.extend(self._detect_disconnected(nodes, usable))
        errors.extend(self._check_arity(nodes, usable))
        errors.extend(self._check_dependencies(nodes, usable))
        if self.registry is not None:
            errors.extend(self._check_kinds(nodes))

        if errors:
            self.logger.debug("Validation found %d issues", len(errors))
        return ValidationResult(valid=not errors, errors=errors)

    def _detect_cycles(self, nodes: List[GraphNode], edges: List[Edge]) -> List[ValidationIssue]:
        """Depth-first search with a recursion stack; each back edge is a cycle."""
        adjacency: Dict[str, List[str]] = {n.id: [] for n in nodes}
        for edge in edges:
            adjacency[edge.source].append(edge.target)

        errors = []
        visited: Set[str] = set()
        rec_stack: Set[str] = set()

        for root in nodes:
            if root.id in visited:
                continue
            visited.add(root.id)
            rec_stack.add(root.id)
            stack = [(root.id, iter(adjacency[root.id]))]
            while stack:
                node_id, neighbors = stack[-1]
                for neighbor in neighbors:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        rec_stack.add(neighbor)
                        stack.append((neighbor, iter(adjacency[neighbor])))
                        break
                    if neighbor in rec_stack:
                        errors.append(ValidationIssue(
                            IssueType.CYCLE,
                            f"Detected cycle involving node {neighbor}",
                            node_id=neighbor,
                        ))
                else:
                    rec_stack.discard(node_id)
                    stack.pop()
        return errors

    def _detect_disconnected(self, nodes: List[GraphNode], edges: List[Edge]) -> List[ValidationIssue]:
        connected = set()
        for edge in edges:
            connected.add(edge.source)
            connected.add(edge.target)
        errors = []
        for node in nodes:
            # a node without sockets has nothing to connect
            if node.id in connected or not (node.inputs or node.outputs):
                continue
            errors.append(ValidationIssue(
                IssueType.DISCONNECTED,
                f"Node {node.id} is disconnected from the flow",
                node_id=node.id,
            ))
        return errors

    def _check_arity(self, nodes: List[GraphNode], edges: List[Edge]) -> List[ValidationIssue]:
        inputs = Counter(e.target for e in edges)
        outputs = Counter(e.source for e in edges)
        errors = []
        for node in nodes:
            props = node.properties
            in_count = inputs[node.id]
            out_count = outputs[node.id]
            min_inputs = _as_int(props.get('min_inputs'), 0)
            max_inputs = _as_int(props.get('max_inputs'), None)
            min_outputs = _as_int(props.get('min_outputs'), 0)
            max_outputs = _as_int(props.get('max_outputs'), None)

            if in_count < min_inputs:
                errors.append(ValidationIssue(
                    IssueType.MISSING_INPUTS,
                    f"Node {node.id} requires at least {min_inputs} inputs but has {in_count}",
                    node_id=node.id,
                ))
            if max_inputs is not None and in_count > max_inputs:
                errors.append(ValidationIssue(
                    IssueType.TOO_MANY_INPUTS,
                    f"Node {node.id} allows at most {max_inputs} inputs but has {in_count}",
                    node_id=node.id,
                ))
            if out_count < min_outputs:
                errors.append(ValidationIssue(
                    IssueType.MISSING_OUTPUTS,
                    f"Node {node.id} requires at least {min_outputs} outputs but has {out_count}",
                    node_id=node.id,
                ))
            if max_outputs is not None and out_count > max_outputs:
                errors.append(ValidationIssue(
                    IssueType.TOO_MANY_OUTPUTS,
                    f"Node {node.id} allows at most {max_outputs} outputs but has {out_count}",
                    node_id=node.id,
                ))
        return errors

    def _check_dependencies(self, nodes: List[GraphNode], edges: List[Edge]) -> List[ValidationIssue]:
        feeds = {(e.source, e.target) for e in edges}
        errors = []
        for node in nodes:
            dependencies = node.properties.get('dependencies') or []
            if isinstance(dependencies, str):
                dependencies = [dependencies]
            for dependency in dependencies:
                if (dependency, node.id) not in feeds:
                    errors.append(ValidationIssue(
                        IssueType.MISSING_DEPENDENCY,
                        f"Node {node.id} requires a direct connection from dependency {dependency}",
                        node_id=node.id,
                        dependency_id=dependency,
                    ))
        return errors

    def _check_edges(self, nodes: List[GraphNode], edges: List[Edge]) -> List[ValidationIssue]:
        by_id = {n.id: n for n in nodes}
        errors = []
        for edge in edges:
            source = by_id.get(edge.source)
            target = by_id.get(edge.target)
            source_socket = source.find_output(edge.source_socket) if source else None
            target_socket = target.find_input(edge.target_socket) if target else None
            if source_socket is None or target_socket is None:
                missing = edge.source if source_socket is None else edge.target
                errors.append(ValidationIssue(
                    IssueType.DANGLING_EDGE,
                    f"Edge {edge.id} references a missing node or socket on {missing}",
                    node_id=missing,
                    edge_id=edge.id,
                ))
            elif not are_compatible(source_socket, target_socket):
                errors.append(ValidationIssue(
                    IssueType.INCOMPATIBLE_EDGE,
                    f"Edge {edge.id} connects {source_socket.kind.value} output "
                    f"{edge.source}.{source_socket.id} to {target_socket.kind.value} input "
                    f"{edge.target}.{target_socket.id}",
                    node_id=edge.target,
                    edge_id=edge.id,
                ))
        return errors

    def _check_kinds(self, nodes: List[GraphNode]) -> List[ValidationIssue]:
        return [
            ValidationIssue(IssueType.UNKNOWN_KIND,
                            f"Node {node.id} has unknown type {node.kind_name}",
                            node_id=node.id)
            for node in nodes if node.kind_name not in self.registry
        ]


def _as_int(value: Any, default: Optional[int]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def validate(nodes: Iterable[GraphNode], edges: Iterable[Edge]) -> ValidationResult:
    """Validate with the built-in checks and no kind registry."""
    return GraphValidator().validate(nodes, edges)
