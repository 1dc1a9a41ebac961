"""Role inheritance graph validation.

Edges point from a child role to each parent in its ``inherits_from``. The
validator works on an adjacency view of one namespace (role name -> parent
names) with the candidate's edges replaced by the proposed ones, so the same
traversal serves create, update and dry-run validation.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

DEFAULT_MAX_DEPTH = 5


@dataclass
class InheritanceValidation:
    """Result of validating a proposed ``inherits_from`` list."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def build_adjacency(
    edges: Mapping[str, Sequence[str]], name: str, proposed: Sequence[str]
) -> dict[str, list[str]]:
    """Adjacency view of the namespace with ``name`` pointing at ``proposed``."""
    graph = {role: list(parents) for role, parents in edges.items()}
    graph[name] = list(proposed)
    return graph


def find_path(graph: Mapping[str, Sequence[str]], start: str, target: str) -> list[str] | None:
    """Depth-first walk along parent edges; the chain from start to target, if any.

    Parents missing from the graph (deleted roles) are not followed.
    """
    stack: list[tuple[str, list[str]]] = [(start, [start])]
    visited: set[str] = set()
    while stack:
        node, path = stack.pop()
        if node == target:
            return path
        if node in visited:
            continue
        visited.add(node)
        for parent in reversed(graph.get(node, ())):
            if parent in graph and parent not in visited:
                stack.append((parent, [*path, parent]))
    return None


def chain_depth(graph: Mapping[str, Sequence[str]], start: str) -> int:
    """Length of the longest parent chain starting at ``start``."""
    depths: dict[str, int] = {}

    def visit(node: str, trail: frozenset[str]) -> int:
        if node in depths:
            return depths[node]
        best = 0
        for parent in graph.get(node, ()):
            if parent in graph and parent not in trail:
                best = max(best, visit(parent, trail | {parent}) + 1)
        depths[node] = best
        return best

    return visit(start, frozenset({start}))


def validate_inheritance(
    name: str,
    inherits_from: Sequence[str],
    edges: Mapping[str, Sequence[str]],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> InheritanceValidation:
    """Check self-reference, parent existence and cycles, in that order.

    ``edges`` maps every existing role of the namespace to its parents. Any
    error makes the result invalid; an overly deep chain only adds a warning.
    """
    errors: list[str] = []

    if name in inherits_from:
        errors.append(f"Role '{name}' cannot inherit from itself")

    parents = [p for p in inherits_from if p != name]
    for parent in parents:
        if parent not in edges:
            errors.append(f"Parent role '{parent}' does not exist")

    graph = build_adjacency(edges, name, parents)
    for parent in parents:
        if parent not in edges:
            continue
        path = find_path(graph, parent, name)
        if path is not None:
            chain = " -> ".join([name, *path])
            errors.append(f"Circular dependency: {chain}")

    if errors:
        return InheritanceValidation(valid=False, errors=errors)

    warnings: list[str] = []
    depth = chain_depth(graph, name)
    if depth > max_depth:
        warnings.append(
            f"Inheritance chain of role '{name}' is {depth} levels deep "
            f"(recommended maximum is {max_depth})"
        )
    return InheritanceValidation(valid=True, warnings=warnings)
