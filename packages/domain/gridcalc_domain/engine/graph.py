"""Dependency ordering with Kahn's algorithm.

Shared by the block executor (blocks depend on blocks) and the
dependency-ordered grid driver (cells depend on cells).
"""

from collections import deque
from typing import Dict, Hashable, Iterable, List, Set, Tuple, TypeVar

T = TypeVar("T", bound=Hashable)


def kahn_order(
    nodes: Iterable[T],
    dependencies: Dict[T, Set[T]],
) -> Tuple[List[T], List[T]]:
    """Order nodes so that every node comes after the nodes it depends on.

    Args:
        nodes: All nodes, in the order ties should be broken
        dependencies: node -> nodes it depends on. Dependencies that are not
            themselves in ``nodes`` are ignored (treated as already available).

    Returns:
        (ordered, remaining): ``ordered`` in a valid execution order;
        ``remaining`` holds the nodes that could not be ordered because they
        sit on, or depend on, a cycle. ``remaining`` keeps input order.

    Example:
        kahn_order(["c", "a", "b"], {"c": {"b"}, "b": {"a"}})
        → (["a", "b", "c"], [])

        kahn_order(["a", "b"], {"a": {"b"}, "b": {"a"}})
        → ([], ["a", "b"])
    """
    node_list = list(nodes)
    node_set = set(node_list)

    # Calculate in-degree (number of dependencies) for each node
    in_degree: Dict[T, int] = {node: 0 for node in node_list}
    dependents: Dict[T, List[T]] = {node: [] for node in node_list}

    for node in node_list:
        for dependency in dependencies.get(node, ()):
            if dependency in node_set and dependency != node:
                dependents[dependency].append(node)
                in_degree[node] += 1
            elif dependency == node:
                # Self-dependency can never be satisfied
                in_degree[node] += 1

    queue = deque(node for node in node_list if in_degree[node] == 0)
    ordered: List[T] = []

    while queue:
        current = queue.popleft()
        ordered.append(current)

        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    remaining = [node for node in node_list if in_degree[node] > 0]
    return ordered, remaining
