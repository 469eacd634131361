"""
Depth-first traversal of tree-sitter syntax trees.

The walker is iterative, so deeply nested sources (long expression chains,
callback pyramids) never hit the interpreter's recursion limit. Each visited
node is handed the immutable tuple of its ancestors, outermost first.
"""
from collections.abc import Callable, Iterable, Iterator
from typing import Any

Node = Any  # tree_sitter.Node
Ancestors = tuple[Node, ...]
Visitor = Callable[[Node, Ancestors], None]


def walk(root: Node, visit: Visitor, ancestors: Ancestors = ()) -> None:
    """
    Visit ``root`` and all of its descendants in pre-order.

    Args:
        root: Node to start from. Any subtree works.
        visit: Callback receiving ``(node, ancestors)``; ``ancestors[-1]`` is the parent.
        ancestors: Chain above ``root`` when walking a subtree in isolation.
    """
    stack: list[tuple[Node, Ancestors]] = [(root, ancestors)]
    while stack:
        node, chain = stack.pop()
        visit(node, chain)
        child_chain = chain + (node,)
        for child in reversed(node.children):
            stack.append((child, child_chain))


def iter_descendants(node: Node) -> Iterator[Node]:
    """Yield ``node`` and every node below it, in pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def nearest_ancestor(ancestors: Ancestors, types: Iterable[str]) -> Node | None:
    """Return the closest ancestor whose type is in ``types``."""
    wanted = frozenset(types)
    for node in reversed(ancestors):
        if node.type in wanted:
            return node
    return None


def parent_of(ancestors: Ancestors) -> Node | None:
    return ancestors[-1] if ancestors else None
