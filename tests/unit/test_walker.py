"""
Unit tests for the syntax tree walker.
"""
from dataclasses import dataclass, field

from unitforge.core.walker import iter_descendants, nearest_ancestor, parent_of, walk


@dataclass
class FakeNode:
    type: str
    children: list = field(default_factory=list)


def make_tree():
    #        program
    #       /       \
    #   class      expr
    #     |
    #   method
    method = FakeNode("method_definition")
    klass = FakeNode("class_declaration", [method])
    expr = FakeNode("expression_statement")
    return FakeNode("program", [klass, expr])


def test_walk_visits_in_pre_order():
    seen = []
    walk(make_tree(), lambda node, ancestors: seen.append(node.type))

    assert seen == [
        "program",
        "class_declaration",
        "method_definition",
        "expression_statement",
    ]


def test_walk_passes_ancestor_chain():
    chains = {}

    def visit(node, ancestors):
        chains[node.type] = [a.type for a in ancestors]

    walk(make_tree(), visit)

    assert chains["program"] == []
    assert chains["class_declaration"] == ["program"]
    assert chains["method_definition"] == ["program", "class_declaration"]
    assert chains["expression_statement"] == ["program"]


def test_walk_subtree_with_existing_ancestors():
    outer = FakeNode("object")
    inner = FakeNode("pair", [FakeNode("identifier")])
    seen = []

    walk(inner, lambda node, ancestors: seen.append((node.type, len(ancestors))), (outer,))

    assert seen == [("pair", 1), ("identifier", 2)]


def test_walk_handles_deep_nesting():
    """Iterative traversal must not hit the recursion limit."""
    root = node = FakeNode("root")
    for _ in range(5000):
        child = FakeNode("call_expression")
        node.children.append(child)
        node = child

    count = 0

    def visit(node, ancestors):
        nonlocal count
        count += 1

    walk(root, visit)
    assert count == 5001


def test_iter_descendants_includes_self():
    tree = make_tree()
    types = [n.type for n in iter_descendants(tree)]
    assert types[0] == "program"
    assert len(types) == 4


def test_nearest_ancestor():
    tree = make_tree()
    klass = tree.children[0]
    ancestors = (tree, klass)

    assert nearest_ancestor(ancestors, {"class_declaration"}) is klass
    assert nearest_ancestor(ancestors, ["program", "class_declaration"]) is klass
    assert nearest_ancestor(ancestors, {"interface_declaration"}) is None


def test_parent_of():
    tree = make_tree()
    assert parent_of(()) is None
    assert parent_of((tree,)) is tree
