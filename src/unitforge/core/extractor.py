"""
Component extraction from JavaScript and TypeScript sources.

Sources are parsed with tree-sitter. A single pre-order walk over the tree
turns functions, classes, methods, interfaces and named callbacks into
Component records, each carrying a cyclomatic-style complexity score.
"""
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from unitforge.core.walker import (
    Ancestors,
    Node,
    iter_descendants,
    nearest_ancestor,
    parent_of,
    walk,
)
from unitforge.support.exceptions import SourceParseError, UnsupportedFileError
from unitforge.support.models import Component, ComponentKind, LanguageVariant

logger = logging.getLogger(__name__)

# extension -> (grammar, variant)
GRAMMARS: dict[str, tuple[str, LanguageVariant]] = {
    ".js": ("javascript", LanguageVariant.LOOSE),
    ".jsx": ("javascript", LanguageVariant.LOOSE),
    ".ts": ("typescript", LanguageVariant.STRICT),
    ".tsx": ("tsx", LanguageVariant.STRICT),
}

ANONYMOUS_FUNCTION_NAME = "anonymousFunction"

DECISION_NODE_TYPES = frozenset(
    {
        "if_statement",
        "ternary_expression",
        "for_statement",
        "for_in_statement",  # also covers for-of
        "while_statement",
        "do_statement",
        "switch_case",
        "catch_clause",
    }
)
LOGICAL_OPERATORS = frozenset({"&&", "||"})

CLASS_NODE_TYPES = frozenset({"class_declaration", "abstract_class_declaration", "class"})
# "function" is the expression node name in older grammar releases
FUNCTION_EXPRESSION_TYPES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)


@lru_cache(maxsize=None)
def get_parser(grammar: str) -> Parser:
    """
    Initialize and return a tree-sitter parser for the given grammar.

    Args:
        grammar: "javascript", "typescript" or "tsx".
    """
    if grammar == "typescript":
        language = Language(tree_sitter_typescript.language_typescript())
    elif grammar == "tsx":
        language = Language(tree_sitter_typescript.language_tsx())
    elif grammar == "javascript":
        language = Language(tree_sitter_javascript.language())
    else:
        raise UnsupportedFileError(f"No grammar named {grammar!r}")

    parser = Parser()
    parser.language = language
    logger.debug("Tree-sitter %s parser initialized", grammar)
    return parser


def grammar_for(file_path: Path | str) -> tuple[str, LanguageVariant]:
    """Map a file path to its grammar and language variant."""
    suffix = Path(file_path).suffix.lower()
    try:
        return GRAMMARS[suffix]
    except KeyError:
        raise UnsupportedFileError(f"Unsupported file type: {file_path}") from None


def _first_error_node(root: Node) -> Node | None:
    for node in iter_descendants(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def parse_source(source_text: str, file_path: Path | str) -> tuple[Any, bytes]:
    """
    Parse source text with the grammar matching ``file_path``.

    Returns:
        The tree-sitter tree and the UTF-8 bytes it was built from.

    Raises:
        UnsupportedFileError: Unknown extension.
        SourceParseError: The tree contains error or missing nodes.
    """
    grammar, _ = grammar_for(file_path)
    source_bytes = source_text.encode("utf-8")
    tree = get_parser(grammar).parse(source_bytes)

    if tree.root_node.has_error:
        bad = _first_error_node(tree.root_node)
        if bad is None:
            raise SourceParseError(str(file_path), 1, "invalid syntax")
        if bad.is_missing:
            message = f"missing {bad.type!r}"
        else:
            snippet = source_bytes[bad.start_byte:bad.end_byte][:40].decode(
                "utf-8", errors="replace"
            )
            message = f"unexpected {snippet!r}"
        raise SourceParseError(str(file_path), bad.start_point[0] + 1, message)

    return tree, source_bytes


def calculate_complexity(node: Node) -> int:
    """
    Approximate cyclomatic complexity: 1 + decision points under ``node``.

    Branches, loops, case labels, catch clauses and short-circuit ``&&``/``||``
    each add one. Nested function bodies are included in the count.
    """
    complexity = 1
    for descendant in iter_descendants(node):
        if descendant.type in DECISION_NODE_TYPES:
            complexity += 1
        elif descendant.type == "binary_expression":
            operator = descendant.child_by_field_name("operator")
            if operator is not None and operator.type in LOGICAL_OPERATORS:
                complexity += 1
    return complexity


class ComponentExtractor:
    """Walker callback that collects Components from one syntax tree."""

    def __init__(self, source_bytes: bytes, variant: LanguageVariant):
        self.source_bytes = source_bytes
        self.variant = variant
        self.components: list[Component] = []

        self._handlers = {
            "function_declaration": self._function_declaration,
            "generator_function_declaration": self._function_declaration,
            "class_declaration": self._class_declaration,
            "abstract_class_declaration": self._class_declaration,
            "method_definition": self._method_definition,
        }
        for node_type in FUNCTION_EXPRESSION_TYPES:
            self._handlers[node_type] = self._function_expression

        if variant is LanguageVariant.STRICT:
            self._handlers["interface_declaration"] = self._interface_declaration
            self._handlers["type_alias_declaration"] = self._interface_declaration
        else:
            self._handlers["pair"] = self._object_property

    def __call__(self, node: Node, ancestors: Ancestors) -> None:
        # keyword tokens such as `function` share names with real nodes
        if not node.is_named:
            return
        handler = self._handlers.get(node.type)
        if handler is not None:
            handler(node, ancestors)

    # -- helpers ---------------------------------------------------------

    def _text(self, node: Node) -> str:
        return self.source_bytes[node.start_byte:node.end_byte].decode("utf-8")

    def _name_of(self, node: Node, field: str = "name") -> str | None:
        name_node = node.child_by_field_name(field)
        if name_node is None:
            return None
        if name_node.type == "string":
            return self._text(name_node)[1:-1]
        return self._text(name_node)

    def _binding_name(self, node: Node | None) -> str | None:
        """Name bound by a variable declarator or object property, if any."""
        if node is None:
            return None
        if node.type == "variable_declarator":
            name_node = node.child_by_field_name("name")
            if name_node is not None and name_node.type == "identifier":
                return self._text(name_node)
            return None
        if node.type == "pair":
            return self._name_of(node, "key")
        return None

    def _object_binding(self, ancestors: Ancestors) -> str | None:
        """Binding name of the object literal at ``ancestors[-1]``."""
        if len(ancestors) < 2 or ancestors[-1].type != "object":
            return None
        return self._binding_name(ancestors[-2])

    def _emit(
        self,
        node: Node,
        name: str,
        kind: ComponentKind,
        complexity: int | None = None,
    ) -> None:
        if complexity is None:
            complexity = calculate_complexity(node)
        self.components.append(
            Component(
                name=name,
                kind=kind,
                start_line=node.start_point[0] + 1,
                end_line=node.end_point[0] + 1,
                source_text=self._text(node),
                complexity=complexity,
            )
        )

    # -- node handlers ---------------------------------------------------

    def _function_declaration(self, node: Node, ancestors: Ancestors) -> None:
        name = self._name_of(node)
        if name is None:
            return
        self._emit(node, name, ComponentKind.FUNCTION)

    def _class_declaration(self, node: Node, ancestors: Ancestors) -> None:
        name = self._name_of(node)
        if name is None:
            return
        self._emit(node, name, ComponentKind.CLASS)

    def _method_definition(self, node: Node, ancestors: Ancestors) -> None:
        parent = parent_of(ancestors)
        if (
            self.variant is LanguageVariant.LOOSE
            and parent is not None
            and parent.type == "object"
        ):
            self._object_method(node, self._name_of(node), node, ancestors)
            return

        member = self._name_of(node)
        if member is None:
            return
        name = member
        enclosing = nearest_ancestor(ancestors, CLASS_NODE_TYPES)
        if enclosing is not None:
            class_name = self._name_of(enclosing)
            if class_name:
                name = f"{class_name}.{member}"
        self._emit(node, name, ComponentKind.METHOD)

    def _interface_declaration(self, node: Node, ancestors: Ancestors) -> None:
        name = self._name_of(node)
        if name is None:
            return
        self._emit(node, name, ComponentKind.INTERFACE, complexity=1)

    def _function_expression(self, node: Node, ancestors: Ancestors) -> None:
        parent = parent_of(ancestors)
        own_name = self._name_of(node)
        # `export default function () {}` is an unnamed declaration
        if own_name is None and parent is not None and parent.type == "export_statement":
            return
        name = self._binding_name(parent) or own_name or ANONYMOUS_FUNCTION_NAME
        complexity = calculate_complexity(node)
        standalone = parent is not None and parent.type == "expression_statement"
        if complexity > 1 or standalone:
            self._emit(node, name, ComponentKind.FUNCTION, complexity)

    def _object_property(self, node: Node, ancestors: Ancestors) -> None:
        value = node.child_by_field_name("value")
        if value is None or value.type not in FUNCTION_EXPRESSION_TYPES:
            return
        self._object_method(node, self._name_of(node, "key"), value, ancestors)

    def _object_method(
        self,
        node: Node,
        member: str | None,
        body: Node,
        ancestors: Ancestors,
    ) -> None:
        if member is None:
            return
        owner = self._object_binding(ancestors)
        name = f"{owner}.{member}" if owner else member
        self._emit(node, name, ComponentKind.FUNCTION, calculate_complexity(body))


def extract_components(source_text: str, file_path: Path | str) -> list[Component]:
    """
    Extract testable components from one source file.

    Args:
        source_text: Full file content.
        file_path: Path used to pick the grammar and for error messages.

    Returns:
        Components in source order; classes come before their methods.

    Raises:
        UnsupportedFileError: Unknown extension.
        SourceParseError: The file does not parse.
    """
    _, variant = grammar_for(file_path)
    tree, source_bytes = parse_source(source_text, file_path)
    extractor = ComponentExtractor(source_bytes, variant)
    walk(tree.root_node, extractor)
    return extractor.components
