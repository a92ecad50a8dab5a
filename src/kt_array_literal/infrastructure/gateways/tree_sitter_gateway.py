"""Kotlin ingestion via tree-sitter: maps tree-sitter-kotlin nodes onto the domain SyntaxTree."""

from __future__ import annotations

import logging

import tree_sitter_kotlin
from tree_sitter import Language, Node, Parser

from kt_array_literal.domain.protocols import SourceParserProtocol
from kt_array_literal.domain.syntax import NodeKind, Span, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)

KOTLIN_LANGUAGE = Language(tree_sitter_kotlin.language())

_IDENTIFIER_TYPES = frozenset({"simple_identifier", "identifier", "type_identifier"})
_LEAF_TEXT_LIMIT = 200


class TreeSitterKotlinGateway(SourceParserProtocol):
    """Parses Kotlin source with tree-sitter-kotlin and builds a SyntaxTree from it."""

    def __init__(self) -> None:
        self._parser = Parser(KOTLIN_LANGUAGE)

    def parse(self, source: str, path: str = "<memory>") -> SyntaxTree:
        data = source.encode("utf-8")
        ts_tree = self._parser.parse(data)
        if ts_tree.root_node.has_error:
            logger.debug("%s: source has syntax errors, continuing with a partial tree", path)
        tree = SyntaxTree(data, path)
        root = tree.add_node(NodeKind.FILE, span=Span(0, len(data)))
        builder = _TreeBuilder(tree, data)
        for child in ts_tree.root_node.named_children:
            builder.convert(child, root)
        return tree


class _TreeBuilder:
    """Recursive conversion of one tree-sitter tree."""

    def __init__(self, tree: SyntaxTree, data: bytes) -> None:
        self.tree = tree
        self.data = data

    def text(self, node: Node) -> str:
        return self.data[node.start_byte:node.end_byte].decode("utf-8")

    def add(self, kind: NodeKind, node: Node, parent: SyntaxNode, name: str = "") -> SyntaxNode:
        return self.tree.add_node(
            kind,
            parent=parent,
            span=Span(node.start_byte, node.end_byte),
            name=name,
            attributes={"syntax_type": node.type},
        )

    def convert(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        handler = getattr(self, f"_on_{node.type}", None)
        if handler is not None:
            return handler(node, parent)
        if node.type in _IDENTIFIER_TYPES:
            return self.add(NodeKind.NAME_REFERENCE, node, parent, name=self.text(node))
        return self._convert_generic(node, parent)

    def _convert_generic(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        named = node.named_children
        leaf_text = ""
        if not named and node.end_byte - node.start_byte <= _LEAF_TEXT_LIMIT:
            leaf_text = self.text(node)
        result = self.add(NodeKind.EXPRESSION, node, parent, name=leaf_text)
        for child in named:
            self.convert(child, result)
        return result

    def _convert_children(self, node: Node, parent: SyntaxNode) -> None:
        for child in node.named_children:
            self.convert(child, parent)

    def _first_identifier(self, node: Node) -> str:
        for child in node.named_children:
            if child.type in _IDENTIFIER_TYPES:
                return self.text(child)
        return ""

    # -- file structure ---------------------------------------------------

    def _qualified_name(self, node: Node) -> str:
        for child in node.named_children:
            if child.type == "qualified_identifier":
                return self.text(child)
        return self._first_identifier(node)

    def _on_package_header(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        return self.add(NodeKind.PACKAGE_HEADER, node, parent, name=self._qualified_name(node))

    def _on_import(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        """`import a.b.c`, `import a.b.*` or `import a.b.c as d`."""
        result = self.add(NodeKind.IMPORT_DIRECTIVE, node, parent, name=self._qualified_name(node))
        after_as = False
        for child in node.children:
            if child.type == "*":
                result.attributes["star"] = "true"
            elif child.type == "as":
                after_as = True
            elif after_as and child.type in _IDENTIFIER_TYPES:
                result.attributes["alias"] = self.text(child)
        return result

    def _on_function_declaration(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.FUNCTION_DECLARATION, node, parent, name=self._first_identifier(node))
        self._convert_children(node, result)
        return result

    def _on_class_declaration(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.CLASS_DECLARATION, node, parent, name=self._first_identifier(node))
        result.is_annotation = self._has_annotation_modifier(node)
        self._convert_children(node, result)
        return result

    def _has_annotation_modifier(self, node: Node) -> bool:
        for child in node.named_children:
            if child.type != "modifiers":
                continue
            for modifier in child.named_children:
                if modifier.type == "class_modifier" and self.text(modifier) == "annotation":
                    return True
        return False

    def _on_primary_constructor(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        constructor = self.add(NodeKind.PRIMARY_CONSTRUCTOR, node, parent)
        parameters = self.add(NodeKind.PARAMETER_LIST, node, constructor)
        for child in node.named_children:
            if child.type == "class_parameter":
                self.convert(child, parameters)
            elif child.type == "class_parameters":
                self._convert_children(child, parameters)
            else:
                self.convert(child, constructor)
        return constructor

    def _on_class_parameter(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.PARAMETER, node, parent, name=self._first_identifier(node))
        after_equals = False
        for child in node.children:
            if not child.is_named:
                after_equals = after_equals or child.type == "="
                continue
            converted = self.convert(child, result)
            if after_equals and result.value is None:
                result.value = converted.node_id
            elif child.type not in _IDENTIFIER_TYPES and child.type != "modifiers" and not after_equals:
                result.attributes["type"] = self.text(child)
        return result

    # -- annotations and calls --------------------------------------------

    def _on_annotation(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.EXPRESSION, node, parent)
        for child in node.named_children:
            if child.type == "constructor_invocation":
                entry = self.add(NodeKind.ANNOTATION_ENTRY, child, result)
                for part in child.named_children:
                    if part.type == "user_type":
                        entry.name = self.text(part)
                    self.convert(part, entry)
            elif child.type == "user_type":
                self.add(NodeKind.ANNOTATION_ENTRY, child, result, name=self.text(child))
            else:
                self.convert(child, result)
        return result

    def _on_call_expression(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        call = self.add(NodeKind.CALL_EXPRESSION, node, parent)
        named = node.named_children
        if not named:
            return call
        call.callee = self.convert(named[0], call).node_id
        for child in named[1:]:
            if child.type in ("annotated_lambda", "lambda_literal"):
                self._convert_trailing_lambda(child, call)
            else:
                self.convert(child, call)
        return call

    def _convert_trailing_lambda(self, node: Node, call: SyntaxNode) -> None:
        """`f(a) { ... }`: the lambda is one more argument, in its own argument list."""
        trailing = self.add(NodeKind.VALUE_ARGUMENT_LIST, node, call)
        argument = self.add(NodeKind.VALUE_ARGUMENT, node, trailing)
        if node.type == "lambda_literal":
            argument.value = self.convert(node, argument).node_id
            return
        for part in node.named_children:
            converted = self.convert(part, argument)
            if part.type == "lambda_literal":
                argument.value = converted.node_id

    def _on_value_arguments(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.VALUE_ARGUMENT_LIST, node, parent)
        self._convert_children(node, result)
        return result

    def _on_value_argument(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.VALUE_ARGUMENT, node, parent)
        named = node.named_children
        if not named:
            return result
        has_name = any(child.type == "=" for child in node.children if not child.is_named)
        expression = named[-1]
        for child in named[:-1]:
            if has_name and child.type in _IDENTIFIER_TYPES and not result.name:
                result.name = self.text(child)
                continue
            self.convert(child, result)
        if expression.type == "spread_expression" and expression.named_children:
            # `*expr`: the spread marker belongs to the argument, not the expression
            result.attributes["spread"] = "true"
            expression = expression.named_children[-1]
        result.value = self.convert(expression, result).node_id
        return result

    def _on_collection_literal(self, node: Node, parent: SyntaxNode) -> SyntaxNode:
        result = self.add(NodeKind.COLLECTION_LITERAL, node, parent)
        self._convert_children(node, result)
        return result
