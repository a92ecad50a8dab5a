"""Tests for TreeSitterKotlinGateway against real Kotlin source."""

import pytest

from kt_array_literal.domain.config import LanguageVersionSettings
from kt_array_literal.domain.entities import CallContext
from kt_array_literal.domain.rules.array_literal import (
    ReplaceArrayOfWithLiteralRule,
    argument_expressions,
    classify_context,
)
from kt_array_literal.domain.syntax import NodeKind, SyntaxNode, SyntaxTree
from kt_array_literal.infrastructure.gateways.scope_resolver import FileScopeResolver
from kt_array_literal.infrastructure.gateways.tree_sitter_gateway import TreeSitterKotlinGateway


@pytest.fixture(scope="module")
def gateway() -> TreeSitterKotlinGateway:
    return TreeSitterKotlinGateway()


def _call_named(tree: SyntaxTree, name: str) -> SyntaxNode:
    for call in tree.walk(NodeKind.CALL_EXPRESSION):
        callee = tree.get(call.callee) if call.callee is not None else None
        if callee is not None and callee.name == name:
            return call
    raise AssertionError(f"no call to {name}")


class TestStructure:
    def test_root_spans_the_whole_file(self, gateway: TreeSitterKotlinGateway) -> None:
        source = "fun main() {}\n"
        tree = gateway.parse(source, "Main.kt")

        assert tree.root.kind is NodeKind.FILE
        assert tree.path == "Main.kt"
        assert tree.render() == source

    def test_package_imports_and_functions(self, gateway: TreeSitterKotlinGateway) -> None:
        source = (
            "package com.example\n"
            "\n"
            "import kotlin.arrayOf as aof\n"
            "import com.other.*\n"
            "\n"
            "fun helper() = 1\n"
        )
        tree = gateway.parse(source, "A.kt")

        packages = list(tree.walk(NodeKind.PACKAGE_HEADER))
        imports = list(tree.walk(NodeKind.IMPORT_DIRECTIVE))
        functions = list(tree.walk(NodeKind.FUNCTION_DECLARATION))

        assert [p.name for p in packages] == ["com.example"]
        assert [i.name for i in imports] == ["kotlin.arrayOf", "com.other"]
        assert imports[0].attributes.get("alias") == "aof"
        assert imports[1].attributes.get("star") == "true"
        assert [f.name for f in functions] == ["helper"]


class TestCallPositions:
    def test_annotation_argument(self, gateway: TreeSitterKotlinGateway) -> None:
        tree = gateway.parse("@Ann(arrayOf(1, 2))\nclass C\n", "C.kt")

        call = _call_named(tree, "arrayOf")

        assert classify_context(tree, call) is CallContext.ANNOTATION_ARGUMENT
        assert [tree.render(e) for e in argument_expressions(tree, call)] == ["1", "2"]
        assert tree.location_of(tree.require(call.callee)) == "C.kt:1:6"

    def test_annotation_class_default_value(self, gateway: TreeSitterKotlinGateway) -> None:
        tree = gateway.parse('annotation class Ann(val names: Array<String> = arrayOf("a"))\n', "Ann.kt")

        declaration = next(tree.walk(NodeKind.CLASS_DECLARATION))
        call = _call_named(tree, "arrayOf")

        assert declaration.is_annotation
        assert declaration.name == "Ann"
        assert classify_context(tree, call) is CallContext.ANNOTATION_CONSTRUCTOR_DEFAULT_PARAMETER

    def test_regular_class_default_value(self, gateway: TreeSitterKotlinGateway) -> None:
        tree = gateway.parse("class Holder(val values: IntArray = intArrayOf(1))\n", "Holder.kt")

        assert not next(tree.walk(NodeKind.CLASS_DECLARATION)).is_annotation
        assert classify_context(tree, _call_named(tree, "intArrayOf")) is CallContext.OTHER

    def test_property_initializer(self, gateway: TreeSitterKotlinGateway) -> None:
        tree = gateway.parse("val xs = arrayOf(1, 2)\n", "Props.kt")

        assert classify_context(tree, _call_named(tree, "arrayOf")) is CallContext.OTHER

    def test_named_argument_keeps_only_the_expression(self, gateway: TreeSitterKotlinGateway) -> None:
        tree = gateway.parse("@Ann(value = arrayOf(1))\nclass C\n", "C.kt")

        call = _call_named(tree, "arrayOf")
        argument = tree.parent_of(call)

        assert argument is not None
        assert argument.kind is NodeKind.VALUE_ARGUMENT
        assert argument.name == "value"
        assert argument.value == call.node_id
        assert classify_context(tree, call) is CallContext.ANNOTATION_ARGUMENT

    def test_spread_argument_is_unwrapped(self, gateway: TreeSitterKotlinGateway) -> None:
        tree = gateway.parse("@Foo(*arrayOf(1, 2))\nclass X\n", "X.kt")

        call = _call_named(tree, "arrayOf")
        argument = tree.parent_of(call)

        assert argument is not None
        assert argument.kind is NodeKind.VALUE_ARGUMENT
        assert argument.attributes.get("spread") == "true"
        assert argument.value == call.node_id
        assert classify_context(tree, call) is CallContext.ANNOTATION_ARGUMENT


def _messages(gateway: TreeSitterKotlinGateway, source: str) -> list[str]:
    tree = gateway.parse(source, "Test.kt")
    rule = ReplaceArrayOfWithLiteralRule(FileScopeResolver(), LanguageVersionSettings())
    return [d.message for call in tree.walk(NodeKind.CALL_EXPRESSION) for d in rule.check(tree, call)]


class TestResolutionOnParsedSource:
    """Imports and declarations read from real source decide what counts as the builtin."""

    def test_builtin_call_is_reported(self, gateway: TreeSitterKotlinGateway) -> None:
        assert _messages(gateway, "@Foo(arrayOf(1))\nclass X\n") == [
            "'arrayOf' call can be replaced with array literal [...]"
        ]

    def test_explicit_import_from_another_package_shadows(self, gateway: TreeSitterKotlinGateway) -> None:
        assert _messages(gateway, "import foo.bar.arrayOf\n\n@Foo(arrayOf(1))\nclass X\n") == []

    def test_alias_of_builtin_is_reported_under_the_alias(self, gateway: TreeSitterKotlinGateway) -> None:
        assert _messages(gateway, "import kotlin.arrayOf as aOf\n\n@Foo(aOf(1))\nclass X\n") == [
            "'aOf' call can be replaced with array literal [...]"
        ]

    def test_star_import_from_another_package_suppresses(self, gateway: TreeSitterKotlinGateway) -> None:
        assert _messages(gateway, "import foo.*\n\n@Foo(arrayOf(1))\nclass X\n") == []

    def test_function_in_same_file_shadows(self, gateway: TreeSitterKotlinGateway) -> None:
        source = "package demo\n\nfun intArrayOf(x: Int) = x\n\n@Foo(intArrayOf(1))\nclass X\n"
        assert _messages(gateway, source) == []

    def test_spread_argument_is_reported(self, gateway: TreeSitterKotlinGateway) -> None:
        assert _messages(gateway, "@Foo(*arrayOf(1, 2))\nclass X\n") == [
            "'arrayOf' call can be replaced with array literal [...]"
        ]
