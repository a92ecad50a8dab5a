"""Unit tests for ReplaceArrayOfWithLiteralRule detection."""

import pytest

from kt_array_literal.domain.constants import ACCEPTABLE_ARRAY_FUNCTIONS, PRIMITIVE_TYPE_TO_ARRAY
from kt_array_literal.domain.entities import CallContext, ResolvedTarget, Severity
from kt_array_literal.domain.rules.array_literal import (
    ReplaceArrayOfWithLiteralRule,
    ReplaceWithArrayLiteralFix,
    classify_context,
)
from kt_array_literal.domain.syntax import NodeKind
from tests.tree_builders import (
    FACTORY,
    StubLanguageSettings,
    StubResolver,
    annotation_argument,
    callee_of,
    constructor_default,
    new_tree,
    property_initializer,
)


def _rule(resolver=None, supported: bool = True, force: bool = False) -> ReplaceArrayOfWithLiteralRule:
    return ReplaceArrayOfWithLiteralRule(
        resolver=resolver or StubResolver(),
        language_settings=StubLanguageSettings(supported),
        force=force,
    )


class TestReportsEligibleCalls:
    """Calls to builtin array constructors in annotation positions are reported."""

    def test_annotation_argument_is_reported(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1", "2", "3"))

        diagnostics = _rule().check(tree, call)

        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.message == "'arrayOf' call can be replaced with array literal [...]"
        assert diagnostic.context is CallContext.ANNOTATION_ARGUMENT
        assert diagnostic.severity is Severity.GENERIC_ERROR_OR_WARNING
        assert diagnostic.code == "ReplaceArrayOfWithLiteral"

    def test_diagnostic_is_anchored_at_the_callee(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "intArrayOf", ("1",))

        diagnostic = _rule().check(tree, call)[0]

        assert diagnostic.anchor == callee_of(tree, call).node_id
        assert isinstance(diagnostic.fix, ReplaceWithArrayLiteralFix)
        assert diagnostic.fix.anchor == diagnostic.anchor
        assert diagnostic.fix.family_name == "Replace with [...]"

    def test_annotation_class_default_value_is_reported(self) -> None:
        tree, root = new_tree()
        call = constructor_default(tree, root, "emptyArray")

        diagnostics = _rule().check(tree, call)

        assert len(diagnostics) == 1
        assert diagnostics[0].context is CallContext.ANNOTATION_CONSTRUCTOR_DEFAULT_PARAMETER
        assert diagnostics[0].message == "'emptyArray' call can be replaced with array literal [...]"

    @pytest.mark.parametrize("name", sorted(ACCEPTABLE_ARRAY_FUNCTIONS))
    def test_every_allowed_constructor_is_reported(self, name: str) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, name, ("x",))

        assert len(_rule().check(tree, call)) == 1

    def test_allow_set_contains_generic_primitive_and_empty_constructors(self) -> None:
        assert ACCEPTABLE_ARRAY_FUNCTIONS == {"arrayOf", "emptyArray", *PRIMITIVE_TYPE_TO_ARRAY.values()}
        assert len(ACCEPTABLE_ARRAY_FUNCTIONS) == 10

    def test_message_uses_the_name_as_written(self) -> None:
        """An import alias of arrayOf is reported under the alias."""
        tree, root = new_tree()
        call = annotation_argument(tree, root, "aof", ("1",))
        resolver = StubResolver({"aof": ResolvedTarget("kotlin", "arrayOf")})

        diagnostics = _rule(resolver).check(tree, call)

        assert diagnostics[0].message == "'aof' call can be replaced with array literal [...]"

    def test_configured_severity_is_used(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1",))
        rule = ReplaceArrayOfWithLiteralRule(
            StubResolver(), StubLanguageSettings(), severity=Severity.WEAK_WARNING
        )

        assert rule.check(tree, call)[0].severity is Severity.WEAK_WARNING


class TestSkipsIneligibleCalls:
    """Every skip is silent: no diagnostic, no exception."""

    def test_plain_variable_initializer_is_not_reported(self) -> None:
        tree, root = new_tree()
        call = property_initializer(tree, root, "arrayOf", ("1", "2"))

        assert _rule().check(tree, call) == []

    def test_user_defined_array_of_is_not_reported(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1",))
        resolver = StubResolver({"arrayOf": ResolvedTarget("com.example", "arrayOf")})

        assert _rule(resolver).check(tree, call) == []

    def test_unresolved_call_is_not_reported(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1",))
        resolver = StubResolver({"arrayOf": None})

        assert _rule(resolver).check(tree, call) == []

    @pytest.mark.parametrize("name", ["arrayOfNulls", "listOf", "ubyteArrayOf", "enumValues"])
    def test_builtin_outside_allow_set_is_not_reported(self, name: str) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, name, ("1",))

        assert _rule().check(tree, call) == []

    def test_non_simple_callee_is_not_reported(self) -> None:
        """`kotlin.arrayOf(1)`: the callee is a qualified expression, not a name."""
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1",))
        qualified = FACTORY.create_expression(tree, "kotlin.arrayOf")
        tree.replace(call.callee, qualified.node_id)
        resolver = StubResolver()

        assert _rule(resolver).check(tree, call) == []
        assert resolver.calls == 0

    def test_default_value_of_regular_class_is_not_reported(self) -> None:
        tree, root = new_tree()
        call = constructor_default(tree, root, "intArrayOf", ("1",), is_annotation=False)

        assert _rule().check(tree, call) == []

    def test_call_nested_in_another_call_argument_is_not_reported(self) -> None:
        """`@Ann(foo(arrayOf(1)))`: the array is an argument of foo, not of the annotation."""
        tree, root = new_tree()
        outer = annotation_argument(tree, root, "foo", ())
        argument_list = tree.first_child(outer, NodeKind.VALUE_ARGUMENT_LIST)
        argument = tree.add_node(NodeKind.VALUE_ARGUMENT, parent=argument_list)
        inner = FACTORY.create_call(tree, "arrayOf", ("1",), parent=argument)
        argument.value = inner.node_id

        assert _rule().check(tree, inner) == []

    def test_non_call_node_is_ignored(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1",))

        assert _rule().check(tree, callee_of(tree, call)) == []


class TestFeatureGate:
    """The language must allow array literals in annotations unless forced."""

    def test_feature_disabled_reports_nothing(self) -> None:
        tree, root = new_tree()
        calls = [
            annotation_argument(tree, root, "arrayOf", ("1",)),
            constructor_default(tree, root, "emptyArray"),
        ]
        resolver = StubResolver()
        rule = _rule(resolver, supported=False)

        assert [d for call in calls for d in rule.check(tree, call)] == []
        assert resolver.calls == 0

    def test_force_bypasses_the_gate(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf", ("1",))

        rule = _rule(supported=False, force=True)

        assert rule.is_enabled()
        assert len(rule.check(tree, call)) == 1


class TestClassifyContext:
    """classify_context() is total over call positions."""

    def test_annotation_argument(self) -> None:
        tree, root = new_tree()
        call = annotation_argument(tree, root, "arrayOf")
        assert classify_context(tree, call) is CallContext.ANNOTATION_ARGUMENT

    def test_annotation_default_parameter(self) -> None:
        tree, root = new_tree()
        call = constructor_default(tree, root, "arrayOf")
        assert classify_context(tree, call) is CallContext.ANNOTATION_CONSTRUCTOR_DEFAULT_PARAMETER

    def test_parameter_child_that_is_not_the_default_value(self) -> None:
        tree, root = new_tree()
        call = constructor_default(tree, root, "arrayOf")
        parameter = tree.parent_of(call)
        assert parameter is not None
        parameter.value = None
        assert classify_context(tree, call) is CallContext.OTHER

    def test_detached_call(self) -> None:
        tree, _ = new_tree()
        call = FACTORY.create_call(tree, "arrayOf", ("1",))
        assert classify_context(tree, call) is CallContext.OTHER

    def test_property_initializer(self) -> None:
        tree, root = new_tree()
        call = property_initializer(tree, root, "arrayOf")
        assert classify_context(tree, call) is CallContext.OTHER


class TestIdempotence:
    def test_checking_twice_yields_the_same_diagnostics(self) -> None:
        tree, root = new_tree()
        calls = [
            annotation_argument(tree, root, "arrayOf", ("1",)),
            constructor_default(tree, root, "doubleArrayOf", ("1.0",)),
            property_initializer(tree, root, "arrayOf", ("2",)),
        ]
        rule = _rule()

        def summary() -> list[tuple[int, str, CallContext]]:
            return [(d.anchor, d.message, d.context) for call in calls for d in rule.check(tree, call)]

        first = summary()
        assert first == summary()
        assert len(first) == 2
        assert tree.revision == 0

