"""Unit tests for annotations, the @SuppressWarnings matcher and scope resolution."""

import unittest

import pytest

from mess_detector.domain.annotations import Annotation, Annotations
from mess_detector.domain.nodes import NodeKind
from mess_detector.domain.rules.unused_formal_parameter import UnusedFormalParameterRule
from mess_detector.domain.suppression import SuppressionMatcher
from tests.unit.tree_test_utils import class_, first, method, tree, unit


@pytest.fixture
def rule() -> UnusedFormalParameterRule:
    return UnusedFormalParameterRule()


class TestAnnotationValue:
    def test_value_is_trimmed_of_quotes_and_spaces(self) -> None:
        assert Annotation("SuppressWarnings", ' "PHPMD.UnusedFormalParameter" ').value == (
            "PHPMD.UnusedFormalParameter"
        )

    def test_inner_text_is_kept(self) -> None:
        assert Annotation("SuppressWarnings", '"Unused Code"').value == "Unused Code"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ('"PHPMD"', True),
        ("PMD", True),
        ("PMD.UnusedFormalParameter", True),
        ("PHPMD.UnusedFormalParameter", True),
        ("UnusedFormalParameter", True),
        ("Unused", True),
        ("unusedformal", True),
        ("SomeOtherRule", False),
        ("PHPMD.SomeOtherRule", False),
        ("phpmd", False),
    ],
)
def test_suppression_table(rule: UnusedFormalParameterRule, value: str, expected: bool) -> None:
    assert Annotation("SuppressWarnings", value).suppresses(rule) is expected


@pytest.mark.parametrize("name", ["SuppressWarnings", "suppressWarnings", "SUPPRESSWARNINGS"])
def test_suppress_keyword_is_case_insensitive(rule: UnusedFormalParameterRule, name: str) -> None:
    assert Annotation(name, "PHPMD").suppresses(rule)


@pytest.mark.parametrize("name", ["Suppress", "SuppressWarning", "param", "inheritdoc"])
def test_other_annotation_names_never_suppress(rule: UnusedFormalParameterRule, name: str) -> None:
    assert not Annotation(name, "PHPMD").suppresses(rule)
    assert not Annotation(name, "UnusedFormalParameter").suppresses(rule)


def test_qualified_rule_id_is_anchored_at_start(rule: UnusedFormalParameterRule) -> None:
    # Falls through to the substring tier, which does not match either.
    assert not Annotation("SuppressWarnings", "X.PHPMD.UnusedFormalParameter").suppresses(rule)


class TestAnnotationsParsing(unittest.TestCase):
    def test_parses_every_directive(self) -> None:
        doc = """/**
         * @SuppressWarnings(PHPMD.UnusedFormalParameter)
         * @SuppressWarnings("unused")
         * @param string $x
         */"""
        annotations = Annotations.from_doc_comment(doc)
        self.assertEqual(
            [(a.name, a.value) for a in annotations],
            [("SuppressWarnings", "PHPMD.UnusedFormalParameter"), ("SuppressWarnings", "unused")],
        )

    def test_empty_or_missing_comment(self) -> None:
        self.assertEqual(len(Annotations.from_doc_comment("")), 0)
        self.assertEqual(len(Annotations.from_doc_comment(None)), 0)

    def test_malformed_text_means_no_suppression(self) -> None:
        rule = UnusedFormalParameterRule()
        for doc in ["@SuppressWarnings(", "@SuppressWarnings()", "@(PHPMD)", "SuppressWarnings(PHPMD)"]:
            self.assertFalse(Annotations.from_doc_comment(doc).suppresses(rule), doc)

    def test_collection_suppresses_when_any_member_does(self) -> None:
        rule = UnusedFormalParameterRule()
        doc = "@SuppressWarnings(PHPMD.CyclomaticComplexity) @SuppressWarnings(PMD)"
        self.assertTrue(Annotations.from_doc_comment(doc).suppresses(rule))


class TestSuppressionMatcher:
    def test_method_annotation_covers_its_subtree(self, rule: UnusedFormalParameterRule) -> None:
        syntax_tree = tree(
            unit(class_("Foo", method("bar", ["$a"], docComment="@SuppressWarnings(PHPMD)")))
        )
        declarator = first(syntax_tree, "variable_declarator")
        assert SuppressionMatcher().is_suppressed(rule, declarator)
        assert SuppressionMatcher().is_suppressed(rule, first(syntax_tree, "method"))
        assert not SuppressionMatcher().is_suppressed(rule, first(syntax_tree, "class"))

    def test_class_annotation_covers_methods(self, rule: UnusedFormalParameterRule) -> None:
        syntax_tree = tree(
            unit(
                class_(
                    "Foo",
                    method("bar", ["$a"]),
                    docComment="@SuppressWarnings(PHPMD.UnusedFormalParameter)",
                )
            )
        )
        declarator = first(syntax_tree, "variable_declarator")
        suppressor = SuppressionMatcher().suppressing_declaration(rule, declarator)
        assert suppressor is not None
        assert suppressor.kind is NodeKind.CLASS

    def test_innermost_declaration_is_reported(self, rule: UnusedFormalParameterRule) -> None:
        syntax_tree = tree(
            unit(
                class_(
                    "Foo",
                    method("bar", ["$a"], docComment="@SuppressWarnings(Unused)"),
                    docComment="@SuppressWarnings(PHPMD)",
                )
            )
        )
        suppressor = SuppressionMatcher().suppressing_declaration(
            rule, first(syntax_tree, "variable_declarator")
        )
        assert suppressor is not None
        assert suppressor.kind is NodeKind.METHOD

    def test_unrelated_annotation_does_not_suppress(self, rule: UnusedFormalParameterRule) -> None:
        syntax_tree = tree(
            unit(class_("Foo", method("bar", ["$a"], docComment="@SuppressWarnings(ElseIf)")))
        )
        assert not SuppressionMatcher().is_suppressed(rule, first(syntax_tree, "variable_declarator"))
