"""Unit tests for the question visibility service."""

import pytest

from questionnaire_logic.services.visibility import VisibilityService
from questionnaire_logic.schemas.questionnaire import (
    LogicCondition,
    Question,
    VisibilityLogic,
)


def cond(operator, value=None, question_id="q1") -> LogicCondition:
    return LogicCondition(question_id=question_id, operator=operator, value=value)


def question(question_id="target", **logic) -> Question:
    return Question(
        id=question_id,
        question_text="Target question",
        question_type="text",
        conditional_logic=VisibilityLogic(**logic) if logic else None,
    )


class TestEvaluateCondition:
    """Tests for VisibilityService.evaluate_condition."""

    def test_equals_scalar_and_list(self):
        """Test equals on single and multi-select answers."""
        assert VisibilityService.evaluate_condition(cond("equals", "yes"), {"q1": "yes"}) is True
        assert VisibilityService.evaluate_condition(cond("equals", "yes"), {"q1": "no"}) is False
        assert VisibilityService.evaluate_condition(cond("equals", "b"), {"q1": ["a", "b"]}) is True

    def test_not_equals_scalar_and_list(self):
        """Test not_equals on single and multi-select answers."""
        assert VisibilityService.evaluate_condition(cond("not_equals", "yes"), {"q1": "no"}) is True
        assert VisibilityService.evaluate_condition(cond("not_equals", "b"), {"q1": ["a", "b"]}) is False
        assert VisibilityService.evaluate_condition(cond("not_equals", "c"), {"q1": ["a", "b"]}) is True

    def test_contains(self):
        """Test case-insensitive contains on text and list items."""
        assert VisibilityService.evaluate_condition(cond("contains", "ache"), {"q1": "Toothache"}) is True
        assert VisibilityService.evaluate_condition(cond("contains", "IMPL"), {"q1": ["veneers", "implants"]}) is True
        assert VisibilityService.evaluate_condition(cond("contains", "x"), {"q1": ["a"]}) is False
        assert VisibilityService.evaluate_condition(cond("contains", "x"), {}) is False

    def test_contains_without_value(self):
        """Test that a contains condition with no value does not match every answer."""
        draft = LogicCondition(question_id="q1", operator="contains")
        assert VisibilityService.evaluate_condition(draft, {"q1": "Toothache"}) is False
        assert VisibilityService.evaluate_condition(draft, {"q1": ["implants"]}) is False
        assert VisibilityService.evaluate_condition(cond("contains", None), {"q1": "null"}) is True

    def test_numeric(self):
        """Test greater_than and less_than."""
        assert VisibilityService.evaluate_condition(cond("greater_than", 5), {"q1": "8"}) is True
        assert VisibilityService.evaluate_condition(cond("less_than", 5), {"q1": 8}) is False
        assert VisibilityService.evaluate_condition(cond("greater_than", 5), {"q1": "lots"}) is False

    @pytest.mark.parametrize("answer,expected", [
        (None, True),
        ("", True),
        ([], True),
        ("x", False),
        (["a"], False),
        (0, False),
    ])
    def test_is_empty(self, answer, expected):
        """Test is_empty and is_not_empty."""
        answers = {"q1": answer}
        assert VisibilityService.evaluate_condition(cond("is_empty"), answers) is expected
        assert VisibilityService.evaluate_condition(cond("is_not_empty"), answers) is (not expected)

    def test_unknown_operator(self, caplog):
        """Test that unknown operators never hold and are logged."""
        with caplog.at_level("WARNING"):
            assert VisibilityService.evaluate_condition(cond("between", [1, 2]), {"q1": 1}) is False
        assert "between" in caplog.text


class TestShouldShowQuestion:
    """Tests for VisibilityService.should_show_question."""

    def test_no_logic_is_visible(self):
        """Test that questions without logic are shown."""
        assert VisibilityService.should_show_question(question(), {}) is True

    def test_show_if_and(self):
        """Test that all show_if conditions must hold by default."""
        q = question(show_if=[cond("equals", "yes", "q1"), cond("greater_than", 3, "q2")])
        assert VisibilityService.should_show_question(q, {"q1": "yes", "q2": 5}) is True
        assert VisibilityService.should_show_question(q, {"q1": "yes", "q2": 1}) is False

    def test_show_if_or(self):
        """Test that any show_if condition is enough with OR."""
        q = question(show_if=[cond("equals", "yes", "q1"), cond("greater_than", 3, "q2")], operator="OR")
        assert VisibilityService.should_show_question(q, {"q1": "no", "q2": 5}) is True
        assert VisibilityService.should_show_question(q, {"q1": "no", "q2": 1}) is False

    def test_hide_if(self):
        """Test that hide_if conditions hide the question."""
        q = question(hide_if=[cond("equals", "no", "q1")])
        assert VisibilityService.should_show_question(q, {"q1": "no"}) is False
        assert VisibilityService.should_show_question(q, {"q1": "yes"}) is True

    def test_show_and_hide_together(self):
        """Test that hide_if overrides a satisfied show_if."""
        q = question(
            show_if=[cond("is_not_empty", None, "q1")],
            hide_if=[cond("equals", "skip", "q1")],
        )
        assert VisibilityService.should_show_question(q, {"q1": "go"}) is True
        assert VisibilityService.should_show_question(q, {"q1": "skip"}) is False
        assert VisibilityService.should_show_question(q, {}) is False


class TestQuestionLists:
    """Tests for visible and dependent question helpers."""

    def test_get_visible_questions(self, sample_template):
        """Test filtering a template's questions by answers."""
        questions = sample_template.all_questions()

        visible = VisibilityService.get_visible_questions(questions, {"has_pain": "no"})
        assert [q.id for q in visible] == ["email", "has_pain"]

        visible = VisibilityService.get_visible_questions(questions, {"has_pain": "yes"})
        assert [q.id for q in visible] == ["email", "has_pain", "pain_level"]

    def test_get_dependent_questions(self, sample_template):
        """Test finding questions that depend on an answer."""
        questions = sample_template.all_questions()
        assert [q.id for q in VisibilityService.get_dependent_questions("has_pain", questions)] == ["pain_level"]
        assert VisibilityService.get_dependent_questions("email", questions) == []
