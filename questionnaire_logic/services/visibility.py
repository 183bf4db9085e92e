"""Question visibility service for the patient-facing questionnaire.

Questions on a page carry ``show_if``/``hide_if`` condition lists. This
module decides which questions are visible for the current answers and
which questions depend on a given answer.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from questionnaire_logic.schemas.questionnaire import (
    LogicCondition,
    Question,
    VisibilityOperator,
)
from questionnaire_logic.services.coercion import (
    contains_value,
    strict_equals,
    to_js_string,
    to_number,
    to_text,
)
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)


def _is_blank(value: Any) -> bool:
    if isinstance(value, list):
        return len(value) == 0
    return value is None or value == ""


class VisibilityService:
    """Service for evaluating show_if/hide_if question logic."""

    @staticmethod
    def evaluate_condition(condition: LogicCondition, answers: Mapping[str, Any]) -> bool:
        """Evaluate one visibility condition against the answers.

        Multi-select answers (lists) match ``equals`` when they include the
        expected value and ``contains`` when any item contains it.

        Args:
            condition: Condition to evaluate
            answers: Current answers keyed by question id

        Returns:
            Whether the condition holds; unknown operators never hold

        Example:
            >>> cond = LogicCondition(question_id="pain", operator="greater_than", value=5)
            >>> VisibilityService.evaluate_condition(cond, {"pain": 7})
            True
        """
        actual = answers.get(condition.question_id)
        expected = condition.value
        operator = condition.operator

        if operator == VisibilityOperator.EQUALS:
            if isinstance(actual, list):
                return contains_value(actual, expected)
            return strict_equals(actual, expected)

        if operator == VisibilityOperator.NOT_EQUALS:
            if isinstance(actual, list):
                return not contains_value(actual, expected)
            return not strict_equals(actual, expected)

        if operator == VisibilityOperator.CONTAINS:
            needle = to_js_string(expected, "value" in condition.model_fields_set).lower()
            if isinstance(actual, list):
                return any(needle in to_js_string(item).lower() for item in actual)
            return needle in (to_text(actual) if actual else "").lower()

        if operator in (VisibilityOperator.GREATER_THAN, VisibilityOperator.LESS_THAN):
            left = to_number(actual)
            right = to_number(expected)
            if math.isnan(left) or math.isnan(right):
                return False
            if operator == VisibilityOperator.GREATER_THAN:
                return left > right
            return left < right

        if operator == VisibilityOperator.IS_EMPTY:
            return _is_blank(actual)

        if operator == VisibilityOperator.IS_NOT_EMPTY:
            return not _is_blank(actual)

        logger.warning(
            f"Unknown visibility operator: {operator!r}",
            extra={"question_id": condition.question_id},
        )
        return False

    @staticmethod
    def should_show_question(question: Question, answers: Mapping[str, Any]) -> bool:
        """Decide whether a question is visible.

        Questions without logic are always shown. Otherwise the show_if
        conditions (if any) must hold and the hide_if conditions (if any)
        must not, each list combined with the logic's operator (AND/OR).

        Args:
            question: Question to check
            answers: Current answers keyed by question id

        Returns:
            True if the question should be rendered
        """
        logic = question.conditional_logic
        if logic is None:
            return True

        combine = any if logic.operator.upper() == "OR" else all

        if logic.show_if:
            should_show = combine(
                VisibilityService.evaluate_condition(c, answers) for c in logic.show_if
            )
            if not should_show:
                return False

        if logic.hide_if:
            should_hide = combine(
                VisibilityService.evaluate_condition(c, answers) for c in logic.hide_if
            )
            if should_hide:
                logger.debug(f"Question {question.id} hidden by hide_if")
                return False

        return True

    @staticmethod
    def get_visible_questions(questions: Iterable[Question], answers: Mapping[str, Any]) -> list[Question]:
        """Filter questions down to the ones visible for the answers."""
        return [q for q in questions if VisibilityService.should_show_question(q, answers)]

    @staticmethod
    def get_dependent_questions(question_id: str, questions: Iterable[Question]) -> list[Question]:
        """Questions whose visibility depends on the answer to ``question_id``.

        Args:
            question_id: Question whose answer changed
            questions: Questions to search

        Returns:
            Questions with a show_if or hide_if condition on question_id
        """
        dependents = []
        for question in questions:
            logic = question.conditional_logic
            if logic is None:
                continue
            conditions = [*(logic.show_if or []), *(logic.hide_if or [])]
            if any(c.question_id == question_id for c in conditions):
                dependents.append(question)
        return dependents
