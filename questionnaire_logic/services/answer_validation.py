"""Answer validation service for questionnaire pages.

This module checks patient answers against each question's required flag,
its flat answer rules and the format implied by its question type, and
decides whether the patient may leave the current page.
"""

import math
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional

from questionnaire_logic.schemas.questionnaire import (
    AnswerError,
    AnswerRules,
    Question,
    QuestionType,
)
from questionnaire_logic.services.coercion import is_number, to_number, to_text
from questionnaire_logic.services.validation import EMAIL_PATTERN
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)

PHONE_ANSWER_PATTERN = r"^[+]?\d{10,15}$"
_PHONE_SEPARATORS = re.compile(r"[\s\-()]")


def is_empty(value: Any) -> bool:
    """True for None, empty text, empty lists and empty dicts.

    Example:
        >>> is_empty([])
        True
        >>> is_empty(0)
        False
    """
    if value is None or value == "":
        return True
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


class AnswerValidator:
    """Service for validating answers to questionnaire questions."""

    @staticmethod
    def validate_answer(question: Question, value: Any) -> Optional[AnswerError]:
        """Validate one answer.

        Checks run in this order: required, answer rules, question type
        format. An empty answer to an optional question is always valid.

        Args:
            question: Question being answered
            value: Patient's answer

        Returns:
            AnswerError for the first failed check, or None

        Example:
            >>> q = Question(id="q1", question_text="Email", question_type="email")
            >>> AnswerValidator.validate_answer(q, "not-an-email").message
            'Please enter a valid email address'
        """
        if question.is_required and is_empty(value):
            return AnswerError(
                field=question.id,
                message=f"{question.question_text} is required",
                type="required",
            )

        if is_empty(value):
            return None

        if question.validation_rules is not None:
            error = AnswerValidator._check_rules(question, value, question.validation_rules)
            if error is not None:
                return error

        return AnswerValidator._check_type(question, value)

    @staticmethod
    def validate_answers(questions: Iterable[Question], answers: Mapping[str, Any]) -> dict[str, str]:
        """Validate answers to several questions.

        Args:
            questions: Questions to check (usually the visible ones on a page)
            answers: Answers keyed by question id

        Returns:
            Error message per failing question id; empty when all pass
        """
        errors = {}
        for question in questions:
            error = AnswerValidator.validate_answer(question, answers.get(question.id))
            if error is not None:
                errors[question.id] = error.message
        if errors:
            logger.debug(f"Answer validation failed for {sorted(errors)}")
        return errors

    @staticmethod
    def can_navigate_from_page(questions: Iterable[Question], answers: Mapping[str, Any]) -> bool:
        """True when every required question has a non-empty answer."""
        return all(
            not is_empty(answers.get(q.id))
            for q in questions
            if q.is_required
        )

    @staticmethod
    def _check_rules(question: Question, value: Any, rules: AnswerRules) -> Optional[AnswerError]:
        """Apply length, range, selection count and pattern rules."""
        if isinstance(value, str):
            if rules.min_length and len(value) < rules.min_length:
                return AnswerError(
                    field=question.id,
                    message=f"Minimum {rules.min_length} characters required",
                    type="length",
                )
            if rules.max_length and len(value) > rules.max_length:
                return AnswerError(
                    field=question.id,
                    message=f"Maximum {rules.max_length} characters allowed",
                    type="length",
                )

        if is_number(value):
            if rules.min is not None and value < rules.min:
                return AnswerError(
                    field=question.id,
                    message=f"Value must be at least {to_text(rules.min)}",
                    type="range",
                )
            if rules.max is not None and value > rules.max:
                return AnswerError(
                    field=question.id,
                    message=f"Value must be at most {to_text(rules.max)}",
                    type="range",
                )

        if isinstance(value, list):
            if rules.min_files and len(value) < rules.min_files:
                return AnswerError(
                    field=question.id,
                    message=f"Minimum {rules.min_files} selections required",
                    type="range",
                )
            if rules.max_files and len(value) > rules.max_files:
                return AnswerError(
                    field=question.id,
                    message=f"Maximum {rules.max_files} selections allowed",
                    type="range",
                )

        if rules.pattern and isinstance(value, str):
            try:
                matched = re.search(rules.pattern, value)
            except re.error as e:
                logger.warning(
                    f"Invalid answer pattern {rules.pattern!r}: {e}",
                    extra={"question_id": question.id},
                )
                return None
            if matched is None:
                return AnswerError(
                    field=question.id,
                    message=question.validation_message or "Invalid format",
                    type="format",
                )

        return None

    @staticmethod
    def _check_type(question: Question, value: Any) -> Optional[AnswerError]:
        """Apply the format check implied by the question type."""
        question_type = question.question_type

        if question_type == QuestionType.EMAIL and isinstance(value, str):
            if not re.search(EMAIL_PATTERN, value):
                return AnswerError(
                    field=question.id,
                    message="Please enter a valid email address",
                    type="format",
                )

        elif question_type == QuestionType.PHONE and isinstance(value, str):
            cleaned = _PHONE_SEPARATORS.sub("", value)
            if not re.search(PHONE_ANSWER_PATTERN, cleaned):
                return AnswerError(
                    field=question.id,
                    message="Please enter a valid phone number",
                    type="format",
                )

        elif question_type == QuestionType.NUMBER:
            if math.isnan(to_number(value)):
                return AnswerError(
                    field=question.id,
                    message="Please enter a valid number",
                    type="format",
                )

        elif question_type in (QuestionType.DATE, QuestionType.DATE_PICKER) and isinstance(value, str):
            try:
                datetime.fromisoformat(value)
            except ValueError:
                return AnswerError(
                    field=question.id,
                    message="Please enter a valid date",
                    type="format",
                )

        return None
