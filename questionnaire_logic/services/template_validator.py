"""Questionnaire template validator for structural analysis.

This module validates the wiring of a template beyond what the schemas can
check on their own:
- Visibility conditions reference existing questions and are complete
- No question's visibility depends on its own answer
- Option ids are unique within each question
- Conditions that look ahead to later questions are reported as warnings
"""

from collections.abc import Iterable

from questionnaire_logic.schemas.questionnaire import (
    Question,
    QuestionType,
    QuestionnaireTemplate,
    VisibilityLogic,
    VisibilityOperator,
)
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)

VALUELESS_OPERATORS = frozenset({
    VisibilityOperator.IS_EMPTY.value,
    VisibilityOperator.IS_NOT_EMPTY.value,
})

CHOICE_TYPES = frozenset({
    QuestionType.SINGLE_CHOICE,
    QuestionType.MULTIPLE_CHOICE,
    QuestionType.CHECKBOX,
})


class TemplateStructureError(Exception):
    """Raised when template structure is invalid.

    Attributes:
        errors: Every problem found, in template order
    """

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("Invalid template structure: " + "; ".join(errors))


class TemplateValidator:
    """Service for validating questionnaire template structure."""

    @staticmethod
    def validate(template: QuestionnaireTemplate) -> None:
        """Validate template structure.

        Checks:
        1. Every show_if/hide_if condition names an existing question, an
           operator and a value
        2. No question's visibility depends on itself
        3. Option ids are unique within each question

        Conditions on questions that come later in the template are allowed
        but logged as warnings, since they cannot be answered yet when the
        question is rendered.

        Args:
            template: Template to validate

        Raises:
            TemplateStructureError: If any check fails

        Example:
            >>> template = TemplateParser.parse_text(document)
            >>> TemplateValidator.validate(template)  # Raises if invalid
        """
        questions = template.all_questions()
        position = {q.id: index for index, q in enumerate(questions)}
        errors = []

        for question in questions:
            logic = question.conditional_logic
            if logic is not None:
                for problem in TemplateValidator.check_logic(logic, questions):
                    errors.append(f"Question '{question.id}': {problem}")

                for referenced in TemplateValidator._referenced_ids(logic):
                    if referenced == question.id:
                        errors.append(f"Question '{question.id}': visibility depends on its own answer")
                    elif position.get(referenced, -1) > position[question.id]:
                        logger.warning(
                            f"Question '{question.id}' depends on later question '{referenced}'",
                            extra={"template_id": template.id},
                        )

            errors.extend(TemplateValidator._check_options(question))

        if errors:
            logger.error(
                f"Template {template.id} has {len(errors)} structural problems",
                extra={"template_id": template.id},
            )
            raise TemplateStructureError(errors)

        logger.info(f"Template {template.id} validated successfully", extra={"template_id": template.id})

    @staticmethod
    def check_logic(logic: VisibilityLogic, questions: Iterable[Question]) -> list[str]:
        """Check a question's visibility logic against the known questions.

        Args:
            logic: Visibility logic to check
            questions: Questions the conditions may reference

        Returns:
            Problem descriptions; empty when the logic is valid

        Example:
            >>> logic = VisibilityLogic(show_if=[LogicCondition(question_id="nope", operator="equals", value=1)])
            >>> TemplateValidator.check_logic(logic, [])
            ['show_if condition 1: Question ID "nope" does not exist']
        """
        question_ids = {q.id for q in questions}
        problems = []

        for kind, conditions in (("show_if", logic.show_if), ("hide_if", logic.hide_if)):
            for index, condition in enumerate(conditions or [], start=1):
                if condition.question_id not in question_ids:
                    problems.append(
                        f'{kind} condition {index}: Question ID "{condition.question_id}" does not exist'
                    )
                if not condition.operator:
                    problems.append(f"{kind} condition {index}: Missing operator")
                if condition.value is None and condition.operator not in VALUELESS_OPERATORS:
                    problems.append(f"{kind} condition {index}: Missing value")

        return problems

    @staticmethod
    def _referenced_ids(logic: VisibilityLogic) -> list[str]:
        """Question ids referenced by show_if and hide_if conditions."""
        return [c.question_id for c in [*(logic.show_if or []), *(logic.hide_if or [])]]

    @staticmethod
    def _check_options(question: Question) -> list[str]:
        """Report duplicate option ids; warn on choice questions without options."""
        if not question.options:
            if question.question_type in CHOICE_TYPES:
                logger.warning(f"Choice question '{question.id}' has no options")
            return []

        seen = set()
        duplicates = []
        for option in question.options:
            if option.id in seen and option.id not in duplicates:
                duplicates.append(option.id)
            seen.add(option.id)

        if duplicates:
            return [f"Question '{question.id}': duplicate option ids {duplicates}"]
        return []
