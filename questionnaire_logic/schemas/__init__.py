"""Pydantic schemas for data validation.

This package contains the models for question rule blobs, question type
configuration and questionnaire templates.
"""

from questionnaire_logic.schemas.rules import (
    RuleType,
    ConditionKind,
    LogicAction,
    LogicOperator,
    ValidationRule,
    ConditionalLogic,
    QuestionOption,
    QuestionOptionDraft,
)
from questionnaire_logic.schemas.configs import (
    PhotoType,
    Resolution,
    PhotoUploadConfig,
    SliderConfig,
    RatingConfig,
)
from questionnaire_logic.schemas.questionnaire import (
    QuestionType,
    PageType,
    VisibilityOperator,
    AnswerRules,
    LogicCondition,
    VisibilityLogic,
    Question,
    Page,
    QuestionnaireTemplate,
    AnswerError,
)

__all__ = [
    "RuleType",
    "ConditionKind",
    "LogicAction",
    "LogicOperator",
    "ValidationRule",
    "ConditionalLogic",
    "QuestionOption",
    "QuestionOptionDraft",
    "PhotoType",
    "Resolution",
    "PhotoUploadConfig",
    "SliderConfig",
    "RatingConfig",
    "QuestionType",
    "PageType",
    "VisibilityOperator",
    "AnswerRules",
    "LogicCondition",
    "VisibilityLogic",
    "Question",
    "Page",
    "QuestionnaireTemplate",
    "AnswerError",
]
