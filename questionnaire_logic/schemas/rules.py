"""Pydantic schemas for per-question rule blobs.

This module defines the structures stored in a question's JSON columns:
validation rules, conditional logic trees and choice options. Kind fields
(``type``, ``condition``, ``action``, ``operator``) are kept as plain strings
so that partially authored drafts with unknown kinds still decode; the
engines compare them against the enums below and ignore anything else.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import ConfigDict, Field

from questionnaire_logic.schemas.base import JsonModel


class RuleType(str, Enum):
    """Declared validation rule kinds."""
    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    PATTERN = "pattern"
    MIN = "min"
    MAX = "max"
    EMAIL = "email"
    PHONE = "phone"
    CUSTOM = "custom"


class ConditionKind(str, Enum):
    """Comparisons available to a conditional logic node."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IN = "in"
    NOT_IN = "not_in"


class LogicAction(str, Enum):
    """What the caller does with a question or page when a node holds."""
    SHOW = "show"
    HIDE = "hide"
    REQUIRE = "require"
    SKIP = "skip"


class LogicOperator(str, Enum):
    """How a node combines with its children."""
    AND = "and"
    OR = "or"


class ValidationRule(JsonModel):
    """A single declarative validation rule.

    Attributes:
        type: Rule kind (see RuleType); unknown kinds are ignored
        value: Rule parameter (length, bound, regex source, ...)
        message: Custom error message shown when the rule fails
    """
    type: str = Field(..., description="Rule kind")
    value: Any = Field(None, description="Rule parameter")
    message: Optional[str] = Field(None, description="Custom error message")


class ConditionalLogic(JsonModel):
    """A node in a conditional logic tree.

    Missing or null fields fall back to values that make the node evaluate
    to ``False`` rather than failing to decode. Keys the engine does not
    know are kept so a stored draft round-trips unchanged.

    Attributes:
        condition: Comparison kind (see ConditionKind)
        question_id: Id of the question whose answer is compared
        value: Value the answer is compared against
        action: Effect on the owning question or page (see LogicAction)
        operator: How this node combines with its children (default AND)
        children: Child nodes
    """
    model_config = ConfigDict(extra="allow")

    condition: Optional[str] = Field("", description="Comparison kind")
    question_id: Optional[str] = Field("", description="Referenced question id")
    value: Any = Field(None, description="Comparison operand")
    action: Optional[str] = Field(LogicAction.SHOW.value, description="Action when the node holds")
    operator: Optional[str] = Field(None, description="and / or")
    children: Optional[list["ConditionalLogic"]] = Field(None, description="Child nodes")


ConditionalLogic.model_rebuild()


class QuestionOption(JsonModel):
    """A selectable option of a choice-type question.

    Attributes:
        id: Identifier, unique within one option set
        label: Text shown to the patient
        value: Value stored with the answer
        order: Display/storage position
        is_other: Marks the free-text "Other" option
    """
    id: str = Field(..., min_length=1, description="Option identifier")
    label: str = Field(..., description="Display label")
    value: str = Field(..., description="Stored value")
    order: Optional[int] = Field(None, description="Display position")
    is_other: Optional[bool] = Field(None, description="Free-text 'Other' option")


class QuestionOptionDraft(JsonModel):
    """An option that has not been assigned an id yet."""
    label: str
    value: str
    order: Optional[int] = None
    is_other: Optional[bool] = None
