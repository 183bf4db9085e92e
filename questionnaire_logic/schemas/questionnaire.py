"""Pydantic schemas for questionnaire templates as rendered to patients.

A template is an ordered list of pages, each holding ordered questions.
Questions carry show_if/hide_if visibility logic and a flat set of answer
rules. Keys are snake_case here because these rows come straight from the
questionnaire tables, unlike the camelCase JSON column payloads.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from questionnaire_logic.schemas.base import JsonModel
from questionnaire_logic.schemas.rules import QuestionOption


class QuestionType(str, Enum):
    """Question types available to template authors."""
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PHONE = "phone"
    NUMBER = "number"
    DATE = "date"
    DATE_PICKER = "date_picker"
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOX = "checkbox"
    FILE_UPLOAD = "file_upload"
    PHOTO_UPLOAD = "photo_upload"
    PHOTO_GRID = "photo_grid"
    RATING = "rating"
    SLIDER = "slider"
    PAIN_SCALE = "pain_scale"
    TOOTH_CHART = "tooth_chart"
    BUDGET_RANGE = "budget_range"


class PageType(str, Enum):
    """Page layouts."""
    INTRO = "intro"
    STANDARD = "standard"
    PHOTO_UPLOAD = "photo_upload"
    SUMMARY = "summary"


class VisibilityOperator(str, Enum):
    """Operators a visibility condition can apply."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"


class AnswerRules(JsonModel):
    """Flat answer constraints checked before submission.

    Attributes:
        min_length: Minimum text length
        max_length: Maximum text length
        min: Minimum numeric value
        max: Maximum numeric value
        pattern: Regex the text answer must contain a match for
        min_files: Minimum number of selections/files
        max_files: Maximum number of selections/files
    """
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    min_files: Optional[int] = Field(None, ge=0)
    max_files: Optional[int] = Field(None, ge=0)


class LogicCondition(BaseModel):
    """A single show_if/hide_if condition.

    Attributes:
        question_id: Question whose answer is inspected
        operator: Comparison (see VisibilityOperator); unknown values never match
        value: Expected value
    """
    question_id: str = ""
    operator: str = ""
    value: Any = None


class VisibilityLogic(BaseModel):
    """Show/hide rules of a question.

    The question is visible when the show_if conditions hold (if any) and the
    hide_if conditions do not. ``operator`` combines the conditions within
    each list.
    """
    show_if: Optional[list[LogicCondition]] = None
    hide_if: Optional[list[LogicCondition]] = None
    operator: str = "AND"


class Question(BaseModel):
    """A question on a questionnaire page.

    Attributes:
        id: Unique question identifier
        page_id: Owning page
        question_text: Prompt shown to the patient
        question_type: Question type
        options: Options of choice-type questions
        validation_rules: Answer constraints
        is_required: Whether an answer must be given
        order_index: Position on the page
        conditional_logic: Visibility rules
        validation_message: Message used when the pattern check fails
        help_text: Hint rendered under the question
    """
    id: str = Field(..., min_length=1)
    page_id: str = ""
    question_text: str = Field(..., min_length=1)
    question_type: QuestionType
    options: Optional[list[QuestionOption]] = None
    validation_rules: Optional[AnswerRules] = None
    is_required: bool = False
    order_index: int = 0
    conditional_logic: Optional[VisibilityLogic] = None
    validation_message: Optional[str] = None
    help_text: Optional[str] = None


class Page(BaseModel):
    """A page of a questionnaire template."""
    id: str = Field(..., min_length=1)
    page_number: int = Field(..., ge=1)
    title: str
    description: Optional[str] = None
    page_type: PageType = PageType.STANDARD
    show_progress: bool = True
    allow_back_navigation: bool = True
    questions: list[Question] = Field(default_factory=list)


class QuestionnaireTemplate(BaseModel):
    """Complete questionnaire template.

    Attributes:
        id: Template identifier (matches the file name)
        name: Human-readable name
        description: What the questionnaire is for
        version: Semantic version
        pages: Pages in display order
    """
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    version: str = Field("1.0.0", pattern=r'^\d+\.\d+\.\d+$')
    pages: list[Page] = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_template_structure(self):
        """Reject duplicate page numbers and duplicate question ids."""
        page_numbers = [page.page_number for page in self.pages]
        if len(page_numbers) != len(set(page_numbers)):
            duplicates = sorted({n for n in page_numbers if page_numbers.count(n) > 1})
            raise ValueError(f"Duplicate page numbers found: {duplicates}")

        question_ids = [q.id for q in self.all_questions()]
        if len(question_ids) != len(set(question_ids)):
            duplicates = sorted({qid for qid in question_ids if question_ids.count(qid) > 1})
            raise ValueError(f"Duplicate question IDs found: {duplicates}")

        return self

    def all_questions(self) -> list[Question]:
        """Return every question, page by page in page_number order."""
        questions = []
        for page in sorted(self.pages, key=lambda p: p.page_number):
            questions.extend(sorted(page.questions, key=lambda q: q.order_index))
        return questions

    def get_question(self, question_id: str) -> Optional[Question]:
        """Get question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question if found, None otherwise
        """
        for question in self.all_questions():
            if question.id == question_id:
                return question
        return None


@dataclass
class AnswerError:
    """A failed answer check.

    Attributes:
        field: Question id the error belongs to
        message: Message shown to the patient
        type: One of required, format, length, range, custom
    """
    field: str
    message: str
    type: str
