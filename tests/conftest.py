"""Pytest configuration and shared fixtures.

This module provides fixtures and configuration used across all tests.
"""

import os

import pytest

# Set environment for tests BEFORE importing library modules
os.environ.setdefault("QUESTIONNAIRE_ENVIRONMENT", "development")
os.environ.setdefault("QUESTIONNAIRE_LOG_LEVEL", "DEBUG")

from questionnaire_logic.config import get_settings
from questionnaire_logic.schemas import (
    LogicCondition,
    Page,
    Question,
    QuestionOption,
    QuestionnaireTemplate,
    VisibilityLogic,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_options() -> list[QuestionOption]:
    """Provide a small option set with an 'Other' option.

    Returns:
        list[QuestionOption]: Options in display order
    """
    return [
        QuestionOption(id="opt_a", label="Implants", value="implants", order=0),
        QuestionOption(id="opt_b", label="Veneers", value="veneers", order=1),
        QuestionOption(id="opt_c", label="Other", value="other", order=2, is_other=True),
    ]


@pytest.fixture
def sample_template() -> QuestionnaireTemplate:
    """Provide a two-page dental intake template with visibility logic.

    Returns:
        QuestionnaireTemplate: Valid template
    """
    return QuestionnaireTemplate(
        id="dental_intake",
        name="Dental Intake",
        version="1.0.0",
        pages=[
            Page(
                id="page_1",
                page_number=1,
                title="About you",
                questions=[
                    Question(
                        id="email",
                        page_id="page_1",
                        question_text="Email address",
                        question_type="email",
                        is_required=True,
                        order_index=0,
                    ),
                    Question(
                        id="has_pain",
                        page_id="page_1",
                        question_text="Are you in pain?",
                        question_type="single_choice",
                        is_required=True,
                        order_index=1,
                        options=[
                            QuestionOption(id="yes", label="Yes", value="yes"),
                            QuestionOption(id="no", label="No", value="no"),
                        ],
                    ),
                ],
            ),
            Page(
                id="page_2",
                page_number=2,
                title="Pain",
                questions=[
                    Question(
                        id="pain_level",
                        page_id="page_2",
                        question_text="Pain level",
                        question_type="pain_scale",
                        is_required=True,
                        order_index=0,
                        conditional_logic=VisibilityLogic(
                            show_if=[LogicCondition(question_id="has_pain", operator="equals", value="yes")],
                        ),
                    ),
                ],
            ),
        ],
    )
