"""Unit tests for the answer validation service."""

import pytest

from questionnaire_logic.services.answer_validation import AnswerValidator, is_empty
from questionnaire_logic.schemas.questionnaire import AnswerRules, Question


def make_question(question_type="text", **kwargs) -> Question:
    return Question(
        id=kwargs.pop("id", "q1"),
        question_text=kwargs.pop("question_text", "Your answer"),
        question_type=question_type,
        **kwargs,
    )


class TestIsEmpty:
    """Tests for is_empty."""

    @pytest.mark.parametrize("value", [None, "", [], {}])
    def test_empty_values(self, value):
        assert is_empty(value) is True

    @pytest.mark.parametrize("value", [0, False, " ", ["a"], {"a": 1}])
    def test_non_empty_values(self, value):
        assert is_empty(value) is False


class TestValidateAnswer:
    """Tests for AnswerValidator.validate_answer."""

    def test_required_missing(self):
        """Test the required message uses the question text."""
        q = make_question(is_required=True, question_text="Full name")
        error = AnswerValidator.validate_answer(q, "")

        assert error.field == "q1"
        assert error.message == "Full name is required"
        assert error.type == "required"

    def test_optional_empty_skips_other_checks(self):
        """Test that an empty optional answer is valid."""
        q = make_question("email", validation_rules=AnswerRules(min_length=5))
        assert AnswerValidator.validate_answer(q, None) is None
        assert AnswerValidator.validate_answer(q, "") is None

    def test_length_rules(self):
        """Test min/max length on text answers."""
        q = make_question(validation_rules=AnswerRules(min_length=3, max_length=5))
        assert AnswerValidator.validate_answer(q, "ab").message == "Minimum 3 characters required"
        assert AnswerValidator.validate_answer(q, "abcdef").type == "length"
        assert AnswerValidator.validate_answer(q, "abcd") is None

    def test_range_rules(self):
        """Test min/max on numeric answers."""
        q = make_question("number", validation_rules=AnswerRules(min=18, max=99))
        assert AnswerValidator.validate_answer(q, 17).message == "Value must be at least 18"
        assert AnswerValidator.validate_answer(q, 100).message == "Value must be at most 99"
        assert AnswerValidator.validate_answer(q, 40) is None

    def test_selection_count_rules(self):
        """Test minFiles/maxFiles on list answers."""
        q = make_question("multiple_choice", validation_rules=AnswerRules(min_files=2, max_files=3))
        assert AnswerValidator.validate_answer(q, ["a"]).message == "Minimum 2 selections required"
        assert AnswerValidator.validate_answer(q, ["a", "b", "c", "d"]).message == "Maximum 3 selections allowed"
        assert AnswerValidator.validate_answer(q, ["a", "b"]) is None

    def test_pattern_uses_validation_message(self):
        """Test pattern failures with and without a custom message."""
        rules = AnswerRules(pattern=r"^[A-Z]{2}\d{4}$")
        q = make_question(validation_rules=rules)
        assert AnswerValidator.validate_answer(q, "ab12").message == "Invalid format"

        q = make_question(validation_rules=rules, validation_message="Use the code on your letter")
        assert AnswerValidator.validate_answer(q, "ab12").message == "Use the code on your letter"
        assert AnswerValidator.validate_answer(q, "AB1234") is None

    def test_rules_accept_storage_keys(self):
        """Test decoding answer rules from camelCase JSON."""
        q = Question.model_validate({
            "id": "q1",
            "question_text": "Name",
            "question_type": "text",
            "validation_rules": {"minLength": 2},
        })
        assert AnswerValidator.validate_answer(q, "a").type == "length"

    def test_email_type(self):
        """Test the email format check."""
        q = make_question("email")
        assert AnswerValidator.validate_answer(q, "patient@example.com") is None
        assert AnswerValidator.validate_answer(q, "patient@").message == "Please enter a valid email address"

    @pytest.mark.parametrize("phone", ["+44 (20) 7946-0958", "5551234567", "+905551234567"])
    def test_phone_type_valid(self, phone):
        """Test phone numbers with common separators."""
        assert AnswerValidator.validate_answer(make_question("phone"), phone) is None

    @pytest.mark.parametrize("phone", ["12345", "phone me", "+1 555 123"])
    def test_phone_type_invalid(self, phone):
        """Test malformed phone numbers."""
        error = AnswerValidator.validate_answer(make_question("phone"), phone)
        assert error.message == "Please enter a valid phone number"

    def test_number_type(self):
        """Test the number format check."""
        q = make_question("number")
        assert AnswerValidator.validate_answer(q, "42") is None
        assert AnswerValidator.validate_answer(q, 4.2) is None
        assert AnswerValidator.validate_answer(q, "forty").message == "Please enter a valid number"

    def test_date_types(self):
        """Test the date format check."""
        for question_type in ("date", "date_picker"):
            q = make_question(question_type)
            assert AnswerValidator.validate_answer(q, "2024-05-01") is None
            assert AnswerValidator.validate_answer(q, "2024-05-01T10:30:00") is None
            assert AnswerValidator.validate_answer(q, "next tuesday").message == "Please enter a valid date"


class TestPageChecks:
    """Tests for validate_answers and can_navigate_from_page."""

    def test_validate_answers(self, sample_template):
        """Test collecting errors for a page."""
        questions = sample_template.pages[0].questions
        errors = AnswerValidator.validate_answers(questions, {"email": "bad"})

        assert errors == {
            "email": "Please enter a valid email address",
            "has_pain": "Are you in pain? is required",
        }

    def test_validate_answers_all_valid(self, sample_template):
        """Test a fully valid page."""
        questions = sample_template.pages[0].questions
        answers = {"email": "a@b.co", "has_pain": "no"}
        assert AnswerValidator.validate_answers(questions, answers) == {}

    def test_can_navigate_from_page(self, sample_template):
        """Test that every required question must be answered."""
        questions = sample_template.pages[0].questions
        assert AnswerValidator.can_navigate_from_page(questions, {"email": "a@b.co"}) is False
        assert AnswerValidator.can_navigate_from_page(questions, {"email": "a@b.co", "has_pain": "no"}) is True

    def test_can_navigate_without_required_questions(self):
        """Test a page with only optional questions."""
        assert AnswerValidator.can_navigate_from_page([make_question()], {}) is True
