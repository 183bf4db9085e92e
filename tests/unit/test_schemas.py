"""Unit tests for questionnaire and rule schemas."""

import pytest
from pydantic import ValidationError

from questionnaire_logic.schemas import (
    ConditionalLogic,
    Page,
    Question,
    QuestionOption,
    QuestionnaireTemplate,
    ValidationRule,
)


class TestRuleSchemas:
    """Tests for the JSON column models."""

    def test_storage_keys_are_camel_case(self):
        """Test that models read and write camelCase keys."""
        node = ConditionalLogic.model_validate({"condition": "equals", "questionId": "q1", "value": 3})
        assert node.question_id == "q1"
        assert node.to_json() == {"condition": "equals", "questionId": "q1", "value": 3, "action": "show"}

    def test_field_names_accepted(self):
        """Test that snake_case names also populate fields."""
        option = QuestionOption(id="o1", label="One", value="1", is_other=True)
        assert option.to_json() == {"id": "o1", "label": "One", "value": "1", "isOther": True}

    def test_unknown_rule_type_decodes(self):
        """Test that drafts with unknown kinds still decode."""
        rule = ValidationRule.model_validate({"type": "luhn", "value": None})
        assert rule.type == "luhn"
        assert rule.message is None

    def test_nested_children(self):
        """Test decoding a logic tree."""
        node = ConditionalLogic.model_validate({
            "condition": "equals",
            "questionId": "q1",
            "value": "a",
            "operator": "or",
            "children": [{"condition": "less_than", "questionId": "q2", "value": 5}],
        })
        assert node.children[0].question_id == "q2"
        assert node.children[0].children is None

    def test_option_requires_id(self):
        """Test that options without an id are rejected."""
        with pytest.raises(ValidationError):
            QuestionOption(id="", label="Blank", value="")


class TestQuestionnaireTemplate:
    """Tests for QuestionnaireTemplate validation."""

    def make_page(self, number, *question_ids):
        return Page(
            id=f"p{number}",
            page_number=number,
            title=f"Page {number}",
            questions=[
                Question(id=qid, question_text=qid, question_type="text", order_index=i)
                for i, qid in enumerate(question_ids)
            ],
        )

    def test_duplicate_page_numbers(self):
        """Test that page numbers must be unique."""
        with pytest.raises(ValidationError, match="Duplicate page numbers"):
            QuestionnaireTemplate(id="t", name="T", pages=[self.make_page(1, "a"), self.make_page(1, "b")])

    def test_duplicate_question_ids(self):
        """Test that question ids must be unique across pages."""
        with pytest.raises(ValidationError, match="Duplicate question IDs"):
            QuestionnaireTemplate(id="t", name="T", pages=[self.make_page(1, "a"), self.make_page(2, "a")])

    def test_requires_pages(self):
        """Test that a template needs at least one page."""
        with pytest.raises(ValidationError):
            QuestionnaireTemplate(id="t", name="T", pages=[])

    def test_invalid_version(self):
        """Test that the version must be semantic."""
        with pytest.raises(ValidationError):
            QuestionnaireTemplate(id="t", name="T", version="v1", pages=[self.make_page(1, "a")])

    def test_unknown_question_type(self):
        """Test that question types are checked."""
        with pytest.raises(ValidationError):
            Question(id="a", question_text="A", question_type="hologram")

    def test_all_questions_order(self):
        """Test page then order_index ordering."""
        template = QuestionnaireTemplate(
            id="t",
            name="T",
            pages=[self.make_page(2, "c", "d"), self.make_page(1, "a", "b")],
        )
        assert [q.id for q in template.all_questions()] == ["a", "b", "c", "d"]
        assert template.get_question("d").order_index == 1
        assert template.get_question("zzz") is None
