"""Questionnaire template parsing and validation.

This module turns a template document, either already decoded or as
YAML/JSON text handed over by the caller, into a validated
QuestionnaireTemplate. Reading the document from a database, API or file is
left to the caller.
"""

from collections.abc import Mapping
from typing import Any

import yaml
from pydantic import ValidationError

from questionnaire_logic.schemas.questionnaire import QuestionnaireTemplate
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)


class TemplateValidationError(Exception):
    """Raised when a template document fails to parse or validate."""
    pass


class TemplateParser:
    """Service for building questionnaire templates from documents."""

    @staticmethod
    def parse(data: Mapping[str, Any]) -> QuestionnaireTemplate:
        """Validate a decoded template document.

        Args:
            data: Template document, e.g. the row payload returned by the API

        Returns:
            Validated QuestionnaireTemplate

        Raises:
            TemplateValidationError: If the document is not a mapping or
                does not match the template schema

        Example:
            >>> template = TemplateParser.parse(row["structure"])
            >>> print(template.name)
            'Dental Intake'
        """
        if not isinstance(data, Mapping):
            raise TemplateValidationError(
                f"Template document must be a mapping, got {type(data).__name__}"
            )

        template_id = data.get("id", "<unknown>")
        try:
            template = QuestionnaireTemplate.model_validate(dict(data))
        except ValidationError as e:
            logger.error(f"Validation error for template {template_id}: {e}")
            raise TemplateValidationError(f"Validation failed for template '{template_id}': {e}")

        logger.info(
            f"Parsed template: {template.id} (version {template.version})",
            extra={"template_id": template.id},
        )
        return template

    @staticmethod
    def parse_text(text: str) -> QuestionnaireTemplate:
        """Parse a template from YAML or JSON text.

        JSON is read with the YAML parser, which accepts it as-is.

        Args:
            text: Template document as text

        Returns:
            Validated QuestionnaireTemplate

        Raises:
            TemplateValidationError: If the text cannot be parsed or validated
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            logger.error(f"Parse error for template document: {e}")
            raise TemplateValidationError(f"Invalid YAML/JSON template document: {e}")

        return TemplateParser.parse(data)
