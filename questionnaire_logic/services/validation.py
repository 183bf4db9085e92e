"""Validation rule engine for question answers.

This module compiles a question's declarative validation rules into the
canonical rule-set stored in the ``validation_rules`` JSON column, restores
rules from that column, and validates single answers against a rule list.

The engine never raises on malformed rules: unknown kinds and unusable rule
values are skipped (and logged) so that half-finished drafts authored in the
admin UI cannot break a live questionnaire.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from questionnaire_logic.schemas.rules import RuleType, ValidationRule
from questionnaire_logic.services.coercion import is_number, to_number, to_text
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
PHONE_PATTERN = r"^[+]?[1-9][0-9]{0,15}$"

RuleInput = Union[ValidationRule, Mapping[str, Any]]
CompiledRuleSet = dict[str, dict[str, Any]]


class ValidationRuleEngine:
    """Service for compiling, restoring and applying validation rules."""

    @staticmethod
    def compile(rules: Iterable[RuleInput]) -> CompiledRuleSet:
        """Compile a rule list into the canonical rule-set.

        Rules are processed in order and keyed by their effective kind, so a
        later rule of the same kind replaces an earlier one. ``email`` and
        ``phone`` compile into a ``pattern`` entry; a rule list holding both
        ``email`` and ``pattern`` keeps whichever comes last.

        Args:
            rules: ValidationRule models or raw rule dicts

        Returns:
            Mapping of rule kind to ``{"value": ..., "message": ...}``

        Example:
            >>> ValidationRuleEngine.compile([ValidationRule(type="minLength", value=3)])
            {'minLength': {'value': 3, 'message': 'Minimum 3 characters'}}
        """
        compiled: CompiledRuleSet = {}

        for rule in ValidationRuleEngine._coerce(rules):
            kind = rule.type
            shown = to_text(rule.value)

            if kind == RuleType.REQUIRED:
                compiled["required"] = {
                    "value": True,
                    "message": rule.message or "This field is required",
                }
            elif kind == RuleType.MIN_LENGTH:
                compiled["minLength"] = {
                    "value": rule.value,
                    "message": rule.message or f"Minimum {shown} characters",
                }
            elif kind == RuleType.MAX_LENGTH:
                compiled["maxLength"] = {
                    "value": rule.value,
                    "message": rule.message or f"Maximum {shown} characters",
                }
            elif kind == RuleType.PATTERN:
                compiled["pattern"] = {
                    "value": rule.value,
                    "message": rule.message or "Invalid format",
                }
            elif kind == RuleType.MIN:
                compiled["min"] = {
                    "value": rule.value,
                    "message": rule.message or f"Minimum value: {shown}",
                }
            elif kind == RuleType.MAX:
                compiled["max"] = {
                    "value": rule.value,
                    "message": rule.message or f"Maximum value: {shown}",
                }
            elif kind == RuleType.EMAIL:
                compiled["pattern"] = {
                    "value": EMAIL_PATTERN,
                    "message": rule.message or "Invalid email format",
                }
            elif kind == RuleType.PHONE:
                compiled["pattern"] = {
                    "value": PHONE_PATTERN,
                    "message": rule.message or "Invalid phone format",
                }
            elif kind == RuleType.CUSTOM:
                compiled["custom"] = {"value": rule.value, "message": rule.message}
            else:
                logger.debug(f"Skipping unknown validation rule type: {kind!r}")

        return compiled

    @staticmethod
    def decompile(compiled: Optional[Mapping[str, Any]]) -> list[ValidationRule]:
        """Restore a rule list from a compiled rule-set.

        One rule is produced per entry that carries a ``value`` key. Whether a
        ``pattern`` entry came from an ``email``/``phone`` rule cannot be
        recovered; it comes back as a ``pattern`` rule.

        Args:
            compiled: Stored rule-set (may be None for questions without rules)

        Returns:
            List of ValidationRule in stored key order
        """
        if not compiled:
            return []

        rules = []
        for kind, entry in compiled.items():
            if isinstance(entry, Mapping) and "value" in entry:
                rules.append(ValidationRule(
                    type=kind,
                    value=entry["value"],
                    message=entry.get("message"),
                ))
        return rules

    @staticmethod
    def validate(value: Any, rules: Iterable[RuleInput]) -> Optional[str]:
        """Validate a single answer against a rule list.

        Rules are checked in list order and the message of the first violated
        rule is returned. Only required, minLength, maxLength, min, max and
        pattern are checked; email/phone must be compiled into a pattern
        first, and custom rules are left to the caller.

        Type mismatches are not failures: length and pattern checks only
        apply to strings, min/max only to numbers.

        Args:
            value: Answer to validate
            rules: ValidationRule models or raw rule dicts

        Returns:
            Error message of the first violated rule, or None if all pass

        Example:
            >>> rules = [ValidationRule(type="required"), ValidationRule(type="minLength", value=5)]
            >>> ValidationRuleEngine.validate("", rules)
            'This field is required'
            >>> ValidationRuleEngine.validate(42, [ValidationRule(type="minLength", value=5)]) is None
            True
        """
        for rule in ValidationRuleEngine._coerce(rules):
            error = ValidationRuleEngine._check(value, rule)
            if error is not None:
                logger.debug(f"Validation failed on rule '{rule.type}': {error}")
                return error
        return None

    @staticmethod
    def validate_compiled(value: Any, compiled: Optional[Mapping[str, Any]]) -> Optional[str]:
        """Validate an answer against a stored compiled rule-set.

        Args:
            value: Answer to validate
            compiled: Rule-set as produced by compile()

        Returns:
            Error message of the first violated rule, or None
        """
        return ValidationRuleEngine.validate(value, ValidationRuleEngine.decompile(compiled))

    @staticmethod
    def _check(value: Any, rule: ValidationRule) -> Optional[str]:
        """Apply one rule; return its message if violated."""
        kind = rule.type
        shown = to_text(rule.value)

        if kind == RuleType.REQUIRED:
            if (
                not value
                or (isinstance(value, str) and value.strip() == "")
                or (isinstance(value, float) and math.isnan(value))
            ):
                return rule.message or "This field is required"

        elif kind in (RuleType.MIN_LENGTH, RuleType.MAX_LENGTH):
            if not isinstance(value, str):
                return None
            bound = ValidationRuleEngine._bound(rule)
            if bound is None:
                return None
            if kind == RuleType.MIN_LENGTH and len(value) < bound:
                return rule.message or f"Minimum {shown} characters required"
            if kind == RuleType.MAX_LENGTH and len(value) > bound:
                return rule.message or f"Maximum {shown} characters allowed"

        elif kind in (RuleType.MIN, RuleType.MAX):
            if not is_number(value):
                return None
            bound = ValidationRuleEngine._bound(rule)
            if bound is None:
                return None
            if kind == RuleType.MIN and value < bound:
                return rule.message or f"Minimum value: {shown}"
            if kind == RuleType.MAX and value > bound:
                return rule.message or f"Maximum value: {shown}"

        elif kind == RuleType.PATTERN:
            if not isinstance(value, str):
                return None
            try:
                matched = re.search(rule.value, value)
            except (re.error, TypeError) as e:
                logger.warning(f"Skipping pattern rule with invalid regex {rule.value!r}: {e}")
                return None
            if matched is None:
                return rule.message or "Invalid format"

        return None

    @staticmethod
    def _bound(rule: ValidationRule) -> Optional[float]:
        """Numeric rule value, or None when it cannot be used."""
        bound = to_number(rule.value)
        if math.isnan(bound) or rule.value is None:
            logger.warning(f"Skipping {rule.type} rule with non-numeric value {rule.value!r}")
            return None
        return bound

    @staticmethod
    def _coerce(rules: Optional[Iterable[RuleInput]]) -> Iterable[ValidationRule]:
        """Yield ValidationRule models, skipping entries that cannot decode."""
        for raw in rules or []:
            if isinstance(raw, ValidationRule):
                yield raw
                continue
            try:
                yield ValidationRule.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping malformed validation rule {raw!r}: {e}")
