"""Conditional logic engine for show/hide/require/skip rules.

This module wraps and unwraps the ``conditional_logic`` JSON column and
evaluates its condition trees against the current answer map. Evaluation is
a pure function of (nodes, answers); callers re-evaluate whenever an answer
changes.
"""

import copy
import math
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from questionnaire_logic.schemas.rules import (
    ConditionKind,
    ConditionalLogic,
    LogicAction,
    LogicOperator,
)
from questionnaire_logic.services.coercion import (
    contains_value,
    strict_equals,
    to_js_string,
    to_number,
)
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)

LOGIC_SCHEMA_VERSION = 1

NodeInput = Union[ConditionalLogic, Mapping[str, Any]]


class ConditionalLogicEngine:
    """Service for evaluating conditional logic trees."""

    @staticmethod
    def wrap(rules: Iterable[NodeInput]) -> dict[str, Any]:
        """Wrap condition nodes into the stored envelope.

        Nodes are stored as authored: raw dicts are copied unchanged, so
        drafts with missing or null fields and extra keys survive a save.
        Models are dumped with the fields that were set on them.

        Args:
            rules: Top-level condition nodes

        Returns:
            ``{"rules": [...], "version": 1}`` ready for the JSON column
        """
        stored = []
        for node in rules or []:
            if isinstance(node, ConditionalLogic):
                stored.append(ConditionalLogicEngine._dump(node))
            elif isinstance(node, Mapping):
                stored.append(copy.deepcopy(dict(node)))
            else:
                stored.append(copy.deepcopy(node))
        return {"rules": stored, "version": LOGIC_SCHEMA_VERSION}

    @staticmethod
    def unwrap(stored: Optional[Mapping[str, Any]]) -> list[ConditionalLogic]:
        """Read condition nodes back from the stored envelope.

        Args:
            stored: Envelope from the JSON column (may be None)

        Returns:
            Top-level nodes, or an empty list when nothing is stored
        """
        if not stored or not stored.get("rules"):
            return []
        return list(ConditionalLogicEngine._coerce(stored["rules"]))

    @staticmethod
    def evaluate_one(node: NodeInput, answers: Mapping[str, Any]) -> bool:
        """Evaluate a single node against the answers, ignoring its children.

        Conditions:
        - equals / not_equals: strict equality (True is not 1)
        - contains: list answers test membership; anything else is a
          case-insensitive substring test on the text forms, where a missing
          answer or value reads as "undefined" and None as "null"
        - greater_than / less_than: numeric after coercion; a side that is
          not numeric makes the comparison False
        - in / not_in: False unless the node value is a list
        - anything else, or a node without a question id: False

        Args:
            node: Condition node
            answers: Current answers keyed by question id

        Returns:
            Whether the condition holds

        Example:
            >>> node = ConditionalLogic(condition="contains", question_id="q1", value="world")
            >>> ConditionalLogicEngine.evaluate_one(node, {"q1": "Hello World"})
            True
        """
        node = ConditionalLogicEngine._as_node(node)
        if node is None:
            return False
        if not node.question_id:
            logger.debug(f"Condition {node.condition!r} without a question id evaluates to False")
            return False

        answer = answers.get(node.question_id)
        condition = node.condition

        if condition == ConditionKind.EQUALS:
            return strict_equals(answer, node.value)

        if condition == ConditionKind.NOT_EQUALS:
            return not strict_equals(answer, node.value)

        if condition == ConditionKind.CONTAINS:
            if isinstance(answer, list):
                return contains_value(answer, node.value)
            needle = to_js_string(node.value, "value" in node.model_fields_set)
            haystack = to_js_string(answer, node.question_id in answers)
            return needle.lower() in haystack.lower()

        if condition in (ConditionKind.GREATER_THAN, ConditionKind.LESS_THAN):
            left = to_number(answer)
            right = to_number(node.value)
            if math.isnan(left) or math.isnan(right):
                return False
            if condition == ConditionKind.GREATER_THAN:
                return left > right
            return left < right

        if condition == ConditionKind.IN:
            return isinstance(node.value, list) and contains_value(node.value, answer)

        if condition == ConditionKind.NOT_IN:
            return isinstance(node.value, list) and not contains_value(node.value, answer)

        logger.debug(
            f"Unknown condition {condition!r} evaluates to False",
            extra={"question_id": node.question_id},
        )
        return False

    @staticmethod
    def evaluate_node(node: NodeInput, answers: Mapping[str, Any]) -> bool:
        """Evaluate a node together with its direct children.

        The node's own result is combined with its children's combined
        result using the node's operator: with ``or`` the node holds when it
        or any child holds; otherwise it holds only when it and every child
        hold. Children are evaluated without their own children.

        Args:
            node: Condition node
            answers: Current answers keyed by question id

        Returns:
            Combined result for this node
        """
        node = ConditionalLogicEngine._as_node(node)
        if node is None:
            return False

        result = ConditionalLogicEngine.evaluate_one(node, answers)
        if not node.children:
            return result

        child_results = (
            ConditionalLogicEngine.evaluate_one(child, answers) for child in node.children
        )
        if node.operator == LogicOperator.OR:
            return result or any(child_results)
        return result and all(child_results)

    @staticmethod
    def evaluate_tree(nodes: Iterable[NodeInput], answers: Mapping[str, Any]) -> bool:
        """Evaluate a list of top-level nodes.

        An empty list places no constraint and evaluates to True. Otherwise
        every top-level node must hold (see evaluate_node). A node that cannot
        be decoded counts as not holding.

        Args:
            nodes: Top-level condition nodes
            answers: Current answers keyed by question id

        Returns:
            True when all top-level nodes hold

        Example:
            >>> ConditionalLogicEngine.evaluate_tree([], {})
            True
        """
        return all(
            ConditionalLogicEngine.evaluate_node(node, answers) for node in nodes or []
        )

    @staticmethod
    def actions_triggered(nodes: Iterable[NodeInput], answers: Mapping[str, Any]) -> set[LogicAction]:
        """Collect the actions of top-level nodes that currently hold.

        Unknown action strings are ignored.

        Args:
            nodes: Top-level condition nodes
            answers: Current answers keyed by question id

        Returns:
            Set of LogicAction values to apply
        """
        actions = set()
        for node in ConditionalLogicEngine._coerce(nodes):
            if not ConditionalLogicEngine.evaluate_node(node, answers):
                continue
            try:
                actions.add(LogicAction(node.action))
            except ValueError:
                logger.debug(f"Ignoring unknown action {node.action!r}")
        return actions

    @staticmethod
    def _dump(node: ConditionalLogic) -> dict[str, Any]:
        """Storage form of a node: fields that were set plus unknown keys."""
        data = node.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude={"children"})
        data.update(node.model_extra or {})
        if "children" in node.model_fields_set:
            data["children"] = (
                None if node.children is None
                else [ConditionalLogicEngine._dump(child) for child in node.children]
            )
        return data

    @staticmethod
    def _coerce(nodes: Optional[Iterable[NodeInput]]) -> Iterable[ConditionalLogic]:
        """Yield ConditionalLogic models, skipping entries that cannot decode."""
        for raw in nodes or []:
            if isinstance(raw, ConditionalLogic):
                yield raw
                continue
            try:
                yield ConditionalLogic.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping malformed condition {raw!r}: {e}")

    @staticmethod
    def _as_node(raw: NodeInput) -> Optional[ConditionalLogic]:
        """Decode a single node; None when it cannot be decoded."""
        if isinstance(raw, ConditionalLogic):
            return raw
        try:
            return ConditionalLogic.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Malformed condition {raw!r} evaluates to False: {e}")
            return None
