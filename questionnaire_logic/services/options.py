"""Option set management for choice-type questions.

This module maintains the ordered option list stored in a question's
``options`` JSON column. Every operation returns a new list of new or
unchanged option models and leaves its inputs untouched, because the admin UI
detects changes by identity.
"""

import random
import string
import time
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError

from questionnaire_logic.config import get_settings
from questionnaire_logic.schemas.rules import QuestionOption, QuestionOptionDraft
from questionnaire_logic.logging_config import get_logger

logger = get_logger(__name__)

OPTIONS_SCHEMA_VERSION = 1

_ID_ALPHABET = string.digits + string.ascii_lowercase
_FIELD_BY_ALIAS = {
    field.alias: name
    for name, field in QuestionOption.model_fields.items()
    if field.alias
}

OptionInput = Union[QuestionOption, Mapping[str, Any]]


class OptionSetError(Exception):
    """Raised when an option operation is called with invalid arguments."""
    pass


class IncompleteOrderError(OptionSetError):
    """Raised when a strict reorder would drop options.

    Attributes:
        missing_ids: Ids of options absent from the requested order
    """

    def __init__(self, missing_ids: list[str]):
        self.missing_ids = missing_ids
        super().__init__(f"Reorder is missing option ids: {missing_ids}")


class OptionSetManager:
    """Service for editing ordered option sets."""

    @staticmethod
    def wrap(options: Iterable[OptionInput]) -> dict[str, Any]:
        """Wrap options into the stored envelope.

        Options are sorted by ``order`` (missing order sorts as 0, ties keep
        their input order) and ``allowOther`` is derived from the set.

        Args:
            options: Option models or raw option dicts

        Returns:
            ``{"options": [...], "allowOther": bool, "version": 1}``
        """
        models = OptionSetManager._coerce(options)
        ordered = sorted(models, key=lambda opt: opt.order or 0)
        return {
            "options": [opt.to_json() for opt in ordered],
            "allowOther": OptionSetManager.allow_other(models),
            "version": OPTIONS_SCHEMA_VERSION,
        }

    @staticmethod
    def unwrap(stored: Optional[Mapping[str, Any]]) -> list[QuestionOption]:
        """Read options back from the stored envelope.

        Args:
            stored: Envelope from the JSON column (may be None)

        Returns:
            Stored options, or an empty list when nothing is stored
        """
        if not stored or not stored.get("options"):
            return []
        return OptionSetManager._coerce(stored["options"], skip_invalid=True)

    @staticmethod
    def allow_other(options: Iterable[OptionInput]) -> bool:
        """True when any option is the free-text "Other" option."""
        return any(opt.is_other for opt in OptionSetManager._coerce(options))

    @staticmethod
    def add(existing: Iterable[OptionInput], new_option: Union[QuestionOptionDraft, Mapping[str, Any]]) -> list[QuestionOption]:
        """Append a new option with a generated id.

        The new option's order defaults to the current set size when it is
        missing or 0. The result is re-sorted by order.

        Args:
            existing: Current options
            new_option: Option without an id

        Returns:
            New option list

        Raises:
            OptionSetError: If new_option is missing a label or value

        Example:
            >>> options = OptionSetManager.add([], {"label": "Yes", "value": "yes"})
            >>> options[0].order
            0
        """
        options = OptionSetManager._coerce(existing)
        try:
            draft = (
                new_option if isinstance(new_option, QuestionOptionDraft)
                else QuestionOptionDraft.model_validate(new_option)
            )
        except ValidationError as e:
            raise OptionSetError(f"Invalid option: {e}")

        option = QuestionOption(
            id=OptionSetManager.generate_id(),
            label=draft.label,
            value=draft.value,
            order=draft.order or len(options),
            is_other=draft.is_other,
        )
        logger.debug(f"Added option {option.id} at order {option.order}")
        return sorted([*options, option], key=lambda opt: opt.order or 0)

    @staticmethod
    def update(existing: Iterable[OptionInput], option_id: str, patch: Mapping[str, Any]) -> list[QuestionOption]:
        """Shallow-merge ``patch`` into the option with ``option_id``.

        Patch keys may use either storage (``isOther``) or attribute
        (``is_other``) names. When no option matches, the options are
        returned unchanged.

        Args:
            existing: Current options
            option_id: Id of the option to change
            patch: Fields to overwrite

        Returns:
            New option list

        Raises:
            OptionSetError: If the merged option is invalid
        """
        updated = []
        for opt in OptionSetManager._coerce(existing):
            if opt.id != option_id:
                updated.append(opt)
                continue

            data = opt.model_dump()
            for key, value in patch.items():
                data[_FIELD_BY_ALIAS.get(key, key)] = value
            try:
                updated.append(QuestionOption.model_validate(data))
            except ValidationError as e:
                raise OptionSetError(f"Invalid update for option {option_id}: {e}")
        return updated

    @staticmethod
    def remove(existing: Iterable[OptionInput], option_id: str) -> list[QuestionOption]:
        """Return the options without the one matching ``option_id``."""
        return [opt for opt in OptionSetManager._coerce(existing) if opt.id != option_id]

    @staticmethod
    def reorder(
        existing: Iterable[OptionInput],
        ordered_ids: list[str],
        strict: Optional[bool] = None,
    ) -> list[QuestionOption]:
        """Rebuild the option list in the order of ``ordered_ids``.

        Each option's ``order`` is set to its index in ``ordered_ids``.
        Options whose id is not listed are dropped from the result; this is
        logged as a warning, or raised as IncompleteOrderError in strict mode.

        Args:
            existing: Current options
            ordered_ids: Complete list of option ids in the new order
            strict: Raise on dropped options (defaults to
                settings.strict_option_reorder)

        Returns:
            New option list with order 0..len(ordered_ids)-1

        Raises:
            OptionSetError: If ordered_ids names an id not in the set
            IncompleteOrderError: In strict mode, if options would be dropped
        """
        options = OptionSetManager._coerce(existing)
        by_id = {opt.id: opt for opt in options}

        unknown = [option_id for option_id in ordered_ids if option_id not in by_id]
        if unknown:
            raise OptionSetError(f"Unknown option ids in reorder: {unknown}")

        listed = set(ordered_ids)
        missing = [opt.id for opt in options if opt.id not in listed]
        if missing:
            if strict is None:
                strict = get_settings().strict_option_reorder
            if strict:
                raise IncompleteOrderError(missing)
            logger.warning(f"Reorder drops options not in the id list: {missing}")

        return [
            by_id[option_id].model_copy(update={"order": index})
            for index, option_id in enumerate(ordered_ids)
        ]

    @staticmethod
    def generate_id() -> str:
        """Generate an option id from the current time and a random suffix.

        Example:
            >>> OptionSetManager.generate_id()  # doctest: +SKIP
            'opt_1718000000000_k3j9x0a2b'
        """
        suffix = "".join(random.choices(_ID_ALPHABET, k=9))
        return f"opt_{int(time.time() * 1000)}_{suffix}"

    @staticmethod
    def _coerce(options: Optional[Iterable[OptionInput]], skip_invalid: bool = False) -> list[QuestionOption]:
        """Decode options into models.

        Args:
            options: Option models or raw dicts
            skip_invalid: Drop undecodable entries instead of raising

        Raises:
            OptionSetError: If an entry cannot be decoded and skip_invalid is False
        """
        models = []
        for raw in options or []:
            if isinstance(raw, QuestionOption):
                models.append(raw)
                continue
            try:
                models.append(QuestionOption.model_validate(raw))
            except ValidationError as e:
                if not skip_invalid:
                    raise OptionSetError(f"Invalid option {raw!r}: {e}")
                logger.warning(f"Skipping malformed stored option {raw!r}: {e}")
        return models
