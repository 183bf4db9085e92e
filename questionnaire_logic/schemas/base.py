"""Shared base model for JSON column payloads.

Stored blobs use camelCase keys (``questionId``, ``maxFileSize``) while the
Python attributes stay snake_case. Both spellings are accepted on input.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JsonModel(BaseModel):
    """Base model for payloads stored in JSON columns."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_json(self) -> dict[str, Any]:
        """Dump to a plain JSON-serializable dict with storage key names.

        Unset optional fields are omitted so the stored blob matches what
        the authoring UI wrote.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
