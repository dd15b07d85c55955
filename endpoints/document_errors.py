from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ResourceError(BaseModel):
    """Body of a 4xx response: { "errorCode": int, "errorMessage": str }."""

    model_config = ConfigDict(frozen=True)

    errorCode: int
    errorMessage: str

    def to_json_doc(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class DocumentResourceError(ResourceError):
    pass


NOT_FOUND = DocumentResourceError(errorCode=1000001, errorMessage="Document was not found.")
CANNOT_CHANGE_ID = DocumentResourceError(errorCode=1000002, errorMessage="Cannot modify document id.")
CANNOT_CHANGE_CREATE_DATE = DocumentResourceError(
    errorCode=1000003, errorMessage="Cannot modify document create date."
)
CANNOT_CHANGE_LAST_EDIT_DATE = DocumentResourceError(
    errorCode=1000004, errorMessage="Cannot modify document last edit date."
)

# Checked in this order; only the first violation is reported.
RESERVED_FIELD_ERRORS: tuple[tuple[str, DocumentResourceError], ...] = (
    ("id", CANNOT_CHANGE_ID),
    ("lastEditDate", CANNOT_CHANGE_LAST_EDIT_DATE),
    ("createDate", CANNOT_CHANGE_CREATE_DATE),
)
