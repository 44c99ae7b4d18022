"""Response envelopes and validators shared by the admin modules."""

import math

from pydantic import BaseModel, ValidationInfo

from staffdesk.api.dependencies import PageParams


class PageMeta(BaseModel):
    """Pagination metadata for list responses."""

    current_page: int
    per_page: int
    total: int
    last_page: int

    @classmethod
    def build(cls, params: PageParams, total: int) -> "PageMeta":
        return cls(
            current_page=params.page,
            per_page=params.per_page,
            total=total,
            last_page=max(1, math.ceil(total / params.per_page)),
        )


def field_label(info: ValidationInfo) -> str:
    """Readable name of the field being validated."""
    return (info.field_name or "value").replace("_", " ")


def require_text(value: str, info: ValidationInfo) -> str:
    """Reject blank strings the same way as a missing field."""
    value = value.strip()
    if not value:
        raise ValueError(f"The {field_label(info)} field is required.")
    return value


def blank_to_none(value: str | None) -> str | None:
    """Treat an empty optional string as absent."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def require_ids(value: object, message: str) -> object:
    """Reject a missing, null or empty id list with ``message``.

    Runs before type validation so the element checks still apply to
    non-empty input.
    """
    if value is None or value == []:
        raise ValueError(message)
    return value
