from typing import Any, ClassVar

from pydantic import model_validator
from sqlmodel import SQLModel


class PatchModel(SQLModel):
    """PATCH body: omitted fields are left alone, explicit null is refused
    for fields backed by NOT NULL columns."""

    not_null_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def reject_null(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = sorted(name for name in cls.not_null_fields if name in data and data[name] is None)
            if nulls:
                raise ValueError(f"{', '.join(nulls)} cannot be null")
        return data
