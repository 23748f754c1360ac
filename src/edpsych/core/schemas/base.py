"""
Shared request schema bases.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """Base for partial update bodies.

    Omitted fields are left alone. An explicit ``null`` is accepted only for
    fields listed in ``nullable_fields`` (columns that can be cleared);
    anywhere else it is a 422.
    """

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def reject_null_for_required_columns(cls, data: Any) -> Any:
        if isinstance(data, dict):
            cleared = [
                name
                for name, value in data.items()
                if value is None and name in cls.model_fields and name not in cls.nullable_fields
            ]
            if cleared:
                raise ValueError(f"Cannot be null: {', '.join(sorted(cleared))}")
        return data
