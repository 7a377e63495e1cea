from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class LLMRecord(BaseModel):
    """Base for records parsed from model output.

    Keys follow the extraction prompt schema (aliases); Python code uses the
    snake_case field names. ``null`` values fall back to field defaults.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


def coerce_str_list(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return [stripped] if stripped else []
    return value


def coerce_joined_str(value: Any) -> Any:
    if isinstance(value, list):
        return " ".join(str(item) for item in value if item is not None)
    return value
