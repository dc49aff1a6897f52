"""
Retrieval configuration for jhu-dumps.

``RetrievalConfig`` is a Pydantic model so that values passed by callers
are validated and coerced in one place:

- base_url: directory URL the daily files live under.
- timeout: per-request timeout in seconds for the fetcher.
- layout: optional layout override. When set, resolution is skipped and
  every dump is parsed with this layout.

There is no configuration file; callers build the model directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jhu_dumps.layout_registry import Layout
from jhu_dumps.locate import DEFAULT_BASE_URL


class RetrievalConfig(BaseModel):
    """Settings for ``retrieve()``."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(DEFAULT_BASE_URL, description="Directory URL of the daily reports")
    timeout: float = Field(30.0, gt=0, description="Request timeout in seconds")
    layout: Layout | None = Field(
        None, description="Parse with this layout instead of resolving one by date"
    )

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("base_url must not be empty")
        return value
