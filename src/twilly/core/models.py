from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LabelledEnum(str, Enum):
    """Enum whose value is the Twilio wire value and whose label is shown to users."""

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.label


class TwilioModel(BaseModel):
    """Base for resource models. Unknown fields returned by Twilio are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class PageMeta(TwilioModel):
    """Paging information returned by the v1 APIs under ``meta``."""
    page: int = 0
    page_size: int = 0
    first_page_url: Optional[str] = None
    previous_page_url: Optional[str] = None
    next_page_url: Optional[str] = None
    url: Optional[str] = None
    key: Optional[str] = None
