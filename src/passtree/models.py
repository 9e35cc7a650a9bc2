"""
Pydantic models for the store configuration.

Loaded once per invocation and handed to every component.
Frozen: identity and remote never change while a command runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class StoreConfig(BaseModel):
    """Where the store lives, who it encrypts to, and where it mirrors."""

    model_config = ConfigDict(frozen=True)

    root: Path
    identity: str
    remote: Optional[str] = None

    @field_validator("identity")
    @classmethod
    def _identity_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("identity must not be empty")
        return value

    @field_validator("remote")
    @classmethod
    def _blank_remote_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def linked(self) -> bool:
        """True when a remote mirror is configured."""
        return self.remote is not None
