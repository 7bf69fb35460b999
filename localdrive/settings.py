"""Environment driven configuration for drives built by the CLI."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .collisions import OperationConfig
from .drive import Drive
from .policies import ReadOnly


class DriveSettings(BaseSettings):
    """Drive settings with ``LOCALDRIVE_*`` env var support."""

    model_config = SettingsConfigDict(
        env_prefix="LOCALDRIVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    root: Path = Field(default=Path("."))
    prevent_name_collision: bool = False
    read_only: bool = False
    verbose: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return str(value or "INFO").strip().upper()


def build_drive(settings: DriveSettings) -> Drive:
    return Drive(
        settings.root,
        policy=ReadOnly() if settings.read_only else None,
        operation=OperationConfig(prevent_name_collision=settings.prevent_name_collision),
        verbose=settings.verbose,
    )


__all__ = ["DriveSettings", "build_drive"]
