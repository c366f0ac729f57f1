from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DCM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    dir: Path = Field(
        default_factory=Path.cwd,
        description="Project root directory. Compose commands run from here.",
    )
    project: str = Field(
        default="bean",
        description="Project name, used for the manifest file and container names.",
    )
    config_file: Path | None = Field(
        default=None,
        description="Read the service manifest from this file instead of <dir>/<project>.yml.",
    )
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = Field(
        default="WARNING",
    )

    @field_validator("dir")
    @classmethod
    def _absolute_dir(cls, value: Path) -> Path:
        return value.expanduser().absolute()

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value

    @property
    def file(self) -> Path:
        return self.dir / f"{self.project}.yml"

    @property
    def srv(self) -> Path:
        return self.dir / "srv" / self.project

    @property
    def config_path(self) -> Path:
        return self.config_file or self.file


@lru_cache(maxsize=1)
def load_app_config() -> AppConfig:
    return AppConfig()
