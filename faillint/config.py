"""Configuration for faillint using Pydantic Settings."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError


class FaillintConfig(BaseSettings):
    """Analyzer and driver configuration.

    Values come from keyword arguments, then `FAILLINT_*` environment
    variables, then a `.env` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="FAILLINT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    paths: str = Field(
        default="",
        description=(
            "Import paths or exported declarations (i.e: functions, constant, types or "
            "variables) to fail. E.g. errors=github.com/pkg/errors,fmt.{Errorf}="
            "github.com/pkg/errors.{Errorf},fmt.{Println,Print,Printf},"
            "github.com/prometheus/client_golang/prometheus.{DefaultGatherer,MustRegister}"
        ),
    )
    ignore_tests: bool = Field(default=False, description="Ignore all _test.go files")

    exclude_dirs: list[str] = Field(
        default=["vendor", "testdata"],
        description="Directory names skipped when expanding ./... patterns",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="WARNING")
    log_file: Path | None = Field(default=None)

    @classmethod
    def from_yaml(cls, path: Path) -> "FaillintConfig":
        """Load configuration from YAML file.

        Raises:
            ConfigError: if the file cannot be read or holds invalid values
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot load config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must be a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"invalid config {path}: {e}") from e

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, allow_unicode=True)


def load_config(path: Path | None = None) -> FaillintConfig:
    """Load configuration from file, or from the environment only."""
    if path is not None:
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        return FaillintConfig.from_yaml(path)
    return FaillintConfig()
