"""Configuration models for BZP CLI."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from bzp.errors import ConfigError
from bzp.paths import CONFIG_FILE, get_config_locations


class RuntimeConfig(BaseModel):
    """Local model runtime (Ollama) configuration."""

    executable: str = Field(
        default="ollama",
        description="Runtime command name resolved on PATH",
    )
    model: str = Field(
        default="llama3.2:1b",
        description="Model to provision for generated agents",
    )
    homepage_url: str = Field(
        default="https://ollama.ai",
        description="Runtime homepage shown in manual setup hints",
    )
    download_url: str = Field(
        default="https://ollama.ai/download",
        description="Manual download page (Windows and unknown platforms)",
    )
    install_script_url: str = Field(
        default="https://ollama.ai/install.sh",
        description="Official install script piped to sh on Linux",
    )
    brew_package: str = Field(
        default="ollama",
        description="Homebrew formula installed on macOS",
    )
    probe_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for the service probe",
    )
    windows_probe_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for the second service probe on Windows",
    )
    settle_seconds: float = Field(
        default=2.0,
        description="Wait after a background service start before re-probing",
    )
    install_settle_seconds: float = Field(
        default=1.0,
        description="Wait after an install before verifying the command",
    )
    background_timeout_seconds: float = Field(
        default=30.0,
        description="Ceiling for the opportunistic service/model pass",
    )
    terminate_on_timeout: bool = Field(
        default=True,
        description="Terminate in-flight runtime commands when the ceiling elapses",
    )


class ScaffoldConfig(BaseModel):
    """Project generation configuration."""

    install_dependencies: bool = Field(
        default=True,
        description="Install npm dependencies after generating files",
    )
    package_manager: Literal["auto", "pnpm", "npm"] = Field(
        default="auto",
        description="Package manager ('auto' prefers pnpm when available)",
    )


class BZPConfig(BaseSettings):
    """Main BZP configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BZP_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    version: str = Field(default="1.0", description="Config version")
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    scaffold: ScaffoldConfig = Field(default_factory=ScaffoldConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values read from .bzprc.toml
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load(cls, config_path: Path | None = None) -> BZPConfig:
        """Load configuration from file and environment.

        Resolution order (highest to lowest priority):
        1. Environment variables (``BZP_RUNTIME__MODEL=...``)
        2. Provided config file path
        3. .bzprc.toml in current directory
        4. .bzprc.toml in home directory
        5. Built-in defaults
        """
        config_data: dict[str, Any] = {}

        for loc in get_config_locations(config_path):
            if loc.exists():
                try:
                    with open(loc, "rb") as f:
                        config_data = tomllib.load(f)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"Invalid TOML in {loc}: {e}", path=str(loc)) from e
                break

        try:
            return cls(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def get_default_config_toml() -> str:
    """Generate default .bzprc.toml content."""
    return f"""# BZP Configuration ({CONFIG_FILE})

version = "1.0"

[runtime]
executable = "ollama"
model = "llama3.2:1b"
homepage_url = "https://ollama.ai"
download_url = "https://ollama.ai/download"
install_script_url = "https://ollama.ai/install.sh"  # Linux only
brew_package = "ollama"  # macOS only
probe_timeout_seconds = 5.0
windows_probe_timeout_seconds = 10.0
settle_seconds = 2.0  # Wait after starting 'ollama serve'
install_settle_seconds = 1.0
background_timeout_seconds = 30.0  # Ceiling when Ollama was already installed
terminate_on_timeout = true  # Stop an in-flight pull when the ceiling elapses

[scaffold]
install_dependencies = true
package_manager = "auto"  # auto | pnpm | npm
"""
