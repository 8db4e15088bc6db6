from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from versemem.domain.constants import (
    DEFAULT_BLANK_COUNT,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_STORAGE_KEY,
)


class AppConfig(BaseSettings):
    """
    Configuration model for versemem.
    Supports loading from:
    1. Environment variables (VERSEMEM_*)
    2. Config file (~/.config/versemem/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="VERSEMEM_",
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/versemem", validate_default=True
    )
    backend: Literal["json", "sqlite", "memory"] = "json"
    storage_key: str = DEFAULT_STORAGE_KEY

    # Exercises
    blank_count: int = Field(default=DEFAULT_BLANK_COUNT, ge=1)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)

    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Home is resolved per call so tests can relocate it
        toml_files = [
            Path.home() / ".config/versemem/config.toml",
            Path.home() / ".versemem.toml",
        ]
        toml_file = next((f for f in toml_files if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @property
    def store_path(self) -> Path:
        """File backing the selected backend."""
        suffix = {"json": "json", "sqlite": "sqlite3"}.get(self.backend, "json")
        return self.data_dir / f"memorization.{suffix}"


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/versemem/config.toml (if exists)
    3. Environment variables (VERSEMEM_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
