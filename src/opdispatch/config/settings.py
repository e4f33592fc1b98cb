"""Application settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Dispatch engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPDISPATCH_ENGINE_",
        case_sensitive=False,
        extra="ignore",
    )

    trace: bool = Field(default=False)


class ReplSettings(BaseSettings):
    """Interactive shell settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPDISPATCH_REPL_",
        case_sensitive=False,
        extra="ignore",
    )

    home: str | None = Field(default=None)
    prompt: str = Field(default="op> ")
    load_prelude: bool = Field(default=True)

    def resolve_home(self) -> Path:
        if self.home:
            return Path(self.home).expanduser().resolve()
        return (Path.home() / ".opdispatch").resolve()

    @property
    def history_file(self) -> Path:
        return self.resolve_home() / "history"


class Settings(BaseSettings):
    """Engine and shell settings in one object.

    Each section reads its own environment prefix.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPDISPATCH_",
        case_sensitive=False,
        extra="ignore",
    )

    engine: EngineSettings = Field(default_factory=EngineSettings)
    repl: ReplSettings = Field(default_factory=ReplSettings)


def load_settings(*, trace: bool | None = None, load_prelude: bool | None = None) -> Settings:
    """Load settings from the environment, applying command line overrides."""
    engine = EngineSettings() if trace is None else EngineSettings(trace=trace)
    repl = ReplSettings() if load_prelude is None else ReplSettings(load_prelude=load_prelude)
    return Settings(engine=engine, repl=repl)
