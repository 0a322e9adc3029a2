"""Runtime settings read from ``TESTGRID_*`` environment variables."""

from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TestGridSettings(BaseSettings):
    """TestGrid runtime settings.

    ``database_url`` and ``workspace_dir`` default to locations under ``home``.
    """

    __test__ = False

    model_config = SettingsConfigDict(env_prefix="TESTGRID_", extra="ignore")

    home: Path = Field(default_factory=lambda: Path.home() / ".testgrid")
    database_url: str | None = None
    log_level: str = "INFO"
    workspace_dir: Path | None = None

    @model_validator(mode="after")
    def default_paths(self) -> "TestGridSettings":
        if self.database_url is None:
            self.database_url = f"sqlite:///{self.home / 'testgrid.db'}"
        if self.workspace_dir is None:
            self.workspace_dir = self.home / "workspace"
        return self


def load_settings(**overrides) -> TestGridSettings:
    """Load settings from the environment, with explicit values taking precedence."""
    return TestGridSettings(**{k: v for k, v in overrides.items() if v is not None})
