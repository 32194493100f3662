"""Configuration models for supabase-stateful.

The project-local ``.supabase-stateful.json`` file uses camelCase keys
(``stateFile``, ``containerName``, ``devServices``); the models expose them
under snake_case names and accept either spelling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_STATE_FILE = "supabase/local-state.sql"
CONTAINER_PREFIX = "supabase_db_"


class DevService(BaseModel):
    """A companion process run next to Supabase by the dev:local script."""

    model_config = ConfigDict(extra="allow")

    name: str
    command: str
    color: str | None = None


class StatefulConfig(BaseModel):
    """Main supabase-stateful configuration.

    Immutable for the duration of a command: it is loaded once and passed to
    every component that needs it.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    state_file: str = Field(
        default=DEFAULT_STATE_FILE,
        alias="stateFile",
        description="Snapshot path, relative to the project directory",
    )
    container_name: str = Field(
        ...,
        alias="containerName",
        description="Name of the Supabase postgres container",
    )
    dev_services: list[DevService] = Field(
        default_factory=list,
        alias="devServices",
        description="Extra services for dev:local (not used by start/stop)",
    )

    @field_validator("state_file", "container_name")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject blank paths and container names."""
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()

    @property
    def backup_file(self) -> str:
        """Path of the previous snapshot."""
        return f"{self.state_file}.backup"

    def to_file_dict(self) -> dict:
        """Serialize using the on-disk camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


def container_name_for(project_id: str) -> str:
    """Return the postgres container name the Supabase CLI uses for a project."""
    return f"{CONTAINER_PREFIX}{project_id}"
