"""Configuration service for the project-local supabase-stateful config.

This module provides the ConfigService class, which handles:

- Loading ``.supabase-stateful.json`` (defaults apply when it is absent)
- Deriving the postgres container name from ``supabase/config.toml``
- Writing the config file and ``.gitignore`` entries during ``init``
"""

from __future__ import annotations

import json
import tomllib
from json import JSONDecodeError
from pathlib import Path

from pydantic import ValidationError

from supabase_stateful.models.config_models import StatefulConfig, container_name_for
from supabase_stateful.models.exceptions import ConfigError
from supabase_stateful.utils.logger import get_logger

CONFIG_FILE = ".supabase-stateful.json"
SUPABASE_CONFIG = Path("supabase") / "config.toml"


class ConfigService:
    """Service for reading and writing one project's configuration.

    The loaded config is returned to the caller and passed explicitly to the
    components that need it; nothing is cached at module level.
    """

    def __init__(self, project_dir: str | Path = "."):
        self.project_dir = Path(project_dir).resolve()
        self.config_path = self.project_dir / CONFIG_FILE
        self.supabase_config_path = self.project_dir / SUPABASE_CONFIG

    def config_exists(self) -> bool:
        """Check whether ``init`` has been run for this project."""
        return self.config_path.exists()

    def supabase_project_exists(self) -> bool:
        return self.supabase_config_path.exists()

    def detect_project_id(self) -> str:
        """Read ``project_id`` from supabase/config.toml, else use the directory name."""
        try:
            with open(self.supabase_config_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            get_logger().debug("could not read %s: %s", self.supabase_config_path, e)
            return self.project_dir.name

        project_id = data.get("project_id")
        if isinstance(project_id, str) and project_id.strip():
            return project_id.strip()
        return self.project_dir.name

    def default_config(self) -> StatefulConfig:
        return StatefulConfig(container_name=container_name_for(self.detect_project_id()))

    def load_config(self) -> StatefulConfig:
        """Load configuration from the project directory.

        Raises:
            ConfigError: If the file exists but is not valid
        """
        try:
            with open(self.config_path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            # Not initialised yet - defaults apply
            return self.default_config()
        except (OSError, JSONDecodeError) as e:
            raise ConfigError(f"Failed to read {self.config_path.name}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{self.config_path.name} must contain a JSON object")

        if not data.get("containerName") and not data.get("container_name"):
            data["containerName"] = container_name_for(self.detect_project_id())
        # Older files may carry an explicit null state file
        if data.get("stateFile") is None:
            data.pop("stateFile", None)

        try:
            return StatefulConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid {self.config_path.name}: {e}") from e

    def save_config(self, config: StatefulConfig) -> None:
        """Write the config file with camelCase keys."""
        with open(self.config_path, "w", encoding="utf-8") as f:
            f.write(json.dumps(config.to_file_dict(), indent=2) + "\n")

    def resolve(self, path: str) -> Path:
        """Resolve a config path relative to the project directory."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.project_dir / candidate

    def append_if_missing(self, relative_path: str, line: str) -> bool:
        """Append ``line`` to a project file unless it is already present.

        Returns:
            True if the file was modified
        """
        target = self.project_dir / relative_path
        try:
            content = target.read_text(encoding="utf-8")
        except FileNotFoundError:
            target.write_text(f"{line}\n", encoding="utf-8")
            return True

        if line in content.splitlines():
            return False
        separator = "" if not content or content.endswith("\n") else "\n"
        with open(target, "a", encoding="utf-8") as f:
            f.write(f"{separator}{line}\n")
        return True
