"""Command 'init' - create the project config and ignore the state files."""

from pathlib import Path

from rich.markup import escape

from supabase_stateful.models.config_models import StatefulConfig, container_name_for
from supabase_stateful.services.config_service import CONFIG_FILE, ConfigService
from supabase_stateful.utils.ui.formatters import format_info, format_success, format_warning

from .decorators import AppError, command_wrapper


@command_wrapper
def init(project_dir: Path) -> StatefulConfig | None:
    """Write .supabase-stateful.json for the Supabase project in project_dir."""
    config_service = ConfigService(project_dir)
    format_info("Initializing supabase-stateful...")

    if config_service.config_exists():
        format_warning(f"Already initialized ({CONFIG_FILE} exists)")
        return None

    if not config_service.supabase_project_exists():
        raise AppError(
            'No supabase/config.toml found. Run "supabase init" first '
            "to create a Supabase project"
        )

    project_id = config_service.detect_project_id()
    format_info(f"Detected project: {escape(project_id)}")

    config = StatefulConfig(container_name=container_name_for(project_id))
    config_service.save_config(config)
    format_success(f"Created {CONFIG_FILE}")

    for entry in (config.state_file, config.backup_file):
        if config_service.append_if_missing(".gitignore", entry):
            format_success(f"Added {escape(entry)} to .gitignore")

    return config
