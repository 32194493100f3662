"""Command 'status' - show running state, saved snapshot and configuration."""

from pathlib import Path
from typing import Any

from supabase_stateful.adapters.docker import DockerRuntime
from supabase_stateful.services.config_service import ConfigService
from supabase_stateful.services.snapshot_store import SnapshotStore
from supabase_stateful.utils.logger import log_file_path
from supabase_stateful.utils.ui.console import get_console
from supabase_stateful.utils.ui.formatters import format_info, format_output, format_warning

from .decorators import command_wrapper

console = get_console()

SERVICE_URLS = {
    "api": "http://localhost:54321",
    "studio": "http://localhost:54323",
    "database": "localhost:54322",
}


def collect_status(config_service: ConfigService) -> dict[str, Any]:
    """Gather status information for one project."""
    config = config_service.load_config()
    running = DockerRuntime(config.container_name).is_running()
    info = SnapshotStore(config_service.resolve(config.state_file)).metadata()

    status: dict[str, Any] = {
        "initialized": config_service.config_exists(),
        "supabase": "running" if running else "stopped",
        "state_file": {
            "saved": info.exists,
            "path": info.path,
            "size": info.size,
            "modified": info.modified,
            "backup": info.backup_exists,
        },
        "configuration": {
            "container": config.container_name,
            "state_file": config.state_file,
        },
    }
    if running:
        status["service_urls"] = dict(SERVICE_URLS)
    status["log_file"] = str(log_file_path())
    return status


@command_wrapper
def status(project_dir: Path, output: str = "pretty") -> None:
    """Show whether Supabase is running and what state is saved."""
    config_service = ConfigService(project_dir)

    if output == "pretty" and not config_service.config_exists():
        format_warning("Not initialized")
        console.print()
        console.print("Run: supabase-stateful init")
        return

    data = collect_status(config_service)
    if output == "pretty":
        console.print()
        console.print("[bold]Supabase Stateful Status[/bold]")
        console.print()
        if not data["state_file"]["saved"]:
            format_info("State file: Not saved yet")
    format_output(data, output)
