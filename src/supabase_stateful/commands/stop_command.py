"""Command 'stop' - save state, clear auth tokens, stop Supabase."""

from pathlib import Path

from supabase_stateful.models.lifecycle import StopReport
from supabase_stateful.services.config_service import ConfigService
from supabase_stateful.services.lifecycle_service import LifecycleService

from .decorators import command_wrapper


@command_wrapper
def stop(project_dir: Path) -> StopReport:
    """Snapshot the database, clear refresh tokens and stop Supabase."""
    config_service = ConfigService(project_dir)
    config = config_service.load_config()
    service = LifecycleService.from_config(config, config_service.project_dir)
    return service.stop()
