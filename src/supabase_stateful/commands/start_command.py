"""Command 'start' - start Supabase and restore saved state."""

from pathlib import Path

from supabase_stateful.models.lifecycle import StartReport
from supabase_stateful.services.config_service import ConfigService
from supabase_stateful.services.lifecycle_service import LifecycleService

from .decorators import command_wrapper


@command_wrapper
def start(project_dir: Path) -> StartReport:
    """Start Supabase, restore the last snapshot and apply pending migrations."""
    config_service = ConfigService(project_dir)
    config = config_service.load_config()
    service = LifecycleService.from_config(config, config_service.project_dir)
    return service.start()
