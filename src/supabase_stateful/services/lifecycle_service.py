"""Start/stop lifecycle for a stateful local Supabase environment.

start:
1. If already running (warm attach): apply pending migrations, nothing else
2. If not running (cold start): walk the startup ladder until one strategy works
3. Restore the saved snapshot (schema + data from the last session)
4. Apply pending migrations ON TOP of the restored data

Migrations always run after the restore, never against an empty database.

stop:
1. Discover tables and save a snapshot (must succeed before anything else)
2. Clear auth refresh tokens
3. Stop Supabase
"""

from __future__ import annotations

from pathlib import Path

from rich.markup import escape

from supabase_stateful.adapters.docker import DockerRuntime
from supabase_stateful.adapters.supabase_cli import SupabaseCLI
from supabase_stateful.models.config_models import StatefulConfig
from supabase_stateful.models.exceptions import (
    MigrationApplyError,
    SnapshotExportError,
    StartupExhaustedError,
)
from supabase_stateful.models.lifecycle import (
    Phase,
    RestoreResult,
    RestoreStatus,
    RunState,
    StartAttempt,
    StartReport,
    StartupReport,
    StartupStrategy,
    StopReport,
)
from supabase_stateful.models.snapshot import TableRef
from supabase_stateful.services.migration_service import MigrationSequencer
from supabase_stateful.services.restore_service import SnapshotRestorer
from supabase_stateful.services.snapshot_service import SnapshotExporter, build_snapshot
from supabase_stateful.services.snapshot_store import SnapshotStore
from supabase_stateful.services.table_discovery import TableDiscovery
from supabase_stateful.services.token_sanitizer import AuthTokenSanitizer
from supabase_stateful.utils.logger import get_logger
from supabase_stateful.utils.ui.console import get_console
from supabase_stateful.utils.ui.formatters import (
    format_dim,
    format_info,
    format_success,
    format_warning,
)

STUDIO_URL = "http://localhost:54323"

# logflare (analytics) is the component most often failing health checks
STARTUP_LADDER: tuple[StartupStrategy, ...] = (
    StartupStrategy(name="default", args=(), description="Started"),
    StartupStrategy(
        name="exclude-logflare",
        args=("--exclude", "logflare"),
        description="Started without analytics",
    ),
    StartupStrategy(
        name="ignore-health-check",
        args=("--ignore-health-check",),
        description="Started ignoring health checks",
    ),
)


class LifecycleService:
    """Composes probe, snapshot, restore and migration steps for start/stop."""

    def __init__(
        self,
        runtime: DockerRuntime,
        cli: SupabaseCLI,
        store: SnapshotStore,
        discovery: TableDiscovery | None = None,
        exporter: SnapshotExporter | None = None,
        sanitizer: AuthTokenSanitizer | None = None,
        sequencer: MigrationSequencer | None = None,
        restorer: SnapshotRestorer | None = None,
        strategies: tuple[StartupStrategy, ...] = STARTUP_LADDER,
    ):
        self.runtime = runtime
        self.cli = cli
        self.store = store
        self.discovery = discovery or TableDiscovery(runtime)
        self.exporter = exporter or SnapshotExporter(runtime)
        self.sanitizer = sanitizer or AuthTokenSanitizer(runtime)
        self.sequencer = sequencer or MigrationSequencer(cli)
        self.restorer = restorer or SnapshotRestorer(runtime, store)
        self.strategies = strategies
        self.console = get_console()

    @classmethod
    def from_config(
        cls, config: StatefulConfig, project_dir: str | Path = "."
    ) -> LifecycleService:
        """Wire the default collaborators for one project."""
        project_dir = Path(project_dir)
        state_path = Path(config.state_file)
        if not state_path.is_absolute():
            state_path = project_dir / state_path
        runtime = DockerRuntime(config.container_name)
        return cls(
            runtime=runtime,
            cli=SupabaseCLI(project_dir),
            store=SnapshotStore(state_path),
        )

    def probe(self) -> RunState:
        if self.runtime.is_running():
            return RunState.RUNNING
        return RunState.NOT_RUNNING

    # ------------------------------------------------------------------
    # start
    # ------------------------------------------------------------------

    def start(self) -> StartReport:
        """Bring the environment to Ready.

        Raises:
            StartupExhaustedError: If no startup strategy succeeds
            MigrationApplyError: If counted pending migrations fail to apply
        """
        logger = get_logger()
        format_info("Starting Supabase with stateful development...")

        origin = self.probe()
        report = StartReport(origin=origin)
        logger.info("start: origin state %s", origin.value)

        if not report.cold_start:
            report.phases.append(Phase.RUNNING)
            format_success("Supabase already running")
        else:
            report.phases.append(Phase.NOT_RUNNING)
            report.phases.append(Phase.STARTING)
            try:
                report.startup = self.start_environment()
            except StartupExhaustedError:
                report.phases.append(Phase.FAILED)
                raise

            # Restore only on a cold start
            report.phases.append(Phase.RESTORING)
            report.restore = self.restore_saved_state()

        try:
            report.migrations = self.sequencer.run(on_phase=report.phases.append)
        except MigrationApplyError:
            report.phases.append(Phase.FAILED)
            raise

        report.phases.append(Phase.READY)
        self._print_ready()
        return report

    def start_environment(self) -> StartupReport:
        """Try each startup strategy in order until one succeeds."""
        logger = get_logger()
        report = StartupReport()
        format_info("Starting Supabase...")

        for index, strategy in enumerate(self.strategies):
            if index == 1:
                format_warning("Standard start failed, trying alternatives...")
            returncode = self.cli.start(strategy.args)
            report.attempts.append(StartAttempt(strategy.name, returncode))
            logger.info("start strategy %s exited with %d", strategy.name, returncode)
            if returncode == 0:
                if index > 0:
                    format_success(strategy.description)
                return report

        raise StartupExhaustedError("Failed to start Supabase", attempts=report.attempts)

    def restore_saved_state(self) -> RestoreResult:
        if not self.store.exists():
            get_logger().info("no saved state at %s", self.store.path)
            format_info("No saved state found")
            self.console.print()
            self.console.print("Create test users, then run: supabase-stateful stop")
            self.console.print("Your state will be saved for next session")
            return RestoreResult(status=RestoreStatus.SKIPPED, detail="no saved state")

        format_info("Found saved state - restoring...")
        result = self.restorer.restore()

        if result.status == RestoreStatus.FAILED:
            format_warning(f"State restoration had errors: {escape(result.detail)}")
        elif result.status == RestoreStatus.CONFLICTS:
            format_dim(
                f"Skipped {len(result.errors)} statement(s) already present "
                "(duplicates are normal)"
            )

        if result.restored:
            self.console.print()
            format_success("Previous session restored!")
            self.console.print()
            self.console.print("Your test users and data have been restored")
        return result

    def _print_ready(self) -> None:
        self.console.print()
        self.console.print(f"Access Supabase Studio: {STUDIO_URL}")
        format_success("Ready for development!")

    # ------------------------------------------------------------------
    # stop
    # ------------------------------------------------------------------

    def stop(self) -> StopReport:
        """Save state, clear auth tokens and stop the environment.

        Raises:
            SnapshotExportError: If the snapshot cannot be produced or saved;
                nothing has been cleared or stopped at that point
        """
        logger = get_logger()

        origin = self.probe()
        report = StopReport(origin=origin)
        if origin == RunState.NOT_RUNNING:
            format_warning("Supabase is not running")
            return report

        format_info("Saving state and stopping Supabase...")
        report.phases.append(Phase.SAVING)
        try:
            report.tables = self.save_state()
        except SnapshotExportError:
            report.phases.append(Phase.FAILED)
            raise
        report.snapshot_saved = bool(report.tables)

        report.phases.append(Phase.SANITIZING)
        format_info("Clearing auth tokens...")
        report.sanitize = self.sanitizer.sanitize()
        if report.sanitize.cleared:
            format_success("Refresh tokens cleared")
        else:
            format_warning("Could not clear refresh tokens (this is okay)")

        report.phases.append(Phase.STOPPING)
        format_info("Stopping Supabase...")
        report.stop_returncode = self.cli.stop()
        if report.stop_returncode != 0:
            logger.warning("supabase stop exited with %d", report.stop_returncode)
            format_warning(f"supabase stop exited with {report.stop_returncode}")
        else:
            format_success("Supabase stopped cleanly")

        report.phases.append(Phase.STOPPED)
        self.console.print()
        if report.snapshot_saved:
            self.console.print("State saved and auth tokens cleared")
        self.console.print("Next time: supabase-stateful start to restore your session")
        return report

    def save_state(self) -> list[TableRef]:
        """Capture a snapshot of all discovered tables.

        Returns:
            The tables captured; empty when there was nothing to capture
        """
        format_info("Saving local database state...")
        format_dim("Discovering tables to export...")
        tables = self.discovery.discover()
        if not tables:
            format_warning("No tables found to export")
            return []

        for ref in tables:
            format_dim(f"  Will export: {escape(ref.qualified_name)}")

        payload = build_snapshot(self.exporter, tables)
        try:
            self.store.save(payload)
        except OSError as e:
            raise SnapshotExportError(f"Failed to save state: {e}") from e

        format_success(f"State saved to {escape(str(self.store.path))}")
        return tables
