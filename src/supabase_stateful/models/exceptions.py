"""Custom exceptions for supabase-stateful."""


class StatefulError(Exception):
    """Base exception for all supabase-stateful errors."""


class ConfigError(StatefulError):
    """Raised when the project configuration file cannot be read or validated."""


class SnapshotExportError(StatefulError):
    """Raised when table discovery or pg_dump fails, or the dump is too large."""


class StartupExhaustedError(StatefulError):
    """Raised when every startup strategy has failed."""

    def __init__(self, message: str, attempts: list | None = None):
        super().__init__(message)
        self.attempts = attempts or []


class MigrationCheckError(StatefulError):
    """Raised when the pending migration list cannot be obtained."""


class MigrationApplyError(StatefulError):
    """Raised when applying counted pending migrations exits non-zero."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode
