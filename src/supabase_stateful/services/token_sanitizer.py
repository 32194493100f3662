"""Purge Supabase Auth refresh tokens before the environment stops."""

from __future__ import annotations

from supabase_stateful.adapters.docker import DockerRuntime
from supabase_stateful.models.lifecycle import SanitizeResult
from supabase_stateful.utils.logger import get_logger

CLEAR_TOKENS_SQL = "DELETE FROM auth.refresh_tokens;"


class AuthTokenSanitizer:
    """Deletes session tokens; failures are reported, never raised."""

    def __init__(self, runtime: DockerRuntime):
        self.runtime = runtime

    def sanitize(self) -> SanitizeResult:
        logger = get_logger()
        try:
            result = self.runtime.psql(CLEAR_TOKENS_SQL)
        except OSError as e:
            logger.warning("could not clear refresh tokens: %s", e)
            return SanitizeResult(cleared=False, detail=str(e))

        if not result.ok:
            detail = result.stderr.strip() or f"psql exited with {result.returncode}"
            logger.warning("could not clear refresh tokens: %s", detail)
            return SanitizeResult(cleared=False, detail=detail)

        logger.info("refresh tokens cleared: %s", result.stdout.strip())
        return SanitizeResult(cleared=True, detail=result.stdout.strip())
