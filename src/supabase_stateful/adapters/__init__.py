"""Adapters module - thin wrappers around the external tools the engine drives.

- shell: blocking subprocess execution
- docker: the Supabase postgres container (psql, pg_dump, docker cp, docker ps)
- supabase_cli: the Supabase CLI (start, stop, migration list/up)
"""

from .docker import DockerRuntime
from .shell import CommandResult, run_capture, run_streaming
from .supabase_cli import SupabaseCLI

__all__ = [
    "CommandResult",
    "DockerRuntime",
    "SupabaseCLI",
    "run_capture",
    "run_streaming",
]
