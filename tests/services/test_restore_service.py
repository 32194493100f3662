"""Unit tests for services/restore_service.py."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from supabase_stateful.models.lifecycle import RestoreStatus
from supabase_stateful.services.restore_service import (
    REMOTE_SNAPSHOT_PATH,
    SnapshotRestorer,
    extract_errors,
    is_benign,
)
from supabase_stateful.services.snapshot_store import SnapshotStore


@pytest.fixture()
def store(tmp_path) -> SnapshotStore:
    store = SnapshotStore(tmp_path / "state.sql")
    store.save("SELECT 1;")
    return store


@pytest.fixture()
def runtime(make_result):
    runtime = MagicMock()
    runtime.copy_into.return_value = make_result()
    runtime.psql_file.return_value = make_result()
    return runtime


def test_extract_errors():
    stderr = (
        "psql:/tmp/state.sql:10: ERROR:  relation \"users\" already exists\n"
        "psql:/tmp/state.sql:12: NOTICE:  hello\n"
    )
    assert extract_errors(stderr) == ['relation "users" already exists']


@pytest.mark.parametrize(
    ("message", "benign"),
    [
        ('duplicate key value violates unique constraint "users_pkey"', True),
        ('relation "users" already exists', True),
        ('column "id" of relation "todos" is already an identity column', True),
        ('multiple primary keys for table "todos" are not allowed', True),
        ('syntax error at or near "INSER"', False),
        ("permission denied for table users", False),
    ],
)
def test_is_benign(message, benign):
    assert is_benign(message) is benign


def test_clean_restore(store, runtime):
    result = SnapshotRestorer(runtime, store).restore()

    runtime.copy_into.assert_called_once_with(store.path, REMOTE_SNAPSHOT_PATH)
    runtime.psql_file.assert_called_once_with(REMOTE_SNAPSHOT_PATH)
    assert result.status == RestoreStatus.RESTORED
    assert result.restored is True


def test_missing_snapshot_is_skipped(tmp_path, runtime):
    result = SnapshotRestorer(runtime, SnapshotStore(tmp_path / "none.sql")).restore()

    assert result.status == RestoreStatus.SKIPPED
    runtime.copy_into.assert_not_called()


def test_duplicate_conflicts_are_benign(store, runtime, make_result):
    runtime.psql_file.return_value = make_result(
        stderr="psql:x:1: ERROR:  duplicate key value violates unique constraint \"p\"\n"
    )

    result = SnapshotRestorer(runtime, store).restore()

    assert result.status == RestoreStatus.CONFLICTS
    assert result.restored is True
    assert len(result.errors) == 1


def test_unexpected_sql_errors_are_failed_not_raised(store, runtime, make_result):
    runtime.psql_file.return_value = make_result(
        stderr="psql:x:1: ERROR:  permission denied for table users\n"
    )

    result = SnapshotRestorer(runtime, store).restore()

    assert result.status == RestoreStatus.FAILED
    assert result.restored is False


def test_copy_failure_is_failed_not_raised(store, runtime, make_result):
    runtime.copy_into.return_value = make_result(1, stderr="No such container")

    result = SnapshotRestorer(runtime, store).restore()

    assert result.status == RestoreStatus.FAILED
    assert "No such container" in result.detail
    runtime.psql_file.assert_not_called()


def test_docker_missing_is_failed_not_raised(store, runtime):
    runtime.copy_into.side_effect = FileNotFoundError("docker")

    result = SnapshotRestorer(runtime, store).restore()

    assert result.status == RestoreStatus.FAILED


def test_schema_replay_over_migrated_tables_is_conflicts(store, runtime, make_result):
    runtime.psql_file.return_value = make_result(
        stderr=(
            'psql:/tmp/state.sql:20: ERROR:  relation "todos" already exists\n'
            "psql:/tmp/state.sql:31: ERROR:  column \"id\" of relation \"todos\" "
            "is already an identity column\n"
        )
    )

    result = SnapshotRestorer(runtime, store).restore()

    assert result.status == RestoreStatus.CONFLICTS
    assert len(result.errors) == 2
