"""Tests for the status command."""

import json
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from supabase_stateful.main import app
from supabase_stateful.services.config_service import ConfigService

runner = CliRunner()


@pytest.fixture()
def initialized(project_dir):
    (project_dir / ".supabase-stateful.json").write_text(
        '{"stateFile": "supabase/local-state.sql", "containerName": "supabase_db_demo"}'
    )
    return project_dir


def _running(value: bool):
    mock = patch("supabase_stateful.commands.status_command.DockerRuntime")
    started = mock.start()
    started.return_value.is_running.return_value = value
    return mock


@pytest.fixture()
def stopped():
    mock = _running(False)
    yield
    mock.stop()


@pytest.fixture()
def running():
    mock = _running(True)
    yield
    mock.stop()


def test_not_initialized(project_dir, stopped):
    result = runner.invoke(app, ["status", "-C", str(project_dir)])

    assert result.exit_code == 0
    assert "Not initialized" in result.output
    assert "supabase-stateful init" in result.output


def test_pretty_without_snapshot(initialized, stopped):
    result = runner.invoke(app, ["status", "-C", str(initialized)])

    assert result.exit_code == 0
    assert "Supabase Stateful Status" in result.output
    assert "Not saved yet" in result.output
    assert "stopped" in result.output


def test_json_with_snapshot(initialized, running):
    state = initialized / "supabase" / "local-state.sql"
    state.write_text("x" * 2048)
    (initialized / "supabase" / "local-state.sql.backup").write_text("old")

    result = runner.invoke(app, ["status", "-C", str(initialized), "-o", "json"])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["supabase"] == "running"
    assert data["state_file"]["saved"] is True
    assert data["state_file"]["size"] == "2.0 KB"
    assert data["state_file"]["backup"] is True
    assert data["configuration"]["container"] == "supabase_db_demo"
    assert data["service_urls"]["studio"] == "http://localhost:54323"
    assert data["log_file"].endswith("supabase-stateful.log")


def test_yaml_when_stopped_has_no_urls(initialized, stopped):
    result = runner.invoke(app, ["status", "-C", str(initialized), "--output", "yaml"])

    assert result.exit_code == 0
    data = yaml.safe_load(result.output)
    assert data["supabase"] == "stopped"
    assert "service_urls" not in data


def test_collect_status_uninitialized_json(project_dir, stopped):
    from supabase_stateful.commands.status_command import collect_status

    data = collect_status(ConfigService(project_dir))

    assert data["initialized"] is False
    assert data["state_file"]["saved"] is False
    assert data["configuration"]["container"] == "supabase_db_demo"
