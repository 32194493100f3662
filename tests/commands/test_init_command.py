"""Tests for the init command."""

import json

from typer.testing import CliRunner

from supabase_stateful.main import app

runner = CliRunner()


def test_init_creates_config_and_gitignore(project_dir):
    (project_dir / ".gitignore").write_text("node_modules\n")

    result = runner.invoke(app, ["init", "-C", str(project_dir)])

    assert result.exit_code == 0, result.output
    assert "Detected project: demo" in result.output
    config = json.loads((project_dir / ".supabase-stateful.json").read_text())
    assert config["containerName"] == "supabase_db_demo"
    assert config["stateFile"] == "supabase/local-state.sql"
    ignored = (project_dir / ".gitignore").read_text().splitlines()
    assert ignored == [
        "node_modules",
        "supabase/local-state.sql",
        "supabase/local-state.sql.backup",
    ]


def test_init_twice_is_a_warning(project_dir):
    runner.invoke(app, ["init", "-C", str(project_dir)])
    before = (project_dir / ".supabase-stateful.json").read_text()

    result = runner.invoke(app, ["init", "-C", str(project_dir)])

    assert result.exit_code == 0
    assert "Already initialized" in result.output
    assert (project_dir / ".supabase-stateful.json").read_text() == before
    assert (project_dir / ".gitignore").read_text().count("local-state.sql.backup") == 1


def test_init_requires_supabase_project(tmp_path):
    result = runner.invoke(app, ["init", "-C", str(tmp_path)])

    assert result.exit_code == 1
    assert "supabase init" in result.output
    assert not (tmp_path / ".supabase-stateful.json").exists()


def test_project_id_is_printed_literally(project_dir):
    (project_dir / "supabase" / "config.toml").write_text('project_id = "[/x]"\n')

    result = runner.invoke(app, ["init", "-C", str(project_dir)])

    assert result.exit_code == 0, result.output
    assert "Detected project: [/x]" in result.output
    config = json.loads((project_dir / ".supabase-stateful.json").read_text())
    assert config["containerName"] == "supabase_db_[/x]"
