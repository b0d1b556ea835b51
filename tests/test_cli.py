import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from click.testing import CliRunner
from cortex_tracker.cli.service import cli
from cortex_tracker.models.session import IdleCheckEvent, SessionData, WorkspaceApp
from cortex_tracker.services.launcher import AppLauncher

NOW = datetime(2026, 1, 7, 15, 16, 19, tzinfo=timezone.utc)

@pytest.fixture
def runner():
    return CliRunner()

@pytest.fixture
def saved_session(store):
    """Write a small session to the temporary session directory"""
    session = SessionData.new(NOW)
    session.live_workspace.apps.append(
        WorkspaceApp(name="Code", path="/Applications/Code.app", window_title="main.py", added_at=NOW)
    )
    session.event_log.append(IdleCheckEvent(timestamp=NOW, idle_seconds=3.0, is_idle=False))
    return store.save(session, NOW)

def test_show_renders_session(runner, saved_session):
    result = runner.invoke(cli, ["show", str(saved_session)])
    assert result.exit_code == 0
    assert "Workspace Apps" in result.output
    assert "idle_check" in result.output

def test_show_missing_file(runner, temp_dir):
    result = runner.invoke(cli, ["show", str(temp_dir / "session.json")])
    assert result.exit_code == 0
    assert "No session file found" in result.output

def test_show_corrupt_file(runner, temp_dir):
    path = temp_dir / "broken.json"
    path.write_text("{")
    result = runner.invoke(cli, ["show", str(path)])
    assert result.exit_code == 1

def test_sessions_lists_saved_files(runner, store, saved_session):
    result = runner.invoke(cli, ["sessions", "--dir", str(store.session_dir)])
    assert result.exit_code == 0
    assert "Saved Sessions" in result.output
    assert "session_2026-01-07" in result.output

def test_sessions_empty_directory(runner, temp_dir):
    result = runner.invoke(cli, ["sessions", "--dir", str(temp_dir / "none")])
    assert result.exit_code == 0
    assert "No saved sessions found" in result.output

def test_launch_reports_result(runner):
    with patch("cortex_tracker.cli.service.setup_logging"), \
         patch.object(AppLauncher, "launch", AsyncMock(return_value=True)) as mock_launch:
        result = runner.invoke(cli, ["launch", "/Applications/Notes.app"])
    assert result.exit_code == 0
    assert "Launched" in result.output
    mock_launch.assert_awaited_once_with("/Applications/Notes.app")

def test_launch_failure_exits_nonzero(runner):
    with patch("cortex_tracker.cli.service.setup_logging"), \
         patch.object(AppLauncher, "launch", AsyncMock(return_value=False)):
        result = runner.invoke(cli, ["launch", "/Applications/Missing.app"])
    assert result.exit_code == 1
