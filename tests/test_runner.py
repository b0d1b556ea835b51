import pytest
import asyncio
import json
from unittest.mock import patch
from cortex_tracker.config.settings import Settings
from cortex_tracker.services.runner import ServiceRunner, run_service

@pytest.mark.asyncio
async def test_runner_saves_session_on_shutdown(manager, sampler, store):
    """Test the runner starts a session and writes it out when asked to stop"""
    sampler.focus("Finder", "Documents")
    runner = ServiceRunner(manager=manager, save_on_exit=True)

    task = asyncio.create_task(runner.run())
    await asyncio.sleep(0.01)
    assert runner.running
    assert manager.poller.is_running

    await manager.tick()
    runner.request_shutdown()
    await task

    assert not runner.running
    assert not manager.poller.is_running
    (saved,) = store.list_saved()
    data = json.loads(saved.read_text())
    assert data["sessionName"] == manager.get_session_data().session_name
    assert [event["type"] for event in data["eventLog"]] == ["poll_snapshot", "focusChange", "idle_check"]

@pytest.mark.asyncio
async def test_runner_without_save(manager, store):
    runner = ServiceRunner(manager=manager, save_on_exit=False)
    task = asyncio.create_task(runner.run())
    await asyncio.sleep(0.01)
    runner.request_shutdown()
    await task

    assert store.list_saved() == []

def test_run_service_prepares_directories(temp_dir):
    """Test the entry point creates the session and log directories before running"""
    local = Settings(SESSION_DIR=temp_dir / "sessions", LOG_DIR=temp_dir / "logs")
    with patch("cortex_tracker.services.runner.settings", local), \
         patch("cortex_tracker.services.runner.setup_logging") as mock_logging, \
         patch("cortex_tracker.services.runner.ServiceRunner") as mock_runner, \
         patch("cortex_tracker.services.runner.asyncio.run") as mock_run:
        run_service(debug=True)

    assert (temp_dir / "sessions").is_dir()
    assert (temp_dir / "logs").is_dir()
    mock_logging.assert_called_once_with(debug=True)
    mock_run.assert_called_once_with(mock_runner.return_value.run.return_value)
