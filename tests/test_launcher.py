import pytest
import logging
from unittest.mock import AsyncMock, MagicMock, patch
from cortex_tracker.services.launcher import AppLauncher, open_command

APP = "/Applications/Visual Studio Code.app"

def fake_process(returncode=0, stderr=b""):
    proc = MagicMock()
    proc.returncode = returncode
    proc.communicate = AsyncMock(return_value=(None, stderr))
    return proc

@pytest.mark.parametrize("platform, expected", [
    ("darwin", ["open", APP]),
    ("linux", ["xdg-open", APP]),
    ("win32", ["cmd", "/c", "start", "", APP]),
])
def test_open_command_per_platform(monkeypatch, platform, expected):
    monkeypatch.setattr("cortex_tracker.services.launcher.sys.platform", platform)
    assert open_command(APP) == expected

@pytest.mark.asyncio
async def test_launch_passes_path_with_spaces_as_one_argument(monkeypatch, caplog):
    monkeypatch.setattr("cortex_tracker.services.launcher.sys.platform", "darwin")
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=fake_process())) as mock_exec:
        with caplog.at_level(logging.INFO):
            assert await AppLauncher().launch(APP) is True

    assert mock_exec.call_args.args == ("open", APP)
    assert f"Launched app: {APP}" in caplog.text

@pytest.mark.asyncio
async def test_launch_failure_is_logged_not_raised(caplog):
    proc = fake_process(returncode=1, stderr=b"The file does not exist.")
    with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
        with caplog.at_level(logging.ERROR):
            assert await AppLauncher().launch("/Applications/Missing.app") is False
    assert "The file does not exist." in caplog.text

@pytest.mark.asyncio
async def test_launch_without_open_command(caplog):
    with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError("open"))):
        with caplog.at_level(logging.ERROR):
            assert await AppLauncher().launch(APP) is False
    assert "Failed to launch app" in caplog.text

@pytest.mark.asyncio
async def test_manager_delegates_launch(manager):
    manager.launcher = MagicMock()
    manager.launcher.launch = AsyncMock(return_value=True)
    assert await manager.launch_app(APP) is True
    manager.launcher.launch.assert_awaited_once_with(APP)
