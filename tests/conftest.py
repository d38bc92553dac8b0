from typing import Dict, List, Union

import pytest

from gui.qt import QCoreApplication
from core.path_manager import PathManager
from core.profile_manager import ProfileManager
from core.settings_manager import SettingsManager
from core.shell import ShellResult
from core.state import AppState


class FakeExecutor:
    """Records every command and answers from a script instead of a shell."""

    def __init__(self) -> None:
        self.prefix: List[str] = []
        self.commands: List[str] = []
        # exact command -> stdout lines or a full ShellResult
        self.responses: Dict[str, Union[List[str], ShellResult]] = {}
        # any command containing one of these substrings fails with code 1
        self.failing: List[str] = []

    def execute(self, commands) -> ShellResult:
        script = commands if isinstance(commands, str) else "\n".join(commands)
        self.commands.append(script)
        if any(part in script for part in self.failing):
            return ShellResult(False, 1, [])
        response = self.responses.get(script, [])
        if isinstance(response, ShellResult):
            return response
        return ShellResult(True, 0, list(response))


@pytest.fixture(scope="session")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def paths(tmp_path) -> PathManager:
    return PathManager(data_dir=str(tmp_path / "data"), acc_config_path=str(tmp_path / "config.txt"))


@pytest.fixture
def state(qapp, paths) -> AppState:
    return AppState(path_manager=paths)


@pytest.fixture
def profile_manager(state) -> ProfileManager:
    return ProfileManager(app_state=state)


@pytest.fixture
def settings_manager(state) -> SettingsManager:
    return SettingsManager(app_state=state)
