import json

from core.settings_manager import SettingsManager
from core.state import AppState


def test_selection_survives_restart(settings_manager, paths) -> None:
    settings_manager.save_current_selection("night")

    restarted = SettingsManager(AppState(path_manager=paths))
    restarted.load()
    assert restarted.get_current_selection() == "night"


def test_clearing_the_selection(settings_manager, paths) -> None:
    settings_manager.save_current_selection("night")
    settings_manager.save_current_selection(None)

    with open(paths.preferences, encoding="utf-8") as f:
        assert json.load(f)["selected_profile"] is None
    assert settings_manager.get_current_selection() is None


def test_reset_unplugged_mirror_and_language(settings_manager, paths) -> None:
    settings_manager.set_reset_unplugged_mirror(True)
    settings_manager.set_language("it")

    restarted_state = AppState(path_manager=paths)
    SettingsManager(restarted_state).load()
    assert restarted_state.get_reset_unplugged_mirror() is True
    assert restarted_state.get_language() == "it"


def test_missing_or_corrupt_file_loads_defaults(settings_manager, state, paths) -> None:
    settings_manager.load()
    assert state.get_selected_profile() is None
    assert state.get_language() == "en"

    paths.ensure_dirs()
    with open(paths.preferences, "w", encoding="utf-8") as f:
        f.write("not json")
    settings_manager.load()
    assert state.get_selected_profile() is None
    assert state.get_reset_unplugged_mirror() is False


def test_selection_change_is_signalled(settings_manager, state) -> None:
    seen = []
    state.selected_profile_changed.connect(seen.append)

    settings_manager.save_current_selection("day")
    settings_manager.save_current_selection("day")
    settings_manager.save_current_selection(None)

    assert seen == ["day", None]
