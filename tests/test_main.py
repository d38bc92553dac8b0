from types import SimpleNamespace

import main
from core.app_services import AppServices


def test_config_load_from_a_missing_file(state, profile_manager, settings_manager, executor, tmp_path, capsys) -> None:
    services = AppServices(state, profile_manager, settings_manager, executor=executor)
    missing = tmp_path / "nope.txt"

    assert main.cmd_config(services, SimpleNamespace(action="load", file=str(missing))) == 1
    assert "cannot read" in capsys.readouterr().err
    assert executor.commands == []
    services.shutdown()


def test_config_load_writes_the_file(state, profile_manager, settings_manager, executor, paths, tmp_path) -> None:
    services = AppServices(state, profile_manager, settings_manager, executor=executor)
    with open(paths.acc_config, "w", encoding="utf-8") as f:
        f.write("capacity=5,60,70-80\n")
    source = tmp_path / "edited.txt"
    source.write_text("capacity=5,101,45-55", encoding="utf-8")

    assert main.cmd_config(services, SimpleNamespace(action="load", file=str(source))) == 0
    assert state.get_current_config().capacity.pause == 55
    services.shutdown()
