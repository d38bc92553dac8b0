import pytest

from core.config_codec import (
    ConfigParseError, DEFAULT_TEMP, parse_config, read_config_lines, write_config_lines,
    capacity_command, cool_down_command, temp_command, voltage_command, charging_switch_command,
    on_boot_command, reset_unplugged_command, group_commands, config_commands, format_config,
)
from core.models import AccConfig, Capacity, Cooldown, Temp, VoltControl

SAMPLE_CONFIG = """configVerCode=201905111
capacity=5,60,70-80
coolDown=50/10
temp=400-450_90
cVolt=
resetUnplugged=false
onBootExit=true
onBoot=
onPlugged=
switch=
"""


def test_parse_full_config() -> None:
    config = parse_config(SAMPLE_CONFIG)

    assert config.capacity == Capacity(5, 60, 70, 80)
    assert config.cooldown == Cooldown(50, 10)
    assert config.temp == Temp(40, 45, 90)
    assert config.volt_control is None
    assert config.reset_unplugged is False
    assert config.on_boot_exit is True
    assert config.on_boot is None
    assert config.on_plugged is None
    assert config.charging_switch is None


def test_capacity_with_empty_shutdown_and_cool_down() -> None:
    config = parse_config("capacity=,,70-80")

    assert config.capacity == Capacity(0, 101, 70, 80)
    assert not config.capacity.is_cool_down_enabled()


def test_missing_capacity_raises() -> None:
    with pytest.raises(ConfigParseError):
        parse_config("coolDown=50/10\ntemp=400-450_90")


def test_missing_groups_fall_back_to_defaults() -> None:
    config = parse_config("capacity=5,60,70-80")

    assert config.cooldown is None
    assert config.temp == DEFAULT_TEMP == Temp(90, 95, 90)
    assert config.volt_control is None
    assert config.reset_unplugged is False


def test_empty_cool_down_values_mean_no_cooldown() -> None:
    assert parse_config("capacity=5,60,70-80\ncoolDown=/").cooldown is None


@pytest.mark.parametrize("line, expected", [
    ("cVolt=battery/voltage_max:4200", VoltControl("battery/voltage_max", 4200)),
    ("cVolt=4200", VoltControl(None, 4200)),
    ("cVolt=battery/voltage_max", VoltControl("battery/voltage_max", None)),
    ("cVolt=", None),
])
def test_volt_control_shapes(line, expected) -> None:
    assert parse_config(f"capacity=5,60,70-80\n{line}").volt_control == expected


def test_hooks_are_trimmed_and_comments_dropped() -> None:
    text = "capacity=5,60,70-80\nonBoot=acc -s s- # restore\nonPlugged= echo plugged \nswitch=battery/charging_enabled 1 0"
    config = parse_config(text)

    assert config.on_boot == "acc -s s-"
    assert config.on_plugged == "echo plugged"
    assert config.charging_switch == "battery/charging_enabled 1 0"


def test_indented_lines_are_parsed() -> None:
    config = parse_config("  capacity=5,60,70-80\n\tresetUnplugged=true")

    assert config.capacity.pause == 80
    assert config.reset_unplugged is True


def test_command_strings() -> None:
    assert capacity_command(5, 60, 70, 80) == "acc -s capacity 5,60,70-80"
    assert cool_down_command(50, 10) == "acc -s coolDown 50/10"
    assert cool_down_command(None, None) == "acc -s coolDown"
    assert temp_command(40, 45, 90) == "acc -s temp 400-450_90"
    assert reset_unplugged_command(True) == "acc -s resetUnplugged true"
    assert on_boot_command(None) == "acc -s onBoot"
    assert on_boot_command("acc -s s-") == "acc -s onBoot acc -s s-"


def test_voltage_and_switch_commands() -> None:
    assert voltage_command("battery/voltage_max", 4200) == "acc --set cVolt battery/voltage_max:4200"
    assert voltage_command(None, 4200) == "acc --set cVolt 4200"
    assert voltage_command(None, None) == "acc --set cVolt"
    assert charging_switch_command("battery/charging_enabled 1 0") == "acc -s s battery/charging_enabled 1 0"
    assert charging_switch_command(None) == "acc -s s-"


def test_group_commands_cover_every_group_in_order() -> None:
    config = parse_config(SAMPLE_CONFIG)
    commands = group_commands(config)

    assert list(commands) == [
        "capacity", "cooldown", "temp", "volt_control", "reset_unplugged",
        "on_boot_exit", "on_boot", "on_plugged", "charging_switch",
    ]
    assert config_commands(config)[0] == "acc -s capacity 5,60,70-80"
    assert config_commands(config)[2] == "acc -s temp 400-450_90"


def test_parsed_config_survives_a_snapshot_round_trip() -> None:
    config = parse_config(SAMPLE_CONFIG.replace("cVolt=\n", "cVolt=battery/voltage_max:4200\n"))
    assert config.volt_control == VoltControl("battery/voltage_max", 4200)

    assert AccConfig.from_dict(config.to_dict()) == config


def test_format_config_mentions_every_group() -> None:
    text = format_config(parse_config(SAMPLE_CONFIG))

    assert "resume=70%" in text
    assert "coolDown: charge 50s / pause 10s" in text
    assert "switch: automatic" in text


def test_raw_lines_pass_through(tmp_path) -> None:
    path = tmp_path / "config.txt"

    assert read_config_lines(str(path)) == []
    assert write_config_lines(str(path), ["capacity=5,60,70-80"]) is False
    assert not path.exists()

    path.write_text("capacity=5,60,70-80\ntemp=400-450_90", encoding="utf-8")
    assert read_config_lines(str(path)) == ["capacity=5,60,70-80", "temp=400-450_90"]
    assert write_config_lines(str(path), ["capacity=5,101,60-75", ""]) is True
    assert path.read_text(encoding="utf-8") == "capacity=5,101,60-75\n"
