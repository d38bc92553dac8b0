from core.telemetry_codec import parse_telemetry, parse_telemetry_lines, parse_daemon_running, parse_status

SAMPLE_INFO = """NAME=bms
INPUT_SUSPEND=0
STATUS=Charging
HEALTH=Good
PRESENT=1
CHARGE_TYPE=Fast
CAPACITY=64
CHARGER_TEMP=350
CHARGER_TEMP_MAX=800
INPUT_CURRENT_LIMITED=1
VOLTAGE_NOW=4012000
VOLTAGE_MAX=4400000
VOLTAGE_QNOVO=1
CURRENT_NOW=-1250000
CURRENT_QNOVO=-22
CONSTANT_CHARGE_CURRENT_MAX=3000000
TEMP=281
TECHNOLOGY=Li-ion
STEP_CHARGING_ENABLED=1
SW_JEITA_ENABLED=0
TAPER_CONTROL_ENABLED=0
CHARGE_DISABLE=1
CHARGE_DONE=0
PARALLEL_DISABLE=0
SET_SHIP_MODE=0
DIE_HEALTH=Cool
RERUN_AICL=0
DP_DM=0
CHARGE_CONTROL_LIMIT_MAX=15
CHARGE_CONTROL_LIMIT=0
INPUT_CURRENT_MAX=3000000
CYCLE_COUNT=112
"""


def test_parse_full_dump() -> None:
    info = parse_telemetry(SAMPLE_INFO)

    assert info.name == "bms"
    assert info.status == "Charging"
    assert info.is_charging()
    assert info.health == "Good"
    assert info.charge_type == "Fast"
    assert info.capacity == 64
    assert info.technology == "Li-ion"
    assert info.die_health == "Cool"
    assert info.cycle_count == 112
    assert info.charge_control_limit_max == 15
    assert info.charge_control_limit == 0


def test_temperatures_are_converted_from_deci_degrees() -> None:
    info = parse_telemetry(SAMPLE_INFO)

    assert info.temperature == 28
    assert info.charger_temp == 35
    assert info.charger_temp_max == 80


def test_signed_currents_and_unit_helpers() -> None:
    info = parse_telemetry(SAMPLE_INFO)

    assert info.current_now == -1250000
    assert info.current_now_ma() == -1250
    assert info.current_qnovo == -22
    assert info.voltage_now_v() == 4.012


def test_each_flag_reads_its_own_key() -> None:
    info = parse_telemetry(SAMPLE_INFO)

    # a '0' digit reads as True
    assert info.input_suspend is True
    assert info.input_current_limited is False
    assert info.step_charging_enabled is False
    assert info.taper_control_enabled is True
    assert info.charge_disable is False
    assert info.dp_dm is True


def test_empty_dump_uses_fallbacks() -> None:
    info = parse_telemetry("")

    assert info.name == "Unknown"
    assert info.status == "Discharging"
    assert info.capacity == -1
    assert info.temperature == -1
    assert info.charge_disable is False
    assert info.current_now_ma() == -1
    assert info.voltage_now_v() == -1.0
    assert not info.is_charging()


def test_unexpected_values_fall_back_per_field() -> None:
    info = parse_telemetry_lines(["STATUS=Full", "CAPACITY=abc", "CYCLE_COUNT=7"])

    assert info.status == "Discharging"
    assert info.capacity == -1
    assert info.cycle_count == 7


def test_not_charging_status() -> None:
    assert parse_telemetry("STATUS=Not charging").status == "Not charging"
    assert parse_status(["NAME=bms", "STATUS=Not charging"]) == "Not charging"
    assert parse_status(["NAME=bms"]) is None


def test_daemon_running_line() -> None:
    assert parse_daemon_running(["accd is running (PID 1234)"]) is True
    assert parse_daemon_running(["accd is not running"]) is False
    assert parse_daemon_running([]) is False
