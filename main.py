# -*- coding: utf-8 -*-
"""
Command line entry point. Resolves paths, loads translations and preferences,
wires AppState/ProfileManager/SettingsManager/AppServices together and runs
one command; `watch` starts the Qt event loop and the telemetry poller.
"""

import sys
import os
import signal
import traceback
import atexit
import argparse
from typing import List, Optional

from gui.qt import QCoreApplication

from config.settings import APP_NAME, APP_ORGANIZATION_NAME, APP_INTERNAL_NAME, ENV_SHELL
from tools.localization import (
    load_translations, tr, set_language, get_available_languages, get_current_language
)
from tools.system_utils import is_root, is_shell_available
from core.app_services import AppServices
from core.state import AppState
from core.path_manager import PathManager
from core.profile_manager import ProfileManager
from core.settings_manager import SettingsManager
from core.shell import ShellExecutor
from core.models import BatteryInfo, Schedule
from core.config_codec import format_config

_app_services_for_cleanup: Optional[AppServices] = None


def handle_exception(exc_type, exc_value, exc_traceback):
    """Global exception handler: report, clean up, exit."""
    error_msg_detail = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
    print(f"Unhandled exception:\n{error_msg_detail}", file=sys.stderr)
    perform_cleanup()
    os._exit(1)

# --- Cleanup ---
_cleanup_called = False
def perform_cleanup():
    """Stops the poller on exit."""
    global _app_services_for_cleanup, _cleanup_called
    if _cleanup_called:
        return
    _cleanup_called = True
    if _app_services_for_cleanup:
        _app_services_for_cleanup.shutdown()
        _app_services_for_cleanup = None


# ==============================================================================
# Output helpers
# ==============================================================================
def _print_battery_info(info: BatteryInfo):
    current = info.current_now_ma()
    print(f"{info.capacity}%  {info.status}  {info.temperature}°C  "
          f"{info.voltage_now_v():.3f}V  {current}mA  health={info.health}  cycles={info.cycle_count}")

def _print_schedule(schedule: Schedule):
    kind = tr("schedule_once") if schedule.execute_once else tr("schedule_daily")
    print(f"{schedule.hour:02d}:{schedule.minute:02d}  [{kind}]  {schedule.command}")

def _parse_time(value: str):
    """'HH:MM' -> (hour, minute)."""
    try:
        hour, minute = value.split(":", 1)
        return int(hour), int(minute)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected HH:MM, got '{value}'")

def _parse_bool(value: str) -> bool:
    if value.lower() in ("true", "on", "1", "yes"):
        return True
    if value.lower() in ("false", "off", "0", "no"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")

def _optional_int(value: str) -> Optional[int]:
    return None if value.lower() == "none" else int(value)


# ==============================================================================
# Command handlers
# ==============================================================================
def cmd_status(services: AppServices, args) -> int:
    services.perform_full_status_update()
    state = services.state
    print(tr("daemon_running") if state.get_daemon_running() else tr("daemon_not_running"))
    _print_battery_info(state.get_battery_info())
    return 0

def cmd_config(services: AppServices, args) -> int:
    if args.action == "show":
        print(format_config(services.reload_config()))
        selected = services.settings_manager.get_current_selection()
        if selected:
            print(f"profile: {selected}")
        return 0
    if args.action == "raw":
        print("\n".join(services.read_raw_config()))
        return 0
    # load
    try:
        with open(args.file, 'r', encoding='utf-8') as f:
            lines = f.read().split("\n")
    except OSError as e:
        print(f"Error: cannot read '{args.file}': {e}", file=sys.stderr)
        return 1
    return 0 if services.write_raw_config(lines) else 1

def cmd_set(services: AppServices, args) -> int:
    setting = args.setting
    values = args.values
    try:
        if setting == "capacity":
            shutdown, cool_down, resume, pause = (int(v) for v in values)
            success = services.update_capacity(shutdown, cool_down, resume, pause)
        elif setting == "cooldown":
            charge, pause = (values + ["none", "none"])[:2]
            success = services.update_cool_down(_optional_int(charge), _optional_int(pause))
        elif setting == "temp":
            cool_down, pause_charging, wait = (int(v) for v in values)
            success = services.update_temp(cool_down, pause_charging, wait)
        elif setting == "volt":
            control_file = values[0] if len(values) == 2 else None
            millivolts = _optional_int(values[-1]) if values else None
            success = services.update_voltage(control_file, millivolts)
        elif setting == "reset-unplugged":
            success = services.update_reset_unplugged(_parse_bool(values[0]))
        elif setting == "on-boot-exit":
            success = services.update_on_boot_exit(_parse_bool(values[0]))
        elif setting == "on-boot":
            success = services.update_on_boot(" ".join(values) or None)
        elif setting == "on-plugged":
            success = services.update_on_plugged(" ".join(values) or None)
        else:  # switch
            success = services.set_charging_switch(" ".join(values) or None)
    except (ValueError, IndexError, argparse.ArgumentTypeError) as e:
        print(f"Error: invalid value for '{setting}': {e}", file=sys.stderr)
        return 2
    message = services.state.get_controller_status_message()
    if not success and message:
        print(message, file=sys.stderr)
    return 0 if success else 1

def cmd_switches(services: AppServices, args) -> int:
    controller = services.controller
    if args.action == "list":
        for switch in controller.list_charging_switches():
            print(switch)
        return 0
    return controller.test_charging_switch(args.switch)

def cmd_volt_files(services: AppServices, args) -> int:
    for control_file in services.controller.list_voltage_control_files():
        print(control_file)
    return 0

def cmd_limit_once(services: AppServices, args) -> int:
    return 0 if services.controller.set_charging_limit_once(args.limit) else 1

def cmd_reset_stats(services: AppServices, args) -> int:
    return 0 if services.controller.reset_battery_stats() else 1

def cmd_profiles(services: AppServices, args) -> int:
    profile_manager = services.profile_manager
    action = args.action
    if action == "list":
        names = profile_manager.refresh()
        if not names:
            print(tr("no_profiles"))
        selected = services.settings_manager.get_current_selection()
        for name in names:
            print(f"{name} {tr('profile_selected_marker')}" if name == selected else name)
        return 0
    if action == "show":
        config = profile_manager.read(args.name)
        if config is None:
            print(tr("profile_not_found", name=args.name), file=sys.stderr)
            return 1
        print(format_config(config))
        return 0
    if action == "create":
        services.reload_config()
        success = services.create_profile_from_current(args.name)
    elif action == "apply":
        result = services.apply_profile(args.name)
        print(services.state.get_controller_status_message())
        success = result is not None and result.is_successful()
    elif action == "rename":
        success = services.rename_profile(args.name, args.new_name)
    else:  # delete
        success = services.delete_profile(args.name)
    return 0 if success else 1

def cmd_schedules(services: AppServices, args) -> int:
    action = args.action
    if action == "list":
        schedules = services.refresh_schedules()
        if not schedules:
            print(tr("no_schedules"))
        for schedule in schedules:
            _print_schedule(schedule)
        return 0
    if action == "add":
        hour, minute = args.time
        success = services.add_schedule(args.once, hour, minute, args.command)
    elif action == "add-profile":
        hour, minute = args.time
        success = services.schedule_profile(args.once, hour, minute, args.profile)
    elif action == "edit":
        hour, minute = args.time
        schedule = next((s for s in services.refresh_schedules()
                         if s.hour == hour and s.minute == minute and s.execute_once == args.once), None)
        success = schedule is not None and services.edit_schedule_command(schedule, args.command) is not None
    else:  # delete
        hour, minute = args.time
        success = services.delete_schedule(args.once, f"{hour:02d}{minute:02d}")
    return 0 if success else 1

def cmd_daemon(services: AppServices, args) -> int:
    if args.action == "status":
        running = services.controller.is_daemon_running()
        print(tr("daemon_running") if running else tr("daemon_not_running"))
        return 0 if running else 1
    if services.daemon_action(args.action):
        return 0
    print(tr("daemon_action_failed", action=args.action), file=sys.stderr)
    return 1

def cmd_language(services: AppServices, args) -> int:
    if not args.code:
        current = get_current_language()
        for code, display_name in get_available_languages().items():
            marker = "*" if code == current else " "
            print(f"{marker} {code}  {display_name}")
        return 0
    if args.code not in get_available_languages():
        print(f"Error: unknown language '{args.code}'.", file=sys.stderr)
        return 2
    services.settings_manager.set_language(args.code)
    set_language(args.code)
    return 0

def cmd_watch(services: AppServices, args) -> int:
    """Prints telemetry every poll until interrupted."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    app.aboutToQuit.connect(perform_cleanup)
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    services.state.battery_info_changed.connect(_print_battery_info)
    services.state.daemon_running_changed.connect(
        lambda running: print(tr("daemon_running") if running else tr("daemon_not_running")))
    services.set_ui_visibility(True)
    return app.exec()


# ==============================================================================
# Argument parsing
# ==============================================================================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_INTERNAL_NAME, description=f"{APP_NAME}: manage acc/accd from the command line.")
    parser.add_argument("--data-dir", help="profiles and preferences directory")
    parser.add_argument("--config", dest="acc_config", help="path of acc's config.txt")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="battery and daemon status").set_defaults(handler=cmd_status)
    subparsers.add_parser("watch", help="poll telemetry every second").set_defaults(handler=cmd_watch)

    config_parser = subparsers.add_parser("config", help="show or edit the live config")
    config_parser.add_argument("action", choices=["show", "raw", "load"])
    config_parser.add_argument("file", nargs="?", help="file with the new config.txt content (load)")
    config_parser.set_defaults(handler=cmd_config)

    set_parser = subparsers.add_parser("set", help="change one setting group")
    set_parser.add_argument("setting", choices=["capacity", "cooldown", "temp", "volt", "reset-unplugged",
                                                "on-boot-exit", "on-boot", "on-plugged", "switch"])
    set_parser.add_argument("values", nargs="*")
    set_parser.set_defaults(handler=cmd_set)

    switches_parser = subparsers.add_parser("switches", help="list or test charging switches")
    switches_parser.add_argument("action", choices=["list", "test"])
    switches_parser.add_argument("switch", nargs="?")
    switches_parser.set_defaults(handler=cmd_switches)

    subparsers.add_parser("volt-files", help="list voltage control files").set_defaults(handler=cmd_volt_files)

    limit_parser = subparsers.add_parser("limit-once", help="charge to a level once, ignoring the config")
    limit_parser.add_argument("limit", type=int)
    limit_parser.set_defaults(handler=cmd_limit_once)

    subparsers.add_parser("reset-stats", help="reset battery stats").set_defaults(handler=cmd_reset_stats)

    profiles_parser = subparsers.add_parser("profiles", help="manage saved profiles")
    profiles_parser.add_argument("action", choices=["list", "show", "create", "apply", "rename", "delete"])
    profiles_parser.add_argument("name", nargs="?")
    profiles_parser.add_argument("new_name", nargs="?")
    profiles_parser.set_defaults(handler=cmd_profiles)

    schedules_parser = subparsers.add_parser("schedules", help="manage djs jobs")
    schedules_sub = schedules_parser.add_subparsers(dest="action", required=True)
    schedules_sub.add_parser("list")
    for action, extra in (("add", "command"), ("add-profile", "profile"), ("edit", "command"), ("delete", None)):
        action_parser = schedules_sub.add_parser(action)
        action_parser.add_argument("--once", action="store_true", help="one-shot job instead of a daily one")
        action_parser.add_argument("time", type=_parse_time, help="HH:MM")
        if extra:
            action_parser.add_argument(extra)
    schedules_parser.set_defaults(handler=cmd_schedules)

    daemon_parser = subparsers.add_parser("daemon", help="control accd")
    daemon_parser.add_argument("action", choices=["status", "start", "stop", "restart"])
    daemon_parser.set_defaults(handler=cmd_daemon)

    language_parser = subparsers.add_parser("language", help="set the message language")
    language_parser.add_argument("code", nargs="?")
    language_parser.set_defaults(handler=cmd_language)
    return parser


def _validate_args(parser: argparse.ArgumentParser, args):
    if args.command == "config" and args.action == "load" and not args.file:
        parser.error("config load needs a file")
    if args.command == "profiles" and args.action != "list" and not args.name:
        parser.error(f"profiles {args.action} needs a name")
    if args.command == "profiles" and args.action == "rename" and not args.new_name:
        parser.error("profiles rename needs a new name")


def _create_executor() -> ShellExecutor:
    # Already root: no privilege prefix unless one is configured
    if is_root() and not os.environ.get(ENV_SHELL):
        return ShellExecutor(prefix=[])
    return ShellExecutor()


# --- Main ---
def main(argv: Optional[List[str]] = None) -> int:
    """Main application function."""
    global _app_services_for_cleanup

    sys.excepthook = handle_exception
    atexit.register(perform_cleanup)

    parser = build_parser()
    args = parser.parse_args(argv)
    _validate_args(parser, args)

    path_manager = PathManager(data_dir=args.data_dir, acc_config_path=args.acc_config)
    load_translations(path_manager.languages)

    executor = _create_executor()
    if not is_shell_available(executor.prefix):
        program = (executor.prefix or ["sh"])[0]
        print(f"Error: '{program}' not found. Set {ENV_SHELL} to a working privileged shell.", file=sys.stderr)
        return 1

    QCoreApplication.setOrganizationName(APP_ORGANIZATION_NAME)
    QCoreApplication.setApplicationName(APP_INTERNAL_NAME)

    app_state = AppState(path_manager=path_manager)
    profile_manager = ProfileManager(app_state=app_state)
    settings_manager = SettingsManager(app_state=app_state)
    settings_manager.load()
    set_language(app_state.get_language())

    app_services = AppServices(app_state, profile_manager, settings_manager, executor=executor)
    _app_services_for_cleanup = app_services

    if args.command != "language" and not app_services.initialize():
        print(app_state.get_controller_status_message(), file=sys.stderr)
        return 1

    return args.handler(app_services, args)


if __name__ == "__main__":
    sys.exit(main())
