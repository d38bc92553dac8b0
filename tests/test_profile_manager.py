import dataclasses
import json
import os

from core.models import Capacity, Cooldown, DEFAULT_ACC_CONFIG, VoltControl
from core.profile_manager import is_valid_profile_name

DAY = DEFAULT_ACC_CONFIG
NIGHT = dataclasses.replace(
    DEFAULT_ACC_CONFIG,
    capacity=Capacity(5, 101, 40, 60),
    cooldown=None,
    volt_control=VoltControl("battery/voltage_max", 4100),
    on_plugged="acc -f 90",
)


def test_list_is_empty_without_index(profile_manager) -> None:
    assert profile_manager.list() == []


def test_create_and_read(profile_manager, paths) -> None:
    assert profile_manager.create("day", DAY)
    assert profile_manager.create("night", NIGHT)

    assert profile_manager.list() == ["day", "night"]
    assert profile_manager.read("night") == NIGHT
    assert profile_manager.read("day").cooldown == Cooldown(50, 10)
    with open(paths.profile_index, encoding="utf-8") as f:
        assert json.load(f) == ["day", "night"]


def test_create_existing_overwrites_snapshot_only(profile_manager) -> None:
    profile_manager.create("day", DAY)
    profile_manager.create("day", NIGHT)

    assert profile_manager.list() == ["day"]
    assert profile_manager.read("day") == NIGHT


def test_invalid_names_are_rejected(profile_manager) -> None:
    assert not profile_manager.create("a/b", DAY)
    assert not profile_manager.create("  ", DAY)
    assert profile_manager.list() == []
    assert is_valid_profile_name("Night charge")
    assert not is_valid_profile_name("..")


def test_save_requires_an_existing_profile(profile_manager) -> None:
    assert not profile_manager.save("day", DAY)

    profile_manager.create("day", DAY)
    assert profile_manager.save("day", NIGHT)
    assert profile_manager.read("day") == NIGHT


def test_rename_keeps_position(profile_manager) -> None:
    for name in ("a", "b", "c"):
        profile_manager.create(name, DAY)
    profile_manager.save("b", NIGHT)

    assert profile_manager.rename("b", "z")
    assert profile_manager.list() == ["a", "z", "c"]
    assert profile_manager.read("b") is None
    assert profile_manager.read("z") == NIGHT


def test_rename_to_existing_or_missing_fails(profile_manager) -> None:
    profile_manager.create("a", DAY)
    profile_manager.create("b", NIGHT)

    assert not profile_manager.rename("a", "b")
    assert not profile_manager.rename("missing", "c")
    assert profile_manager.list() == ["a", "b"]
    assert profile_manager.read("b") == NIGHT


def test_delete_removes_index_entry_and_snapshot(profile_manager, paths) -> None:
    profile_manager.create("day", DAY)
    profile_manager.create("night", NIGHT)

    assert profile_manager.delete("day")
    assert profile_manager.list() == ["night"]
    assert profile_manager.read("day") is None
    assert not os.path.exists(paths.profile_file("day"))
    assert not profile_manager.delete("day")


def test_corrupt_index_and_snapshot(profile_manager, paths) -> None:
    profile_manager.create("day", DAY)
    with open(paths.profile_file("day"), "w", encoding="utf-8") as f:
        f.write("{not json")
    assert profile_manager.read("day") is None

    with open(paths.profile_index, "w", encoding="utf-8") as f:
        f.write("[broken")
    assert profile_manager.list() == []


def test_mutations_publish_names_to_state(profile_manager, state) -> None:
    seen = []
    state.profile_names_changed.connect(seen.append)

    profile_manager.create("day", DAY)
    profile_manager.create("night", NIGHT)
    profile_manager.delete("day")

    assert state.get_profile_names() == ["night"]
    assert seen == [["day"], ["day", "night"], ["night"]]


def test_index_changes_are_signalled(profile_manager) -> None:
    seen = []
    profile_manager.profiles_list_changed.connect(seen.append)

    profile_manager.create("day", DAY)
    profile_manager.rename("day", "morning")

    assert seen == [["day"], ["morning"]]
