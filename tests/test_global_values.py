import json

import pytest

from heartbeat.geometry import Vec3
from heartbeat.global_values import GlobalValues


@pytest.fixture
def values(tmp_path):
    return GlobalValues(tmp_path / "GlobalValues")


def test_get_value_missing_returns_default(values):
    assert values.get_value("Enemy", "HP") is None
    assert values.get_value("Enemy", "HP", 7) == 7


def test_add_value_does_not_overwrite(values):
    values.add_value("Enemy", "HP", 100)
    values.add_value("Enemy", "HP", 5)
    assert values.get_value("Enemy", "HP") == 100


def test_set_value_overwrites(values):
    values.add_value("Enemy", "HP", 100)
    values.set_value("Enemy", "HP", 5)
    assert values.get_value("Enemy", "HP") == 5


@pytest.mark.parametrize("bad", ["text", True, [1, 2, 3], None])
def test_rejects_unsupported_types(values, bad):
    with pytest.raises(TypeError):
        values.set_value("G", "k", bad)
    with pytest.raises(TypeError):
        values.add_value("G", "k", bad)


def test_export_missing_group_raises(values):
    with pytest.raises(KeyError):
        values.export_json("Nowhere")


def test_export_empty_group(values):
    values.create_group("Empty")
    path = values.export_json("Empty")
    assert path.name == "Empty.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"Empty": {}}


def test_export_writes_group_object(values):
    values.set_value("Heart", "AttackDamage", 30)
    values.set_value("Heart", "Speed", 0.5)
    values.set_value("Animation", "DistanceOffset", Vec3(0.0, 1.0, 1.5))
    path = values.export_json("Heart")
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "Heart": {"AttackDamage": 30, "Speed": 0.5}
    }


def test_round_trip_through_files(values):
    values.set_value("Player", "NumBullets", 3)
    values.set_value("Player", "Speed", 3.0)
    values.set_value("Player", "Offset", Vec3(0.0, 1.0, 1.5))
    values.export_json("Player")

    loaded = GlobalValues(values.directory)
    loaded.import_json_all()
    assert loaded.get_value("Player", "NumBullets") == 3
    assert isinstance(loaded.get_value("Player", "NumBullets"), int)
    assert loaded.get_value("Player", "Speed") == 3.0
    assert isinstance(loaded.get_value("Player", "Speed"), float)
    assert loaded.get_value("Player", "Offset") == Vec3(0.0, 1.0, 1.5)


def test_import_overrides_existing_values(values):
    values.set_value("Enemy", "HP", 100)
    values.export_json("Enemy")
    values.set_value("Enemy", "HP", 1)
    values.import_json_all()
    assert values.get_value("Enemy", "HP") == 100


def test_import_all_missing_directory_is_noop(tmp_path):
    store = GlobalValues(tmp_path / "absent")
    store.import_json_all()
    assert store.get_value("Any", "Key", "unset") == "unset"


def test_import_skips_other_files_and_kinds(values):
    values.directory.mkdir(parents=True)
    (values.directory / "Other.txt").write_text('{"Other": {"a": 1}}', encoding="utf-8")
    (values.directory / "Mixed.json").write_text(
        json.dumps({"Mixed": {"flag": True, "pair": [1, 2], "name": "x", "n": 4}}),
        encoding="utf-8",
    )
    values.import_json_all()
    assert values.get_value("Other", "a") is None
    assert values.get_value("Mixed", "flag") is None
    assert values.get_value("Mixed", "pair") is None
    assert values.get_value("Mixed", "name") is None
    assert values.get_value("Mixed", "n") == 4


def test_import_unreadable_file_is_ignored(values, tmp_path):
    values.import_json(tmp_path / "missing.json")
    assert values.get_value("missing", "x", "unset") == "unset"


def test_import_file_without_its_group_raises(values, tmp_path):
    path = tmp_path / "Group.json"
    path.write_text(json.dumps({"Other": {"a": 1}}), encoding="utf-8")
    with pytest.raises(KeyError):
        values.import_json(path)