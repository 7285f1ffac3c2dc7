import json

import pytest

from heartbeat.beat import BeatManager
from heartbeat.enemy import EnemyContext
from heartbeat.enemy_manager import EnemyManager
from heartbeat.geometry import BASIS_Z, Vec3
from heartbeat.global_values import GlobalValues
from heartbeat.hp import PlayerHPManager
from heartbeat.player import Player
from heartbeat.timeline import PopData, Timeline, WaveData, load_wave_file


def _wave_document(hp, speed, pops):
    return {
        "PlayerHitPoint": hp,
        "EnemyApproachSpeed": speed,
        "PopData": {
            f"{i:02}": {"Delay": d, "Translate": list(t), "Forward": list(f)}
            for i, (d, t, f) in enumerate(pops)
        },
    }


def _write(path, document):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document), encoding="utf-8")


def _timeline(tmp_path):
    manager = EnemyManager(EnemyContext())
    timeline = Timeline(tmp_path, enemy_manager=manager)
    return timeline, manager


def test_load_wave_file_reads_fields(tmp_path):
    path = tmp_path / "00.json"
    _write(path, _wave_document(5, 1.5, [(0.5, (1.0, 0.0, 2.0), (0.0, 0.0, 1.0))]))
    wave = load_wave_file(path)
    assert wave.player_hitpoint == 5
    assert wave.enemy_approach_speed == 1.5
    assert wave.pop_data == [PopData(0.5, Vec3(1.0, 0.0, 2.0), Vec3(0.0, 0.0, 1.0))]


def test_load_wave_file_without_popdata_raises(tmp_path):
    path = tmp_path / "bad.json"
    _write(path, {"PlayerHitPoint": 3})
    with pytest.raises(KeyError):
        load_wave_file(path)


def test_load_wave_file_missing_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_wave_file(tmp_path / "nothing.json")


def test_load_all_follows_order_and_skips_missing(tmp_path):
    _write(tmp_path / "Timeline.json", {"WaveFiles": ["b.json", "gone.json", "a.json"]})
    _write(tmp_path / "WaveData" / "a.json", _wave_document(2, 0.0, []))
    _write(tmp_path / "WaveData" / "b.json", _wave_document(7, 0.0, []))
    timeline = Timeline(tmp_path)
    timeline.load_all()
    assert [wave.player_hitpoint for wave in timeline.waves] == [7, 2]


def test_load_all_without_settings_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Timeline(tmp_path).load_all()


def test_not_started_and_empty_timelines_are_ended(tmp_path):
    timeline = Timeline(tmp_path)
    assert timeline.is_end_wave_all()
    timeline.start()
    assert timeline.is_end_wave_all()
    assert timeline.current_wave is None


def test_spawns_follow_delays_and_waves_advance(tmp_path):
    timeline, manager = _timeline(tmp_path)
    timeline.waves = [
        WaveData(3, 0.0, [PopData(0.0, Vec3(1, 0, 0), BASIS_Z), PopData(1.0, Vec3(2, 0, 0), BASIS_Z)]),
        WaveData(3, 0.0, [PopData(0.0, Vec3(3, 0, 0), BASIS_Z)]),
    ]
    timeline.start()
    timeline.update(0.1)
    assert len(manager) == 1
    assert manager.enemies[0].position == Vec3(1, 0, 0)
    timeline.update(1.0)
    assert len(manager) == 2
    timeline.update(0.1)
    assert timeline.now_wave == 0
    manager.clear()
    timeline.update(0.1)
    assert timeline.now_wave == 1
    assert [enemy.position for enemy in manager] == [Vec3(3, 0, 0)]
    manager.clear()
    timeline.update(0.1)
    assert timeline.is_end_wave_all()


def test_reset_now_wave_sets_player_and_speed(tmp_path):
    values = GlobalValues(tmp_path / "values")
    hp = PlayerHPManager()
    player = Player(values, hp, BeatManager())
    manager = EnemyManager(EnemyContext(values=values))
    timeline = Timeline(tmp_path, enemy_manager=manager, player=player)
    timeline.waves = [WaveData(4, 2.5, [])]
    timeline.start()
    assert hp.max_hitpoint == 4
    assert len(player.bullets) == 4
    assert manager.context.approach_speed == 2.5
    assert timeline.timer == 0.0


def test_editor_mode_pauses_update(tmp_path):
    timeline, manager = _timeline(tmp_path)
    timeline.waves = [WaveData(3, 0.0, [PopData(0.0, Vec3(), BASIS_Z)])]
    timeline.start()
    timeline.editor_active = True
    timeline.update(1.0)
    assert len(manager) == 0
    timeline.demo_play = True
    timeline.update(1.0)
    assert len(manager) == 1


def test_reset_wave_clears_enemies_and_checks_range(tmp_path):
    timeline, manager = _timeline(tmp_path)
    timeline.waves = [WaveData(3, 0.0, [PopData(0.0, Vec3(), BASIS_Z)])]
    timeline.start()
    timeline.update(0.1)
    timeline.reset_wave(0)
    assert len(manager) == 0
    assert timeline.next_pop == 0
    with pytest.raises(IndexError):
        timeline.reset_wave(5)