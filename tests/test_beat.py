import pytest

from heartbeat.beat import BeatManager


class FakeEnemy:
    def __init__(self, name):
        self.name = name
        self.calls = []

    def start_beat(self):
        self.calls.append("start_beat")

    def beating(self):
        self.calls.append("beating")

    def pause_beat(self):
        self.calls.append("pause_beat")


class FakeHeart:
    def __init__(self, name):
        self.name = name
        self.calls = []

    def beat_attack(self):
        self.calls.append("beat_attack")

    def stop_beat(self):
        self.calls.append("stop_beat")

    def come_back(self):
        self.calls.append("come_back")

    def lost(self):
        self.calls.append("lost")


@pytest.fixture
def manager():
    return BeatManager()


def _pair(manager, enemy, heart):
    manager.set_next_enemy(enemy)
    manager.set_next_heart(heart)


def test_starts_empty(manager):
    assert manager.empty_pair() is True


def test_enemy_alone_makes_no_pair(manager):
    manager.set_next_enemy(FakeEnemy("e"))
    assert manager.empty_pair() is True


def test_pair_forms_in_either_order(manager):
    manager.set_next_heart(FakeHeart("h"))
    assert manager.empty_pair() is True
    manager.set_next_enemy(FakeEnemy("e"))
    assert manager.empty_pair() is False


def test_pending_slots_clear_after_pairing(manager):
    enemy = FakeEnemy("e")
    _pair(manager, enemy, FakeHeart("h"))
    manager.enemy_down(enemy)
    manager.set_next_enemy(FakeEnemy("other"))
    assert manager.empty_pair() is True


def test_start_beat_calls_each_pair(manager):
    enemy = FakeEnemy("e")
    first, second = FakeHeart("a"), FakeHeart("b")
    _pair(manager, enemy, first)
    _pair(manager, enemy, second)
    manager.start_beat()
    assert manager.empty_pair() is False
    assert enemy.calls == ["start_beat", "start_beat"]
    assert first.calls == ["beat_attack"]
    assert second.calls == ["beat_attack"]


def test_beating_calls_each_enemy_once(manager):
    enemy = FakeEnemy("e")
    other = FakeEnemy("o")
    _pair(manager, enemy, FakeHeart("a"))
    _pair(manager, enemy, FakeHeart("b"))
    _pair(manager, other, FakeHeart("c"))
    manager.beating()
    assert manager.empty_pair() is False
    assert enemy.calls == ["beating"]
    assert other.calls == ["beating"]


def test_pause_beat_stops_hearts(manager):
    enemy = FakeEnemy("e")
    heart = FakeHeart("h")
    _pair(manager, enemy, heart)
    manager.pause_beat()
    assert enemy.calls == ["pause_beat"]
    assert heart.calls == ["stop_beat"]
    assert manager.empty_pair() is False


def test_enemy_down_sends_hearts_back(manager):
    enemy = FakeEnemy("e")
    hearts = [FakeHeart("a"), FakeHeart("b")]
    for heart in hearts:
        _pair(manager, enemy, heart)
    manager.enemy_down(enemy)
    assert [heart.calls for heart in hearts] == [["come_back"], ["come_back"]]
    assert manager.empty_pair() is True


def test_recovery_loses_hearts(manager):
    enemy = FakeEnemy("e")
    heart = FakeHeart("h")
    _pair(manager, enemy, heart)
    manager.recovery(enemy)
    assert heart.calls == ["lost"]
    assert manager.empty_pair() is True


def test_release_only_touches_given_enemy(manager):
    enemy = FakeEnemy("e")
    other = FakeEnemy("o")
    kept = FakeHeart("k")
    _pair(manager, enemy, FakeHeart("h"))
    _pair(manager, other, kept)
    manager.recovery(enemy)
    assert manager.empty_pair() is False
    manager.beating()
    assert other.calls == ["beating"]
    assert enemy.calls == []
    assert kept.calls == []


def test_unknown_enemy_is_ignored(manager):
    enemy = FakeEnemy("e")
    heart = FakeHeart("h")
    _pair(manager, enemy, heart)
    manager.enemy_down(FakeEnemy("stranger"))
    manager.recovery(FakeEnemy("stranger"))
    assert heart.calls == []
    assert manager.empty_pair() is False