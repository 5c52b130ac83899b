import pytest

from delve.dungeon import Dungeon, DungeonConfig, Rect

from dungeon_test_utils import all_cells_floor


def test_concrete_default_scenario():
    d = Dungeon(seed=2024)
    assert d.get_start_room() == Rect(2, 2, 25, 25)
    assert d.width == 100 and d.height == 100
    rooms = d.get_rooms()
    assert len(rooms) >= 1
    for room in rooms:
        assert all_cells_floor(d, room)
    assert d.get_exit_location() in [r.center for r in rooms]


@pytest.mark.parametrize("seed", [0, 5, 31337])
def test_same_seed_same_grid(seed):
    a = Dungeon(seed=seed)
    b = Dungeon(seed=seed)
    assert a.grid.snapshot() == b.grid.snapshot()
    assert a.get_rooms() == b.get_rooms()
    assert a.get_exit_location() == b.get_exit_location()


def test_regenerate_leaves_no_residue():
    d = Dungeon(seed=10)
    first = d.grid.snapshot()
    first_rooms = d.get_rooms()
    d.regenerate(seed=20)
    assert d.seed == 20
    d.regenerate(seed=10)
    assert d.grid.snapshot() == first
    assert d.get_rooms() == first_rooms


def test_regenerate_toggles_boss_and_back():
    d = Dungeon(seed=12)
    plain = d.grid.snapshot()
    d.regenerate(seed=12, boss=True)
    assert d.is_boss_pass
    d.regenerate(seed=12, boss=False)
    assert not d.is_boss_pass
    assert d.grid.snapshot() == plain


def test_regenerate_keeps_boss_flag_when_omitted():
    d = Dungeon(seed=1, boss=True)
    d.regenerate(seed=2)
    assert d.boss is True
    assert not d.get_boss_room().is_empty()


def test_regenerate_without_seed_draws_one():
    d = Dungeon()
    assert isinstance(d.seed, int)
    d.regenerate()
    assert isinstance(d.seed, int)


def test_config_seed_used_when_none_given():
    d = Dungeon(config=DungeonConfig(seed=4321))
    assert d.seed == 4321


def test_regenerate_returns_metrics():
    d = Dungeon(seed=3)
    metrics = d.regenerate(seed=3)
    assert metrics is d.metrics
    assert metrics["rooms_carved"] == len(d.rooms)


def test_callback_fires_once_per_pass():
    calls = []
    d = Dungeon(seed=6, on_generated=calls.append)
    assert calls == [d]
    d.regenerate(seed=7)
    assert len(calls) == 2
    other = []
    d.regenerate(seed=8, on_generated=other.append)
    assert other == [d]
    # Per-call callback replaces the constructor one for that pass
    assert len(calls) == 2


def test_callback_sees_finished_pass():
    seen = {}

    def _record(dungeon):
        seen["exit"] = dungeon.get_exit_location()
        seen["rooms"] = len(dungeon.get_rooms())

    d = Dungeon(seed=15, on_generated=_record)
    assert seen["exit"] == d.get_exit_location()
    assert seen["rooms"] == len(d.get_rooms())


def test_ascii_marks_start_and_exit():
    d = Dungeon(config=DungeonConfig(width=60, height=60), seed=9)
    lines = d.to_ascii().splitlines()
    assert len(lines) == 60 and all(len(line) == 60 for line in lines)
    sx, sy = d.start_center
    assert lines[sy][sx] == "@"
    if d.get_exit_location() is not None:
        ex, ey = d.get_exit_location()
        assert lines[ey][ex] == ">"


def test_summary_shape():
    d = Dungeon(seed=21, boss=True)
    s = d.summary()
    assert s["seed"] == 21 and s["boss"] is True
    assert s["start_room"] == [2, 2, 25, 25]
    assert s["boss_room"] == [36, 36, 28, 28]
    assert len(s["rooms"]) == len(d.get_rooms())
    assert s["exit"] is None or len(s["exit"]) == 2


def test_regenerated_grid_matches_fresh_pass():
    d = Dungeon(seed=100, boss=True)
    d.regenerate(seed=200, boss=False)
    fresh = Dungeon(seed=200)
    assert d.grid.snapshot() == fresh.grid.snapshot()
    assert d.grid.floor_count() == fresh.grid.floor_count()


def test_engine_module_does_not_bind_flask_at_import():
    from delve.dungeon import pipeline

    assert not hasattr(pipeline, "current_app")
    assert not hasattr(pipeline, "has_app_context")
