import pytest

from delve.dungeon import Dungeon
from delve.dungeon.debug_checks import analyze, is_healthy


@pytest.mark.parametrize("seed", [4, 44, 444])
@pytest.mark.parametrize("boss", [False, True])
def test_generated_dungeons_are_healthy(seed, boss):
    report = analyze(Dungeon(seed=seed, boss=boss))
    assert is_healthy(report), report


def test_wrong_exit_is_reported():
    d = Dungeon(seed=4)
    d.exit_location = (0, 0)
    report = analyze(d)
    assert report["exit_mismatch"] is True
    assert not is_healthy(report)


def test_wiped_grid_reports_unreachable_rooms():
    d = Dungeon(seed=4, boss=True)
    d.grid.reset()
    report = analyze(d)
    assert len(report["unreachable_rooms"]) == len(d.get_rooms())
    assert report["boss_unreachable"] is True
