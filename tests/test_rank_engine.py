"""Unit tests for the rank and XP engine."""

import pytest

from backend.database.enums import UserRank
from backend.scoring.rank_engine import calculate_rank, get_rank_progress, xp_to_next_rank


@pytest.mark.parametrize(
    "xp, expected",
    [
        (7000, UserRank.ARCHITECT),
        (6999, UserRank.SENTINEL),
        (3500, UserRank.SENTINEL),
        (3499, UserRank.GUARDIAN),
        (1500, UserRank.GUARDIAN),
        (1499, UserRank.DEFENDER),
        (500, UserRank.DEFENDER),
        (499, UserRank.NOVICE),
        (0, UserRank.NOVICE),
    ],
)
def test_rank_thresholds(xp: int, expected: UserRank) -> None:
    assert calculate_rank(xp) == expected


def test_rank_is_monotonic_in_xp() -> None:
    ladder = [rank for rank in UserRank]
    previous = calculate_rank(0)
    for xp in range(0, 8000, 50):
        current = calculate_rank(xp)
        assert ladder.index(current) >= ladder.index(previous)
        previous = current


def test_xp_to_next_rank() -> None:
    assert xp_to_next_rank(0) == 500
    assert xp_to_next_rank(130) == 370
    assert xp_to_next_rank(500) == 1000
    assert xp_to_next_rank(6999) == 1


def test_architect_has_no_next_rank() -> None:
    """The top tier reports 0 points remaining and no next rank."""
    assert xp_to_next_rank(7000) == 0
    assert xp_to_next_rank(20000) == 0

    progress = get_rank_progress(9000)
    assert progress.rank == UserRank.ARCHITECT
    assert progress.next_rank is None
    assert progress.xp_to_next_rank == 0


def test_rank_progress_for_defender() -> None:
    progress = get_rank_progress(620)
    assert progress.rank == UserRank.DEFENDER
    assert progress.rank_name == "Defender"
    assert progress.next_rank == UserRank.GUARDIAN
    assert progress.xp_to_next_rank == 880
