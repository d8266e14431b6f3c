"""Tests for new-table position collision avoidance."""

import pytest

from schema_designer.exceptions import PositionUnavailableError
from schema_designer.graph import Position
from schema_designer.positions import find_free_position


def test_free_candidate_is_kept():
    candidate = Position(10, 20)
    assert find_free_position(candidate, [Position(0, 0)]) == candidate


def test_no_existing_tables():
    assert find_free_position(Position(5, 5), []) == Position(5, 5)


def test_exact_duplicate_is_shifted_diagonally():
    result = find_free_position(Position(10, 20), [Position(10, 20)], step=32)
    assert result == Position(42, 52)


def test_sharing_one_axis_is_not_a_collision():
    occupied = [Position(10, 99), Position(99, 20)]
    assert find_free_position(Position(10, 20), occupied) == Position(10, 20)


def test_shifts_past_a_chain_of_collisions():
    occupied = [Position(0, 0), Position(10, 10), Position(20, 20)]
    assert find_free_position(Position(0, 0), occupied, step=10) == Position(30, 30)


def test_gives_up_after_max_attempts():
    occupied = [Position(0, 0), Position(1, 1)]
    with pytest.raises(PositionUnavailableError):
        find_free_position(Position(0, 0), occupied, step=1, max_attempts=2)


@pytest.mark.parametrize("kwargs", [{"step": 0}, {"max_attempts": 0}])
def test_rejects_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        find_free_position(Position(0, 0), [], **kwargs)
