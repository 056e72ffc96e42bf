import pytest

from tilenoise.errors import ConfigurationError
from tilenoise.rng import SeededRandom, stable_seed


def test_same_seed_same_sequence():
    first = SeededRandom("defaultseed")
    second = SeededRandom("defaultseed")
    assert [first.next() for _ in range(100)] == [second.next() for _ in range(100)], \
        "Identical seeds produced different streams."


def test_different_seeds_differ():
    first = SeededRandom("a")
    second = SeededRandom("b")
    assert [first.next() for _ in range(10)] != [second.next() for _ in range(10)]


def test_numbers_hash_through_their_string_form():
    assert stable_seed(5) == stable_seed("5")
    assert stable_seed(0.25) == stable_seed("0.25")


def test_values_in_unit_interval():
    rng = SeededRandom(42)
    for _ in range(1000):
        value = rng.next()
        assert 0.0 <= value < 1.0


def test_next_index_in_range():
    rng = SeededRandom("index")
    indices = [rng.next_index(7) for _ in range(500)]
    assert min(indices) >= 0
    assert max(indices) <= 6
    assert len(set(indices)) == 7, "Some indices were never drawn."


def test_missing_seed_rejected():
    with pytest.raises(ConfigurationError):
        SeededRandom(None)
