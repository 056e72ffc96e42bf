import math

import pytest

from tilenoise.errors import ConfigurationError, InsufficientNeighborsError
from tilenoise.vectors import Vector2
from tilenoise.worley import (
    CellPointField,
    PointGenerationAlgorithm,
    PointSelectionCriteria,
    WorleyField,
)

MOCK_WORLEY_CONFIG = {
    "seed": "x",
    "numPoints": 4,
    "pointGenAlgorithm": "random",
    "pointSelectionCriteria": "closest",
}

ALGORITHMS = ["random", "halton", "hammersley"]
CRITERIA = ["closest", "second_closest", "second_minus_closest"]
SAMPLE_POSITIONS = [(i / 11.0, j / 7.0) for i in range(11) for j in range(7)]


def test_defaults():
    field = WorleyField.create()
    assert field.num_points == 100
    assert field.dots.side == 10
    assert field.point_selection_criteria is PointSelectionCriteria.CLOSEST
    assert field.search_radius == 1


def test_search_radius_follows_criteria():
    assert WorleyField.create(point_selection_criteria="closest").search_radius == 1
    assert WorleyField.create(point_selection_criteria="second_closest").search_radius == 2
    assert WorleyField.create(point_selection_criteria="second_minus_closest").search_radius == 2


def test_random_places_one_point_per_cell():
    dots = CellPointField.random_points(10, "cells")
    assert dots.side == 4
    assert dots.point_count == 16, "Random generation should fill every cell of the square grid."
    for row in dots.cells:
        for cell in row:
            assert len(cell) == 1


@pytest.mark.parametrize("algorithm", ["halton", "hammersley"])
@pytest.mark.parametrize("num_points", [1, 2, 7, 10, 50, 100, 101])
def test_low_discrepancy_point_count(algorithm, num_points):
    field = WorleyField.create(num_points=num_points, point_gen_algorithm=algorithm)
    assert field.dots.point_count == num_points


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_offsets_stay_inside_cells(algorithm):
    dots = CellPointField.generate(37, "offsets", algorithm)
    for row in dots.cells:
        for cell in row:
            for point in cell:
                assert 0.0 <= point.x < 1.0
                assert 0.0 <= point.y < 1.0


def test_halton_first_point_at_origin():
    dots = CellPointField.halton_points(9)
    assert dots[0, 0][0] == Vector2(0.0, 0.0)


def test_hammersley_cell_assignment():
    dots = CellPointField.hammersley_points(4)
    # Points (0, 0), (0.25, 0.5), (0.5, 0.25), (0.75, 0.75) scaled onto a 2x2 grid.
    assert dots[0, 0] == (Vector2(0.0, 0.0),)
    assert dots[0, 1] == (Vector2(0.5, 0.0),)
    assert dots[1, 0] == (Vector2(0.0, 0.5),)
    assert dots[1, 1] == (Vector2(0.5, 0.5),)


def test_selector_parsing():
    assert PointGenerationAlgorithm.parse("Hammersley") is PointGenerationAlgorithm.HAMMERSLEY
    assert PointGenerationAlgorithm.parse(PointGenerationAlgorithm.HALTON) is PointGenerationAlgorithm.HALTON
    assert PointSelectionCriteria.parse("SecondMinusClosest") is PointSelectionCriteria.SECOND_MINUS_CLOSEST
    assert PointSelectionCriteria.parse("second-closest") is PointSelectionCriteria.SECOND_CLOSEST
    assert PointSelectionCriteria.parse("SECOND_CLOSEST") is PointSelectionCriteria.SECOND_CLOSEST


def test_unknown_selectors_rejected():
    with pytest.raises(ConfigurationError):
        WorleyField.create(point_gen_algorithm="sobol")
    with pytest.raises(ConfigurationError):
        WorleyField.create(point_selection_criteria="third_closest")
    with pytest.raises(ConfigurationError):
        WorleyField.create(point_gen_algorithm=3)


@pytest.mark.parametrize("num_points", [0, -4, 2.5, True])
def test_invalid_point_count_rejected(num_points):
    with pytest.raises(ConfigurationError):
        WorleyField.create(num_points=num_points)


def test_example_closest_random():
    first = WorleyField.create(num_points=4, point_gen_algorithm="random", point_selection_criteria="closest", seed="x")
    second = WorleyField.create(num_points=4, point_gen_algorithm="random", point_selection_criteria="closest", seed="x")
    value = first.at((0, 0))
    assert isinstance(value, float)
    assert math.isfinite(value)
    assert value >= 0.0
    assert second.at((0, 0)) == value, "Same seed should give the same value."


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("criteria", CRITERIA)
def test_deterministic_and_non_negative(algorithm, criteria):
    first = WorleyField.create(seed="det", num_points=25, point_gen_algorithm=algorithm, point_selection_criteria=criteria)
    second = WorleyField.create(seed="det", num_points=25, point_gen_algorithm=algorithm, point_selection_criteria=criteria)
    for position in SAMPLE_POSITIONS:
        value = first.at(position)
        assert value == second.at(position)
        assert value >= 0.0, f"{criteria} returned {value} at {position}"


def test_seed_changes_random_points():
    first = WorleyField.create(seed="a")
    second = WorleyField.create(seed="b")
    assert any(first.at(p) != second.at(p) for p in SAMPLE_POSITIONS)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
@pytest.mark.parametrize("criteria", CRITERIA)
def test_tiles_seamlessly(algorithm, criteria):
    field = WorleyField.create(seed="tile", num_points=30, point_gen_algorithm=algorithm, point_selection_criteria=criteria)
    for x, y in [(0.25, 0.5), (0.01, 0.99), (0.7, 0.3)]:
        assert field.at((x + 1, y)) == pytest.approx(field.at((x, y)), abs=1e-9)
        assert field.at((x, y + 1)) == pytest.approx(field.at((x, y)), abs=1e-9)


def test_second_closest_not_below_closest():
    closest = WorleyField.create(seed="order", point_selection_criteria="closest")
    second = WorleyField.create(seed="order", point_selection_criteria="second_closest")
    difference = WorleyField.create(seed="order", point_selection_criteria="second_minus_closest")
    for position in SAMPLE_POSITIONS:
        f1 = closest.at(position)
        f2 = second.at(position)
        assert f2 >= f1
        assert difference.at(position) == pytest.approx(f2 - f1)


def test_single_point_distances():
    # One point at the origin of a 1x1 grid: every lattice corner is a feature point.
    closest = WorleyField.create(num_points=1, point_gen_algorithm="halton")
    assert closest.at((0, 0)) == 0.0
    assert closest.at((0.5, 0.5)) == pytest.approx(math.sqrt(0.5))
    assert closest.at((0.25, 0)) == pytest.approx(0.25)

    second = WorleyField.create(num_points=1, point_gen_algorithm="halton", point_selection_criteria="second_closest")
    assert second.at((0.25, 0)) == pytest.approx(0.75)

    ridge = WorleyField.create(num_points=1, point_gen_algorithm="halton", point_selection_criteria="second_minus_closest")
    assert ridge.at((0.5, 0.5)) == pytest.approx(0.0)
    assert ridge.at((0.25, 0)) == pytest.approx(0.5)


def test_wrapped_points_are_translated():
    field = WorleyField.create(num_points=1, point_gen_algorithm="halton")
    points = field.neighbor_points(Vector2(0.5, 0.5))
    assert len(points) == 9
    assert Vector2(-1.0, -1.0) in points
    assert Vector2(1.0, 1.0) in points


def _sparse_field(criteria):
    cells = [[() for _x in range(5)] for _y in range(5)]
    cells[2][2] = (Vector2(0.5, 0.5),)
    dots = CellPointField(5, tuple(tuple(row) for row in cells))
    return WorleyField(1, dots, PointSelectionCriteria.parse(criteria))


def test_empty_neighborhood_raises():
    field = _sparse_field("closest")
    assert field.at((0.5, 0.5)) == pytest.approx(0.0)
    with pytest.raises(InsufficientNeighborsError) as excinfo:
        field.at((0.05, 0.05))
    assert excinfo.value.required == 1
    assert excinfo.value.found == 0


@pytest.mark.parametrize("criteria", ["second_closest", "second_minus_closest"])
def test_second_order_needs_two_points(criteria):
    field = _sparse_field(criteria)
    with pytest.raises(InsufficientNeighborsError) as excinfo:
        field.at((0.5, 0.5))
    assert excinfo.value.required == 2
    assert excinfo.value.found == 1


def test_from_config():
    field = WorleyField.from_config(MOCK_WORLEY_CONFIG)
    expected = WorleyField.create(num_points=4, point_gen_algorithm="random", point_selection_criteria="closest", seed="x")
    assert field.at((0.3, 0.3)) == expected.at((0.3, 0.3))


def test_from_config_accepts_integral_floats():
    field = WorleyField.from_config({"numPoints": 4.0, "pointGenAlgorithm": "halton"})
    assert field.num_points == 4
    assert field.dots.point_count == 4


@pytest.mark.parametrize("config", [
    {"numPoints": 0},
    {"numPoints": 4.5},
    {"numPoints": "ten"},
    {"pointGenAlgorithm": "sobol"},
    {"colour": "red"},
])
def test_from_config_rejects_invalid(config):
    with pytest.raises(ConfigurationError):
        WorleyField.from_config(config)
