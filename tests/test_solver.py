import math

import pytest

from venn_layout.config import (
    LayoutConfig,
    LayoutOptions,
    get_layout_config,
    reset_layout_config,
    set_layout_config,
)
from venn_layout.geometry import circle_overlap, distance
from venn_layout.loss import loss_function
from venn_layout.optimize import scipy_nelder_mead
from venn_layout.seeders import GreedySeeder, greedy_layout
from venn_layout.solver import (
    add_missing_areas,
    coerce_areas,
    layout_venn,
    solution_loss,
    validate_areas,
    venn,
)
from venn_layout.types import AreaSpec, Circle, InvalidAreaError


@pytest.fixture(autouse=True)
def _restore_config():
    yield
    reset_layout_config()


def test_two_disjoint_sets():
    solution = venn(
        [
            {"sets": ["A"], "size": 50},
            {"sets": ["B"], "size": 50},
            {"sets": ["A", "B"], "size": 0},
        ]
    )
    a, b = solution["A"], solution["B"]
    assert a.radius == pytest.approx(math.sqrt(50 / math.pi))
    assert b.radius == pytest.approx(math.sqrt(50 / math.pi))
    assert distance(a, b) >= a.radius + b.radius - 1e-6


def test_two_identical_sets_coincide():
    solution = venn([(["A"], 80), (["B"], 80), (["A", "B"], 80)])
    a, b = solution["A"], solution["B"]
    assert a.radius == pytest.approx(b.radius)
    assert distance(a, b) == pytest.approx(0.0, abs=1e-6)


def test_missing_pair_is_treated_as_disjoint():
    solution = venn([(["A"], 10), (["B"], 10)])
    a, b = solution["A"], solution["B"]
    assert distance(a, b) >= a.radius + b.radius - 1e-6


def test_three_sets_pairwise_overlaps_converge():
    areas = [
        (["A"], 100), (["B"], 100), (["C"], 100),
        (["A", "B"], 30), (["A", "C"], 30), (["B", "C"], 30),
    ]
    solution = venn(areas, LayoutOptions(random_seed=1))
    assert solution_loss(solution, areas) < 1.0
    for pair in (("A", "B"), ("A", "C"), ("B", "C")):
        left, right = solution[pair[0]], solution[pair[1]]
        assert circle_overlap(left.radius, right.radius, distance(left, right)) == pytest.approx(30, abs=1.0)


def test_three_sets_with_triple_overlap_improves_on_initial_layout():
    areas = [
        (["A"], 100), (["B"], 100), (["C"], 100),
        (["A", "B"], 30), (["A", "C"], 30), (["B", "C"], 30),
        (["A", "B", "C"], 10),
    ]
    specs = add_missing_areas(coerce_areas(areas))
    initial_loss = loss_function(greedy_layout(specs), specs)

    solution = venn(areas, LayoutOptions(random_seed=1))
    final_loss = solution_loss(solution, areas)
    assert math.isfinite(final_loss)
    assert final_loss <= initial_loss + 1e-9
    assert final_loss < 20.0


def test_radii_are_fixed_by_set_size():
    areas = [(["A"], 4 * math.pi), (["B"], math.pi), (["A", "B"], 0.5)]
    solution = venn(areas)
    assert solution["A"].radius == pytest.approx(2.0)
    assert solution["B"].radius == pytest.approx(1.0)


def test_seeded_layout_is_reproducible():
    ids = "ABCDEFGH"
    areas = [([s], 10 + i) for i, s in enumerate(ids)]
    areas += [([ids[i], ids[i + 1]], 2.0) for i in range(len(ids) - 1)]
    options = LayoutOptions(random_seed=42, max_iterations=50)
    first = venn(areas, options)
    second = venn(areas, options)
    assert {k: (c.x, c.y) for k, c in first.items()} == {k: (c.x, c.y) for k, c in second.items()}


def test_empty_input_returns_empty_solution():
    assert venn([]) == {}


def test_layout_venn_alias():
    assert layout_venn is venn


@pytest.mark.parametrize(
    "areas, message",
    [
        ([(["A"], 1), ([], 1)], "empty set list"),
        ([(["A"], 1), (["A", "A"], 1)], "duplicate set id"),
        ([(["A"], -1)], "negative size"),
        ([AreaSpec(("A",), 1, -2)], "negative weight"),
        ([(["A"], 1), (["A"], 2)], "more than once"),
        ([(["A"], 1), (["A", "B"], 1)], "unknown set"),
    ],
)
def test_invalid_areas_raise(areas, message):
    with pytest.raises(InvalidAreaError, match=message):
        venn(areas)


def test_non_numeric_size_is_rejected():
    with pytest.raises(InvalidAreaError):
        venn([{"sets": ["A"], "size": "large"}])
    with pytest.raises(InvalidAreaError):
        venn([{"sets": ["A"], "size": float("nan")}])


def test_invalid_area_error_is_value_error():
    with pytest.raises(ValueError):
        validate_areas(coerce_areas([(["A"], -1)]))


def test_add_missing_areas_adds_each_absent_pair_once():
    areas = coerce_areas([(["A"], 1), (["B"], 1), (["C"], 1), (["B", "A"], 0.5)])
    result = add_missing_areas(areas)
    added = result[len(areas):]
    assert [a.sets for a in added] == [("A", "C"), ("B", "C")]
    assert all(a.size == 0 for a in added)


def test_solution_loss_counts_missing_pairs():
    solution = {"A": Circle(0.0, 0.0, 1.0, "A"), "B": Circle(1.0, 0.0, 1.0, "B")}
    loss = solution_loss(solution, [(["A"], math.pi), (["B"], math.pi)])
    assert loss == pytest.approx(circle_overlap(1.0, 1.0, 1.0) ** 2)


def test_config_selects_minimizer_and_seeder():
    calls = []

    def counting_loss(circles, areas):
        calls.append(1)
        return loss_function(circles, areas)

    config = LayoutConfig(loss=counting_loss, initial_layout=GreedySeeder(), minimizer=scipy_nelder_mead)
    areas = [(["A"], math.pi), (["B"], math.pi), (["A", "B"], circle_overlap(1.0, 1.0, 1.0))]
    solution = venn(areas, config=config)
    assert calls
    assert distance(solution["A"], solution["B"]) == pytest.approx(1.0, abs=1e-3)


def test_module_config_is_copied_on_read_and_write():
    config = get_layout_config()
    config.initial_layout = GreedySeeder()
    assert not isinstance(get_layout_config().initial_layout, GreedySeeder)

    set_layout_config(config)
    config.initial_layout = None
    assert isinstance(get_layout_config().initial_layout, GreedySeeder)
