import pytest

from venn_layout.labels import (
    DISJOINT_SENTINEL,
    circle_margin,
    compute_inner_radius,
    compute_text_centre,
    compute_text_centres,
    get_overlapping_circles,
)
from venn_layout.logging_utils import CollectingObserver
from venn_layout.types import AreaSpec, Circle, Point


def test_circle_margin_sign():
    interior = [Circle(0, 0, 2)]
    exterior = [Circle(3, 0, 1)]
    assert circle_margin(Point(0, 0), interior, exterior) == pytest.approx(2.0)
    assert circle_margin(Point(2.5, 0), interior, exterior) == pytest.approx(-0.5)


def test_text_centre_of_single_circle_is_its_centre():
    centre = compute_text_centre([Circle(3, -2, 1.5)], [])
    assert centre.x == pytest.approx(3.0, abs=1e-6)
    assert centre.y == pytest.approx(-2.0, abs=1e-6)
    assert not centre.disjoint


def test_text_centre_of_lens():
    centre = compute_text_centre([Circle(0, 0, 1), Circle(1, 0, 1)], [])
    assert (centre.x, centre.y) == (pytest.approx(0.5, abs=1e-2), pytest.approx(0.0, abs=1e-2))


def test_text_centre_of_crescent():
    centre = compute_text_centre([Circle(0, 0, 1)], [Circle(1, 0, 1)])
    assert (centre.x, centre.y) == (pytest.approx(-0.5, abs=1e-2), pytest.approx(0.0, abs=1e-2))
    assert circle_margin(centre, [Circle(0, 0, 1)], [Circle(1, 0, 1)]) > 0


def test_text_centre_falls_back_to_single_interior_centre():
    centre = compute_text_centre([Circle(0, 0, 1)], [Circle(0, 0, 2)])
    assert (centre.x, centre.y) == (0, 0)
    assert not centre.disjoint


def test_text_centre_of_empty_region_is_flagged():
    centre = compute_text_centre([Circle(0, 0, 1), Circle(5, 0, 1)], [])
    assert centre.disjoint
    assert centre.as_point() == DISJOINT_SENTINEL


def test_text_centre_requires_interior():
    with pytest.raises(ValueError):
        compute_text_centre([], [Circle(0, 0, 1)])


def test_get_overlapping_circles_lists_containers():
    circles = {
        "big": Circle(0, 0, 3, "big"),
        "small": Circle(0.5, 0, 1, "small"),
        "far": Circle(10, 0, 1, "far"),
    }
    assert get_overlapping_circles(circles) == {"big": [], "small": ["big"], "far": []}


def test_compute_text_centres_keys_and_warning():
    circles = {"A": Circle(0, 0, 1, "A"), "B": Circle(5, 0, 1, "B")}
    areas = [AreaSpec(("A",), 3), AreaSpec(("B",), 3), AreaSpec(("B", "A"), 1)]
    observer = CollectingObserver()

    centres = compute_text_centres(circles, areas, observer=observer)

    assert set(centres) == {"A", "B", "A,B"}
    assert centres["A"].x == pytest.approx(0.0, abs=1e-6)
    assert centres["B"].x == pytest.approx(5.0, abs=1e-6)
    assert centres["A,B"].disjoint
    assert observer.codes() == ["area-not-represented"]
    assert observer.warnings[0].context["sets"] == ["B", "A"]


def test_compute_text_centres_empty_disjoint_area_is_silent():
    circles = {"A": Circle(0, 0, 1, "A"), "B": Circle(5, 0, 1, "B")}
    observer = CollectingObserver()
    compute_text_centres(circles, [AreaSpec(("A", "B"), 0)], observer=observer)
    assert observer.warnings == []


def test_compute_text_centres_ignores_containing_circle_for_inner_set():
    circles = {"A": Circle(0, 0, 3, "A"), "B": Circle(0.5, 0, 1, "B")}
    centres = compute_text_centres(circles, [AreaSpec(("B",), 1)], observer=CollectingObserver())
    assert centres["B"].x == pytest.approx(0.5, abs=1e-6)
    assert centres["B"].y == pytest.approx(0.0, abs=1e-6)


def test_compute_inner_radius():
    circles = {
        "A": Circle(0, 0, 2, "A"),
        "B": Circle(1.5, 0, 1, "B"),
        "C": Circle(10, 0, 1, "C"),
    }
    assert compute_inner_radius(["A"], Point(0, 0), {"A": circles["A"], "C": circles["C"]}) == pytest.approx(2.0)
    assert compute_inner_radius(["A"], Point(0, 0), circles) == pytest.approx(0.5)
    assert compute_inner_radius(["A"], Point(0, 0), {}) == 0.0
