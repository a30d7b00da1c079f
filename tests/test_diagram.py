import math
from types import SimpleNamespace

import pytest

from venn_layout.config import LayoutOptions
from venn_layout.diagram import VennDiagram, extract_sets
from venn_layout.geometry import bounding_box, contained_in_circles
from venn_layout.logging_utils import CollectingObserver


RECORDS = [
    {"name": "r0", "set": ["a"]},
    {"name": "r1", "set": ["a", "b"]},
    {"name": "r2", "set": ["b"]},
    {"name": "r3", "set": []},
    {"name": "r4", "set": ["b", "a"]},
    {"name": "r5", "set": ["a"]},
    {"name": "r6", "set": ["c"]},
]


def test_extract_sets_counts_inclusive_sizes():
    sets = extract_sets(RECORDS)

    assert set(sets) == {"a", "b", "a,b", "c"}
    assert sets["a"].size == 4
    assert sets["b"].size == 3
    assert sets["a,b"].size == 2
    assert sets["a,b"].sets == ["a", "b"]
    assert [r["name"] for r in sets["a,b"].nodes] == ["r1", "r4"]
    assert [r["name"] for r in sets["a"].nodes] == ["r0", "r5"]
    assert sets["b"].nodes[0]["name"] == "r2"


def test_extract_sets_triple_membership_adds_every_sub_combination():
    sets = extract_sets([{"set": ["x", "y", "z"]}])
    assert set(sets) == {"x", "y", "z", "x,y", "x,z", "y,z", "x,y,z"}
    assert all(entry.size == 1 for entry in sets.values())
    assert [len(entry.nodes) for entry in sets.values() if entry.nodes] == [1]
    assert sets["x,y,z"].nodes


def test_extract_sets_caps_combination_size():
    tags = ["s%02d" % i for i in range(20)]
    records = [{"name": "wide", "set": tags}, {"name": "pair", "set": ["s00", "s01"]}]

    sets = extract_sets(records, max_combination_size=2)

    # 20 singles, 190 pairs and the wide record's exact combination
    assert len(sets) == 20 + 190 + 1
    assert max(len(entry.sets) for entry in sets.values()) == 20
    assert sum(1 for entry in sets.values() if len(entry.sets) > 2) == 1
    assert sets["s00"].size == 2
    assert sets["s00,s01"].size == 2
    assert sets["s05,s07"].size == 1
    wide = sets[",".join(tags)]
    assert wide.size == 1
    assert [r["name"] for r in wide.nodes] == ["wide"]
    assert [r["name"] for r in sets["s00,s01"].nodes] == ["pair"]


def test_extract_sets_cap_above_record_width_changes_nothing():
    assert {
        key: entry.size for key, entry in extract_sets(RECORDS, max_combination_size=5).items()
    } == {key: entry.size for key, entry in extract_sets(RECORDS).items()}


def test_extract_sets_rejects_non_positive_cap():
    with pytest.raises(ValueError):
        extract_sets(RECORDS, max_combination_size=0)


def test_extract_sets_custom_accessor_and_size():
    records = [SimpleNamespace(tags=["p"]), SimpleNamespace(tags=["p", "q"])]
    sets = extract_sets(records, lambda r: r.tags, lambda n: n * 10)
    assert sets["p"].size == 20
    assert sets["q"].size == 10
    assert sets["p,q"].size == 10


def test_diagram_compute_lays_out_records():
    options = LayoutOptions(width=300, height=200, padding=10, random_seed=4)
    observer = CollectingObserver()
    diagram = VennDiagram(options, observer=observer, scatter=True).compute(RECORDS)

    assert set(diagram.circles) == {"a", "b", "c"}
    assert set(diagram.centres) == {"a", "b", "a,b", "c"}
    assert math.isfinite(diagram.loss)

    box = bounding_box(diagram.circles.values())
    assert box.x_min >= 10 - 1e-9 and box.x_max <= 290 + 1e-9
    assert box.y_min >= 10 - 1e-9 and box.y_max <= 190 + 1e-9

    ab = diagram.sets["a,b"]
    assert ab.center is diagram.centres["a,b"]
    assert contained_in_circles(ab.center, [diagram.circles["a"], diagram.circles["b"]])
    assert ab.inner_radius > 0
    assert len(ab.node_positions) == 2
    assert len(diagram.sets["c"].node_positions) == 1
    assert diagram.sets["b"].node_positions == [diagram.sets["b"].center.as_point()]


def test_diagram_radii_scale_with_sizes():
    diagram = VennDiagram(LayoutOptions(width=500, height=500, random_seed=0)).compute(RECORDS)
    ratio = diagram.circles["a"].radius / diagram.circles["c"].radius
    assert ratio == pytest.approx(2.0)


def test_diagram_keeps_previous_circles_for_transitions():
    diagram = VennDiagram(LayoutOptions(width=300, height=300, random_seed=1))
    diagram.compute(RECORDS)
    first = {k: (c.x, c.y, c.radius) for k, c in diagram.circles.items()}
    assert all(c.previous is None for c in diagram.circles.values())

    diagram.compute(RECORDS + [{"set": ["c", "a"]}])
    for setid, circle in diagram.circles.items():
        assert circle.previous is not None
        assert (circle.previous.x, circle.previous.y, circle.previous.radius) == first[setid]

    start = diagram.outline("a", 0.0)
    assert start.kind == "circle"
    assert start.circle.radius == pytest.approx(first["a"][2])


def test_diagram_outline_of_overlap():
    diagram = VennDiagram(LayoutOptions(width=300, height=300, random_seed=2)).compute(RECORDS)
    outline = diagram.outline("a,b")
    assert outline.kind == "arcs"
    assert diagram.outline("a,c").kind == "empty"


def test_diagram_layout_accepts_area_specs():
    diagram = VennDiagram(LayoutOptions(width=100, height=100, normalize=False))
    circles = diagram.layout([(["A"], 4), (["B"], 4), (["A", "B"], 1)])
    assert set(circles) == {"A", "B"}
    assert set(diagram.centres) == {"A", "B", "A,B"}
    assert diagram.loss < 1e-6
