"""Tests for the section layout engine."""

import math

import pytest

from beam_layout import (
    Circle, Line, Polyline, Text,
    annotation_lines, cross_commands, fill_positions, get_rebar_coord,
    get_side_rebar_coord, layout_beam, outline_commands, outline_points,
    rebar_commands, side_rebar_commands, stirrup_commands, text_commands,
)
from beam_model import ConfigValidationError, Stirrup
from tests.beam_fixture import make_full_spec, make_spec


# =========================================================
# fill_positions
# =========================================================
class TestFillPositions:

    def test_alternates_from_both_ends(self):
        assert fill_positions(3, 150.0, 50.0, 350.0) == [50.0, 350.0, 200.0]

    def test_four_bars(self):
        assert fill_positions(4, 100.0, 50.0, 350.0) == [50.0, 350.0, 150.0, 250.0]

    def test_sequential_is_left_to_right(self):
        assert fill_positions(4, 100.0, 50.0, 350.0, "sequential") == [50.0, 150.0, 250.0, 350.0]

    def test_zero_count(self):
        assert fill_positions(0, 100.0, 50.0, 350.0) == []

    def test_overflow_row_uses_first_row_pitch(self):
        # 2 bars with the pitch of a 5-bar row still sit at the two ends
        assert fill_positions(2, 75.0, 50.0, 350.0) == [50.0, 350.0]

    def test_unknown_order(self):
        with pytest.raises(ConfigValidationError):
            fill_positions(3, 10.0, 0.0, 20.0, "random")


# =========================================================
# Outline
# =========================================================
def test_outline_points_in_corner_order():
    spec = make_spec()
    assert outline_points(spec) == [(0.0, 0.0), (400.0, 0.0), (400.0, 600.0), (0.0, 600.0)]


def test_outline_lines_close_the_polygon():
    spec = make_spec()
    lines = outline_commands(spec)
    assert len(lines) == 4
    for a, b in zip(lines, lines[1:] + lines[:1]):
        assert a.p2 == b.p1
    assert all(l.layer == "CONCRETE" for l in lines)


def test_outline_as_polyline():
    cmds = outline_commands(make_spec(), as_polyline=True)
    assert len(cmds) == 1
    poly = cmds[0]
    assert isinstance(poly, Polyline)
    assert poly.closed
    assert poly.points == ((0.0, 0.0), (400.0, 0.0), (400.0, 600.0), (0.0, 600.0))


# =========================================================
# Main rebar
# =========================================================
def test_rebar_coord_reference_section():
    coords = get_rebar_coord(make_spec())
    assert coords == [
        (50.0, 50.0), (350.0, 50.0), (200.0, 50.0),
        (50.0, 550.0), (350.0, 550.0),
    ]


@pytest.mark.parametrize("n", range(2, 9))
def test_bottom_row_is_symmetric(n):
    spec = make_spec(bottom=(n, 0, 0))
    xs = [x for x, y in get_rebar_coord(spec) if y == pytest.approx(50.0)]
    assert len(xs) == n
    assert min(xs) == pytest.approx(50.0)
    assert max(xs) == pytest.approx(350.0)
    mirrored = sorted(400.0 - x for x in xs)
    assert sorted(xs) == pytest.approx(mirrored)


def test_overflow_rows_stack_inward():
    spec = make_spec(top=(2, 2, 0), bottom=(3, 2, 2))
    ys = sorted({y for _, y in get_rebar_coord(spec)})
    # bottom rows go up by gap, top rows come down by gap
    assert ys == [50.0, 130.0, 210.0, 470.0, 550.0]


@pytest.mark.parametrize("top,bottom,field", [
    ((2, 0, 0), (1, 0, 0), "main_rebar.bottom_1"),
    ((1, 0, 0), (3, 0, 0), "main_rebar.top_1"),
    ((2, 0, 0), (0, 3, 0), "main_rebar.bottom_1"),
])
def test_first_row_below_two_is_rejected(top, bottom, field):
    with pytest.raises(ConfigValidationError) as exc:
        make_spec(top=top, bottom=bottom)
    assert exc.value.field == field


def test_engine_fails_before_emitting_anything():
    # Bypass construction-time validation to hit the engine's own check.
    spec = make_spec()
    object.__setattr__(spec.main_rebar, "bottom_1", 1)
    with pytest.raises(ConfigValidationError, match="rebar count < 2"):
        layout_beam(spec)


def test_each_bar_is_circle_plus_cross():
    cmds = rebar_commands(make_spec())
    assert len(cmds) == 5 * 3
    circle, c1, c2 = cmds[:3]
    assert circle == Circle((50.0, 50.0), 10.0, "REBAR")
    for line in (c1, c2):
        assert isinstance(line, Line)
        assert math.dist(line.p1, (50.0, 50.0)) == pytest.approx(11.0)
        assert math.dist(line.p2, (50.0, 50.0)) == pytest.approx(11.0)


def test_cross_lines_are_diagonal():
    a, b = cross_commands(0.0, 0.0, 10.0, "L")
    for line in (a, b):
        dx = line.p2[0] - line.p1[0]
        dy = line.p2[1] - line.p1[1]
        assert abs(dx) == pytest.approx(abs(dy))
    assert math.dist(a.p1, a.p2) == pytest.approx(20.0)


# =========================================================
# Side / web rebar
# =========================================================
def test_no_web_rows_no_commands():
    spec = make_spec()
    assert get_side_rebar_coord(spec) == []
    assert side_rebar_commands(spec) == []


def test_web_rows_evenly_spaced():
    coords = get_side_rebar_coord(make_spec(web_rows=2))
    # dy = (600 - 80 - 40) / 3 = 160
    assert coords == [
        (50.0, 220.0), (350.0, 220.0),
        (50.0, 380.0), (350.0, 380.0),
    ]


@pytest.mark.parametrize("n", [1, 2, 4])
def test_web_rows_give_crosses_and_guides(n):
    cmds = side_rebar_commands(make_spec(web_rows=n))
    crosses, guides = cmds[:4 * n], cmds[4 * n:]
    assert len(crosses) == 2 * (2 * n)  # 2n marks, two lines each
    assert len(guides) == n
    for g in guides:
        assert g.p1[1] == g.p2[1]


def test_guide_line_offsets():
    guide = side_rebar_commands(make_spec(web_rows=1))[-1]
    # dy = 480 / 2 = 240 -> row at y = 300
    assert guide == Line((40.0, 310.0), (360.0, 310.0), "REBAR")


# =========================================================
# Stirrup
# =========================================================
def test_stirrup_boundary_only():
    lines = stirrup_commands(make_spec())
    assert lines == [
        Line((50.0, 40.0), (350.0, 40.0), "REBAR"),
        Line((50.0, 560.0), (350.0, 560.0), "REBAR"),
        Line((40.0, 50.0), (40.0, 550.0), "REBAR"),
        Line((360.0, 50.0), (360.0, 550.0), "REBAR"),
    ]


def test_stirrup_tie_lines_for_occupied_rows():
    spec = make_spec(top=(2, 2, 0), bottom=(3, 2, 2))
    ties = stirrup_commands(spec)[4:]
    # bars rest on the tie: underside of each overflow row
    assert [t.p1[1] for t in ties] == [120.0, 200.0, 460.0]
    for t in ties:
        assert t.p1[0] == 50.0 and t.p2[0] == 350.0


def test_top_tie_lines_sit_under_overflow_bars():
    spec = make_spec(top=(2, 2, 2))
    ties = stirrup_commands(spec)[4:]
    assert [t.p1[1] for t in ties] == [460.0, 380.0]
    # row 2 bar centres at 470, radius 10
    row2 = [y for _, y in get_rebar_coord(spec) if 400.0 < y < 550.0]
    assert row2[0] - spec.main_rebar.radius == ties[0].p1[1]


# =========================================================
# Annotation
# =========================================================
def test_annotation_basic():
    assert annotation_lines(make_spec()) == ["G1", "400x600", "2-D20", "3-D20"]


def test_annotation_with_stirrup_and_web():
    assert annotation_lines(make_full_spec()) == [
        "G1", "400x600", "6-D20", "10-D20", "2-D10@200", "4-D10",
    ]


def test_text_stack_does_not_overlap():
    spec = make_spec(text_height=50.0, stirrup=Stirrup(2, 10.0, 150.0))
    texts = text_commands(spec)
    assert [t.position for t in texts] == [
        (0.0, -1000.0), (0.0, -1100.0), (0.0, -1200.0), (0.0, -1300.0), (0.0, -1400.0),
    ]
    assert all(t.height == 50.0 and t.layer == "TEXT" for t in texts)
    assert texts[-1].value == "2-D10@150"


def test_fractional_numbers_keep_decimals():
    spec = make_spec(width=412.5, diameter=12.7)
    assert annotation_lines(spec)[1:3] == ["412.5x600", "2-D12.7"]


# =========================================================
# layout_beam
# =========================================================
def test_reference_section_end_to_end():
    cmds = layout_beam(make_spec())
    assert len(cmds) == 4 + 15 + 0 + 4 + 4
    assert all(isinstance(c, Line) for c in cmds[:4])
    circles = [c for c in cmds if isinstance(c, Circle)]
    assert [c.center for c in circles] == [
        (50.0, 50.0), (350.0, 50.0), (200.0, 50.0), (50.0, 550.0), (350.0, 550.0),
    ]
    assert sum(isinstance(c, Text) for c in cmds) == 4


def test_emission_order():
    spec = make_full_spec()
    cmds = layout_beam(spec)
    expected = (outline_commands(spec) + rebar_commands(spec) + side_rebar_commands(spec)
                + stirrup_commands(spec) + text_commands(spec))
    assert cmds == expected


def test_layout_is_deterministic():
    spec = make_full_spec()
    assert layout_beam(spec) == layout_beam(spec)


def test_sequential_fill_changes_only_order():
    alt = get_rebar_coord(make_spec(bottom=(5, 0, 0)))
    seq = get_rebar_coord(make_spec(bottom=(5, 0, 0), fill_order="sequential"))
    assert alt != seq
    assert sorted(alt) == sorted(seq)
