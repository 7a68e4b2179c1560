"""
Kiriş kesiti yerleşim motoru.

BeamSpec -> ordered list of draw commands (outline, main rebar, side rebar,
stirrup, text). Pure geometry: no file format knowledge, no I/O.
Local coordinates have their origin at the bottom-left corner of the section.
"""
import math
from dataclasses import dataclass
from typing import List, Tuple, Union

from beam_model import BeamSpec, ConfigValidationError, fmt_num
from constants import (
    CROSS_EXTRA, FILL_ALTERNATE, FILL_SEQUENTIAL, SIDE_REBAR_MARGIN, TEXT_BASE_Y,
)

Point = Tuple[float, float]


# =========================================================
# Çizim komutları
# =========================================================
@dataclass(frozen=True)
class Line:
    p1: Point
    p2: Point
    layer: str


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float
    layer: str


@dataclass(frozen=True)
class Polyline:
    points: Tuple[Point, ...]
    closed: bool
    layer: str


@dataclass(frozen=True)
class Text:
    position: Point
    height: float
    value: str
    layer: str


DrawCommand = Union[Line, Circle, Polyline, Text]


# =========================================================
# Koordinat hesapları
# =========================================================
def fill_positions(count: int, spacing: float, left: float, right: float,
                   order: str = FILL_ALTERNATE) -> List[float]:
    """
    X positions of `count` bars in one row.

    alternate: bars are taken from both ends in turn, moving inward by
    `spacing` every pair (i even -> left + (i//2)*spacing,
    i odd -> right - (i//2)*spacing). A 3-bar row is therefore
    [left, right, left + spacing].
    sequential: plain left-to-right, left + i*spacing.
    """
    if order == FILL_SEQUENTIAL:
        return [left + i * spacing for i in range(count)]
    if order != FILL_ALTERNATE:
        raise ConfigValidationError("main_rebar.fill_order", f"unknown fill order {order!r}")

    xs = []
    for i in range(count):
        if i % 2 == 0:
            xs.append(left + (i // 2) * spacing)
        else:
            xs.append(right - (i // 2) * spacing)
    return xs


def _row_pitch(spec: BeamSpec, first_row: int, field_name: str) -> float:
    if first_row < 2:
        raise ConfigValidationError(field_name, f"rebar count < 2 (got {first_row})")
    w = spec.dimension.beam_width
    d = spec.dimension.cover_depth
    r = spec.main_rebar.radius
    return (w - 2.0 * d - 2.0 * r) / (first_row - 1)


def get_rebar_coord(spec: BeamSpec) -> List[Point]:
    """Centres of all main bars: bottom rows (upward) first, then top rows (downward)."""
    rb = spec.main_rebar
    w = spec.dimension.beam_width
    h = spec.dimension.beam_height
    d = spec.dimension.cover_depth
    r = rb.radius

    # İki grubun adımı da çizimden önce kontrol edilir
    dx_bottom = _row_pitch(spec, rb.bottom_1, "main_rebar.bottom_1")
    dx_top = _row_pitch(spec, rb.top_1, "main_rebar.top_1")

    groups = [
        (rb.bottom_rows(), dx_bottom, d + r, rb.gap),    # alttan yukarı
        (rb.top_rows(), dx_top, h - d - r, -rb.gap),     # üstten aşağı
    ]

    coords: List[Point] = []
    for rows, dx, y0, dy in groups:
        for k, n in enumerate(rows):
            y = y0 + k * dy
            for x in fill_positions(n, dx, d + r, w - d - r, rb.fill_order):
                coords.append((x, y))
    return coords


def get_side_rebar_coord(spec: BeamSpec) -> List[Point]:
    """Web bar marks as (left, right) pairs per row, bottom row first."""
    n = spec.web_rebar.num_row
    if n == 0:
        return []

    w = spec.dimension.beam_width
    h = spec.dimension.beam_height
    d = spec.dimension.cover_depth
    dia = spec.main_rebar.diameter
    dy = (h - 2.0 * d - 2.0 * dia) / (n + 1)

    coords: List[Point] = []
    for i in range(1, n + 1):
        y = d + dia + i * dy
        coords.append((d + SIDE_REBAR_MARGIN, y))
        coords.append((w - d - SIDE_REBAR_MARGIN, y))
    return coords


def outline_points(spec: BeamSpec) -> List[Point]:
    w = spec.dimension.beam_width
    h = spec.dimension.beam_height
    return [(0.0, 0.0), (w, 0.0), (w, h), (0.0, h)]


# =========================================================
# Komut üreticileri
# =========================================================
def cross_commands(x: float, y: float, half_len: float, layer: str) -> List[Line]:
    """Two 45° lines through (x, y), each reaching `half_len` from the centre."""
    a = half_len / math.sqrt(2.0)
    return [
        Line((x - a, y + a), (x + a, y - a), layer),
        Line((x - a, y - a), (x + a, y + a), layer),
    ]


def outline_commands(spec: BeamSpec, as_polyline: bool = False) -> List[DrawCommand]:
    pts = outline_points(spec)
    layer = spec.layer_names.concrete
    if as_polyline:
        return [Polyline(tuple(pts), True, layer)]
    return [Line(pts[i], pts[(i + 1) % 4], layer) for i in range(4)]


def rebar_commands(spec: BeamSpec) -> List[DrawCommand]:
    layer = spec.layer_names.rebar
    r = spec.main_rebar.radius
    cmds: List[DrawCommand] = []
    for x, y in get_rebar_coord(spec):
        cmds.append(Circle((x, y), r, layer))
        cmds.extend(cross_commands(x, y, r + CROSS_EXTRA, layer))
    return cmds


def side_rebar_commands(spec: BeamSpec) -> List[DrawCommand]:
    coords = get_side_rebar_coord(spec)
    layer = spec.layer_names.rebar
    m = SIDE_REBAR_MARGIN

    cmds: List[DrawCommand] = []
    for x, y in coords:
        cmds.extend(cross_commands(x, y, m, layer))

    # Her sıra için sol-sağ işaretleri birleştiren yatay kılavuz çizgisi
    for (xl, yl), (xr, yr) in zip(coords[0::2], coords[1::2]):
        cmds.append(Line((xl - m, yl + m), (xr + m, yr + m), layer))
    return cmds


def stirrup_commands(spec: BeamSpec) -> List[DrawCommand]:
    rb = spec.main_rebar
    w = spec.dimension.beam_width
    h = spec.dimension.beam_height
    d = spec.dimension.cover_depth
    r = rb.radius
    g = rb.gap
    layer = spec.layer_names.rebar

    cmds: List[DrawCommand] = [
        Line((d + r, d), (w - d - r, d), layer),
        Line((d + r, h - d), (w - d - r, h - d), layer),
        Line((d, d + r), (d, h - d - r), layer),
        Line((w - d, d + r), (w - d, h - d - r), layer),
    ]

    # Ek sıralar için çiroz (tie) çizgileri, sıranın alt yüzünde; boş sıra çizilmez
    ties = [
        (rb.bottom_2, d + g),
        (rb.bottom_3, d + 2.0 * g),
        (rb.top_2, h - d - 2.0 * r - g),
        (rb.top_3, h - d - 2.0 * r - 2.0 * g),
    ]
    for count, y in ties:
        if count > 0:
            cmds.append(Line((d + r, y), (w - d - r, y), layer))
    return cmds


def annotation_lines(spec: BeamSpec) -> List[str]:
    rb = spec.main_rebar
    dim = spec.dimension
    dia = fmt_num(rb.diameter)

    lines = [
        spec.beam_name,
        f"{fmt_num(dim.beam_width)}x{fmt_num(dim.beam_height)}",
        f"{rb.top_total()}-D{dia}",
        f"{rb.bottom_total()}-D{dia}",
    ]
    if spec.stirrup is not None:
        lines.append(spec.stirrup.label())
    if spec.web_rebar.num_row > 0:
        lines.append(f"{spec.web_rebar.bar_count()}-D{fmt_num(spec.web_rebar.diameter)}")
    return lines


def text_commands(spec: BeamSpec) -> List[DrawCommand]:
    th = spec.text_height
    layer = spec.layer_names.text
    return [
        Text((0.0, TEXT_BASE_Y - 2.0 * th * i), th, value, layer)
        for i, value in enumerate(annotation_lines(spec))
    ]


def layout_beam(spec: BeamSpec, outline_as_polyline: bool = False) -> List[DrawCommand]:
    """
    Full drawing of one section. Emission order is fixed:
    outline, main rebar, side rebar, stirrup, text.
    """
    # Ana donatı önce hesaplanır: satır sayısı hatası hiç komut üretilmeden patlar
    rebars = rebar_commands(spec)

    cmds: List[DrawCommand] = []
    cmds.extend(outline_commands(spec, as_polyline=outline_as_polyline))
    cmds.extend(rebars)
    cmds.extend(side_rebar_commands(spec))
    cmds.extend(stirrup_commands(spec))
    cmds.extend(text_commands(spec))
    return cmds
