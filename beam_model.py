import math
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ezdxf.lldxf.validator import is_valid_layer_name

from constants import FILL_ALTERNATE, FILL_ORDERS


class ConfigValidationError(ValueError):
    """Bir BeamSpec ön koşulu sağlanmadı (hangi alan, hangi kısıt)."""

    def __init__(self, field_name: str, message: str):
        self.field = field_name
        super().__init__(f"{field_name}: {message}")


class FormatError(ValueError):
    """Config file could not be parsed as TOML."""


def _require_positive(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(name, f"must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigValidationError(name, f"must be finite, got {value}")
    if value <= 0:
        raise ConfigValidationError(name, f"must be positive, got {value}")


def _require_count(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(name, f"must be an integer, got {value!r}")
    if value < 0:
        raise ConfigValidationError(name, f"must not be negative, got {value}")


# =========================================================
# Kesit parçaları
# =========================================================
@dataclass(frozen=True)
class Dimension:
    beam_width: float
    beam_height: float
    cover_depth: float


@dataclass(frozen=True)
class MainRebar:
    diameter: float
    gap: float
    top_1: int = 0
    top_2: int = 0
    top_3: int = 0
    bottom_1: int = 0
    bottom_2: int = 0
    bottom_3: int = 0
    fill_order: str = FILL_ALTERNATE

    @property
    def radius(self) -> float:
        return self.diameter / 2.0

    def top_rows(self) -> Tuple[int, int, int]:
        return self.top_1, self.top_2, self.top_3

    def bottom_rows(self) -> Tuple[int, int, int]:
        return self.bottom_1, self.bottom_2, self.bottom_3

    def top_total(self) -> int:
        return sum(self.top_rows())

    def bottom_total(self) -> int:
        return sum(self.bottom_rows())


@dataclass(frozen=True)
class Stirrup:
    num: int
    diameter: float
    pitch: float

    def label(self) -> str:
        return f"{self.num}-D{fmt_num(self.diameter)}@{fmt_num(self.pitch)}"


@dataclass(frozen=True)
class WebRebar:
    num_row: int = 0
    diameter: float = 0.0

    def bar_count(self) -> int:
        # her sırada sol + sağ
        return 2 * self.num_row


@dataclass(frozen=True)
class LayerNames:
    concrete: str
    rebar: str
    text: str


def fmt_num(v: float) -> str:
    """400.0 -> '400', 12.5 -> '12.5'"""
    v = round(float(v), 6)
    if v.is_integer():
        return str(int(v))
    return format(v, ".12g")


# =========================================================
# BeamSpec
# =========================================================
@dataclass(frozen=True)
class BeamSpec:
    """
    Betonarme kiriş kesiti. Instances are validated on construction, so
    the layout engine can trust every field it reads.
    """
    beam_name: str
    dimension: Dimension
    main_rebar: MainRebar
    layer_names: LayerNames
    text_height: float
    stirrup: Optional[Stirrup] = None
    web_rebar: WebRebar = field(default_factory=WebRebar)

    def __post_init__(self):
        dim = self.dimension
        rb = self.main_rebar

        _require_positive("dimension.beam_width", dim.beam_width)
        _require_positive("dimension.beam_height", dim.beam_height)
        _require_positive("dimension.cover_depth", dim.cover_depth)
        _require_positive("main_rebar.diameter", rb.diameter)
        _require_positive("main_rebar.gap", rb.gap)
        _require_positive("layout.text_height", self.text_height)

        for name in ("top_1", "top_2", "top_3", "bottom_1", "bottom_2", "bottom_3"):
            _require_count(f"main_rebar.{name}", getattr(rb, name))
        if rb.top_1 < 2:
            raise ConfigValidationError("main_rebar.top_1", f"top rebar count < 2 (got {rb.top_1})")
        if rb.bottom_1 < 2:
            raise ConfigValidationError("main_rebar.bottom_1", f"bottom rebar count < 2 (got {rb.bottom_1})")
        if rb.fill_order not in FILL_ORDERS:
            raise ConfigValidationError(
                "main_rebar.fill_order",
                f"must be one of {', '.join(FILL_ORDERS)}, got {rb.fill_order!r}")

        min_size = 2.0 * dim.cover_depth + rb.diameter
        if dim.beam_width <= min_size:
            raise ConfigValidationError(
                "dimension.beam_width",
                f"must exceed 2*cover_depth + diameter = {fmt_num(min_size)}, got {fmt_num(dim.beam_width)}")
        if dim.beam_height <= min_size:
            raise ConfigValidationError(
                "dimension.beam_height",
                f"must exceed 2*cover_depth + diameter = {fmt_num(min_size)}, got {fmt_num(dim.beam_height)}")

        if self.stirrup is not None:
            _require_count("stirrup.num", self.stirrup.num)
            _require_positive("stirrup.diameter", self.stirrup.diameter)
            _require_positive("stirrup.pitch", self.stirrup.pitch)

        _require_count("web_rebar.num_row", self.web_rebar.num_row)
        if self.web_rebar.num_row > 0:
            _require_positive("web_rebar.diameter", self.web_rebar.diameter)
            # gövde donatısı üst ve alt donatı bantları arasına sığmalı
            web_min = 2.0 * dim.cover_depth + 2.0 * rb.diameter
            if dim.beam_height <= web_min:
                raise ConfigValidationError(
                    "dimension.beam_height",
                    f"must exceed 2*cover_depth + 2*diameter = {fmt_num(web_min)} "
                    f"when web_rebar.num_row > 0, got {fmt_num(dim.beam_height)}")

        seen = {}
        for role in ("concrete", "rebar", "text"):
            name = getattr(self.layer_names, role)
            if not name:
                raise ConfigValidationError(f"layer_name.{role}", "must not be empty")
            if not is_valid_layer_name(name):
                raise ConfigValidationError(f"layer_name.{role}", f"invalid DXF layer name {name!r}")
            # DXF katman adları büyük/küçük harf duyarsız
            other = seen.setdefault(name.lower(), (role, name))
            if other[1] != name:
                raise ConfigValidationError(
                    f"layer_name.{role}",
                    f"{name!r} clashes with layer_name.{other[0]} = {other[1]!r} (layer names ignore case)")
