"""
TOML girdi dosyasından BeamSpec okuma.

Defaults are filled here and only here; BeamSpec itself never guesses.
"""
import logging
import math
import tomllib
from typing import Any, Dict

from beam_model import (
    BeamSpec, ConfigValidationError, Dimension, FormatError, LayerNames,
    MainRebar, Stirrup, WebRebar,
)
from constants import (
    DEFAULT_COVER_DEPTH, DEFAULT_GAP_FACTOR, DEFAULT_LAYER_CONCRETE,
    DEFAULT_LAYER_REBAR, DEFAULT_LAYER_TEXT, DEFAULT_TEXT_HEIGHT,
    DEFAULT_WEB_DIAMETER, FILL_ALTERNATE,
)

log = logging.getLogger("rc_beam.config")

_MISSING = object()


def _table(data: Dict[str, Any], name: str, required: bool = False) -> Dict[str, Any]:
    value = data.get(name, _MISSING)
    if value is _MISSING:
        if required:
            raise ConfigValidationError(name, "missing mandatory table")
        return {}
    if not isinstance(value, dict):
        raise ConfigValidationError(name, f"must be a table, got {type(value).__name__}")
    return value


def _get(table: Dict[str, Any], prefix: str, key: str, default: Any = _MISSING) -> Any:
    value = table.get(key, _MISSING)
    if value is _MISSING:
        if default is _MISSING:
            raise ConfigValidationError(f"{prefix}.{key}", "missing mandatory field")
        log.debug("%s.%s not given, using default %r", prefix, key, default)
        return default
    return value


def _number(table: Dict[str, Any], prefix: str, key: str, default: Any = _MISSING) -> float:
    value = _get(table, prefix, key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(f"{prefix}.{key}", f"must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigValidationError(f"{prefix}.{key}", f"must be finite, got {value}")
    return float(value)


def _count(table: Dict[str, Any], prefix: str, key: str, default: Any = _MISSING) -> int:
    value = _get(table, prefix, key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(f"{prefix}.{key}", f"must be an integer, got {value!r}")
    return value


def _string(table: Dict[str, Any], prefix: str, key: str, default: Any = _MISSING) -> str:
    value = _get(table, prefix, key, default)
    if not isinstance(value, str):
        raise ConfigValidationError(f"{prefix}.{key}", f"must be a string, got {value!r}")
    return value


def beam_spec_from_dict(data: Dict[str, Any]) -> BeamSpec:
    """Parsed TOML document -> validated BeamSpec."""
    beam_name = data.get("beam_name", _MISSING)
    if beam_name is _MISSING:
        raise ConfigValidationError("beam_name", "missing mandatory field")
    if not isinstance(beam_name, str):
        raise ConfigValidationError("beam_name", f"must be a string, got {beam_name!r}")

    t = _table(data, "dimension", required=True)
    dimension = Dimension(
        beam_width=_number(t, "dimension", "beam_width"),
        beam_height=_number(t, "dimension", "beam_height"),
        cover_depth=_number(t, "dimension", "cover_depth", DEFAULT_COVER_DEPTH),
    )

    t = _table(data, "main_rebar", required=True)
    diameter = _number(t, "main_rebar", "diameter")
    main_rebar = MainRebar(
        diameter=diameter,
        gap=_number(t, "main_rebar", "gap", DEFAULT_GAP_FACTOR * diameter),
        top_1=_count(t, "main_rebar", "top_1", 0),
        top_2=_count(t, "main_rebar", "top_2", 0),
        top_3=_count(t, "main_rebar", "top_3", 0),
        bottom_1=_count(t, "main_rebar", "bottom_1", 0),
        bottom_2=_count(t, "main_rebar", "bottom_2", 0),
        bottom_3=_count(t, "main_rebar", "bottom_3", 0),
        fill_order=_string(t, "main_rebar", "fill_order", FILL_ALTERNATE),
    )

    stirrup = None
    if "stirrup" in data:
        t = _table(data, "stirrup")
        stirrup = Stirrup(
            num=_count(t, "stirrup", "num"),
            diameter=_number(t, "stirrup", "diameter"),
            pitch=_number(t, "stirrup", "pitch"),
        )

    t = _table(data, "web_rebar")
    web_rebar = WebRebar(
        num_row=_count(t, "web_rebar", "num_row", 0),
        diameter=_number(t, "web_rebar", "diameter", DEFAULT_WEB_DIAMETER),
    )

    t = _table(data, "layer_name")
    layer_names = LayerNames(
        concrete=_string(t, "layer_name", "concrete", DEFAULT_LAYER_CONCRETE),
        rebar=_string(t, "layer_name", "rebar", DEFAULT_LAYER_REBAR),
        text=_string(t, "layer_name", "text", DEFAULT_LAYER_TEXT),
    )

    t = _table(data, "layout")
    text_height = _number(t, "layout", "text_height", DEFAULT_TEXT_HEIGHT)

    return BeamSpec(
        beam_name=beam_name,
        dimension=dimension,
        main_rebar=main_rebar,
        layer_names=layer_names,
        text_height=text_height,
        stirrup=stirrup,
        web_rebar=web_rebar,
    )


def _warn_overflow_rows(spec: BeamSpec) -> None:
    # Ek sıralar 1. sıranın adımını kullanır; daha kalabalık sıra kesitten taşar
    rb = spec.main_rebar
    for group, rows in (("top", rb.top_rows()), ("bottom", rb.bottom_rows())):
        for k, n in enumerate(rows[1:], start=2):
            if n > rows[0]:
                log.warning("main_rebar.%s_%d = %d exceeds %s_1 = %d; extra bars fall outside the section",
                            group, k, n, group, rows[0])


def load_beam_spec(path: str) -> BeamSpec:
    """Read a TOML beam description. OSError from the file system propagates as is."""
    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise FormatError(f"{path}: invalid TOML: {e}") from e

    spec = beam_spec_from_dict(data)
    _warn_overflow_rows(spec)
    log.info("Loaded beam %s: %gx%g", spec.beam_name,
             spec.dimension.beam_width, spec.dimension.beam_height)
    return spec
