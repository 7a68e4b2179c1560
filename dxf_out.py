import logging
from typing import Dict, Iterable, Optional

import ezdxf
from ezdxf.enums import TextEntityAlignment

from beam_layout import Circle, DrawCommand, Line, Polyline, Text, layout_beam
from beam_model import BeamSpec
from constants import COLOR_CONCRETE, COLOR_DEFAULT, COLOR_REBAR, COLOR_TEXT

log = logging.getLogger("rc_beam.dxf_out")


class _DXFWriter:
    """ezdxf kütüphanesi kullanarak DXF dosyası oluşturan sınıf."""

    def __init__(self, layer_colors: Optional[Dict[str, int]] = None):
        self.doc = ezdxf.new('R2010')  # AutoCAD 2010 formatı
        self.doc.header['$MEASUREMENT'] = 1  # metric
        self.doc.header['$INSUNITS'] = 4     # millimeters
        self.msp = self.doc.modelspace()
        self.layers_created = set()
        self.layer_colors = dict(layer_colors or {})

    def add_layer(self, name: str):
        # DXF katman adları büyük/küçük harf duyarsız
        key = name.lower()
        if key not in self.layers_created and key != "0":
            color = self.layer_colors.get(name, COLOR_DEFAULT)
            self.doc.layers.add(name, color=color)
            self.layers_created.add(key)

    def add_line(self, x1, y1, x2, y2, layer="0"):
        self.add_layer(layer)
        self.msp.add_line((x1, y1), (x2, y2), dxfattribs={'layer': layer})

    def add_circle(self, x, y, r, layer="0"):
        self.add_layer(layer)
        self.msp.add_circle((x, y), r, dxfattribs={'layer': layer})

    def add_polyline(self, pts, layer="0", closed=False):
        self.add_layer(layer)
        self.msp.add_lwpolyline(list(pts), dxfattribs={'layer': layer}, close=closed)

    def add_text(self, x, y, text, height=200.0, layer="TEXT"):
        self.add_layer(layer)
        txt = self.msp.add_text(text, dxfattribs={
            'layer': layer,
            'height': height,
        })
        # Orta / taban çizgisi hizalı
        txt.set_placement((x, y), align=TextEntityAlignment.CENTER)

    def draw(self, cmd: DrawCommand):
        if isinstance(cmd, Line):
            self.add_line(cmd.p1[0], cmd.p1[1], cmd.p2[0], cmd.p2[1], layer=cmd.layer)
        elif isinstance(cmd, Circle):
            self.add_circle(cmd.center[0], cmd.center[1], cmd.radius, layer=cmd.layer)
        elif isinstance(cmd, Polyline):
            self.add_polyline(cmd.points, layer=cmd.layer, closed=cmd.closed)
        elif isinstance(cmd, Text):
            self.add_text(cmd.position[0], cmd.position[1], cmd.value,
                          height=cmd.height, layer=cmd.layer)
        else:
            raise TypeError(f"unknown draw command: {cmd!r}")

    def save(self, path: str):
        self.doc.saveas(path)


def layer_colors_for(spec: BeamSpec) -> Dict[str, int]:
    """Katman rolü -> sabit renk (concrete yellow, rebar cyan, text white)."""
    names = spec.layer_names
    colors = {names.text: COLOR_TEXT}
    colors[names.rebar] = COLOR_REBAR
    colors[names.concrete] = COLOR_CONCRETE
    return colors


def export_to_dxf(commands: Iterable[DrawCommand], filename: str,
                  layer_colors: Optional[Dict[str, int]] = None):
    """
    Çizim komutlarını sırasıyla DXF dosyasına yazar.
    Layers are created on first use; entity order follows the command order.
    """
    w = _DXFWriter(layer_colors)
    count = 0
    for cmd in commands:
        w.draw(cmd)
        count += 1
    log.info("Writing %d entities on %d layers to %s", count, len(w.layers_created), filename)
    w.save(filename)


def write_beam(spec: BeamSpec, filename: str, outline_as_polyline: bool = False):
    commands = layout_beam(spec, outline_as_polyline=outline_as_polyline)
    export_to_dxf(commands, filename, layer_colors_for(spec))
