"""Raster rendering of a route model with Pillow."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from os import PathLike

from PIL import Image, ImageChops, ImageDraw

from .model import LanduseType, Multipolygon, Node, RoadType, Way
from .route_model import RouteModel

Color = tuple[int, int, int]
Point = tuple[float, float]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
GREY: Color = (128, 128, 128)
RED: Color = (255, 0, 0)
GREEN: Color = (0, 128, 0)
ORANGE: Color = (255, 165, 0)

BACKGROUND_COLOR: Color = (238, 235, 227)
BUILDING_FILL_COLOR: Color = (208, 197, 190)
BUILDING_OUTLINE_COLOR: Color = (181, 167, 154)
LEISURE_FILL_COLOR: Color = (189, 252, 193)
LEISURE_OUTLINE_COLOR: Color = (160, 248, 162)
WATER_FILL_COLOR: Color = (155, 201, 215)
RAILWAY_STROKE_COLOR: Color = (93, 93, 93)
RAILWAY_DASH_COLOR: Color = WHITE
RAILWAY_DASHES: tuple[float, ...] = (3.0, 3.0)
RAILWAY_OUTER_WIDTH = 3.0
RAILWAY_INNER_WIDTH = 2.0
OUTLINE_WIDTH = 1.0
PATH_COLOR: Color = ORANGE
PATH_WIDTH = 5.0
MARKER_SIZE = 0.01

LANDUSE_COLORS: dict[LanduseType, Color] = {
    LanduseType.COMMERCIAL: (233, 195, 196),
    LanduseType.CONSTRUCTION: (187, 188, 165),
    LanduseType.GRASS: (197, 236, 148),
    LanduseType.FOREST: (158, 201, 141),
    LanduseType.INDUSTRIAL: (223, 197, 220),
    LanduseType.RAILWAY: (223, 197, 220),
    LanduseType.RESIDENTIAL: (209, 209, 209),
}

_ROAD_COLORS: dict[RoadType, Color] = {
    RoadType.MOTORWAY: (226, 122, 143),
    RoadType.TRUNK: (245, 161, 136),
    RoadType.PRIMARY: (249, 207, 144),
    RoadType.SECONDARY: (244, 251, 173),
    RoadType.TERTIARY: (244, 251, 173),
    RoadType.RESIDENTIAL: (254, 254, 254),
    RoadType.SERVICE: (254, 254, 254),
    RoadType.FOOTWAY: (241, 106, 96),
    RoadType.UNCLASSIFIED: (254, 254, 254),
}

_ROAD_WIDTHS: dict[RoadType, float] = {
    RoadType.MOTORWAY: 6.0,
    RoadType.TRUNK: 6.0,
    RoadType.PRIMARY: 5.0,
    RoadType.SECONDARY: 5.0,
    RoadType.TERTIARY: 4.0,
    RoadType.RESIDENTIAL: 2.5,
    RoadType.UNCLASSIFIED: 2.5,
    RoadType.SERVICE: 1.0,
    RoadType.FOOTWAY: 0.0,
}

_DRAWN_ROADS = (
    RoadType.MOTORWAY,
    RoadType.TRUNK,
    RoadType.PRIMARY,
    RoadType.SECONDARY,
    RoadType.TERTIARY,
    RoadType.RESIDENTIAL,
    RoadType.SERVICE,
    RoadType.UNCLASSIFIED,
    RoadType.FOOTWAY,
)


@dataclass(frozen=True)
class RoadStyle:
    """How a road class is drawn; a zero metric width means a hairline."""

    color: Color = BLACK
    metric_width: float = 1.0
    dashes: tuple[float, ...] = field(default_factory=tuple)


def road_style(road_type: RoadType) -> RoadStyle:
    """Return the drawing style for a road class."""
    return RoadStyle(
        color=_ROAD_COLORS.get(road_type, GREY),
        metric_width=_ROAD_WIDTHS.get(road_type, 1.0),
        dashes=(1.0, 2.0) if road_type is RoadType.FOOTWAY else (),
    )


def _pixel_width(width: float) -> int:
    return max(1, round(width))


def _dash_polyline(points: list[Point], pattern: tuple[float, ...]) -> list[list[Point]]:
    """Split a polyline into the visible pieces of a dash pattern."""
    if len(points) < 2:
        return []
    if not pattern or sum(pattern) <= 0:
        return [points]
    pieces: list[list[Point]] = []
    drawing = True
    index = 0
    remaining = pattern[0]
    current: list[Point] = [points[0]]
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        length = math.hypot(x1 - x0, y1 - y0)
        pos = 0.0
        while length - pos > remaining:
            pos += remaining
            t = pos / length
            point = (x0 + (x1 - x0) * t, y0 + (y1 - y0) * t)
            if drawing:
                current.append(point)
                pieces.append(current)
            else:
                current = [point]
            drawing = not drawing
            index = (index + 1) % len(pattern)
            remaining = pattern[index]
        remaining -= length - pos
        if drawing:
            current.append((x1, y1))
    if drawing and len(current) > 1:
        pieces.append(current)
    return pieces


@dataclass
class _Frame:
    image: Image.Image
    draw: ImageDraw.ImageDraw
    scale: float
    height: int
    pixels_in_meter: float

    def point(self, node: Node) -> Point:
        return (node.x * self.scale, self.height - node.y * self.scale)


class Render:
    """Draws the map layers, the found path and its end markers."""

    def __init__(self, model: RouteModel) -> None:
        self._model = model
        self._road_styles = {road_type: road_style(road_type) for road_type in _DRAWN_ROADS}
        self._landuse_colors = dict(LANDUSE_COLORS)

    def display(self, width: int = 400, height: int = 400) -> Image.Image:
        """Render the map into a new RGB image of the given size."""
        if width <= 0 or height <= 0:
            raise ValueError("image dimensions must be positive")
        image = Image.new("RGB", (width, height), BACKGROUND_COLOR)
        scale = float(min(width, height))
        frame = _Frame(
            image=image,
            draw=ImageDraw.Draw(image),
            scale=scale,
            height=height,
            pixels_in_meter=scale / self._model.metric_scale,
        )
        self._draw_landuses(frame)
        self._draw_leisures(frame)
        self._draw_waters(frame)
        self._draw_railways(frame)
        self._draw_highways(frame)
        self._draw_buildings(frame)
        self._draw_path(frame)
        self._draw_marker(frame, 0, GREEN)
        self._draw_marker(frame, -1, RED)
        return image

    def save(self, path: str | PathLike[str], width: int = 400, height: int = 400) -> None:
        """Render the map and write it to ``path``; the format follows the suffix."""
        self.display(width, height).save(path)

    def _way_points(self, frame: _Frame, way: Way) -> list[Point]:
        nodes = self._model.nodes
        return [frame.point(nodes[index]) for index in way.nodes]

    def _rings(self, frame: _Frame, polygon: Multipolygon) -> list[list[Point]]:
        ways = self._model.ways
        rings = (self._way_points(frame, ways[num]) for num in [*polygon.outer, *polygon.inner])
        return [ring for ring in rings if ring]

    def _fill(self, frame: _Frame, rings: list[list[Point]], color: Color) -> None:
        """Fill rings with the even-odd rule so inner rings leave holes."""
        rings = [ring for ring in rings if len(ring) >= 3]
        if not rings:
            return
        if len(rings) == 1:
            frame.draw.polygon(rings[0], fill=color)
            return
        size = frame.image.size
        mask = Image.new("1", size, 0)
        for ring in rings:
            ring_mask = Image.new("1", size, 0)
            ImageDraw.Draw(ring_mask).polygon(ring, fill=1)
            mask = ImageChops.logical_xor(mask, ring_mask)
        frame.image.paste(color, mask=mask)

    def _outline(self, frame: _Frame, rings: list[list[Point]], color: Color) -> None:
        for ring in rings:
            if len(ring) >= 2:
                frame.draw.line([*ring, ring[0]], fill=color, width=_pixel_width(OUTLINE_WIDTH))

    def _stroke(
        self,
        frame: _Frame,
        points: list[Point],
        color: Color,
        width: float,
        dashes: tuple[float, ...] = (),
        round_cap: bool = False,
    ) -> None:
        if len(points) < 2:
            return
        pixels = _pixel_width(width)
        for piece in _dash_polyline(points, dashes):
            frame.draw.line(piece, fill=color, width=pixels, joint="curve")
            if round_cap and pixels > 2:
                radius = pixels / 2
                for x, y in (piece[0], piece[-1]):
                    frame.draw.ellipse(
                        [x - radius, y - radius, x + radius, y + radius], fill=color
                    )

    def _draw_landuses(self, frame: _Frame) -> None:
        for landuse in self._model.landuses:
            color = self._landuse_colors.get(landuse.type)
            if color is not None:
                self._fill(frame, self._rings(frame, landuse), color)

    def _draw_leisures(self, frame: _Frame) -> None:
        for leisure in self._model.leisures:
            rings = self._rings(frame, leisure)
            self._fill(frame, rings, LEISURE_FILL_COLOR)
            self._outline(frame, rings, LEISURE_OUTLINE_COLOR)

    def _draw_waters(self, frame: _Frame) -> None:
        for water in self._model.waters:
            self._fill(frame, self._rings(frame, water), WATER_FILL_COLOR)

    def _draw_railways(self, frame: _Frame) -> None:
        ways = self._model.ways
        for railway in self._model.railways:
            points = self._way_points(frame, ways[railway.way])
            self._stroke(
                frame, points, RAILWAY_STROKE_COLOR, RAILWAY_OUTER_WIDTH * frame.pixels_in_meter
            )
            self._stroke(
                frame,
                points,
                RAILWAY_DASH_COLOR,
                RAILWAY_INNER_WIDTH * frame.pixels_in_meter,
                RAILWAY_DASHES,
            )

    def _draw_highways(self, frame: _Frame) -> None:
        ways = self._model.ways
        for road in self._model.roads:
            style = self._road_styles.get(road.type)
            if style is None:
                continue
            width = (
                style.metric_width * frame.pixels_in_meter if style.metric_width > 0 else 1.0
            )
            points = self._way_points(frame, ways[road.way])
            self._stroke(frame, points, style.color, width, style.dashes, round_cap=True)

    def _draw_buildings(self, frame: _Frame) -> None:
        for building in self._model.buildings:
            rings = self._rings(frame, building)
            self._fill(frame, rings, BUILDING_FILL_COLOR)
            self._outline(frame, rings, BUILDING_OUTLINE_COLOR)

    def _draw_path(self, frame: _Frame) -> None:
        points = [frame.point(node) for node in self._model.path]
        self._stroke(frame, points, PATH_COLOR, PATH_WIDTH)

    def _draw_marker(self, frame: _Frame, position: int, color: Color) -> None:
        if not self._model.path:
            return
        x, y = frame.point(self._model.path[position])
        size = MARKER_SIZE * frame.scale
        frame.draw.rectangle([x, y - size, x + size, y], fill=color, outline=color)