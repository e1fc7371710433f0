"""OpenStreetMap XML loading into a planar map model."""

from __future__ import annotations

import math
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import IntEnum


class RoadType(IntEnum):
    """Road classes, ordered from least to most prominent (footways last)."""

    INVALID = 0
    UNCLASSIFIED = 1
    SERVICE = 2
    RESIDENTIAL = 3
    TERTIARY = 4
    SECONDARY = 5
    PRIMARY = 6
    TRUNK = 7
    MOTORWAY = 8
    FOOTWAY = 9


class LanduseType(IntEnum):
    """Land use classes."""

    INVALID = 0
    COMMERCIAL = 1
    CONSTRUCTION = 2
    GRASS = 3
    FOREST = 4
    INDUSTRIAL = 5
    RAILWAY = 6
    RESIDENTIAL = 7


_ROAD_TYPES = {
    "motorway": RoadType.MOTORWAY,
    "trunk": RoadType.TRUNK,
    "primary": RoadType.PRIMARY,
    "secondary": RoadType.SECONDARY,
    "tertiary": RoadType.TERTIARY,
    "residential": RoadType.RESIDENTIAL,
    "living_street": RoadType.RESIDENTIAL,
    "service": RoadType.SERVICE,
    "unclassified": RoadType.UNCLASSIFIED,
    "footway": RoadType.FOOTWAY,
    "bridleway": RoadType.FOOTWAY,
    "steps": RoadType.FOOTWAY,
    "path": RoadType.FOOTWAY,
    "pedestrian": RoadType.FOOTWAY,
}

_LANDUSE_TYPES = {
    "commercial": LanduseType.COMMERCIAL,
    "construction": LanduseType.CONSTRUCTION,
    "grass": LanduseType.GRASS,
    "forest": LanduseType.FOREST,
    "industrial": LanduseType.INDUSTRIAL,
    "railway": LanduseType.RAILWAY,
    "residential": LanduseType.RESIDENTIAL,
}

_LEISURE_NATURALS = frozenset({"wood", "tree_row", "scrub", "grassland"})

_EARTH_RADIUS = 6378137.0
_DEG_TO_RAD = 2.0 * math.pi / 360.0

_FLOAT_PREFIX = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def road_type_from_string(value: str) -> RoadType:
    """Map an OSM ``highway`` value to a road type, INVALID if unknown."""
    return _ROAD_TYPES.get(value, RoadType.INVALID)


def landuse_type_from_string(value: str) -> LanduseType:
    """Map an OSM ``landuse`` value to a land use type, INVALID if unknown."""
    return _LANDUSE_TYPES.get(value, LanduseType.INVALID)


@dataclass
class Node:
    """A map point; after loading, coordinates are normalised to the map."""

    x: float = 0.0
    y: float = 0.0


@dataclass
class Way:
    """An ordered list of node indices."""

    nodes: list[int] = field(default_factory=list)


@dataclass
class Road:
    way: int
    type: RoadType


@dataclass
class Railway:
    way: int


@dataclass
class Multipolygon:
    """Outer and inner rings, each given as way indices."""

    outer: list[int] = field(default_factory=list)
    inner: list[int] = field(default_factory=list)


@dataclass
class Building(Multipolygon):
    pass


@dataclass
class Leisure(Multipolygon):
    pass


@dataclass
class Water(Multipolygon):
    pass


@dataclass
class Landuse(Multipolygon):
    type: LanduseType = LanduseType.INVALID


def _atof(text: str | None) -> float:
    """Parse the leading number of ``text`` the lenient way, 0.0 if none."""
    if not text:
        return 0.0
    match = _FLOAT_PREFIX.match(text)
    return float(match.group()) if match else 0.0


def _lat_to_metres(lat: float) -> float:
    return math.log(math.tan(lat * _DEG_TO_RAD / 2 + math.pi / 4)) / 2 * _EARTH_RADIUS


def _lon_to_metres(lon: float) -> float:
    return lon * _DEG_TO_RAD / 2 * _EARTH_RADIUS


def _trace_ring(candidates: list[list[int]], used: set[int], chain: list[int]) -> bool:
    """Join unused candidate ways onto ``chain`` until it closes into a ring."""
    if not chain:
        for i, way_nodes in enumerate(candidates):
            if i in used:
                continue
            used.add(i)
            chain.extend(way_nodes)
            if _trace_ring(candidates, used, chain):
                return True
            chain.clear()
            used.discard(i)
        return False

    if len(chain) > 1 and chain[0] == chain[-1]:
        return True
    tail = chain[-1]
    for i, way_nodes in enumerate(candidates):
        if i in used or not way_nodes:
            continue
        head, last = way_nodes[0], way_nodes[-1]
        if tail not in (head, last):
            continue
        used.add(i)
        length = len(chain)
        chain.extend(way_nodes if head == tail else reversed(way_nodes))
        if _trace_ring(candidates, used, chain):
            return True
        del chain[length:]
        used.discard(i)
    return False


class Model:
    """A map loaded from OSM XML, with coordinates scaled to the unit square."""

    def __init__(self, xml: bytes | bytearray | str) -> None:
        self._nodes: list[Node] = []
        self._ways: list[Way] = []
        self._roads: list[Road] = []
        self._railways: list[Railway] = []
        self._buildings: list[Building] = []
        self._leisures: list[Leisure] = []
        self._waters: list[Water] = []
        self._landuses: list[Landuse] = []
        self._min_lat = 0.0
        self._max_lat = 0.0
        self._min_lon = 0.0
        self._max_lon = 0.0
        self._metric_scale = 1.0

        self._load(xml)
        self._adjust_coordinates()
        self._roads.sort(key=lambda road: int(road.type))

    @property
    def metric_scale(self) -> float:
        """Metres per unit of normalised coordinates."""
        return self._metric_scale

    @property
    def nodes(self) -> list[Node]:
        return self._nodes

    @property
    def ways(self) -> list[Way]:
        return self._ways

    @property
    def roads(self) -> list[Road]:
        return self._roads

    @property
    def railways(self) -> list[Railway]:
        return self._railways

    @property
    def buildings(self) -> list[Building]:
        return self._buildings

    @property
    def leisures(self) -> list[Leisure]:
        return self._leisures

    @property
    def waters(self) -> list[Water]:
        return self._waters

    @property
    def landuses(self) -> list[Landuse]:
        return self._landuses

    def _load(self, xml: bytes | bytearray | str) -> None:
        try:
            root = ET.fromstring(bytes(xml) if isinstance(xml, bytearray) else xml)
        except ET.ParseError as exc:
            raise ValueError("failed to parse the xml file") from exc

        bounds = root.find("bounds") if root.tag == "osm" else None
        if bounds is None:
            raise ValueError("map's bounds are not defined")
        self._min_lat = _atof(bounds.get("minlat"))
        self._max_lat = _atof(bounds.get("maxlat"))
        self._min_lon = _atof(bounds.get("minlon"))
        self._max_lon = _atof(bounds.get("maxlon"))

        node_ids: dict[str, int] = {}
        for element in root.iterfind("node"):
            node_ids[element.get("id", "")] = len(self._nodes)
            self._nodes.append(
                Node(x=_atof(element.get("lon")), y=_atof(element.get("lat")))
            )

        way_ids: dict[str, int] = {}
        for element in root.iterfind("way"):
            way_num = len(self._ways)
            way_ids[element.get("id", "")] = way_num
            way = Way()
            self._ways.append(way)
            for child in element:
                if child.tag == "nd":
                    index = node_ids.get(child.get("ref", ""))
                    if index is not None:
                        way.nodes.append(index)
                elif child.tag == "tag":
                    self._classify_way(way_num, child.get("k", ""), child.get("v", ""))

        for element in root.iterfind("relation"):
            self._load_relation(element, way_ids)

    def _classify_way(self, way_num: int, category: str, value: str) -> None:
        if category == "highway":
            road_type = road_type_from_string(value)
            if road_type is not RoadType.INVALID:
                self._roads.append(Road(way=way_num, type=road_type))

        if category == "railway":
            self._railways.append(Railway(way=way_num))
        elif category == "building":
            self._buildings.append(Building(outer=[way_num]))
        elif (
            category == "leisure"
            or (category == "natural" and value in _LEISURE_NATURALS)
            or (category == "landcover" and value == "grass")
        ):
            self._leisures.append(Leisure(outer=[way_num]))
        elif category == "natural" and value == "water":
            self._waters.append(Water(outer=[way_num]))
        elif category == "landuse":
            landuse_type = landuse_type_from_string(value)
            if landuse_type is not LanduseType.INVALID:
                self._landuses.append(Landuse(outer=[way_num], type=landuse_type))

    def _load_relation(self, element: ET.Element, way_ids: dict[str, int]) -> None:
        outer: list[int] = []
        inner: list[int] = []
        for child in element:
            if child.tag == "member":
                if child.get("type") != "way":
                    continue
                way_num = way_ids.get(child.get("ref", ""))
                if way_num is None:
                    continue
                (outer if child.get("role") == "outer" else inner).append(way_num)
            elif child.tag == "tag":
                category = child.get("k", "")
                value = child.get("v", "")
                if category == "building":
                    self._buildings.append(Building(outer=outer, inner=inner))
                    return
                if category == "natural" and value == "water":
                    water = Water(outer=outer, inner=inner)
                    self._waters.append(water)
                    self._build_rings(water)
                    return
                if category == "landuse":
                    landuse_type = landuse_type_from_string(value)
                    if landuse_type is not LanduseType.INVALID:
                        landuse = Landuse(outer=outer, inner=inner, type=landuse_type)
                        self._landuses.append(landuse)
                        self._build_rings(landuse)
                    return

    def _adjust_coordinates(self) -> None:
        dx = _lon_to_metres(self._max_lon) - _lon_to_metres(self._min_lon)
        dy = _lat_to_metres(self._max_lat) - _lat_to_metres(self._min_lat)
        min_y = _lat_to_metres(self._min_lat)
        min_x = _lon_to_metres(self._min_lon)
        self._metric_scale = min(dx, dy)
        for node in self._nodes:
            node.x = (_lon_to_metres(node.x) - min_x) / self._metric_scale
            node.y = (_lat_to_metres(node.y) - min_y) / self._metric_scale

    def _build_rings(self, polygon: Multipolygon) -> None:
        polygon.outer = self._close_rings(polygon.outer)
        polygon.inner = self._close_rings(polygon.inner)

    def _close_rings(self, way_nums: list[int]) -> list[int]:
        """Keep closed ways and join open ones into new closed ways."""

        def is_closed(way: Way) -> bool:
            return len(way.nodes) > 1 and way.nodes[0] == way.nodes[-1]

        closed = [num for num in way_nums if is_closed(self._ways[num])]
        open_ways = [num for num in way_nums if not is_closed(self._ways[num])]

        while open_ways:
            chain: list[int] = []
            used: set[int] = set()
            candidates = [self._ways[num].nodes for num in open_ways]
            if not _trace_ring(candidates, used, chain) or not chain:
                break
            open_ways = [num for i, num in enumerate(open_ways) if i not in used]
            closed.append(len(self._ways))
            self._ways.append(Way(nodes=chain))
        return closed