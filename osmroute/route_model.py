"""Routing graph on top of a loaded map model."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .model import Model, Road, RoadType

_FLOAT_MAX = 3.4028234663852886e38


@dataclass(eq=False)
class RouteNode:
    """A map node carrying A* search state.

    Nodes compare by identity, so a node can be found in lists and sets
    regardless of its search values.
    """

    x: float = 0.0
    y: float = 0.0
    index: int = -1
    parent: RouteNode | None = field(default=None, repr=False)
    h_value: float = _FLOAT_MAX
    g_value: float = 0.0
    visited: bool = False
    neighbors: list[RouteNode] = field(default_factory=list, repr=False)
    model: RouteModel | None = field(default=None, repr=False)

    def distance(self, other: RouteNode) -> float:
        """Euclidean distance to ``other`` in normalised map units."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def _find_neighbor(self, node_indices: list[int]) -> RouteNode | None:
        """Closest unvisited node among ``node_indices`` that is not at this spot."""
        assert self.model is not None
        snodes = self.model.snodes
        closest: RouteNode | None = None
        closest_distance = 0.0
        for node_index in node_indices:
            candidate = snodes[node_index]
            dist = self.distance(candidate)
            if dist == 0 or candidate.visited:
                continue
            if closest is None or dist < closest_distance:
                closest = candidate
                closest_distance = dist
        return closest

    def find_neighbors(self) -> None:
        """Append the closest unvisited node of every road through this node."""
        if self.model is None:
            raise ValueError("node does not belong to a route model")
        ways = self.model.ways
        for road in self.model._roads_at(self.index):
            neighbor = self._find_neighbor(ways[road.way].nodes)
            if neighbor is not None:
                self.neighbors.append(neighbor)


class RouteModel(Model):
    """A map model whose road nodes can be searched for routes."""

    def __init__(self, xml: bytes | bytearray | str) -> None:
        super().__init__(xml)
        self.path: list[RouteNode] = []
        self._snodes = [
            RouteNode(x=node.x, y=node.y, index=index, model=self)
            for index, node in enumerate(self.nodes)
        ]
        self._node_to_road: dict[int, list[Road]] = {}
        for road in self.roads:
            if road.type is RoadType.FOOTWAY:
                continue
            for node_index in self.ways[road.way].nodes:
                self._node_to_road.setdefault(node_index, []).append(road)

    @property
    def snodes(self) -> list[RouteNode]:
        """Search nodes, one per map node and in the same order."""
        return self._snodes

    def _roads_at(self, node_index: int) -> list[Road]:
        return self._node_to_road.get(node_index, [])

    def find_closest_node(self, x: float, y: float) -> RouteNode:
        """Return the non-footway road node nearest to the point ``(x, y)``."""
        target = RouteNode(x=x, y=y)
        closest: RouteNode | None = None
        min_dist = _FLOAT_MAX
        for road in self.roads:
            if road.type is RoadType.FOOTWAY:
                continue
            for node_index in self.ways[road.way].nodes:
                candidate = self._snodes[node_index]
                dist = target.distance(candidate)
                if dist < min_dist:
                    closest = candidate
                    min_dist = dist
        if closest is None:
            raise ValueError("the map has no road nodes to route on")
        return closest