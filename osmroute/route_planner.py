"""A* route search over a route model."""

from __future__ import annotations

from .route_model import RouteModel, RouteNode


class RoutePlanner:
    """Plans a route between two points given in percent of the map size."""

    def __init__(
        self,
        model: RouteModel,
        start_x: float,
        start_y: float,
        end_x: float,
        end_y: float,
    ) -> None:
        self._model = model
        self._distance = 0.0
        self.open_list: list[RouteNode] = []
        self.start_node = model.find_closest_node(start_x * 0.01, start_y * 0.01)
        self.end_node = model.find_closest_node(end_x * 0.01, end_y * 0.01)

    @property
    def distance(self) -> float:
        """Length in metres of the last constructed path."""
        return self._distance

    def calculate_h_value(self, node: RouteNode) -> float:
        """Heuristic: straight-line distance to the end node."""
        return node.distance(self.end_node)

    def add_neighbors(self, current_node: RouteNode) -> None:
        """Expand ``current_node``, pushing its unvisited neighbours to the open list."""
        current_node.find_neighbors()
        for neighbor in current_node.neighbors:
            neighbor.parent = current_node
            neighbor.g_value = current_node.g_value + neighbor.distance(current_node)
            neighbor.h_value = self.calculate_h_value(neighbor)
            neighbor.visited = True
            self.open_list.append(neighbor)

    def next_node(self) -> RouteNode:
        """Remove and return the open node with the lowest g + h."""
        if not self.open_list:
            raise IndexError("the open list is empty")
        self.open_list.sort(key=lambda node: node.h_value + node.g_value, reverse=True)
        return self.open_list.pop()

    def construct_final_path(self, current_node: RouteNode) -> list[RouteNode]:
        """Follow parents back to the start; return the path start first."""
        self._distance = 0.0
        path = [current_node]
        start = self.start_node
        while current_node.x != start.x and current_node.y != start.y:
            parent = current_node.parent
            if parent is None:
                raise ValueError("the path is broken: a node has no parent")
            self._distance += current_node.distance(parent)
            path.append(parent)
            current_node = parent
        path.reverse()
        self._distance *= self._model.metric_scale
        return path

    def a_star_search(self) -> list[RouteNode]:
        """Search from start to end, store the path on the model and return it."""
        self.start_node.visited = True
        self.open_list.append(self.start_node)
        while self.open_list:
            node = self.next_node()
            if node.x == self.end_node.x and node.y == self.end_node.y:
                self._model.path = self.construct_final_path(node)
                break
            self.add_neighbors(node)
        return self._model.path