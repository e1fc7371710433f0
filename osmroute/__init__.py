"""A* route planning and map rendering for OpenStreetMap data."""

__version__ = "0.1.0"
__all__ = ["cli", "model", "render", "route_model", "route_planner"]