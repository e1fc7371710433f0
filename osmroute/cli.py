"""Command line entry point: load a map, plan a route, optionally render it."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from os import PathLike

from .render import Render
from .route_model import RouteModel
from .route_planner import RoutePlanner

DEFAULT_MAP = "../map.osm"


def read_file(path: str | PathLike[str]) -> bytes | None:
    """Return the file's bytes, or None if it cannot be read or is empty."""
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError:
        return None
    return data or None


def _read_coordinates(lines: Iterable[str]) -> tuple[float, float, float, float]:
    """Read four numbers; anything missing or unreadable stays zero."""
    values = [0.0, 0.0, 0.0, 0.0]
    count = 0
    for line in lines:
        for token in line.split():
            try:
                values[count] = float(token)
            except ValueError:
                return tuple(values)  # type: ignore[return-value]
            count += 1
            if count == len(values):
                return tuple(values)  # type: ignore[return-value]
    return tuple(values)  # type: ignore[return-value]


def main(argv: list[str] | None = None) -> int:
    """Run the route planner; returns the process exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    osm_file = ""
    output = ""
    if args:
        arguments = iter(args)
        for arg in arguments:
            if arg == "-f":
                value = next(arguments, None)
                if value is not None:
                    osm_file = value
            elif arg == "-o":
                value = next(arguments, None)
                if value is not None:
                    output = value
    else:
        print("To specify a map file use the following format: ")
        print("Usage: [executable] [-f filename.osm] [-o image.png]")
        osm_file = DEFAULT_MAP

    osm_data = b""
    if osm_file:
        print(f"Reading OpenStreetMap data from the following file: {osm_file}")
        data = read_file(osm_file)
        if data is None:
            print("Failed to read.")
        else:
            osm_data = data

    print("Set start and ending points: start_x start_y end_x end_y")
    start_x, start_y, end_x, end_y = _read_coordinates(sys.stdin)

    try:
        model = RouteModel(osm_data)
        planner = RoutePlanner(model, start_x, start_y, end_x, end_y)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    planner.a_star_search()
    print(f"Distance: {planner.distance:g} meters. ")

    if output:
        Render(model).save(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())