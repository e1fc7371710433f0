# osmroute

Find the shortest route between two points on an OpenStreetMap extract
using A* search, and draw the map with the route on it as an image.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
osmroute -f map.osm -o route.png
```

- `-f FILE` reads the OpenStreetMap XML from `FILE`. If no arguments are
  given at all, `../map.osm` is read.
- `-o IMAGE` renders the map with the route to `IMAGE` (400 × 400 pixels;
  the format follows the file suffix, e.g. `.png`). Without `-o` nothing is
  drawn.

The program then reads four numbers from standard input:
`start_x start_y end_x end_y`. They are percentages (0–100) of the map's
width and height, measured from the south-west corner; missing or
unreadable values count as zero. The road nodes closest to those points
become the start and end of the route, and the length of the route found
is printed in meters. If the map cannot be parsed, has no bounds, or has
no road nodes, an error is printed and the exit status is 1.

## Library use

```python
from osmroute.cli import read_file
from osmroute.route_model import RouteModel
from osmroute.route_planner import RoutePlanner
from osmroute.render import Render

model = RouteModel(read_file("map.osm"))
planner = RoutePlanner(model, 10, 10, 90, 90)
path = planner.a_star_search()
print(f"Distance: {planner.distance} meters over {len(path)} nodes.")

image = Render(model).display(400, 400)   # a Pillow image
Render(model).save("route.png", 400, 400)
```

- `osmroute.model.Model` parses OSM XML (bytes or text) into `nodes`,
  `ways`, `roads`, `railways`, `buildings`, `leisures`, `waters` and
  `landuses`, with coordinates normalised to the map's bounds;
  `metric_scale` gives metres per normalised unit. Unparsable XML or a
  missing `<bounds>` element raises `ValueError`.
- `osmroute.route_model.RouteModel` adds search nodes (`snodes`) and
  `find_closest_node(x, y)`, which returns the non-footway road node
  nearest a point in normalised coordinates.
- `osmroute.route_planner.RoutePlanner` runs the search with
  `a_star_search()`; the route is returned, stored in `model.path`, and its
  length in metres is available as the `distance` property.
- `osmroute.render.Render` draws land use, leisure areas, water, railways,
  roads, buildings, the route and its start (green) and end (red) markers;
  `display(width, height)` returns the image and `save(path, width, height)`
  writes it to a file. `road_style(road_type)` gives a road class's colour,
  width and dash pattern.

Footways are drawn but are not used for routing.

## What it does not do

There is no interactive map window: the map is only rendered to image
files or returned as an image object.