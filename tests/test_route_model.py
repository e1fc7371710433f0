import pytest

from osmroute.route_model import RouteModel, RouteNode

MAP = """<osm version="0.6">
  <bounds minlat="0.0" minlon="0.0" maxlat="0.01" maxlon="0.01"/>
  <node id="1" lat="0.0010" lon="0.0011"/>
  <node id="2" lat="0.0012" lon="0.0050"/>
  <node id="3" lat="0.0015" lon="0.0090"/>
  <node id="4" lat="0.0052" lon="0.0088"/>
  <node id="5" lat="0.0091" lon="0.0092"/>
  <node id="6" lat="0.0050" lon="0.0013"/>
  <node id="7" lat="0.0089" lon="0.0014"/>
  <node id="8" lat="0.0093" lon="0.0051"/>
  <node id="9" lat="0.0095" lon="0.0009"/>
  <way id="101"><nd ref="1"/><nd ref="2"/><nd ref="3"/><tag k="highway" v="residential"/></way>
  <way id="102"><nd ref="3"/><nd ref="4"/><nd ref="5"/><tag k="highway" v="primary"/></way>
  <way id="103"><nd ref="1"/><nd ref="6"/><nd ref="7"/><tag k="highway" v="residential"/></way>
  <way id="104"><nd ref="7"/><nd ref="8"/><nd ref="5"/><tag k="highway" v="footway"/></way>
</osm>
"""

NO_ROADS = """<osm version="0.6">
  <bounds minlat="0.0" minlon="0.0" maxlat="0.01" maxlon="0.01"/>
  <node id="1" lat="0.0010" lon="0.0011"/>
  <node id="2" lat="0.0012" lon="0.0050"/>
  <way id="101"><nd ref="1"/><nd ref="2"/><tag k="building" v="yes"/></way>
</osm>
"""


@pytest.fixture
def model():
    return RouteModel(MAP)


def test_snodes_mirror_map_nodes(model):
    assert len(model.snodes) == len(model.nodes)
    for index, (snode, node) in enumerate(zip(model.snodes, model.nodes)):
        assert snode.index == index
        assert snode.x == node.x
        assert snode.y == node.y
        assert snode.model is model
        assert snode.visited is False
        assert snode.parent is None


def test_path_starts_empty(model):
    assert model.path == []


def test_distance_pythagorean():
    assert RouteNode(x=0.0, y=0.0).distance(RouteNode(x=3.0, y=4.0)) == 5.0


def test_distance_symmetric_and_zero_to_self(model):
    a, b = model.snodes[0], model.snodes[4]
    assert a.distance(b) == pytest.approx(b.distance(a))
    assert a.distance(a) == 0.0
    assert a.distance(b) > 0


def test_nodes_compare_by_identity():
    a = RouteNode(x=1.0, y=2.0)
    b = RouteNode(x=1.0, y=2.0)
    assert a != b
    assert a == a
    assert len({a, b}) == 2


def test_find_closest_node_corners(model):
    assert model.find_closest_node(0.0, 0.0) is model.snodes[0]
    assert model.find_closest_node(1.0, 1.0) is model.snodes[4]


def test_find_closest_node_skips_non_road_node(model):
    # Node 9 lies nearest the top-left corner but belongs to no road.
    off_road = model.snodes[8]
    result = model.find_closest_node(off_road.x, off_road.y)
    assert result is not off_road
    assert result is model.snodes[6]


def test_find_closest_node_skips_footway_only_node(model):
    footway_node = model.snodes[7]
    result = model.find_closest_node(footway_node.x, footway_node.y)
    assert result is not footway_node
    assert result.index in {0, 1, 2, 3, 4, 5, 6}


def test_find_closest_node_without_roads_raises():
    with pytest.raises(ValueError):
        RouteModel(NO_ROADS).find_closest_node(0.5, 0.5)


def test_find_neighbors_takes_closest_on_each_road(model):
    start = model.snodes[0]
    start.find_neighbors()
    assert {n.index for n in start.neighbors} == {1, 5}


def test_find_neighbors_skips_visited(model):
    model.snodes[1].visited = True
    start = model.snodes[0]
    start.find_neighbors()
    assert {n.index for n in start.neighbors} == {2, 5}


def test_find_neighbors_ignores_footways(model):
    node = model.snodes[6]
    model.snodes[0].visited = True
    model.snodes[5].visited = True
    node.find_neighbors()
    assert node.neighbors == []


def test_find_neighbors_of_off_road_node_is_empty(model):
    node = model.snodes[8]
    node.find_neighbors()
    assert node.neighbors == []


def test_find_neighbors_accumulates(model):
    start = model.snodes[0]
    start.find_neighbors()
    start.find_neighbors()
    assert len(start.neighbors) == 4


def test_find_neighbors_on_detached_node_raises():
    with pytest.raises(ValueError):
        RouteNode(x=0.5, y=0.5).find_neighbors()