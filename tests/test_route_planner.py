import pytest

from osmroute.route_model import RouteModel
from osmroute.route_planner import RoutePlanner

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


@pytest.fixture
def model():
    return RouteModel(MAP)


@pytest.fixture
def planner(model):
    return RoutePlanner(model, 10, 10, 90, 90)


@pytest.fixture
def start_node(model):
    return model.find_closest_node(0.1, 0.1)


@pytest.fixture
def end_node(model):
    return model.find_closest_node(0.9, 0.9)


@pytest.fixture
def mid_node(model):
    return model.snodes[2]


def test_constructor_picks_closest_nodes(planner, start_node, end_node):
    assert planner.start_node is start_node
    assert planner.end_node is end_node
    assert start_node.index == 0
    assert end_node.index == 4


def test_calculate_h_value(planner, start_node, end_node, mid_node):
    assert planner.calculate_h_value(end_node) == 0.0
    h_start = planner.calculate_h_value(start_node)
    h_mid = planner.calculate_h_value(mid_node)
    assert h_start == pytest.approx(start_node.distance(end_node))
    assert h_start > h_mid > 0.0


def test_add_neighbors(planner, start_node):
    planner.add_neighbors(start_node)
    neighbors = sorted(start_node.neighbors, key=lambda n: n.g_value)
    assert len(neighbors) == 2
    assert {n.index for n in neighbors} == {1, 5}
    for neighbor in neighbors:
        assert neighbor.parent is start_node
        assert neighbor.g_value == pytest.approx(neighbor.distance(start_node))
        assert neighbor.h_value == pytest.approx(planner.calculate_h_value(neighbor))
        assert neighbor.visited is True
    assert set(map(id, planner.open_list)) == set(map(id, neighbors))


def test_next_node_pops_lowest_cost(planner, start_node):
    planner.add_neighbors(start_node)
    candidates = list(planner.open_list)
    first = planner.next_node()
    assert first is min(candidates, key=lambda n: n.g_value + n.h_value)
    second = planner.next_node()
    assert second is not first
    assert first.g_value + first.h_value <= second.g_value + second.h_value
    with pytest.raises(IndexError):
        planner.next_node()


def test_construct_final_path(planner, model, start_node, mid_node, end_node):
    mid_node.parent = start_node
    end_node.parent = mid_node
    path = planner.construct_final_path(end_node)
    assert len(path) == 3
    assert path[0].x == pytest.approx(start_node.x)
    assert path[0].y == pytest.approx(start_node.y)
    assert path[-1].x == pytest.approx(end_node.x)
    assert path[-1].y == pytest.approx(end_node.y)
    expected = (start_node.distance(mid_node) + mid_node.distance(end_node)) * model.metric_scale
    assert planner.distance == pytest.approx(expected)


def test_construct_final_path_without_parent_raises(planner, end_node):
    with pytest.raises(ValueError):
        planner.construct_final_path(end_node)


def test_a_star_search(planner, model, start_node, end_node):
    result = planner.a_star_search()
    assert result is model.path
    assert [node.index for node in model.path] == [0, 1, 2, 3, 4]
    assert model.path[0].x == pytest.approx(start_node.x)
    assert model.path[0].y == pytest.approx(start_node.y)
    assert model.path[-1].x == pytest.approx(end_node.x)
    assert model.path[-1].y == pytest.approx(end_node.y)
    length = sum(a.distance(b) for a, b in zip(model.path, model.path[1:]))
    assert planner.distance == pytest.approx(length * model.metric_scale)
    assert planner.distance > 0.0


def test_a_star_search_same_start_and_end(model):
    planner = RoutePlanner(model, 10, 10, 10, 10)
    path = planner.a_star_search()
    assert len(path) == 1
    assert path[0] is planner.start_node
    assert planner.distance == 0.0


def test_distance_starts_at_zero(planner):
    assert planner.distance == 0.0