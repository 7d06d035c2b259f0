import os

import numpy as np
import pytest

from atsp_base import AtspGraph, AtspInputError, Tour, TourMessage, parse_atsp_lines, read_atsp_file
from conftest import CYCLE_4, matrix_to_adjacency

DATA_DIR = os.path.join(os.path.dirname(__file__), os.pardir, 'atsp-data')


def test_graph_from_adjacency(cycle_adjacency):
    graph = AtspGraph(cycle_adjacency)
    assert graph.node_num == 4
    assert graph.cost(0, 1) == 1
    assert graph.cost(3, 0) == 1
    assert graph.cost(1, 0) == 9
    assert graph.pheromone_mat is None


def test_neighbors_skip_self_and_keep_input_order():
    adjacency = [[(2, 5.0), (0, 0.0), (1, 3.0)],
                 [(1, 0.0), (0, 4.0), (2, 1.0)],
                 [(0, 2.0), (1, 7.0), (2, 0.0)]]
    graph = AtspGraph(adjacency)
    assert list(graph.neighbors(0)) == [2, 1]
    assert list(graph.neighbors(1)) == [0, 2]
    # 每次调用都重新开始
    assert list(graph.neighbors(0)) == list(graph.neighbors(0))
    assert graph.cost(0, 2) == 5.0


def test_row_length_must_match_node_num():
    adjacency = matrix_to_adjacency(CYCLE_4)
    adjacency[2] = adjacency[2][:3]
    with pytest.raises(AtspInputError):
        AtspGraph(adjacency)


def test_declared_node_num_must_match(cycle_adjacency):
    with pytest.raises(AtspInputError):
        AtspGraph(cycle_adjacency, node_num=5)


@pytest.mark.parametrize('row', [
    [(0, 0.0), (1, 1.0), (1, 2.0), (3, 3.0)],
    [(0, 0.0), (1, 1.0), (2, 2.0), (4, 3.0)],
    [(0, 0.0), (1, -1.0), (2, 2.0), (3, 3.0)],
    [(0, 0.0), (1, float('nan')), (2, 2.0), (3, 3.0)],
    [(0, 0.0), (1, float('inf')), (2, 2.0), (3, 3.0)],
    [(0, 0.0), (1.7, 1.0), (2, 2.0), (3, 3.0)],
])
def test_invalid_rows_are_rejected(cycle_adjacency, row):
    cycle_adjacency[0] = row
    with pytest.raises(AtspInputError):
        AtspGraph(cycle_adjacency)


def test_from_matrix_rejects_non_square():
    with pytest.raises(AtspInputError):
        AtspGraph.from_matrix([[0, 1, 2], [1, 0, 2]])


def test_cost_matrix_is_read_only():
    graph = AtspGraph.from_matrix(CYCLE_4)
    with pytest.raises(ValueError):
        graph.node_cost_mat[0][1] = 100


def test_init_pheromone():
    graph = AtspGraph.from_matrix(CYCLE_4)
    graph.init_pheromone(1e-3)
    assert np.all(graph.pheromone_mat == 1e-3)

    graph.set_pheromone(0, 1, 0.5)
    assert graph.pheromone(0, 1) == 0.5
    assert graph.pheromone(1, 0) == 1e-3

    with pytest.raises(ValueError):
        graph.init_pheromone(0)


def test_local_update_pheromone():
    graph = AtspGraph.from_matrix(CYCLE_4, rho=0.1)
    graph.init_pheromone(1e-3)
    graph.set_pheromone(0, 1, 0.5)
    graph.local_update_pheromone(0, 1)
    assert graph.pheromone(0, 1) == pytest.approx(0.9 * 0.5 + 0.1 * 1e-3)
    # 反方向的边不受影响
    assert graph.pheromone(1, 0) == 1e-3


def test_global_update_only_touches_path_edges():
    graph = AtspGraph.from_matrix(CYCLE_4, alpha=0.1)
    graph.init_pheromone(1e-3)
    graph.global_update_pheromone([0, 1, 2, 3], 3.0)

    expected = 0.9 * 1e-3 + 0.1 / 3.0
    on_path = {(0, 1), (1, 2), (2, 3)}
    for i in range(4):
        for j in range(4):
            if (i, j) in on_path:
                assert graph.pheromone(i, j) == pytest.approx(expected)
            else:
                assert graph.pheromone(i, j) == 1e-3


@pytest.mark.parametrize('path, cost', [([], float('inf')), ([0, 1, 2, 3], float('inf')), ([0, 1], 0.0)])
def test_global_update_without_usable_best_path(path, cost):
    graph = AtspGraph.from_matrix(CYCLE_4)
    graph.init_pheromone(1e-3)
    graph.global_update_pheromone(path, cost)
    assert np.all(graph.pheromone_mat == 1e-3)


def test_path_cost_has_no_closing_edge():
    graph = AtspGraph.from_matrix(CYCLE_4)
    assert graph.cal_path_cost([0, 1, 2, 3]) == 3.0
    assert graph.cal_path_cost([1, 0, 3, 2]) == 27.0
    assert graph.cal_path_cost([2]) == 0.0


ATSP_TEXT = """NAME: tiny
TYPE: ATSP
DIMENSION: 3
EDGE_WEIGHT_TYPE: EXPLICIT
EDGE_WEIGHT_FORMAT: FULL_MATRIX
EDGE_WEIGHT_SECTION
 9999 1 2 3
 9999 4
  5 6 9999
EOF
"""


def test_parse_atsp_lines_flattened_section():
    node_num, adjacency = parse_atsp_lines(ATSP_TEXT.splitlines())
    assert node_num == 3
    assert adjacency[0] == [(0, 9999.0), (1, 1.0), (2, 2.0)]
    assert adjacency[1] == [(0, 3.0), (1, 9999.0), (2, 4.0)]
    assert adjacency[2] == [(0, 5.0), (1, 6.0), (2, 9999.0)]


@pytest.mark.parametrize('text', [
    ATSP_TEXT.replace('DIMENSION: 3\n', ''),
    ATSP_TEXT.replace('DIMENSION: 3', 'DIMENSION: three'),
    ATSP_TEXT.replace(' 9999 4', ' 9999 x4'),
    ATSP_TEXT.replace('  5 6 9999', '  5 6'),
    ATSP_TEXT.replace('  5 6 9999', '  5 6 9999 7 8 9'),
    ATSP_TEXT.replace('FULL_MATRIX', 'UPPER_ROW'),
    ATSP_TEXT.replace('EDGE_WEIGHT_SECTION', 'DISPLAY_DATA_SECTION'),
])
def test_parse_atsp_lines_errors(text):
    with pytest.raises(AtspInputError):
        parse_atsp_lines(text.splitlines())


def test_read_atsp_file(tmp_path):
    file_path = tmp_path / 'tiny.atsp'
    file_path.write_text(ATSP_TEXT)
    node_num, adjacency = read_atsp_file(str(file_path))
    graph = AtspGraph(adjacency, node_num)
    assert graph.cost(2, 1) == 6.0


def test_read_bundled_data():
    node_num, adjacency = read_atsp_file(os.path.join(DATA_DIR, 'small5.atsp'))
    graph = AtspGraph(adjacency, node_num)
    assert node_num == 5
    assert graph.cost(0, 1) == 3
    assert graph.cost(4, 3) == 6


def test_tour_and_message():
    tour = Tour([0, 1, 2], 2.0)
    assert len(tour) == 3
    assert 'cost=2.0' in repr(tour)

    path = [0, 1, 2]
    message = TourMessage(path, 2.0)
    path.append(3)
    assert message.get_tour_info() == ([0, 1, 2], 2.0)
    assert TourMessage(None, None).get_tour_info() == (None, None)


def test_surplus_edge_weights_are_not_dropped():
    lines = ['DIMENSION: 2', 'EDGE_WEIGHT_SECTION', '0 1', '2 0 7 8 9', 'EOF']
    with pytest.raises(AtspInputError):
        parse_atsp_lines(lines)
