from atsp_base import read_atsp_file
from ant_colony_system import AntColonySystem


if __name__ == '__main__':
    file_path = './atsp-data/ring8.atsp'
    ants_num = 10
    max_iter = 100
    beta = 2
    q0 = 0.9
    show_figure = True

    node_num, adjacency = read_atsp_file(file_path)
    acs = AntColonySystem(ants_num=ants_num, max_iter=max_iter, beta=beta, q0=q0,
                          whether_or_not_to_show_figure=show_figure)
    acs.run_ant_colony_system(adjacency, node_num)
