from atsp_base import read_atsp_file
from ant_colony_system import AntColonySystem
import os


if __name__ == '__main__':
    ants_num = 100
    max_iter = 100
    show_figure = False
    for file_name in sorted(os.listdir('./atsp-data')):
        file_path = os.path.join('./atsp-data', file_name)
        print('-' * 100)
        print('file_path: %s' % file_path)
        print('\n')
        file_to_write_path = os.path.join('./result', file_name.split('.')[0] + '-result.txt')
        node_num, adjacency = read_atsp_file(file_path)
        acs = AntColonySystem(ants_num=ants_num, max_iter=max_iter, whether_or_not_to_show_figure=show_figure)
        acs.run_ant_colony_system(adjacency, node_num, file_to_write_path)
        print('\n' * 3)
