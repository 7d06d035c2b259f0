import numpy as np
import copy


class AtspInputError(ValueError):
    """
    输入数据（.atsp文件或者邻接表）不合法
    """
    pass


class AtspGraph:
    def __init__(self, adjacency, node_num=None, rho=0.1, alpha=0.1):
        """
        :param adjacency: 邻接表，adjacency[i]是(target, cost)的list，必须包含0..node_num-1中的每一个target（包括i自己）
        :param node_num: 文件头中声明的结点个数，为None时使用len(adjacency)
        :param rho: 局部更新时信息素挥发速度
        :param alpha: 全局更新时信息素增强速度
        """
        super()
        # node_num 结点个数
        # node_cost_mat 结点之间的花费（矩阵，不对称）
        # neighbor_list 每个结点的邻居，保持输入中的顺序，不包括结点自己
        self.node_num, self.node_cost_mat, self.neighbor_list = self.create_from_adjacency(adjacency, node_num)
        # rho 信息素挥发速度
        self.rho = rho
        # alpha 信息素全局更新速度
        self.alpha = alpha

        # 信息素矩阵需要调用init_pheromone之后才能使用
        self.init_pheromone_val = None
        self.pheromone_mat = None

    @classmethod
    def from_matrix(cls, cost_mat, rho=0.1, alpha=0.1):
        cost_mat = np.asarray(cost_mat, dtype=float)
        if cost_mat.ndim != 2 or cost_mat.shape[0] != cost_mat.shape[1]:
            raise AtspInputError('cost matrix must be square, got shape %s' % (cost_mat.shape, ))
        adjacency = [list(enumerate(row)) for row in cost_mat.tolist()]
        return cls(adjacency, rho=rho, alpha=alpha)

    @staticmethod
    def create_from_adjacency(adjacency, node_num=None):
        if node_num is None:
            node_num = len(adjacency)
        if node_num <= 0:
            raise AtspInputError('node number must be positive, got %d' % node_num)
        if len(adjacency) != node_num:
            raise AtspInputError('adjacency has %d rows, but %d nodes are declared' % (len(adjacency), node_num))

        node_cost_mat = np.zeros((node_num, node_num))
        neighbor_list = []
        for i, row in enumerate(adjacency):
            if len(row) != node_num:
                raise AtspInputError('row %d has %d links, expected %d' % (i, len(row), node_num))

            seen = set()
            neighbors = []
            for target, cost in row:
                if int(target) != target:
                    raise AtspInputError('row %d: target %r is not an integer' % (i, target))
                target = int(target)
                cost = float(cost)
                if target < 0 or target >= node_num:
                    raise AtspInputError('row %d: target %d out of range' % (i, target))
                if target in seen:
                    raise AtspInputError('row %d: target %d listed twice' % (i, target))
                if not np.isfinite(cost) or cost < 0:
                    raise AtspInputError('row %d: invalid cost %r for target %d' % (i, cost, target))
                seen.add(target)
                node_cost_mat[i][target] = cost
                # 对角线上的值存在，但是不会被走到
                if target != i:
                    neighbors.append(target)
            neighbor_list.append(np.array(neighbors, dtype=int))

        # 花费矩阵在构造之后不可修改
        node_cost_mat.setflags(write=False)
        return node_num, node_cost_mat, neighbor_list

    def init_pheromone(self, init_pheromone_val):
        if init_pheromone_val <= 0:
            raise ValueError('initial pheromone must be positive, got %r' % init_pheromone_val)
        self.init_pheromone_val = init_pheromone_val
        self.pheromone_mat = np.ones((self.node_num, self.node_num)) * init_pheromone_val

    def cost(self, i, j):
        return self.node_cost_mat[i][j]

    def pheromone(self, i, j):
        return self.pheromone_mat[i][j]

    def set_pheromone(self, i, j, value):
        self.pheromone_mat[i][j] = value

    def neighbors(self, i):
        """
        按照输入的顺序遍历结点i能到达的结点，每次调用都会重新开始
        """
        for j in self.neighbor_list[i]:
            yield int(j)

    def neighbor_array(self, i):
        return self.neighbor_list[i]

    def local_update_pheromone(self, start_ind, end_ind):
        self.pheromone_mat[start_ind][end_ind] = (1-self.rho) * self.pheromone_mat[start_ind][end_ind] + \
                                                  self.rho * self.init_pheromone_val

    def global_update_pheromone(self, best_path, best_path_cost):
        """
        使用目前为止找到的最好的路径更新信息素矩阵，只有路径上的边会被更新
        :param best_path:
        :param best_path_cost:
        :return:
        """
        # 花费为0的路径不做全局更新，alpha/0没有意义
        if not best_path or not np.isfinite(best_path_cost) or best_path_cost <= 0:
            return

        current_ind = best_path[0]
        for next_ind in best_path[1:]:
            self.pheromone_mat[current_ind][next_ind] = (1-self.alpha) * self.pheromone_mat[current_ind][next_ind] + \
                                                         self.alpha / best_path_cost
            current_ind = next_ind

    def cal_path_cost(self, path):
        """
        计算路径的花费，不包括最后回到起点的那条边
        :param path:
        :return:
        """
        cost = 0.0
        current_ind = path[0]
        for next_ind in path[1:]:
            cost += self.node_cost_mat[current_ind][next_ind]
            current_ind = next_ind
        return cost


def parse_atsp_lines(lines):
    """
    解析.atsp（TSPLIB）格式的文本，返回邻接表
    文件头中DIMENSION是必须的，EDGE_WEIGHT_SECTION之后按行优先的顺序给出node_num*node_num个花费
    :param lines: 文本的每一行
    :return: node_num, adjacency
    """
    header = {}
    values = []
    in_section = False
    for line in lines:
        line = line.strip()
        if len(line) == 0:
            continue
        if in_section:
            if line.startswith('EOF'):
                break
            for token in line.split():
                try:
                    values.append(float(token))
                except ValueError:
                    raise AtspInputError('malformed edge weight %r' % token)
        elif line.startswith('EDGE_WEIGHT_SECTION'):
            in_section = True
        elif ':' in line:
            key, value = line.split(':', 1)
            header[key.strip()] = value.strip()

    if 'DIMENSION' not in header:
        raise AtspInputError('DIMENSION header missed')
    try:
        node_num = int(header['DIMENSION'])
    except ValueError:
        raise AtspInputError('DIMENSION %r is not an integer' % header['DIMENSION'])
    if node_num <= 0:
        raise AtspInputError('DIMENSION must be positive, got %d' % node_num)

    edge_weight_format = header.get('EDGE_WEIGHT_FORMAT', 'FULL_MATRIX')
    if edge_weight_format != 'FULL_MATRIX':
        raise AtspInputError('unsupported EDGE_WEIGHT_FORMAT %s' % edge_weight_format)

    if not in_section:
        raise AtspInputError('EDGE_WEIGHT_SECTION missed')
    if len(values) != node_num * node_num:
        raise AtspInputError('expected exactly %d edge weights, got %d' % (node_num * node_num, len(values)))

    adjacency = []
    for i in range(node_num):
        row = values[i * node_num:(i + 1) * node_num]
        adjacency.append(list((j, row[j]) for j in range(node_num)))
    return node_num, adjacency


def read_atsp_file(file_path):
    with open(file_path, 'rt') as f:
        return parse_atsp_lines(f)


class Tour:
    def __init__(self, tour, cost):
        super()
        self.tour = list(tour)
        self.cost = cost

    def __len__(self):
        return len(self.tour)

    def __repr__(self):
        return 'Tour(tour=%r, cost=%r)' % (self.tour, self.cost)


class TourMessage:
    def __init__(self, tour, cost):
        if tour is not None:
            self.tour = copy.deepcopy(tour)
            self.cost = copy.deepcopy(cost)
        else:
            self.tour = None
            self.cost = None

    def get_tour_info(self):
        return self.tour, self.cost
