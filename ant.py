import numpy as np
from atsp_base import AtspGraph


class Ant:
    def __init__(self, graph: AtspGraph, start_index=0):
        super()
        self.graph = graph
        # start_index 在蚂蚁的整个生命周期中保持不变
        self.start_index = start_index
        self.current_index = start_index
        self.travel_path = [start_index]
        self.visited = {start_index}
        self.total_travel_distance = 0
        # terminated 表示在本次迭代中已经没有可以访问的结点
        self.terminated = False

    def reset(self):
        """
        每次迭代开始时，重新从start_index出发
        :return:
        """
        self.current_index = self.start_index
        self.travel_path = [self.start_index]
        self.visited = {self.start_index}
        self.total_travel_distance = 0
        self.terminated = False

    def move_to_next_index(self, next_index):
        # 更新蚂蚁路径
        self.travel_path.append(next_index)
        self.visited.add(next_index)
        self.total_travel_distance += self.graph.node_cost_mat[self.current_index][next_index]
        self.current_index = next_index

    def terminate(self):
        self.terminated = True
        self.total_travel_distance = np.inf

    def index_to_visit(self):
        """
        当前位置所有还没有访问过的邻居，顺序与graph.neighbors一致
        :return:
        """
        neighbors = self.graph.neighbor_array(self.current_index)
        mask = np.isin(neighbors, list(self.visited), invert=True)
        return neighbors[mask]

    def is_complete(self):
        return not self.terminated and len(self.travel_path) == self.graph.node_num
