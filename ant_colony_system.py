import numpy as np
from atsp_acs_figure import AtspAcsFigure
from atsp_base import AtspGraph, Tour, TourMessage
from ant import Ant
from threading import Thread, Event
from queue import Queue
import time


class AntColonySystem:
    def __init__(self, ants_num=10, max_iter=1, beta=2, q0=0.9, rho=0.1, alpha=0.1, tau0=1e-3,
                 start_index=None, seed=None, rng=None, whether_or_not_to_show_figure=False,
                 whether_or_not_to_print=True):
        super()
        if ants_num < 1:
            raise ValueError('ants_num must be at least 1, got %r' % ants_num)
        if max_iter < 0:
            raise ValueError('max_iter must not be negative, got %r' % max_iter)
        if tau0 <= 0:
            raise ValueError('tau0 must be positive, got %r' % tau0)
        for name, value in (('q0', q0), ('rho', rho), ('alpha', alpha)):
            if not 0 <= value <= 1:
                raise ValueError('%s must be in [0, 1], got %r' % (name, value))

        # ants_num 蚂蚁数量
        self.ants_num = ants_num
        # max_iter 迭代次数
        self.max_iter = max_iter
        # beta 启发性信息（花费的倒数）重要性
        self.beta = beta
        # q0 表示直接选择概率最大的下一点的概率
        self.q0 = q0
        # rho 局部更新时信息素挥发速度，alpha 全局更新时信息素增强速度
        self.rho = rho
        self.alpha = alpha
        # tau0 初始信息素，也是局部更新时信息素回归的值
        self.tau0 = tau0
        # start_index 为None时，每只蚂蚁随机选择出发点
        self.start_index = start_index
        # 所有随机数都来自同一个rng，给定seed时结果可以复现
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        # best path
        self.graph = None
        self.ants = []
        self.best_path = None
        self.best_path_cost = None
        self.best_cost_history = []

        self.whether_or_not_to_show_figure = whether_or_not_to_show_figure
        self.whether_or_not_to_print = whether_or_not_to_print

    def build_graph(self, adjacency, node_num=None):
        graph = AtspGraph(adjacency, node_num=node_num, rho=self.rho, alpha=self.alpha)
        graph.init_pheromone(self.tau0)
        return graph

    def solve(self, adjacency, node_num=None, stop_event: Event = None, path_queue_for_figure: Queue = None):
        """
        根据邻接表构建graph，然后运行蚁群算法
        :param adjacency: adjacency[i]是(target, cost)的list
        :param node_num: 声明的结点个数
        :param stop_event: 在两次迭代之间检查，被set之后返回目前为止最好的路径
        :param path_queue_for_figure: 找到更好的路径时，将TourMessage放到队列中
        :return: Tour
        """
        graph = self.build_graph(adjacency, node_num)
        return self.solve_graph(graph, stop_event, path_queue_for_figure)

    def solve_graph(self, graph: AtspGraph, stop_event: Event = None, path_queue_for_figure: Queue = None):
        node_num = graph.node_num
        if self.start_index is not None and not 0 <= self.start_index < node_num:
            raise ValueError('start_index %d out of range for %d nodes' % (self.start_index, node_num))

        start_time_total = time.time()
        self.graph = graph
        self.best_path = []
        self.best_path_cost = np.inf
        self.best_cost_history = []

        # 蚂蚁只创建一次，出发点在整个运行过程中保持不变
        ants = []
        for _ in range(self.ants_num):
            start_index = self.start_index if self.start_index is not None else int(self.rng.integers(node_num))
            ants.append(Ant(graph, start_index))
        self.ants = ants

        for iter in range(self.max_iter):
            if stop_event is not None and stop_event.is_set():
                self._print('[acs]: receive stop event')
                break

            for ant in ants:
                ant.reset()

            # 所有蚂蚁同步前进，每一步中每只蚂蚁走一条边
            for _ in range(1, node_num):
                for ant in ants:
                    if ant.terminated:
                        continue

                    next_index = self.select_next_index(ant)
                    if next_index is None:
                        ant.terminate()
                        continue

                    current_index = ant.current_index
                    ant.move_to_next_index(next_index)
                    graph.local_update_pheromone(current_index, next_index)

            # 记录当前的最佳路径，没有走完的蚂蚁不参与比较
            live_ants = [ant for ant in ants if ant.is_complete()]
            if len(live_ants) > 0:
                paths_cost = np.array([ant.total_travel_distance for ant in live_ants], dtype=float)
                best_index = int(np.argmin(paths_cost))
                if paths_cost[best_index] < self.best_path_cost:
                    self.best_path = list(live_ants[best_index].travel_path)
                    self.best_path_cost = float(paths_cost[best_index])

                    if path_queue_for_figure is not None:
                        path_queue_for_figure.put(TourMessage(self.best_path, self.best_path_cost))

                    self._print('[iteration %d]: find a improved path, its cost is %f' % (iter, self.best_path_cost))

            # 每次迭代都用全局最佳路径更新信息素
            graph.global_update_pheromone(self.best_path, self.best_path_cost)
            self.best_cost_history.append(self.best_path_cost)

        if len(self.best_path) == 0:
            self._print('[acs]: no ant completed a tour')
        self._print('it takes %0.3f second ant colony system running' % (time.time() - start_time_total))
        return Tour(self.best_path, self.best_path_cost)

    @staticmethod
    def edge_attractiveness(graph: AtspGraph, current_index, index_to_visit, beta):
        # 花费为0的边吸引力为inf
        with np.errstate(divide='ignore'):
            heuristic_info = np.power(graph.node_cost_mat[current_index][index_to_visit], -float(beta))
        return heuristic_info * graph.pheromone_mat[current_index][index_to_visit]

    def select_next_index(self, ant: Ant):
        """
        选择下一个结点，没有可以访问的结点时返回None
        :param ant:
        :return:
        """
        q = self.rng.random()

        index_to_visit = ant.index_to_visit()
        if len(index_to_visit) == 0:
            return None

        transition_prob = AntColonySystem.edge_attractiveness(ant.graph, ant.current_index, index_to_visit, self.beta)

        if q <= self.q0:
            return AntColonySystem.select_greedy(index_to_visit, transition_prob)
        else:
            # 使用轮盘赌算法
            return self.stochastic_accept(index_to_visit, transition_prob)

    @staticmethod
    def select_greedy(index_to_visit, transition_prob):
        # np.argmax在有多个最大值时返回第一个
        max_prob_index = np.argmax(transition_prob)
        return int(index_to_visit[max_prob_index])

    def stochastic_accept(self, index_to_visit, transition_prob):
        """
        轮盘赌
        :param index_to_visit: 未访问的结点，按照graph.neighbors的顺序
        :param transition_prob: 每个结点的吸引力，不需要归一化
        :return: selected index
        """
        cumulative_prob = np.cumsum(transition_prob)
        total_prob = cumulative_prob[-1]
        # 无论走哪个分支都消耗一次随机数
        r = self.rng.random()

        if not np.isfinite(total_prob):
            return AntColonySystem.select_greedy(index_to_visit, transition_prob)

        threshold = r * total_prob

        # 第一个累计值大于threshold的结点
        ind = int(np.searchsorted(cumulative_prob, threshold, side='right'))
        ind = min(ind, len(index_to_visit) - 1)
        return int(index_to_visit[ind])

    def run_ant_colony_system(self, adjacency, node_num=None, file_to_write_path=None):
        """
        开启一个线程来跑蚁群算法，使用主线程来绘图
        :param adjacency:
        :param node_num:
        :param file_to_write_path: 不为None时将结果也写入文件
        :return: Tour
        """
        graph = self.build_graph(adjacency, node_num)
        path_queue_for_figure = Queue()
        result = {}

        def _run():
            try:
                result['tour'] = self.solve_graph(graph, path_queue_for_figure=path_queue_for_figure)
            except Exception as e:
                result['error'] = e
            finally:
                # 传入None作为结束标志
                path_queue_for_figure.put(TourMessage(None, None))

        acs_thread = Thread(target=_run)
        acs_thread.start()

        # 是否要展示figure
        if self.whether_or_not_to_show_figure:
            figure = AtspAcsFigure(graph.node_num, path_queue_for_figure)
            figure.run()
        acs_thread.join()

        if 'error' in result:
            raise result['error']
        tour = result['tour']
        file_to_write = open(file_to_write_path, 'a') if file_to_write_path is not None else None
        try:
            AntColonySystem.print_and_write_in_file(file_to_write, 'node number: %d' % graph.node_num)
            AntColonySystem.print_and_write_in_file(file_to_write, 'best tour found: %s' % tour.tour)
            AntColonySystem.print_and_write_in_file(file_to_write, 'best tour cost: %f' % tour.cost)
        finally:
            if file_to_write is not None:
                file_to_write.close()
        return tour

    def _print(self, message):
        if self.whether_or_not_to_print:
            print(message)

    @staticmethod
    def print_and_write_in_file(file_to_write=None, message='default message'):
        if file_to_write is None:
            print(message)
        else:
            print(message)
            file_to_write.write(str(message)+'\n')
