import numpy as np
import matplotlib.pyplot as plt
from queue import Queue


class AtspAcsFigure:
    def __init__(self, node_num: int, path_queue: Queue):
        """
        matplotlib绘图计算需要放在主线程，寻找路径的工作建议另外开一个线程，
        当寻找路径的线程找到一个新的tour的时候，将tour放在path_queue中，图形绘制线程就会自动进行绘制
        queue中存放的tour以TourMessage（class）的形式存在
        ATSP中结点没有坐标，所有结点均匀地画在一个圆上

        :param node_num: 结点个数
        :param path_queue: queue用来存放工作线程计算得到的tour，tour中存放的是各个结点的id
        """

        self.node_num = node_num
        self.node_pos = AtspAcsFigure.circle_layout(node_num)
        self.figure = plt.figure(figsize=(10, 10))
        self.figure_ax = self.figure.add_subplot(1, 1, 1)
        self.path_queue = path_queue
        self._start_color = 'k'
        self._node_color = 'steelblue'
        self._line_color = 'darksalmon'

    @staticmethod
    def circle_layout(node_num):
        angle = np.linspace(0, 2 * np.pi, node_num, endpoint=False)
        return np.stack((np.cos(angle), np.sin(angle)), axis=1)

    def _draw_point(self):
        self.figure_ax.scatter(self.node_pos[:, 0], self.node_pos[:, 1], c=self._node_color, label='node', s=20)
        for ind in range(self.node_num):
            self.figure_ax.annotate(str(ind), (self.node_pos[ind, 0], self.node_pos[ind, 1]),
                                    textcoords='offset points', xytext=(6, 6))
        plt.pause(0.5)

    def run(self):
        # 先绘制出各个结点
        self._draw_point()
        self.figure.show()

        # 从队列中读取新的tour，进行绘制
        while True:
            if not self.path_queue.empty():
                # 取队列中最新的一个tour，其他的tour丢弃
                info = self.path_queue.get()
                while not self.path_queue.empty():
                    info = self.path_queue.get()

                tour, cost = info.get_tour_info()
                if tour is None:
                    print('[draw figure]: exit')
                    break

                # 移除上一次画的tour，包括起点的标记
                for artist in list(self.figure_ax.lines) + list(self.figure_ax.patches):
                    if artist.get_label() in ('line', 'start'):
                        artist.remove()

                self.figure_ax.set_title('tour cost: %0.2f' % cost)
                self._draw_line(tour)
            plt.pause(1)

    def _draw_line(self, tour):
        start = self.node_pos[tour[0]]
        self.figure_ax.plot([start[0]], [start[1]], marker='o', color=self._start_color, label='start')
        # 有向边用箭头画出
        for i in range(1, len(tour)):
            x0, y0 = self.node_pos[tour[i - 1]]
            x1, y1 = self.node_pos[tour[i]]
            self.figure_ax.arrow(x0, y0, x1 - x0, y1 - y0, color=self._line_color, width=0.005,
                                 length_includes_head=True, head_width=0.04, label='line')
            plt.pause(0.2)
