import pytest


class FixedRandom:
    """
    用来代替np.random.Generator，每次都返回同样的值
    """
    def __init__(self, value, start_index=0):
        self.value = value
        self.start_index = start_index
        self.random_calls = 0

    def random(self):
        self.random_calls += 1
        return self.value

    def integers(self, high):
        if isinstance(self.start_index, list):
            return self.start_index.pop(0)
        return self.start_index


def matrix_to_adjacency(mat):
    return [list(enumerate(row)) for row in mat]


CYCLE_4 = [[0, 1, 9, 9],
           [9, 0, 1, 9],
           [9, 9, 0, 1],
           [1, 9, 9, 0]]


@pytest.fixture
def cycle_adjacency():
    return matrix_to_adjacency(CYCLE_4)
