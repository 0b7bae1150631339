"""
lineart_rrt/tree.py - 下标化的树存储

每个纳入树的点在加入时分配一个稳定的整数下标，父子关系用
"子下标 -> 父下标" 数组表示（根为 -1），不依赖点对象的相等性。

代价（根到该点沿父链的欧氏路径长度）按点缓存；某点父节点改变时，
以该点为根的整棵子树代价迭代重算，缓存始终与父链一致。
"""

import logging
from typing import Dict, Iterator, List, Tuple

import numpy as np

from .errors import CycleDetected, LineArtRRTError
from .models import Point

logger = logging.getLogger(__name__)

# 校验缓存代价时允许的浮点误差
COST_TOL = 1e-9


class TreeArena:
    """用 numpy 数组存储树节点

    Attributes:
        xy: (n, 2) 节点坐标视图，行号即节点下标

    Example:
        >>> arena = TreeArena()
        >>> root = arena.add(Point(5.0, 5.0))
        >>> child = arena.add(Point(6.0, 5.0), parent=root)
        >>> arena.cost(child)
        1.0
    """

    def __init__(self, cap: int = 1024) -> None:
        self._cap = max(int(cap), 1)
        self._xy = np.empty((self._cap, 2), dtype=np.float64)
        self._parents = np.full(self._cap, -1, dtype=np.int64)
        self._costs = np.zeros(self._cap, dtype=np.float64)
        self._points: List[Point] = []
        self._children: List[List[int]] = []
        self._index: Dict[Point, int] = {}
        self._n = 0

    def __len__(self) -> int:
        return self._n

    def __contains__(self, point: Point) -> bool:
        return point in self._index

    @property
    def xy(self) -> np.ndarray:
        return self._xy[:self._n]

    @property
    def points(self) -> List[Point]:
        """按加入顺序排列的点"""
        return list(self._points)

    def _grow(self) -> None:
        self._cap *= 2
        new_xy = np.empty((self._cap, 2), dtype=np.float64)
        new_xy[:self._n] = self._xy[:self._n]
        self._xy = new_xy
        new_p = np.full(self._cap, -1, dtype=np.int64)
        new_p[:self._n] = self._parents[:self._n]
        self._parents = new_p
        new_c = np.zeros(self._cap, dtype=np.float64)
        new_c[:self._n] = self._costs[:self._n]
        self._costs = new_c

    def _edge_length(self, a: int, b: int) -> float:
        d = self._xy[a] - self._xy[b]
        return float(np.hypot(d[0], d[1]))

    def add(self, point: Point, parent: int = -1) -> int:
        """加入一个点

        Args:
            point: 新点（同一对象只能加入一次）
            parent: 父节点下标；第一个点必须是根 (-1)

        Returns:
            新点的下标
        """
        if point in self._index:
            raise ValueError(f"点 ({point.x}, {point.y}) 已在树中")
        if self._n == 0:
            if parent != -1:
                raise ValueError("第一个点必须是根节点")
        elif not 0 <= parent < self._n:
            raise ValueError(f"父节点 {parent} 不在树中")

        if self._n >= self._cap:
            self._grow()
        idx = self._n
        self._xy[idx] = (point.x, point.y)
        self._parents[idx] = parent
        self._n += 1
        self._costs[idx] = (
            0.0 if parent < 0
            else self._costs[parent] + self._edge_length(idx, parent))
        self._points.append(point)
        self._children.append([])
        if parent >= 0:
            self._children[parent].append(idx)
        self._index[point] = idx
        return idx

    def index_of(self, point: Point) -> int:
        """点对象对应的下标，不在树中时抛出 KeyError"""
        return self._index[point]

    def point(self, idx: int) -> Point:
        return self._points[idx]

    def parent_of(self, idx: int) -> int:
        """父节点下标，根返回 -1"""
        return int(self._parents[idx])

    def children_of(self, idx: int) -> Tuple[int, ...]:
        return tuple(self._children[idx])

    def cost(self, idx: int) -> float:
        """缓存的根到该点路径长度"""
        return float(self._costs[idx])

    def ancestors(self, idx: int) -> Iterator[int]:
        """从 idx 的父节点开始逐级向上，直到根

        Raises:
            CycleDetected: 父链步数超过节点总数
        """
        current = int(self._parents[idx])
        steps = 0
        while current >= 0:
            yield current
            steps += 1
            if steps > self._n:
                raise CycleDetected(idx, current)
            current = int(self._parents[current])

    def path_cost(self, idx: int) -> float:
        """沿父链重新累加边长（不读缓存）"""
        total = 0.0
        child = idx
        for parent in self.ancestors(idx):
            total += self._edge_length(child, parent)
            child = parent
        return total

    def depth(self, idx: int) -> int:
        return sum(1 for _ in self.ancestors(idx))

    def is_ancestor(self, ancestor: int, idx: int) -> bool:
        """ancestor 是否在 idx 的父链上"""
        return any(a == ancestor for a in self.ancestors(idx))

    def path_to(self, idx: int) -> List[int]:
        """根到 idx 的节点下标序列"""
        path = [idx]
        path.extend(self.ancestors(idx))
        path.reverse()
        return path

    def set_parent(self, child: int, new_parent: int) -> None:
        """把 child 重挂到 new_parent 下，并刷新子树代价

        Raises:
            ValueError: child 是根
            CycleDetected: new_parent 是 child 本身或其后代
        """
        old_parent = int(self._parents[child])
        if old_parent < 0:
            raise ValueError("根节点不能重挂接")
        if new_parent == child or self.is_ancestor(child, new_parent):
            raise CycleDetected(child, new_parent)
        if new_parent == old_parent:
            return

        self._children[old_parent].remove(child)
        self._children[new_parent].append(child)
        self._parents[child] = new_parent
        self._refresh_subtree(child)

    def _refresh_subtree(self, top: int) -> None:
        stack = [top]
        while stack:
            i = stack.pop()
            p = int(self._parents[i])
            self._costs[i] = self._costs[p] + self._edge_length(i, p)
            stack.extend(self._children[i])

    def edges(self) -> List[Tuple[int, int]]:
        """所有 (父下标, 子下标) 边，按子节点加入顺序"""
        return [(int(self._parents[i]), i)
                for i in range(self._n) if self._parents[i] >= 0]

    def edge_lengths(self) -> np.ndarray:
        if self._n < 2:
            return np.zeros(0, dtype=np.float64)
        child = np.arange(1, self._n)
        parent = self._parents[1:self._n]
        d = self._xy[child] - self._xy[parent]
        return np.hypot(d[:, 0], d[:, 1])

    def leaves(self) -> List[int]:
        return [i for i in range(self._n) if not self._children[i]]

    def validate(self) -> None:
        """检查树不变量

        - 每个非根节点恰有一个合法父节点，父链无环且终止于根
        - children 表与 parents 数组一致
        - 缓存代价等于沿父链重算的代价

        Raises:
            CycleDetected: 父链成环
            LineArtRRTError: 其它不一致
        """
        if self._n == 0:
            return
        if self._parents[0] != -1:
            raise LineArtRRTError("下标 0 必须是根节点")
        for i in range(1, self._n):
            p = int(self._parents[i])
            if not 0 <= p < self._n:
                raise LineArtRRTError(f"节点 {i} 的父节点 {p} 非法")
            if i not in self._children[p]:
                raise LineArtRRTError(f"节点 {i} 不在父节点 {p} 的子表中")
            chain = list(self.ancestors(i))
            if chain[-1] != 0:
                raise LineArtRRTError(f"节点 {i} 的父链未终止于根")
            expected = self.path_cost(i)
            if abs(expected - self._costs[i]) > COST_TOL * max(1.0, expected):
                raise LineArtRRTError(
                    f"节点 {i} 缓存代价 {self._costs[i]:.12f} "
                    f"与重算值 {expected:.12f} 不一致")
