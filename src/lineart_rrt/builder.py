"""
lineart_rrt/builder.py - RRT / RRT* 树生长器

在二维规则网格上增量生长一棵生成树，直到迭代预算用尽或网格点
全部被连接。生成的边集合交给外部渲染器画成线稿。

每一步：
1. 从 frontier（尚未连接的网格点）中均匀随机取目标点
2. 在树中找离目标最近的点
3. 从最近点朝目标前进不超过 step_limit，吸附到最近的 frontier 点
4. RRT: 新点直接挂到最近点下
   RRT*: 在邻域内选累计代价最小的父节点，再把邻域内经新点更近的
   节点重挂到新点下（跳过会形成环的重挂接）
5. 迭代预算减一

生长器是单线程、逐步驱动的：外部每个 tick 调用一次 advance()，
返回 False 后状态不再变化。
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from .errors import CycleDetected
from .geometry import closest, make_grid, neighbors_within, steer_index
from .models import BuildResult, PlannerConfig, Point
from .tree import TreeArena
from .utils.seed import check_random_source
from .utils.timing import Timer

logger = logging.getLogger(__name__)

# 网格点与根重合的判定容差
ROOT_TOL = 1e-9


class TreeBuilder:
    """逐步生长的 RRT / RRT* 树

    Args:
        config: 规划参数配置（构造时校验）
        rng: 随机源，需提供 ``integers(high)``；默认按 config.seed 创建

    Raises:
        InvalidConfiguration: 参数非法，此时不创建任何状态

    Example:
        >>> builder = TreeBuilder(PlannerConfig(width=10, height=10,
        ...                                     resolution=1.0, step_limit=2))
        >>> while builder.advance():
        ...     pass
        >>> edges = builder.current_edges()
    """

    def __init__(
        self,
        config: Optional[PlannerConfig] = None,
        rng=None,
    ) -> None:
        self.config = (config or PlannerConfig()).validate()
        self._rng = check_random_source(rng, self.config.seed)

        cfg = self.config
        grid = make_grid(cfg.width, cfg.height, cfg.resolution)
        root_x, root_y = cfg.root_point()
        off_root = np.hypot(grid[:, 0] - root_x, grid[:, 1] - root_y) > ROOT_TOL
        self._n_grid = int(grid.shape[0])

        self._frontier_xy = grid[off_root]
        self._frontier: List[Point] = [
            Point(float(x), float(y)) for x, y in self._frontier_xy]

        cap = min(cfg.iteration_budget, len(self._frontier)) + 1
        self._arena = TreeArena(cap=cap)
        self._arena.add(Point(root_x, root_y))

        self._budget = int(cfg.iteration_budget)
        self._n_steps = 0
        self._n_rewires = 0
        self._exhaustion_reason: Optional[str] = None

        logger.info(
            "TreeBuilder[%s]: 网格 %d 点, frontier %d, 根 (%.3f, %.3f), "
            "预算 %d", cfg.algorithm, self._n_grid, len(self._frontier),
            root_x, root_y, self._budget)

    # ── 状态 ──

    @property
    def arena(self) -> TreeArena:
        return self._arena

    @property
    def remaining_budget(self) -> int:
        return self._budget

    @property
    def n_points(self) -> int:
        return len(self._arena)

    @property
    def n_frontier(self) -> int:
        return len(self._frontier)

    @property
    def n_grid(self) -> int:
        return self._n_grid

    @property
    def n_steps(self) -> int:
        return self._n_steps

    @property
    def n_rewires(self) -> int:
        return self._n_rewires

    @property
    def root(self) -> Point:
        return self._arena.point(0)

    @property
    def is_exhausted(self) -> bool:
        return self._budget <= 0 or not self._frontier

    @property
    def exhaustion_reason(self) -> Optional[str]:
        """'budget' / 'frontier'，尚未终止时为 None"""
        if self._budget <= 0:
            return 'budget'
        if not self._frontier:
            return 'frontier'
        return None

    def _is_active(self) -> bool:
        if not self.is_exhausted:
            return True
        if self._exhaustion_reason is None:
            self._exhaustion_reason = self.exhaustion_reason
            logger.info("生长结束 (%s): %d 点, %d 步, %d 次重挂接",
                        self._exhaustion_reason, self.n_points,
                        self._n_steps, self._n_rewires)
        return False

    # ── 单步 ──

    def advance(self) -> bool:
        """按 config.algorithm 执行一步

        Returns:
            本次调用是否执行了一步；终止后恒为 False
        """
        if self.config.algorithm == 'rrt':
            return self.advance_basic()
        return self.advance_rrt_star()

    def _sample_and_steer(self) -> Tuple[int, int]:
        """采样目标并前进，返回 (最近树节点下标, 新点在 frontier 中的位置)"""
        dest_k = int(self._rng.integers(len(self._frontier)))
        dest = self._frontier_xy[dest_k]
        near = closest(self._arena.xy, dest)
        k = steer_index(self._arena.xy[near], dest,
                        self.config.step_limit, self._frontier_xy)
        if k is None:
            k = dest_k
        return near, k

    def _admit(self, k: int, parent: int) -> int:
        point = self._frontier.pop(k)
        self._frontier_xy = np.delete(self._frontier_xy, k, axis=0)
        idx = self._arena.add(point, parent=parent)
        logger.debug("纳入节点 %d (%.3f, %.3f), 父=%d, 代价 %.4f",
                     idx, point.x, point.y, parent, self._arena.cost(idx))
        return idx

    def _finish_step(self) -> None:
        self._budget -= 1
        self._n_steps += 1

    def advance_basic(self) -> bool:
        """基本 RRT：新点挂到最近的树节点下"""
        if not self._is_active():
            return False
        near, k = self._sample_and_steer()
        self._admit(k, near)
        self._finish_step()
        return True

    def advance_rrt_star(self) -> bool:
        """RRT*：邻域内选最优父节点并重挂接邻居"""
        if not self._is_active():
            return False
        arena = self._arena
        near, k = self._sample_and_steer()
        p_new = self._frontier_xy[k].copy()

        neighbors = [int(i) for i in neighbors_within(
            arena.xy, p_new, self.config.neighborhood_radius)]
        if neighbors:
            diff = arena.xy[neighbors] - p_new
            costs = np.array([arena.cost(i) for i in neighbors])
            totals = costs + np.hypot(diff[:, 0], diff[:, 1])
            best_parent = neighbors[int(np.argmin(totals))]
        else:
            logger.debug("邻域为空，退回最近节点 %d 作为父节点", near)
            best_parent = near

        idx_new = self._admit(k, best_parent)
        cost_new = arena.cost(idx_new)

        for n in neighbors:
            if n == best_parent:
                continue
            d = p_new - arena.xy[n]
            c_thru = cost_new + float(np.hypot(d[0], d[1]))
            if c_thru < arena.cost(n):
                try:
                    arena.set_parent(n, idx_new)
                except CycleDetected:
                    logger.debug("跳过重挂接 %d -> %d: 会形成环", n, idx_new)
                    continue
                self._n_rewires += 1
                logger.debug("重挂接 %d -> %d, 代价 %.4f", n, idx_new, c_thru)

        self._finish_step()
        return True

    # ── 读出 ──

    def current_points(self) -> List[Point]:
        """按纳入顺序排列的树中点（首个为根）"""
        return self._arena.points

    def current_edges(self) -> List[Tuple[Point, Point]]:
        """所有 (父点, 子点) 边"""
        arena = self._arena
        return [(arena.point(p), arena.point(c)) for p, c in arena.edges()]

    def current_frontier(self) -> List[Point]:
        """尚未连接的网格点"""
        return list(self._frontier)

    def edge_array(self) -> np.ndarray:
        """(n_edges, 2, 2) 数组，每行为 [父坐标, 子坐标]"""
        edges = self._arena.edges()
        if not edges:
            return np.zeros((0, 2, 2), dtype=np.float64)
        idx = np.array(edges, dtype=np.int64)
        xy = self._arena.xy
        return np.stack([xy[idx[:, 0]], xy[idx[:, 1]]], axis=1)

    def cost(self, point: Point) -> float:
        """根到 point 沿当前父链的路径长度"""
        return self._arena.cost(self._arena.index_of(point))

    def parent(self, point: Point) -> Optional[Point]:
        """point 的父点，根返回 None"""
        p = self._arena.parent_of(self._arena.index_of(point))
        return None if p < 0 else self._arena.point(p)

    def path_to(self, point: Point) -> List[Point]:
        """根到 point 的点序列"""
        idx = self._arena.index_of(point)
        return [self._arena.point(i) for i in self._arena.path_to(idx)]

    # ── 驱动循环 ──

    def run(self, max_steps: Optional[int] = None) -> BuildResult:
        """反复调用 advance() 直到终止（或达到 max_steps）

        Returns:
            BuildResult 结果汇总
        """
        timer = Timer()
        steps = 0
        with timer.phase('grow'):
            while max_steps is None or steps < max_steps:
                if not self.advance():
                    break
                steps += 1
        # 恰好在 max_steps 处用尽时也记录终止原因
        self._is_active()

        result = BuildResult(
            algorithm=self.config.algorithm,
            n_points=self.n_points,
            n_edges=self.n_points - 1,
            iterations=steps,
            n_rewires=self._n_rewires,
            remaining_budget=self._budget,
            frontier_remaining=self.n_frontier,
            total_length=float(np.sum(self._arena.edge_lengths())),
            exhausted=self.is_exhausted,
            exhaustion_reason=self.exhaustion_reason,
            build_time=timer.total,
            phase_times=timer.to_dict(),
        )
        logger.info("run(): %d 步, %d 点, 总边长 %.3f, 耗时 %.3f s",
                    steps, result.n_points, result.total_length,
                    result.build_time)
        return result


def initialize(
    region_width: float,
    region_height: float,
    resolution: float,
    root: Optional[Tuple[float, float]] = None,
    step_limit: float = 0.3,
    neighborhood_radius: float = 0.4,
    iteration_budget: int = 1500,
    random_source=None,
    algorithm: str = 'rrt*',
) -> TreeBuilder:
    """按参数构造 TreeBuilder

    Raises:
        InvalidConfiguration: resolution / step_limit / 区域尺寸非正等
    """
    config = PlannerConfig(
        width=region_width,
        height=region_height,
        resolution=resolution,
        root=None if root is None else (float(root[0]), float(root[1])),
        step_limit=step_limit,
        neighborhood_radius=neighborhood_radius,
        iteration_budget=iteration_budget,
        algorithm=algorithm,
    )
    return TreeBuilder(config, rng=random_source)
