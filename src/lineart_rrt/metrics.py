"""
lineart_rrt/metrics.py - 树质量统计

对生长完成（或进行中）的树做汇总：
- 边长统计（总长 / 平均 / 最大）
- 深度与代价统计
- 叶子数、网格覆盖率
"""

import logging
from typing import Dict, Any
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class TreeMetrics:
    """树质量指标汇总

    Attributes:
        n_points: 点数（含根）
        n_edges: 边数
        total_length: 边长总和（即线稿总笔画长度）
        mean_edge_length: 平均边长
        max_edge_length: 最大边长
        max_depth: 最大深度（根深度为 0）
        mean_cost: 非根节点的平均根路径长度
        max_cost: 最大根路径长度
        n_leaves: 叶子节点数
        coverage: 已纳入网格点占全部网格点的比例
    """
    n_points: int = 0
    n_edges: int = 0
    total_length: float = 0.0
    mean_edge_length: float = 0.0
    max_edge_length: float = 0.0
    max_depth: int = 0
    mean_cost: float = 0.0
    max_cost: float = 0.0
    n_leaves: int = 0
    coverage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """转为字典"""
        return {
            'n_points': self.n_points,
            'n_edges': self.n_edges,
            'total_length': self.total_length,
            'mean_edge_length': self.mean_edge_length,
            'max_edge_length': self.max_edge_length,
            'max_depth': self.max_depth,
            'mean_cost': self.mean_cost,
            'max_cost': self.max_cost,
            'n_leaves': self.n_leaves,
            'coverage': self.coverage,
        }

    def summary(self) -> str:
        """返回可读的指标摘要"""
        lines = [
            "=" * 50,
            "树质量指标",
            "=" * 50,
            f"点数:               {self.n_points}",
            f"边数:               {self.n_edges}",
            f"总边长:             {self.total_length:.4f}",
            f"平均边长:           {self.mean_edge_length:.4f}",
            f"最大边长:           {self.max_edge_length:.4f}",
            f"最大深度:           {self.max_depth}",
            f"平均代价:           {self.mean_cost:.4f}",
            f"最大代价:           {self.max_cost:.4f}",
            f"叶子数:             {self.n_leaves}",
            f"网格覆盖率:         {self.coverage:.2%}",
            "=" * 50,
        ]
        return "\n".join(lines)


def evaluate_tree(builder) -> TreeMetrics:
    """从 TreeBuilder 计算树质量指标

    Args:
        builder: TreeBuilder 实例

    Returns:
        TreeMetrics
    """
    arena = builder.arena
    n = len(arena)
    lengths = arena.edge_lengths()
    costs = np.array([arena.cost(i) for i in range(1, n)], dtype=np.float64)

    # 重挂接后父下标可能大于子下标
    depths = [arena.depth(i) for i in range(n)]

    # 根本身占据一个网格点时也计入覆盖
    covered = builder.n_grid - builder.n_frontier
    metrics = TreeMetrics(
        n_points=n,
        n_edges=int(lengths.shape[0]),
        total_length=float(lengths.sum()),
        mean_edge_length=float(lengths.mean()) if lengths.size else 0.0,
        max_edge_length=float(lengths.max()) if lengths.size else 0.0,
        max_depth=max(depths) if depths else 0,
        mean_cost=float(costs.mean()) if costs.size else 0.0,
        max_cost=float(costs.max()) if costs.size else 0.0,
        n_leaves=len(arena.leaves()) if n > 1 else 0,
        coverage=covered / builder.n_grid if builder.n_grid else 0.0,
    )
    logger.debug("evaluate_tree: %d 点, 总边长 %.4f, 最大深度 %d",
                 metrics.n_points, metrics.total_length, metrics.max_depth)
    return metrics
