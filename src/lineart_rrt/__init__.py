"""
lineart_rrt - 网格 RRT / RRT* 线稿路径网络生长

在二维采样区域的规则网格上增量生长一棵生成树，输出的边集合
用于线稿渲染（笔式绘图仪 / 矢量导出由外部完成）。

核心思路：
1. 区域内按固定间距铺满采样网格，作为 frontier
2. 每步随机取一个 frontier 点，从树中最近点朝它前进一小步
3. 新点吸附到最近的 frontier 网格点并纳入树
4. RRT* 额外在邻域内选最优父节点，并重挂接邻居以缩短路径
5. 迭代预算用尽或 frontier 清空时停止

树以下标化数组存储（TreeArena），代价按点缓存并在重挂接时刷新整棵子树。
"""

from .errors import (
    LineArtRRTError,
    InvalidConfiguration,
    EmptyCandidateSet,
    CycleDetected,
)
from .models import Point, PlannerConfig, BuildResult
from .geometry import (
    distance,
    closest,
    neighbors_within,
    steer_index,
    steer_toward,
    make_grid,
)
from .tree import TreeArena
from .builder import TreeBuilder, initialize
from .metrics import TreeMetrics, evaluate_tree

__all__ = [
    # 异常
    'LineArtRRTError',
    'InvalidConfiguration',
    'EmptyCandidateSet',
    'CycleDetected',
    # 数据模型
    'Point',
    'PlannerConfig',
    'BuildResult',
    # 几何
    'distance',
    'closest',
    'neighbors_within',
    'steer_index',
    'steer_toward',
    'make_grid',
    # 核心算法
    'TreeArena',
    'TreeBuilder',
    'initialize',
    # 评价指标
    'TreeMetrics',
    'evaluate_tree',
]
