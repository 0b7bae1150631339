"""
lineart_rrt/models.py - 规划器数据模型

定义树生长使用的核心数据结构：Point、PlannerConfig、BuildResult。
"""

import json
import math
from pathlib import Path
from typing import Dict, Optional, Any, Tuple
from dataclasses import dataclass, field
from datetime import datetime

import numpy as np

from .errors import InvalidConfiguration

ALGORITHMS = ('rrt', 'rrt*')


def _is_integer(value) -> bool:
    return (isinstance(value, (int, np.integer))
            and not isinstance(value, (bool, np.bool_)))


def _is_finite_real(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return math.isfinite(value)


@dataclass(frozen=True, eq=False)
class Point:
    """不可变二维点

    按对象身份比较：坐标相同但分别创建的两个 Point 是不同的点。
    每个网格单元在初始化时只创建一次，被纳入树时复用同一对象。

    Attributes:
        x: 横坐标
        y: 纵坐标
    """
    x: float
    y: float


@dataclass
class PlannerConfig:
    """树生长参数配置

    默认值对应 A4 竖版画布（单位 cm），每厘米 10 个网格点。

    Attributes:
        width: 采样区域宽度
        height: 采样区域高度
        resolution: 网格间距
        root: 根节点位置，None 表示区域中心
        step_limit: 单步生长的最大边长
        neighborhood_radius: RRT* 邻域半径（含边界）
        iteration_budget: 最大迭代步数
        algorithm: 'rrt' 或 'rrt*'
        seed: 随机种子，0 表示从系统熵池抽取
    """
    width: float = 21.0
    height: float = 29.7
    resolution: float = 0.1
    root: Optional[Tuple[float, float]] = None
    step_limit: float = 0.3
    neighborhood_radius: float = 0.4
    iteration_budget: int = 1500
    algorithm: str = 'rrt*'
    seed: int = 0

    def validate(self) -> 'PlannerConfig':
        """检查参数，非法时抛出 InvalidConfiguration

        数值参数必须是有限实数；iteration_budget 与 seed 必须是非负整数
        （bool 不算整数）。
        """
        for name in ('width', 'height', 'resolution', 'step_limit',
                     'neighborhood_radius'):
            if not _is_finite_real(getattr(self, name)):
                raise InvalidConfiguration(
                    f"{name} 必须是有限实数: {getattr(self, name)!r}")
        if not (self.width > 0 and self.height > 0):
            raise InvalidConfiguration(
                f"区域面积必须为正: width={self.width}, height={self.height}")
        if not self.resolution > 0:
            raise InvalidConfiguration(
                f"网格间距必须为正: resolution={self.resolution}")
        if not self.step_limit > 0:
            raise InvalidConfiguration(
                f"步长上限必须为正: step_limit={self.step_limit}")
        if not self.neighborhood_radius >= 0:
            raise InvalidConfiguration(
                f"邻域半径不能为负: neighborhood_radius="
                f"{self.neighborhood_radius}")
        if not _is_integer(self.iteration_budget):
            raise InvalidConfiguration(
                f"迭代预算必须是整数: iteration_budget="
                f"{self.iteration_budget!r}")
        if self.iteration_budget < 0:
            raise InvalidConfiguration(
                f"迭代预算不能为负: iteration_budget={self.iteration_budget}")
        if not _is_integer(self.seed) or self.seed < 0:
            raise InvalidConfiguration(
                f"随机种子必须是非负整数: seed={self.seed!r}")
        if self.algorithm not in ALGORITHMS:
            raise InvalidConfiguration(
                f"未知算法 {self.algorithm!r}，可选 {ALGORITHMS}")
        if self.root is not None:
            if (not isinstance(self.root, (tuple, list, np.ndarray))
                    or len(self.root) != 2 or not all(
                    _is_finite_real(v) for v in self.root)):
                raise InvalidConfiguration(f"根节点坐标非法: {self.root}")
        return self

    def root_point(self) -> Tuple[float, float]:
        """根节点坐标（未指定时取区域中心）"""
        if self.root is None:
            return (self.width / 2.0, self.height / 2.0)
        return (float(self.root[0]), float(self.root[1]))

    # ── JSON 序列化 ──

    def to_dict(self) -> Dict[str, Any]:
        """转为字典"""
        from dataclasses import fields as dc_fields
        d = {f.name: getattr(self, f.name) for f in dc_fields(self)}
        if d['root'] is not None:
            d['root'] = [float(v) for v in d['root']]
        return d

    def to_json(self, filepath: str | Path) -> str:
        """保存到 JSON 文件

        Args:
            filepath: 输出路径

        Returns:
            保存的文件路径字符串
        """
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return str(filepath)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlannerConfig':
        """从字典创建（忽略未知字段，缺失字段用默认值）"""
        from dataclasses import fields as dc_fields
        valid_fields = {f.name for f in dc_fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        if filtered.get('root') is not None:
            filtered['root'] = tuple(filtered['root'])
        return cls(**filtered)

    @classmethod
    def from_json(cls, filepath: str | Path) -> 'PlannerConfig':
        """从 JSON 文件加载"""
        filepath = Path(filepath)
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data)


@dataclass
class BuildResult:
    """一次完整生长的结果汇总

    Attributes:
        algorithm: 使用的算法
        n_points: 树中点数（含根）
        n_edges: 边数
        iterations: 本次 run() 执行的步数
        n_rewires: RRT* 累计重挂接次数
        remaining_budget: 剩余迭代预算
        frontier_remaining: 剩余未连接网格点数
        total_length: 所有边长之和
        exhausted: 是否已到终止状态
        exhaustion_reason: 'budget' / 'frontier' / None
        build_time: 生长耗时 (s)
        phase_times: 各阶段耗时
        metadata: 其它信息
        timestamp: 时间戳
    """
    algorithm: str = 'rrt*'
    n_points: int = 0
    n_edges: int = 0
    iterations: int = 0
    n_rewires: int = 0
    remaining_budget: int = 0
    frontier_remaining: int = 0
    total_length: float = 0.0
    exhausted: bool = False
    exhaustion_reason: Optional[str] = None
    build_time: float = 0.0
    phase_times: Dict[str, float] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(
        default_factory=lambda: datetime.now().strftime('%Y%m%d_%H%M%S'))

    def to_dict(self) -> Dict[str, Any]:
        d = {
            'algorithm': self.algorithm,
            'n_points': self.n_points,
            'n_edges': self.n_edges,
            'iterations': self.iterations,
            'n_rewires': self.n_rewires,
            'remaining_budget': self.remaining_budget,
            'frontier_remaining': self.frontier_remaining,
            'total_length': self.total_length,
            'exhausted': self.exhausted,
            'exhaustion_reason': self.exhaustion_reason,
            'build_time': self.build_time,
            'phase_times': dict(self.phase_times),
            'timestamp': self.timestamp,
        }
        d.update(self.metadata)
        return d

    def save_json(self, filepath: str | Path) -> str:
        """将结果摘要保存为 JSON 文件"""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
        return str(filepath)
