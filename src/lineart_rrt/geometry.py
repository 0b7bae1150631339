"""
lineart_rrt/geometry.py - 平面几何工具

树生长用到的纯函数，无副作用：
1. 欧氏距离 / 最近邻线性扫描 / 半径邻域
2. 朝目标点限步长前进并吸附到最近的 frontier 网格点
3. 规则采样网格生成

候选集统一用 (n, 2) 的 float64 数组表示，查询返回下标而不是点对象，
调用方用下标回到自己的存储结构。距离相等时取下标最小者（np.argmin
返回第一个最小值），保证给定随机源时结果可复现。
"""

import math
from typing import Optional, Sequence

import numpy as np

from .errors import EmptyCandidateSet

# 网格端点判定容差（以网格间距为单位）
_GRID_EPS = 1e-9


def as_xy_array(points) -> np.ndarray:
    """把点序列转为 (n, 2) float64 数组

    接受 ndarray、(x, y) 元组序列或带 x / y 属性的 Point 序列。
    """
    if isinstance(points, np.ndarray):
        arr = np.asarray(points, dtype=np.float64)
    else:
        rows = []
        for p in points:
            if hasattr(p, 'x') and hasattr(p, 'y'):
                rows.append((p.x, p.y))
            else:
                rows.append((p[0], p[1]))
        arr = np.array(rows, dtype=np.float64)
    return arr.reshape(-1, 2)


def _xy(p) -> np.ndarray:
    if hasattr(p, 'x') and hasattr(p, 'y'):
        return np.array([p.x, p.y], dtype=np.float64)
    return np.asarray(p, dtype=np.float64)[:2]


def distance(p, q) -> float:
    """两点欧氏距离"""
    a = _xy(p)
    b = _xy(q)
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))


def _distances(candidates: np.ndarray, target: np.ndarray) -> np.ndarray:
    diff = candidates - target
    return np.hypot(diff[:, 0], diff[:, 1])


def closest(candidates, target) -> int:
    """线性扫描，返回离 target 最近的候选下标

    Args:
        candidates: (n, 2) 候选点
        target: 目标点

    Returns:
        最近候选的下标；距离相同时取下标最小者

    Raises:
        EmptyCandidateSet: 候选集为空
    """
    cand = as_xy_array(candidates)
    if cand.shape[0] == 0:
        raise EmptyCandidateSet("closest(): 候选集为空")
    return int(np.argmin(_distances(cand, _xy(target))))


def neighbors_within(candidates, target, radius: float) -> np.ndarray:
    """返回与 target 距离 <= radius 的全部候选下标（按下标升序）

    Raises:
        EmptyCandidateSet: 候选集为空
    """
    cand = as_xy_array(candidates)
    if cand.shape[0] == 0:
        raise EmptyCandidateSet("neighbors_within(): 候选集为空")
    return np.nonzero(_distances(cand, _xy(target)) <= radius)[0]


def steer_index(source, destination, step_limit: float,
                frontier) -> Optional[int]:
    """从 source 朝 destination 前进不超过 step_limit

    目标在步长内时返回 None，表示直接到达 destination；否则沿单位
    方向前进 step_limit 得到临时点，再吸附到 frontier 中离它最近的点，
    返回该点在 frontier 中的下标。新点因此总是落在已有网格点上。

    Raises:
        EmptyCandidateSet: 需要吸附但 frontier 为空
    """
    src = _xy(source)
    dst = _xy(destination)
    dist = float(np.hypot(dst[0] - src[0], dst[1] - src[1]))
    if dist <= step_limit:
        return None
    unit = (dst - src) / dist
    provisional = src + unit * step_limit
    return closest(frontier, provisional)


def steer_toward(source, destination, step_limit: float, frontier):
    """steer_index 的取点版本：返回新点本身

    直接到达时原样返回 destination 对象，否则返回吸附到的 frontier 点。
    """
    k = steer_index(source, destination, step_limit, frontier)
    if k is None:
        return destination
    return frontier[k]


def make_grid(width: float, height: float, spacing: float) -> np.ndarray:
    """生成区域 [0, width) x [0, height) 内间距为 spacing 的规则网格

    行优先（外层 y，内层 x）。坐标由整数下标乘间距得到，避免浮点累加误差。

    Returns:
        (nx * ny, 2) 网格点数组
    """
    nx = int(math.ceil(width / spacing - _GRID_EPS))
    ny = int(math.ceil(height / spacing - _GRID_EPS))
    xs = np.arange(nx, dtype=np.float64) * spacing
    ys = np.arange(ny, dtype=np.float64) * spacing
    gx, gy = np.meshgrid(xs, ys)
    return np.column_stack([gx.ravel(), gy.ravel()])


def polyline_length(points: Sequence) -> float:
    """折线总长度"""
    arr = as_xy_array(points)
    if arr.shape[0] < 2:
        return 0.0
    seg = np.diff(arr, axis=0)
    return float(np.sum(np.hypot(seg[:, 0], seg[:, 1])))
