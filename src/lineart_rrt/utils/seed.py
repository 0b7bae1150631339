"""
utils/seed.py — 生长器随机源

生长器每步只调用一次 ``rng.integers(high)``，要求返回 [0, high) 内
均匀分布的整数。numpy ``Generator`` 满足该约定；测试可以注入按脚本
出数的对象。

种子 0 / None 表示"不指定"：从系统熵池抽取一个 31 位种子，抽到的值
可以记录下来用于复现。
"""

from typing import Optional

import numpy as np

from ..errors import InvalidConfiguration

SEED_BITS = 31


def resolve_seed(seed: Optional[int] = None) -> int:
    """返回实际使用的种子；0 或 None 时从熵池抽取"""
    if not seed:
        return int(np.random.SeedSequence().entropy % (2 ** SEED_BITS))
    return int(seed)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(resolve_seed(seed))


def check_random_source(rng=None, seed: Optional[int] = None):
    """取得生长器使用的随机源

    Args:
        rng: 调用方注入的随机源；None 时按 seed 新建 Generator
        seed: rng 为 None 时使用的种子

    Raises:
        InvalidConfiguration: rng 没有可调用的 integers 方法
    """
    if rng is None:
        return make_rng(seed)
    if not callable(getattr(rng, 'integers', None)):
        raise InvalidConfiguration(
            f"随机源必须提供 integers(high): {type(rng).__name__}")
    return rng
