"""utils/ — 随机源与阶段计时"""

from .seed import resolve_seed, make_rng, check_random_source
from .timing import Timer

__all__ = ["resolve_seed", "make_rng", "check_random_source", "Timer"]
