"""
lineart_rrt/errors.py - 异常定义

规划器只有三类错误：
- InvalidConfiguration: 初始化参数非法，立即抛出，不创建任何状态
- EmptyCandidateSet: 最近邻 / 邻域查询的候选集为空（内部不变量被破坏）
- CycleDetected: 重新挂接父节点会形成环；由 rewire 捕获并跳过
"""


class LineArtRRTError(Exception):
    """lineart_rrt 所有异常的基类"""


class InvalidConfiguration(LineArtRRTError, ValueError):
    """规划器参数非法（尺寸 / 分辨率 / 步长等）"""


class EmptyCandidateSet(LineArtRRTError, LookupError):
    """在空候选集上执行最近邻或邻域查询"""


class CycleDetected(LineArtRRTError):
    """父节点重挂接会在树中形成环

    Attributes:
        child: 被重挂接的节点下标
        new_parent: 提议的新父节点下标
    """

    def __init__(self, child: int, new_parent: int) -> None:
        super().__init__(
            f"节点 {child} 挂到 {new_parent} 下会形成环")
        self.child = child
        self.new_parent = new_parent
