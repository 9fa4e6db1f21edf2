"""
异常类型
参数校验、点标识冲突以及未拟合访问的错误定义
"""


class DBSCANError(Exception):
    """所有聚类错误的基类"""


class InvalidParameterError(DBSCANError, ValueError):
    """eps、min_samples、metric等参数非法"""


class IdentityCollisionError(DBSCANError, ValueError):
    """输入中两个不同的点报告了相同的标识"""

    def __init__(self, first_index: int, duplicate_index: int, key):
        self.first_index = first_index
        self.duplicate_index = duplicate_index
        self.key = key
        super().__init__(
            f"点 {duplicate_index} 与点 {first_index} 的标识相同: {key!r}"
        )


class NotFittedError(DBSCANError, AttributeError):
    """在调用fit之前访问聚类结果"""
