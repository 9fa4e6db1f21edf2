"""
聚类工具函数
邻域查询、参数校验和点标识检查
"""

import math
import numbers
import warnings
from typing import Any, Callable, Dict, List, Optional, Sequence

import numpy as np

from ..exceptions import IdentityCollisionError, InvalidParameterError
from .metrics import DistanceFunc

DUPLICATE_POLICIES = ('raise', 'ignore')


def region_query(points: Sequence, point_idx: int, eps: float,
                 distance: Optional[DistanceFunc] = None,
                 distance_matrix: Optional[np.ndarray] = None,
                 active: Optional[np.ndarray] = None) -> List[int]:
    """
    查找指定点eps邻域内的所有点（包含该点自身，边界距离等于eps也算邻居）

    Args:
        points: 所有点
        point_idx: 目标点的索引
        eps: 邻域半径
        distance: 距离函数，未提供distance_matrix时必须给出
        distance_matrix: 预计算的距离矩阵（可选）
        active: 布尔掩码，False的点不参与查询（可选）

    Returns:
        邻域内点的索引列表，按输入顺序排列
    """
    if distance_matrix is not None:
        mask = distance_matrix[point_idx] <= eps
        if active is not None:
            mask = mask & active
        return np.flatnonzero(mask).tolist()

    if distance is None:
        raise InvalidParameterError("region_query需要distance或distance_matrix")

    neighbors = []
    point = points[point_idx]

    for i in range(len(points)):
        if active is not None and not active[i]:
            continue

        if i == point_idx or distance(point, points[i]) <= eps:
            neighbors.append(i)

    return neighbors


def validate_parameters(eps: Any, min_samples: Any) -> None:
    """
    校验DBSCAN参数

    Args:
        eps: 邻域半径，必须是大于0的有限实数
        min_samples: 核心点的最小邻域大小（包含自身），必须是不小于1的整数
    """
    if isinstance(eps, bool) or not isinstance(eps, numbers.Real):
        raise InvalidParameterError(f"eps必须是实数，得到: {eps!r}")
    if math.isnan(eps) or eps <= 0:
        raise InvalidParameterError(f"eps必须大于0，得到: {eps}")

    if isinstance(min_samples, bool) or not isinstance(min_samples, numbers.Integral):
        raise InvalidParameterError(f"min_samples必须是整数，得到: {min_samples!r}")
    if min_samples < 1:
        raise InvalidParameterError(f"min_samples必须不小于1，得到: {min_samples}")


def validate_duplicate_policy(on_duplicate: str) -> None:
    if on_duplicate not in DUPLICATE_POLICIES:
        raise InvalidParameterError(f"on_duplicate必须是{DUPLICATE_POLICIES}之一，得到: {on_duplicate!r}")


def check_identities(points: Sequence, key: Optional[Callable[[Any], Any]],
                     on_duplicate: str = 'raise') -> List[int]:
    """
    检查点标识是否冲突

    未提供key时，点的标识就是它在输入序列中的索引，不可能冲突。

    Args:
        points: 所有点
        key: 返回点逻辑标识的函数（结果必须可哈希）
        on_duplicate: 'raise' 抛出IdentityCollisionError；
            'ignore' 忽略索引较大的重复点并发出警告

    Returns:
        被忽略的重复点索引列表
    """
    validate_duplicate_policy(on_duplicate)

    if key is None:
        return []

    first_seen: Dict[Any, int] = {}
    duplicates = []

    for i, point in enumerate(points):
        identity = key(point)
        if identity not in first_seen:
            first_seen[identity] = i
            continue

        if on_duplicate == 'raise':
            raise IdentityCollisionError(first_seen[identity], i, identity)
        duplicates.append(i)

    if duplicates:
        warnings.warn(f"忽略了 {len(duplicates)} 个标识重复的点: {duplicates}")

    return duplicates


def active_mask(n_samples: int, excluded: Sequence[int]) -> Optional[np.ndarray]:
    """被排除的点为False的布尔掩码；没有排除时返回None"""
    if not excluded:
        return None
    mask = np.ones(n_samples, dtype=bool)
    mask[list(excluded)] = False
    return mask
