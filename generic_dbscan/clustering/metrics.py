"""
距离度量
点之间的距离函数以及数值数组的距离矩阵计算
"""

import math
from typing import Any, Callable, Optional, Protocol, Sequence, Union, runtime_checkable

import numpy as np
from numba import jit, prange

from ..exceptions import InvalidParameterError

# 地球平均半径（米）
EARTH_RADIUS_M = 6371000.0

DistanceFunc = Callable[[Any, Any], float]
MetricLike = Union[str, DistanceFunc, None]


@runtime_checkable
class Proximity(Protocol):
    """可以计算到同类型另一个点距离的点"""

    def distance(self, other: Any) -> float:
        ...


def euclidean(point1, point2) -> float:
    """欧氏距离"""
    diff = np.asarray(point1, dtype=np.float64) - np.asarray(point2, dtype=np.float64)
    return float(np.sqrt(np.sum(diff ** 2)))


def manhattan(point1, point2) -> float:
    """曼哈顿距离（L1）"""
    diff = np.asarray(point1, dtype=np.float64) - np.asarray(point2, dtype=np.float64)
    return float(np.sum(np.abs(diff)))


def haversine(point1, point2) -> float:
    """
    Haversine距离，适用于地理坐标

    Args:
        point1: 第一个点 [lat, lon]（度）
        point2: 第二个点 [lat, lon]（度）

    Returns:
        两点之间的大圆距离（米）
    """
    lat1, lon1 = math.radians(point1[0]), math.radians(point1[1])
    lat2, lon2 = math.radians(point2[0]), math.radians(point2[1])

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # 近对跖点时舍入误差可能使a略大于1
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def proximity(point1: Proximity, point2: Proximity) -> float:
    """调用点自身的distance方法"""
    return point1.distance(point2)


AUTO = 'auto'

NAMED_METRICS = {
    'euclidean': euclidean,
    'manhattan': manhattan,
    'haversine': haversine,
}


def resolve_metric(metric: MetricLike, points: Sequence) -> MetricLike:
    """
    解析'auto'度量：首个点实现了Proximity协议时使用点的distance方法，否则使用欧氏距离

    Args:
        metric: 度量参数
        points: 待聚类的点

    Returns:
        非'auto'的度量参数
    """
    if not is_auto_metric(metric):
        return metric
    if len(points) > 0 and isinstance(points[0], Proximity):
        return None
    return 'euclidean'


def is_auto_metric(metric: MetricLike) -> bool:
    return isinstance(metric, str) and metric == AUTO


def get_metric(metric: MetricLike) -> DistanceFunc:
    """
    将metric参数解析为双参数距离函数

    Args:
        metric: None表示使用点的distance方法，字符串表示内置度量，
            也可以直接传入可调用对象

    Returns:
        距离函数 f(a, b) -> float
    """
    if metric is None:
        return proximity

    if isinstance(metric, str):
        try:
            return NAMED_METRICS[metric]
        except KeyError:
            raise InvalidParameterError(
                f"不支持的度量方式: {metric}，可选: {sorted(NAMED_METRICS)}"
            ) from None

    if callable(metric):
        return metric

    raise InvalidParameterError(f"metric必须是字符串、可调用对象或None，得到: {type(metric).__name__}")


def compute_distance_matrix(points: np.ndarray, metric: str = 'euclidean') -> np.ndarray:
    """
    计算距离矩阵（仅支持内置度量和数值数组）

    Args:
        points: 形状为(n_samples, n_features)的numpy数组
        metric: 距离度量方式

    Returns:
        距离矩阵，形状为(n_samples, n_samples)
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2:
        raise InvalidParameterError(f"距离矩阵需要二维数组，得到形状: {points.shape}")

    if metric == 'euclidean':
        diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
        return np.sqrt(np.sum(diff ** 2, axis=2))

    elif metric == 'manhattan':
        diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
        return np.sum(np.abs(diff), axis=2)

    elif metric == 'haversine':
        if points.shape[1] != 2:
            raise InvalidParameterError("haversine度量需要[lat, lon]两列")
        return _haversine_distance_matrix(points)

    else:
        raise InvalidParameterError(f"距离矩阵不支持的度量方式: {metric}")


@jit(nopython=True, parallel=True)
def _haversine_distance_matrix(points: np.ndarray) -> np.ndarray:
    """
    使用Numba加速的Haversine距离矩阵计算

    Args:
        points: 形状为(n_samples, 2)的numpy数组，[latitude, longitude]

    Returns:
        Haversine距离矩阵（米）
    """
    n_samples = points.shape[0]
    distance_matrix = np.zeros((n_samples, n_samples))
    R = 6371000.0

    lat_rad = np.radians(points[:, 0])
    lon_rad = np.radians(points[:, 1])

    for i in prange(n_samples):
        for j in range(i + 1, n_samples):
            dlon = lon_rad[j] - lon_rad[i]
            dlat = lat_rad[j] - lat_rad[i]

            a = math.sin(dlat / 2) ** 2 + math.cos(lat_rad[i]) * math.cos(lat_rad[j]) * math.sin(dlon / 2) ** 2
            a = min(1.0, a)
            c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
            distance = R * c

            distance_matrix[i, j] = distance
            distance_matrix[j, i] = distance

    return distance_matrix


def is_named_metric(metric: MetricLike) -> bool:
    return isinstance(metric, str) and metric in NAMED_METRICS


def describe_metric(metric: MetricLike) -> Optional[str]:
    """返回度量的可读名称（用于get_params和统计信息）"""
    if metric is None:
        return 'proximity'
    if isinstance(metric, str):
        return metric
    return getattr(metric, '__name__', repr(metric))
