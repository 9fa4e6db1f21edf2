"""
串行DBSCAN实现
经典的密度聚类算法，适用于任意定义了距离的点类型
"""

import time
from collections import deque
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from ..exceptions import InvalidParameterError, NotFittedError
from .labels import LabelStore, ClusterResult
from .metrics import (
    AUTO,
    MetricLike,
    compute_distance_matrix,
    describe_metric,
    get_metric,
    is_auto_metric,
    is_named_metric,
    resolve_metric,
)
from .utils import active_mask, check_identities, region_query, validate_duplicate_policy, validate_parameters

NeighborFunc = Callable[[int], List[int]]


def expand_clusters(n_samples: int, neighbors_of: NeighborFunc, min_samples: int,
                    skip: Sequence[int] = ()) -> LabelStore:
    """
    按输入顺序扫描所有点并扩展聚类

    每个点恰好查询一次邻域。边界点归属于第一个扩展到它的聚类，之后不再改变。

    Args:
        n_samples: 点的数量
        neighbors_of: 返回某点eps邻域（包含自身）索引列表的函数
        min_samples: 核心点的最小邻域大小
        skip: 不参与运行的点索引

    Returns:
        运行结束后的标签存储
    """
    store = LabelStore(n_samples)
    skipped = set(skip)

    for i in range(n_samples):
        if i in skipped or not store.is_unvisited(i):
            continue

        neighbors = neighbors_of(i)

        if len(neighbors) < min_samples:
            # 暂时标记为噪声，之后可能升级为边界点
            store.mark_noise(i)
            continue

        # 发现核心点，开始新的聚类
        cluster_id = store.new_cluster()
        store.assign(i, cluster_id)
        store.mark_core(i)

        _expand_cluster(store, neighbors_of, min_samples,
                        [j for j in neighbors if j != i], cluster_id)

    return store


def _expand_cluster(store: LabelStore, neighbors_of: NeighborFunc, min_samples: int,
                    seeds: List[int], cluster_id: int) -> None:
    """
    从种子点扩展聚类

    Args:
        store: 标签存储
        neighbors_of: 邻域查询函数
        min_samples: 核心点的最小邻域大小
        seeds: 初始种子（核心点邻域去掉自身）
        cluster_id: 当前聚类ID
    """
    queue = deque(seeds)
    queued = set(seeds)

    while queue:
        point_idx = queue.popleft()

        if store.is_noise(point_idx):
            # 之前标记为噪声，现在是边界点，不再从它扩展
            store.upgrade_noise(point_idx, cluster_id)
            continue

        if not store.is_unvisited(point_idx):
            # 已属于某个聚类（先发现者优先）
            continue

        store.assign(point_idx, cluster_id)
        neighbors = neighbors_of(point_idx)

        if len(neighbors) >= min_samples:
            store.mark_core(point_idx)
            for neighbor_idx in neighbors:
                if neighbor_idx not in queued and store.labels[neighbor_idx] != cluster_id:
                    queued.add(neighbor_idx)
                    queue.append(neighbor_idx)


class DBSCANSequential:
    """串行版本的DBSCAN聚类算法

    拟合后labels_中噪声点为-1，聚类ID从0开始。on_duplicate='ignore'时
    被忽略的重复点不参与运行，在labels_中保持UNVISITED（-2）。
    """

    def __init__(self, eps: float, min_samples: int = 5,
                 metric: MetricLike = AUTO,
                 key: Optional[Callable[[Any], Any]] = None,
                 on_duplicate: str = 'raise',
                 precompute: bool = False):
        """
        初始化DBSCAN参数

        Args:
            eps: 邻域半径，距离小于等于eps的点互为邻居
            min_samples: 核心点的最小邻域大小（包含自身）
            metric: 距离度量：'auto'（默认，点实现了distance方法时使用它，
                否则为欧氏距离）、'euclidean'、'manhattan'、'haversine'，
                可调用对象f(a, b)，或None（使用点的distance方法）
            key: 返回点逻辑标识的函数，None表示以输入索引为标识
            on_duplicate: 标识冲突时的策略，'raise'或'ignore'
            precompute: 是否预先计算距离矩阵（仅限内置度量和数值数组）
        """
        validate_parameters(eps, min_samples)
        validate_duplicate_policy(on_duplicate)
        self._distance = None if is_auto_metric(metric) else get_metric(metric)
        if precompute and not (is_named_metric(metric) or is_auto_metric(metric)):
            raise InvalidParameterError(
                f"precompute=True 只支持内置度量，得到: {describe_metric(metric)}"
            )

        self.eps = eps
        self.min_samples = min_samples
        self.metric = metric
        self.key = key
        self.on_duplicate = on_duplicate
        self.precompute = precompute

        self.result_: Optional[ClusterResult] = None
        self.labels_ = None
        self.core_sample_indices_ = None
        self.components_ = None
        self.metric_ = None
        self.execution_time = 0

    def get_params(self) -> dict:
        return {
            'eps': self.eps,
            'min_samples': self.min_samples,
            'metric': describe_metric(self.metric),
            'on_duplicate': self.on_duplicate,
            'precompute': self.precompute
        }

    def fit(self, points: Sequence) -> 'DBSCANSequential':
        """
        执行DBSCAN聚类

        Args:
            points: 任意点序列（列表、元组或numpy数组的行）

        Returns:
            self: 返回聚类器实例
        """
        start_time = time.time()

        self._resolve_metric(points)
        duplicates = check_identities(points, self.key, self.on_duplicate)
        neighbors_of = self._neighborhoods(points, duplicates)

        store = expand_clusters(len(points), neighbors_of, self.min_samples, skip=duplicates)
        self._store_result(points, store, duplicates, time.time() - start_time)

        return self

    def fit_predict(self, points: Sequence) -> np.ndarray:
        return self.fit(points).labels_

    def _resolve_metric(self, points: Sequence) -> None:
        """确定本次运行实际使用的度量"""
        metric = resolve_metric(self.metric, points)
        if self.precompute and not is_named_metric(metric):
            raise InvalidParameterError(
                f"precompute=True 只支持内置度量，得到: {describe_metric(metric)}"
            )
        self.metric_ = metric
        self._distance = get_metric(metric)

    def _neighborhoods(self, points: Sequence, duplicates: List[int]) -> NeighborFunc:
        """构造邻域查询函数"""
        active = active_mask(len(points), duplicates)

        distance_matrix = None
        if self.precompute and len(points) > 0:
            distance_matrix = compute_distance_matrix(points, self.metric_)

        def neighbors_of(point_idx: int) -> List[int]:
            return region_query(points, point_idx, self.eps,
                                distance=self._distance,
                                distance_matrix=distance_matrix,
                                active=active)

        return neighbors_of

    def _store_result(self, points: Sequence, store: LabelStore,
                      duplicates: List[int], execution_time: float) -> None:
        """保存结果并设置sklearn风格的属性"""
        labels = store.freeze(excluded=duplicates)
        self.result_ = ClusterResult(points, labels, store.core_mask, store.n_clusters,
                                     duplicates=duplicates, execution_time=execution_time)

        self.labels_ = labels
        self.core_sample_indices_ = self.result_.core_sample_indices
        if isinstance(points, np.ndarray):
            self.components_ = points[self.core_sample_indices_]
        else:
            self.components_ = [points[idx] for idx in self.core_sample_indices_]
        self.execution_time = execution_time

    def _check_fitted(self) -> ClusterResult:
        if self.result_ is None:
            raise NotFittedError(f"{type(self).__name__} 尚未调用fit")
        return self.result_

    def clusters(self) -> dict:
        return self._check_fitted().clusters()

    def noise(self) -> list:
        return self._check_fitted().noise()

    def get_cluster_stats(self) -> dict:
        """
        获取聚类统计信息

        Returns:
            包含聚类统计信息的字典，未拟合时为空字典
        """
        if self.result_ is None:
            return {}
        return self.result_.get_cluster_stats()


def cluster(points: Sequence, eps: float, min_samples: int,
            metric: MetricLike = AUTO, **kwargs) -> ClusterResult:
    """
    校验参数并立即执行一次DBSCAN

    Args:
        points: 点序列，空序列返回空结果
        eps: 邻域半径
        min_samples: 核心点的最小邻域大小（包含自身）
        metric: 距离度量
        **kwargs: 传给DBSCANSequential的其它参数

    Returns:
        聚类结果
    """
    return DBSCANSequential(eps, min_samples, metric=metric, **kwargs).fit(points).result_
