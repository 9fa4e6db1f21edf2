"""
并行DBSCAN实现
利用多核CPU并发计算邻域，再按输入顺序串行扩展聚类
"""

from typing import Any, Callable, List, Optional, Sequence

from ..exceptions import InvalidParameterError
from ..parallel.partitioning import partition_indices
from ..parallel.workers import NeighborhoodWorkerPool
from .dbscan_sequential import DBSCANSequential, NeighborFunc
from .metrics import AUTO, MetricLike
from .utils import active_mask


class DBSCANParallel(DBSCANSequential):
    """并行版本的DBSCAN聚类算法

    只有邻域查询是并行的。标签存储只由扩展阶段修改，因此结果与
    DBSCANSequential在相同输入顺序下完全一致。
    """

    def __init__(self, eps: float, min_samples: int = 5,
                 metric: MetricLike = AUTO, n_jobs: int = -1,
                 chunk_size: int = 1000, backend: str = 'thread',
                 key: Optional[Callable[[Any], Any]] = None,
                 on_duplicate: str = 'raise', verbose: bool = False):
        """
        初始化并行DBSCAN参数

        Args:
            eps: 邻域半径
            min_samples: 核心点的最小邻域大小（包含自身）
            metric: 距离度量
            n_jobs: 并行工作者数，-1表示使用所有CPU核心
            chunk_size: 每个工作者处理的数据块大小
            backend: 'thread'或'process'
            key: 返回点逻辑标识的函数
            on_duplicate: 标识冲突时的策略
            verbose: 是否打印并行信息
        """
        super().__init__(eps, min_samples, metric=metric, key=key, on_duplicate=on_duplicate)

        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size < 1:
            raise InvalidParameterError(f"chunk_size必须是正整数，得到: {chunk_size!r}")

        self.pool = NeighborhoodWorkerPool(n_jobs=n_jobs, backend=backend)
        self.n_jobs = self.pool.n_workers
        self.chunk_size = chunk_size
        self.backend = backend
        self.verbose = verbose

    def get_params(self) -> dict:
        params = super().get_params()
        params.update({
            'n_jobs': self.n_jobs,
            'chunk_size': self.chunk_size,
            'backend': self.backend
        })
        return params

    def _neighborhoods(self, points: Sequence, duplicates: List[int]) -> NeighborFunc:
        active = active_mask(len(points), duplicates)

        partitions = partition_indices(len(points), self.chunk_size)
        if self.verbose:
            print(f"使用 {self.n_jobs} 个{self.backend}工作者计算 {len(partitions)} 个数据块的邻域...")

        all_neighbors = self.pool.compute_neighborhoods(
            points, partitions, self.eps, self._distance, active=active
        )

        return all_neighbors.__getitem__

    def get_performance_stats(self) -> dict:
        """
        获取性能统计信息

        Returns:
            性能统计字典
        """
        stats = self.get_cluster_stats()
        stats.update(self.pool.get_stats())
        return stats
