"""
并行工作者管理
并发计算所有点的eps邻域
"""

import multiprocessing as mp
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..clustering.metrics import DistanceFunc
from ..clustering.utils import region_query
from ..exceptions import InvalidParameterError
from .partitioning import Partition

BACKENDS = ('thread', 'process')


def resolve_n_jobs(n_jobs: int) -> int:
    """-1表示使用所有CPU核心，其余值不能超过CPU核心数"""
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, int):
        raise InvalidParameterError(f"n_jobs必须是整数，得到: {n_jobs!r}")
    if n_jobs == -1:
        return mp.cpu_count()
    if n_jobs < 1:
        raise InvalidParameterError(f"n_jobs必须是-1或正整数，得到: {n_jobs}")
    return min(n_jobs, mp.cpu_count())


def _neighbors_chunk(points: Sequence, partition: Partition, eps: float,
                     distance: DistanceFunc,
                     active: Optional[np.ndarray]) -> List[List[int]]:
    """
    处理一个数据块的邻居查找（工作者函数）

    Returns:
        数据块内每个点的邻域索引列表；不活跃的点返回空列表
    """
    chunk_neighbors = []
    for i in partition.indices():
        if active is not None and not active[i]:
            chunk_neighbors.append([])
            continue
        chunk_neighbors.append(region_query(points, i, eps, distance=distance, active=active))
    return chunk_neighbors


class NeighborhoodWorkerPool:
    """邻域查询的工作者池"""

    def __init__(self, n_jobs: int = -1, backend: str = 'thread'):
        """
        Args:
            n_jobs: 并行工作者数，-1表示使用所有CPU核心
            backend: 'thread'（线程池）或'process'（进程池，点和距离函数必须可pickle）
        """
        if backend not in BACKENDS:
            raise InvalidParameterError(f"backend必须是{BACKENDS}之一，得到: {backend!r}")
        self.n_workers = resolve_n_jobs(n_jobs)
        self.backend = backend

        self.n_tasks_completed = 0
        self.total_processing_time = 0.0

    def _executor(self):
        if self.backend == 'process':
            return ProcessPoolExecutor(max_workers=self.n_workers)
        return ThreadPoolExecutor(max_workers=self.n_workers)

    def compute_neighborhoods(self, points: Sequence, partitions: List[Partition],
                              eps: float, distance: DistanceFunc,
                              active: Optional[np.ndarray] = None) -> List[List[int]]:
        """
        并行计算所有点的邻域

        Args:
            points: 所有点
            partitions: 数据块列表，需覆盖全部索引且按顺序排列
            eps: 邻域半径
            distance: 距离函数
            active: 参与查询的点的布尔掩码（可选）

        Returns:
            按点索引排列的邻域列表
        """
        if not partitions:
            return []

        start_time = time.time()

        with self._executor() as executor:
            futures = [
                executor.submit(_neighbors_chunk, points, partition, eps, distance, active)
                for partition in partitions
            ]
            # 按提交顺序收集，保证结果与索引一一对应
            all_neighbors: List[List[int]] = []
            for future in futures:
                all_neighbors.extend(future.result())

        self.n_tasks_completed += len(partitions)
        self.total_processing_time += time.time() - start_time

        return all_neighbors

    def get_stats(self) -> Dict[str, Any]:
        """
        获取工作者池统计信息

        Returns:
            统计信息字典
        """
        return {
            'n_workers': self.n_workers,
            'backend': self.backend,
            'n_tasks_completed': self.n_tasks_completed,
            'total_processing_time': self.total_processing_time
        }
