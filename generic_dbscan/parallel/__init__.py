"""
并行计算模块
邻域查询的并行执行
"""

from .partitioning import Partition, partition_indices
from .workers import NeighborhoodWorkerPool, resolve_n_jobs

__all__ = [
    'Partition',
    'partition_indices',
    'NeighborhoodWorkerPool',
    'resolve_n_jobs'
]
