"""
数据划分
把点的索引范围切分为连续的数据块，分发给并行工作者
"""

from dataclasses import dataclass
from typing import List

from ..exceptions import InvalidParameterError


@dataclass(frozen=True)
class Partition:
    """连续的索引区间 [start, end)"""
    id: int
    start: int
    end: int

    @property
    def size(self) -> int:
        return self.end - self.start

    def indices(self) -> range:
        return range(self.start, self.end)


def partition_indices(n_samples: int, chunk_size: int) -> List[Partition]:
    """
    将数据划分为多个块

    Args:
        n_samples: 总样本数
        chunk_size: 每个数据块的最大大小

    Returns:
        数据块列表，按索引顺序排列；n_samples为0时返回空列表
    """
    if chunk_size < 1:
        raise InvalidParameterError(f"chunk_size必须不小于1，得到: {chunk_size}")

    partitions = []
    for part_id, start_idx in enumerate(range(0, n_samples, chunk_size)):
        end_idx = min(start_idx + chunk_size, n_samples)
        partitions.append(Partition(id=part_id, start=start_idx, end=end_idx))
    return partitions
