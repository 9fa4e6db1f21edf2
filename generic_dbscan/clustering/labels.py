"""
标签存储与结果视图
记录每个点的分类状态，并把最终标签按聚类分组返回
"""

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

UNVISITED = -2
NOISE = -1


class LabelStore:
    """按输入索引记录每个点的标签：UNVISITED、NOISE或聚类ID（>=0）"""

    def __init__(self, n_samples: int):
        self.labels = np.full(n_samples, UNVISITED, dtype=np.int64)
        self.core_mask = np.zeros(n_samples, dtype=bool)
        self.n_clusters = 0

    def __len__(self) -> int:
        return len(self.labels)

    def is_unvisited(self, idx: int) -> bool:
        return self.labels[idx] == UNVISITED

    def is_noise(self, idx: int) -> bool:
        return self.labels[idx] == NOISE

    def new_cluster(self) -> int:
        """分配下一个聚类ID"""
        cluster_id = self.n_clusters
        self.n_clusters += 1
        return cluster_id

    def mark_noise(self, idx: int) -> None:
        if self.labels[idx] != UNVISITED:
            raise RuntimeError(f"点 {idx} 已被访问，不能标记为噪声")
        self.labels[idx] = NOISE

    def assign(self, idx: int, cluster_id: int) -> None:
        if self.labels[idx] != UNVISITED:
            raise RuntimeError(f"点 {idx} 已被访问，不能直接分配到聚类 {cluster_id}")
        self.labels[idx] = cluster_id

    def mark_core(self, idx: int) -> None:
        self.core_mask[idx] = True

    def upgrade_noise(self, idx: int, cluster_id: int) -> bool:
        """
        噪声点被后来发现的核心点密度可达时升级为边界点

        Returns:
            是否发生了升级（只有当前为NOISE的点会升级）
        """
        if self.labels[idx] != NOISE:
            return False
        self.labels[idx] = cluster_id
        return True

    def freeze(self, excluded: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        结束一次运行，返回只读标签数组

        Args:
            excluded: 未参与运行的点（被忽略的重复点），保持UNVISITED
        """
        excluded = set(excluded or ())
        for idx in np.flatnonzero(self.labels == UNVISITED):
            if idx not in excluded:
                raise RuntimeError(f"点 {idx} 在运行结束时仍未访问")

        self.labels.setflags(write=False)
        self.core_mask.setflags(write=False)
        return self.labels


class ClusterResult:
    """一次DBSCAN运行的只读结果"""

    def __init__(self, points: Sequence, labels: np.ndarray, core_mask: np.ndarray,
                 n_clusters: int, duplicates: Optional[List[int]] = None,
                 execution_time: float = 0.0):
        self.points = points
        self.labels = labels
        self.core_mask = core_mask
        self.n_clusters = n_clusters
        self.duplicates = list(duplicates or [])
        self.execution_time = execution_time

    def __len__(self) -> int:
        return len(self.labels)

    def __repr__(self) -> str:
        return (f"ClusterResult(n_points={len(self)}, n_clusters={self.n_clusters}, "
                f"n_noise={self.n_noise})")

    @property
    def n_noise(self) -> int:
        return int(np.sum(self.labels == NOISE))

    @property
    def core_sample_indices(self) -> np.ndarray:
        return np.flatnonzero(self.core_mask)

    def is_core(self, idx: int) -> bool:
        return bool(self.core_mask[idx])

    def clusters(self) -> Dict[Optional[int], List[Any]]:
        """
        按聚类分组返回点

        Returns:
            字典：键为聚类ID（按发现顺序），噪声点的键为None；
            每组内的点保持输入顺序。空输入返回空字典。
        """
        groups: Dict[Optional[int], List[Any]] = {
            cluster_id: [] for cluster_id in range(self.n_clusters)
        }
        noise = []

        for idx, label in enumerate(self.labels):
            if label == NOISE:
                noise.append(self.points[idx])
            elif label >= 0:
                groups[int(label)].append(self.points[idx])

        if noise:
            groups[None] = noise

        return groups

    def cluster_list(self) -> List[List[Any]]:
        """所有聚类的成员列表（不含噪声）"""
        return [members for cluster_id, members in self.clusters().items()
                if cluster_id is not None]

    def noise(self) -> List[Any]:
        return [self.points[idx] for idx in np.flatnonzero(self.labels == NOISE)]

    def cluster_sizes(self) -> Dict[int, int]:
        return {cluster_id: int(np.sum(self.labels == cluster_id))
                for cluster_id in range(self.n_clusters)}

    def get_cluster_stats(self) -> dict:
        """
        获取聚类统计信息

        Returns:
            包含聚类统计信息的字典
        """
        return {
            'n_clusters': self.n_clusters,
            'n_noise': self.n_noise,
            'n_core_points': int(np.sum(self.core_mask)),
            'n_duplicates': len(self.duplicates),
            'execution_time': self.execution_time,
            'cluster_sizes': self.cluster_sizes()
        }

    def to_dataframe(self) -> pd.DataFrame:
        """
        转换为DataFrame，每行一个点

        列：index、point、label（噪声为-1）、is_core。被忽略的重复点不包含在内。
        """
        rows = [idx for idx in range(len(self.labels)) if self.labels[idx] != UNVISITED]
        return pd.DataFrame({
            'index': rows,
            'point': [self.points[idx] for idx in rows],
            'label': self.labels[rows],
            'is_core': self.core_mask[rows],
        })
