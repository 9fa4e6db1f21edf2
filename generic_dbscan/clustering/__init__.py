"""
聚类算法模块
包含DBSCAN算法的串行和并行实现
"""

from .dbscan_sequential import DBSCANSequential, cluster, expand_clusters
from .dbscan_parallel import DBSCANParallel
from .labels import ClusterResult, LabelStore, NOISE, UNVISITED
from .metrics import Proximity, compute_distance_matrix, get_metric
from .utils import check_identities, region_query, validate_parameters

__all__ = [
    'DBSCANSequential',
    'DBSCANParallel',
    'cluster',
    'expand_clusters',
    'ClusterResult',
    'LabelStore',
    'NOISE',
    'UNVISITED',
    'Proximity',
    'compute_distance_matrix',
    'get_metric',
    'check_identities',
    'region_query',
    'validate_parameters'
]
