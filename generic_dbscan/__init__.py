"""
generic_dbscan
适用于任意定义了距离的点类型的DBSCAN密度聚类
"""

from .clustering import (
    ClusterResult,
    DBSCANParallel,
    DBSCANSequential,
    Proximity,
    cluster,
    region_query,
)
from .exceptions import (
    DBSCANError,
    IdentityCollisionError,
    InvalidParameterError,
    NotFittedError,
)

__version__ = '0.1.0'

__all__ = [
    'ClusterResult',
    'DBSCANParallel',
    'DBSCANSequential',
    'Proximity',
    'cluster',
    'region_query',
    'DBSCANError',
    'IdentityCollisionError',
    'InvalidParameterError',
    'NotFittedError'
]
