"""
可视化模块
聚类结果的可视化
"""

from .plot_clusters import ClusterVisualizer, plot_result, to_xy

__all__ = [
    'ClusterVisualizer',
    'plot_result',
    'to_xy'
]
