"""
聚类结果可视化
二维点聚类结果的散点图
"""

from typing import Any, Callable, Optional, Sequence, Tuple

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from scipy.spatial import ConvexHull, QhullError

from ..clustering.labels import NOISE, ClusterResult
from ..exceptions import InvalidParameterError


def to_xy(points: Sequence, coords: Optional[Callable[[Any], Tuple[float, float]]] = None) -> np.ndarray:
    """
    把点转换为(n, 2)的坐标数组

    Args:
        points: 点序列
        coords: 把单个点映射为(x, y)的函数，点本身不是数值对时需要提供
    """
    if coords is not None:
        xy = np.array([coords(p) for p in points], dtype=np.float64)
    else:
        xy = np.asarray(points, dtype=np.float64)

    if len(xy) == 0:
        return np.empty((0, 2))
    if xy.ndim != 2 or xy.shape[1] != 2:
        raise InvalidParameterError(f"只能绘制二维点，得到形状: {xy.shape}")
    return xy


class ClusterVisualizer:
    """聚类可视化器"""

    def __init__(self, figsize: Tuple[int, int] = (12, 10),
                 colormap: str = 'tab20'):
        """
        初始化可视化器

        Args:
            figsize: 图形大小
            colormap: 颜色映射
        """
        self.figsize = figsize
        self.colormap = colormap
        self.cmap = matplotlib.colormaps[colormap]

    def plot_clusters_2d(self, points: Sequence, labels: np.ndarray,
                         title: str = "DBSCAN聚类结果",
                         save_path: Optional[str] = None,
                         show_noise: bool = True,
                         show_hulls: bool = True,
                         coords: Optional[Callable[[Any], Tuple[float, float]]] = None,
                         alpha: float = 0.6,
                         s: float = 10.0) -> plt.Figure:
        """
        绘制2D聚类结果

        Args:
            points: 点数据，可转换为形状(n, 2)的数组
            labels: 聚类标签，形状为(n,)，噪声为-1
            title: 图表标题
            save_path: 保存路径
            show_noise: 是否显示噪声点
            show_hulls: 是否为点数大于3的聚类绘制凸包
            coords: 点到(x, y)的映射函数（可选）
            alpha: 透明度
            s: 点的大小

        Returns:
            matplotlib图形对象
        """
        xy = to_xy(points, coords)
        labels = np.asarray(labels)
        if len(labels) != len(xy):
            raise InvalidParameterError(f"标签数量 {len(labels)} 与点数量 {len(xy)} 不一致")

        fig, ax = plt.subplots(figsize=self.figsize)

        cluster_ids = [label for label in np.unique(labels) if label >= 0]
        colors = self.cmap(np.linspace(0, 1, max(len(cluster_ids), 1)))

        for i, label in enumerate(cluster_ids):
            cluster_points = xy[labels == label]
            color = colors[i]

            ax.scatter(cluster_points[:, 0], cluster_points[:, 1],
                       c=[color], label=f'聚类 {label}',
                       marker='o', s=s, alpha=alpha, edgecolors='w', linewidths=0.5)

            if show_hulls and len(cluster_points) > 3:
                self._plot_hull(ax, cluster_points, color)

        noise_mask = labels == NOISE
        if show_noise and np.any(noise_mask):
            noise_points = xy[noise_mask]
            ax.scatter(noise_points[:, 0], noise_points[:, 1],
                       c='gray', label='噪声点', marker='x',
                       s=s * 0.5, alpha=alpha * 0.5)

        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_xlabel('X坐标')
        ax.set_ylabel('Y坐标')
        ax.grid(True, alpha=0.3)

        # 只显示前15个图例项以避免过于拥挤
        handles, labels_legend = ax.get_legend_handles_labels()
        if handles:
            ax.legend(handles[:15], labels_legend[:15], loc='upper right', fontsize=8)

        stats_text = f'聚类数: {len(cluster_ids)}\n噪声点: {int(np.sum(noise_mask))}\n总点数: {len(xy)}'
        ax.text(0.02, 0.98, stats_text, transform=ax.transAxes,
                fontsize=10, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.8))

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"聚类图已保存到: {save_path}")

        return fig

    @staticmethod
    def _plot_hull(ax, cluster_points: np.ndarray, color) -> None:
        """绘制聚类凸包；共线等退化情况跳过"""
        try:
            hull = ConvexHull(cluster_points)
        except QhullError:
            return

        hull_points = cluster_points[hull.vertices]
        hull_points = np.vstack([hull_points, hull_points[0]])  # 闭合多边形
        ax.plot(hull_points[:, 0], hull_points[:, 1],
                color=color, alpha=0.3, linewidth=1, linestyle='--')


def plot_result(result: ClusterResult, title: str = "DBSCAN聚类结果",
                save_path: Optional[str] = None,
                coords: Optional[Callable[[Any], Tuple[float, float]]] = None,
                **kwargs) -> plt.Figure:
    """
    绘制ClusterResult（被忽略的重复点不绘制）

    Args:
        result: 聚类结果
        title: 图表标题
        save_path: 保存路径
        coords: 点到(x, y)的映射函数（可选）
        **kwargs: 传给ClusterVisualizer的参数

    Returns:
        matplotlib图形对象
    """
    keep = [idx for idx in range(len(result)) if result.labels[idx] >= NOISE]
    points = [result.points[idx] for idx in keep]
    labels = result.labels[keep]

    visualizer = ClusterVisualizer(**kwargs)
    return visualizer.plot_clusters_2d(points, labels, title=title,
                                       save_path=save_path, coords=coords)
