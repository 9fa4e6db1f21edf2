"""
Property Tests for DBSCAN partitions

Checks the labels produced by the engine against brute-force definitions of
core, border and noise points, against connected components for
min_samples=1, and against scikit-learn on well separated data.
"""

import numpy as np
import pytest
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components
from sklearn.cluster import DBSCAN as SklearnDBSCAN
from sklearn.metrics import adjusted_rand_score

from generic_dbscan import DBSCANSequential, cluster
from generic_dbscan.clustering.labels import NOISE


def pairwise(points: np.ndarray) -> np.ndarray:
    diff = points[:, np.newaxis, :] - points[np.newaxis, :, :]
    return np.sqrt(np.sum(diff ** 2, axis=2))


def as_partition(labels: np.ndarray) -> set:
    """Grouping of indices, independent of cluster numbering."""
    groups = {}
    for idx, label in enumerate(labels):
        groups.setdefault(int(label), set()).add(idx)
    return {frozenset(members) for members in groups.values()}


PARAMS = [(0.6, 4), (1.0, 6), (0.4, 2), (1.5, 1)]


@pytest.mark.parametrize("eps,min_samples", PARAMS)
class TestPartitionProperties:
    """Invariants that hold for any input."""

    def test_completeness(self, random_points, eps, min_samples):
        result = cluster(random_points, eps, min_samples)

        members = [p for group in result.clusters().values() for p in group]
        assert len(members) == len(random_points)
        assert set(result.labels.tolist()) <= set(range(result.n_clusters)) | {NOISE}
        assert result.n_noise + sum(result.cluster_sizes().values()) == len(random_points)

    def test_core_points(self, random_points, eps, min_samples):
        result = cluster(random_points, eps, min_samples)
        sizes = np.sum(pairwise(random_points) <= eps, axis=1)

        assert np.array_equal(result.core_mask, sizes >= min_samples)
        assert np.all(result.labels[result.core_mask] >= 0)

    def test_noise_points(self, random_points, eps, min_samples):
        result = cluster(random_points, eps, min_samples)
        dist = pairwise(random_points)
        sizes = np.sum(dist <= eps, axis=1)

        for idx in np.flatnonzero(result.labels == NOISE):
            assert sizes[idx] < min_samples
            near_core = (dist[idx] <= eps) & result.core_mask
            assert not np.any(near_core)

    def test_border_points_touch_own_cluster(self, random_points, eps, min_samples):
        result = cluster(random_points, eps, min_samples)
        dist = pairwise(random_points)

        for idx in np.flatnonzero((result.labels >= 0) & ~result.core_mask):
            same_cluster_cores = result.core_mask & (result.labels == result.labels[idx])
            assert np.any((dist[idx] <= eps) & same_cluster_cores)

    def test_core_points_of_one_cluster_are_connected(self, random_points, eps, min_samples):
        result = cluster(random_points, eps, min_samples)
        dist = pairwise(random_points)

        core_idx = np.flatnonzero(result.core_mask)
        graph = csr_matrix(dist[np.ix_(core_idx, core_idx)] <= eps)
        _, components = connected_components(graph, directed=False)

        # cores in the same eps-connected component share a label and vice versa
        assert as_partition(components) == as_partition(result.labels[core_idx])

    def test_determinism(self, random_points, eps, min_samples):
        first = DBSCANSequential(eps, min_samples).fit(random_points)
        second = DBSCANSequential(eps, min_samples).fit(random_points)
        assert np.array_equal(first.labels_, second.labels_)


class TestMinSamplesOne:
    """With min_samples=1 clusters are the connected components of the eps-graph."""

    @pytest.mark.parametrize("eps", [0.3, 0.7, 1.2])
    def test_connected_components(self, random_points, eps):
        result = cluster(random_points, eps, 1)

        graph = csr_matrix(pairwise(random_points) <= eps)
        n_components, components = connected_components(graph, directed=False)

        assert result.n_noise == 0
        assert result.n_clusters == n_components
        assert as_partition(result.labels) == as_partition(components)


class TestAgainstSklearn:
    """Well separated blobs leave no room for border tie-breaks."""

    def test_same_partition(self, blob_points):
        ours = DBSCANSequential(1.0, 5).fit(blob_points)
        reference = SklearnDBSCAN(eps=1.0, min_samples=5).fit(blob_points)

        assert ours.get_cluster_stats()['n_clusters'] == 3
        assert adjusted_rand_score(reference.labels_, ours.labels_) == pytest.approx(1.0)
        assert np.array_equal(ours.labels_ == NOISE, reference.labels_ == -1)
        assert sorted(ours.core_sample_indices_) == sorted(reference.core_sample_indices_)
