"""
Unit Tests for the label store and result view (generic_dbscan/clustering/labels.py)
"""

import numpy as np
import pandas as pd
import pytest

from generic_dbscan.clustering.labels import NOISE, UNVISITED, ClusterResult, LabelStore


class TestLabelStore:
    """Test LabelStore transitions."""

    def test_initial_state(self):
        store = LabelStore(3)
        assert len(store) == 3
        assert all(store.is_unvisited(i) for i in range(3))
        assert store.n_clusters == 0

    def test_cluster_ids_are_sequential(self):
        store = LabelStore(0)
        assert [store.new_cluster() for _ in range(3)] == [0, 1, 2]
        assert store.n_clusters == 3

    def test_noise_upgrade_once(self):
        store = LabelStore(2)
        store.mark_noise(0)
        assert store.is_noise(0)

        assert store.upgrade_noise(0, 5) is True
        assert store.labels[0] == 5
        # already a member: no reassignment
        assert store.upgrade_noise(0, 6) is False
        assert store.labels[0] == 5

    def test_upgrade_ignores_unvisited(self):
        store = LabelStore(1)
        assert store.upgrade_noise(0, 0) is False
        assert store.labels[0] == UNVISITED

    def test_visited_points_cannot_be_relabelled(self):
        store = LabelStore(2)
        store.assign(0, 0)
        store.mark_noise(1)
        with pytest.raises(RuntimeError):
            store.assign(0, 1)
        with pytest.raises(RuntimeError):
            store.mark_noise(1)

    def test_freeze(self):
        store = LabelStore(2)
        store.mark_noise(0)
        store.assign(1, 0)
        labels = store.freeze()
        with pytest.raises(ValueError):
            labels[0] = 3

    def test_freeze_rejects_unvisited(self):
        store = LabelStore(2)
        store.mark_noise(0)
        with pytest.raises(RuntimeError):
            store.freeze()

    def test_freeze_allows_excluded(self):
        store = LabelStore(2)
        store.mark_noise(0)
        labels = store.freeze(excluded=[1])
        assert labels[1] == UNVISITED


class TestClusterResult:
    """Test the result view."""

    @pytest.fixture
    def result(self):
        points = ['a', 'b', 'c', 'd', 'e', 'f']
        labels = np.array([1, 0, NOISE, 0, 1, UNVISITED])
        core_mask = np.array([True, True, False, False, False, False])
        return ClusterResult(points, labels, core_mask, n_clusters=2,
                             duplicates=[5], execution_time=0.25)

    def test_clusters(self, result):
        assert result.clusters() == {0: ['b', 'd'], 1: ['a', 'e'], None: ['c']}

    def test_cluster_keys_in_discovery_order(self, result):
        assert list(result.clusters()) == [0, 1, None]

    def test_clusters_is_repeatable(self, result):
        assert result.clusters() == result.clusters()
        assert result.labels.tolist() == [1, 0, NOISE, 0, 1, UNVISITED]

    def test_no_noise_key_without_noise(self):
        result = ClusterResult(['a'], np.array([0]), np.array([True]), n_clusters=1)
        assert result.clusters() == {0: ['a']}

    def test_empty(self):
        result = ClusterResult([], np.array([], dtype=np.int64), np.array([], dtype=bool), n_clusters=0)
        assert result.clusters() == {}
        assert result.noise() == []
        assert result.n_noise == 0

    def test_noise_and_lists(self, result):
        assert result.noise() == ['c']
        assert result.cluster_list() == [['b', 'd'], ['a', 'e']]

    def test_core(self, result):
        assert result.core_sample_indices.tolist() == [0, 1]
        assert result.is_core(0)
        assert not result.is_core(3)

    def test_stats(self, result):
        stats = result.get_cluster_stats()
        assert stats == {
            'n_clusters': 2,
            'n_noise': 1,
            'n_core_points': 2,
            'n_duplicates': 1,
            'execution_time': 0.25,
            'cluster_sizes': {0: 2, 1: 2},
        }

    def test_to_dataframe(self, result):
        df = result.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['index', 'point', 'label', 'is_core']
        # ignored duplicate excluded
        assert df['index'].tolist() == [0, 1, 2, 3, 4]
        assert df['label'].tolist() == [1, 0, -1, 0, 1]
        assert df['is_core'].tolist() == [True, True, False, False, False]

    def test_repr(self, result):
        assert repr(result) == "ClusterResult(n_points=6, n_clusters=2, n_noise=1)"
