"""Test package for generic-dbscan.

- Unit tests per module (test_metrics.py, test_region_query.py, test_labels.py, ...)
- Property tests against brute-force definitions (test_properties.py)
- Shared fixtures (conftest.py)
"""
