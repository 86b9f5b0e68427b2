"""
Monitoring Module

Provides Prometheus metrics for the API and the database layer.
"""

from jpashop.monitoring.metrics import (
    Metrics,
    get_metrics,
)

__all__ = [
    "Metrics",
    "get_metrics",
]
