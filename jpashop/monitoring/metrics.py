"""
Prometheus Metrics

Defines and exports metrics for monitoring the order API.
"""

import structlog
from prometheus_client import Counter, Histogram, Info

logger = structlog.get_logger()

# Singleton metrics instance
_metrics: "Metrics | None" = None


class Metrics:
    """
    Prometheus metrics for the order API.

    Tracks:
    - HTTP request latency and counts
    - SQL statements issued per request (the N+1 signal)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""
        self.http_requests_total = Counter(
            "jpashop_http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
        )

        self.http_request_duration_seconds = Histogram(
            "jpashop_http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
        )

        self.db_statements_per_request = Histogram(
            "jpashop_db_statements_per_request",
            "SQL statements executed while serving one request",
            ["endpoint"],
            buckets=[0, 1, 2, 3, 5, 10, 25, 50, 100, 250, 1000],
        )

        self.build_info = Info(
            "jpashop_build_info",
            "Build information",
        )

        logger.info("Prometheus metrics initialized")

    def set_build_info(self, version: str, commit: str | None = None) -> None:
        """Set build information."""
        self.build_info.info({
            "version": version,
            "commit": commit or "unknown",
        })

    def track_http_request(
        self,
        method: str,
        endpoint: str,
        status_code: int,
        duration: float,
    ) -> None:
        """Track an HTTP request."""
        self.http_requests_total.labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code),
        ).inc()

        self.http_request_duration_seconds.labels(
            method=method,
            endpoint=endpoint,
        ).observe(duration)

    def track_db_statements(self, endpoint: str, count: int) -> None:
        self.db_statements_per_request.labels(endpoint=endpoint).observe(count)


def get_metrics() -> Metrics:
    """Get or create the singleton metrics instance."""
    global _metrics
    if _metrics is None:
        _metrics = Metrics()
    return _metrics
