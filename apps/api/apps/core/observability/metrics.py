"""
Prometheus metrics for the POS core.

All application metrics live on a single registry object so that call
sites read ``metrics.sales_recorded_total.labels(...).inc()``.
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _setup_metrics(self):
        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['path', 'method', 'status']
        )

        self.http_request_duration_seconds = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['path', 'method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
        )

        self.exceptions_total = Counter(
            'exceptions_total',
            'Total exceptions',
            ['exception_type', 'location']
        )

        # ===================================================================
        # Sales Metrics
        # ===================================================================
        self.sales_recorded_total = Counter(
            'sales_recorded_total',
            'Sale recording attempts by outcome',
            ['result', 'sale_type']  # sale_type: RETAIL|WHOLESALE|unknown
        )

        self.sales_record_duration_seconds = Histogram(
            'sales_record_duration_seconds',
            'Duration of a full record_sale call including retries',
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
        )

        self.sale_conflict_retries_total = Counter(
            'sale_conflict_retries_total',
            'Sale attempts retried after an optimistic concurrency conflict'
        )

        # ===================================================================
        # Stock / Catalog Metrics
        # ===================================================================
        self.stock_changes_total = Counter(
            'stock_changes_total',
            'Stock ledger entries written',
            ['change_type']
        )

        self.price_corrections_total = Counter(
            'price_corrections_total',
            'Stored price corrections during reconciliation',
            ['result']  # corrected, failed
        )

    def track_duration(self, histogram_metric):
        """
        Decorator to track function duration.

        Usage:
            @metrics.track_duration(metrics.sales_record_duration_seconds)
            def record_sale(...):
                ...
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    histogram_metric.observe(time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics = MetricsRegistry()
