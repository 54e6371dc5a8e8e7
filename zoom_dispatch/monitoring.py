"""
Prometheus metrics for dispatched Zoom requests and throttle decisions.
"""
from prometheus_client import Counter, Histogram, generate_latest, REGISTRY


# Metrics
zoom_requests_total = Counter(
    'zoom_requests_total',
    'Total number of requests sent to the Zoom API',
    ['method', 'status']
)

zoom_request_duration = Histogram(
    'zoom_request_duration_seconds',
    'Duration of Zoom API requests, transport time only',
    ['method']
)

throttle_decisions_total = Counter(
    'zoom_throttle_decisions_total',
    'Admission decisions taken by the request governor',
    ['decision']
)

errors_total = Counter(
    'zoom_errors_total',
    'Total number of client errors by type',
    ['error_type']
)


def status_label(status_code: int) -> str:
    """Collapse a status code into a low-cardinality label like '2xx'."""
    return f"{status_code // 100}xx"


def get_metrics() -> bytes:
    """
    Get current metrics in Prometheus format.

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def record_error(error_type: str):
    """
    Record an error occurrence.

    Args:
        error_type: Type of error (e.g., 'ThrottledError')
    """
    errors_total.labels(error_type=error_type).inc()
