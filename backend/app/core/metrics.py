"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_operations = Counter(
    'booking_operations_total',
    'Booking operations by outcome',
    ['operation', 'outcome']  # create/update/get, success/not_found/forbidden/error
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Booking operation latency',
    ['operation'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Eligibility engine
eligibility_rejections = Counter(
    'booking_eligibility_rejections_total',
    'Booking requests rejected by a business rule',
    ['reason']  # room_not_found, room_occupied, ticket_not_paid, ...
)

# Room admission gate
admission_requests = Counter(
    'room_admission_requests_total',
    'Room admission gate decisions',
    ['result']  # admitted, rejected
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_operation(operation: str, outcome: str):
    """Record booking operation. Outcome: success, not_found, forbidden, error"""
    booking_operations.labels(operation=operation, outcome=outcome).inc()


def record_rejection(reason: str):
    eligibility_rejections.labels(reason=reason).inc()


def record_admission(admitted: bool):
    """Record admission gate decision."""
    result = "admitted" if admitted else "rejected"
    admission_requests.labels(result=result).inc()
