"""Prometheus metrics for payment activity, schedule generation and HTTP latency"""

from prometheus_client import Counter, Histogram

# Payment metrics
payments_recorded_counter = Counter(
    "payment_calendar_payments_recorded_total",
    "Payments recorded (inserted or overwritten)",
    ["kind"],  # loan | bill
)

payments_undone_counter = Counter(
    "payment_calendar_payments_undone_total",
    "Payments removed by undo",
    ["kind"],
)

payment_order_rejections_counter = Counter(
    "payment_calendar_payment_order_rejections_total",
    "Loan payments rejected because an earlier installment is unpaid",
)

# Schedule generation
schedule_generation_histogram = Histogram(
    "payment_calendar_schedule_generation_seconds",
    "Time spent projecting schedules",
    ["view"],  # loan | bill | summary | calendar
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payment(kind: str, undone: bool = False) -> None:
    """Count a recorded or undone payment"""
    if undone:
        payments_undone_counter.labels(kind=kind).inc()
    else:
        payments_recorded_counter.labels(kind=kind).inc()
