"""Prometheus metrics for transaction fan-out, catalog changes, rejections and HTTP latency"""

from prometheus_client import Counter, Histogram

transactions_created_counter = Counter(
    "fintrack_transactions_created_total",
    "Transactions created through the API",
    ["mode"],  # single | split | recurring
)

installments_generated_counter = Counter(
    "fintrack_installments_generated_total",
    "Records persisted through installment expansion",
)

catalog_changes_counter = Counter(
    "fintrack_catalog_changes_total",
    "Account, category and tag writes",
    ["entity", "action"],  # action: created | updated | deleted
)

rejections_counter = Counter(
    "fintrack_request_rejections_total",
    "Requests rejected before or during persistence",
    ["entity", "reason"],  # validation | reference | argument | not_found | persistence
)

request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_transaction_created(installment_count: int, is_recurring: bool) -> None:
    """Count a creation by mode and the number of records it fanned out to"""
    if installment_count <= 1:
        mode = "single"
    elif is_recurring:
        mode = "recurring"
    else:
        mode = "split"

    transactions_created_counter.labels(mode=mode).inc()
    if installment_count > 1:
        installments_generated_counter.inc(installment_count)


def record_catalog_change(entity: str, action: str) -> None:
    catalog_changes_counter.labels(entity=entity, action=action).inc()


def record_rejection(entity: str, reason: str) -> None:
    rejections_counter.labels(entity=entity, reason=reason).inc()
