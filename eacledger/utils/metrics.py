"""Prometheus metrics for attachments and label resolution."""

from prometheus_client import Counter

document_uploads_total = Counter(
    "document_uploads_total",
    "Document create attempts by outcome",
    ["outcome"],
)

document_compensations_total = Counter(
    "document_compensations_total",
    "Compensating object deletes after a failed metadata insert",
    ["outcome"],
)

target_label_failures_total = Counter(
    "target_label_failures_total",
    "Event target label loads that failed and were skipped",
    ["target"],
)


class PrometheusDocumentMetrics:
    """Prometheus-based attachment metrics implementation."""

    def record_upload(self, outcome: str) -> None:
        """Count a create_document outcome (success, storage_error, insert_error)."""
        document_uploads_total.labels(outcome=outcome).inc()

    def record_compensation(self, outcome: str) -> None:
        """Count a compensating delete (success, failed)."""
        document_compensations_total.labels(outcome=outcome).inc()

    def record_label_failure(self, target: str) -> None:
        """Count a failed target label load."""
        target_label_failures_total.labels(target=target).inc()
