"""
Prometheus metrics module for SafeSeat.

Exposes service-operation timings fed by @measure_operation plus a handful of
booking-domain counters. Everything is registered on a dedicated registry so
tests and multiple app instances never collide with the default one.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Create a custom registry to avoid conflicts with default metrics
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "safeseat_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "safeseat_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "safeseat_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

bookings_created_total = Counter(
    "safeseat_bookings_created_total",
    "Bookings created",
    registry=REGISTRY,
)

booking_status_changes_total = Counter(
    "safeseat_booking_status_changes_total",
    "Booking status transitions",
    ["from_status", "to_status"],
    registry=REGISTRY,
)

slot_conflicts_total = Counter(
    "safeseat_slot_conflicts_total",
    "Booking attempts rejected because the slot was taken",
    ["detected_by"],  # precheck | constraint
    registry=REGISTRY,
)

audit_write_failures_total = Counter(
    "safeseat_audit_write_failures_total",
    "Audit entries that could not be written after all retries",
    ["action"],
    registry=REGISTRY,
)

notification_failures_total = Counter(
    "safeseat_notification_failures_total",
    "Notifications dropped because the sink raised",
    ["type"],
    registry=REGISTRY,
)

payout_requests_total = Counter(
    "safeseat_payout_requests_total",
    "Payout requests by outcome",
    ["status"],  # created | rejected
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade so callers never touch metric objects directly."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_booking_created() -> None:
        bookings_created_total.inc()

    @staticmethod
    def record_status_change(from_status: str, to_status: str) -> None:
        booking_status_changes_total.labels(from_status=from_status, to_status=to_status).inc()

    @staticmethod
    def record_slot_conflict(detected_by: str) -> None:
        slot_conflicts_total.labels(detected_by=detected_by).inc()

    @staticmethod
    def record_audit_write_failure(action: str) -> None:
        audit_write_failures_total.labels(action=action).inc()

    @staticmethod
    def record_notification_failure(type_tag: str) -> None:
        notification_failures_total.labels(type=type_tag).inc()

    @staticmethod
    def record_payout_request(status: str) -> None:
        payout_requests_total.labels(status=status).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Render the registry in Prometheus exposition format."""
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
