"""
Metrics Collection with Prometheus.

Exposes auth, resource and HTTP metrics for monitoring.
"""

import time
from enum import Enum

from prometheus_client import Counter, Gauge, Histogram, Info

from app.config import settings


class MetricLabels(str, Enum):
    """Standard metric label names."""

    ENDPOINT = "endpoint"
    METHOD = "method"
    STATUS_CODE = "status_code"
    OPERATION = "operation"
    OUTCOME = "outcome"
    RESOURCE = "resource"
    ERROR_TYPE = "error_type"


class FuelPriceMetrics:
    """
    Centralized metrics for the Fuel Price API.

    Covers:
    - HTTP requests (rate, duration, in progress)
    - Registration and login outcomes
    - Token validation outcomes at the authorization gate
    - Resource operations (rate and outcome per resource)
    """

    def __init__(self) -> None:
        """Initialize all Prometheus metrics."""

        # ====================================================================
        # Service Info
        # ====================================================================
        self.service_info = Info(
            "fuelprice_service",
            "Service information",
        )
        self.service_info.info(
            {
                "version": settings.api_version,
                "service_name": settings.service_name,
            }
        )

        # ====================================================================
        # HTTP Metrics
        # ====================================================================
        self.http_requests_total = Counter(
            "fuelprice_http_requests_total",
            "Total HTTP requests",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD, MetricLabels.STATUS_CODE],
        )

        self.http_request_duration_seconds = Histogram(
            "fuelprice_http_request_duration_seconds",
            "HTTP request duration in seconds",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD],
            buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
        )

        self.http_requests_in_progress = Gauge(
            "fuelprice_http_requests_in_progress",
            "Number of HTTP requests currently being processed",
            [MetricLabels.ENDPOINT, MetricLabels.METHOD],
        )

        # ====================================================================
        # Auth Metrics
        # ====================================================================
        self.auth_attempts_total = Counter(
            "fuelprice_auth_attempts_total",
            "Registration and login attempts by outcome",
            [MetricLabels.OPERATION, MetricLabels.OUTCOME],
        )

        self.password_hash_duration_seconds = Histogram(
            "fuelprice_password_hash_duration_seconds",
            "Argon2 hash/verify duration in seconds",
            [MetricLabels.OPERATION],
            buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
        )

        self.token_validations_total = Counter(
            "fuelprice_token_validations_total",
            "Bearer token validations at the authorization gate",
            [MetricLabels.OUTCOME],
        )

        # ====================================================================
        # Resource Metrics
        # ====================================================================
        self.resource_operations_total = Counter(
            "fuelprice_resource_operations_total",
            "Resource operations by resource, operation and outcome",
            [MetricLabels.RESOURCE, MetricLabels.OPERATION, MetricLabels.OUTCOME],
        )

        # ====================================================================
        # Error Metrics
        # ====================================================================
        self.errors_total = Counter(
            "fuelprice_errors_total",
            "Total errors by type",
            [MetricLabels.ERROR_TYPE, MetricLabels.OPERATION],
        )

    # ========================================================================
    # Helper Methods
    # ========================================================================

    def record_http_request(
        self, endpoint: str, method: str, status_code: int, duration: float
    ) -> None:
        """Record HTTP request metrics."""
        self.http_requests_total.labels(
            endpoint=endpoint, method=method, status_code=status_code
        ).inc()
        self.http_request_duration_seconds.labels(endpoint=endpoint, method=method).observe(
            duration
        )

    def record_auth_attempt(self, operation: str, outcome: str) -> None:
        """Record a registration or login outcome (e.g. "success", "wrong_credentials")."""
        self.auth_attempts_total.labels(operation=operation, outcome=outcome).inc()

    def record_token_validation(self, outcome: str) -> None:
        """Record the result of validating a bearer token."""
        self.token_validations_total.labels(outcome=outcome).inc()

    def record_resource_operation(self, resource: str, operation: str, outcome: str) -> None:
        """Record a resource operation outcome."""
        self.resource_operations_total.labels(
            resource=resource, operation=operation, outcome=outcome
        ).inc()

    def record_error(self, error_type: str, operation: str) -> None:
        """Record error occurrence."""
        self.errors_total.labels(error_type=error_type, operation=operation).inc()


# Global metrics instance
metrics = FuelPriceMetrics()


class track_hash_duration:
    """
    Context manager timing a password hash or verify call.

    Usage:
        with track_hash_duration("verify"):
            hasher.verify(stored, secret)
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        self.start_time: float = 0.0

    def __enter__(self) -> "track_hash_duration":
        """Start timing."""
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        """Record duration."""
        duration = time.perf_counter() - self.start_time
        metrics.password_hash_duration_seconds.labels(operation=self.operation).observe(duration)
