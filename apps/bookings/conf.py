"""Reservation settings.

Read once from ``settings.RESERVATIONS`` and passed explicitly to the
reservation manager.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings  # type: ignore
from django.core.exceptions import ImproperlyConfigured  # type: ignore

DEFAULTS = {
    "TRANSIENT_RETRY_ATTEMPTS": 3,
    "TRANSIENT_RETRY_BACKOFF_SECONDS": 0.05,
}


@dataclass(frozen=True)
class ReservationSettings:
    transient_retry_attempts: int = DEFAULTS["TRANSIENT_RETRY_ATTEMPTS"]
    transient_retry_backoff_seconds: float = DEFAULTS["TRANSIENT_RETRY_BACKOFF_SECONDS"]

    def __post_init__(self) -> None:
        if self.transient_retry_attempts < 1:
            raise ImproperlyConfigured("RESERVATIONS['TRANSIENT_RETRY_ATTEMPTS'] must be at least 1.")
        if self.transient_retry_backoff_seconds < 0:
            raise ImproperlyConfigured("RESERVATIONS['TRANSIENT_RETRY_BACKOFF_SECONDS'] cannot be negative.")

    @classmethod
    def from_django_settings(cls) -> "ReservationSettings":
        configured = {**DEFAULTS, **getattr(settings, "RESERVATIONS", {})}
        unknown = set(configured) - set(DEFAULTS)
        if unknown:
            raise ImproperlyConfigured(f"Unknown RESERVATIONS keys: {', '.join(sorted(unknown))}")
        return cls(
            transient_retry_attempts=int(configured["TRANSIENT_RETRY_ATTEMPTS"]),
            transient_retry_backoff_seconds=float(configured["TRANSIENT_RETRY_BACKOFF_SECONDS"]),
        )
