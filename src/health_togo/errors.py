"""Errores reportados por el almacén de salud y por las funciones premium."""

from __future__ import annotations


class HealthStoreError(Exception):
    """Base class for failures reported while reading the health store."""

    default_message = "Health data request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class StoreUnavailable(HealthStoreError):
    default_message = "Health data not available on this device"


class MetricUnsupported(HealthStoreError):
    default_message = "Data type not available"


class AuthorizationDenied(HealthStoreError):
    default_message = "Authorization denied"


class EmptyResultSet(HealthStoreError):
    default_message = "No results returned"


class NoSamplesFound(HealthStoreError):
    default_message = "No data available"


class PremiumRequired(Exception):
    """Raised when a premium-only feature is used without the entitlement."""

    CSV_EXPORT = (
        "CSV export is only available for premium users. Upgrade to access this "
        "feature and export your health data."
    )
    ALL_DATA = (
        "Fetching all historical data is only available for premium users. "
        "Upgrade to access your complete health history."
    )
