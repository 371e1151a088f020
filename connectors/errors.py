"""
Error taxonomy for the connection / import lifecycle.

Every error carries a short machine ``code`` (used in OAuth redirect query
strings as ``<provider>_<code>``), a human-readable ``message`` and the HTTP
status used when it is rendered as a ``{"error": message}`` body.
"""

from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    code = "error"
    status_code = 400
    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigMissingError(DashboardError):
    code = "not_configured"
    status_code = 503
    default_message = "This integration is not configured. Please contact support."


class AuthorizationDeniedError(DashboardError):
    code = "auth_failed"
    status_code = 400
    default_message = "Authorization was not granted."


class TokenExchangeFailedError(DashboardError):
    code = "token_exchange_failed"
    status_code = 502
    default_message = "Could not exchange authorization code for an access token."


class UnauthenticatedError(DashboardError):
    code = "unauthenticated"
    status_code = 401
    default_message = "You must be logged in."


class NotConnectedError(DashboardError):
    code = "not_connected"
    status_code = 409
    default_message = "Connection not found. Please reconnect."


class NotConfiguredError(DashboardError):
    code = "not_configured_import"
    status_code = 409
    default_message = "Data import has not been configured yet."


class ConfigurationValidationError(DashboardError):
    code = "invalid_configuration"
    status_code = 422
    default_message = "Invalid import configuration."


class ImportFailedError(DashboardError):
    code = "import_failed"
    status_code = 502

    def __init__(self, metric: str, message: Optional[str] = None):
        self.metric = metric
        super().__init__(message or f"Failed to import data for {metric}.")


class BackendUnavailableError(DashboardError):
    code = "storage_unavailable"
    status_code = 503
    default_message = "Database connection is not available."


class UnknownProviderError(DashboardError):
    code = "unknown_provider"
    status_code = 404

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Provider '{provider}' not found.")
