"""Domain errors shared by the composer, renderer, stores and HTTP layer.

Each error carries the HTTP status it maps to; the handlers registered in
``backend.app.main`` turn them into ``{"detail": ...}`` responses.
"""

from fastapi import status


class InvoiceStudioError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(InvoiceStudioError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class NotFoundError(InvoiceStudioError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(InvoiceStudioError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class DuplicateInvoiceNumberError(ConflictError):
    default_detail = "Invoice number already exists"


class PermissionDeniedError(InvoiceStudioError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not permitted"


class StorageUnavailableError(InvoiceStudioError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Storage unavailable"


class ConfigError(InvoiceStudioError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid configuration"
