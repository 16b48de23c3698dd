"""
Domain exceptions.

Raised by entities, services and use cases; the API layer maps each class
to an HTTP status and renders `to_dict()` as the error body.
"""

from typing import Any


class DomainException(Exception):
    """
    Base class of checkout errors.

    Attributes:
        message: Text shown to the buyer
        code: Stable machine-readable code
        details: Extra context, JSON serializable
    """

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": True, "message": self.message, "code": self.code, "details": self.details}


class ValidationException(DomainException):
    """Input or value object rejected. `field` names the offending input when known."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, details: dict[str, Any] | None = None):
        self.field = field
        context = dict(details or {})
        if field:
            context["field"] = field
        super().__init__(message, details=context)


class EntityNotFoundException(DomainException):
    code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any, message: str | None = None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity_type} {entity_id} not found",
            details={"entity_type": entity_type, "entity_id": str(entity_id)},
        )


class BusinessRuleViolationException(DomainException):
    """A store rule refused the operation; `rule` is echoed in details."""

    code = "BUSINESS_RULE_VIOLATION"

    def __init__(self, rule: str, message: str | None = None, details: dict[str, Any] | None = None):
        self.rule = rule
        super().__init__(message or f"Business rule violated: {rule}", details={**(details or {}), "rule": rule})


class InsufficientStockException(DomainException):
    """
    Stock ran out for a line.

    `available` is None when the guarded decrement refused the update and the
    remaining quantity is unknown.
    """

    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: Any, requested: int, available: int | None, product_name: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        name = product_name or f"Product {product_id}"
        if available is None:
            message = f"{name} no longer has enough stock (requested {requested})"
        else:
            message = f"{name} only has {available} in stock (requested {requested})"
        super().__init__(
            message,
            details={"product_id": str(product_id), "requested": requested, "available": available},
        )


class AuthorizationException(DomainException):
    code = "AUTHORIZATION_ERROR"

    def __init__(self, operation: str, message: str | None = None, user_id: str | None = None):
        self.operation = operation
        self.user_id = user_id
        super().__init__(message or f"Not authorized to {operation}", details={"operation": operation})


class IntegrationException(DomainException):
    """An outbound call (webhook, partner API) failed."""

    code = "INTEGRATION_ERROR"

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        self.service = service
        self.original_error = original_error
        details: dict[str, Any] = {"service": service}
        if original_error is not None:
            details["cause"] = f"{type(original_error).__name__}: {original_error}"
        super().__init__(message, details=details)


__all__ = [
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InsufficientStockException",
    "AuthorizationException",
    "IntegrationException",
]
