"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Value Objects: Immutable objects compared by value
- Exceptions: Domain-specific error handling
"""

from storefront.core.domain.entities import AggregateRoot, Entity
from storefront.core.domain.exceptions import (
    AuthorizationException,
    BusinessRuleViolationException,
    DomainException,
    EntityNotFoundException,
    InsufficientStockException,
    IntegrationException,
    ValidationException,
)
from storefront.core.domain.value_objects import Address, StatusEnum, ValueObject

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Value Objects
    "ValueObject",
    "Address",
    "StatusEnum",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "BusinessRuleViolationException",
    "InsufficientStockException",
    "AuthorizationException",
    "IntegrationException",
]
