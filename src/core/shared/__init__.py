"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio e códigos de erro
- Interfaces (Ports)
- Base classes para Domain Events
"""

from .exceptions import (
    ErrorCode,
    DomainException,
    ValidationError,
    EntityNotFoundError,
    BusinessRuleViolationError,
    AuthorizationError,
    ExternalServiceError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, FileStorage

__all__ = [
    "ErrorCode",
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "BusinessRuleViolationError",
    "AuthorizationError",
    "ExternalServiceError",
    "DomainEvent",
    "UnitOfWork",
    "FileStorage",
]
