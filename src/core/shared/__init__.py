"""
Componentes compartidos del dominio.

Contiene lo que usan todos los módulos del Core:
- Excepciones de dominio
- Interfaces (Ports) transversales
- Base de los Domain Events
- Identidad del llamador (Principal y Rol)
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    ReferenceNotFoundError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NumeroTicketDuplicadoError,
    ForeignKeyError,
    ConfigurationError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .identity import Principal, Rol

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "ReferenceNotFoundError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "NumeroTicketDuplicadoError",
    "ForeignKeyError",
    "ConfigurationError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "Principal",
    "Rol",
]
