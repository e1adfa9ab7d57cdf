"""
Domain Events - Hechos relevantes del dominio.

Un evento describe algo que ya ocurrió (TicketCreado, no CrearTicket).
Los eventos se encolan en la Unit of Work y solo se publican después de
un commit exitoso, de modo que nunca anuncian datos que fueron revertidos.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict
import uuid


@dataclass
class DomainEvent(ABC):
    """
    Clase base abstracta para Domain Events.

    Attributes:
        event_id: Identificador único del evento
        aggregate_id: ID del agregado que originó el evento
        occurred_at: Momento (UTC) en que ocurrió
        version: Versión del esquema del evento
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id es obligatorio")
        self.aggregate_id = str(self.aggregate_id)

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo del agregado que generó el evento (ej: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa el evento para logging estructurado o transporte.

        Returns:
            Diccionario con metadatos y datos específicos del evento
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos propios de la subclase (todo lo que no es metadato)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
