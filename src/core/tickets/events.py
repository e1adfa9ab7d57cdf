"""
Domain Events del Dominio de Tickets.

Eventos:
- TicketCreadoEvent: Se creó un ticket nuevo

Uso:
    El caso de uso encola el evento en la Unit of Work; se publica solo
    después de un commit exitoso.

    with uow:
        ticket = ticket_repo.add(TicketEntity.crear(...))
        uow.publish_event(TicketCreadoEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


@dataclass
class TicketCreadoEvent(DomainEvent):
    """
    Evento: se creó un ticket.

    Handlers típicos:
    - Registrar la creación en el log de auditoría
    - Notificar al equipo de soporte (fuera del alcance del núcleo)

    Attributes:
        numero_ticket: Número legible asignado
        usuario_solicitante_id: Usuario que creó el ticket
        categoria_id: Categoría elegida
        prioridad_id: Prioridad elegida
        equipo_afectado_id: Equipo afectado, si se indicó
    """

    numero_ticket: str = ""
    usuario_solicitante_id: Optional[int] = None
    categoria_id: Optional[int] = None
    prioridad_id: Optional[int] = None
    equipo_afectado_id: Optional[int] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "numero_ticket": self.numero_ticket,
            "usuario_solicitante_id": self.usuario_solicitante_id,
            "categoria_id": self.categoria_id,
            "prioridad_id": self.prioridad_id,
            "equipo_afectado_id": self.equipo_afectado_id,
        }
