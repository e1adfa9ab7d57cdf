"""
Dominio de Tickets - Mesa de Ayuda TI.

Este módulo contiene la lógica de negocio de los tickets de soporte:
- Entidades (TicketEntity, NumeroTicket, EstadoTicket, NivelPrioridad)
- Use Cases (CrearTicket, ListarTickets)
- Domain Events (TicketCreado)
- DTOs (Input/Query/Output Data Transfer Objects)
- Ports (Interfaces para repositorios y datos de referencia)

Características del Dominio:
- Numeración diaria TICK-YYYYMMDD-NNNN con reintento ante colisiones
- Validación ordenada: el primer error encontrado es el que se informa
- Visibilidad del listado determinada únicamente por el rol del llamador
- Campos derivados (urgencia, colores, permisos) calculados al listar
"""

from .entities import (
    TicketEntity,
    NumeroTicket,
    EstadoTicket,
    NivelPrioridad,
    TipoReferencia,
)
from .events import TicketCreadoEvent
from .dtos import (
    CrearTicketInputDTO,
    CrearTicketOutputDTO,
    ListarTicketsQueryDTO,
    ListarTicketsResultDTO,
    TicketOutputDTO,
    TicketListItemDTO,
    TicketVista,
)
from .ports import (
    TicketRepository,
    TicketQueryRepository,
    SecuenciaTickets,
    ReferenciasGateway,
)
from .numbering import GeneradorNumeroTicket
from .use_cases import CrearTicketService, ListarTicketsService

__all__ = [
    # Entities
    "TicketEntity",
    "NumeroTicket",
    "EstadoTicket",
    "NivelPrioridad",
    "TipoReferencia",
    # Events
    "TicketCreadoEvent",
    # DTOs
    "CrearTicketInputDTO",
    "CrearTicketOutputDTO",
    "ListarTicketsQueryDTO",
    "ListarTicketsResultDTO",
    "TicketOutputDTO",
    "TicketListItemDTO",
    "TicketVista",
    # Ports
    "TicketRepository",
    "TicketQueryRepository",
    "SecuenciaTickets",
    "ReferenciasGateway",
    # Services
    "GeneradorNumeroTicket",
    "CrearTicketService",
    "ListarTicketsService",
]
