"""
Repositorios Django para la persistencia de Tickets.

Implementan las interfaces (Ports) definidas en el Core.
Son DRIVEN ADAPTERS: el Core los invoca en respuesta a operaciones.

Responsabilidades:
- Implementar TicketRepository, TicketQueryRepository, SecuenciaTickets
  y ReferenciasGateway
- Mapear entities a models y viceversa
- Ejecutar consultas vía ORM (siempre parametrizadas)
- Optimizar consultas (select_related, agregados en una sola consulta)

Principios:
- El repositorio no contiene lógica de negocio
- Usa el Mapper para las conversiones
- Traduce errores del motor a excepciones de dominio
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional
import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, Q, QuerySet
from django.db.models.functions import Length

from src.core.tickets.dtos import (
    CampoOrden,
    DireccionOrden,
    EstadisticasDTO,
    FiltroTickets,
    OrdenTickets,
    TicketVista,
)
from src.core.tickets.entities import EstadoTicket, NivelPrioridad, TicketEntity, TipoReferencia

from ..shared.database import traducir_integrity_error
from .mappers import TicketMapper
from .models import (
    CategoriaModel,
    EquipoModel,
    EstadoTicketModel,
    PrioridadModel,
    TicketModel,
)

logger = logging.getLogger(__name__)


def _tickets_con_relaciones() -> QuerySet:
    return TicketModel.objects.select_related(
        'categoria',
        'prioridad',
        'estado',
        'usuario_solicitante',
        'tecnico_asignado',
        'equipo_afectado',
    )


class DjangoTicketRepository:
    """
    Implementación Django de TicketRepository y SecuenciaTickets.

    Example:
        repo = DjangoTicketRepository()
        ticket = repo.add(ticket_entity)
        vista = repo.obtener_vista(ticket.id)
        repo.ultimo_numero("TICK-20250831-")
    """

    def __init__(self):
        self._mapper = TicketMapper()

    def add(self, ticket: TicketEntity) -> TicketEntity:
        """
        Inserta el ticket.

        El INSERT corre en su propio savepoint para que una violación de
        integridad deje utilizable la transacción exterior.

        Raises:
            NumeroTicketDuplicadoError: numero_ticket ya existe
            ConflictError: Otra violación de unicidad
            ForeignKeyError: Referencia inexistente
        """
        model = self._mapper.to_model(ticket)

        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as exc:
            logger.warning(
                "Violación de integridad al insertar ticket %s: %s",
                ticket.numero_ticket,
                exc,
            )
            raise traducir_integrity_error(exc, ticket.numero_ticket) from exc

        logger.debug("Ticket insertado: %s (id=%s)", model.numero_ticket, model.pk)
        return self._mapper.to_entity(model)

    def obtener_vista(self, ticket_id: int) -> Optional[TicketVista]:
        model = _tickets_con_relaciones().filter(pk=ticket_id).first()
        if model is None:
            logger.debug("Ticket no encontrado: %s", ticket_id)
            return None
        return self._mapper.to_vista(model)

    def ultimo_numero(self, prefijo: str) -> Optional[str]:
        """
        Mayor numero_ticket del prefijo.

        Se ordena primero por longitud para que TICK-...-10000 quede por
        encima de TICK-...-9999.
        """
        return (
            TicketModel.objects
            .filter(numero_ticket__startswith=prefijo)
            .order_by(Length('numero_ticket').desc(), '-numero_ticket')
            .values_list('numero_ticket', flat=True)
            .first()
        )


class DjangoTicketQueryRepository:
    """
    Implementación Django de TicketQueryRepository (Read Model).

    Features:
    - Filtros compuestos con AND (rol + parámetros)
    - Orden por allow-list con desempate por ID
    - Paginación con LIMIT/OFFSET
    - Estadísticas agregadas en una sola consulta
    """

    # Campo de orden del Core → expresión ORM
    CAMPOS_ORDEN = {
        CampoOrden.FECHA_CREACION: 'fecha_creacion',
        CampoOrden.TITULO: 'titulo',
        CampoOrden.PRIORIDAD_NIVEL: 'prioridad__nivel',
        CampoOrden.ESTADO: 'estado__nombre',
        CampoOrden.NUMERO_TICKET: 'numero_ticket',
    }

    def __init__(self):
        self._mapper = TicketMapper()

    def listar(
        self,
        filtro: FiltroTickets,
        orden: OrdenTickets,
        limite: int,
        offset: int,
    ) -> List[TicketVista]:
        campo = self.CAMPOS_ORDEN[orden.campo]
        if orden.direccion == DireccionOrden.DESC:
            order_by = (f'-{campo}', '-id')
        else:
            order_by = (campo, 'id')

        models = (
            _tickets_con_relaciones()
            .filter(self._condiciones(filtro))
            .order_by(*order_by)[offset:offset + limite]
        )
        return self._mapper.to_vista_list(models)

    def contar(self, filtro: FiltroTickets) -> int:
        return TicketModel.objects.filter(self._condiciones(filtro)).count()

    def estadisticas(self, filtro: FiltroTickets) -> EstadisticasDTO:
        conteos = TicketModel.objects.filter(self._condiciones(filtro)).aggregate(
            total=Count('id'),
            pendientes=Count('id', filter=Q(estado__nombre=EstadoTicket.PENDIENTE.value)),
            en_progreso=Count('id', filter=Q(estado__nombre=EstadoTicket.EN_PROGRESO.value)),
            resueltos=Count('id', filter=Q(estado__nombre=EstadoTicket.RESUELTO.value)),
            cerrados=Count('id', filter=Q(estado__nombre=EstadoTicket.CERRADO.value)),
            alta_prioridad=Count('id', filter=Q(prioridad__nivel=NivelPrioridad.ALTA.value)),
        )

        return EstadisticasDTO(
            total_tickets=conteos['total'],
            pendientes=conteos['pendientes'],
            en_progreso=conteos['en_progreso'],
            resueltos=conteos['resueltos'],
            cerrados=conteos['cerrados'],
            alta_prioridad=conteos['alta_prioridad'],
        )

    @staticmethod
    def _condiciones(filtro: FiltroTickets) -> Q:
        """
        Construye el predicado del listado.

        Las fechas se interpretan en UTC: fecha_hasta incluye el día completo.
        """
        q = Q()

        if filtro.solicitante_id is not None:
            q &= Q(usuario_solicitante_id=filtro.solicitante_id)
        if filtro.tecnico_asignado_id is not None:
            q &= Q(tecnico_asignado_id=filtro.tecnico_asignado_id)
        if filtro.estado_id is not None:
            q &= Q(estado_id=filtro.estado_id)
        if filtro.categoria_id is not None:
            q &= Q(categoria_id=filtro.categoria_id)
        if filtro.prioridad_id is not None:
            q &= Q(prioridad_id=filtro.prioridad_id)

        if filtro.fecha_desde is not None:
            desde = datetime.combine(filtro.fecha_desde, time.min, tzinfo=timezone.utc)
            q &= Q(fecha_creacion__gte=desde)
        # 9999-12-31 ya cubre cualquier fecha representable
        if filtro.fecha_hasta is not None and filtro.fecha_hasta < date.max:
            hasta = datetime.combine(
                filtro.fecha_hasta + timedelta(days=1), time.min, tzinfo=timezone.utc
            )
            q &= Q(fecha_creacion__lt=hasta)

        return q


class DjangoReferenciasGateway:
    """
    Implementación Django de ReferenciasGateway.

    Solo las filas activas cuentan como existentes.
    """

    MODELOS = {
        TipoReferencia.CATEGORIA: CategoriaModel,
        TipoReferencia.PRIORIDAD: PrioridadModel,
        TipoReferencia.EQUIPO: EquipoModel,
    }

    def existe(self, tipo: TipoReferencia, referencia_id: int) -> bool:
        return self.MODELOS[tipo].objects.filter(pk=referencia_id, activo=True).exists()

    def estado_inicial_id(self) -> Optional[int]:
        return (
            EstadoTicketModel.objects
            .filter(nombre=EstadoTicket.PENDIENTE.value, activo=True)
            .values_list('pk', flat=True)
            .first()
        )
