"""
Ports (Interfaces) del Dominio de Tickets.

Define los contratos que los Adapters de infraestructura deben implementar
para persistir, numerar y consultar tickets.

Tipos de Ports:
- TicketRepository: Escritura de tickets
- TicketQueryRepository: Consultas del listado (Read Model - CQRS)
- SecuenciaTickets: Último número emitido por día
- ReferenciasGateway: Existencia de datos de referencia activos

Principio:
    Core define interfaces → Adapters implementan
    Las dependencias siempre apuntan al Core

Example:
    # En el Adapter (Django)
    class DjangoTicketRepository:
        def add(self, ticket: TicketEntity) -> TicketEntity:
            model = TicketMapper.to_model(ticket)
            model.save()
            return TicketMapper.to_entity(model)
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from src.core.shared.exceptions import (
    ForeignKeyError,
    NumeroTicketDuplicadoError,
)

from .entities import EstadoTicket, NivelPrioridad, TicketEntity, TipoReferencia
from .dtos import (
    CampoOrden,
    DireccionOrden,
    EstadisticasDTO,
    FiltroTickets,
    OrdenTickets,
    TicketVista,
)


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interfaz para la persistencia de Tickets.

    Implementaciones:
    - DjangoTicketRepository (ORM)
    - InMemoryTicketRepository (para tests)

    Methods:
        add: Inserta un ticket nuevo
        obtener_vista: Lee un ticket con sus referencias resueltas
    """

    def add(self, ticket: TicketEntity) -> TicketEntity:
        """
        Inserta el ticket y devuelve la entidad con su ID asignado.

        Raises:
            NumeroTicketDuplicadoError: Si numero_ticket ya existe
            ConflictError: Ante otra violación de unicidad
            ForeignKeyError: Si una referencia no existe
        """
        ...

    def obtener_vista(self, ticket_id: int) -> Optional[TicketVista]:
        """
        Busca un ticket con categoría, prioridad, estado, solicitante y
        equipo resueltos.

        Returns:
            Vista del ticket o None si no existe
        """
        ...


@runtime_checkable
class TicketQueryRepository(Protocol):
    """
    Interfaz para las consultas del listado (Read Model).

    Separada de TicketRepository para optimizar lectura (joins,
    agregados) sin afectar la escritura. Ningún texto del llamador se
    interpola en la consulta: el orden llega como enum de la allow-list.
    """

    def listar(
        self,
        filtro: FiltroTickets,
        orden: OrdenTickets,
        limite: int,
        offset: int,
    ) -> List[TicketVista]:
        """
        Página de tickets que cumplen el filtro.

        El desempate es siempre por ID para que las páginas sean estables.
        """
        ...

    def contar(self, filtro: FiltroTickets) -> int:
        """Total de tickets que cumplen el filtro (sin paginar)."""
        ...

    def estadisticas(self, filtro: FiltroTickets) -> EstadisticasDTO:
        """Conteos por estado y de alta prioridad sobre el conjunto filtrado."""
        ...


@runtime_checkable
class SecuenciaTickets(Protocol):
    """Fuente del último número de ticket emitido para un prefijo diario."""

    def ultimo_numero(self, prefijo: str) -> Optional[str]:
        """
        Args:
            prefijo: Prefijo del día (ej: "TICK-20250831-")

        Returns:
            Mayor numero_ticket con ese prefijo, o None si no hay ninguno
        """
        ...


@runtime_checkable
class ReferenciasGateway(Protocol):
    """Consulta de datos de referencia administrados fuera del núcleo."""

    def existe(self, tipo: TipoReferencia, referencia_id: int) -> bool:
        """Indica si existe una fila activa del tipo dado con ese ID."""
        ...

    def estado_inicial_id(self) -> Optional[int]:
        """ID del estado "Pendiente", o None si no está sembrado."""
        ...


# =============================================================================
# Implementaciones en memoria
# =============================================================================

@dataclass
class _Usuario:
    nombre: str
    email: str


class InMemoryReferencias:
    """
    Datos de referencia en memoria (categorías, prioridades, estados,
    equipos y usuarios).

    Implementa ReferenciasGateway y sirve al repositorio en memoria para
    resolver nombres al construir vistas.

    Example:
        refs = InMemoryReferencias.con_datos_estandar()
        refs.existe(TipoReferencia.CATEGORIA, 1)  # True
    """

    def __init__(self):
        self.categorias: Dict[int, Tuple[str, bool]] = {}
        self.prioridades: Dict[int, Tuple[str, int, bool]] = {}
        self.estados: Dict[int, str] = {}
        self.equipos: Dict[int, Tuple[str, str, bool]] = {}
        self.usuarios: Dict[int, _Usuario] = {}

    @classmethod
    def con_datos_estandar(cls) -> "InMemoryReferencias":
        refs = cls()
        refs.agregar_categoria(1, "Hardware")
        refs.agregar_categoria(2, "Software")
        refs.agregar_categoria(3, "Red")
        refs.agregar_prioridad(1, "Alta", NivelPrioridad.ALTA.value)
        refs.agregar_prioridad(2, "Media", NivelPrioridad.MEDIA.value)
        refs.agregar_prioridad(3, "Baja", NivelPrioridad.BAJA.value)
        for orden, estado in enumerate(EstadoTicket, start=1):
            refs.agregar_estado(orden, estado.value)
        refs.agregar_equipo(1, "Impresora HP 201", "EQ-0001")
        return refs

    def agregar_categoria(self, id: int, nombre: str, activo: bool = True) -> None:
        self.categorias[id] = (nombre, activo)

    def agregar_prioridad(
        self, id: int, nombre: str, nivel: int, activo: bool = True
    ) -> None:
        self.prioridades[id] = (nombre, nivel, activo)

    def agregar_estado(self, id: int, nombre: str) -> None:
        self.estados[id] = nombre

    def agregar_equipo(
        self, id: int, nombre: str, codigo: str, activo: bool = True
    ) -> None:
        self.equipos[id] = (nombre, codigo, activo)

    def agregar_usuario(self, id: int, nombre: str, email: str = "") -> None:
        self.usuarios[id] = _Usuario(nombre=nombre, email=email)

    def existe(self, tipo: TipoReferencia, referencia_id: int) -> bool:
        if tipo == TipoReferencia.CATEGORIA:
            fila = self.categorias.get(referencia_id)
        elif tipo == TipoReferencia.PRIORIDAD:
            fila = self.prioridades.get(referencia_id)
        else:
            fila = self.equipos.get(referencia_id)
        return fila is not None and fila[-1]

    def estado_inicial_id(self) -> Optional[int]:
        for estado_id, nombre in self.estados.items():
            if nombre == EstadoTicket.PENDIENTE.value:
                return estado_id
        return None


class InMemoryTicketRepository:
    """
    Implementación en memoria de TicketRepository, TicketQueryRepository
    y SecuenciaTickets.

    Útil para:
    - Tests unitarios de los casos de uso
    - Prototipado

    ¡No usar en producción!

    Example:
        repo = InMemoryTicketRepository(InMemoryReferencias.con_datos_estandar())
        ticket = repo.add(ticket)
        vista = repo.obtener_vista(ticket.id)
    """

    def __init__(self, referencias: InMemoryReferencias):
        self.referencias = referencias
        self._tickets: Dict[int, TicketEntity] = {}
        self._siguiente_id = 1

    # -- TicketRepository -----------------------------------------------------

    def add(self, ticket: TicketEntity) -> TicketEntity:
        if any(t.numero_ticket == ticket.numero_ticket for t in self._tickets.values()):
            raise NumeroTicketDuplicadoError(ticket.numero_ticket)

        if ticket.estado_id not in self.referencias.estados:
            raise ForeignKeyError()

        guardado = replace(ticket, id=self._siguiente_id)
        self._tickets[guardado.id] = guardado
        self._siguiente_id += 1
        return guardado

    def obtener_vista(self, ticket_id: int) -> Optional[TicketVista]:
        ticket = self._tickets.get(ticket_id)
        return self._a_vista(ticket) if ticket else None

    # -- SecuenciaTickets -----------------------------------------------------

    def ultimo_numero(self, prefijo: str) -> Optional[str]:
        numeros = [
            t.numero_ticket
            for t in self._tickets.values()
            if t.numero_ticket.startswith(prefijo)
        ]
        if not numeros:
            return None
        return max(numeros, key=lambda numero: (len(numero), numero))

    # -- TicketQueryRepository ------------------------------------------------

    def listar(
        self,
        filtro: FiltroTickets,
        orden: OrdenTickets,
        limite: int,
        offset: int,
    ) -> List[TicketVista]:
        descendente = orden.direccion == DireccionOrden.DESC
        vistas = self._filtrar(filtro)
        # Desempate por ID en la misma dirección del orden
        vistas.sort(key=lambda v: v.id, reverse=descendente)
        vistas.sort(key=lambda v: _clave_orden(v, orden.campo), reverse=descendente)
        return vistas[offset:offset + limite]

    def contar(self, filtro: FiltroTickets) -> int:
        return len(self._filtrar(filtro))

    def estadisticas(self, filtro: FiltroTickets) -> EstadisticasDTO:
        vistas = self._filtrar(filtro)
        por_estado: Dict[str, int] = {}
        for vista in vistas:
            por_estado[vista.estado] = por_estado.get(vista.estado, 0) + 1

        alta = sum(1 for v in vistas if v.prioridad_nivel == NivelPrioridad.ALTA.value)
        return EstadisticasDTO.from_conteos(len(vistas), por_estado, alta)

    # -- helpers --------------------------------------------------------------

    def _filtrar(self, filtro: FiltroTickets) -> List[TicketVista]:
        return [
            self._a_vista(ticket)
            for ticket in self._tickets.values()
            if _cumple(ticket, filtro)
        ]

    def _a_vista(self, ticket: TicketEntity) -> TicketVista:
        refs = self.referencias
        categoria = refs.categorias.get(ticket.categoria_id)
        prioridad = refs.prioridades.get(ticket.prioridad_id)
        equipo = refs.equipos.get(ticket.equipo_afectado_id)
        solicitante = refs.usuarios.get(ticket.usuario_solicitante_id)
        tecnico = refs.usuarios.get(ticket.tecnico_asignado_id)

        return TicketVista(
            id=ticket.id,
            numero_ticket=ticket.numero_ticket,
            titulo=ticket.titulo,
            descripcion=ticket.descripcion,
            fecha_creacion=ticket.fecha_creacion,
            categoria_id=ticket.categoria_id,
            categoria=categoria[0] if categoria else None,
            prioridad_id=ticket.prioridad_id,
            prioridad=prioridad[0] if prioridad else None,
            prioridad_nivel=prioridad[1] if prioridad else None,
            estado_id=ticket.estado_id,
            estado=refs.estados.get(ticket.estado_id),
            usuario_solicitante_id=ticket.usuario_solicitante_id,
            usuario_solicitante=solicitante.nombre if solicitante else None,
            usuario_email=solicitante.email if solicitante else None,
            tecnico_asignado_id=ticket.tecnico_asignado_id,
            tecnico_asignado=tecnico.nombre if tecnico else None,
            tecnico_email=tecnico.email if tecnico else None,
            equipo_afectado_id=ticket.equipo_afectado_id,
            equipo_afectado=equipo[0] if equipo else None,
            equipo_codigo=equipo[1] if equipo else None,
            fecha_asignacion=ticket.fecha_asignacion,
            fecha_resolucion=ticket.fecha_resolucion,
            fecha_cierre=ticket.fecha_cierre,
        )

    def guardar(self, ticket: TicketEntity) -> None:
        """Reemplaza un ticket ya insertado (para preparar escenarios en tests)."""
        self._tickets[ticket.id] = ticket

    def clear(self) -> None:
        """Limpia todos los datos (útil para tests)."""
        self._tickets.clear()
        self._siguiente_id = 1


def _cumple(ticket: TicketEntity, filtro: FiltroTickets) -> bool:
    igualdades = (
        (filtro.solicitante_id, ticket.usuario_solicitante_id),
        (filtro.tecnico_asignado_id, ticket.tecnico_asignado_id),
        (filtro.estado_id, ticket.estado_id),
        (filtro.categoria_id, ticket.categoria_id),
        (filtro.prioridad_id, ticket.prioridad_id),
    )
    for esperado, actual in igualdades:
        if esperado is not None and esperado != actual:
            return False

    creado = ticket.fecha_creacion.date()
    if filtro.fecha_desde and creado < filtro.fecha_desde:
        return False
    if filtro.fecha_hasta and creado > filtro.fecha_hasta:
        return False
    return True


def _clave_orden(vista: TicketVista, campo: CampoOrden):
    if campo == CampoOrden.PRIORIDAD_NIVEL:
        valor = vista.prioridad_nivel
    else:
        valor = getattr(vista, campo.value)
    # None primero, como en SQLite
    return (valor is not None, valor if valor is not None else 0)
