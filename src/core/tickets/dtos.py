"""
Data Transfer Objects (DTOs) del Dominio de Tickets.

Estructuras simples para transportar datos entre capas sin exponer
modelos internos.

Tipos de DTOs:
- Input DTOs: Datos de entrada crudos (de la API)
- Query DTOs: Parámetros de listado ya validados y predicados de filtro
- Read models: Filas enriquecidas que devuelve el repositorio de consultas
- Output DTOs: Respuestas serializables con campos derivados
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from src.core.shared.exceptions import ValidationError
from src.core.shared.identity import Principal

from .entities import (
    EstadoTicket,
    NivelPrioridad,
    calcular_horas_transcurridas,
    es_urgente,
    puede_gestionar,
)


# Máximo de un BigAutoField (entero de 64 bits con signo)
ENTERO_MAXIMO = 2 ** 63 - 1


def parse_entero_positivo(valor: Any) -> Optional[int]:
    """
    Interpreta un ID o número recibido como texto o entero.

    Returns:
        Entero entre 1 y ENTERO_MAXIMO, o None en cualquier otro caso
    """
    valor = _como_entero(valor)
    if valor is not None and 0 < valor <= ENTERO_MAXIMO:
        return valor
    return None


def excede_entero_maximo(valor: Any) -> bool:
    """True si el valor es un entero bien formado mayor que ENTERO_MAXIMO."""
    valor = _como_entero(valor)
    return valor is not None and valor > ENTERO_MAXIMO


def _como_entero(valor: Any) -> Optional[int]:
    if isinstance(valor, bool) or valor is None:
        return None
    if isinstance(valor, int):
        return valor
    if isinstance(valor, str) and valor.strip().isdecimal():
        return int(valor.strip())
    return None


def _isoformat(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None


# =============================================================================
# INPUT DTOs
# =============================================================================

@dataclass(frozen=True)
class CrearTicketInputDTO:
    """
    DTO de entrada para crear un ticket.

    Los valores se guardan tal como llegaron; la validación ordenada
    ocurre en CrearTicketService para respetar la prioridad de errores.

    Attributes:
        titulo: Título del ticket
        descripcion: Descripción del problema
        categoria_id: ID de categoría (entero o texto numérico)
        prioridad_id: ID de prioridad (entero o texto numérico)
        equipo_afectado_id: ID del equipo afectado (opcional)
    """

    titulo: Any = None
    descripcion: Any = None
    categoria_id: Any = None
    prioridad_id: Any = None
    equipo_afectado_id: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CrearTicketInputDTO":
        return cls(
            titulo=data.get("titulo"),
            descripcion=data.get("descripcion"),
            categoria_id=data.get("categoria_id"),
            prioridad_id=data.get("prioridad_id"),
            equipo_afectado_id=data.get("equipo_afectado_id"),
        )


# =============================================================================
# QUERY DTOs
# =============================================================================

class CampoOrden(Enum):
    """Campos permitidos para ordenar el listado (allow-list)."""

    FECHA_CREACION = "fecha_creacion"
    TITULO = "titulo"
    PRIORIDAD_NIVEL = "prioridad_nivel"
    ESTADO = "estado"
    NUMERO_TICKET = "numero_ticket"


class DireccionOrden(Enum):
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class ListarTicketsQueryDTO:
    """
    Parámetros validados del listado de tickets.

    Attributes:
        pagina: Número de página (>= 1)
        limite: Elementos por página (1..100)
        estado_id / categoria_id / prioridad_id: Filtros de igualdad
        fecha_desde / fecha_hasta: Rango inclusivo sobre fecha de creación
        orden: Campo de ordenación
        direccion: ASC o DESC
    """

    pagina: int = 1
    limite: int = 10
    estado_id: Optional[int] = None
    categoria_id: Optional[int] = None
    prioridad_id: Optional[int] = None
    fecha_desde: Optional[date] = None
    fecha_hasta: Optional[date] = None
    orden: CampoOrden = CampoOrden.FECHA_CREACION
    direccion: DireccionOrden = DireccionOrden.DESC

    LIMITE_MAXIMO = 100

    @property
    def offset(self) -> int:
        return (self.pagina - 1) * self.limite

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ListarTicketsQueryDTO":
        """
        Valida parámetros de query string.

        Cada parámetro inválido falla con su propio código, antes de
        cualquier acceso a la persistencia.

        Raises:
            ValidationError: PAGINA_INVALIDA, LIMITE_INVALIDO, ORDEN_INVALIDO,
                DIRECCION_INVALIDA, FILTRO_INVALIDO o FECHA_INVALIDA
        """
        pagina = 1
        if _presente(params.get("page")):
            pagina = parse_entero_positivo(params.get("page"))
            if pagina is None:
                raise ValidationError(
                    "El número de página debe ser un entero positivo",
                    code="PAGINA_INVALIDA",
                    field="page",
                )

        limite = 10
        if _presente(params.get("limit")):
            limite = parse_entero_positivo(params.get("limit"))
            if limite is None or limite > cls.LIMITE_MAXIMO:
                raise ValidationError(
                    f"El límite debe ser un entero entre 1 y {cls.LIMITE_MAXIMO}",
                    code="LIMITE_INVALIDO",
                    field="limit",
                )

        # La ventana de la consulta (offset + limit) debe caber en 64 bits
        if pagina * limite > ENTERO_MAXIMO:
            raise ValidationError(
                "El número de página está fuera de rango",
                code="PAGINA_INVALIDA",
                field="page",
            )

        orden = CampoOrden.FECHA_CREACION
        if _presente(params.get("orden")):
            try:
                orden = CampoOrden(str(params["orden"]).strip().lower())
            except ValueError:
                campos = ", ".join(c.value for c in CampoOrden)
                raise ValidationError(
                    f"Campo de ordenamiento inválido. Valores permitidos: {campos}",
                    code="ORDEN_INVALIDO",
                    field="orden",
                )

        direccion = DireccionOrden.DESC
        if _presente(params.get("direccion")):
            try:
                direccion = DireccionOrden(str(params["direccion"]).strip().upper())
            except ValueError:
                raise ValidationError(
                    "La dirección de ordenamiento debe ser ASC o DESC",
                    code="DIRECCION_INVALIDA",
                    field="direccion",
                )

        return cls(
            pagina=pagina,
            limite=limite,
            estado_id=_parse_filtro_id(params, "estado_id"),
            categoria_id=_parse_filtro_id(params, "categoria_id"),
            prioridad_id=_parse_filtro_id(params, "prioridad_id"),
            fecha_desde=_parse_fecha(params, "fecha_desde"),
            fecha_hasta=_parse_fecha(params, "fecha_hasta"),
            orden=orden,
            direccion=direccion,
        )


def _presente(valor: Any) -> bool:
    return valor is not None and str(valor).strip() != ""


def _parse_filtro_id(params: Mapping[str, Any], nombre: str) -> Optional[int]:
    valor = params.get(nombre)
    if not _presente(valor):
        return None

    numero = parse_entero_positivo(valor)
    if numero is None:
        raise ValidationError(
            f"El filtro {nombre} debe ser un entero positivo",
            code="FILTRO_INVALIDO",
            field=nombre,
        )
    return numero


def _parse_fecha(params: Mapping[str, Any], nombre: str) -> Optional[date]:
    valor = params.get(nombre)
    if not _presente(valor):
        return None

    try:
        return datetime.strptime(str(valor).strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(
            f"La fecha {nombre} debe tener formato YYYY-MM-DD",
            code="FECHA_INVALIDA",
            field=nombre,
        )


@dataclass(frozen=True)
class FiltroTickets:
    """
    Predicado compuesto del listado (todas las condiciones con AND).

    solicitante_id y tecnico_asignado_id provienen exclusivamente del rol
    del llamador; los parámetros de la petición nunca los fijan.
    """

    solicitante_id: Optional[int] = None
    tecnico_asignado_id: Optional[int] = None
    estado_id: Optional[int] = None
    categoria_id: Optional[int] = None
    prioridad_id: Optional[int] = None
    fecha_desde: Optional[date] = None
    fecha_hasta: Optional[date] = None


@dataclass(frozen=True)
class OrdenTickets:
    campo: CampoOrden = CampoOrden.FECHA_CREACION
    direccion: DireccionOrden = DireccionOrden.DESC


# =============================================================================
# READ MODEL
# =============================================================================

@dataclass
class TicketVista:
    """
    Fila de ticket con sus referencias ya resueltas (joins).

    Es lo que devuelve el repositorio de consultas; no contiene campos
    derivados.
    """

    id: int
    numero_ticket: str
    titulo: str
    descripcion: str
    fecha_creacion: datetime
    categoria_id: Optional[int] = None
    categoria: Optional[str] = None
    prioridad_id: Optional[int] = None
    prioridad: Optional[str] = None
    prioridad_nivel: Optional[int] = None
    estado_id: Optional[int] = None
    estado: Optional[str] = None
    usuario_solicitante_id: Optional[int] = None
    usuario_solicitante: Optional[str] = None
    usuario_email: Optional[str] = None
    tecnico_asignado_id: Optional[int] = None
    tecnico_asignado: Optional[str] = None
    tecnico_email: Optional[str] = None
    equipo_afectado_id: Optional[int] = None
    equipo_afectado: Optional[str] = None
    equipo_codigo: Optional[str] = None
    fecha_asignacion: Optional[datetime] = None
    fecha_resolucion: Optional[datetime] = None
    fecha_cierre: Optional[datetime] = None


# =============================================================================
# OUTPUT DTOs
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    Ticket recién creado, enriquecido con nombres de referencias.

    Attributes:
        id, numero_ticket, titulo, descripcion: Datos propios
        categoria, prioridad, prioridad_nivel, estado: Referencias resueltas
        usuario_solicitante, usuario_email: Datos del solicitante
        equipo_afectado: Nombre del equipo (si hay)
        fecha_creacion: Momento de creación
    """

    id: int
    numero_ticket: str
    titulo: str
    descripcion: str
    categoria: Optional[str]
    prioridad: Optional[str]
    prioridad_nivel: Optional[int]
    estado: Optional[str]
    usuario_solicitante: Optional[str]
    usuario_email: Optional[str]
    equipo_afectado: Optional[str]
    fecha_creacion: datetime

    @classmethod
    def from_vista(cls, vista: TicketVista) -> "TicketOutputDTO":
        return cls(
            id=vista.id,
            numero_ticket=vista.numero_ticket,
            titulo=vista.titulo,
            descripcion=vista.descripcion,
            categoria=vista.categoria,
            prioridad=vista.prioridad,
            prioridad_nivel=vista.prioridad_nivel,
            estado=vista.estado,
            usuario_solicitante=vista.usuario_solicitante,
            usuario_email=vista.usuario_email,
            equipo_afectado=vista.equipo_afectado,
            fecha_creacion=vista.fecha_creacion,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "numero_ticket": self.numero_ticket,
            "titulo": self.titulo,
            "descripcion": self.descripcion,
            "categoria": self.categoria,
            "prioridad": self.prioridad,
            "prioridad_nivel": self.prioridad_nivel,
            "estado": self.estado,
            "usuario_solicitante": self.usuario_solicitante,
            "usuario_email": self.usuario_email,
            "equipo_afectado": self.equipo_afectado,
            "fecha_creacion": _isoformat(self.fecha_creacion),
        }


@dataclass
class CrearTicketOutputDTO:
    """Resultado de la creación: ticket enriquecido y nota informativa."""

    ticket: TicketOutputDTO
    siguiente_paso: str = (
        "El ticket será asignado a un técnico según la prioridad y especialidad"
    )

    def to_dict(self) -> dict:
        return {
            "ticket": self.ticket.to_dict(),
            "siguiente_paso": self.siguiente_paso,
        }


@dataclass
class TicketListItemDTO:
    """
    Fila del listado con campos derivados.

    Los campos derivados (horas_transcurridas, es_urgente, puede_editar,
    puede_cerrar, colores) se calculan al construir el DTO y no se guardan.
    """

    vista: TicketVista
    horas_transcurridas: float
    es_urgente: bool
    puede_editar: bool
    puede_cerrar: bool
    prioridad_color: str
    estado_color: str

    @classmethod
    def from_vista(
        cls,
        vista: TicketVista,
        principal: Principal,
        ahora: datetime,
    ) -> "TicketListItemDTO":
        """
        Calcula los campos derivados de una fila.

        Args:
            vista: Fila enriquecida del repositorio
            principal: Llamador (define permisos)
            ahora: Instante de referencia para tickets no cerrados
        """
        horas_exactas = calcular_horas_transcurridas(
            vista.fecha_creacion, vista.fecha_cierre, ahora, decimales=None
        )
        horas = round(horas_exactas, 2)
        gestionable = puede_gestionar(principal, vista.tecnico_asignado_id)

        return cls(
            vista=vista,
            horas_transcurridas=horas,
            es_urgente=es_urgente(vista.prioridad_nivel, horas_exactas),
            puede_editar=gestionable,
            puede_cerrar=gestionable,
            prioridad_color=NivelPrioridad.color_de(vista.prioridad_nivel),
            estado_color=EstadoTicket.color_de(vista.estado),
        )

    def to_dict(self) -> dict:
        vista = self.vista
        return {
            "id": vista.id,
            "numero_ticket": vista.numero_ticket,
            "titulo": vista.titulo,
            "descripcion": vista.descripcion,
            "categoria": vista.categoria,
            "prioridad": vista.prioridad,
            "prioridad_nivel": vista.prioridad_nivel,
            "prioridad_color": self.prioridad_color,
            "estado": vista.estado,
            "estado_color": self.estado_color,
            "usuario_solicitante_id": vista.usuario_solicitante_id,
            "usuario_solicitante": vista.usuario_solicitante,
            "usuario_email": vista.usuario_email,
            "tecnico_asignado_id": vista.tecnico_asignado_id,
            "tecnico_asignado": vista.tecnico_asignado,
            "tecnico_email": vista.tecnico_email,
            "equipo_afectado": vista.equipo_afectado,
            "equipo_codigo": vista.equipo_codigo,
            "fecha_creacion": _isoformat(vista.fecha_creacion),
            "fecha_asignacion": _isoformat(vista.fecha_asignacion),
            "fecha_resolucion": _isoformat(vista.fecha_resolucion),
            "fecha_cierre": _isoformat(vista.fecha_cierre),
            "horas_transcurridas": self.horas_transcurridas,
            "es_urgente": self.es_urgente,
            "puede_editar": self.puede_editar,
            "puede_cerrar": self.puede_cerrar,
        }


@dataclass
class EstadisticasDTO:
    """Conteos agregados del listado (solo para administradores)."""

    total_tickets: int = 0
    pendientes: int = 0
    en_progreso: int = 0
    resueltos: int = 0
    cerrados: int = 0
    alta_prioridad: int = 0

    @classmethod
    def from_conteos(
        cls,
        total: int,
        por_estado: Mapping[str, int],
        alta_prioridad: int,
    ) -> "EstadisticasDTO":
        """
        Args:
            total: Filas que cumplen el filtro
            por_estado: Conteo por nombre de estado
            alta_prioridad: Filas con prioridad de nivel 1
        """
        return cls(
            total_tickets=total,
            pendientes=por_estado.get(EstadoTicket.PENDIENTE.value, 0),
            en_progreso=por_estado.get(EstadoTicket.EN_PROGRESO.value, 0),
            resueltos=por_estado.get(EstadoTicket.RESUELTO.value, 0),
            cerrados=por_estado.get(EstadoTicket.CERRADO.value, 0),
            alta_prioridad=alta_prioridad,
        )

    def to_dict(self) -> dict:
        return {
            "total_tickets": self.total_tickets,
            "pendientes": self.pendientes,
            "en_progreso": self.en_progreso,
            "resueltos": self.resueltos,
            "cerrados": self.cerrados,
            "alta_prioridad": self.alta_prioridad,
        }


@dataclass
class PaginacionDTO:
    """Metadatos de paginación."""

    pagina: int
    por_pagina: int
    total: int

    @property
    def total_paginas(self) -> int:
        if self.por_pagina <= 0:
            return 0
        return (self.total + self.por_pagina - 1) // self.por_pagina

    @property
    def tiene_siguiente(self) -> bool:
        return self.pagina < self.total_paginas

    @property
    def tiene_anterior(self) -> bool:
        return self.pagina > 1

    def to_dict(self) -> dict:
        return {
            "current_page": self.pagina,
            "total_pages": self.total_paginas,
            "total_items": self.total,
            "items_per_page": self.por_pagina,
            "has_next": self.tiene_siguiente,
            "has_prev": self.tiene_anterior,
        }


@dataclass
class ListarTicketsResultDTO:
    """Resultado completo del listado."""

    tickets: List[TicketListItemDTO]
    paginacion: PaginacionDTO
    filtros_aplicados: Dict[str, Any] = field(default_factory=dict)
    estadisticas: Optional[EstadisticasDTO] = None

    def to_dict(self) -> dict:
        result = {
            "tickets": [ticket.to_dict() for ticket in self.tickets],
            "pagination": self.paginacion.to_dict(),
            "filters_applied": self.filtros_aplicados,
        }
        if self.estadisticas is not None:
            result["estadisticas"] = self.estadisticas.to_dict()
        return result
