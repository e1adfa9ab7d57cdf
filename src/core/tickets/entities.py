"""
Entidades del Dominio de Tickets.

Entidades y value objects:
- TicketEntity: Agregado principal (solo creación; las transiciones de
  estado pertenecen a flujos externos)
- NumeroTicket: Identificador legible TICK-YYYYMMDD-NNNN
- EstadoTicket: Estados estándar y su color de presentación
- NivelPrioridad: Niveles de prioridad (1 alta, 2 media, 3 baja)
- TipoReferencia: Tipos de datos de referencia validados en la creación

Reglas de negocio encapsuladas:
- Validación ordenada de título y descripción
- Formato y secuencia del número de ticket
- Campos derivados de listado (horas, urgencia, permisos)
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional
import re

from src.core.shared.exceptions import ValidationError
from src.core.shared.identity import Principal


class EstadoTicket(Enum):
    """
    Estados estándar de un ticket.

    Flujo:
        PENDIENTE → EN_PROGRESO → RESUELTO → CERRADO

    El valor es el nombre almacenado en la tabla de estados.
    """

    PENDIENTE = "Pendiente"
    EN_PROGRESO = "En Progreso"
    RESUELTO = "Resuelto"
    CERRADO = "Cerrado"

    @property
    def color(self) -> str:
        return _COLORES_ESTADO[self]

    @classmethod
    def color_de(cls, nombre: Optional[str]) -> str:
        """Color del estado por nombre; negro si el nombre no es estándar."""
        for estado in cls:
            if estado.value == nombre:
                return estado.color
        return COLOR_POR_DEFECTO


COLOR_POR_DEFECTO = "#000000"

_COLORES_ESTADO = {
    EstadoTicket.PENDIENTE: "#FFA500",
    EstadoTicket.EN_PROGRESO: "#0066CC",
    EstadoTicket.RESUELTO: "#28A745",
    EstadoTicket.CERRADO: "#6C757D",
}


class NivelPrioridad(Enum):
    """Niveles numéricos de prioridad (menor número, mayor urgencia)."""

    ALTA = 1
    MEDIA = 2
    BAJA = 3

    @classmethod
    def color_de(cls, nivel: Optional[int]) -> str:
        """Rojo para nivel 1, naranja para nivel 2, verde en otro caso."""
        if nivel == cls.ALTA.value:
            return "#FF4444"
        if nivel == cls.MEDIA.value:
            return "#FFA500"
        return "#28A745"


class TipoReferencia(Enum):
    """Datos de referencia que la creación de tickets valida."""

    CATEGORIA = "categoria"
    PRIORIDAD = "prioridad"
    EQUIPO = "equipo"


@dataclass(frozen=True)
class NumeroTicket:
    """
    Número de ticket con alcance diario.

    Formato: TICK-YYYYMMDD-NNNN, con NNNN rellenado a 4 dígitos.
    La secuencia es única dentro del día, no necesariamente sin huecos.

    Example:
        numero = NumeroTicket(fecha=date(2025, 8, 31), secuencia=15)
        str(numero)              # "TICK-20250831-0015"
        str(numero.siguiente())  # "TICK-20250831-0016"
    """

    fecha: date
    secuencia: int = 1

    PREFIJO: ClassVar[str] = "TICK"
    _PATRON: ClassVar = re.compile(r"^TICK-(\d{8})-(\d{4,})$")

    @classmethod
    def prefijo_del_dia(cls, fecha: date) -> str:
        """Prefijo común a todos los números del día (ej: "TICK-20250831-")."""
        return f"{cls.PREFIJO}-{fecha:%Y%m%d}-"

    @classmethod
    def parse(cls, valor: str) -> "NumeroTicket":
        """
        Interpreta un número existente.

        Raises:
            ValueError: Si el texto no respeta el formato
        """
        match = cls._PATRON.match(valor or "")
        if not match:
            raise ValueError(f"Número de ticket inválido: {valor}")

        fecha = datetime.strptime(match.group(1), "%Y%m%d").date()
        return cls(fecha=fecha, secuencia=int(match.group(2)))

    def siguiente(self) -> "NumeroTicket":
        return NumeroTicket(fecha=self.fecha, secuencia=self.secuencia + 1)

    def __str__(self) -> str:
        return f"{self.prefijo_del_dia(self.fecha)}{self.secuencia:04d}"


@dataclass
class TicketEntity:
    """
    Entidad de Dominio: Ticket.

    Invariantes:
    - Título no vacío, máximo 255 caracteres (tras recortar espacios)
    - Descripción no vacía, mínimo 10 caracteres (tras recortar espacios)
    - numero_ticket se asigna una sola vez, en la creación
    - El estado inicial es siempre "Pendiente"
    - usuario_solicitante_id es obligatorio

    Attributes:
        id: ID asignado por la persistencia (None antes de insertar)
        numero_ticket: Identificador legible y único
        titulo: Título del ticket
        descripcion: Descripción del problema
        categoria_id: Categoría (referencia)
        prioridad_id: Prioridad (referencia)
        estado_id: Estado actual (referencia)
        usuario_solicitante_id: Usuario que creó el ticket
        tecnico_asignado_id: Técnico responsable (opcional)
        equipo_afectado_id: Equipo afectado (opcional)
        fecha_creacion: Momento de creación (inmutable)
        fecha_asignacion / fecha_resolucion / fecha_cierre: Fijadas por
            flujos externos al núcleo

    Example:
        ticket = TicketEntity.crear(
            numero_ticket="TICK-20250831-0001",
            titulo="Impresora sin respuesta",
            descripcion="La impresora de la oficina 201 no imprime",
            categoria_id=1,
            prioridad_id=2,
            estado_id=1,
            usuario_solicitante_id=42,
            fecha_creacion=ahora,
        )
    """

    numero_ticket: str = ""
    titulo: str = ""
    descripcion: str = ""
    categoria_id: Optional[int] = None
    prioridad_id: Optional[int] = None
    estado_id: Optional[int] = None
    usuario_solicitante_id: Optional[int] = None
    tecnico_asignado_id: Optional[int] = None
    equipo_afectado_id: Optional[int] = None
    fecha_creacion: Optional[datetime] = None
    fecha_asignacion: Optional[datetime] = None
    fecha_resolucion: Optional[datetime] = None
    fecha_cierre: Optional[datetime] = None
    id: Optional[int] = field(default=None)

    TITULO_MAX_LENGTH: ClassVar[int] = 255
    DESCRIPCION_MIN_LENGTH: ClassVar[int] = 10

    @classmethod
    def crear(
        cls,
        numero_ticket: str,
        titulo: str,
        descripcion: str,
        categoria_id: int,
        prioridad_id: int,
        estado_id: int,
        usuario_solicitante_id: int,
        fecha_creacion: datetime,
        equipo_afectado_id: Optional[int] = None,
    ) -> "TicketEntity":
        """
        Factory method que valida y construye un ticket nuevo.

        Raises:
            ValidationError: Si título o descripción son inválidos
        """
        cls.validar_titulo(titulo)
        cls.validar_descripcion(descripcion)

        if not usuario_solicitante_id:
            raise ValidationError(
                "El usuario solicitante es obligatorio",
                code="SOLICITANTE_REQUERIDO",
                field="usuario_solicitante_id",
            )

        return cls(
            numero_ticket=numero_ticket,
            titulo=titulo.strip(),
            descripcion=descripcion.strip(),
            categoria_id=categoria_id,
            prioridad_id=prioridad_id,
            estado_id=estado_id,
            usuario_solicitante_id=usuario_solicitante_id,
            equipo_afectado_id=equipo_afectado_id,
            fecha_creacion=fecha_creacion,
        )

    @classmethod
    def validar_titulo(cls, titulo) -> None:
        if not isinstance(titulo, str) or not titulo.strip():
            raise ValidationError(
                "El título es requerido",
                code="TITULO_REQUERIDO",
                field="titulo",
            )

        if len(titulo.strip()) > cls.TITULO_MAX_LENGTH:
            raise ValidationError(
                f"El título no puede exceder {cls.TITULO_MAX_LENGTH} caracteres",
                code="TITULO_MUY_LARGO",
                field="titulo",
            )

    @classmethod
    def validar_descripcion(cls, descripcion) -> None:
        if not isinstance(descripcion, str) or not descripcion.strip():
            raise ValidationError(
                "La descripción del problema es requerida",
                code="DESCRIPCION_REQUERIDA",
                field="descripcion",
            )

        if len(descripcion.strip()) < cls.DESCRIPCION_MIN_LENGTH:
            raise ValidationError(
                f"La descripción debe tener al menos {cls.DESCRIPCION_MIN_LENGTH} caracteres",
                code="DESCRIPCION_MUY_CORTA",
                field="descripcion",
            )

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id}, "
            f"numero_ticket={self.numero_ticket}, "
            f"titulo='{self.titulo[:20]}...'"
            f")"
        )


# =============================================================================
# Campos derivados (calculados, no almacenados)
# =============================================================================

HORAS_PARA_URGENCIA = 24


def calcular_horas_transcurridas(
    fecha_creacion: datetime,
    fecha_cierre: Optional[datetime],
    ahora: datetime,
    decimales: Optional[int] = 2,
) -> float:
    """
    Horas desde la creación hasta el cierre (o hasta ahora).

    Con decimales=None devuelve el valor exacto, sin redondear.
    """
    fin = fecha_cierre or ahora
    horas = (fin - fecha_creacion).total_seconds() / 3600
    return horas if decimales is None else round(horas, decimales)


def es_urgente(prioridad_nivel: Optional[int], horas_transcurridas: float) -> bool:
    """
    Prioridad alta abierta hace estrictamente más de 24 horas.

    Recibe las horas sin redondear: 24h00m10s ya es urgente.
    """
    return (
        prioridad_nivel == NivelPrioridad.ALTA.value
        and horas_transcurridas > HORAS_PARA_URGENCIA
    )


def puede_gestionar(principal: Principal, tecnico_asignado_id: Optional[int]) -> bool:
    """
    Permiso de edición/cierre sobre una fila.

    Administradores siempre; el técnico asignado cuando su ID coincide
    con el del llamador. La comparación es siempre por ID, nunca por nombre.
    """
    if principal.es_administrador:
        return True
    return tecnico_asignado_id is not None and tecnico_asignado_id == principal.id
