"""
Use Cases (Application Services) del Dominio de Tickets.

Este módulo contiene los casos de uso de la aplicación, que orquestan la
lógica de negocio coordinando entidades, repositorios y eventos.

Use Cases implementados:
- CrearTicketService: Crea un ticket numerado en estado "Pendiente"
- ListarTicketsService: Lista tickets visibles para el rol del llamador

Responsabilidades de los Use Cases:
- Validar la entrada en el orden documentado (el primer error gana)
- Coordinar entidades y ports
- Gestionar transacciones (vía UoW)
- Disparar eventos de dominio
- Devolver DTOs de salida

Principios:
- Un Use Case = Una operación de negocio
- Dependencias inyectadas (DI), incluido el reloj
- Sin lógica de infraestructura
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Union
import logging

from src.core.shared.identity import Principal, Rol
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    NumeroTicketDuplicadoError,
    ReferenceNotFoundError,
    ValidationError,
)

from .entities import TicketEntity, TipoReferencia
from .events import TicketCreadoEvent
from .numbering import GeneradorNumeroTicket
from .ports import ReferenciasGateway, TicketQueryRepository, TicketRepository
from .dtos import (
    CrearTicketInputDTO,
    CrearTicketOutputDTO,
    FiltroTickets,
    ListarTicketsQueryDTO,
    ListarTicketsResultDTO,
    OrdenTickets,
    PaginacionDTO,
    TicketListItemDTO,
    TicketOutputDTO,
    excede_entero_maximo,
    parse_entero_positivo,
)

logger = logging.getLogger(__name__)

Reloj = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _exigir_principal(principal: Optional[Principal]) -> Principal:
    if principal is None:
        raise AuthenticationError()
    return principal


class CrearTicketService:
    """
    Use Case: Crear un ticket nuevo.

    Flujo:
    1. Exigir un principal autenticado
    2. Validar título y descripción
    3. Validar IDs de categoría y prioridad (formato y existencia)
    4. Validar el equipo afectado si se indicó un ID numérico
    5. Resolver el estado inicial "Pendiente"
    6. Numerar, insertar y encolar TicketCreado en una transacción,
       reintentando si otro ticket tomó el mismo número

    Attributes:
        ticket_repo: Repositorio de tickets
        referencias: Gateway de datos de referencia
        generador: Generador de números de ticket
        uow: Unit of Work para transacciones
        reloj: Fuente del instante actual (UTC)
        max_intentos: Intentos de numeración antes de fallar con conflicto

    Example:
        service = CrearTicketService(ticket_repo, referencias, generador, uow)
        output = service.execute(
            CrearTicketInputDTO(
                titulo="Impresora sin respuesta",
                descripcion="La impresora de la oficina 201 no imprime",
                categoria_id=1,
                prioridad_id=2,
            ),
            principal=Principal(id=42, rol_nombre="usuario_final"),
        )
        print(output.ticket.numero_ticket)  # TICK-20250831-0001
    """

    MAX_INTENTOS_POR_DEFECTO = 5

    def __init__(
        self,
        ticket_repo: TicketRepository,
        referencias: ReferenciasGateway,
        generador: GeneradorNumeroTicket,
        uow: UnitOfWork,
        reloj: Optional[Reloj] = None,
        max_intentos: int = MAX_INTENTOS_POR_DEFECTO,
    ):
        self.ticket_repo = ticket_repo
        self.referencias = referencias
        self.generador = generador
        self.uow = uow
        self.reloj = reloj or utc_now
        self.max_intentos = max(1, int(max_intentos))

    def execute(
        self,
        input_dto: CrearTicketInputDTO,
        principal: Optional[Principal],
    ) -> CrearTicketOutputDTO:
        """
        Ejecuta la creación del ticket.

        Args:
            input_dto: Datos crudos de la petición
            principal: Usuario autenticado (None si no hay sesión)

        Returns:
            Ticket enriquecido y nota de siguiente paso

        Raises:
            AuthenticationError: Sin principal
            ValidationError: Datos inválidos (código según el campo)
            ReferenceNotFoundError: Categoría, prioridad o equipo inexistente
            ConfigurationError: Falta el estado "Pendiente"
            ConflictError: No se logró un número único tras los reintentos
        """
        principal = _exigir_principal(principal)

        TicketEntity.validar_titulo(input_dto.titulo)
        TicketEntity.validar_descripcion(input_dto.descripcion)

        categoria_id = self._parse_id(input_dto.categoria_id, "categoría", "CATEGORIA_INVALIDA", "categoria_id")
        prioridad_id = self._parse_id(input_dto.prioridad_id, "prioridad", "PRIORIDAD_INVALIDA", "prioridad_id")

        if not self._existe(TipoReferencia.CATEGORIA, categoria_id):
            raise ReferenceNotFoundError(
                "La categoría especificada no existe",
                code="CATEGORIA_NO_ENCONTRADA",
                entity_type="Categoria",
                entity_id=categoria_id,
            )

        if not self._existe(TipoReferencia.PRIORIDAD, prioridad_id):
            raise ReferenceNotFoundError(
                "La prioridad especificada no existe",
                code="PRIORIDAD_NO_ENCONTRADA",
                entity_type="Prioridad",
                entity_id=prioridad_id,
            )

        # Un ID de equipo no numérico se ignora
        equipo_id = parse_entero_positivo(input_dto.equipo_afectado_id)
        if excede_entero_maximo(input_dto.equipo_afectado_id) or (
            equipo_id is not None and not self._existe(TipoReferencia.EQUIPO, equipo_id)
        ):
            raise ReferenceNotFoundError(
                "El equipo especificado no existe",
                code="EQUIPO_NO_ENCONTRADO",
                entity_type="Equipo",
                entity_id=equipo_id,
            )

        estado_id = self.referencias.estado_inicial_id()
        if estado_id is None:
            logger.error("Estado inicial 'Pendiente' no configurado")
            raise ConfigurationError(
                "Estado inicial no configurado en el sistema",
                code="ESTADO_INICIAL_NO_ENCONTRADO",
            )

        for intento in range(1, self.max_intentos + 1):
            try:
                ticket = self._insertar(
                    input_dto, principal, categoria_id, prioridad_id, equipo_id, estado_id
                )
            except NumeroTicketDuplicadoError as exc:
                logger.warning(
                    "Número %s ya asignado (intento %s/%s)",
                    exc.numero_ticket,
                    intento,
                    self.max_intentos,
                )
                continue

            logger.info(
                "Ticket %s creado por usuario %s",
                ticket.numero_ticket,
                principal.id,
            )
            return CrearTicketOutputDTO(ticket=ticket)

        raise ConflictError("No fue posible asignar un número de ticket único")

    def _insertar(
        self,
        input_dto: CrearTicketInputDTO,
        principal: Principal,
        categoria_id: int,
        prioridad_id: int,
        equipo_id: Optional[int],
        estado_id: int,
    ) -> TicketOutputDTO:
        ahora = self.reloj()

        with self.uow:
            numero = self.generador.siguiente(ahora.astimezone(timezone.utc).date())

            ticket = self.ticket_repo.add(
                TicketEntity.crear(
                    numero_ticket=numero,
                    titulo=input_dto.titulo,
                    descripcion=input_dto.descripcion,
                    categoria_id=categoria_id,
                    prioridad_id=prioridad_id,
                    estado_id=estado_id,
                    usuario_solicitante_id=principal.id,
                    fecha_creacion=ahora,
                    equipo_afectado_id=equipo_id,
                )
            )
            vista = self.ticket_repo.obtener_vista(ticket.id)

            self.uow.publish_event(
                TicketCreadoEvent(
                    aggregate_id=ticket.id,
                    numero_ticket=ticket.numero_ticket,
                    usuario_solicitante_id=ticket.usuario_solicitante_id,
                    categoria_id=ticket.categoria_id,
                    prioridad_id=ticket.prioridad_id,
                    equipo_afectado_id=ticket.equipo_afectado_id,
                )
            )

        return TicketOutputDTO.from_vista(vista)

    def _existe(self, tipo: TipoReferencia, referencia_id: Optional[int]) -> bool:
        return referencia_id is not None and self.referencias.existe(tipo, referencia_id)

    @staticmethod
    def _parse_id(valor: Any, nombre: str, code: str, field: str) -> Optional[int]:
        """ID de referencia; None si es numérico pero no cabe en la base de datos."""
        referencia_id = parse_entero_positivo(valor)
        if referencia_id is None and not excede_entero_maximo(valor):
            raise ValidationError(
                f"Debe seleccionar una {nombre} válida",
                code=code,
                field=field,
            )
        return referencia_id


class ListarTicketsService:
    """
    Use Case: Listar tickets visibles para el llamador.

    No usa UoW porque es una operación de solo lectura.

    Visibilidad por rol (no se puede sobrescribir con filtros):
    - usuario_final: solo los tickets que creó
    - tecnico: solo los tickets que tiene asignados
    - administrador: todos, más estadísticas del conjunto filtrado
    """

    MENSAJE_EXITO = "Tickets obtenidos exitosamente"

    def __init__(self, query_repo: TicketQueryRepository, reloj: Optional[Reloj] = None):
        self.query_repo = query_repo
        self.reloj = reloj or utc_now

    def execute(
        self,
        params: Union[Mapping[str, Any], ListarTicketsQueryDTO],
        principal: Optional[Principal],
    ) -> ListarTicketsResultDTO:
        """
        Lista tickets con filtros, orden y paginación.

        Args:
            params: Parámetros de query string o un DTO ya validado
            principal: Usuario autenticado (None si no hay sesión)

        Returns:
            Página de tickets con campos derivados

        Raises:
            AuthenticationError: Sin principal
            ValidationError: Parámetros inválidos
            AuthorizationError: Rol no reconocido (ROL_INVALIDO)
        """
        principal = _exigir_principal(principal)

        if isinstance(params, ListarTicketsQueryDTO):
            query = params
        else:
            query = ListarTicketsQueryDTO.from_params(params)

        rol = principal.rol
        filtro = self._filtro_para(rol, principal.id, query)
        orden = OrdenTickets(campo=query.orden, direccion=query.direccion)

        vistas = self.query_repo.listar(filtro, orden, query.limite, query.offset)
        total = self.query_repo.contar(filtro)

        estadisticas = None
        if rol == Rol.ADMINISTRADOR:
            estadisticas = self.query_repo.estadisticas(filtro)

        ahora = self.reloj()
        return ListarTicketsResultDTO(
            tickets=[TicketListItemDTO.from_vista(v, principal, ahora) for v in vistas],
            paginacion=PaginacionDTO(pagina=query.pagina, por_pagina=query.limite, total=total),
            filtros_aplicados=self._filtros_aplicados(rol, query),
            estadisticas=estadisticas,
        )

    @staticmethod
    def _filtro_para(rol: Rol, principal_id: int, query: ListarTicketsQueryDTO) -> FiltroTickets:
        return FiltroTickets(
            solicitante_id=principal_id if rol == Rol.USUARIO_FINAL else None,
            tecnico_asignado_id=principal_id if rol == Rol.TECNICO else None,
            estado_id=query.estado_id,
            categoria_id=query.categoria_id,
            prioridad_id=query.prioridad_id,
            fecha_desde=query.fecha_desde,
            fecha_hasta=query.fecha_hasta,
        )

    @staticmethod
    def _filtros_aplicados(rol: Rol, query: ListarTicketsQueryDTO) -> dict:
        return {
            "rol": rol.value,
            "estado_id": query.estado_id,
            "categoria_id": query.categoria_id,
            "prioridad_id": query.prioridad_id,
            "fecha_desde": query.fecha_desde.isoformat() if query.fecha_desde else None,
            "fecha_hasta": query.fecha_hasta.isoformat() if query.fecha_hasta else None,
            "orden": query.orden.value,
            "direccion": query.direccion.value,
        }
