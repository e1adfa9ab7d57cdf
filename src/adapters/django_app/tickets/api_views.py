"""
API Views JSON del dominio de Tickets.

Endpoints:
- POST /api/tickets/ - Crear ticket
- GET /api/tickets/ - Listar tickets visibles para el rol del llamador
- GET /health/ - Estado del servicio y de la base de datos

Formato:
- Entrada: JSON (POST) o query string (GET)
- Salida: JSON con estructura {success, message, data} o
  {success: false, message, error: <código>}

Autenticación:
- request.user de django.contrib.auth (sesión o backend externo)
"""

import json
import logging
from typing import Any, Dict, Optional

from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from src.core.shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ForeignKeyError,
    ReferenceNotFoundError,
    ValidationError,
)
from src.core.tickets.dtos import CrearTicketInputDTO
from src.config.container import get_container

from ..shared.database import check_database_connection
from ..shared.identity import get_principal, get_principal_or_none

logger = logging.getLogger(__name__)


# Orden relevante: subclases antes que sus bases
STATUS_POR_EXCEPCION = (
    (ValidationError, 400),
    (ReferenceNotFoundError, 400),
    (EntityNotFoundError, 404),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (ForeignKeyError, 400),
    (ConfigurationError, 500),
)


# =============================================================================
# Helpers
# =============================================================================

def json_response(
    success: bool,
    message: str = None,
    data: Any = None,
    error: str = None,
    status: int = 200,
) -> JsonResponse:
    """
    Crea la respuesta JSON estandarizada.

    Args:
        success: Si la operación fue exitosa
        message: Mensaje legible
        data: Datos de la respuesta
        error: Código de error legible por máquina
        status: HTTP status code
    """
    response: Dict[str, Any] = {'success': success}

    if message is not None:
        response['message'] = message

    if data is not None:
        response['data'] = data

    if error is not None:
        response['error'] = error

    return JsonResponse(response, status=status)


def parse_json_body(request: HttpRequest) -> Dict:
    """
    Parsea el body JSON del request.

    Raises:
        ValidationError: Si el body no es un objeto JSON (JSON_INVALIDO)
    """
    if not request.body:
        return {}

    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("El cuerpo de la petición no es JSON válido", code="JSON_INVALIDO")

    if not isinstance(data, dict):
        raise ValidationError("El cuerpo de la petición debe ser un objeto JSON", code="JSON_INVALIDO")
    return data


# =============================================================================
# Base API View
# =============================================================================

@method_decorator(csrf_exempt, name='dispatch')
class BaseAPIView(View):
    """
    View base para APIs JSON.

    Ofrece:
    - Parsing de JSON
    - Acceso al contenedor de DI
    - Tratamiento de errores estandarizado
    """

    def get_container(self):
        return get_container()

    def get_service(self, service_name: str):
        """Obtiene un service del contenedor por nombre de provider."""
        return getattr(self.get_container(), service_name)()

    def parse_body(self, request: HttpRequest) -> Dict:
        return parse_json_body(request)

    def handle_exception(self, e: Exception, request: Optional[HttpRequest] = None) -> JsonResponse:
        """
        Convierte una excepción en respuesta JSON.

        Las excepciones de dominio se exponen con su código; cualquier otra
        se registra y se responde como INTERNAL_SERVER_ERROR sin detalles.
        """
        if isinstance(e, DomainException):
            status = next(
                (code for cls, code in STATUS_POR_EXCEPCION if isinstance(e, cls)),
                400,
            )
            if status >= 500:
                logger.error("Error de configuración: %s", e)
            return json_response(**e.to_dict(), status=status)

        user_id = getattr(getattr(request, 'user', None), 'pk', None)
        logger.exception("Error inesperado en la API (usuario=%s)", user_id)
        return json_response(
            success=False,
            message="Error interno del servidor",
            error="INTERNAL_SERVER_ERROR",
            status=500,
        )


# =============================================================================
# Ticket API Views
# =============================================================================

class TicketAPIListView(BaseAPIView):
    """
    API para crear y listar tickets.

    POST /api/tickets/ - Crea un ticket
    GET /api/tickets/ - Lista tickets
    """

    def get(self, request: HttpRequest) -> JsonResponse:
        """
        Lista tickets visibles para el llamador.

        Query params:
        - page: Página (default: 1)
        - limit: Elementos por página (default: 10, máximo 100)
        - estado_id / categoria_id / prioridad_id: Filtros
        - fecha_desde / fecha_hasta: YYYY-MM-DD, inclusivas
        - orden: fecha_creacion|titulo|prioridad_nivel|estado|numero_ticket
        - direccion: ASC|DESC
        """
        try:
            listar_service = self.get_service('listar_tickets_service')
            resultado = listar_service.execute(
                request.GET.dict(),
                principal=get_principal_or_none(request),
            )

            return json_response(
                success=True,
                message=listar_service.MENSAJE_EXITO,
                data=resultado.to_dict(),
            )

        except Exception as e:
            return self.handle_exception(e, request)

    def post(self, request: HttpRequest) -> JsonResponse:
        """
        Crea un ticket nuevo.

        Body JSON:
        {
            "titulo": "string (obligatorio, máx. 255)",
            "descripcion": "string (obligatorio, mín. 10)",
            "categoria_id": int (obligatorio),
            "prioridad_id": int (obligatorio),
            "equipo_afectado_id": int (opcional)
        }
        """
        try:
            principal = get_principal(request)

            data = self.parse_body(request)
            crear_service = self.get_service('crear_ticket_service')
            output = crear_service.execute(
                CrearTicketInputDTO.from_dict(data),
                principal=principal,
            )

            return json_response(
                success=True,
                message="Ticket creado exitosamente",
                data=output.to_dict(),
                status=201,
            )

        except Exception as e:
            return self.handle_exception(e, request)


class HealthCheckView(View):
    """GET /health/ - Estado del servicio."""

    def get(self, request: HttpRequest) -> JsonResponse:
        database = check_database_connection()
        status = 200 if database['healthy'] else 503
        return JsonResponse(
            {
                'status': 'ok' if database['healthy'] else 'degraded',
                'database': database,
            },
            status=status,
        )
