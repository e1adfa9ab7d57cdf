"""
Excepciones de Dominio de la Mesa de Ayuda.

Define excepciones específicas del dominio que permiten comunicar
errores de forma clara y tipada entre las capas. Cada excepción lleva
un código legible por máquina que viaja hasta la respuesta HTTP.

Jerarquía:
    DomainException (base)
    ├── ValidationError (entrada inválida, corregible por el cliente)
    ├── EntityNotFoundError (entidad no existe)
    │   └── ReferenceNotFoundError (categoría/prioridad/equipo inexistente)
    ├── AuthenticationError (no hay principal autenticado)
    ├── AuthorizationError (rol no reconocido / permisos insuficientes)
    ├── ConflictError (violación de unicidad)
    │   └── NumeroTicketDuplicadoError (colisión de numero_ticket)
    ├── ForeignKeyError (referencia inválida a nivel de persistencia)
    └── ConfigurationError (datos semilla ausentes, no reintentable)
"""


class DomainException(Exception):
    """
    Excepción base para todos los errores de dominio.

    Todas las excepciones específicas del dominio heredan de esta clase,
    lo que permite capturar cualquier error de dominio de forma genérica.

    Example:
        try:
            service.execute(input_dto, principal)
        except DomainException as e:
            logger.warning(f"Error de dominio: {e}")
    """

    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa la excepción al formato de respuesta de la API."""
        return {
            "success": False,
            "message": self.message,
            "error": self.code,
        }


class ValidationError(DomainException):
    """
    Error de validación de datos de entrada.

    Example:
        if not titulo.strip():
            raise ValidationError(
                "El título es requerido",
                code="TITULO_REQUERIDO",
                field="titulo",
            )
    """

    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, code: str = None, field: str = None):
        self.field = field
        super().__init__(message, code)


class EntityNotFoundError(DomainException):
    """Entidad no encontrada en el repositorio."""

    default_code = "ENTITY_NOT_FOUND"

    def __init__(
        self,
        message: str,
        code: str = None,
        entity_type: str = None,
        entity_id=None,
    ):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, code)


class ReferenceNotFoundError(EntityNotFoundError):
    """
    Dato de referencia inexistente o inactivo.

    Se lanza antes de cualquier escritura, cuando la categoría, prioridad
    o equipo indicados no existen. Es corregible por el cliente.
    """


class AuthenticationError(DomainException):
    """No existe un principal autenticado para la petición."""

    default_code = "NO_AUTENTICADO"

    def __init__(self, message: str = "Usuario no autenticado", code: str = None):
        super().__init__(message, code)


class AuthorizationError(DomainException):
    """El principal no tiene un rol válido o suficiente para la operación."""

    default_code = "INSUFFICIENT_PERMISSIONS"


class ConflictError(DomainException):
    """Violación de unicidad al persistir."""

    default_code = "DUPLICATE_ERROR"

    def __init__(self, message: str = "Error de duplicación de datos", code: str = None):
        super().__init__(message, code)


class NumeroTicketDuplicadoError(ConflictError):
    """
    Otro ticket ya ocupa el número generado.

    Señala la carrera entre dos creaciones del mismo día; el servicio de
    creación la captura y reintenta con un número nuevo.
    """

    def __init__(self, numero_ticket: str):
        self.numero_ticket = numero_ticket
        super().__init__(f"El número de ticket {numero_ticket} ya existe")


class ForeignKeyError(DomainException):
    """Referencia inválida detectada por la base de datos."""

    default_code = "FOREIGN_KEY_ERROR"

    def __init__(
        self,
        message: str = "Referencia inválida a datos relacionados",
        code: str = None,
    ):
        super().__init__(message, code)


class ConfigurationError(DomainException):
    """
    Error de configuración del despliegue.

    Indica datos semilla ausentes (por ejemplo el estado "Pendiente").
    Es fatal y no reintentable: requiere acción del operador.
    """

    default_code = "CONFIGURATION_ERROR"
