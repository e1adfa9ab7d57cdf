"""
Identidad del llamador: Principal y Rol.

El Principal es efímero: lo construye la capa de autenticación externa en
cada petición y el Core solo lo lee. El rol llega como texto libre
("Administrador", "admin", "usuario final"...) y se normaliza en un único
punto, Rol.from_string(), para que los alias no se dispersen por el código.
"""

from dataclasses import dataclass
from enum import Enum

from .exceptions import AuthorizationError


class Rol(Enum):
    """
    Roles cerrados del sistema.

    Alias aceptados (sin distinguir mayúsculas):
        administrador: admin
        tecnico: tecnico_soporte
        usuario_final: usuario, "usuario final"
    """

    ADMINISTRADOR = "administrador"
    TECNICO = "tecnico"
    USUARIO_FINAL = "usuario_final"

    @classmethod
    def from_string(cls, value: str) -> "Rol":
        """
        Convierte el nombre de rol recibido en el enum.

        Args:
            value: Nombre o alias del rol

        Returns:
            Rol correspondiente

        Raises:
            AuthorizationError: Si el rol no es reconocido (ROL_INVALIDO)
        """
        normalizado = (value or "").strip().lower().replace("-", "_").replace(" ", "_")

        rol = _ALIAS_ROLES.get(normalizado)
        if rol is None:
            raise AuthorizationError(
                "Rol de usuario no reconocido",
                code="ROL_INVALIDO",
            )
        return rol

    @classmethod
    def es_conocido(cls, value: str) -> bool:
        """Indica si el texto corresponde a algún rol o alias."""
        try:
            cls.from_string(value)
        except AuthorizationError:
            return False
        return True


_ALIAS_ROLES = {
    "administrador": Rol.ADMINISTRADOR,
    "admin": Rol.ADMINISTRADOR,
    "tecnico": Rol.TECNICO,
    "tecnico_soporte": Rol.TECNICO,
    "usuario_final": Rol.USUARIO_FINAL,
    "usuario": Rol.USUARIO_FINAL,
}


@dataclass(frozen=True)
class Principal:
    """
    Usuario autenticado de la petición actual.

    El rol se guarda tal como llegó y se normaliza al leer `rol`, de modo
    que solo las operaciones que dependen del rol fallan con ROL_INVALIDO.

    Attributes:
        id: ID del usuario autenticado
        rol_nombre: Nombre del rol tal como lo entregó la capa de identidad
    """

    id: int
    rol_nombre: str = ""

    @property
    def rol(self) -> Rol:
        return Rol.from_string(self.rol_nombre)

    @property
    def es_administrador(self) -> bool:
        return Rol.es_conocido(self.rol_nombre) and self.rol == Rol.ADMINISTRADOR
