"""
Identity Context - Principal de la petición a partir de django.contrib.auth.

La autenticación en sí (sesión, JWT u otro backend) es externa: este
adapter solo lee request.user y lo traduce al Principal del Core.

Reglas:
- Superusuario → administrador
- Si no, el primer grupo cuyo nombre corresponde a un rol conocido
- Si ningún grupo es reconocible, se conserva el nombre del primer grupo
  (o vacío) y las operaciones que dependen del rol fallan con ROL_INVALIDO
"""

from typing import Optional

from src.core.shared.exceptions import AuthenticationError
from src.core.shared.identity import Principal, Rol


def rol_de_usuario(user) -> str:
    """Nombre de rol de un usuario de Django (ver reglas del módulo)."""
    if user.is_superuser:
        return Rol.ADMINISTRADOR.value

    nombres = list(user.groups.order_by('id').values_list('name', flat=True))
    for nombre in nombres:
        if Rol.es_conocido(nombre):
            return nombre
    return nombres[0] if nombres else ""


def get_principal(request) -> Principal:
    """
    Principal autenticado de la petición.

    Raises:
        AuthenticationError: Si no hay usuario autenticado (NO_AUTENTICADO)
    """
    principal = get_principal_or_none(request)
    if principal is None:
        raise AuthenticationError()
    return principal


def get_principal_or_none(request) -> Optional[Principal]:
    user = getattr(request, 'user', None)
    if user is None or not user.is_authenticated:
        return None
    return Principal(id=user.pk, rol_nombre=rol_de_usuario(user))
