"""
Mappers para la conversión entre Entities (Core) y Models (Django).

Responsabilidades:
- Convertir TicketEntity → TicketModel (para persistencia)
- Convertir TicketModel → TicketEntity (para uso en el Core)
- Convertir TicketModel → TicketVista (read model con referencias resueltas)

Principios:
- Los mappers no tienen estado
- No contienen lógica de negocio
- Solo tratan conversión de datos
"""

from typing import List, Optional

from src.core.tickets.dtos import TicketVista
from src.core.tickets.entities import TicketEntity

from .models import TicketModel


def _nombre_usuario(user) -> Optional[str]:
    if user is None:
        return None
    return user.get_full_name() or user.get_username()


class TicketMapper:
    """
    Mapper entre TicketEntity/TicketVista y TicketModel.

    Responsable de:
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    - to_vista(): Model (con select_related) → TicketVista
    """

    @staticmethod
    def to_model(entity: TicketEntity) -> TicketModel:
        """
        Convierte TicketEntity en TicketModel.

        Note:
            No llama a .save(); eso le corresponde al Repository
        """
        return TicketModel(
            id=entity.id,
            numero_ticket=entity.numero_ticket,
            titulo=entity.titulo,
            descripcion=entity.descripcion,
            categoria_id=entity.categoria_id,
            prioridad_id=entity.prioridad_id,
            estado_id=entity.estado_id,
            usuario_solicitante_id=entity.usuario_solicitante_id,
            tecnico_asignado_id=entity.tecnico_asignado_id,
            equipo_afectado_id=entity.equipo_afectado_id,
            fecha_creacion=entity.fecha_creacion,
            fecha_asignacion=entity.fecha_asignacion,
            fecha_resolucion=entity.fecha_resolucion,
            fecha_cierre=entity.fecha_cierre,
        )

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Convierte TicketModel en TicketEntity.

        Note:
            Omite las validaciones de TicketEntity.crear(): los datos ya
            se validaron al crear el ticket
        """
        return TicketEntity(
            id=model.id,
            numero_ticket=model.numero_ticket,
            titulo=model.titulo,
            descripcion=model.descripcion,
            categoria_id=model.categoria_id,
            prioridad_id=model.prioridad_id,
            estado_id=model.estado_id,
            usuario_solicitante_id=model.usuario_solicitante_id,
            tecnico_asignado_id=model.tecnico_asignado_id,
            equipo_afectado_id=model.equipo_afectado_id,
            fecha_creacion=model.fecha_creacion,
            fecha_asignacion=model.fecha_asignacion,
            fecha_resolucion=model.fecha_resolucion,
            fecha_cierre=model.fecha_cierre,
        )

    @staticmethod
    def to_vista(model: TicketModel) -> TicketVista:
        """
        Convierte un TicketModel en la vista de lectura.

        El queryset de origen debe usar select_related sobre todas las
        relaciones para evitar consultas N+1.
        """
        solicitante = model.usuario_solicitante
        tecnico = model.tecnico_asignado
        equipo = model.equipo_afectado

        return TicketVista(
            id=model.id,
            numero_ticket=model.numero_ticket,
            titulo=model.titulo,
            descripcion=model.descripcion,
            fecha_creacion=model.fecha_creacion,
            categoria_id=model.categoria_id,
            categoria=model.categoria.nombre,
            prioridad_id=model.prioridad_id,
            prioridad=model.prioridad.nombre,
            prioridad_nivel=model.prioridad.nivel,
            estado_id=model.estado_id,
            estado=model.estado.nombre,
            usuario_solicitante_id=model.usuario_solicitante_id,
            usuario_solicitante=_nombre_usuario(solicitante),
            usuario_email=solicitante.email if solicitante else None,
            tecnico_asignado_id=model.tecnico_asignado_id,
            tecnico_asignado=_nombre_usuario(tecnico),
            tecnico_email=tecnico.email if tecnico else None,
            equipo_afectado_id=model.equipo_afectado_id,
            equipo_afectado=equipo.nombre if equipo else None,
            equipo_codigo=equipo.codigo_inventario if equipo else None,
            fecha_asignacion=model.fecha_asignacion,
            fecha_resolucion=model.fecha_resolucion,
            fecha_cierre=model.fecha_cierre,
        )

    @staticmethod
    def to_vista_list(models: List[TicketModel]) -> List[TicketVista]:
        return [TicketMapper.to_vista(model) for model in models]
