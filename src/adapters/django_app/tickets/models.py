"""
Django Models del dominio de Tickets.

Estos models son ADAPTERS: implementan la persistencia de las entidades
definidas en src/core/tickets/entities.py.

IMPORTANTE:
- Los models NO contienen lógica de negocio
- La lógica de negocio vive en las Entities y Use Cases del Core
- Se convierten a/desde el Core mediante Mappers

Tablas:
- CategoriaModel, PrioridadModel, EstadoTicketModel, EquipoModel: datos
  de referencia administrados fuera del núcleo (Django admin, semillas)
- TicketModel: tabla principal de tickets
"""

from django.conf import settings
from django.db import models
from django.utils import timezone


class CategoriaModel(models.Model):
    """Categoría de ticket (Hardware, Software, Red...)."""

    nombre = models.CharField(max_length=100, unique=True)
    descripcion = models.TextField(blank=True, default='')
    activo = models.BooleanField(default=True, db_index=True)
    fecha_creacion = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'categorias_tickets'
        verbose_name = 'Categoría'
        verbose_name_plural = 'Categorías'
        ordering = ['nombre']

    def __str__(self):
        return self.nombre


class PrioridadModel(models.Model):
    """
    Prioridad de ticket.

    Fields:
        nivel: 1 alta, 2 media, 3 baja (menor número, mayor urgencia)
        color: Color configurado por el administrador (informativo; el
            listado calcula su propio color a partir del nivel)
    """

    nombre = models.CharField(max_length=50, unique=True)
    nivel = models.PositiveSmallIntegerField(db_index=True)
    color = models.CharField(max_length=7, blank=True, default='')
    descripcion = models.TextField(blank=True, default='')
    activo = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'prioridades_tickets'
        verbose_name = 'Prioridad'
        verbose_name_plural = 'Prioridades'
        ordering = ['nivel']

    def __str__(self):
        return f"{self.nombre} ({self.nivel})"


class EstadoTicketModel(models.Model):
    """Estado del ciclo de vida (Pendiente, En Progreso, Resuelto, Cerrado)."""

    nombre = models.CharField(max_length=50, unique=True)
    descripcion = models.TextField(blank=True, default='')
    es_final = models.BooleanField(default=False)
    orden = models.PositiveSmallIntegerField(default=0)
    activo = models.BooleanField(default=True)

    class Meta:
        db_table = 'estados_tickets'
        verbose_name = 'Estado de Ticket'
        verbose_name_plural = 'Estados de Ticket'
        ordering = ['orden']

    def __str__(self):
        return self.nombre


class EquipoModel(models.Model):
    """Equipo inventariado que puede verse afectado por un ticket."""

    codigo_inventario = models.CharField(max_length=50, unique=True)
    nombre = models.CharField(max_length=150)
    descripcion = models.TextField(blank=True, default='')
    activo = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = 'equipos'
        verbose_name = 'Equipo'
        verbose_name_plural = 'Equipos'
        ordering = ['codigo_inventario']

    def __str__(self):
        return f"{self.codigo_inventario} - {self.nombre}"


class TicketModel(models.Model):
    """
    Model Django para la persistencia de Tickets.

    NO contiene lógica de negocio, solo estructura de datos. Los tickets no
    se eliminan desde el núcleo: las FKs usan PROTECT.

    Fields:
        numero_ticket: TICK-YYYYMMDD-NNNN, único (cierra la carrera de
            numeración junto con el reintento del caso de uso)
        titulo / descripcion: Texto ya recortado
        categoria / prioridad / estado / equipo_afectado: Datos de referencia
        usuario_solicitante / tecnico_asignado: Usuarios de Django
        fecha_*: Marcas temporales del ciclo de vida
    """

    numero_ticket = models.CharField(max_length=30, unique=True)
    titulo = models.CharField(max_length=255)
    descripcion = models.TextField()

    categoria = models.ForeignKey(
        CategoriaModel,
        on_delete=models.PROTECT,
        related_name='tickets',
    )
    prioridad = models.ForeignKey(
        PrioridadModel,
        on_delete=models.PROTECT,
        related_name='tickets',
    )
    estado = models.ForeignKey(
        EstadoTicketModel,
        on_delete=models.PROTECT,
        related_name='tickets',
    )

    usuario_solicitante = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='tickets_solicitados',
    )
    tecnico_asignado = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='tickets_asignados',
    )
    equipo_afectado = models.ForeignKey(
        EquipoModel,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='tickets',
    )

    fecha_creacion = models.DateTimeField(default=timezone.now, db_index=True)
    fecha_asignacion = models.DateTimeField(null=True, blank=True)
    fecha_resolucion = models.DateTimeField(null=True, blank=True)
    fecha_cierre = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-fecha_creacion']
        indexes = [
            models.Index(fields=['usuario_solicitante', 'fecha_creacion'], name='tickets_usuario_e1f0a2_idx'),
            models.Index(fields=['tecnico_asignado', 'estado'], name='tickets_tecnico_5b7c31_idx'),
            models.Index(fields=['estado', 'fecha_creacion'], name='tickets_estado__9d4e62_idx'),
        ]

    def __str__(self):
        return f"[{self.numero_ticket}] {self.titulo}"

    def __repr__(self):
        return f"<TicketModel numero={self.numero_ticket} estado_id={self.estado_id}>"
