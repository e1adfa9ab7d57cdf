"""
Django Admin del dominio de Tickets.

Los datos de referencia (categorías, prioridades, estados, equipos) se
administran aquí; el núcleo solo los consulta. Los tickets se muestran
con los mismos colores que el listado de la API.
"""

from django.contrib import admin
from django.utils.html import format_html

from src.core.tickets.entities import EstadoTicket, NivelPrioridad

from .models import (
    CategoriaModel,
    EquipoModel,
    EstadoTicketModel,
    PrioridadModel,
    TicketModel,
)


def _badge(color: str, texto: str):
    return format_html(
        '<span style="background-color: {}; color: white; padding: 3px 8px; '
        'border-radius: 3px; font-size: 11px;">{}</span>',
        color,
        texto,
    )


@admin.register(CategoriaModel)
class CategoriaAdmin(admin.ModelAdmin):
    list_display = ['id', 'nombre', 'activo', 'fecha_creacion']
    list_filter = ['activo']
    list_editable = ['activo']
    search_fields = ['nombre', 'descripcion']


@admin.register(PrioridadModel)
class PrioridadAdmin(admin.ModelAdmin):
    list_display = ['id', 'nombre', 'nivel', 'color', 'activo']
    list_filter = ['activo', 'nivel']
    list_editable = ['activo']
    search_fields = ['nombre']


@admin.register(EstadoTicketModel)
class EstadoTicketAdmin(admin.ModelAdmin):
    list_display = ['id', 'nombre', 'orden', 'es_final', 'activo']
    list_filter = ['es_final', 'activo']
    ordering = ['orden']


@admin.register(EquipoModel)
class EquipoAdmin(admin.ModelAdmin):
    list_display = ['codigo_inventario', 'nombre', 'activo']
    list_filter = ['activo']
    list_editable = ['activo']
    search_fields = ['codigo_inventario', 'nombre']


@admin.register(TicketModel)
class TicketAdmin(admin.ModelAdmin):
    """Admin para TicketModel."""

    list_display = [
        'numero_ticket',
        'titulo',
        'estado_badge',
        'prioridad_badge',
        'categoria',
        'usuario_solicitante',
        'tecnico_asignado',
        'fecha_creacion',
    ]

    list_filter = [
        'estado',
        'prioridad',
        'categoria',
        'fecha_creacion',
    ]

    search_fields = [
        'numero_ticket',
        'titulo',
        'descripcion',
        'usuario_solicitante__username',
        'tecnico_asignado__username',
    ]

    # El número se asigna una sola vez, en la creación
    readonly_fields = [
        'numero_ticket',
        'fecha_creacion',
    ]

    list_select_related = [
        'estado',
        'prioridad',
        'categoria',
        'usuario_solicitante',
        'tecnico_asignado',
    ]

    fieldsets = [
        ('Identificación', {
            'fields': ['numero_ticket', 'titulo', 'descripcion', 'categoria', 'equipo_afectado'],
        }),
        ('Estado', {
            'fields': ['estado', 'prioridad'],
        }),
        ('Responsables', {
            'fields': ['usuario_solicitante', 'tecnico_asignado'],
        }),
        ('Fechas', {
            'fields': ['fecha_creacion', 'fecha_asignacion', 'fecha_resolucion', 'fecha_cierre'],
            'classes': ['collapse'],
        }),
    ]

    ordering = ['-fecha_creacion']

    date_hierarchy = 'fecha_creacion'

    def estado_badge(self, obj):
        return _badge(EstadoTicket.color_de(obj.estado.nombre), obj.estado.nombre)
    estado_badge.short_description = 'Estado'

    def prioridad_badge(self, obj):
        return _badge(NivelPrioridad.color_de(obj.prioridad.nivel), obj.prioridad.nombre)
    prioridad_badge.short_description = 'Prioridad'
