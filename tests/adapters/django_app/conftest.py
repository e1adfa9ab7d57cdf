"""
Fixtures de los tests de adapters Django.

pytest-django crea la base de datos de test a partir de las migrations;
aquí se siembran los datos de referencia y los usuarios de cada rol.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest


@pytest.fixture
def datos_referencia(db):
    """Estados, prioridades, categorías y equipos estándar."""
    from src.adapters.django_app.tickets.models import (
        CategoriaModel,
        EquipoModel,
        EstadoTicketModel,
        PrioridadModel,
    )

    estados = {
        nombre: EstadoTicketModel.objects.create(nombre=nombre, orden=orden, es_final=nombre == 'Cerrado')
        for orden, nombre in enumerate(['Pendiente', 'En Progreso', 'Resuelto', 'Cerrado'], start=1)
    }
    prioridades = {
        nombre: PrioridadModel.objects.create(nombre=nombre, nivel=nivel)
        for nombre, nivel in [('Alta', 1), ('Media', 2), ('Baja', 3)]
    }
    categorias = {
        nombre: CategoriaModel.objects.create(nombre=nombre)
        for nombre in ['Hardware', 'Software', 'Red']
    }
    equipo = EquipoModel.objects.create(codigo_inventario='EQ-0001', nombre='Impresora HP 201')

    return SimpleNamespace(
        estados=estados,
        prioridades=prioridades,
        categorias=categorias,
        equipo=equipo,
    )


@pytest.fixture
def grupos(db):
    from django.contrib.auth.models import Group

    return {
        nombre: Group.objects.create(name=nombre)
        for nombre in ['administrador', 'tecnico', 'usuario_final']
    }


@pytest.fixture
def crear_usuario(django_user_model, grupos):
    """Factory de usuarios con su grupo de rol."""

    def _crear(username, grupo=None, **kwargs):
        user = django_user_model.objects.create_user(
            username=username,
            email=f'{username}@example.com',
            password='clave-de-test',
            **kwargs,
        )
        if grupo:
            user.groups.add(grupos[grupo])
        return user

    return _crear


@pytest.fixture
def usuarios(crear_usuario):
    return SimpleNamespace(
        ana=crear_usuario('ana', 'usuario_final', first_name='Ana', last_name='Pérez'),
        bruno=crear_usuario('bruno', 'usuario_final'),
        luis=crear_usuario('luis', 'tecnico'),
        admin=crear_usuario('jefa', 'administrador'),
    )


@pytest.fixture
def ticket_factory(datos_referencia):
    """Factory para crear TicketModel directamente."""
    from src.adapters.django_app.tickets.models import TicketModel

    def _crear(numero_ticket, usuario_solicitante, **kwargs):
        defaults = {
            'titulo': 'Ticket de prueba',
            'descripcion': 'Descripción del ticket de prueba',
            'categoria': datos_referencia.categorias['Hardware'],
            'prioridad': datos_referencia.prioridades['Media'],
            'estado': datos_referencia.estados['Pendiente'],
            'fecha_creacion': datetime(2025, 8, 31, 10, 0, tzinfo=timezone.utc),
        }
        defaults.update(kwargs)
        return TicketModel.objects.create(
            numero_ticket=numero_ticket,
            usuario_solicitante=usuario_solicitante,
            **defaults,
        )

    return _crear
