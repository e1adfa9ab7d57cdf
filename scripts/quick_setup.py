#!/usr/bin/env python
"""
Setup rápido para desarrollo local.

Este script:
1. Configura Django settings
2. Ejecuta las migrations
3. Siembra los datos de referencia (estados, prioridades, categorías,
   equipos) y los grupos de rol
4. Crea usuarios y tickets de ejemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Agregar la raíz del proyecto al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


ESTADOS = [
    # nombre, descripcion, es_final, orden
    ('Pendiente', 'Ticket creado, sin técnico asignado', False, 1),
    ('En Progreso', 'Un técnico está trabajando en el ticket', False, 2),
    ('Resuelto', 'Solución aplicada, pendiente de confirmación', False, 3),
    ('Cerrado', 'Ticket finalizado', True, 4),
]

PRIORIDADES = [
    # nombre, nivel, color
    ('Alta', 1, '#FF4444'),
    ('Media', 2, '#FFA500'),
    ('Baja', 3, '#28A745'),
]

CATEGORIAS = ['Hardware', 'Software', 'Red', 'Accesos']

EQUIPOS = [
    ('EQ-0001', 'Impresora HP oficina 201'),
    ('EQ-0002', 'Laptop Dell Latitude 5420'),
    ('EQ-0003', 'Switch Cisco piso 2'),
]

GRUPOS_ROL = ['administrador', 'tecnico', 'usuario_final']


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # SQLite para desarrollo rápido, salvo que ya haya una base configurada
    os.environ.setdefault('DATABASE_URL', 'sqlite:///db.sqlite3')

    import django
    django.setup()


def run_migrations():
    """Ejecuta las migrations."""
    from django.core.management import call_command

    print("📦 Ejecutando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations completadas!")


def seed_reference_data():
    """Siembra datos de referencia de forma idempotente."""
    from django.contrib.auth.models import Group

    from src.adapters.django_app.tickets.models import (
        CategoriaModel,
        EquipoModel,
        EstadoTicketModel,
        PrioridadModel,
    )

    print("🌱 Sembrando datos de referencia...")

    for nombre, descripcion, es_final, orden in ESTADOS:
        EstadoTicketModel.objects.update_or_create(
            nombre=nombre,
            defaults={'descripcion': descripcion, 'es_final': es_final, 'orden': orden},
        )

    for nombre, nivel, color in PRIORIDADES:
        PrioridadModel.objects.update_or_create(
            nombre=nombre,
            defaults={'nivel': nivel, 'color': color},
        )

    for nombre in CATEGORIAS:
        CategoriaModel.objects.get_or_create(nombre=nombre)

    for codigo, nombre in EQUIPOS:
        EquipoModel.objects.get_or_create(codigo_inventario=codigo, defaults={'nombre': nombre})

    for nombre in GRUPOS_ROL:
        Group.objects.get_or_create(name=nombre)

    print("✅ Datos de referencia listos!")


def create_sample_data():
    """Crea usuarios y tickets de ejemplo a través del caso de uso."""
    from django.contrib.auth import get_user_model
    from django.contrib.auth.models import Group

    from src.config.container import get_container
    from src.core.shared.identity import Principal
    from src.core.tickets.dtos import CrearTicketInputDTO
    from src.adapters.django_app.tickets.models import CategoriaModel, PrioridadModel

    User = get_user_model()

    usuarios = {}
    for username, grupo in [('ana', 'usuario_final'), ('tecnico1', 'tecnico'), ('admin', 'administrador')]:
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'email': f'{username}@example.com'},
        )
        if created:
            user.set_password('cambiar123')
            user.save()
        user.groups.add(Group.objects.get(name=grupo))
        usuarios[username] = user

    categoria = CategoriaModel.objects.get(nombre='Hardware')
    prioridades = {p.nombre: p for p in PrioridadModel.objects.all()}

    sample_tickets = [
        ('Impresora sin respuesta', 'La impresora de la oficina 201 no imprime desde ayer.', 'Alta'),
        ('Laptop lenta al iniciar', 'La laptop tarda más de cinco minutos en iniciar sesión.', 'Media'),
        ('Solicitud de mouse nuevo', 'El mouse actual tiene el botón derecho dañado.', 'Baja'),
    ]

    print("📝 Creando tickets de ejemplo...")

    service = get_container().crear_ticket_service()
    principal = Principal(id=usuarios['ana'].pk, rol_nombre='usuario_final')

    for titulo, descripcion, prioridad in sample_tickets:
        output = service.execute(
            CrearTicketInputDTO(
                titulo=titulo,
                descripcion=descripcion,
                categoria_id=categoria.pk,
                prioridad_id=prioridades[prioridad].pk,
            ),
            principal=principal,
        )
        print(f"   ✓ {output.ticket.numero_ticket} {titulo}")

    print(f"✅ {len(sample_tickets)} tickets creados!")


def check_connection():
    """Verifica la conexión con la base de datos."""
    from src.adapters.django_app.shared.database import check_database_connection

    print("🔍 Verificando conexión con la base de datos...")

    estado = check_database_connection()
    if estado['healthy']:
        print(f"✅ Conexión OK ({estado['engine']})")
        return True

    print(f"❌ Error de conexión ({estado['engine']})")
    return False


def show_info():
    """Muestra información del setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Información del Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Debug Mode: {settings.DEBUG}")
    print("=" * 60)
    print("\n🚀 Próximos pasos:")
    print("   1. django-admin runserver --pythonpath . --settings src.config.settings")
    print("   2. Acceder: http://localhost:8000/admin/")
    print("   3. Acceder: http://localhost:8000/api/tickets/")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desarrollo')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Crear usuarios y tickets de ejemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Solo verificar la conexión'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Mesa de Ayuda TI - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Verifique que la base de datos esté en ejecución.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    run_migrations()
    seed_reference_data()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
