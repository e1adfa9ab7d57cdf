"""
Migration inicial del dominio de Tickets.

Crea las tablas:
- categorias_tickets, prioridades_tickets, estados_tickets, equipos:
  datos de referencia
- tickets: tabla principal, con numero_ticket único
"""

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # =================================================================
        # Datos de referencia
        # =================================================================
        migrations.CreateModel(
            name='CategoriaModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=100, unique=True)),
                ('descripcion', models.TextField(blank=True, default='')),
                ('activo', models.BooleanField(db_index=True, default=True)),
                ('fecha_creacion', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Categoría',
                'verbose_name_plural': 'Categorías',
                'db_table': 'categorias_tickets',
                'ordering': ['nombre'],
            },
        ),
        migrations.CreateModel(
            name='PrioridadModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=50, unique=True)),
                ('nivel', models.PositiveSmallIntegerField(db_index=True)),
                ('color', models.CharField(blank=True, default='', max_length=7)),
                ('descripcion', models.TextField(blank=True, default='')),
                ('activo', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'verbose_name': 'Prioridad',
                'verbose_name_plural': 'Prioridades',
                'db_table': 'prioridades_tickets',
                'ordering': ['nivel'],
            },
        ),
        migrations.CreateModel(
            name='EstadoTicketModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nombre', models.CharField(max_length=50, unique=True)),
                ('descripcion', models.TextField(blank=True, default='')),
                ('es_final', models.BooleanField(default=False)),
                ('orden', models.PositiveSmallIntegerField(default=0)),
                ('activo', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'Estado de Ticket',
                'verbose_name_plural': 'Estados de Ticket',
                'db_table': 'estados_tickets',
                'ordering': ['orden'],
            },
        ),
        migrations.CreateModel(
            name='EquipoModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('codigo_inventario', models.CharField(max_length=50, unique=True)),
                ('nombre', models.CharField(max_length=150)),
                ('descripcion', models.TextField(blank=True, default='')),
                ('activo', models.BooleanField(db_index=True, default=True)),
            ],
            options={
                'verbose_name': 'Equipo',
                'verbose_name_plural': 'Equipos',
                'db_table': 'equipos',
                'ordering': ['codigo_inventario'],
            },
        ),

        # =================================================================
        # Tabla: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('numero_ticket', models.CharField(max_length=30, unique=True)),
                ('titulo', models.CharField(max_length=255)),
                ('descripcion', models.TextField()),
                ('fecha_creacion', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('fecha_asignacion', models.DateTimeField(blank=True, null=True)),
                ('fecha_resolucion', models.DateTimeField(blank=True, null=True)),
                ('fecha_cierre', models.DateTimeField(blank=True, null=True)),
                ('categoria', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='tickets.categoriamodel',
                )),
                ('prioridad', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='tickets.prioridadmodel',
                )),
                ('estado', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='tickets.estadoticketmodel',
                )),
                ('usuario_solicitante', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets_solicitados',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('tecnico_asignado', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets_asignados',
                    to=settings.AUTH_USER_MODEL,
                )),
                ('equipo_afectado', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='tickets.equipomodel',
                )),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['-fecha_creacion'],
                'indexes': [
                    models.Index(fields=['usuario_solicitante', 'fecha_creacion'], name='tickets_usuario_e1f0a2_idx'),
                    models.Index(fields=['tecnico_asignado', 'estado'], name='tickets_tecnico_5b7c31_idx'),
                    models.Index(fields=['estado', 'fecha_creacion'], name='tickets_estado__9d4e62_idx'),
                ],
            },
        ),
    ]
