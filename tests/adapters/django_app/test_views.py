"""
Tests de la API JSON del dominio de Tickets.

Prueban:
- POST /api/tickets/ (creación, validaciones, errores)
- GET /api/tickets/ (visibilidad por rol, filtros, estadísticas)
- GET /health/
- Integración con el container de DI
"""

import json
import re

import pytest
from django.urls import reverse
from dependency_injector import providers

from src.adapters.django_app.tickets.models import TicketModel
from src.config.container import get_container


URL = '/api/tickets/'


def post_json(client, data):
    return client.post(URL, data=json.dumps(data), content_type='application/json')


@pytest.fixture
def payload(datos_referencia):
    return {
        'titulo': 'Impresora sin respuesta',
        'descripcion': 'La impresora de la oficina 201 no imprime',
        'categoria_id': datos_referencia.categorias['Hardware'].pk,
        'prioridad_id': datos_referencia.prioridades['Alta'].pk,
    }


class GeneradorFijo:
    """Generador que siempre propone el mismo número."""

    def __init__(self, numero):
        self.numero = numero

    def siguiente(self, fecha):
        return self.numero


# =============================================================================
# POST /api/tickets/
# =============================================================================

@pytest.mark.django_db
class TestCrearTicketAPI:

    def test_url(self):
        assert reverse('tickets:api_list') == URL

    def test_crear_ticket(self, client, usuarios, payload):
        client.force_login(usuarios.ana)

        response = post_json(client, {**payload, 'titulo': '  Impresora sin respuesta  '})

        assert response.status_code == 201
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Ticket creado exitosamente'

        ticket = body['data']['ticket']
        assert re.fullmatch(r'TICK-\d{8}-0001', ticket['numero_ticket'])
        assert ticket['titulo'] == 'Impresora sin respuesta'
        assert ticket['categoria'] == 'Hardware'
        assert ticket['prioridad'] == 'Alta'
        assert ticket['prioridad_nivel'] == 1
        assert ticket['estado'] == 'Pendiente'
        assert ticket['usuario_solicitante'] == 'Ana Pérez'
        assert ticket['usuario_email'] == 'ana@example.com'
        assert ticket['equipo_afectado'] is None
        assert body['data']['siguiente_paso'] == (
            'El ticket será asignado a un técnico según la prioridad y especialidad'
        )

        model = TicketModel.objects.get(pk=ticket['id'])
        assert model.usuario_solicitante_id == usuarios.ana.pk
        assert model.tecnico_asignado_id is None

    def test_numeros_consecutivos(self, client, usuarios, payload):
        client.force_login(usuarios.ana)

        primero = post_json(client, payload).json()['data']['ticket']['numero_ticket']
        segundo = post_json(client, payload).json()['data']['ticket']['numero_ticket']

        assert primero[:-4] == segundo[:-4]
        assert int(segundo[-4:]) == int(primero[-4:]) + 1

    def test_con_equipo_afectado(self, client, usuarios, payload, datos_referencia):
        client.force_login(usuarios.ana)

        response = post_json(client, {**payload, 'equipo_afectado_id': str(datos_referencia.equipo.pk)})

        assert response.status_code == 201
        assert response.json()['data']['ticket']['equipo_afectado'] == 'Impresora HP 201'

    def test_sin_autenticacion(self, client, payload):
        response = post_json(client, payload)

        assert response.status_code == 401
        assert response.json() == {
            'success': False,
            'message': 'Usuario no autenticado',
            'error': 'NO_AUTENTICADO',
        }
        assert TicketModel.objects.count() == 0

    def test_json_invalido(self, client, usuarios, datos_referencia):
        client.force_login(usuarios.ana)

        response = client.post(URL, data='{titulo:', content_type='application/json')

        assert response.status_code == 400
        assert response.json()['error'] == 'JSON_INVALIDO'

    @pytest.mark.parametrize('overrides,code', [
        ({'titulo': ''}, 'TITULO_REQUERIDO'),
        ({'titulo': 'x' * 256}, 'TITULO_MUY_LARGO'),
        ({'descripcion': 'corta'}, 'DESCRIPCION_MUY_CORTA'),
        ({'categoria_id': 'abc'}, 'CATEGORIA_INVALIDA'),
        ({'prioridad_id': None}, 'PRIORIDAD_INVALIDA'),
    ])
    def test_validaciones(self, client, usuarios, payload, overrides, code):
        client.force_login(usuarios.ana)

        response = post_json(client, {**payload, **overrides})

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['error'] == code
        assert TicketModel.objects.count() == 0

    @pytest.mark.parametrize('campo,code', [
        ('categoria_id', 'CATEGORIA_NO_ENCONTRADA'),
        ('prioridad_id', 'PRIORIDAD_NO_ENCONTRADA'),
        ('equipo_afectado_id', 'EQUIPO_NO_ENCONTRADO'),
    ])
    def test_referencias_inexistentes(self, client, usuarios, payload, campo, code):
        client.force_login(usuarios.ana)

        response = post_json(client, {**payload, campo: 9999})

        assert response.status_code == 400
        assert response.json()['error'] == code

    def test_equipo_fuera_de_rango(self, client, usuarios, payload):
        client.force_login(usuarios.ana)

        response = post_json(client, {**payload, 'equipo_afectado_id': '99999999999999999999'})

        assert response.status_code == 400
        assert response.json()['error'] == 'EQUIPO_NO_ENCONTRADO'
        assert TicketModel.objects.count() == 0

    def test_sin_estado_pendiente(self, client, usuarios, payload, datos_referencia):
        datos_referencia.estados['Pendiente'].delete()
        client.force_login(usuarios.ana)

        response = post_json(client, payload)

        assert response.status_code == 500
        assert response.json()['error'] == 'ESTADO_INICIAL_NO_ENCONTRADO'

    def test_conflicto_tras_agotar_reintentos(self, client, usuarios, payload, ticket_factory):
        ticket_factory('TICK-20250831-0001', usuarios.bruno)
        container = get_container()
        container.generador_numero_ticket.override(
            providers.Object(GeneradorFijo('TICK-20250831-0001'))
        )
        client.force_login(usuarios.ana)

        try:
            response = post_json(client, payload)
        finally:
            container.generador_numero_ticket.reset_override()

        assert response.status_code == 409
        assert response.json()['error'] == 'DUPLICATE_ERROR'
        assert TicketModel.objects.count() == 1

    def test_error_inesperado(self, client, usuarios, payload):
        class ServicioRoto:
            def execute(self, *args, **kwargs):
                raise RuntimeError('detalle interno')

        container = get_container()
        container.crear_ticket_service.override(providers.Object(ServicioRoto()))
        client.force_login(usuarios.ana)

        try:
            response = post_json(client, payload)
        finally:
            container.crear_ticket_service.reset_override()

        assert response.status_code == 500
        body = response.json()
        assert body['error'] == 'INTERNAL_SERVER_ERROR'
        assert 'detalle interno' not in body['message']


# =============================================================================
# GET /api/tickets/
# =============================================================================

@pytest.fixture
def escenario(datos_referencia, usuarios, ticket_factory):
    prioridades = datos_referencia.prioridades
    estados = datos_referencia.estados
    return [
        ticket_factory('TICK-20250830-0001', usuarios.ana, prioridad=prioridades['Alta']),
        ticket_factory('TICK-20250831-0001', usuarios.ana, estado=estados['En Progreso'],
                       tecnico_asignado=usuarios.luis),
        ticket_factory('TICK-20250831-0002', usuarios.bruno, prioridad=prioridades['Alta'],
                       tecnico_asignado=usuarios.luis),
        ticket_factory('TICK-20250831-0003', usuarios.bruno, estado=estados['Cerrado']),
    ]


def numeros(body):
    return sorted(t['numero_ticket'] for t in body['data']['tickets'])


@pytest.mark.django_db
class TestListarTicketsAPI:

    def test_sin_autenticacion(self, client):
        response = client.get(URL)

        assert response.status_code == 401
        assert response.json()['error'] == 'NO_AUTENTICADO'

    def test_usuario_final_ve_sus_tickets(self, client, usuarios, escenario):
        client.force_login(usuarios.ana)

        response = client.get(URL)

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['message'] == 'Tickets obtenidos exitosamente'
        assert numeros(body) == ['TICK-20250830-0001', 'TICK-20250831-0001']
        assert 'estadisticas' not in body['data']
        assert body['data']['filters_applied']['rol'] == 'usuario_final'
        assert all(not t['puede_editar'] for t in body['data']['tickets'])

    def test_tecnico_ve_sus_asignados(self, client, usuarios, escenario):
        client.force_login(usuarios.luis)

        body = client.get(URL).json()

        assert numeros(body) == ['TICK-20250831-0001', 'TICK-20250831-0002']
        assert all(t['puede_cerrar'] for t in body['data']['tickets'])
        assert all(t['tecnico_email'] == 'luis@example.com' for t in body['data']['tickets'])

    def test_administrador_ve_todo_con_estadisticas(self, client, usuarios, escenario):
        client.force_login(usuarios.admin)

        body = client.get(URL, {'limit': '2'}).json()

        assert len(body['data']['tickets']) == 2
        assert body['data']['pagination'] == {
            'current_page': 1,
            'total_pages': 2,
            'total_items': 4,
            'items_per_page': 2,
            'has_next': True,
            'has_prev': False,
        }
        assert body['data']['estadisticas'] == {
            'total_tickets': 4,
            'pendientes': 2,
            'en_progreso': 1,
            'resueltos': 0,
            'cerrados': 1,
            'alta_prioridad': 2,
        }

    def test_campos_derivados_en_la_respuesta(self, client, usuarios, escenario):
        client.force_login(usuarios.admin)

        body = client.get(URL, {'orden': 'numero_ticket', 'direccion': 'ASC', 'limit': '1'}).json()
        ticket = body['data']['tickets'][0]

        assert ticket['numero_ticket'] == 'TICK-20250830-0001'
        assert ticket['prioridad_color'] == '#FF4444'
        assert ticket['estado_color'] == '#FFA500'
        # Prioridad alta creado hace más de 24 horas
        assert ticket['es_urgente'] is True
        assert ticket['horas_transcurridas'] > 24

    def test_filtro_no_amplia_visibilidad(self, client, usuarios, escenario, datos_referencia):
        client.force_login(usuarios.ana)

        body = client.get(URL, {'estado_id': datos_referencia.estados['Cerrado'].pk}).json()

        assert body['data']['tickets'] == []
        assert body['data']['pagination']['total_items'] == 0

    @pytest.mark.parametrize('params,code', [
        ({'page': '0'}, 'PAGINA_INVALIDA'),
        ({'limit': '101'}, 'LIMITE_INVALIDO'),
        ({'orden': 'password'}, 'ORDEN_INVALIDO'),
        ({'direccion': 'sideways'}, 'DIRECCION_INVALIDA'),
        ({'categoria_id': 'x'}, 'FILTRO_INVALIDO'),
        ({'fecha_desde': 'ayer'}, 'FECHA_INVALIDA'),
    ])
    def test_parametros_invalidos(self, client, usuarios, params, code):
        client.force_login(usuarios.ana)

        response = client.get(URL, params)

        assert response.status_code == 400
        assert response.json()['error'] == code

    def test_fecha_hasta_maxima(self, client, usuarios, escenario):
        client.force_login(usuarios.admin)

        response = client.get(URL, {'fecha_hasta': '9999-12-31'})

        assert response.status_code == 200
        assert response.json()['data']['pagination']['total_items'] == 4

    @pytest.mark.parametrize('params,code', [
        ({'estado_id': '99999999999999999999'}, 'FILTRO_INVALIDO'),
        ({'page': '99999999999999999999'}, 'PAGINA_INVALIDA'),
    ])
    def test_enteros_fuera_de_rango(self, client, usuarios, params, code):
        client.force_login(usuarios.admin)

        response = client.get(URL, params)

        assert response.status_code == 400
        assert response.json()['error'] == code

    def test_usuario_sin_rol(self, client, crear_usuario):
        client.force_login(crear_usuario('sin_rol'))

        response = client.get(URL)

        assert response.status_code == 403
        assert response.json()['error'] == 'ROL_INVALIDO'

    def test_metodo_no_permitido(self, client, usuarios):
        client.force_login(usuarios.ana)

        assert client.delete(URL).status_code == 405


# =============================================================================
# Health
# =============================================================================

@pytest.mark.django_db
class TestHealthCheck:

    def test_health(self, client):
        response = client.get('/health/')

        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'ok'
        assert body['database']['healthy'] is True
