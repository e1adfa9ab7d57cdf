"""
Tests de integración de punta a punta.

Validan el flujo completo de la aplicación con el TestingContainer:
- Use Case → Repository → Unit of Work → eventos
- Creación seguida de listado por rol

Se ejecutan con --run-integration.
"""

import logging

import pytest

from src.adapters.django_app.events.publishers import (
    InMemoryEventPublisher,
    LoggingEventPublisher,
)
from src.config.container import TestingContainer
from src.core.shared.identity import Principal
from src.core.tickets.dtos import CrearTicketInputDTO
from src.core.tickets.events import TicketCreadoEvent


pytestmark = pytest.mark.integration


@pytest.fixture
def container():
    container = TestingContainer()
    refs = container.referencias()
    refs.agregar_usuario(42, "Ana Pérez", "ana@example.com")
    refs.agregar_usuario(43, "Bruno Díaz", "bruno@example.com")
    return container


def crear(container, principal, **kwargs):
    datos = {
        "titulo": "Impresora sin respuesta",
        "descripcion": "La impresora de la oficina 201 no imprime",
        "categoria_id": "1",
        "prioridad_id": "1",
    }
    datos.update(kwargs)
    return container.crear_ticket_service().execute(
        CrearTicketInputDTO.from_dict(datos), principal
    )


class TestFlujoCompleto:

    def test_crear_y_listar_por_rol(self, container):
        ana = Principal(id=42, rol_nombre="usuario_final")
        bruno = Principal(id=43, rol_nombre="Usuario Final")
        admin = Principal(id=1, rol_nombre="Admin")

        crear(container, ana)
        crear(container, ana, prioridad_id="3")
        crear(container, bruno, categoria_id="2")

        listar = container.listar_tickets_service()

        de_ana = listar.execute({}, ana)
        assert de_ana.paginacion.total == 2
        assert {t.vista.usuario_solicitante for t in de_ana.tickets} == {"Ana Pérez"}

        de_admin = listar.execute({}, admin)
        assert de_admin.paginacion.total == 3
        assert de_admin.estadisticas.pendientes == 3
        assert de_admin.estadisticas.alta_prioridad == 2

        numeros = sorted(t.vista.numero_ticket for t in de_admin.tickets)
        assert [n[-4:] for n in numeros] == ["0001", "0002", "0003"]

    def test_eventos_tras_cada_creacion(self, container):
        ana = Principal(id=42, rol_nombre="usuario_final")

        crear(container, ana)
        crear(container, ana, equipo_afectado_id="1")

        eventos = container.unit_of_work().published_events
        assert [type(e) for e in eventos] == [TicketCreadoEvent, TicketCreadoEvent]
        assert eventos[1].equipo_afectado_id == 1

    def test_validacion_no_deja_rastro(self, container):
        from src.core.shared.exceptions import ValidationError

        with pytest.raises(ValidationError):
            crear(container, Principal(id=42, rol_nombre="usuario_final"), descripcion="corta")

        assert container.unit_of_work().commits == 0
        assert container.unit_of_work().published_events == []

    def test_max_intentos_configurable(self, container):
        container.config.from_dict({"ticket_numero_max_intentos": 2})

        assert container.crear_ticket_service().max_intentos == 2


class TestEventPublishers:

    def test_in_memory_publisher_filtra_por_tipo(self):
        publisher = InMemoryEventPublisher()
        publisher.publish(TicketCreadoEvent(aggregate_id=1, numero_ticket="TICK-20250831-0001"))

        assert len(publisher.get_events_by_type("TicketCreadoEvent")) == 1
        assert publisher.get_events_by_type("OtroEvento") == []

        publisher.clear()
        assert publisher.published_events == []

    def test_logging_publisher_invoca_handlers(self):
        recibidos = []
        publisher = LoggingEventPublisher(log_level=logging.DEBUG)
        publisher.register_handler("TicketCreadoEvent", recibidos.append)

        evento = TicketCreadoEvent(aggregate_id=5, numero_ticket="TICK-20250831-0005")
        publisher.publish(evento)

        assert recibidos == [evento]

    def test_evento_serializable(self):
        evento = TicketCreadoEvent(
            aggregate_id=5,
            numero_ticket="TICK-20250831-0005",
            usuario_solicitante_id=42,
            categoria_id=1,
            prioridad_id=2,
        )

        data = evento.to_dict()
        assert data["event_type"] == "TicketCreadoEvent"
        assert data["aggregate_id"] == "5"
        assert data["aggregate_type"] == "Ticket"
        assert data["data"] == {
            "numero_ticket": "TICK-20250831-0005",
            "usuario_solicitante_id": 42,
            "categoria_id": 1,
            "prioridad_id": 2,
            "equipo_afectado_id": None,
        }

    def test_evento_sin_aggregate_id(self):
        with pytest.raises(ValueError):
            TicketCreadoEvent(numero_ticket="TICK-20250831-0001")
