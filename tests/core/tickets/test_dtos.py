"""
Tests de los DTOs del dominio de Tickets.

Cobertura:
- parse_entero_positivo
- ListarTicketsQueryDTO.from_params: valores por defecto y códigos de error
- PaginacionDTO: cálculo de páginas
- TicketListItemDTO: campos derivados
- Serialización de los DTOs de salida
"""

import pytest
from datetime import date, datetime, timedelta, timezone

from src.core.tickets.dtos import (
    CampoOrden,
    CrearTicketInputDTO,
    DireccionOrden,
    EstadisticasDTO,
    ListarTicketsQueryDTO,
    ListarTicketsResultDTO,
    PaginacionDTO,
    TicketListItemDTO,
    TicketVista,
    parse_entero_positivo,
)
from src.core.shared.exceptions import ValidationError
from src.core.shared.identity import Principal


AHORA = datetime(2025, 8, 31, 12, 0, tzinfo=timezone.utc)


def vista(**kwargs):
    datos = {
        "id": 1,
        "numero_ticket": "TICK-20250830-0001",
        "titulo": "Impresora sin respuesta",
        "descripcion": "La impresora de la oficina 201 no imprime",
        "fecha_creacion": AHORA - timedelta(hours=30),
        "categoria_id": 1,
        "categoria": "Hardware",
        "prioridad_id": 1,
        "prioridad": "Alta",
        "prioridad_nivel": 1,
        "estado_id": 1,
        "estado": "Pendiente",
        "usuario_solicitante_id": 42,
        "usuario_solicitante": "Ana Pérez",
        "usuario_email": "ana@example.com",
    }
    datos.update(kwargs)
    return TicketVista(**datos)


class TestParseEnteroPositivo:

    @pytest.mark.parametrize("valor,esperado", [
        (5, 5),
        ("5", 5),
        (" 12 ", 12),
        (0, None),
        ("0", None),
        (-3, None),
        ("-3", None),
        ("abc", None),
        ("1.5", None),
        (1.5, None),
        (None, None),
        (True, None),
        ("9223372036854775807", 2 ** 63 - 1),
        ("9223372036854775808", None),
        (2 ** 63, None),
        ("\u00b2", None),
    ])
    def test_valores(self, valor, esperado):
        assert parse_entero_positivo(valor) == esperado


class TestCrearTicketInputDTO:

    def test_from_dict_conserva_valores_crudos(self):
        dto = CrearTicketInputDTO.from_dict({
            "titulo": "  Laptop lenta ",
            "descripcion": "Tarda en iniciar",
            "categoria_id": "2",
            "prioridad_id": 3,
            "otro": "ignorado",
        })

        assert dto.titulo == "  Laptop lenta "
        assert dto.categoria_id == "2"
        assert dto.prioridad_id == 3
        assert dto.equipo_afectado_id is None


class TestListarTicketsQueryDTO:
    """Validación de parámetros del listado."""

    def test_valores_por_defecto(self):
        query = ListarTicketsQueryDTO.from_params({})

        assert query.pagina == 1
        assert query.limite == 10
        assert query.offset == 0
        assert query.orden == CampoOrden.FECHA_CREACION
        assert query.direccion == DireccionOrden.DESC
        assert query.estado_id is None
        assert query.fecha_desde is None

    def test_parametros_completos(self):
        query = ListarTicketsQueryDTO.from_params({
            "page": "3",
            "limit": "20",
            "estado_id": "2",
            "categoria_id": "1",
            "prioridad_id": "3",
            "fecha_desde": "2025-08-01",
            "fecha_hasta": "2025-08-31",
            "orden": "Titulo",
            "direccion": "asc",
        })

        assert query.pagina == 3
        assert query.limite == 20
        assert query.offset == 40
        assert query.estado_id == 2
        assert query.categoria_id == 1
        assert query.prioridad_id == 3
        assert query.fecha_desde == date(2025, 8, 1)
        assert query.fecha_hasta == date(2025, 8, 31)
        assert query.orden == CampoOrden.TITULO
        assert query.direccion == DireccionOrden.ASC

    def test_valores_vacios_se_tratan_como_ausentes(self):
        query = ListarTicketsQueryDTO.from_params({
            "page": "",
            "estado_id": " ",
            "fecha_desde": "",
            "orden": "",
        })

        assert query.pagina == 1
        assert query.estado_id is None
        assert query.fecha_desde is None
        assert query.orden == CampoOrden.FECHA_CREACION

    def test_fecha_hasta_maxima(self):
        assert ListarTicketsQueryDTO.from_params({"fecha_hasta": "9999-12-31"}).fecha_hasta == date.max

    def test_limite_maximo_100(self):
        assert ListarTicketsQueryDTO.from_params({"limit": "100"}).limite == 100

    @pytest.mark.parametrize("params,code", [
        ({"page": "0"}, "PAGINA_INVALIDA"),
        ({"page": "-1"}, "PAGINA_INVALIDA"),
        ({"page": "uno"}, "PAGINA_INVALIDA"),
        ({"limit": "0"}, "LIMITE_INVALIDO"),
        ({"limit": "101"}, "LIMITE_INVALIDO"),
        ({"limit": "diez"}, "LIMITE_INVALIDO"),
        ({"orden": "id; DROP TABLE tickets"}, "ORDEN_INVALIDO"),
        ({"orden": "usuario_solicitante"}, "ORDEN_INVALIDO"),
        ({"direccion": "arriba"}, "DIRECCION_INVALIDA"),
        ({"estado_id": "abc"}, "FILTRO_INVALIDO"),
        ({"categoria_id": "0"}, "FILTRO_INVALIDO"),
        ({"prioridad_id": "-2"}, "FILTRO_INVALIDO"),
        ({"fecha_desde": "31/08/2025"}, "FECHA_INVALIDA"),
        ({"fecha_hasta": "2025-02-30"}, "FECHA_INVALIDA"),
        ({"estado_id": "99999999999999999999"}, "FILTRO_INVALIDO"),
        ({"page": "99999999999999999999"}, "PAGINA_INVALIDA"),
        ({"page": "92233720368547759", "limit": "100"}, "PAGINA_INVALIDA"),
    ])
    def test_parametros_invalidos(self, params, code):
        with pytest.raises(ValidationError) as exc_info:
            ListarTicketsQueryDTO.from_params(params)

        assert exc_info.value.code == code


class TestPaginacionDTO:

    @pytest.mark.parametrize("total,por_pagina,paginas", [
        (0, 10, 0),
        (1, 10, 1),
        (10, 10, 1),
        (11, 10, 2),
        (25, 10, 3),
    ])
    def test_total_paginas_redondea_hacia_arriba(self, total, por_pagina, paginas):
        assert PaginacionDTO(pagina=1, por_pagina=por_pagina, total=total).total_paginas == paginas

    def test_to_dict(self):
        paginacion = PaginacionDTO(pagina=2, por_pagina=10, total=25)

        assert paginacion.to_dict() == {
            "current_page": 2,
            "total_pages": 3,
            "total_items": 25,
            "items_per_page": 10,
            "has_next": True,
            "has_prev": True,
        }

    def test_ultima_pagina_sin_siguiente(self):
        paginacion = PaginacionDTO(pagina=3, por_pagina=10, total=25)

        assert paginacion.tiene_siguiente is False
        assert paginacion.tiene_anterior is True

    def test_pagina_mas_alla_del_final(self):
        paginacion = PaginacionDTO(pagina=9, por_pagina=10, total=25)

        assert paginacion.tiene_siguiente is False
        assert paginacion.total_paginas == 3


class TestTicketListItemDTO:
    """Campos derivados calculados al construir la fila."""

    def test_ticket_alta_prioridad_abierto_hace_30_horas(self):
        item = TicketListItemDTO.from_vista(
            vista(), Principal(id=42, rol_nombre="usuario_final"), AHORA
        )

        assert item.horas_transcurridas == 30.0
        assert item.es_urgente is True
        assert item.puede_editar is False
        assert item.puede_cerrar is False
        assert item.prioridad_color == "#FF4444"
        assert item.estado_color == "#FFA500"

    def test_ticket_cerrado_usa_fecha_de_cierre(self):
        creado = AHORA - timedelta(hours=100)
        item = TicketListItemDTO.from_vista(
            vista(
                fecha_creacion=creado,
                fecha_cierre=creado + timedelta(hours=4),
                estado="Cerrado",
            ),
            Principal(id=1, rol_nombre="administrador"),
            AHORA,
        )

        assert item.horas_transcurridas == 4.0
        assert item.es_urgente is False
        assert item.estado_color == "#6C757D"

    def test_urgencia_usa_horas_sin_redondear(self):
        item = TicketListItemDTO.from_vista(
            vista(fecha_creacion=AHORA - timedelta(hours=24, seconds=10)),
            Principal(id=42, rol_nombre="usuario_final"),
            AHORA,
        )

        assert item.horas_transcurridas == 24.0
        assert item.es_urgente is True

    def test_tecnico_asignado_puede_editar_y_cerrar(self):
        item = TicketListItemDTO.from_vista(
            vista(tecnico_asignado_id=7, tecnico_asignado="Luis"),
            Principal(id=7, rol_nombre="tecnico"),
            AHORA,
        )

        assert item.puede_editar is True
        assert item.puede_cerrar is True

    def test_to_dict_incluye_campos_derivados(self):
        data = TicketListItemDTO.from_vista(
            vista(), Principal(id=1, rol_nombre="admin"), AHORA
        ).to_dict()

        assert data["numero_ticket"] == "TICK-20250830-0001"
        assert data["fecha_creacion"] == "2025-08-30T06:00:00+00:00"
        assert data["fecha_cierre"] is None
        assert data["horas_transcurridas"] == 30.0
        assert data["es_urgente"] is True
        assert data["puede_editar"] is True
        assert data["prioridad_color"] == "#FF4444"
        assert data["estado_color"] == "#FFA500"


class TestEstadisticasDTO:

    def test_from_conteos_ignora_estados_no_estandar(self):
        stats = EstadisticasDTO.from_conteos(
            total=6,
            por_estado={"Pendiente": 2, "Cerrado": 1, "En Espera": 3},
            alta_prioridad=1,
        )

        assert stats.to_dict() == {
            "total_tickets": 6,
            "pendientes": 2,
            "en_progreso": 0,
            "resueltos": 0,
            "cerrados": 1,
            "alta_prioridad": 1,
        }


class TestListarTicketsResultDTO:

    def test_estadisticas_solo_si_existen(self):
        resultado = ListarTicketsResultDTO(
            tickets=[],
            paginacion=PaginacionDTO(pagina=1, por_pagina=10, total=0),
        )

        data = resultado.to_dict()
        assert data["tickets"] == []
        assert data["pagination"]["total_pages"] == 0
        assert data["filters_applied"] == {}
        assert "estadisticas" not in data
