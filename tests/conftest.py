"""
Configuración global de Pytest para la Mesa de Ayuda.

Este archivo lo carga pytest automáticamente y ofrece fixtures y
configuraciones compartidas. Django se configura vía pytest-django
(DJANGO_SETTINGS_MODULE en pyproject.toml).
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest


@pytest.fixture(scope="session")
def project_root():
    """Devuelve la ruta raíz del proyecto."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def reset_singletons():
    """
    Reset del container de DI entre tests.

    Garantiza que cada test arranca con un estado limpio.
    """
    from src.config.container import reset_container

    reset_container()
    yield
    reset_container()


@pytest.fixture
def ahora():
    """Instante fijo (UTC) para tests deterministas."""
    return datetime(2025, 8, 31, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def reloj(ahora):
    """Reloj inyectable que siempre devuelve `ahora`."""
    return lambda: ahora


def pytest_configure(config):
    """Configuración de pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modifica la colección de tests."""
    # Los tests de integración solo corren con --run-integration
    skip_integration = pytest.mark.skip(reason="Integration tests require --run-integration")

    for item in items:
        if "integration" in item.keywords:
            if not config.getoption("--run-integration", default=False):
                item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Agrega opciones de línea de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
