"""
Dependency Injection Container.

Configura y gestiona las dependencias de la aplicación con
dependency-injector (lazy-loading e inyección explícita).

Patrones:
- Singleton: Una instancia por app (repositorios, gateway, publisher)
- Factory: Instancia nueva por llamada (services, UoW)
- Configuration: Valores tomados de settings

Los imports de adapters son perezosos (`__import__` dentro de lambdas)
para que el container pueda importarse antes de que Django cargue los
models.
"""

from dependency_injector import containers, providers
from typing import Optional

DEFAULTS = {
    'ticket_numero_max_intentos': 5,
}


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organización:
    - Configuration: settings
    - Infrastructure: Publicador de eventos
    - Repositories / Gateways: Persistencia y datos de referencia
    - Unit of Work: Transacciones
    - Services: Use Cases

    Example:
        container = Container()
        container.config.from_dict({'ticket_numero_max_intentos': 3})

        service = container.crear_ticket_service()
        result = service.execute(input_dto, principal)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default=DEFAULTS)

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.events.publishers',
            fromlist=['LoggingEventPublisher']
        ).LoggingEventPublisher()
    )

    # =========================================================================
    # Repositories / Gateways (Singleton)
    # =========================================================================

    ticket_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.tickets.repositories',
            fromlist=['DjangoTicketRepository']
        ).DjangoTicketRepository()
    )

    ticket_query_repository = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.tickets.repositories',
            fromlist=['DjangoTicketQueryRepository']
        ).DjangoTicketQueryRepository()
    )

    referencias_gateway = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.tickets.repositories',
            fromlist=['DjangoReferenciasGateway']
        ).DjangoReferenciasGateway()
    )

    # =========================================================================
    # Unit of Work (Factory - nueva instancia por operación)
    # =========================================================================

    unit_of_work = providers.Factory(
        lambda event_publisher: __import__(
            'src.adapters.django_app.shared.unit_of_work',
            fromlist=['DjangoUnitOfWork']
        ).DjangoUnitOfWork(
            event_publisher=event_publisher,
        ),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Services / Use Cases (Factory)
    # =========================================================================

    generador_numero_ticket = providers.Factory(
        lambda secuencia: __import__(
            'src.core.tickets.numbering',
            fromlist=['GeneradorNumeroTicket']
        ).GeneradorNumeroTicket(secuencia=secuencia),
        secuencia=ticket_repository,
    )

    # Crear Ticket
    crear_ticket_service = providers.Factory(
        lambda ticket_repo, referencias, generador, uow, max_intentos: __import__(
            'src.core.tickets.use_cases',
            fromlist=['CrearTicketService']
        ).CrearTicketService(
            ticket_repo=ticket_repo,
            referencias=referencias,
            generador=generador,
            uow=uow,
            max_intentos=max_intentos,
        ),
        ticket_repo=ticket_repository,
        referencias=referencias_gateway,
        generador=generador_numero_ticket,
        uow=unit_of_work,
        max_intentos=config.ticket_numero_max_intentos,
    )

    # Listar Tickets (sin UoW - lectura)
    listar_tickets_service = providers.Factory(
        lambda query_repo: __import__(
            'src.core.tickets.use_cases',
            fromlist=['ListarTicketsService']
        ).ListarTicketsService(
            query_repo=query_repo,
        ),
        query_repo=ticket_query_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Devuelve la instancia global del container.

    La crea si no existe, configurada desde django.conf.settings.
    """
    global _container

    if _container is None:
        from django.conf import settings

        _container = Container()
        _container.config.from_dict({
            'ticket_numero_max_intentos': getattr(
                settings,
                'TICKET_NUMERO_MAX_INTENTOS',
                DEFAULTS['ticket_numero_max_intentos'],
            ),
        })

    return _container


def reset_container() -> None:
    """Reset del container (para tests)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

class TestingContainer(containers.DeclarativeContainer):
    """
    Container para tests con implementaciones en memoria.

    Example:
        container = TestingContainer()
        service = container.crear_ticket_service()
        container.referencias().agregar_usuario(42, "Ana Pérez")
    """

    __test__ = False

    config = providers.Configuration(default=DEFAULTS)

    referencias = providers.Singleton(
        lambda: __import__(
            'src.core.tickets.ports',
            fromlist=['InMemoryReferencias']
        ).InMemoryReferencias.con_datos_estandar()
    )

    ticket_repository = providers.Singleton(
        lambda referencias: __import__(
            'src.core.tickets.ports',
            fromlist=['InMemoryTicketRepository']
        ).InMemoryTicketRepository(referencias),
        referencias=referencias,
    )

    unit_of_work = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.shared.unit_of_work',
            fromlist=['InMemoryUnitOfWork']
        ).InMemoryUnitOfWork()
    )

    generador_numero_ticket = providers.Factory(
        lambda secuencia: __import__(
            'src.core.tickets.numbering',
            fromlist=['GeneradorNumeroTicket']
        ).GeneradorNumeroTicket(secuencia=secuencia),
        secuencia=ticket_repository,
    )

    crear_ticket_service = providers.Factory(
        lambda ticket_repo, referencias, generador, uow, max_intentos: __import__(
            'src.core.tickets.use_cases',
            fromlist=['CrearTicketService']
        ).CrearTicketService(
            ticket_repo=ticket_repo,
            referencias=referencias,
            generador=generador,
            uow=uow,
            max_intentos=max_intentos,
        ),
        ticket_repo=ticket_repository,
        referencias=referencias,
        generador=generador_numero_ticket,
        uow=unit_of_work,
        max_intentos=config.ticket_numero_max_intentos,
    )

    listar_tickets_service = providers.Factory(
        lambda query_repo: __import__(
            'src.core.tickets.use_cases',
            fromlist=['ListarTicketsService']
        ).ListarTicketsService(query_repo=query_repo),
        query_repo=ticket_repository,
    )
