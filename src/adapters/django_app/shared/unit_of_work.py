"""
Unit of Work - Implementación Django.

Gestiona una transacción atómica alrededor de una operación de escritura y
publica los eventos de dominio solo después del commit.

Responsabilidades:
- Abrir/cerrar la transacción (transaction.atomic)
- Commit/Rollback coordinados
- Publicar eventos tras un commit exitoso
- Traducir errores de integridad diferidos al commit

Como usa transaction.atomic, funciona igual dentro de otra transacción
(se convierte en savepoint), por ejemplo dentro de los tests de
pytest-django o de ATOMIC_REQUESTS.
"""

from typing import List, Optional
import logging

from django.db import IntegrityError, transaction

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher, UnitOfWork

from .database import traducir_integrity_error

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementación Django del Unit of Work.

    Features:
    - Context manager (with statement)
    - Commit/rollback automáticos
    - Buffer de eventos
    - Reutilizable: cada `with` abre una transacción nueva

    Example:
        uow = DjangoUnitOfWork(event_publisher=LoggingEventPublisher())
        with uow:
            ticket_repo.add(ticket)
            uow.publish_event(TicketCreadoEvent(...))
        # Commit automático + eventos publicados

    Example con rollback:
        with uow:
            ticket_repo.add(ticket)
            raise ValueError("¡Error!")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        using: Optional[str] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (opcional)
            using: Alias de la base de datos (por defecto 'default')
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomic = None

    def _begin_transaction(self) -> None:
        self._atomic = transaction.atomic(using=self._using)
        self._atomic.__enter__()
        logger.debug("Transacción iniciada")

    def commit(self) -> None:
        """
        Persiste los cambios y publica los eventos.

        Orden:
        1. Cerrar el bloque atómico (commit o release del savepoint)
        2. Publicar eventos

        Raises:
            ForeignKeyError / ConflictError: Si el motor rechaza el commit
        """
        atomic, self._atomic = self._atomic, None
        if atomic is None:
            logger.warning("Commit sin transacción activa")
            return

        try:
            atomic.__exit__(None, None, None)
        except IntegrityError as exc:
            self.clear_events()
            logger.error("Commit rechazado por integridad: %s", exc)
            raise traducir_integrity_error(exc) from exc

        logger.debug("Transacción confirmada")
        self._publish_events()

    def rollback(self) -> None:
        """
        Deshace los cambios y descarta los eventos.

        Se llama automáticamente si ocurre una excepción dentro del contexto.
        """
        atomic, self._atomic = self._atomic, None
        self.clear_events()
        if atomic is None:
            return

        transaction.set_rollback(True, using=self._using)
        atomic.__exit__(None, None, None)
        logger.debug("Transacción revertida")

    def _publish_events(self) -> None:
        events = self.collect_events()
        self.clear_events()

        if not self._event_publisher:
            return

        for event in events:
            try:
                self._event_publisher.publish(event)
            except Exception:
                # El commit ya ocurrió; un fallo al publicar no lo revierte
                logger.exception("Fallo al publicar evento %s", event.event_type)


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work en memoria para tests.

    No persiste nada, solo simula el comportamiento para tests unitarios
    sin base de datos.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.commits == 1
        assert len(uow.published_events) == 1
    """

    def __init__(self):
        super().__init__()
        self.commits = 0
        self.rollbacks = 0
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        self.commits += 1
        self._published_events.extend(self._events)
        self.clear_events()

    def rollback(self) -> None:
        self.rollbacks += 1
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self.commits > 0

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos "publicados" tras cada commit."""
        return list(self._published_events)
