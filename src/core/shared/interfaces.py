"""
Interfaces (Ports) compartidas entre Core y Adapters.

Driven ports usados por todos los casos de uso: la Unit of Work que
delimita transacciones y el publicador de eventos de dominio.

Principio: el Core define las interfaces; los Adapters las implementan.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordina una transacción atómica.

    Pattern: Context Manager
        with uow:
            repo.add(ticket)
            uow.publish_event(event)
        # Commit automático al salir sin error
        # Rollback automático si hay excepción

    Los eventos encolados con publish_event() solo se publican tras un
    commit exitoso. Una misma instancia puede abrir varias transacciones
    consecutivas (por ejemplo, en reintentos).
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self.clear_events()
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # No suprime excepciones

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste los cambios y luego publica los eventos encolados.

        Si el commit falla, los eventos se descartan.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Deshace los cambios y descarta los eventos encolados."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Encola un evento para publicarlo después del commit."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interfaz para la publicación de eventos de dominio.

    Example:
        class LoggingEventPublisher(EventPublisher):
            def publish(self, event):
                logger.info(event.to_dict())
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)
