"""
Event Publishers - Publicadores de Eventos de Dominio.

Implementaciones:
- LoggingEventPublisher: Registra cada evento en el log (auditoría)
- InMemoryEventPublisher: Para tests

Patrón Observer/Pub-Sub: permite registrar handlers síncronos locales por
tipo de evento sin acoplar los casos de uso a ellos.
"""

from typing import Callable, Dict, List
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class _HandlerRegistry:
    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Registra un handler para un tipo de evento."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception:
                logger.exception("Error en handler de %s", event.event_type)


class LoggingEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher que registra los eventos en el log.

    Cada evento queda como una línea estructurada, por ejemplo:
        [EVENT] TicketCreadoEvent | aggregate=15 | data={...}
    """

    def __init__(self, log_level: int = logging.INFO):
        super().__init__()
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            "[EVENT] %s | aggregate=%s | data=%s",
            event.event_type,
            event.aggregate_id,
            json.dumps(event.to_dict(), default=str),
        )
        self._dispatch_to_handlers(event)


class InMemoryEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher en memoria para tests.

    Guarda los eventos publicados para verificarlos.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()
