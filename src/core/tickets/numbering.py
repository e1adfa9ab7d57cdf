"""
Generación del número legible de ticket (TICK-YYYYMMDD-NNNN).

El generador solo calcula el candidato siguiente a partir del último número
del día. La unicidad la garantiza la restricción UNIQUE de numero_ticket:
si dos creaciones concurrentes obtienen el mismo candidato, una de ellas
falla con NumeroTicketDuplicadoError y CrearTicketService reintenta.
"""

from datetime import date
import logging

from .entities import NumeroTicket
from .ports import SecuenciaTickets

logger = logging.getLogger(__name__)


class GeneradorNumeroTicket:
    """
    Calcula el siguiente número de ticket del día.

    Example:
        generador = GeneradorNumeroTicket(secuencia=ticket_repo)
        generador.siguiente(date(2025, 8, 31))  # "TICK-20250831-0001"
    """

    def __init__(self, secuencia: SecuenciaTickets):
        self.secuencia = secuencia

    def siguiente(self, fecha: date) -> str:
        """
        Args:
            fecha: Día calendario (UTC) del número

        Returns:
            Último número del día + 1, o la secuencia 0001 si no hay ninguno
        """
        prefijo = NumeroTicket.prefijo_del_dia(fecha)
        ultimo = self.secuencia.ultimo_numero(prefijo)

        if not ultimo:
            return str(NumeroTicket(fecha=fecha, secuencia=1))

        try:
            return str(NumeroTicket.parse(ultimo).siguiente())
        except ValueError:
            logger.warning(
                "Número de ticket con formato inesperado: %s; se reinicia la secuencia",
                ultimo,
            )
            return str(NumeroTicket(fecha=fecha, secuencia=1))
