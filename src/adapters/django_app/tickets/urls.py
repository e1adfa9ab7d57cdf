"""
URL patterns del dominio de Tickets.

Endpoints API JSON (montados en /api/tickets/):
- GET / - Listar tickets
- POST / - Crear ticket
"""

from django.urls import path

from . import api_views

app_name = 'tickets'

urlpatterns = [
    # Listado y creación
    path('', api_views.TicketAPIListView.as_view(), name='api_list'),
]
