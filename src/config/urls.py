"""
URL Configuration de la Mesa de Ayuda TI.

Estructura:
- /admin/ - Django Admin (datos de referencia y tickets)
- /api/tickets/ - API de Tickets
- /health/ - Health check
"""

from django.contrib import admin
from django.urls import include, path

from src.adapters.django_app.tickets.api_views import HealthCheckView

urlpatterns = [
    # Django Admin
    path('admin/', admin.site.urls),

    # Tickets API
    path('api/tickets/', include('src.adapters.django_app.tickets.urls')),

    # Health check
    path('health/', HealthCheckView.as_view(), name='health'),
]
