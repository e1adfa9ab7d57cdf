"""
Configuración del proyecto Mesa de Ayuda TI.

Módulos:
- settings: Configuración de Django
- urls: Rutas principales
- container: Dependency Injection Container
"""
