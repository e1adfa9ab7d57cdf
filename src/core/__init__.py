"""
Core Domain Layer - El Hexágono.

Este paquete contiene la lógica de negocio pura, sin dependencias de frameworks.
Características:
- Cero dependencias externas (Django, ORM, etc.)
- Testeable sin base de datos
- Agnóstico a la infraestructura
"""
