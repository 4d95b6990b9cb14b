"""
Adapters Layer - Concrete Implementations of Ports

This layer contains implementations of the ports defined in application/ports.py.

Structure:
- driven/: Outbound adapters (things the application USES)
  - persistence/: Django ORM repositories and unit of work
  - messaging/: In-memory message bus and live connection registry
  - storage/: Document storage on Django's default storage
  - time/: System clock

Inbound adapters (REST endpoints) live in the Django monolith.

Key Principle: Adapters depend on ports, ports don't depend on adapters.
"""
