"""
Sarraf - Hexagonal Architecture Core

This package contains the framework-independent core of the USDT/JOD
exchange desk, following the Ports & Adapters (Hexagonal) pattern.

Structure:
- domain/: Entities, value objects, quote calculator, error taxonomy
- application/: Use cases, validation and port definitions
- adapters/: Concrete implementations of ports
- wiring/: Dependency injection container

Key Principle: Dependencies point INWARD.
- Domain has ZERO external dependencies
- Application depends only on domain
- Adapters depend on application ports (but not vice versa)
"""

__version__ = "1.0.0"
