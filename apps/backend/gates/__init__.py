"""
Gates - Hexagonal Architecture Core

This package contains the framework-independent core of the gates service,
following the Ports & Adapters (Hexagonal) architecture pattern.

A gate is a named open/closed switch keyed by (group, service, environment)
that downstream systems query before allowing an action such as a deployment.

Structure:
- domain/: Gate entities, record codec, business-hours evaluator (NO I/O)
- application/: Ports (GateRepository contract), use cases, views
- adapters/: Concrete implementations of ports
  - driven/persistence/: DynamoDB, in-memory and read-only repositories
  - driven/time/, driven/ids/, driven/demo/: clock, id and quote providers
- wiring/: Composition root

Key Principle: Dependencies point INWARD.
- Domain has ZERO external dependencies
- Application depends only on domain
- Adapters depend on application ports (but not vice versa)
"""

__version__ = "1.0.0"
