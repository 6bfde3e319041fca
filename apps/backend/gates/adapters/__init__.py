"""
Adapters Layer - Concrete Implementations of Ports

This layer contains implementations of the ports defined in application/ports.py.

Structure:
- driven/: Outbound adapters (things the application USES)
  - persistence/: DynamoDB, in-memory and read-only gate repositories
  - time/: Clock
  - ids/: Comment id provider
  - demo/: Canned comment phrases for demo mode

Key Principle: Adapters depend on ports, ports don't depend on adapters.
"""
