"""
Application Layer - Use Cases and Ports

This layer contains:
- Port definitions (GateRepository and the capabilities use cases consume)
- Use case implementations (gate operations, business-hours masking and veto)
- Views (JSON-ready representations) and error mapping

NO framework dependencies allowed (pure Python).
"""
