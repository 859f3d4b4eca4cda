"""
Financial Forecasting Service — prediction orchestration over market data.

Application package root. A modular monolith using hexagonal architecture
(ports & adapters).

Bounded contexts:
    - forecast: Local/cloud model predictions, anomaly policy, algorithm catalog.

Layers:
    - domain: Entities, ports (ABCs), errors, pure policies (normalizer, classifier, catalog).
    - application: Orchestration of backends, normalization and persistence.
    - infrastructure: Adapters (subprocess model, HTTP model, database).
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
