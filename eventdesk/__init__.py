"""
EventDesk — listing backend for a locale-aware prediction market.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - events: Event/market listings, search, related events, affiliates.
    - admin: Visibility toggles and settings mutations.
    - notifications: Push payload handling.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Use cases, DTOs, orchestration.
    - infrastructure: Adapters (SQL storage, tag cache) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
