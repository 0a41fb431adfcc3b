"""
Bookstore Backend — Application Package
=========================================

Layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, response envelope
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← validation, credentials, stores
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
