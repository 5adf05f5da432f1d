"""
Notes API - Application Package
===============================

Layered layout:

    ┌─────────────────────────────────────┐
    │      Routes + Auth (API Layer)      │  ← HTTP concerns, envelope, status codes
    ├─────────────────────────────────────┤
    │  NoteService (Business Logic)       │  ← validation, cache coherence
    ├──────────────────┬──────────────────┤
    │ NoteStore +      │  MemoryCache     │  ← persistence / listing cache
    │ Query Builder    │                  │
    ├──────────────────┴──────────────────┤
    │  Models & Schemas (Data)            │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Database (Persistence)             │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
