# Services package init
"""
Notes API - Services Layer
==========================

Service Inventory:
    - query_builder: pure translation of NotesPagedRequest into SQL statements
    - NoteStore:     CRUD and query execution over an AsyncSession
    - MemoryCache:   in-process cache with sliding + absolute expiration
    - NoteService:   orchestrates store and cache; owns the business rules
"""
