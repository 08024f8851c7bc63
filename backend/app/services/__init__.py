# Services package init
"""
Contacts API - Services Layer
===============================

What:  Business logic layer sitting between routes (HTTP) and the
       repository (persistence).
How:   Services accept request schemas, apply business rules, call the
       repository, and return response schemas.

Service Inventory:
    - ContactService: validation, normalization, pagination, not-found handling
"""
