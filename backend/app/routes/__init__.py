# Routes package init
"""
Contacts API - API Routes Package
===================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles a specific resource or action.

Route Inventory:
    - contacts.py: GET/POST       /api/contacts
                   GET/PUT/DELETE /api/contacts/{id}
    - health.py:   GET            /api/health

Design Principle:
    Routes are thin. They extract data from the request, call the
    service, and return the response model. Business rules live in
    app.services, SQL lives in app.repositories.
"""
