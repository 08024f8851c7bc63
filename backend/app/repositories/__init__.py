# Repositories package init
"""
Contacts API - Repositories Layer
===================================

What:  Persistence layer: the only code that builds SQL or touches sessions.
How:   ContactRepository wraps one AsyncEngine and exposes the schema-ensure
       step, the health round-trip and the five contact query shapes.

Repository Inventory:
    - ContactRepository: contacts table (count+page, get, insert, update, delete)
"""
