"""
Pydantic schema definitions for API payloads.

Each domain (genres, customers, movies, rentals, users) defines its own
Pydantic models for request and response bodies.  Field names on the
wire are camelCase; the models accept either the alias or the Python
attribute name.
"""
