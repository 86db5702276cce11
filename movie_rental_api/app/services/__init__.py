"""
Service layer abstraction.

Each service encapsulates business logic for a domain and works against
the repositories in ``app.repositories``.  API handlers call services
and translate their exceptions to HTTP responses.
"""
