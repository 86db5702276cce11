"""
Endpoint subpackage for API v1.

Each module in this package defines an APIRouter for a specific
domain (genres, customers, movies, rentals, returns, users, auth).
The routers are aggregated in ``router.py`` at the package level.
"""
