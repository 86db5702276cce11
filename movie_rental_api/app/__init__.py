"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Configuration, logging, persistence and security live in
``core``; storage access in ``repositories``; business rules in
``services``; request and response models in ``schemas``; and HTTP
routes under ``api/<version>/``.
"""

from .main import app  # noqa: F401
