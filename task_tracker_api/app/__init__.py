"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules.  Each domain (users, tasks, statistics) has a service in
``services``, pydantic schemas in ``schemas`` and a router defined in
``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
