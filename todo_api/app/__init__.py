"""
Application package initializer.

The application is split into a small number of layers: ``core``
(configuration, logging, storage and security primitives),
``services`` (store accessors for users and todos), ``schemas``
(Pydantic request and response bodies) and ``api`` (HTTP routers and
request dependencies).
"""

from .main import app  # noqa: F401
