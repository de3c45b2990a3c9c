"""
HTTP layer of the application.

``router`` aggregates the domain routers defined in ``endpoints`` and
``deps`` holds the request dependencies (store accessors and the
authentication guard) shared by them.
"""
