"""Service layer modules.

Import service modules rather than individual functions, e.g.
``from coursemail.services import signature_service``.
"""
