"""Authored stack templates.

Each builder returns a fresh ``Template``.  The Express stack has no builder
of its own; see :func:`project_launcher.scaffolder.registry.derive_server_template`.
"""

from .flask import build_flask_template
from .fullstack import CLIENT_PREFIX, SERVER_PREFIX, build_mern_template, build_pern_template
from .nextjs import build_nextjs_template

__all__ = [
    "CLIENT_PREFIX",
    "SERVER_PREFIX",
    "build_flask_template",
    "build_mern_template",
    "build_nextjs_template",
    "build_pern_template",
]
