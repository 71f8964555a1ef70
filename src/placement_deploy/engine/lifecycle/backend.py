# -*- coding: utf-8 -*-
"""Backend modes for serving the API."""

from enum import Enum

# WSGI mode value that selects the self-hosted uWSGI process
EMBEDDED_WSGI_MODE = "uwsgi"


class BackendMode(str, Enum):
    """Application-server strategies for serving the API."""

    EMBEDDED_SERVER = "embedded_server"  # uWSGI process behind a proxy
    PROXIED_SITE = "proxied_site"  # mod_wsgi site of the shared web server


def select_backend_mode(wsgi_mode: str) -> BackendMode:
    """Choose the backend mode for a WSGI execution-mode setting.

    Only the exact sentinel value selects the embedded server; every other
    value, including an empty one, falls back to the proxied site.
    """
    if wsgi_mode == EMBEDDED_WSGI_MODE:
        return BackendMode.EMBEDDED_SERVER
    return BackendMode.PROXIED_SITE
