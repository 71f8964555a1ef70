# -*- coding: utf-8 -*-
"""Rendering of backend configuration templates."""

import os
import re
from typing import Dict, Set

from jinja2 import Environment, FileSystemLoader, StrictUndefined
from jinja2 import UndefinedError
from pydantic import BaseModel, ConfigDict

from ...exceptions import TemplateRenderError

# Literal tokens of the form %NAME%; Apache's own %{VAR} and %M are left alone
PLACEHOLDER_PATTERN = re.compile(r"%[A-Z][A-Z0-9_]*%")

SITE_TEMPLATE = "apache-placement-api.template"
UWSGI_TEMPLATE = "uwsgi.ini.j2"
UWSGI_PROXY_TEMPLATE = "uwsgi-proxy.conf.j2"


class SiteTemplateFields(BaseModel):
    """Values for every placeholder of the Apache site template.

    All fields are required; pass an empty string where a value does not
    apply (for example no virtualenv or no TLS).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    apache_name: str
    public_wsgi: str
    ssl_engine: str
    ssl_cert_file: str
    ssl_key_file: str
    user: str
    virtualenv: str
    api_workers: int

    def placeholders(self) -> Dict[str, str]:
        return {
            "%APACHE_NAME%": self.apache_name,
            "%PUBLICWSGI%": self.public_wsgi,
            "%SSLENGINE%": self.ssl_engine,
            "%SSLCERTFILE%": self.ssl_cert_file,
            "%SSLKEYFILE%": self.ssl_key_file,
            "%USER%": self.user,
            "%VIRTUALENV%": self.virtualenv,
            "%APIWORKERS%": str(self.api_workers),
        }


class UwsgiConfigFields(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    wsgi_file: str
    url_prefix: str
    processes: int
    worker_timeout: int
    socket: str


def find_placeholders(text: str) -> Set[str]:
    return set(PLACEHOLDER_PATTERN.findall(text))


class TemplateManager:
    """Manager for backend configuration templates."""

    def __init__(self, template_dir: str = None):
        """Initialize template manager."""
        self.template_dir = template_dir or os.path.join(
            os.path.dirname(__file__),
            "templates",
        )
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _read_template(self, template_name: str) -> str:
        path = os.path.join(self.template_dir, template_name)
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def render_site_template(
        self,
        fields: SiteTemplateFields,
        template_name: str = SITE_TEMPLATE,
    ) -> str:
        """Render the Apache site template.

        Every placeholder in the template is validated against ``fields``
        before anything is substituted, then all of them are replaced in a
        single pass so substituted values are never scanned again.

        Raises:
            TemplateRenderError: If the template uses an unknown placeholder
        """
        template = self._read_template(template_name)
        values = fields.placeholders()

        unresolved = find_placeholders(template) - set(values)
        if unresolved:
            raise TemplateRenderError(template_name, list(unresolved))

        return PLACEHOLDER_PATTERN.sub(
            lambda match: values[match.group(0)],
            template,
        )

    def _render(self, template_name: str, **variables) -> str:
        template = self.env.get_template(template_name)
        try:
            return template.render(**variables)
        except UndefinedError as e:
            raise TemplateRenderError(template_name, [str(e)]) from e

    def render_uwsgi_config(self, fields: UwsgiConfigFields) -> str:
        return self._render(UWSGI_TEMPLATE, **fields.model_dump())

    def render_uwsgi_proxy(self, fields: UwsgiConfigFields) -> str:
        """Render the Apache snippet forwarding the URL prefix to uWSGI."""
        return self._render(UWSGI_PROXY_TEMPLATE, **fields.model_dump())
