# -*- coding: utf-8 -*-
from .ini_file import IniFile
from .process_manager import ProcessManager
from .readiness import wait_for_service
from .templates import (
    SiteTemplateFields,
    TemplateManager,
    UwsgiConfigFields,
    find_placeholders,
)
from .timing import PhaseTimer

__all__ = [
    "IniFile",
    "ProcessManager",
    "wait_for_service",
    "SiteTemplateFields",
    "TemplateManager",
    "UwsgiConfigFields",
    "find_placeholders",
    "PhaseTimer",
]
