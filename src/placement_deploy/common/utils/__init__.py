# -*- coding: utf-8 -*-
from .commands import redact_command, run_command

__all__ = ["redact_command", "run_command"]
