# -*- coding: utf-8 -*-
from .console import (
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    format_json,
    format_status_info,
)

__all__ = [
    "echo_error",
    "echo_info",
    "echo_success",
    "echo_warning",
    "format_json",
    "format_status_info",
]
