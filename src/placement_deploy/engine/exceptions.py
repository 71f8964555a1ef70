# -*- coding: utf-8 -*-
"""
Lifecycle Exception Definitions
Every fatal condition raised by a phase derives from LifecycleException so
that the CLI hooks can report it uniformly and exit non-zero.
"""

from typing import Any, Dict, List, Optional, Union


class LifecycleException(Exception):
    """
    Lifecycle exception base class

    Attributes:
        code: Error code, used to distinguish failure classes
        message: Error message
        details: Additional error details
        service: Name of the service the failing phase belongs to
        phase: Lifecycle phase that was running when the error surfaced
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        service: Optional[str] = None,
        phase: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.service = service
        self.phase = phase

    def __str__(self) -> str:
        context = "/".join(part for part in (self.service, self.phase) if part)
        if context:
            return f"[{context}] {self.code}: {self.message}"
        return f"{self.code}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(code='{self.code}', "
            f"message='{self.message}', service={self.service!r}, "
            f"phase={self.phase!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "service": self.service,
            "phase": self.phase,
            "details": self.details,
        }


class ExternalCommandError(LifecycleException):
    """An external provisioning command failed or could not be executed"""

    def __init__(
        self,
        command: Union[str, List[str]],
        returncode: Optional[int] = None,
        stderr: str = "",
        message: Optional[str] = None,
    ):
        if isinstance(command, (list, tuple)):
            command = " ".join(str(part) for part in command)
        if message is None:
            message = f"Command '{command}' exited with status {returncode}"
            if stderr:
                message = f"{message}: {stderr.strip()}"
        super().__init__(
            code="EXTERNAL_COMMAND_FAILED",
            message=message,
            details={
                "command": command,
                "returncode": returncode,
                "stderr": stderr,
            },
        )
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class IdentityConflictError(ExternalCommandError):
    """The identity service reported that a record already exists (409)"""


class ReadinessTimeoutError(LifecycleException):
    """The public endpoint did not answer within the readiness timeout"""

    def __init__(self, service: str, url: str, timeout: float):
        super().__init__(
            code="READINESS_TIMEOUT",
            message=f"{service} did not start: no response from {url} "
            f"within {timeout}s",
            details={"url": url, "timeout": timeout},
            service=service,
        )
        self.url = url
        self.timeout = timeout


class BackendModeMismatchError(LifecycleException):
    """The backend mode changed since it was recorded at configure time"""

    def __init__(self, service: str, recorded: str, requested: str):
        super().__init__(
            code="BACKEND_MODE_MISMATCH",
            message=f"{service} was configured for backend '{recorded}' but "
            f"the current WSGI mode selects '{requested}'; run cleanup and "
            f"configure again",
            details={"recorded": recorded, "requested": requested},
            service=service,
        )
        self.recorded = recorded
        self.requested = requested


class TemplateRenderError(LifecycleException):
    """A template could not be rendered completely"""

    def __init__(self, template: str, unresolved: List[str]):
        super().__init__(
            code="TEMPLATE_UNRESOLVED",
            message=f"Template '{template}' has placeholders without a "
            f"value: {', '.join(sorted(unresolved))}",
            details={"template": template, "unresolved": sorted(unresolved)},
        )
        self.template = template
        self.unresolved = sorted(unresolved)
