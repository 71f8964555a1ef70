# -*- coding: utf-8 -*-
import logging
import os
import sys
from typing import Optional

from ..utils.commands import run_command

logger = logging.getLogger(__name__)


class PackageInstaller:
    """Installs Python and distribution packages."""

    def __init__(self, venv_path: Optional[str] = None):
        self.venv_path = venv_path

    @property
    def python(self) -> str:
        if self.venv_path:
            return os.path.join(self.venv_path, "bin", "python")
        return sys.executable

    def ensure_venv(self) -> None:
        if not self.venv_path or os.path.exists(self.python):
            return
        logger.info(f"Creating virtualenv {self.venv_path}")
        run_command([sys.executable, "-m", "venv", self.venv_path])

    def pip_install(self, *packages: str) -> None:
        if not packages:
            return
        self.ensure_venv()
        logger.info(f"Installing Python packages: {', '.join(packages)}")
        run_command(
            [self.python, "-m", "pip", "install", "--upgrade", *packages],
            sudo=self.venv_path is None,
        )

    def system_install(self, *packages: str) -> None:
        if not packages:
            return
        logger.info(f"Installing system packages: {', '.join(packages)}")
        run_command(
            ["apt-get", "install", "-y", "--no-install-recommends", *packages],
            sudo=True,
            env={"DEBIAN_FRONTEND": "noninteractive"},
        )
