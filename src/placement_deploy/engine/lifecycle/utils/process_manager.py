# -*- coding: utf-8 -*-
# pylint:disable=consider-using-with

import asyncio
import logging
import os
import subprocess
from typing import Dict, List, Optional, Tuple

import psutil

logger = logging.getLogger(__name__)

# Seconds of disagreement tolerated between recorded and actual start times
CREATE_TIME_SLACK = 0.01


class ProcessManager:
    """Supervises detached service processes keyed by name."""

    def __init__(
        self,
        run_dir: str,
        log_dir: Optional[str] = None,
        shutdown_timeout: int = 30,
    ):
        """Initialize process manager.

        Args:
            run_dir: Directory holding ``<name>.pid`` files
            log_dir: Directory holding ``<name>.log`` files
            shutdown_timeout: Timeout in seconds for graceful shutdown
        """
        self.run_dir = run_dir
        self.log_dir = log_dir or os.path.join(run_dir, "logs")
        self.shutdown_timeout = shutdown_timeout

    def pid_file_for(self, name: str) -> str:
        return os.path.join(self.run_dir, f"{name}.pid")

    def log_file_for(self, name: str) -> str:
        return os.path.join(self.log_dir, f"{name}.log")

    async def run(
        self,
        name: str,
        command: List[str],
        env: Optional[Dict[str, str]] = None,
    ) -> int:
        """Start a detached process registered under ``name``.

        Args:
            name: Process name used as key for pid and log files
            command: Command line to execute
            env: Additional environment variables

        Returns:
            Process PID

        Raises:
            RuntimeError: If process creation fails
        """
        process_env = os.environ.copy()
        if env:
            process_env.update(env)

        os.makedirs(self.log_dir, exist_ok=True)
        log_file = self.log_file_for(name)
        if os.path.islink(log_file):
            os.remove(log_file)

        log_f = open(log_file, "a", encoding="utf-8")
        try:
            process = subprocess.Popen(
                command,
                stdout=log_f,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                start_new_session=True,
                env=process_env,
            )
        except OSError as e:
            raise RuntimeError(f"Failed to start {name}: {e}") from e
        finally:
            # The child keeps its own copy of the descriptor
            log_f.close()

        # Give the process time to fail on obviously broken configuration
        await asyncio.sleep(0.5)
        if process.poll() is not None:
            logs = self.get_process_logs(name, max_lines=50)
            logger.error(
                f"{name} exited immediately with status "
                f"{process.returncode}.\n\nProcess logs:\n{logs}",
            )
            raise RuntimeError(
                f"{name} failed to start. Check logs above.",
            )

        try:
            create_time = psutil.Process(process.pid).create_time()
        except psutil.NoSuchProcess as e:
            raise RuntimeError(f"{name} exited right after starting") from e

        self.create_pid_file(name, process.pid, create_time)
        logger.info(f"Started {name} (PID: {process.pid})")
        return process.pid

    async def stop(self, name: str, timeout: Optional[int] = None) -> bool:
        """Stop the process registered under ``name``.

        A pid file whose pid now belongs to another process (after a reboot
        or pid reuse) is discarded without signalling that process.

        Args:
            name: Process name
            timeout: Timeout for graceful shutdown (uses default if None)

        Returns:
            True if a process was stopped, False if none of ours was running

        Raises:
            RuntimeError: If process termination fails
        """
        if timeout is None:
            timeout = self.shutdown_timeout

        if self.read_pid_file(name) is None:
            logger.debug(f"No pid file for {name}, nothing to stop")
            return False

        process = self._owned_process(name)
        if process is None:
            logger.warning(f"Discarding stale pid file of {name}")
            self.cleanup_pid_file(name)
            return False

        pid = process.pid
        try:
            process.terminate()
            try:
                process.wait(timeout=timeout)
            except psutil.TimeoutExpired:
                logger.warning(
                    f"{name} (PID: {pid}) ignored SIGTERM, killing it",
                )
                process.kill()
                process.wait(timeout=5)
        except psutil.NoSuchProcess:
            pass
        except psutil.AccessDenied as e:
            raise RuntimeError(
                f"Access denied when terminating {name} ({pid}): {e}",
            ) from e
        finally:
            self.cleanup_pid_file(name)

        logger.info(f"Stopped {name} (PID: {pid})")
        return True

    def is_running(self, name: str) -> bool:
        return self._owned_process(name) is not None

    def _owned_process(self, name: str) -> Optional[psutil.Process]:
        """Recorded process of ``name`` if its pid and start time match."""
        record = self._read_pid_record(name)
        if record is None:
            return None
        pid, create_time = record
        if create_time is None:
            return None
        try:
            process = psutil.Process(pid)
            if abs(process.create_time() - create_time) > CREATE_TIME_SLACK:
                return None
            if process.status() == psutil.STATUS_ZOMBIE:
                return None
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return None
        return process

    def tail_log(self, name: str, log_file: str) -> None:
        """Expose an externally written log under ``name``.

        Args:
            name: Process name
            log_file: Log file written by another program, e.g. the web
                server
        """
        os.makedirs(self.log_dir, exist_ok=True)
        link = self.log_file_for(name)
        if os.path.lexists(link):
            os.remove(link)
        os.symlink(log_file, link)

    def create_pid_file(self, name: str, pid: int, create_time: float) -> None:
        """Create a PID file holding the pid and the process start time.

        Raises:
            OSError: If file creation fails
        """
        file_path = self.pid_file_for(name)
        try:
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(f"{pid}\n{create_time!r}\n")
        except OSError as e:
            raise OSError(f"Failed to create PID file {file_path}: {e}") from e

    def _read_pid_record(
        self,
        name: str,
    ) -> Optional[Tuple[int, Optional[float]]]:
        file_path = self.pid_file_for(name)
        try:
            if not os.path.exists(file_path):
                return None

            with open(file_path, "r", encoding="utf-8") as f:
                fields = f.read().split()
            pid = int(fields[0])
            create_time = float(fields[1]) if len(fields) > 1 else None
        except (IndexError, ValueError, OSError):
            return None
        return pid, create_time

    def read_pid_file(self, name: str) -> Optional[int]:
        """Read PID from file, None if missing or invalid."""
        record = self._read_pid_record(name)
        return record[0] if record else None

    def cleanup_pid_file(self, name: str) -> None:
        file_path = self.pid_file_for(name)
        if os.path.exists(file_path):
            os.remove(file_path)

    def get_process_logs(self, name: str, max_lines: int = 50) -> str:
        """Get the last N lines of a process log.

        Args:
            name: Process name
            max_lines: Maximum number of lines to return

        Returns:
            Log content as string
        """
        log_file = self.log_file_for(name)
        if not os.path.exists(log_file):
            return "No log file available"

        try:
            with open(log_file, "r", encoding="utf-8", errors="replace") as f:
                lines = f.readlines()
        except OSError as e:
            return f"Failed to read log file: {e}"

        if not lines:
            return (
                "Log file is empty (process may not have written "
                "any output yet)"
            )
        return "".join(lines[-max_lines:])
