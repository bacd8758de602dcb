"""
Shared subprocess handling for provider CLIs.

Resolves the executable on PATH, runs it with captured output and a timeout,
and classifies failures into the provider error taxonomy.
"""

import os
import shutil
import subprocess
import time
from collections.abc import Iterable, Mapping, Sequence

from forgebridge.config import DEFAULT_CLI_TIMEOUT
from forgebridge.exceptions import (
    CommandFailedError,
    NotAuthenticatedError,
    NotInstalledError,
)
from forgebridge.logging import log_cli_command


class CliRunner:
    """
    Runs one provider CLI (``gh`` or ``glab``).

    Instances hold only immutable settings and are safe to share between
    concurrent calls.
    """

    def __init__(
        self,
        program: str,
        auth_markers: Iterable[str],
        env: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_CLI_TIMEOUT,
    ) -> None:
        """
        Initialize the runner.

        Args:
            program: Executable name resolved on PATH
            auth_markers: Lowercase stderr phrases that indicate an auth failure
            env: Extra environment variables for every invocation
            timeout: Per-invocation timeout in seconds
        """
        self.program = program
        self.auth_markers = tuple(marker.lower() for marker in auth_markers)
        self.env = dict(env or {})
        self.timeout = timeout

    def resolve(self) -> str:
        """
        Resolve the executable path.

        Raises:
            NotInstalledError: If the program is not on PATH
        """
        path = shutil.which(self.program)
        if path is None:
            raise NotInstalledError(self.program)
        return path

    def is_available(self) -> bool:
        return shutil.which(self.program) is not None

    def is_auth_failure(self, stderr: str) -> bool:
        lower = stderr.lower()
        return any(marker in lower for marker in self.auth_markers)

    def run(self, args: Sequence[str]) -> str:
        """
        Execute the CLI and return stdout.

        Raises:
            NotInstalledError: If the executable is missing or not runnable
            NotAuthenticatedError: If stderr carries an authentication failure
            CommandFailedError: On any other non-zero exit or a timeout
        """
        executable = self.resolve()
        env = {**os.environ, **self.env} if self.env else None

        started = time.monotonic()
        try:
            result = subprocess.run(
                [executable, *args],
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                env=env,
                timeout=self.timeout,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise NotInstalledError(self.program) from e
        except subprocess.TimeoutExpired as e:
            raise CommandFailedError(
                f"{self.program} {args[0] if args else ''} timed out after {self.timeout:.0f}s"
            ) from e
        except OSError as e:
            raise CommandFailedError(str(e)) from e

        log_cli_command(
            self.program,
            args,
            returncode=result.returncode,
            elapsed_ms=(time.monotonic() - started) * 1000,
        )

        if result.returncode == 0:
            return result.stdout

        stderr = (result.stderr or "").strip()
        if self.is_auth_failure(stderr):
            raise NotAuthenticatedError(stderr)

        raise CommandFailedError(stderr or f"{self.program} exited with status {result.returncode}")
