from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence

from .models import CommandResult


logger = logging.getLogger(__name__)

_DEFAULT_BINARY = "xrandr"
_DEFAULT_TIMEOUT_S = 10.0


def _failure_message(proc: subprocess.CompletedProcess[str]) -> str:
    return (proc.stderr or proc.stdout or "").strip() or f"xrandr failed (rc={proc.returncode})"


class XrandrTool:
    """Blocking wrapper around the xrandr binary."""

    def __init__(
        self,
        binary: str = _DEFAULT_BINARY,
        timeout_s: float = _DEFAULT_TIMEOUT_S,
        display_env: str | None = None,
    ) -> None:
        if timeout_s <= 0:
            raise ValueError("Timeout must be greater than 0 seconds.")
        self._binary = binary
        self._timeout_s = float(timeout_s)
        self._display_env = display_env

    @property
    def binary(self) -> str:
        return self._binary

    def _env(self) -> dict[str, str] | None:
        if not self._display_env:
            return None
        env = dict(os.environ)
        env["DISPLAY"] = self._display_env
        return env

    def execute(self, args: Sequence[str]) -> CommandResult:
        argv = [self._binary, *args]
        logger.debug("Running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                check=False,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
                env=self._env(),
            )
        except subprocess.TimeoutExpired:
            message = f"{self._binary} timed out after {self._timeout_s:g}s"
            logger.warning(message)
            return CommandResult(success=False, stdout="", stderr=message)
        except OSError as exc:
            message = f"Failed to launch {self._binary}: {exc}"
            logger.warning(message)
            return CommandResult(success=False, stdout="", stderr=message)

        if proc.returncode != 0:
            stderr = _failure_message(proc)
            logger.debug("%s exited with %d: %s", self._binary, proc.returncode, stderr)
            return CommandResult(success=False, stdout=proc.stdout or "", stderr=stderr)
        return CommandResult(success=True, stdout=proc.stdout or "", stderr=proc.stderr or "")

    def query(self) -> str:
        result = self.execute(["--current"])
        if not result.success:
            logger.warning("Display query failed: %s", result.stderr)
            return ""
        return result.stdout
