"""Executor that runs rendered commands under an elevation wrapper."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Sequence

from ..base import BaseExecutor, ExecuteResult
from ..renderer import RenderedCommand

logger = logging.getLogger(__name__)

DEFAULT_WRAPPER = ("sudo", "-S", "-p", "")
MASK = "********"


class PrivilegedExecutor(BaseExecutor):
    """Run each command as an independent child of the elevation wrapper.

    The credential, when given, is written once to the child's stdin and
    stdin is closed; without one stdin is closed immediately so a wrapper
    that needs a password fails instead of blocking. No state is shared
    between calls, so concurrent executions need no coordination.
    """

    name = "privileged"

    def __init__(
        self,
        wrapper: Sequence[str] = DEFAULT_WRAPPER,
        password: str | None = None,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
    ):
        self.wrapper = tuple(wrapper)
        self._password = password or None
        self.timeout = timeout
        self._env = env

    def build_argv(self, command: RenderedCommand) -> tuple[str, ...]:
        return (*self.wrapper, *command.argv)

    def _child_env(self) -> dict[str, str]:
        merged_env = os.environ.copy()
        if self._env:
            merged_env.update(self._env)
        # Failure classification matches English tool messages.
        merged_env["LC_ALL"] = "C"
        return merged_env

    def _mask(self, text: str) -> str:
        """Hide the credential if the wrapper echoes it on stderr."""
        if self._password and self._password in text:
            return text.replace(self._password, MASK)
        return text

    async def execute(self, command: RenderedCommand) -> ExecuteResult:
        argv = self.build_argv(command)
        logger.debug("Executing %s command: %s", command.kind, command.display)

        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._child_env(),
            )
        except OSError as e:
            logger.error("Failed to spawn %s: %s", argv[0], e)
            return ExecuteResult(exit_code=127, stdout="", stderr=f"{argv[0]}: {e}")

        stdin_data = f"{self._password}\n".encode() if self._password else b""
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(input=stdin_data),
                timeout=self.timeout,
            )
        except TimeoutError:
            logger.warning("Command timed out after %ss: %s", self.timeout, command.display)
            if proc.returncode is None:
                proc.kill()
            await proc.wait()
            return ExecuteResult(
                exit_code=-1,
                stdout="",
                stderr=f"Command timed out after {self.timeout}s",
                timed_out=True,
            )

        # stdout is command data (file contents, listings) and is never rewritten.
        stdout = stdout_bytes.decode("utf-8", errors="replace")
        stderr = self._mask(stderr_bytes.decode("utf-8", errors="replace"))
        logger.debug("Command %s exited with %s", command.kind, proc.returncode)
        return ExecuteResult(exit_code=proc.returncode or 0, stdout=stdout, stderr=stderr)
