# -*- coding: utf-8 -*-
"""
Thin privileged shell used to talk to acc and djs.

Every command line goes through `ShellExecutor.execute`, which runs it under
a privilege prefix (`su -c` by default) and returns the exit status together
with the captured stdout lines. There is no timeout: acc serializes its own
work and callers that cannot block dispatch through core.background.
"""

import os
import sys
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from config.settings import DEFAULT_SHELL_PREFIX, ENV_SHELL, LOCAL_SHELL_PROGRAMS


# --- Custom exceptions for clear error handling ---
class AccError(Exception):
    """Base exception for errors raised inside the ACC core."""
    pass

class ShellError(AccError):
    """Base exception for shell execution errors."""
    pass

class ShellSpawnError(ShellError):
    """Raised when the privileged shell process cannot be started."""
    def __init__(self, message, original_exception=None):
        super().__init__(message)
        self.original_exception = original_exception


@dataclass
class ShellResult:
    success: bool
    code: int
    out: List[str] = field(default_factory=list)


Commands = Union[str, Sequence[str]]


def shell_prefix_from_env() -> List[str]:
    """Reads the privilege prefix from ACC_SHELL, e.g. 'adb shell su -c'."""
    value = os.environ.get(ENV_SHELL, "").strip()
    return shlex.split(value) if value else list(DEFAULT_SHELL_PREFIX)


class ShellExecutor:
    """Runs command lines in a privileged shell."""

    def __init__(self, prefix: Optional[List[str]] = None, encoding: str = "utf-8"):
        self.prefix = list(prefix) if prefix is not None else shell_prefix_from_env()
        self.encoding = encoding

    @staticmethod
    def join_commands(commands: Commands) -> str:
        if isinstance(commands, str):
            return commands
        return "\n".join(commands)

    def spawn_args(self, script: str) -> List[str]:
        if not self.prefix:
            return ["sh", "-c", script]
        if os.path.basename(self.prefix[0]) in LOCAL_SHELL_PROGRAMS:
            return self.prefix + [script]
        # Remote launchers (adb shell, ssh) join their argv and re-split it
        return self.prefix + [shlex.quote(script)]

    def _spawn(self, script: str) -> subprocess.CompletedProcess:
        args = self.spawn_args(script)
        try:
            return subprocess.run(args, capture_output=True)
        except OSError as e:
            raise ShellSpawnError(f"cannot start '{args[0]}': {e}", e)

    def execute(self, commands: Commands) -> ShellResult:
        """
        Runs one command line or a batch of them in a single shell session.

        Returns:
            A ShellResult; success is True only for exit code 0. A shell that
            cannot be started is reported as a failed result with code -1.
        """
        script = self.join_commands(commands)
        try:
            completed = self._spawn(script)
        except ShellSpawnError as e:
            print(f"Shell error while running '{script}': {e}", file=sys.stderr)
            return ShellResult(False, -1, [])

        output = completed.stdout.decode(self.encoding, errors="ignore")
        lines = output.splitlines()
        return ShellResult(completed.returncode == 0, completed.returncode, lines)
