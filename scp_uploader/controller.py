"""
Remote command runner for the scp uploader.

Wraps the local ``scp`` and ``ssh`` clients. All remote state changes are done by the
standard tools (``mkdir -p``, ``scp``, ``rm -f``); each call blocks until the child
process exits and its outcome is reported as a CommandResult.
"""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

# Return codes used when the process could not be started at all
COMMAND_NOT_FOUND = 127
COMMAND_NOT_STARTED = -1


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a single local process invocation."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def message(self) -> str:
        """Diagnostic text from the process, stderr preferred."""
        return (self.stderr or self.stdout or "").strip()

    def __bool__(self) -> bool:
        return self.ok


def split_template(template: str) -> List[str]:
    """Split a command template into arguments, expanding ``~`` in local paths."""
    return [
        os.path.expanduser(token) if token.startswith("~") else token
        for token in shlex.split(template)
    ]


def run_process(
    command: Sequence[str],
    verbose: bool = False,
    log: Optional[logging.Logger] = None,
) -> CommandResult:
    """
    Run a local process to completion and capture its output.

    Args:
        command: Argument list, executed without a shell
        verbose: Log the command and its output at INFO instead of DEBUG
        log: Logger to report to (defaults to this module's logger)

    Returns:
        CommandResult for the process. A command that cannot be started is
        reported as a failed result rather than raised.
    """
    log = log or logger
    level = logging.INFO if verbose else logging.DEBUG
    command = list(command)
    log.log(level, f"Running command: {' '.join(shlex.quote(c) for c in command)}")

    try:
        completed = subprocess.run(command, capture_output=True, text=True)
    except FileNotFoundError as e:
        log.error(f"Command not found: {command[0]}")
        return CommandResult(command, COMMAND_NOT_FOUND, stderr=str(e))
    except OSError as e:
        log.error(f"Failed to start {command[0]}: {e}")
        return CommandResult(command, COMMAND_NOT_STARTED, stderr=str(e))

    result = CommandResult(
        command, completed.returncode, completed.stdout or "", completed.stderr or ""
    )
    if result.stdout.strip():
        log.log(level, f"stdout: {result.stdout.strip()}")
    if result.stderr.strip():
        log.log(level, f"stderr: {result.stderr.strip()}")
    log.log(level, f"Exit code {result.returncode}")
    return result


class ScpController:
    """Executes mkdir, copy and delete on the upload host through scp/ssh."""

    def __init__(
        self,
        scp_command: str,
        ssh_command: str,
        scp_connection: str,
        verbose: bool = False,
        ssh_connection: Optional[str] = None,
        log: Optional[logging.Logger] = None,
    ):
        if not scp_connection:
            raise ValueError("scp_connection (user@host of the upload machine) is required")
        self.scp_command = scp_command
        self.ssh_command = ssh_command
        self.verbose = verbose
        self.scp_connection = scp_connection
        self.ssh_connection = ssh_connection
        self.log = log or logger

    def _build_ssh_command(self, remote_command: str) -> List[str]:
        # e.g. ssh -i ~/.ssh/id_rsa -p 23 user@example.com mkdir -p /topologies
        command = split_template(self.ssh_command)
        if self.ssh_connection:
            command.append(self.ssh_connection)
        command.append(remote_command)
        return command

    def _build_scp_command(self, source: str, destination: str) -> List[str]:
        # e.g. scp -i ~/.ssh/id_rsa -P 23 ./foo.tar.gz user@example.com:/topologies/foo.tar.gz
        command = split_template(self.scp_command)
        # Legacy protocol (-O) expands the remote path in a shell; SFTP mode takes it verbatim
        if "-O" in command:
            destination = shlex.quote(destination)
        command.append(source)
        command.append(f"{self.scp_connection}:{destination}")
        return command

    def _run(self, command: List[str]) -> CommandResult:
        return run_process(command, verbose=self.verbose, log=self.log)

    def mkdirs_if_not_exists(self, path: str) -> CommandResult:
        """Create ``path`` and its parents on the remote host; existing directories succeed."""
        return self._run(self._build_ssh_command(f"mkdir -p {shlex.quote(path)}"))

    def copy_from_local_file(self, source: str, destination: str) -> CommandResult:
        """Copy local ``source`` to remote ``destination``."""
        return self._run(self._build_scp_command(source, destination))

    def delete(self, path: str) -> CommandResult:
        """Remove remote ``path``; an absent file counts as success."""
        return self._run(self._build_ssh_command(f"rm -f {shlex.quote(path)}"))
