"""
Commands executed inside the virtual machine.

A ``RemoteCommand`` is a working directory plus one or more argument
vectors, or one free-form script. It renders to a single shell string for
``vagrant ssh --command``. Argument vectors are quoted token by token, so
service names never need ad hoc escaping; a script is appended verbatim and
interpreted by the VM user's login shell.
"""

import shlex
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class RemoteCommand(BaseModel):
    """A command request to run inside the VM."""

    workdir: str
    commands: List[List[str]] = Field(default_factory=list)
    script: Optional[str] = None

    @field_validator("commands")
    @classmethod
    def validate_commands(cls, v):
        """Each command needs at least a program name."""
        if any(not argv for argv in v):
            raise ValueError("RemoteCommand commands must not be empty")
        return v

    @model_validator(mode="after")
    def validate_has_work(self):
        if not self.commands and not (self.script and self.script.strip()):
            raise ValueError("RemoteCommand needs a command or a script")
        return self

    @classmethod
    def single(cls, workdir: str, *argv: str) -> "RemoteCommand":
        return cls(workdir=workdir, commands=[list(argv)])

    @classmethod
    def shell(cls, workdir: str, script: str) -> "RemoteCommand":
        """Run an arbitrary command string as typed."""
        return cls(workdir=workdir, script=script)

    def render(self) -> str:
        """Render as ``cd <workdir> && <cmd> && <cmd> ...``."""
        parts = [f"cd {shlex.quote(self.workdir)}"]
        parts.extend(shlex.join(argv) for argv in self.commands)
        if self.script:
            parts.append(self.script)
        return " && ".join(parts)


def compose_command(base: List[str], workdir: str, *args: str) -> RemoteCommand:
    """One orchestrator invocation, e.g. ``docker-compose logs -f``."""
    return RemoteCommand.single(workdir, *base, *args)


def rebuild_service(base: List[str], workdir: str, service: str) -> RemoteCommand:
    """Build, stop, remove and restart one service."""
    return RemoteCommand(
        workdir=workdir,
        commands=[
            [*base, "build", service],
            [*base, "stop", service],
            [*base, "rm", "-f", service],
            [*base, "up", "-d", service],
        ],
    )
