"""
Development environment workflows.

``DevEnvironment`` composes the git, Vagrant, sed and file system tools into
the operations exposed on the command line. Every operation blocks on the
external program it delegates to and returns that program's exit code.
"""

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from ..config import AppSettings, get_settings
from ..logging_utils import (
    ExecutionCompleted,
    ExecutionStarted,
    LogManager,
    ProgressTracker,
)
from ..tools import (
    FileSystemTool,
    GitTool,
    StreamEditorTool,
    Tool,
    ToolConfig,
    ToolResult,
    VagrantTool,
)
from ..utils.directories import get_install_directory
from .compose import build_substitution, unpatched_images
from .errors import DevboxError, DirectoryNotEmptyError, InitializationError
from .manifest import REPOSITORY_MANIFEST, ManifestEntry, source_built_entries
from .remote import RemoteCommand, compose_command, rebuild_service


def default_template_directory() -> Path:
    """Bundled templates shipped inside the installed package."""
    return get_install_directory() / "templates"


class DevEnvironment:
    """Operations on one Vagrant-based development environment."""

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        log_manager: Optional[LogManager] = None,
        progress_tracker: Optional[ProgressTracker] = None,
        stream_editor: str = "sed",
        manifest: Sequence[ManifestEntry] = REPOSITORY_MANIFEST,
        template_dir: Optional[Path] = None,
    ):
        self.settings = settings or get_settings()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.correlation_id = str(uuid.uuid4())

        self.manifest = tuple(manifest)
        self.template_dir = template_dir or default_template_directory()

        self.git = GitTool(ToolConfig(name="git"))
        self.vagrant = VagrantTool(ToolConfig(name="vagrant"))
        self.sed = StreamEditorTool(ToolConfig(name="sed", executable=stream_editor))
        self.filesystem = FileSystemTool(ToolConfig(name="filesystem"))

        self.log_manager = log_manager or LogManager(self.settings.log_dir)
        self.progress_tracker = progress_tracker or ProgressTracker(self.log_manager)

    # Initialization

    async def initialize_environment(self, target: Path) -> int:
        """
        Populate an empty directory with a new environment.

        Copies the templates, installs the Vagrant plugins, clones every
        manifest repository, points non-primary images at their clones and
        finally writes the marker. Nothing is written if ``target`` is not
        empty; a failing step stops the sequence before the marker exists.

        Raises:
            DirectoryNotEmptyError: ``target`` already has entries.
            InitializationError: A step failed.
        """
        target = Path(target)
        listing = await self.filesystem.execute(
            "list_directory", {"path": str(target), "include_hidden": True}
        )
        if not listing.success:
            raise InitializationError(f"Cannot inspect {target}: {listing.error}")
        if listing.output["entries"]:
            raise DirectoryNotEmptyError(
                f"{target} is not empty ({listing.output['count']} entries); "
                "run 'devbox init' in an empty directory"
            )

        return await self._record(
            "init", target, lambda eid: self._init_steps(target, eid)
        )

    async def _init_steps(self, target: Path, execution_id: str) -> int:
        substitutions = [
            build_substitution(entry)
            for entry in source_built_entries(self.manifest)
        ]
        total = (
            len(self.settings.template_files)
            + len(self.settings.vagrant_plugins)
            + len(self.manifest)
            + len(substitutions)
            + 1
        )
        self.progress_tracker.start_execution_progress(
            total, "📦 Creating environment"
        )

        try:
            for name in self.settings.template_files:
                await self._step(
                    execution_id,
                    f"copy_{name}",
                    f"📄 Copied {name}",
                    self.filesystem,
                    "copy_file",
                    {
                        "source": str(self.template_dir / name),
                        "destination": str(target / name),
                    },
                )

            for plugin in self.settings.vagrant_plugins:
                await self._step(
                    execution_id,
                    f"plugin_{plugin}",
                    f"🔌 Installed {plugin}",
                    self.vagrant,
                    "plugin_install",
                    {"plugin": plugin, "cwd": str(target)},
                )

            for entry in self.manifest:
                await self._step(
                    execution_id,
                    f"clone_{entry.clone_dir}",
                    f"📥 Cloned {entry.clone_dir}",
                    self.git,
                    "clone",
                    {
                        "url": entry.repository,
                        "destination": entry.clone_dir,
                        "cwd": str(target),
                    },
                )

            compose_path = target / self.settings.compose_file
            for substitution in substitutions:
                await self._step(
                    execution_id,
                    f"patch_{substitution.image}",
                    f"🔧 Building {substitution.image} from source",
                    self.sed,
                    "substitute",
                    {
                        "path": str(compose_path),
                        "pattern": substitution.pattern,
                        "replacement": substitution.replacement,
                        "delimiter": substitution.delimiter,
                    },
                )

            await self._check_patched(compose_path, substitutions)

            await self._step(
                execution_id,
                "marker",
                "✅ Environment ready",
                self.filesystem,
                "touch_file",
                {"path": str(target / self.settings.marker_name)},
            )
        finally:
            self.progress_tracker.complete_execution_progress()

        return 0

    async def _check_patched(self, compose_path: Path, substitutions) -> None:
        """Warn about images the textual substitution did not reach."""
        if not substitutions:
            return
        result = await self.filesystem.execute("read_file", {"path": str(compose_path)})
        if not result.success:
            raise InitializationError(f"Cannot read {compose_path}: {result.error}")

        for image in unpatched_images(result.output["content"], substitutions):
            self.logger.warning(
                "Image reference not found in orchestration config",
                extra={
                    "correlation_id": self.correlation_id,
                    "image": image,
                    "config_file": str(compose_path),
                },
            )

    async def _step(
        self,
        execution_id: str,
        step_id: str,
        step_name: str,
        tool: Tool,
        action: str,
        params: Dict[str, Any],
    ) -> ToolResult:
        async with self.progress_tracker.track_step_execution(
            step_id,
            step_name,
            self.correlation_id,
            execution_id,
            tool=tool.config.name,
            action=action,
        ) as step:
            result = await tool.execute(action, params)
            if not result.success:
                step.fail(result.error or "unknown error")

        if not result.success:
            raise InitializationError(f"{step_id} failed: {result.error}")
        return result

    # VM lifecycle

    async def boot(self, root: Path) -> int:
        """Start the VM; destroy it again if startup fails."""

        async def _boot(execution_id: str) -> int:
            result = await self.vagrant.execute("up", {"cwd": str(root)})
            if result.success:
                return 0

            self.logger.error(
                "VM startup failed, destroying VM",
                extra={
                    "correlation_id": self.correlation_id,
                    "execution_id": execution_id,
                    "returncode": result.returncode,
                },
            )
            await self.vagrant.execute("destroy", {"cwd": str(root)})
            return 1

        return await self._record("boot", root, _boot)

    async def halt(self, root: Path) -> int:
        return await self._record(
            "halt", root, lambda _: self._vagrant_exit("halt", root)
        )

    async def destroy(self, root: Path) -> int:
        return await self._record(
            "destroy", root, lambda _: self._vagrant_exit("destroy", root)
        )

    async def ssh(self, root: Path) -> int:
        return await self._record(
            "ssh", root, lambda _: self._vagrant_exit("ssh", root)
        )

    # In-VM orchestration

    async def containers(self, root: Path) -> int:
        """List the services defined in the orchestration config."""
        command = compose_command(
            self.settings.compose_command,
            self.settings.vm_workdir,
            "config",
            "--services",
        )
        return await self._record(
            "containers", root, lambda _: self._remote(root, command)
        )

    async def rebuild(self, root: Path, service: str) -> int:
        """Rebuild and restart one service."""
        if not service or not service.strip():
            raise DevboxError("A service name is required to rebuild")
        command = rebuild_service(
            self.settings.compose_command, self.settings.vm_workdir, service
        )
        return await self._record(
            "rebuild", root, lambda _: self._remote(root, command)
        )

    async def logs(self, root: Path) -> int:
        """Follow the orchestrator's logs."""
        command = compose_command(
            self.settings.compose_command, self.settings.vm_workdir, "logs", "-f"
        )
        return await self._record("logs", root, lambda _: self._remote(root, command))

    async def run(self, root: Path, script: str) -> int:
        """Execute an arbitrary command string inside the VM."""
        if not script or not script.strip():
            raise DevboxError("A command is required to run")
        command = RemoteCommand.shell(self.settings.vm_workdir, script)
        return await self._record("run", root, lambda _: self._remote(root, command))

    async def _vagrant_exit(self, action: str, root: Path) -> int:
        result = await self.vagrant.execute(action, {"cwd": str(root)})
        return result.returncode

    async def _remote(self, root: Path, command: RemoteCommand) -> int:
        result = await self.vagrant.execute(
            "ssh_command", {"cwd": str(root), "command": command.render()}
        )
        return result.returncode

    # Status

    async def get_tools_status(self) -> Dict[str, Dict[str, Any]]:
        """Availability and version of each external tool."""
        status: Dict[str, Dict[str, Any]] = {}
        for tool in (self.git, self.vagrant, self.sed):
            schema = await tool.get_schema()
            try:
                await tool.initialize()
                client = tool._client or {}
                status[tool.config.name] = {
                    "status": "available",
                    "description": schema.description,
                    "version": client.get("version", "Unknown"),
                    "actions": list(schema.actions),
                }
            except Exception as e:
                status[tool.config.name] = {"status": "unavailable", "error": str(e)}
        return status

    async def _record(
        self,
        operation: str,
        root: Path,
        action: Callable[[str], Awaitable[int]],
    ) -> int:
        """Run ``action`` between started/completed events."""
        execution_id = str(uuid.uuid4())
        start_time = datetime.utcnow()

        await self.log_manager.emit_event(
            ExecutionStarted(
                correlation_id=self.correlation_id,
                execution_id=execution_id,
                operation=operation,
                environment_root=str(root),
            )
        )

        exit_code = 1
        try:
            exit_code = await action(execution_id)
            return exit_code
        finally:
            duration = (datetime.utcnow() - start_time).total_seconds()
            await self.log_manager.emit_event(
                ExecutionCompleted(
                    correlation_id=self.correlation_id,
                    execution_id=execution_id,
                    operation=operation,
                    success=exit_code == 0,
                    exit_code=exit_code,
                    duration_seconds=duration,
                )
            )
            self.logger.info(
                f"{operation} finished with exit code {exit_code}",
                extra={
                    "correlation_id": self.correlation_id,
                    "execution_id": execution_id,
                    "operation": operation,
                    "exit_code": exit_code,
                    "duration_seconds": duration,
                },
            )
