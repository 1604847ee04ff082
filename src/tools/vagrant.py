"""
Vagrant tool for virtual machine lifecycle operations.

This module provides a concrete implementation of the Tool interface for
Vagrant: booting, halting and destroying the environment VM, installing
plugins, and executing commands inside the VM over ``vagrant ssh``.
"""

from typing import Any, Dict, List, Optional

from .base import Tool, ToolConfig, ToolError, ToolSchema, ValidationResult

# Actions that operate on the VM of a specific environment directory.
VM_ACTIONS = ["up", "halt", "destroy", "ssh", "ssh_command"]


class VagrantTool(Tool):
    """
    Vagrant tool for managing the development VM.

    Provides functionality for:
    - VM lifecycle (up, halt, destroy)
    - Interactive shells and remote command execution
    - Plugin installation
    """

    def __init__(self, config: ToolConfig):
        super().__init__(config)
        self._vagrant_version: Optional[str] = None

    async def get_schema(self) -> ToolSchema:
        """Return the Vagrant tool schema."""
        return ToolSchema(
            name="vagrant",
            description="Vagrant virtual machine provisioning tool",
            version=self.config.version,
            actions={
                "up": {
                    "description": "Create and boot the VM",
                    "parameters": {"cwd": {"type": "string", "required": True}},
                },
                "halt": {
                    "description": "Gracefully stop the VM",
                    "parameters": {"cwd": {"type": "string", "required": True}},
                },
                "destroy": {
                    "description": "Stop and delete all traces of the VM",
                    "parameters": {"cwd": {"type": "string", "required": True}},
                },
                "ssh": {
                    "description": "Open an interactive shell inside the VM",
                    "parameters": {"cwd": {"type": "string", "required": True}},
                },
                "ssh_command": {
                    "description": "Execute a shell command string inside the VM",
                    "parameters": {
                        "cwd": {"type": "string", "required": True},
                        "command": {"type": "string", "required": True},
                        "capture": {"type": "boolean", "default": False},
                    },
                },
                "plugin_install": {
                    "description": "Install a Vagrant plugin",
                    "parameters": {
                        "plugin": {"type": "string", "required": True},
                        "cwd": {"type": "string"},
                    },
                },
                "version": {
                    "description": "Report the installed Vagrant version",
                    "parameters": {},
                },
            },
            dependencies=["vagrant", "VBoxManage"],
        )

    async def _create_client(self) -> Any:
        """Create Vagrant client (validate Vagrant availability)."""
        try:
            self._vagrant_version = await self._probe_version()

            return {"vagrant_available": True, "version": self._vagrant_version}

        except Exception as e:
            raise ToolError(f"Failed to initialize Vagrant client: {e}")

    async def _create_validator(self) -> Any:
        """Create parameter validator."""

        class VagrantValidator:
            def validate(self, action: str, params: Dict[str, Any]) -> ValidationResult:
                errors = []

                if action in VM_ACTIONS and not params.get("cwd"):
                    errors.append(f"cwd is required for {action}")

                if action == "ssh_command":
                    command = params.get("command")
                    if not isinstance(command, str) or not command.strip():
                        errors.append("command is required for ssh_command")

                if action == "plugin_install":
                    plugin = params.get("plugin")
                    if not plugin:
                        errors.append("plugin is required for plugin_install")
                    elif plugin.startswith("-"):
                        errors.append(f"Invalid plugin name: {plugin}")

                return ValidationResult(
                    valid=len(errors) == 0,
                    errors=errors,
                    normalized_params=params.copy(),
                )

        return VagrantValidator()

    async def _execute_action(
        self, action: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Execute Vagrant action."""
        if action == "up":
            return await self._vagrant(["up"], params["cwd"])
        elif action == "halt":
            return await self._vagrant(["halt"], params["cwd"])
        elif action == "destroy":
            return await self._vagrant(["destroy", "--force"], params["cwd"])
        elif action == "ssh":
            return await self._vagrant(["ssh"], params["cwd"])
        elif action == "ssh_command":
            return await self._vagrant(
                ["ssh", "--command", params["command"]],
                params["cwd"],
                capture=params.get("capture", False),
            )
        elif action == "plugin_install":
            return await self._vagrant(
                ["plugin", "install", params["plugin"]],
                params.get("cwd"),
                capture=True,
            )
        elif action == "version":
            return await self._vagrant(["--version"], None, capture=True)
        else:
            raise ToolError(f"Unknown action: {action}")

    async def _vagrant(
        self, args: List[str], cwd: Optional[str], capture: bool = False
    ) -> Dict[str, Any]:
        """Run a vagrant subcommand inside the environment directory."""
        self.logger.debug(f"Running vagrant {' '.join(args)} in {cwd}")
        return await self._run_command(
            [self.executable, *args], cwd=cwd, capture=capture
        )

    async def _get_supported_actions(self) -> List[str]:
        """Get list of supported actions."""
        return VM_ACTIONS + ["plugin_install", "version"]
