"""
Git tool for repository management operations.

This module provides a concrete implementation of the Tool interface for the
Git operations Devbox needs when populating a new environment.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import Tool, ToolConfig, ToolError, ToolSchema, ValidationResult


class GitTool(Tool):
    """
    Git tool for cloning the application repositories.

    Provides functionality for:
    - Cloning a remote repository into a named directory
    - Reporting the installed Git version
    """

    def __init__(self, config: ToolConfig):
        super().__init__(config)
        self._git_version: Optional[str] = None

    async def get_schema(self) -> ToolSchema:
        """Return the Git tool schema."""
        return ToolSchema(
            name="git",
            description="Git version control system tool",
            version=self.config.version,
            actions={
                "clone": {
                    "description": "Clone a remote repository",
                    "parameters": {
                        "url": {"type": "string", "required": True},
                        "destination": {"type": "string"},
                        "cwd": {"type": "string"},
                    },
                },
                "version": {
                    "description": "Report the installed Git version",
                    "parameters": {},
                },
            },
            dependencies=["git"],
        )

    async def _create_client(self) -> Any:
        """Create Git client (validate Git availability)."""
        try:
            self._git_version = await self._probe_version()

            return {"git_available": True, "version": self._git_version}

        except Exception as e:
            raise ToolError(f"Failed to initialize Git client: {e}")

    async def _create_validator(self) -> Any:
        """Create parameter validator."""

        class GitValidator:
            def validate(self, action: str, params: Dict[str, Any]) -> ValidationResult:
                errors = []
                warnings: List[str] = []
                normalized_params = params.copy()

                if action == "clone":
                    if not params.get("url"):
                        errors.append("url is required for clone")
                    elif not self._is_valid_git_url(params["url"]):
                        errors.append(f"Invalid Git URL format: {params['url']}")

                    destination = params.get("destination")
                    if destination and not self._is_valid_path(destination):
                        errors.append(f"Invalid path format: {destination}")

                return ValidationResult(
                    valid=len(errors) == 0,
                    errors=errors,
                    warnings=warnings,
                    normalized_params=normalized_params,
                )

            def _is_valid_path(self, path: str) -> bool:
                """Validate path format."""
                try:
                    Path(path)
                    return "\x00" not in path
                except (ValueError, OSError):
                    return False

            def _is_valid_git_url(self, url: str) -> bool:
                """Validate Git URL format."""
                git_patterns = [
                    r"^https?://.*\.git$",
                    r"^git@.*:.*\.git$",
                    r"^ssh://.*\.git$",
                    r"^file://.+",
                    r"^https?://github\.com/.*",
                    r"^https?://gitlab\.com/.*",
                    r"^https?://bitbucket\.org/.*",
                ]

                return any(re.match(pattern, url) for pattern in git_patterns)

        return GitValidator()

    async def _execute_action(
        self, action: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Execute Git action."""
        if action == "clone":
            return await self._git_clone(params)
        elif action == "version":
            return await self._git_version_info()
        else:
            raise ToolError(f"Unknown action: {action}")

    async def _git_clone(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Clone a Git repository."""
        cmd = [self.executable, "clone", params["url"]]

        if params.get("destination"):
            cmd.append(params["destination"])

        result = await self._run_command(cmd, cwd=params.get("cwd"))

        return {
            "url": params["url"],
            "destination": params.get("destination"),
            "returncode": result["returncode"],
            "stdout": result["stdout"],
            "stderr": result["stderr"],
            "command": result["command"],
        }

    async def _git_version_info(self) -> Dict[str, Any]:
        """Return the Git version string."""
        result = await self._run_command([self.executable, "--version"])
        return {
            "returncode": result["returncode"],
            "version": result["stdout"].strip(),
            "command": result["command"],
        }

    async def _get_supported_actions(self) -> List[str]:
        """Get list of supported actions."""
        return ["clone", "version"]
