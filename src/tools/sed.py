"""
Stream editor tool for in-place text substitution.

Devbox rewrites lines of the orchestration config with GNU sed. macOS ships a
BSD sed whose ``-i`` flag is incompatible, so there the GNU build is expected
under the name ``gsed``.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import Tool, ToolConfig, ToolError, ToolSchema, ValidationResult

DEFAULT_DELIMITER = "|"

_PATTERN_SPECIALS = "\\.[]*^$"
_REPLACEMENT_SPECIALS = "\\&"


def stream_editor_name(platform: Optional[str] = None) -> str:
    """Return the executable name of GNU sed on the given platform."""
    platform = platform or sys.platform
    return "gsed" if platform == "darwin" else "sed"


def escape_pattern(text: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Escape literal text for use inside a basic regular expression."""
    return "".join(
        f"\\{char}" if char in _PATTERN_SPECIALS or char == delimiter else char
        for char in text
    )


def escape_replacement(text: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Escape literal text for use as a substitution replacement."""
    return "".join(
        f"\\{char}" if char in _REPLACEMENT_SPECIALS or char == delimiter else char
        for char in text
    )


class StreamEditorTool(Tool):
    """
    GNU sed wrapper.

    Provides functionality for:
    - In-place ``s`` substitutions on a single file
    - Reporting the installed sed version
    """

    def __init__(self, config: ToolConfig):
        super().__init__(config)
        self._sed_version: Optional[str] = None

    async def get_schema(self) -> ToolSchema:
        """Return the stream editor tool schema."""
        return ToolSchema(
            name="sed",
            description="GNU stream editor for in-place text substitution",
            version=self.config.version,
            actions={
                "substitute": {
                    "description": "Replace every match of a pattern in a file",
                    "parameters": {
                        "path": {"type": "string", "required": True},
                        "pattern": {"type": "string", "required": True},
                        "replacement": {"type": "string", "required": True},
                        "delimiter": {"type": "string", "default": "|"},
                    },
                },
                "version": {
                    "description": "Report the installed sed version",
                    "parameters": {},
                },
            },
            dependencies=[self.executable],
        )

    async def _create_client(self) -> Any:
        """Create sed client (validate that a GNU sed is available)."""
        try:
            self._sed_version = await self._probe_version()
            return {"sed_available": True, "version": self._sed_version}

        except Exception as e:
            raise ToolError(f"Failed to initialize stream editor: {e}")

    async def _create_validator(self) -> Any:
        """Create parameter validator."""

        class StreamEditorValidator:
            def validate(self, action: str, params: Dict[str, Any]) -> ValidationResult:
                errors = []
                normalized_params = params.copy()

                if action == "substitute":
                    for name in ("path", "pattern"):
                        if not params.get(name):
                            errors.append(f"{name} is required for substitute")
                    if params.get("replacement") is None:
                        errors.append("replacement is required for substitute")

                    delimiter = params.get("delimiter") or DEFAULT_DELIMITER
                    if len(delimiter) != 1 or delimiter in "\\\n":
                        errors.append(f"Invalid delimiter: {delimiter!r}")
                    normalized_params["delimiter"] = delimiter

                    path = params.get("path")
                    if path and not Path(path).is_file():
                        errors.append(f"File not found: {path}")

                return ValidationResult(
                    valid=len(errors) == 0,
                    errors=errors,
                    normalized_params=normalized_params,
                )

        return StreamEditorValidator()

    async def _execute_action(
        self, action: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Execute stream editor action."""
        if action == "substitute":
            return await self._substitute(params)
        elif action == "version":
            result = await self._run_command([self.executable, "--version"])
            return {
                "returncode": result["returncode"],
                "version": result["stdout"].strip().splitlines()[0]
                if result["stdout"].strip()
                else "",
                "command": result["command"],
            }
        else:
            raise ToolError(f"Unknown action: {action}")

    async def _substitute(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Apply one substitution expression in place."""
        d = params["delimiter"]
        expression = f"s{d}{params['pattern']}{d}{params['replacement']}{d}"
        cmd = [self.executable, "-i", "-e", expression, params["path"]]

        result = await self._run_command(cmd)

        return {
            "path": params["path"],
            "expression": expression,
            "returncode": result["returncode"],
            "stderr": result["stderr"],
            "command": result["command"],
        }

    async def _get_supported_actions(self) -> List[str]:
        """Get list of supported actions."""
        return ["substitute", "version"]
