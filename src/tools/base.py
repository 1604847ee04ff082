"""
Base tool interface and implementations.

This module defines the tool abstraction layer that lets Devbox drive
external programs (git, vagrant, sed) in a consistent manner: validate the
parameters, run exactly one process per action, and report a typed result.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToolStatus(Enum):
    """Tool operation status."""

    IDLE = "idle"
    VALIDATING = "validating"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"


class ToolResult(BaseModel):
    """Result of a tool operation."""

    success: bool
    tool_name: str
    action: str
    output: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    duration: Optional[float] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def returncode(self) -> int:
        """Exit code of the underlying process, 1 when none was reported.

        A process killed by signal N reports 128 + N, as shells do.
        """
        code = self.output.get("returncode")
        if code is None:
            return 0 if self.success else 1
        code = int(code)
        return 128 - code if code < 0 else code


class ValidationResult(BaseModel):
    """Result of parameter validation."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    normalized_params: Dict[str, Any] = Field(default_factory=dict)


class ToolConfig(BaseModel):
    """Configuration for a tool."""

    name: str
    version: str = "1.0.0"
    enabled: bool = True
    executable: Optional[str] = None
    environment: Dict[str, Any] = Field(default_factory=dict)


class ToolSchema(BaseModel):
    """Schema describing tool capabilities."""

    name: str
    description: str
    version: str
    actions: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    dependencies: List[str] = Field(default_factory=list)


class Tool(ABC):
    """
    Base tool interface for all external programs.

    Subclasses wrap a single executable. They declare their actions, supply a
    validator, and turn each action into one subprocess invocation through
    ``_run_command``.
    """

    def __init__(self, config: ToolConfig):
        self.config = config
        self.logger = logging.getLogger(f"{self.__class__.__name__}:{config.name}")
        self.status = ToolStatus.IDLE
        self._client: Optional[Any] = None
        self._validator: Optional[Any] = None

    @property
    def executable(self) -> str:
        """Name or path of the wrapped program."""
        return self.config.executable or self.config.name

    async def initialize(self) -> None:
        """Initialize the tool (probe the executable, build the validator)."""
        try:
            self._validator = await self._create_validator()
            self._client = await self._create_client()
            await self._validate_configuration()

        except Exception as e:
            self.logger.error(f"Failed to initialize tool {self.config.name}: {e}")
            raise ToolError(f"Initialization failed: {e}")

    async def execute(self, action: str, params: Dict[str, Any]) -> ToolResult:
        """
        Execute a tool action with the given parameters.

        Args:
            action: The action to execute
            params: Parameters for the action

        Returns:
            ToolResult: Result of the operation
        """
        start_time = datetime.utcnow()
        operation_id = f"{self.config.name}_{action}_{int(start_time.timestamp())}"

        try:
            self.status = ToolStatus.VALIDATING

            validation = await self.validate(action, params)
            if not validation.valid:
                self.logger.error(
                    "Tool parameter validation failed",
                    extra={
                        "tool_name": self.config.name,
                        "operation_id": operation_id,
                        "action": action,
                        "operation": "tool_execution",
                        "phase": "validation_error",
                        "validation_errors": validation.errors,
                        "validation_warnings": validation.warnings,
                    },
                )
                raise ToolValidationError(f"Validation failed: {validation.errors}")

            normalized_params = validation.normalized_params or params

            self.status = ToolStatus.EXECUTING
            result = await self._execute_action(action, normalized_params)

            duration = (datetime.utcnow() - start_time).total_seconds()
            returncode = result.get("returncode", 0)
            success = bool(result.get("success", returncode == 0))

            self.status = ToolStatus.COMPLETED if success else ToolStatus.FAILED
            if not success:
                self.logger.warning(
                    "Tool action reported failure",
                    extra={
                        "tool_name": self.config.name,
                        "operation_id": operation_id,
                        "action": action,
                        "operation": "tool_execution",
                        "phase": "process_exit",
                        "returncode": returncode,
                        "command": result.get("command"),
                    },
                )

            return ToolResult(
                success=success,
                tool_name=self.config.name,
                action=action,
                output=result,
                error=None if success else _describe_failure(result),
                duration=duration,
            )

        except Exception as e:
            self.status = ToolStatus.FAILED
            duration = (datetime.utcnow() - start_time).total_seconds()

            self.logger.error(
                "Tool action failed",
                extra={
                    "tool_name": self.config.name,
                    "operation_id": operation_id,
                    "action": action,
                    "operation": "tool_execution",
                    "phase": "error",
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                    "duration_seconds": duration,
                    "tool_status": self.status.value,
                },
            )

            return ToolResult(
                success=False,
                tool_name=self.config.name,
                action=action,
                error=str(e),
                duration=duration,
            )

    async def validate(self, action: str, params: Dict[str, Any]) -> ValidationResult:
        """
        Validate action parameters.

        Args:
            action: The action to validate
            params: Parameters to validate

        Returns:
            ValidationResult: Validation result
        """
        if action not in await self._get_supported_actions():
            return ValidationResult(
                valid=False, errors=[f"Unsupported action: {action}"]
            )

        if self._validator is None:
            self._validator = await self._create_validator()

        if not self._validator:
            return ValidationResult(valid=True, normalized_params=params)

        result = self._validator.validate(action, params)
        if hasattr(result, "__await__"):
            result = await result
        return result  # type: ignore[no-any-return]

    @abstractmethod
    async def get_schema(self) -> ToolSchema:
        """Return the tool's schema describing its capabilities."""

    @abstractmethod
    async def _create_client(self) -> Any:
        """Probe the underlying executable."""

    @abstractmethod
    async def _create_validator(self) -> Any:
        """Create and configure the parameter validator."""

    @abstractmethod
    async def _execute_action(
        self, action: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Execute the actual action (implemented by subclasses)."""

    @abstractmethod
    async def _get_supported_actions(self) -> List[str]:
        """Get list of supported actions."""

    async def _validate_configuration(self) -> None:
        """Validate tool configuration."""
        if not self.config.name:
            raise ToolError("Tool name is required")

    async def _probe_version(self) -> str:
        """Run ``<executable> --version`` and return its first output line."""
        result = await self._run_command([self.executable, "--version"])
        if result["returncode"] != 0:
            raise ToolError(f"{self.executable} is not available")
        lines = result["stdout"].strip().splitlines()
        return lines[0] if lines else ""

    async def _run_command(
        self,
        cmd: List[str],
        cwd: Optional[str] = None,
        capture: bool = True,
    ) -> Dict[str, Any]:
        """
        Run a command asynchronously without a shell.

        With ``capture`` the output is collected and decoded; otherwise the
        child inherits the terminal so interactive and streaming programs
        behave as if run directly.
        """
        try:
            if capture:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    cwd=cwd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
                stdout, stderr = await process.communicate()
            else:
                process = await asyncio.create_subprocess_exec(*cmd, cwd=cwd)
                await process.wait()
                stdout, stderr = b"", b""

            return {
                "returncode": process.returncode,
                "stdout": stdout.decode("utf-8", errors="replace"),
                "stderr": stderr.decode("utf-8", errors="replace"),
                "command": " ".join(cmd),
            }

        except OSError as e:
            self.logger.error(f"Command execution failed: {e}")
            return {
                "returncode": 127,
                "stdout": "",
                "stderr": str(e),
                "command": " ".join(cmd),
            }


def _describe_failure(result: Dict[str, Any]) -> str:
    if result.get("error"):
        return str(result["error"])
    stderr = (result.get("stderr") or "").strip()
    message = f"'{result.get('command', '')}' exited with {result.get('returncode')}"
    if stderr:
        message = f"{message}: {stderr.splitlines()[-1]}"
    return message


class ToolError(Exception):
    """Base exception for tool-related errors."""


class ToolValidationError(ToolError):
    """Exception raised during parameter validation."""
