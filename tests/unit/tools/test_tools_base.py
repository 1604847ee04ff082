"""
Tests for the base tool interface.
"""

from typing import Any, Dict, List
from unittest.mock import patch

import pytest

from src.tools.base import (
    Tool,
    ToolConfig,
    ToolError,
    ToolResult,
    ToolSchema,
    ToolStatus,
    ValidationResult,
)


class MockTool(Tool):
    """Mock tool for testing."""

    def __init__(self, config: ToolConfig, fail_actions: List[str] = None):
        super().__init__(config)
        self.fail_actions = fail_actions or []
        self.execution_count = 0
        self.last_action = None
        self.last_params = None

    async def get_schema(self) -> ToolSchema:
        return ToolSchema(
            name=self.config.name,
            description="Mock tool for testing",
            version=self.config.version,
            actions={
                "start": {"description": "Start something"},
                "stop": {"description": "Stop something"},
            },
        )

    async def _create_client(self) -> Any:
        return {"version": await self._probe_version()}

    async def _create_validator(self) -> Any:
        class MockValidator:
            def validate(self, action, params):
                if params.get("invalid"):
                    return ValidationResult(valid=False, errors=["invalid params"])
                return ValidationResult(valid=True, normalized_params=params)

        return MockValidator()

    async def _execute_action(
        self, action: str, params: Dict[str, Any]
    ) -> Dict[str, Any]:
        self.execution_count += 1
        self.last_action = action
        self.last_params = params

        if action in self.fail_actions:
            raise Exception(f"Mock failure for action: {action}")

        return {"returncode": params.get("returncode", 0), "command": action}

    async def _get_supported_actions(self) -> List[str]:
        return ["start", "stop"]


class TestToolModels:
    """Test tool data models."""

    def test_tool_result_returncode_from_output(self):
        result = ToolResult(
            success=False, tool_name="t", action="a", output={"returncode": 3}
        )
        assert result.returncode == 3

    def test_tool_result_returncode_defaults(self):
        assert ToolResult(success=True, tool_name="t", action="a").returncode == 0
        assert ToolResult(success=False, tool_name="t", action="a").returncode == 1

    def test_tool_result_returncode_for_signal(self):
        result = ToolResult(
            success=False, tool_name="t", action="a", output={"returncode": -15}
        )
        assert result.returncode == 143

        result = ToolResult(
            success=False, tool_name="t", action="a", output={"returncode": -2}
        )
        assert result.returncode == 130

    def test_executable_defaults_to_name(self):
        tool = MockTool(ToolConfig(name="mock"))
        assert tool.executable == "mock"

        tool = MockTool(ToolConfig(name="sed", executable="gsed"))
        assert tool.executable == "gsed"


class TestToolExecution:
    """Test the execute pipeline."""

    @pytest.fixture
    def tool(self):
        return MockTool(ToolConfig(name="mock"), fail_actions=["stop"])

    @pytest.mark.asyncio
    async def test_successful_execution(self, tool):
        result = await tool.execute("start", {"flag": True})

        assert result.success is True
        assert result.tool_name == "mock"
        assert result.action == "start"
        assert result.error is None
        assert result.duration is not None
        assert tool.last_params == {"flag": True}
        assert tool.status == ToolStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_failure(self, tool):
        result = await tool.execute("start", {"returncode": 2})

        assert result.success is False
        assert result.returncode == 2
        assert "exited with 2" in result.error
        assert tool.status == ToolStatus.FAILED

    @pytest.mark.asyncio
    async def test_unsupported_action(self, tool):
        result = await tool.execute("explode", {})

        assert result.success is False
        assert "Unsupported action: explode" in result.error
        assert tool.execution_count == 0

    @pytest.mark.asyncio
    async def test_validation_failure_skips_execution(self, tool):
        result = await tool.execute("start", {"invalid": True})

        assert result.success is False
        assert "invalid params" in result.error
        assert tool.execution_count == 0

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self, tool):
        result = await tool.execute("stop", {})

        assert result.success is False
        assert "Mock failure for action: stop" in result.error
        assert tool.status == ToolStatus.FAILED
        assert tool.execution_count == 1

    @pytest.mark.asyncio
    async def test_actions_are_not_retried(self, tool):
        await tool.execute("stop", {})
        assert tool.execution_count == 1


class TestToolInitialization:
    """Test tool initialization."""

    @pytest.mark.asyncio
    async def test_initialize_probes_version(self):
        tool = MockTool(ToolConfig(name="mock"))
        with patch.object(tool, "_run_command") as mock_run:
            mock_run.return_value = {
                "returncode": 0,
                "stdout": "mock version 1.2.3\nextra line\n",
                "stderr": "",
            }
            await tool.initialize()

        assert tool._client == {"version": "mock version 1.2.3"}
        mock_run.assert_called_once_with(["mock", "--version"])

    @pytest.mark.asyncio
    async def test_initialize_failure_raises_tool_error(self):
        tool = MockTool(ToolConfig(name="mock"))
        with patch.object(tool, "_run_command") as mock_run:
            mock_run.return_value = {"returncode": 127, "stdout": "", "stderr": ""}

            with pytest.raises(ToolError, match="Initialization failed"):
                await tool.initialize()


class TestRunCommand:
    """Test subprocess execution."""

    @pytest.mark.asyncio
    async def test_captures_output(self, tmp_path):
        tool = MockTool(ToolConfig(name="mock"))
        (tmp_path / "marker.txt").write_text("x")
        result = await tool._run_command(
            ["sh", "-c", "ls; echo oops >&2"], cwd=str(tmp_path)
        )

        assert result["returncode"] == 0
        assert result["stdout"] == "marker.txt\n"
        assert result["stderr"] == "oops\n"
        assert result["command"] == "sh -c ls; echo oops >&2"

    @pytest.mark.asyncio
    async def test_missing_program(self):
        tool = MockTool(ToolConfig(name="mock"))
        result = await tool._run_command(["definitely-not-a-real-program-xyz"])

        assert result["returncode"] == 127
        assert result["stdout"] == ""
        assert result["stderr"]

    @pytest.mark.asyncio
    async def test_exit_status_propagates(self):
        tool = MockTool(ToolConfig(name="mock"))
        result = await tool._run_command(["sh", "-c", "exit 7"], capture=False)

        assert result["returncode"] == 7
        assert result["stdout"] == ""
