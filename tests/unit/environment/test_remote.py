"""
Tests for in-VM command requests.
"""

import pytest
from pydantic import ValidationError

from src.environment.remote import RemoteCommand, compose_command, rebuild_service


class TestRemoteCommand:
    """Test command rendering."""

    def test_single_command(self):
        command = RemoteCommand.single("/vagrant", "docker-compose", "logs", "-f")
        assert command.render() == "cd /vagrant && docker-compose logs -f"

    def test_tokens_are_quoted(self):
        command = RemoteCommand.single("/srv/my app", "echo", "a b", "$HOME;rm")
        assert command.render() == "cd '/srv/my app' && echo 'a b' '$HOME;rm'"

    def test_shell_passes_script_verbatim(self):
        command = RemoteCommand.shell("/vagrant", "ls -la | grep api")

        assert command.commands == []
        assert command.render() == "cd /vagrant && ls -la | grep api"

    def test_shell_script_runs_in_login_shell(self):
        script = "source ~/.profile && echo $HOSTNAME"
        command = RemoteCommand.shell("/vagrant", script)

        assert command.render() == f"cd /vagrant && {script}"
        assert "sh -c" not in command.render()

    def test_requires_a_command(self):
        with pytest.raises(ValidationError):
            RemoteCommand(workdir="/vagrant", commands=[])
        with pytest.raises(ValidationError):
            RemoteCommand(workdir="/vagrant", commands=[[]])
        with pytest.raises(ValidationError):
            RemoteCommand(workdir="/vagrant", script="   ")


class TestComposeCommands:
    """Test orchestrator command builders."""

    def test_compose_command(self):
        command = compose_command(
            ["docker-compose"], "/vagrant", "config", "--services"
        )
        assert command.render() == "cd /vagrant && docker-compose config --services"

    def test_compose_plugin_form(self):
        command = compose_command(["docker", "compose"], "/vagrant", "logs", "-f")
        assert command.render() == "cd /vagrant && docker compose logs -f"

    def test_rebuild_sequence(self):
        command = rebuild_service(["docker-compose"], "/vagrant", "api")

        assert command.render() == (
            "cd /vagrant"
            " && docker-compose build api"
            " && docker-compose stop api"
            " && docker-compose rm -f api"
            " && docker-compose up -d api"
        )

    def test_rebuild_quotes_service_name(self):
        command = rebuild_service(["docker-compose"], "/vagrant", "api; reboot")
        assert "'api; reboot'" in command.render()
        assert "&& reboot" not in command.render()
