"""
Devbox - Local Development Environment Manager.

Provisions and manages a Vagrant virtual machine that runs a multi-repository
containerized application, delegating every action to git, Vagrant and
docker-compose.
"""

__version__ = "0.1.0"
__author__ = "Parthiv Naresh"
__email__ = "parthivnaresh@gmail.com"
