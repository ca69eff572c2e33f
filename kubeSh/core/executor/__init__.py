# kubeSh/core/executor/__init__.py
"""Command table and line execution for the kubeSh prompt."""

from .command_executor import CommandExecutor
from .command_registry import CommandRegistry

__all__ = ['CommandExecutor', 'CommandRegistry']
