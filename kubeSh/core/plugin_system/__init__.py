# kubeSh/core/plugin_system/__init__.py
"""Plugin base class, loader and lifecycle manager."""

from .plugin_interface import ShellPlugin, PluginMetadata
from .plugin_manager import PluginManager, PluginDependencyError
from .plugin_loader import PluginLoader

__all__ = [
    'ShellPlugin',
    'PluginMetadata',
    'PluginManager',
    'PluginDependencyError',
    'PluginLoader'
]
