# kubeSh/core/plugin_system/plugin_manager.py
"""
Plugin lifecycle for kubeSh.

Plugin classes are registered first (built-ins, modules named in the config,
files in the plugin directories) and loaded afterwards, dependencies before
dependents. Loaded plugins are handed the shell runtime. Completion providers
and help lines are collected from every loaded plugin on demand.
"""

import logging
from typing import Dict, List, Any, Optional, Tuple, Type

from .plugin_interface import ShellPlugin, PluginMetadata, CompletionProvider
from .plugin_loader import PluginLoader

logger = logging.getLogger(__name__)

class PluginDependencyError(Exception):
    """Raised when plugin dependencies are circular or name a plugin that is not registered."""
    pass

class PluginManager:
    """
    Owns every plugin of a shell session.

    Plugins are keyed by class name; `PluginMetadata.dependencies` refers to
    other plugins by that same name.
    """

    def __init__(self, runtime: Any = None):
        self.runtime = runtime
        self.loader = PluginLoader()
        self.plugin_classes: Dict[str, Type[ShellPlugin]] = {}
        self.plugins: Dict[str, ShellPlugin] = {}  # load order is preserved

        self._completion_providers: Optional[Dict[str, CompletionProvider]] = None
        self._help_entries: Optional[Dict[str, str]] = None

    # --- registration ---
    def register_plugin_class(self, plugin_class: Type[ShellPlugin]) -> bool:
        """
        Make a plugin class available for loading.

        Returns:
            False if the class does not implement the plugin interface
        """
        if not self.loader.validate_plugin_class(plugin_class):
            logger.error(f"Rejected plugin class {getattr(plugin_class, '__name__', plugin_class)!r}")
            return False

        name = plugin_class.__name__
        if name in self.plugin_classes and self.plugin_classes[name] is not plugin_class:
            logger.warning(f"Plugin class {name} registered twice, keeping the later one")
        self.plugin_classes[name] = plugin_class
        logger.info(f"Registered plugin class: {name}")
        return True

    def _register_all(self, plugin_classes: List[Type[ShellPlugin]]) -> int:
        return sum(1 for plugin_class in plugin_classes if self.register_plugin_class(plugin_class))

    def discover_plugins(self, plugin_directories: List[str]) -> int:
        """
        Register the plugin classes found in `.py` files of the given directories.

        Returns:
            Number of classes registered
        """
        count = 0
        for directory in plugin_directories:
            count += self._register_all(self.loader.discover_plugins_in_directory(directory))
        return count

    def load_plugin_from_module(self, module_name: str) -> int:
        """
        Register the plugin classes defined in an importable module.

        An import failure is logged and counts as zero plugins.
        """
        try:
            plugin_classes = self.loader.load_plugin_from_module(module_name)
        except ImportError as e:
            logger.error(f"Could not import plugin module {module_name}: {e}")
            return 0
        return self._register_all(plugin_classes)

    # --- loading ---
    def load_plugin(self, plugin_name: str) -> bool:
        """
        Instantiate and initialize one registered plugin.

        Its dependencies must already be loaded.
        """
        if plugin_name in self.plugins:
            logger.debug(f"Plugin {plugin_name} already loaded")
            return True

        plugin_class = self.plugin_classes.get(plugin_name)
        if plugin_class is None:
            logger.error(f"No registered plugin named {plugin_name}")
            return False

        try:
            plugin = plugin_class()
            missing = [dep for dep in plugin.metadata.dependencies if dep not in self.plugins]
            if missing:
                logger.error(f"Plugin {plugin_name} needs {', '.join(missing)} loaded first")
                return False
            if not plugin.initialize(self.runtime):
                logger.error(f"Plugin {plugin_name} failed to initialize")
                return False
        except Exception as e:
            logger.error(f"Error loading plugin {plugin_name}: {e}")
            return False

        self.plugins[plugin_name] = plugin
        self._invalidate()
        logger.info(f"Loaded plugin {plugin_name} {plugin.metadata.version}")
        return True

    def load_all_plugins(self) -> Tuple[int, int]:
        """
        Load every registered plugin, dependencies first.

        Returns:
            Tuple of (loaded, failed)

        Raises:
            PluginDependencyError: If the dependency graph has a cycle or a missing plugin
        """
        loaded = failed = 0
        for plugin_name in self._resolve_load_order():
            if self.load_plugin(plugin_name):
                loaded += 1
            else:
                failed += 1
        return loaded, failed

    def _resolve_load_order(self) -> List[str]:
        """Depth-first topological order over the registered plugin classes."""
        requires = {
            name: self.loader.get_plugin_dependencies(plugin_class)
            for name, plugin_class in self.plugin_classes.items()
        }
        order: List[str] = []
        in_progress = set()

        def visit(name: str, chain: List[str]):
            if name in order:
                return
            if name in in_progress:
                cycle = " -> ".join(chain + [name])
                raise PluginDependencyError(f"Circular dependency detected: {cycle}")
            in_progress.add(name)
            for dependency in requires[name]:
                if dependency not in requires:
                    raise PluginDependencyError(f"Plugin {name} depends on {dependency}, which is not registered")
                visit(dependency, chain + [name])
            in_progress.discard(name)
            order.append(name)

        for name in requires:
            visit(name, [])
        return order

    def unload_plugin(self, plugin_name: str) -> bool:
        """
        Clean up and drop a loaded plugin.

        Refuses while another loaded plugin depends on it.
        """
        plugin = self.plugins.get(plugin_name)
        if plugin is None:
            return True

        dependents = [name for name, other in self.plugins.items()
                      if plugin_name in other.metadata.dependencies]
        if dependents:
            logger.error(f"Cannot unload {plugin_name}, still required by {', '.join(dependents)}")
            return False

        if not plugin.cleanup():
            logger.warning(f"Plugin {plugin_name} did not clean up cleanly")
        del self.plugins[plugin_name]
        self._invalidate()
        logger.info(f"Unloaded plugin {plugin_name}")
        return True

    # --- aggregated views ---
    def _invalidate(self):
        self._completion_providers = None
        self._help_entries = None

    def _collect(self):
        providers: Dict[str, CompletionProvider] = {}
        help_entries: Dict[str, str] = {}
        for plugin in self.plugins.values():
            providers.update(plugin.get_completion_providers())
            help_entries.update(plugin.get_help())
        self._completion_providers = providers
        self._help_entries = help_entries

    def get_completion_provider(self, command_name: str) -> Optional[CompletionProvider]:
        if self._completion_providers is None:
            self._collect()
        return self._completion_providers.get(command_name)

    def get_help_entries(self) -> Dict[str, str]:
        if self._help_entries is None:
            self._collect()
        return dict(self._help_entries)

    def get_loaded_plugins(self) -> List[str]:
        return list(self.plugins)

    def get_plugin_info(self, plugin_name: str) -> Optional[PluginMetadata]:
        plugin = self.plugins.get(plugin_name)
        return plugin.metadata if plugin else None

    def is_plugin_loaded(self, plugin_name: str) -> bool:
        return plugin_name in self.plugins
