# kubeSh/core/plugin_system/plugin_loader.py
"""
Finds ShellPlugin subclasses in Python files and importable modules.

User extensions live as loose `.py` files in the plugin directories; the
built-in plugins and any package named under `plugin_modules` are imported
by module name.
"""

import importlib
import importlib.util
import inspect
from pathlib import Path
from typing import List, Type, Dict, Any
import logging

from .plugin_interface import ShellPlugin

logger = logging.getLogger(__name__)

USER_MODULE_PREFIX = "kubesh_user_plugin_"

def _plugin_classes_in(module: Any) -> List[Type[ShellPlugin]]:
    """Concrete ShellPlugin subclasses defined in `module` itself, not imported into it."""
    found = []
    for _, obj in inspect.getmembers(module, inspect.isclass):
        if obj is ShellPlugin or not issubclass(obj, ShellPlugin):
            continue
        if inspect.isabstract(obj) or obj.__module__ != module.__name__:
            continue
        logger.debug(f"Found plugin class {obj.__name__} in {module.__name__}")
        found.append(obj)
    return found

class PluginLoader:
    """Imports plugin sources and checks the classes they define."""

    def __init__(self):
        # Imported modules are kept alive for as long as their plugins
        self.loaded_modules: Dict[str, Any] = {}

    def discover_plugins_in_directory(self, directory: str) -> List[Type[ShellPlugin]]:
        """
        Collect plugin classes from every `*.py` file in `directory`.

        Files whose import fails are logged and skipped. A missing directory
        yields an empty list.
        """
        root = Path(directory).expanduser()
        if not root.is_dir():
            logger.debug(f"Skipping plugin directory {root}: not a directory")
            return []

        found: List[Type[ShellPlugin]] = []
        for source in sorted(root.glob("*.py")):
            if source.name.startswith("__"):
                continue
            try:
                found += self.load_plugin_from_file(str(source))
            except (ImportError, FileNotFoundError) as e:
                logger.error(f"Skipping plugin file {source}: {e}")
        return found

    def load_plugin_from_file(self, file_path: str) -> List[Type[ShellPlugin]]:
        """
        Execute a standalone Python file and return the plugin classes it defines.

        Raises:
            FileNotFoundError: If the file does not exist
            ImportError: If the file cannot be imported or raises while executing
        """
        source = Path(file_path)
        if not source.exists():
            raise FileNotFoundError(f"Plugin file {file_path} not found")

        module_name = USER_MODULE_PREFIX + source.stem
        module_spec = importlib.util.spec_from_file_location(module_name, source)
        if module_spec is None or module_spec.loader is None:
            raise ImportError(f"Cannot import {file_path} as a Python module")

        module = importlib.util.module_from_spec(module_spec)
        try:
            module_spec.loader.exec_module(module)
        except Exception as e:
            raise ImportError(f"Error while executing {file_path}: {e}") from e

        self.loaded_modules[module_name] = module
        return _plugin_classes_in(module)

    def load_plugin_from_module(self, module_name: str) -> List[Type[ShellPlugin]]:
        """
        Import `module_name` (for example `kubeSh.plugins.core.context_plugin`)
        and return the plugin classes it defines.

        Raises:
            ImportError: If the module cannot be imported
        """
        module = importlib.import_module(module_name)
        self.loaded_modules[module_name] = module
        return _plugin_classes_in(module)

    def validate_plugin_class(self, plugin_class: Type[ShellPlugin]) -> bool:
        """
        Check that `plugin_class` is a concrete ShellPlugin that can be
        instantiated, has a named metadata block and maps command names to
        callables.
        """
        if not inspect.isclass(plugin_class) or not issubclass(plugin_class, ShellPlugin):
            logger.error(f"{plugin_class!r} does not derive from ShellPlugin")
            return False
        class_name = plugin_class.__name__
        if inspect.isabstract(plugin_class):
            logger.error(f"{class_name} leaves abstract methods unimplemented")
            return False

        try:
            instance = plugin_class()
            metadata = instance.metadata
            handlers = instance.get_command_handlers()
        except Exception as e:
            logger.error(f"{class_name} could not be instantiated: {e}")
            return False

        if not metadata or not metadata.name:
            logger.error(f"{class_name} declares no plugin name")
            return False

        bad = [name for name, handler in handlers.items()
               if not isinstance(name, str) or not callable(handler)]
        if bad:
            logger.error(f"{class_name} has invalid command handlers: {bad!r}")
            return False
        return True

    def get_plugin_dependencies(self, plugin_class: Type[ShellPlugin]) -> List[str]:
        """Names of the plugins `plugin_class` requires, or [] if it cannot be instantiated."""
        try:
            return list(plugin_class().metadata.dependencies)
        except Exception as e:
            logger.error(f"Could not read dependencies of {plugin_class.__name__}: {e}")
            return []
