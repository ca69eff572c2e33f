# kubeSh/core/executor/command_registry.py
"""
Maps shell command names to the plugin handlers that implement them.
"""

from typing import Dict, Callable, Optional, List, Tuple
import logging

logger = logging.getLogger(__name__)

def _valid_command_name(name) -> bool:
    return isinstance(name, str) and bool(name) and not any(ch.isspace() for ch in name)

class CommandRegistry:
    """
    Command table built from the handlers of loaded plugins.

    When two plugins provide the same command, the one registered last wins,
    so user plugins can replace built-in commands.
    """

    def __init__(self):
        # command name -> (plugin name, handler), in registration order
        self._entries: Dict[str, Tuple[str, Callable]] = {}

    def register_handlers(self, plugin_name: str, handlers: Dict[str, Callable]) -> bool:
        """
        Add the commands of one plugin.

        Returns:
            False if any entry was rejected (bad name or non-callable handler);
            the valid entries are registered regardless
        """
        rejected = 0
        for command_name, handler in handlers.items():
            if not _valid_command_name(command_name) or not callable(handler):
                logger.error(f"Plugin {plugin_name} offered an invalid command {command_name!r}")
                rejected += 1
                continue

            previous = self._entries.get(command_name)
            if previous and previous[0] != plugin_name:
                logger.warning(f"Command '{command_name}' of {previous[0]} replaced by {plugin_name}")
            self._entries[command_name] = (plugin_name, handler)

        logger.debug(f"{plugin_name}: {len(handlers) - rejected} commands registered, {rejected} rejected")
        return rejected == 0

    def unregister_plugin_handlers(self, plugin_name: str):
        """Forget every command that `plugin_name` provides."""
        owned = [name for name, (owner, _) in self._entries.items() if owner == plugin_name]
        for command_name in owned:
            del self._entries[command_name]
        logger.debug(f"{plugin_name}: {len(owned)} commands removed")

    def get_handler(self, command_name: str) -> Optional[Callable]:
        entry = self._entries.get(command_name)
        return entry[1] if entry else None

    def get_handler_source(self, command_name: str) -> Optional[str]:
        """Name of the plugin that provides `command_name`."""
        entry = self._entries.get(command_name)
        return entry[0] if entry else None

    def get_handlers_by_plugin(self, plugin_name: str) -> Dict[str, Callable]:
        return {name: handler for name, (owner, handler) in self._entries.items() if owner == plugin_name}

    def list_supported_commands(self) -> List[str]:
        return list(self._entries)

    def has_handler(self, command_name: str) -> bool:
        return command_name in self._entries
