# kubeSh/core/executor/command_executor.py
"""
Runs lines typed at the kubeSh prompt.

A line is parsed into `;`-separated commands; each command is looked up in a
registry built from the loaded plugins and its handler is called with the
arguments and the session context. Unknown command names get fuzzy
suggestions.
"""

from typing import Dict, Any, List, Tuple
import logging

from .command_registry import CommandRegistry
from kubeSh.core.plugin_system.plugin_manager import PluginManager
from kubeSh.core.parser import CommandLineParser, ParsedCommand
from kubeSh.core.context import KubeShContext
from kubeSh.core.kubectl import KubectlError
from kubeSh.core.fuzzy import match

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 5

class CommandExecutor:
    """Dispatches parsed commands to plugin handlers."""

    def __init__(self, plugin_manager: PluginManager):
        self.plugin_manager = plugin_manager
        self.parser = CommandLineParser()
        self.command_registry = CommandRegistry()
        self._registered_plugins: Tuple[str, ...] = ()
        self._refresh_registry()

    def _refresh_registry(self):
        """Rebuild the command table when the set of loaded plugins has changed."""
        loaded = tuple(self.plugin_manager.get_loaded_plugins())
        if loaded == self._registered_plugins:
            return

        registry = CommandRegistry()
        for plugin_name in loaded:
            handlers = self.plugin_manager.plugins[plugin_name].get_command_handlers()
            if not registry.register_handlers(plugin_name, handlers):
                logger.error(f"Plugin {plugin_name} has commands that could not be registered")
        self.command_registry = registry
        self._registered_plugins = loaded
        logger.info(f"Command table holds {len(registry.list_supported_commands())} commands "
                    f"from {len(loaded)} plugins")

    def execute_command(self, command_string: str, context: KubeShContext) -> bool:
        """
        Run every command on an input line, in order.

        A failing command is reported and the remaining commands still run.

        Returns:
            True if the line was empty or every command succeeded
        """
        if not command_string or not command_string.strip():
            return True

        self._refresh_registry()

        parsed_result = self.parser.parse(command_string)
        if "error" in parsed_result:
            label = "Invalid command format" if parsed_result.get("type") == "lex_error" else "Syntax error"
            print(f"❌ {label}: {parsed_result['error']}")
            return False

        results = [self._run(command, context) for command in parsed_result["commands"]]
        return all(results)

    def _run(self, command: ParsedCommand, context: KubeShContext) -> bool:
        handler = self.command_registry.get_handler(command.name)
        if handler is None:
            print(f"❌ Unknown command: {command.name}")
            self._suggest(command.name)
            return False

        logger.debug(f"Running '{command}' via {self.command_registry.get_handler_source(command.name)}")
        try:
            handler(command.args, context)
        except KubectlError as e:
            print(f"❌ {e}")
            return False
        except Exception as e:
            logger.error(f"Handler for {command.name} raised: {e}")
            print(f"❌ Error executing '{command.name}': {e}")
            return False
        return True

    def _suggest(self, command_name: str):
        candidates = match(command_name, self.command_registry.list_supported_commands())
        if not candidates:
            return
        print("💡 Did you mean one of these?")
        for candidate in candidates[:MAX_SUGGESTIONS]:
            print(f"   {candidate}")

    def get_supported_commands(self) -> List[str]:
        """Sorted names of all plugin commands."""
        self._refresh_registry()
        return sorted(self.command_registry.list_supported_commands())

    def get_executor_info(self) -> Dict[str, Any]:
        """Loaded plugins, the number of commands and how many each plugin provides."""
        self._refresh_registry()
        return {
            "loaded_plugins": list(self._registered_plugins),
            "supported_commands": len(self.command_registry.list_supported_commands()),
            "handlers_by_plugin": {
                plugin_name: len(self.command_registry.get_handlers_by_plugin(plugin_name))
                for plugin_name in self._registered_plugins
            },
        }
