# kubeSh/main.py
"""
kubeSh Main Entry Point

Loads the configuration, initializes the plugin system with the core plugins
(plus any user plugins), reads the starting kube context from the kubeconfig
and runs the interactive shell.
"""

import argparse
import logging
import readline
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tabulate import tabulate

from kubeSh.__version__ import __version__
from kubeSh.config import ShellConfig, ConfigError, load_config
from kubeSh.constants import PICKER_MODES
from kubeSh.core.completion import ShellCompleter
from kubeSh.core.context import KubeShContext
from kubeSh.core.executor import CommandExecutor
from kubeSh.core.kubectl import KubeconfigError
from kubeSh.core.plugin_system import PluginManager, PluginDependencyError
from kubeSh.core.runtime import ShellRuntime
from kubeSh.plugins.core import CORE_PLUGINS

logger = logging.getLogger(__name__)

BUILTIN_COMMANDS = ["help", "?", "plugins", "context", "exit", "quit"]

def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kubesh",
        description="Interactive kubectl shell with fuzzy context and namespace switching."
    )
    parser.add_argument("--config", help="Path to a YAML config file (default: ~/.kubesh/config.yaml)")
    parser.add_argument("--kubeconfig", help="Kubeconfig file passed to kubectl")
    parser.add_argument("--picker", choices=PICKER_MODES, help="Interactive selector to use")
    parser.add_argument("--plugin-dir", action="append", dest="plugin_dirs",
                        help="Additional directory to load plugins from (repeatable)")
    parser.add_argument("-c", "--command", help="Run a single command line and exit")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)

def apply_arguments(config: ShellConfig, args: argparse.Namespace) -> ShellConfig:
    """Command line flags override every other configuration source."""
    if args.kubeconfig:
        config.kubeconfig = args.kubeconfig
    if args.picker:
        config.picker = args.picker
    if args.plugin_dirs:
        config.plugin_directories = config.plugin_directories + args.plugin_dirs
    if args.debug:
        config.log_level = "DEBUG"
    return config

def initialize_plugin_system(runtime: ShellRuntime) -> Tuple[Optional[PluginManager], Optional[CommandExecutor]]:
    """
    Register the built-in plugins, then those named in the config and those
    found in the plugin directories, and load them all.

    Returns:
        Tuple of (PluginManager, CommandExecutor), or (None, None) if nothing loaded
    """
    plugin_manager = PluginManager(runtime)

    for plugin_class in CORE_PLUGINS:
        if not plugin_manager.register_plugin_class(plugin_class):
            logger.error(f"Built-in plugin {plugin_class.__name__} was rejected")
    for module_name in runtime.config.plugin_modules:
        plugin_manager.load_plugin_from_module(module_name)
    discovered = plugin_manager.discover_plugins(runtime.config.plugin_directories)
    logger.info(f"{len(plugin_manager.plugin_classes)} plugin classes registered, {discovered} from plugin directories")

    try:
        successful, failed = plugin_manager.load_all_plugins()
    except PluginDependencyError as e:
        print(f"🚨 Plugin dependency problem: {e}")
        return None, None
    logger.info(f"Plugins loaded: {successful}, failed: {failed}")

    if successful == 0:
        logger.error("None of the registered plugins could be loaded")
        return None, None

    return plugin_manager, CommandExecutor(plugin_manager)

def initial_context(runtime: ShellRuntime) -> KubeShContext:
    """Start the session on the kubeconfig's current context and its namespace."""
    context = KubeShContext(prompt_template=runtime.config.prompt_template)
    try:
        _, active = runtime.kubectl.list_contexts()
        context.set_kube_context(active, runtime.kubectl.context_namespace(active))
    except KubeconfigError as e:
        logger.warning(f"{e}")
        print("⚠️ No usable kubeconfig found. Use 'ctx' once one is available.")
    return context

def setup_readline(completer: ShellCompleter, history_file: str):
    readline.set_completer(completer.complete)
    readline.set_completer_delims(" \t;")
    readline.parse_and_bind("tab: complete")

    history_path = Path(history_file).expanduser()
    if history_path.exists():
        try:
            readline.read_history_file(str(history_path))
        except OSError as e:
            logger.warning(f"Could not read history file {history_path}: {e}")

def save_history(history_file: str):
    history_path = Path(history_file).expanduser()
    try:
        history_path.parent.mkdir(parents=True, exist_ok=True)
        readline.write_history_file(str(history_path))
    except OSError as e:
        logger.warning(f"Could not write history file {history_path}: {e}")

def line_before_cursor_word() -> str:
    return readline.get_line_buffer()[:readline.get_begidx()]

def show_help(executor: CommandExecutor):
    """Show help information"""
    print("📚 kubeSh Help")
    print("=" * 50)
    print()

    help_entries = executor.plugin_manager.get_help_entries()
    supported_commands = executor.get_supported_commands()
    if supported_commands:
        print("Available Commands:")
        for cmd in supported_commands:
            print(f"   {help_entries.get(cmd, cmd)}")
    else:
        print("No commands available (plugin system issue)")

    print()
    print("Special Commands:")
    print("   help, ?          - Show this help")
    print("   plugins          - List loaded plugins")
    print("   context          - Show the session context")
    print("   !<command>       - Run a command in the host shell")
    print("   exit, quit       - Exit kubeSh")
    print()
    print("Examples:")
    print("   ctx              (pick a context interactively)")
    print("   ns kube-sys      (fuzzy-switch to kube-system)")
    print("   kgp -o wide; kgs")

def show_plugins(plugin_manager: PluginManager):
    table_data = []
    for plugin_name in plugin_manager.get_loaded_plugins():
        info = plugin_manager.get_plugin_info(plugin_name)
        table_data.append([info.name, info.version, ", ".join(info.dependencies) or "-", info.description])
    print(tabulate(table_data, headers=["Plugin", "Version", "Depends On", "Description"], tablefmt="grid"))

def run_host_command(command: str):
    if not command.strip():
        print("⚠️ Nothing to run after '!'.")
        return
    result = subprocess.run(command, shell=True, check=False)
    if result.returncode != 0:
        logger.debug(f"Host command exited with status {result.returncode}")

def handle_builtin(line: str, executor: CommandExecutor, context: KubeShContext) -> bool:
    """
    Run a shell built-in.

    Returns:
        True if the line was a built-in and has been handled
    """
    lowered = line.lower()
    if lowered in ["help", "?"]:
        show_help(executor)
        return True
    if lowered == "plugins":
        show_plugins(executor.plugin_manager)
        return True
    if lowered == "context":
        print(context)
        return True
    if line.startswith("!"):
        run_host_command(line[1:])
        return True
    return False

def shell(executor: CommandExecutor, context: KubeShContext):
    """
    Runs the kubeSh interactive shell.

    Args:
        executor: Command executor for dispatching to plugin handlers
        context: kubeSh context for session management
    """
    print(f"🚀 kubeSh {__version__}")
    print("kubectl with fuzzy context and namespace switching.")
    print("Type 'help' for commands, Tab to complete. End a line with '\\' to continue it.")
    print(f"Initial context: {context}")
    print()

    executor_info = executor.get_executor_info()
    print(f"📦 Loaded plugins: {', '.join(executor_info['loaded_plugins'])}")
    print(f"💡 Available commands: {executor_info['supported_commands']}")
    print()

    command_buffer = []

    while True:
        if not command_buffer:
            prompt_string = context.get_prompt()
        else:
            prompt_string = context.get_continuation_prompt()

        try:
            line_input = input(prompt_string)

            if line_input.endswith("\\"):
                command_buffer.append(line_input[:-1])
                continue
            command_buffer.append(line_input)
            full_command_text = " ".join(command_buffer).strip()
            command_buffer = []

            if not full_command_text or full_command_text.startswith("#"):
                continue

            if full_command_text.lower() in ["exit", "quit"]:
                print("👋 Goodbye!")
                break

            if handle_builtin(full_command_text, executor, context):
                continue

            success = executor.execute_command(full_command_text, context)
            if not success:
                logger.debug(f"Command execution returned False: {full_command_text}")

        except KeyboardInterrupt:
            if command_buffer:
                print("\nCommand input cancelled. Buffer cleared.")
            else:
                print()
            command_buffer = []

        except EOFError:
            print("\n👋 Goodbye!")
            break

        except Exception as e:
            print(f"❌ Unexpected error in shell: {type(e).__name__} - {e}")
            logger.error(f"Unexpected error in shell: {e}")
            command_buffer = []

def main(argv: Optional[List[str]] = None):
    """
    Main entry point for kubeSh.
    """
    args = parse_arguments(argv)

    try:
        config = apply_arguments(load_config(args.config), args)
    except ConfigError as e:
        print(f"🚨 {e}")
        sys.exit(1)

    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.WARNING),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    runtime = ShellRuntime.from_config(config)
    plugin_manager, executor = initialize_plugin_system(runtime)

    if not plugin_manager or not executor:
        print("🚨 Failed to initialize plugin system. Exiting.")
        sys.exit(1)

    context = initial_context(runtime)

    if args.command:
        if not handle_builtin(args.command.strip(), executor, context):
            sys.exit(0 if executor.execute_command(args.command, context) else 1)
        return

    completer = ShellCompleter(executor, context, BUILTIN_COMMANDS, line_source=line_before_cursor_word)
    setup_readline(completer, config.history_file)

    try:
        shell(executor, context)
    except Exception as e:
        logger.error(f"Fatal error in shell: {e}")
        print(f"🚨 Fatal error: {e}")
        sys.exit(1)
    finally:
        save_history(config.history_file)

if __name__ == "__main__":
    main()
