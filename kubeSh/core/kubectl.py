# kubeSh/core/kubectl.py
"""
Thin wrapper around the kubectl executable and the local kubeconfig.

Cluster traffic always goes through kubectl as a subprocess. The kubeconfig is
read with the kubernetes client's config loader, which does not contact the cluster.
"""

import subprocess
import logging
from typing import List, Optional, Sequence, Tuple

from kubernetes import config

from kubeSh.constants import DEFAULT_KUBECTL, NAMESPACE_FLAGS, ALL_NAMESPACES_FLAGS, ARGS_SEPARATOR
from kubeSh.core.context import KubeShContext

logger = logging.getLogger(__name__)

class KubectlError(Exception):
    """Raised when a kubectl invocation fails."""
    pass

class KubectlNotFoundError(KubectlError):
    """Raised when the kubectl executable is not installed or not on PATH."""
    pass

class KubeconfigError(KubectlError):
    """Raised when the kubeconfig cannot be read."""
    pass

def split_at_separator(args: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split kubectl arguments into kubectl's own and those after `--`, which go to the container command."""
    args = list(args)
    if ARGS_SEPARATOR in args:
        index = args.index(ARGS_SEPARATOR)
        return args[:index], args[index:]
    return args, []

def scopes_namespace(args: Sequence[str]) -> bool:
    """Check whether kubectl arguments already choose a namespace."""
    own_args, _ = split_at_separator(args)
    for arg in own_args:
        if arg in NAMESPACE_FLAGS or arg in ALL_NAMESPACES_FLAGS:
            return True
        if arg.startswith("--namespace=") or (arg.startswith("-n") and len(arg) > 2 and not arg.startswith("--")):
            return True
    return False

class KubectlClient:
    """Runs kubectl commands on behalf of a shell session."""

    def __init__(self, kubectl_path: str = DEFAULT_KUBECTL, kubeconfig: Optional[str] = None):
        self.kubectl_path = kubectl_path
        self.kubeconfig = kubeconfig

    def build_command(self, args: Sequence[str], context: Optional[KubeShContext] = None) -> List[str]:
        """
        Build the full kubectl command line.

        The session namespace is added unless the arguments already scope one.
        It goes before any `--`, so `exec` and `run` keep the container command intact.
        """
        own_args, container_args = split_at_separator(args)
        command = [self.kubectl_path]
        if self.kubeconfig:
            command.extend(["--kubeconfig", self.kubeconfig])
        command.extend(own_args)
        if context is not None and not scopes_namespace(own_args):
            command.extend(["--namespace", context.current_namespace])
        command.extend(container_args)
        return command

    def _run(self, command: List[str], capture_output: bool) -> subprocess.CompletedProcess:
        logger.debug(f"Running: {' '.join(command)}")
        try:
            if capture_output:
                return subprocess.run(command, capture_output=True, text=True, check=False)
            return subprocess.run(command, check=False)
        except FileNotFoundError:
            raise KubectlNotFoundError(f"'{self.kubectl_path}' command not found. Please ensure kubectl is installed and in your PATH.")

    def run(self, args: Sequence[str], context: Optional[KubeShContext] = None) -> int:
        """
        Run kubectl attached to the terminal.

        Returns:
            The kubectl exit status
        """
        result = self._run(self.build_command(args, context), capture_output=False)
        return result.returncode

    def query(self, args: Sequence[str], context: Optional[KubeShContext] = None) -> str:
        """
        Run kubectl and capture its output.

        Raises:
            KubectlError: If kubectl exits with a non-zero status
        """
        result = self._run(self.build_command(args, context), capture_output=True)
        if result.returncode != 0:
            raise KubectlError(result.stderr.strip() or f"kubectl exited with status {result.returncode}")
        return result.stdout

    def list_contexts(self) -> Tuple[List[str], Optional[str]]:
        """
        Read the contexts defined in the kubeconfig.

        Returns:
            Tuple of (context names in kubeconfig order, current context name or None)
        """
        try:
            contexts, active = config.list_kube_config_contexts(config_file=self.kubeconfig)
        except config.ConfigException as e:
            raise KubeconfigError(f"Could not load Kubernetes configuration: {e}")
        names = [entry['name'] for entry in contexts or []]
        return names, active['name'] if active else None

    def context_namespace(self, context_name: Optional[str]) -> Optional[str]:
        """Return the namespace configured for a context in the kubeconfig, if any."""
        if not context_name:
            return None
        try:
            contexts, _ = config.list_kube_config_contexts(config_file=self.kubeconfig)
        except config.ConfigException as e:
            raise KubeconfigError(f"Could not load Kubernetes configuration: {e}")
        for entry in contexts or []:
            if entry['name'] == context_name:
                return entry.get('context', {}).get('namespace')
        return None

    def use_context(self, context_name: str):
        """Switches the kubectl context to the specified context."""
        result = self._run(self.build_command(["config", "use-context", context_name]), capture_output=True)
        if result.returncode != 0:
            if "no context exists" in result.stderr or "no such context" in result.stderr:
                raise KubectlError(f"Context '{context_name}' not found in kubeconfig.")
            raise KubectlError(f"Failed to switch to context '{context_name}':\n{result.stderr.strip()}")
        logger.info(f"Switched kubectl context to {context_name}")

    def persist_namespace(self, namespace: str):
        """Store the namespace on the current kubeconfig context."""
        self.query(["config", "set-context", "--current", f"--namespace={namespace}"])

    def list_namespaces(self) -> List[str]:
        output = self.query(["get", "namespaces", "-o", "jsonpath={.items[*].metadata.name}"])
        return output.split()

    def list_resource_names(self, kind: str, namespace: str) -> List[str]:
        """Names of resources of `kind` in a namespace."""
        output = self.query(["get", kind, "--namespace", namespace, "-o", "jsonpath={.items[*].metadata.name}"])
        return output.split()
