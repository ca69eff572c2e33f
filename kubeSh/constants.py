# kubeSh/constants.py
"""
This module defines constants used throughout the kubeSh application.
"""
from pathlib import Path

# Default Values
DEFAULT_NAMESPACE = "default"
DEFAULT_KUBECTL = "kubectl"
DEFAULT_FZF = "fzf"
DEFAULT_PROMPT_TEMPLATE = "({context}:{namespace}) k8s> "
CONTINUATION_PROMPT = "... "
NO_CONTEXT_LABEL = "-"

# --- Configuration ---
CONFIG_DIR = Path.home() / ".kubesh"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
HISTORY_FILE = CONFIG_DIR / "history"
PLUGIN_DIR = CONFIG_DIR / "plugins"

ENV_CONFIG = "KUBESH_CONFIG"
ENV_PICKER = "KUBESH_PICKER"
ENV_PLUGIN_DIR = "KUBESH_PLUGIN_DIR"
ENV_LOG_LEVEL = "KUBESH_LOG_LEVEL"
ENV_KUBECTL = "KUBESH_KUBECTL"

PICKER_AUTO = "auto"
PICKER_BUILTIN = "builtin"
PICKER_FZF = "fzf"
PICKER_MODES = (PICKER_AUTO, PICKER_BUILTIN, PICKER_FZF)

# --- Fuzzy ranking ---
RANK_EXACT = 100
RANK_PREFIX = 80
RANK_SUBSTRING = 60
RANK_SUBSEQUENCE = 40
MAX_COMPACTNESS_BONUS = 20

# --- Interactive picker ---
PICKER_MAX_VIEWPORT = 15
PICKER_RESERVED_ROWS = 5    # title, filter, two scroll indicators, footer
PICKER_FILTER_CHARS = r"[A-Za-z0-9.\-]"
CURRENT_MARKER = " (current)"  # Appended to the active item for fzf
ESCAPE_SEQUENCE_TIMEOUT = 0.05  # seconds to wait for the rest of an escape sequence
NO_ITEMS_MESSAGE = "ℹ️ No items to select."
HIGHLIGHT_SGR = "7"         # reverse video
CURRENT_SGR = "1;32"        # bold green

# --- kubectl argument handling ---
NAMESPACE_FLAGS = ("-n", "--namespace")
ALL_NAMESPACES_FLAGS = ("-A", "--all-namespaces")
ARGS_SEPARATOR = "--"        # the rest belongs to the container command
PREVIOUS_SELECTION = "-"
LIST_FLAG = "-l"

KUBECTL_VERBS = [
    "get", "describe", "logs", "exec", "apply", "delete", "edit", "create",
    "scale", "rollout", "port-forward", "top", "label", "annotate", "patch",
    "explain", "cp", "run", "expose", "set", "config", "api-resources",
    "auth", "cordon", "uncordon", "drain", "taint", "wait", "debug", "diff",
]

# Verbs whose first positional argument is a resource kind
RESOURCE_VERBS = {
    "get", "describe", "delete", "edit", "label", "annotate", "patch",
    "explain", "scale", "wait", "create",
}

RESOURCE_KINDS = [
    "pods", "services", "deployments", "replicasets", "statefulsets",
    "daemonsets", "jobs", "cronjobs", "configmaps", "secrets", "ingresses",
    "namespaces", "nodes", "persistentvolumeclaims", "persistentvolumes",
    "serviceaccounts", "events", "endpoints", "networkpolicies",
    "horizontalpodautoscalers", "roles", "rolebindings", "clusterroles",
    "clusterrolebindings", "storageclasses", "customresourcedefinitions",
]

# Resource shorthand aliases understood by kubectl, offered during completion
RESOURCE_ALIASES = {
    "po": "pods",
    "svc": "services",
    "deploy": "deployments",
    "rs": "replicasets",
    "sts": "statefulsets",
    "ds": "daemonsets",
    "cj": "cronjobs",
    "cm": "configmaps",
    "ing": "ingresses",
    "ns": "namespaces",
    "no": "nodes",
    "pvc": "persistentvolumeclaims",
    "pv": "persistentvolumes",
    "sa": "serviceaccounts",
    "ev": "events",
    "ep": "endpoints",
    "netpol": "networkpolicies",
    "hpa": "horizontalpodautoscalers",
    "sc": "storageclasses",
    "crd": "customresourcedefinitions",
}

# Shorthand commands: name -> kubectl argument prefix
DEFAULT_SHORTCUTS = {
    "kg": ["get"],
    "kgp": ["get", "pods"],
    "kgs": ["get", "services"],
    "kgd": ["get", "deployments"],
    "kgn": ["get", "nodes"],
    "kgi": ["get", "ingresses"],
    "kgcm": ["get", "configmaps"],
    "kgsec": ["get", "secrets"],
    "kd": ["describe"],
    "kdp": ["describe", "pods"],
    "kl": ["logs"],
    "klf": ["logs", "--follow"],
    "kex": ["exec", "-it"],
    "kaf": ["apply", "-f"],
    "kdel": ["delete"],
    "kdelp": ["delete", "pods"],
    "kpf": ["port-forward"],
    "ktp": ["top", "pods"],
}
