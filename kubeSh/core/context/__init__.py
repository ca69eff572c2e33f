# kubeSh/core/context/__init__.py
"""
kubeSh Core Context Module

Context management for kubeSh sessions.
"""

from .session_context import KubeShContext

__all__ = ['KubeShContext']
