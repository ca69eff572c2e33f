# kubeSh/core/parser/__init__.py
"""
kubeSh Core Parser Module

Parsing of shell input lines into commands.
"""

from .command_parser import CommandLineParser, ParsedCommand

__all__ = ['CommandLineParser', 'ParsedCommand']
