# kubeSh/core/parser/command_parser.py
"""
Command line parser for kubeSh.

Splits an input line into ';'-separated commands, each a command name followed
by its arguments. Quoting follows the usual shell rules: double quotes with
backslash escapes, single quotes, and adjacent quoted parts joining into one
argument (--selector="app=web" is a single argument).
"""

import shlex
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from lark import Lark, Transformer
from lark.exceptions import LarkError, ParseError, LexError

logger = logging.getLogger(__name__)

COMMAND_LINE_GRAMMAR = r"""
    start: segment (";" segment)*
    segment: command?
    command: ARG+

    ARG: /(?:[^\s;"'\\]|\\.|"(?:\\.|[^"\\])*"|'[^']*')+/

    %import common.WS
    %ignore WS
"""

@dataclass
class ParsedCommand:
    name: str
    args: List[str] = field(default_factory=list)

    def __str__(self):
        return " ".join([self.name] + [shlex.quote(arg) for arg in self.args])

def _unquote(word: str) -> str:
    # A single ARG token never holds unquoted whitespace, so shlex yields one word
    parts = shlex.split(word)
    return parts[0] if parts else ""

class CommandLineTransformer(Transformer):
    """Turns the parse tree into a list of ParsedCommand objects"""

    def command(self, children):
        words = [_unquote(str(token)) for token in children]
        return ParsedCommand(name=words[0], args=words[1:])

    def segment(self, children):
        return children[0] if children else None

    def start(self, children):
        return [command for command in children if command is not None]

class CommandLineParser:
    """
    Parser for kubeSh input lines.
    """

    def __init__(self):
        self.parser = Lark(
            COMMAND_LINE_GRAMMAR,
            parser="lalr",
            transformer=CommandLineTransformer(),
        )

    def parse(self, line: str) -> Dict[str, Any]:
        """
        Parse an input line.

        Args:
            line: The raw text entered at the prompt

        Returns:
            {"commands": [ParsedCommand, ...]} or error information
        """
        try:
            return {"commands": self.parser.parse(line)}

        except ParseError as e:
            logger.debug(f"Parse error for line '{line}': {e}")
            return {
                "error": f"Parse error: {e}",
                "type": "parse_error",
                "line": line,
            }

        except LexError as e:
            logger.debug(f"Lex error for line '{line}': {e}")
            return {
                "error": f"Unterminated quote or invalid character at column {getattr(e, 'column', '?')}",
                "type": "lex_error",
                "line": line,
            }

        except LarkError as e:
            logger.error(f"Unexpected error parsing line '{line}': {e}")
            return {
                "error": f"Unexpected parse error: {e}",
                "type": "unexpected_error",
                "line": line,
            }
