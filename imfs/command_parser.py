#!/usr/bin/env python3
"""
Command parser for the imfs terminal.

Turns a command line into structured commands; it does not execute them.

Supported syntax:
- commands with arguments, quoted with shlex rules
- short flags (-p, -rf) and long flags (--parents, --name=value)
- output redirection (> FILE, >> FILE)
- sequences joined by ';', '&&' and '||'
"""

import re
import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class RedirectType(Enum):
    """Types of output redirection."""
    WRITE = '>'    # Overwrite file
    APPEND = '>>'  # Append to file


@dataclass
class Redirect:
    """Represents an output redirection."""
    type: RedirectType
    target: str


@dataclass
class Command:
    """
    A single command with its arguments and redirections.

    Each command maps to one handler in the terminal's executor.
    """
    name: str
    args: List[str]
    flags: Dict[str, Union[bool, str]]
    redirects: List[Redirect]


@dataclass
class CommandGroup:
    """
    Commands connected by operators.

    Each entry is (command, operator) where the operator joins it to the
    next command: '&&', '||', ';' or None for the last one.
    """
    commands: List[Tuple[Command, Optional[str]]]


class CommandParser:
    """Parser for imfs command lines."""

    FLAG_MAPPINGS = {
        'ls': {
            'l': 'long',
        },
        'rm': {
            'r': 'recursive',
            'R': 'recursive',
            'f': 'force',
        },
        'mkdir': {
            'p': 'parents',
        },
        'echo': {
            'n': 'n',  # no newline
        },
    }

    def __init__(self):
        self.redirect_pattern = re.compile(r'(>>|>)\s*(\S+)')
        self.operator_pattern = re.compile(r'(&&|\|\||;)')

    def parse(self, command_line: str) -> CommandGroup:
        """Parse a complete command line into a CommandGroup."""
        if not command_line or not command_line.strip():
            return CommandGroup(commands=[])

        commands = []
        for part in self._split_operators(command_line):
            if part in ('&&', '||', ';'):
                if commands and commands[-1][1] is None:
                    commands[-1] = (commands[-1][0], part)
                continue
            command = self._parse_command(part)
            if command:
                commands.append((command, None))

        return CommandGroup(commands=commands)

    def _split_operators(self, text: str) -> List[str]:
        """Split text on sequence operators, respecting quotes."""
        parts = []
        current = []
        quote = None
        i = 0

        while i < len(text):
            char = text[i]
            if quote:
                if char == quote:
                    quote = None
                current.append(char)
            elif char in ('"', "'"):
                quote = char
                current.append(char)
            else:
                match = self.operator_pattern.match(text, i)
                if match:
                    parts.append(''.join(current).strip())
                    parts.append(match.group(1))
                    current = []
                    i = match.end()
                    continue
                current.append(char)
            i += 1

        parts.append(''.join(current).strip())
        return [part for part in parts if part]

    def _parse_command(self, command_str: str) -> Optional[Command]:
        """Parse a single command with its arguments and redirections."""
        redirects, clean_str = self._extract_redirections(command_str)

        try:
            tokens = shlex.split(clean_str)
        except ValueError:
            # Unclosed quotes
            tokens = clean_str.split()

        if not tokens:
            return None

        cmd_name = tokens[0]
        flags, args = self._parse_flags(cmd_name, tokens[1:])

        return Command(
            name=cmd_name,
            args=args,
            flags=flags,
            redirects=redirects
        )

    def _extract_redirections(self, command_str: str) -> Tuple[List[Redirect], str]:
        """Extract redirections that sit outside quotes."""
        redirects = []
        kept = []
        quote = None
        i = 0

        while i < len(command_str):
            char = command_str[i]
            if quote:
                if char == quote:
                    quote = None
            elif char in ('"', "'"):
                quote = char
            elif char == '>':
                match = self.redirect_pattern.match(command_str, i)
                if match:
                    op, target = match.groups()
                    redirect_type = RedirectType.APPEND if op == '>>' else RedirectType.WRITE
                    redirects.append(Redirect(type=redirect_type, target=target))
                    i = match.end()
                    continue
            kept.append(char)
            i += 1

        return redirects, ''.join(kept).strip()

    def _parse_flags(self, cmd_name: str, args: List[str]) -> Tuple[Dict[str, Union[bool, str]], List[str]]:
        """
        Parse flags from arguments.

        Returns (flags_dict, remaining_args). A short-flag word counts only
        when every letter is known for the command, so ``echo -5`` keeps
        ``-5`` as text.
        """
        flags = {}
        remaining = []
        flag_mappings = self.FLAG_MAPPINGS.get(cmd_name, {})

        for i, arg in enumerate(args):
            if arg == '--':
                remaining.extend(args[i + 1:])
                break
            elif arg.startswith('--'):
                if '=' in arg:
                    key, value = arg[2:].split('=', 1)
                    flags[key] = value
                else:
                    flags[arg[2:]] = True
            elif arg.startswith('-') and len(arg) > 1 and all(c in flag_mappings for c in arg[1:]):
                for char in arg[1:]:
                    flags[flag_mappings[char]] = True
            else:
                remaining.append(arg)

        return flags, remaining

    def parse_simple(self, command_str: str) -> Optional[Command]:
        """
        Parse a simple command without operators.

        Convenience method for testing and simple cases.
        """
        return self._parse_command(command_str)
