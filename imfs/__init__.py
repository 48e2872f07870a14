"""
imfs - An in-memory hierarchical filesystem

This package provides a tree-shaped virtual filesystem held entirely in
memory, a single path resolver shared by every operation, and a small
terminal front end for driving it from the command line.
"""

__version__ = "0.1.0"

from .node import (
    Kind,
    Node,
)

from .results import (
    ErrorKind,
    Result,
)

from .path_resolver import (
    ResolveMode,
    Resolution,
    resolve,
    lookup,
)

from .imfs import (
    FileSystem,
)

from .terminal import (
    TerminalSession,
    TerminalConfig,
    CommandExecutor,
    CommandHistory,
)

from .command_parser import (
    Command,
    CommandParser,
    CommandGroup,
    Redirect,
    RedirectType,
)

__all__ = [
    # Core filesystem
    "FileSystem",
    "Node",
    "Kind",

    # Results
    "Result",
    "ErrorKind",

    # Path resolution
    "ResolveMode",
    "Resolution",
    "resolve",
    "lookup",

    # Terminal
    "TerminalSession",
    "TerminalConfig",
    "CommandExecutor",
    "CommandHistory",

    # Command parser
    "Command",
    "CommandParser",
    "CommandGroup",
    "Redirect",
    "RedirectType",

    # Version info
    "__version__",
]
