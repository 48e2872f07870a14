#!/usr/bin/env python3
"""
Terminal for imfs.

A thin line-based front end: it parses command lines, calls the
FileSystem API and renders the results. It keeps no tree state of its own.

Design Principles:
- All tree operations go through FileSystem
- Clean separation between parsing and execution
- Failures are rendered, never raised
"""

import getpass
import inspect
import logging
import socket
import sys
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .command_parser import Command, CommandGroup, CommandParser, Redirect, RedirectType
from .imfs import FileSystem
from .results import ErrorKind, Result

logger = logging.getLogger(__name__)

CLEAR_SCREEN = '\033[2J\033[H'


@dataclass
class TerminalConfig:
    """Configuration for a terminal session."""
    user: str = field(default_factory=lambda: getpass.getuser())
    hostname: str = field(default_factory=lambda: socket.gethostname().split('.')[0])
    initial_dir: str = '/'
    prompt_format: str = '{user}@{hostname}:{cwd}$ '
    enable_colors: bool = True
    history_size: int = 1000


@dataclass
class CommandOutput:
    """Rendered output of one command."""
    text: str = ''
    exit_code: int = 0


class CommandHistory:
    """Manages command history for the terminal session."""

    def __init__(self, max_size: int = 1000):
        self.max_size = max_size
        self.history: List[str] = []

    def add(self, command: str):
        """Add a command to history."""
        if command and command.strip():
            self.history.append(command)
            if len(self.history) > self.max_size:
                self.history.pop(0)


class CommandExecutor:
    """
    Executes parsed commands against a FileSystem.

    Each command NAME is handled by a ``_cmd_NAME`` method whose docstring
    doubles as its help text.
    """

    def __init__(self, fs: FileSystem, history: Optional[CommandHistory] = None):
        self.fs = fs
        self.history = history or CommandHistory()
        self.exit_requested = False

    def execute(self, command_group: CommandGroup) -> CommandOutput:
        """
        Execute a CommandGroup and return the output of every command run.

        As in a shell, '&&' and '||' decide from the last exit status
        whether the next command runs; a skipped command leaves that
        status unchanged and ';' always runs the next command.
        """
        texts = []
        last = CommandOutput()
        previous_op = None

        for command, operator in command_group.commands:
            skip = ((previous_op == '&&' and last.exit_code != 0) or
                    (previous_op == '||' and last.exit_code == 0))
            previous_op = operator
            if skip:
                continue

            last = self._execute_command(command)
            if last.text:
                texts.append(last.text)
            if self.exit_requested:
                break

        return CommandOutput(text='\n'.join(texts), exit_code=last.exit_code)

    def _get_handler(self, command_name: str) -> Optional[Callable[[Command], Result]]:
        return getattr(self, f"_cmd_{command_name}", None)

    def commands(self) -> Dict[str, Callable[[Command], Result]]:
        """Map of command name to handler."""
        return {
            name[len('_cmd_'):]: getattr(self, name)
            for name in sorted(dir(self)) if name.startswith('_cmd_')
        }

    def _execute_command(self, command: Command) -> CommandOutput:
        """Execute a single command and apply its redirections."""
        handler = self._get_handler(command.name)
        if handler is None:
            return CommandOutput(text=f"imfs: {command.name}: command not found", exit_code=127)

        result = handler(command)
        if not result:
            return CommandOutput(text=f"{command.name}: {result.message}", exit_code=result.exit_code)

        for redirect in command.redirects:
            failed = self._apply_redirection(result, redirect)
            if failed is not None:
                return CommandOutput(text=f"{command.name}: {failed.message}", exit_code=1)
        if command.redirects:
            return CommandOutput()

        return CommandOutput(text=str(result).rstrip('\n'))

    def _apply_redirection(self, result: Result, redirect: Redirect) -> Optional[Result]:
        """Write a command's output to a file; returns the failure, if any."""
        payload = result.data if isinstance(result.data, bytes) else str(result).encode('utf-8')
        written = self.fs.write(redirect.target, payload,
                                append=redirect.type is RedirectType.APPEND)
        return None if written else written

    @staticmethod
    def _usage(name: str) -> Result:
        return Result.failure(ErrorKind.INVALID_ARGUMENT, f"missing operand\nTry 'help {name}' for more information.")

    # Commands

    def _cmd_ls(self, command: Command) -> Result:
        """List directory contents.

        Usage:
            ls [-l] [PATH]
        """
        path = command.args[0] if command.args else None
        result = self.fs.ls(path)
        if not result:
            return result

        listed = self.fs.cwd if path is None else self.fs.get(path)
        lines = []
        for name in result.data:
            node = listed.child(name) if listed.is_dir() else listed
            suffix = '/' if node.is_dir() else ''
            if command.flags.get('long'):
                type_char = 'd' if node.is_dir() else '-'
                mtime = datetime.fromtimestamp(node.modified_at).strftime('%b %d %H:%M')
                lines.append(f"{type_char} {node.size:8} {mtime} {name}{suffix}")
            else:
                lines.append(f"{name}{suffix}")
        return Result.success(lines)

    def _cmd_cd(self, command: Command) -> Result:
        """Change the current directory.

        Usage:
            cd [PATH]
        """
        result = self.fs.cd(command.args[0] if command.args else '/')
        return Result.success() if result else result

    def _cmd_pwd(self, command: Command) -> Result:
        """Print the current directory.

        Usage:
            pwd
        """
        return self.fs.pwd()

    def _cmd_mkdir(self, command: Command) -> Result:
        """Create directories.

        Usage:
            mkdir [-p] DIRECTORY...
        """
        if not command.args:
            return self._usage('mkdir')
        for path in command.args:
            result = self.fs.mkdir(path, parents=bool(command.flags.get('parents')))
            if not result:
                return result
        return Result.success()

    def _cmd_touch(self, command: Command) -> Result:
        """Create empty files or refresh timestamps.

        Usage:
            touch FILE...
        """
        if not command.args:
            return self._usage('touch')
        for path in command.args:
            result = self.fs.touch(path)
            if not result:
                return result
        return Result.success()

    def _cmd_cat(self, command: Command) -> Result:
        """Print file contents.

        Usage:
            cat FILE...
        """
        if not command.args:
            return self._usage('cat')
        contents = []
        for path in command.args:
            result = self.fs.cat(path)
            if not result:
                return result
            contents.append(result.data)
        return Result.success(b''.join(contents))

    def _cmd_echo(self, command: Command) -> Result:
        """Print text, typically redirected into a file.

        Usage:
            echo [-n] TEXT... [> FILE | >> FILE]
        """
        text = ' '.join(command.args)
        if not command.flags.get('n'):
            text += '\n'
        return Result.success(text)

    def _cmd_rm(self, command: Command) -> Result:
        """Remove files or directories.

        Usage:
            rm [-r] [-f] PATH...
        """
        if not command.args:
            return self._usage('rm')
        for path in command.args:
            result = self.fs.rm(path, recursive=bool(command.flags.get('recursive')))
            if not result and not command.flags.get('force'):
                return result
        return Result.success()

    def _cmd_mv(self, command: Command) -> Result:
        """Move or rename a file or directory.

        Usage:
            mv SOURCE DEST
        """
        if len(command.args) != 2:
            return self._usage('mv')
        result = self.fs.mv(*command.args)
        return Result.success() if result else result

    def _cmd_cp(self, command: Command) -> Result:
        """Copy a file or directory tree.

        Usage:
            cp SOURCE DEST
        """
        if len(command.args) != 2:
            return self._usage('cp')
        result = self.fs.cp(*command.args)
        return Result.success() if result else result

    def _cmd_find(self, command: Command) -> Result:
        """Print the first path whose name contains TEXT.

        Usage:
            find TEXT
        """
        if not command.args:
            return self._usage('find')
        return self.fs.find(command.args[0])

    def _cmd_stat(self, command: Command) -> Result:
        """Show file or directory details.

        Usage:
            stat PATH
        """
        if not command.args:
            return self._usage('stat')
        return self.fs.stat(command.args[0])

    def _cmd_history(self, command: Command) -> Result:
        """Show command history.

        Usage:
            history
        """
        return Result.success([f"{i + 1:5}  {line}" for i, line in enumerate(self.history.history)])

    def _cmd_clear(self, command: Command) -> Result:
        """Clear the terminal screen.

        Usage:
            clear
        """
        return Result.success(CLEAR_SCREEN)

    def _cmd_exit(self, command: Command) -> Result:
        """Leave the terminal.

        Usage:
            exit
        """
        self.exit_requested = True
        return Result.success()

    _cmd_quit = _cmd_exit

    def _cmd_help(self, command: Command) -> Result:
        """Show help for all commands or for one.

        Usage:
            help [COMMAND]
        """
        handlers = self.commands()
        if command.args:
            name = command.args[0]
            handler = handlers.get(name)
            if handler is None:
                return Result.failure(ErrorKind.NOT_FOUND, f"no help available for '{name}'")
            return Result.success(f"{name} - {inspect.cleandoc(handler.__doc__)}")

        lines = ['Available commands:']
        for name, handler in handlers.items():
            summary = handler.__doc__.strip().splitlines()[0]
            lines.append(f"  {name:<10} {summary}")
        return Result.success(lines)


class TerminalSession:
    """
    Terminal session manager.

    Provides the REPL loop, prompt display and command execution on top
    of a single FileSystem.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 fs: Optional[FileSystem] = None):
        self.config = config or TerminalConfig()
        self.fs = fs or FileSystem()
        self.parser = CommandParser()
        self.history = CommandHistory(self.config.history_size)
        self.executor = CommandExecutor(self.fs, self.history)
        self.running = False

        if self.config.initial_dir and self.config.initial_dir != '/':
            self.fs.mkdir(self.config.initial_dir, parents=True)
            self.fs.cd(self.config.initial_dir)

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        cwd = self.fs.pwd().data

        if self.config.enable_colors:
            # Green for user@host, blue for path
            return f'\033[32m{self.config.user}@{self.config.hostname}\033[0m:\033[34m{cwd}\033[0m$ '

        return self.config.prompt_format.format(
            user=self.config.user,
            hostname=self.config.hostname,
            cwd=cwd,
            time=datetime.now().strftime('%H:%M:%S')
        )

    @property
    def finished(self) -> bool:
        """True once an exit or quit command has run."""
        return self.executor.exit_requested

    def execute_command(self, command_line: str) -> str:
        """
        Execute a command line and return the output.

        An exit command anywhere in the line stops it there and marks the
        session as finished.
        """
        if not command_line or not command_line.strip():
            return ''

        output = self.executor.execute(self.parser.parse(command_line))
        if output.exit_code != 0:
            logger.debug("%r exited with %d", command_line, output.exit_code)
        return output.text

    def run_interactive(self):
        """Run the interactive REPL loop."""
        try:
            import readline  # noqa: F401  line editing for input()
        except ImportError:
            logger.debug("readline not available; line editing disabled")

        self.running = True
        self.executor.exit_requested = False
        print("Welcome to imfs, an in-memory filesystem")
        print("Type 'help' for help, 'exit' to quit")
        print()

        while self.running:
            try:
                command_line = input(self.get_prompt())
                self.history.add(command_line)

                output = self.execute_command(command_line)
                if output:
                    print(output)
                if self.finished:
                    break

            except KeyboardInterrupt:
                print("^C")
                continue
            except EOFError:
                print()
                break
            except Exception as e:
                logger.exception("command failed: %s", command_line)
                print(f"Error: {e}")

        self.running = False
        print("Goodbye!")

    def run_command(self, command_line: str) -> str:
        """
        Run a single command and return output.

        This method is useful for non-interactive use.
        """
        self.history.add(command_line)
        return self.execute_command(command_line)

    def run_script(self, script_lines: List[str]) -> List[str]:
        """Run a script (list of command lines) and return outputs."""
        outputs = []
        for line in script_lines:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            self.history.add(line)
            outputs.append(self.execute_command(line))
            if self.finished:
                break

        return outputs


def main(argv: Optional[List[str]] = None):
    """Main entry point for the imfs terminal."""
    import argparse

    parser = argparse.ArgumentParser(description='imfs in-memory filesystem terminal')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('-d', '--directory', help='Set initial directory', default='/')
    parser.add_argument('--no-color', action='store_true', help='Disable colored prompt')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log filesystem operations')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s',
        stream=sys.stderr,
    )

    config = TerminalConfig(initial_dir=args.directory, enable_colors=not args.no_color)
    session = TerminalSession(config=config)

    if args.command:
        output = session.run_command(args.command)
        if output:
            print(output)
    else:
        session.run_interactive()


if __name__ == '__main__':
    main()
