"""Command-line interface for daimon.

Run ``daimon`` with no arguments for interactive mode, or ``daimon COMMAND [ARGS]`` to run a single command.
"""


import argparse
from dataclasses import dataclass
import logging
import random
import sys
from typing import Callable, Dict, List
from terminaltables import AsciiTable
from daimon.api import Daimon, Error
from daimon.conf import DaimonConf, ConfError
from daimon.stores.base import StoreError


logger = logging.getLogger(__name__)

LINES = [
    'Boopy stoopy',
    'Shloop',
]


class CommandError(Exception):
    """Raised when a command fails; the message is meant for the user."""


class ArgumentError(CommandError):
    """Raised when a command is unknown or given too few arguments."""


class Quit(Exception):
    """Raised by the quit commands to leave interactive mode."""


@dataclass
class Command:
    name: str
    func: Callable[[List[str], Daimon], int]
    description: str
    usage: str
    min_args: int = 0
    failure: str = 'command failed'
    """Prefix for error messages when the underlying operation fails."""


def _print_lines(lines: List[str], empty: str = None) -> None:
    if not lines and empty:
        print(empty)
    for line in lines:
        print(line)


def _new_note(args, dm: Daimon) -> int:
    dm.create_note(args[0], ' '.join(args[1:]))
    return 0


def _edit_note(args, dm: Daimon) -> int:
    dm.edit_note(args[0])
    return 0


def _print_note(args, dm: Daimon) -> int:
    note = dm.read_note(args[0])
    print('')
    print(note.decode('utf-8', errors='replace'))
    return 0


def _rename_note(args, dm: Daimon) -> int:
    dm.rename_note(args[0], args[1])
    return 0


def _list_notes(args, dm: Daimon) -> int:
    _print_lines(dm.list_notes(args[0] if args else '.'))
    return 0


def _delete_note(args, dm: Daimon) -> int:
    dm.delete_note(args[0])
    return 0


def _new_project(args, dm: Daimon) -> int:
    dm.create_project(args[0])
    return 0


def _list_projects(args, dm: Daimon) -> int:
    _print_lines(dm.list_projects(args[0] if args else '.'), '<No Projects>')
    return 0


def _delete_project(args, dm: Daimon) -> int:
    dm.delete_project(args[0])
    return 0


def _list_all(args, dm: Daimon) -> int:
    _print_lines(dm.list_all(), '<No Entries>')
    return 0


def _list_all_notes(args, dm: Daimon) -> int:
    _print_lines(dm.list_all_notes(), '<No Notes>')
    return 0


def _list_all_projects(args, dm: Daimon) -> int:
    _print_lines(dm.list_all_projects(), '<No Projects>')
    return 0


def _say_line(args, dm: Daimon) -> int:
    print(random.choice(LINES))
    return 0


def _clear(args, dm: Daimon) -> int:
    print('\033[H\033[2J', end='', flush=True)
    return 0


def _quit(args, dm: Daimon) -> int:
    raise Quit()


COMMANDS: Dict[str, Command] = {c.name: c for c in [
    Command('n', _new_note, 'Creates a new note, or appends to an existing one.', 'n <NOTE_NAME> <NOTE_CONTENT>',
            min_args=2, failure='could not create note'),
    Command('e', _edit_note, 'Opens a note in your $EDITOR.', 'e <NOTE_NAME>',
            min_args=1, failure='could not open note'),
    Command('p', _print_note, 'Prints a note.', 'p <NOTE_NAME>',
            min_args=1, failure='could not read note'),
    Command('mv', _rename_note, 'Renames a note, creating projects as needed.', 'mv <NOTE_NAME> <NEW_NAME>',
            min_args=2, failure='could not rename note'),
    Command('l', _list_notes, 'Lists notes, optionally in a project.', 'l [PROJECT_NAME]',
            failure='could not list notes'),
    Command('d', _delete_note, 'Deletes a note.', 'd <NOTE_NAME>',
            min_args=1, failure='could not delete note'),
    Command('np', _new_project, 'Creates a new project.', 'np <PROJECT_NAME>',
            min_args=1, failure='could not create project'),
    Command('lp', _list_projects, 'Lists projects in the root, or subprojects of the given project.',
            'lp [PROJECT_NAME]', failure='could not list projects'),
    Command('dp', _delete_project, 'Deletes a project and everything in it.', 'dp <PROJECT_NAME>',
            min_args=1, failure='could not delete project'),
    Command('la', _list_all, 'Lists all notes and projects.', 'la', failure='could not list notes and projects'),
    Command('lan', _list_all_notes, 'Lists all notes in the root, projects, and subprojects.', 'lan',
            failure='could not list notes'),
    Command('lap', _list_all_projects, 'Lists all projects and subprojects.', 'lap',
            failure='could not list projects'),
    Command('line', _say_line, 'Says a line.', 'line'),
    Command('c', _clear, 'Clears the terminal.', 'c'),
    Command('q', _quit, 'Quits interactive mode.', 'q'),
    Command('quit', _quit, 'Quits interactive mode.', 'quit'),
    Command('exit', _quit, 'Quits interactive mode.', 'exit'),
]}

HELP_NAMES = ('h', 'help')


def intro() -> None:
    print('daimon: A handy little note-taking assistant')
    print('============================================')


def print_help() -> None:
    intro()
    print('SYNOPSIS:')
    print('\tdaimon [COMMAND] [ARGS]\n')
    print('\tCalling daimon without any arguments starts it in interactive mode\n')
    data = [('Command', 'Description', 'Usage'),
            ('h, help', 'Displays this help message.', 'h|help')]
    data += [(c.name, c.description, c.usage) for c in COMMANDS.values()]
    print(AsciiTable(data, 'Commands').table)


def run_command(dm: Daimon, name: str, args: List[str]) -> int:
    """Runs one command and returns its exit status.

    Raises :exc:`CommandError` if the command is unknown, has too few arguments, or fails,
    and :exc:`Quit` for the quit commands.
    """
    if name in HELP_NAMES:
        print_help()
        return 0
    cmd = COMMANDS.get(name)
    if not cmd:
        raise ArgumentError(f"I don't understand: {name}")
    if len(args) < cmd.min_args:
        raise ArgumentError(f'not enough arguments. Usage: {cmd.usage}')
    logger.debug('running %s %s', name, args)
    try:
        return cmd.func(args, dm)
    except (StoreError, Error) as e:
        raise CommandError(f'{cmd.failure}: {e}') from e


class _ArgumentParser(argparse.ArgumentParser):
    """Exits with status 1 on bad options, like every other daimon error."""
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f'{self.prog}: error: {message}\n')


def argparser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='daimon',
        description='A handy little note-taking assistant. Notes are kept as Markdown files under $DAIMON_DIR.',
        epilog=f'Commands: h, {", ".join(COMMANDS)}. Run "daimon help" for details.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log file operations to stderr.')
    parser.add_argument('command', nargs='?', help='Command to run. If omitted, starts interactive mode.')
    parser.add_argument('args', nargs=argparse.REMAINDER, help='Arguments for the command.')
    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.command in HELP_NAMES:
        print_help()
        return 0

    try:
        conf = DaimonConf.for_user()
    except ConfError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return 1

    with conf.instantiate() as dm:
        if not args.command:
            from daimon import repl
            repl.run(dm)
            return 0
        try:
            return run_command(dm, args.command, args.args)
        except Quit:
            return 0
        except CommandError as e:
            print(f'ERROR: {e}', file=sys.stderr)
            return 1
