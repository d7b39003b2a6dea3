"""Interactive mode: a prompt with history and tab-completion of note and project names."""

import logging
import re
import shlex
import sys
from typing import Callable, Dict, List, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.history import FileHistory, InMemoryHistory

from daimon.api import Daimon
from daimon.cli import COMMANDS, HELP_NAMES, CommandError, Quit, intro, run_command
from daimon.stores.base import StoreError


logger = logging.getLogger(__name__)

PROMPT = ANSI('\033[1;95m»\033[0m ')

Lister = Callable[[], List[str]]


def completion_sources(dm: Daimon) -> Dict[str, Sequence[Lister]]:
    """Maps each command to the listing used to complete each of its arguments, in order."""
    return {
        'n': (dm.list_all,),
        'e': (dm.list_all,),
        'p': (dm.list_all_notes,),
        'mv': (dm.list_all_notes, dm.list_all_projects),
        'l': (dm.list_all_projects,),
        'd': (dm.list_all_notes,),
        'np': (dm.list_all_projects,),
        'lp': (dm.list_all_projects,),
        'dp': (dm.list_all_projects,),
    }


class DaimonCompleter(Completer):
    """Completes command names, then note/project names depending on the command and argument position.

    Listings are re-read from the store on every request, so newly created notes show up immediately.
    """
    def __init__(self, dm: Daimon):
        self.sources = completion_sources(dm)

    def candidates(self, words: List[str]) -> List[str]:
        position = len(words) - 1
        if position == 0:
            return list(HELP_NAMES) + list(COMMANDS)
        listers = self.sources.get(words[0], ())
        if position > len(listers):
            return []
        try:
            return listers[position - 1]()
        except StoreError as e:
            logger.debug('completion listing failed: %s', e)
            return []

    def get_completions(self, document, complete_event):
        words = re.split(r'\s+', document.text_before_cursor.lstrip())
        word = words[-1]
        for candidate in self.candidates(words):
            if candidate.startswith(word):
                yield Completion(candidate, start_position=-len(word))


def make_session(dm: Daimon) -> PromptSession:
    path = dm.conf.history_path
    history = FileHistory(path) if path else InMemoryHistory()
    return PromptSession(history=history, completer=DaimonCompleter(dm),
                         complete_while_typing=False, enable_history_search=True)


def run(dm: Daimon, session: PromptSession = None) -> None:
    """Reads and runs commands until the user quits or sends EOF.

    Errors are printed and the prompt is shown again. Ctrl-C discards the current line.
    """
    if session is None:
        session = make_session(dm)
    intro()
    while True:
        try:
            text = session.prompt(PROMPT)
        except KeyboardInterrupt:
            continue
        except EOFError:
            break
        try:
            words = shlex.split(text)
        except ValueError as e:
            print(f'ERROR: {e}', file=sys.stderr)
            continue
        if not words:
            continue
        try:
            run_command(dm, words[0], words[1:])
        except Quit:
            break
        except CommandError as e:
            print(f'ERROR: {e}', file=sys.stderr)
