from pathlib import Path
from unittest.mock import Mock
from prompt_toolkit.document import Document
from daimon.repl import DaimonCompleter, run
from daimon.stores.base import NotFoundError


def complete(completer, text):
    return [c.text for c in completer.get_completions(Document(text), None)]


def setup_notes(dm):
    dm.create_note('foo', 'x')
    dm.create_note('work/standup', 'x')
    dm.create_project('work/archive')


def test_complete_commands(memory_dm):
    completer = DaimonCompleter(memory_dm)
    assert set(complete(completer, 'l')) == {'l', 'la', 'lan', 'lap', 'lp', 'line'}
    assert 'help' in complete(completer, '')
    assert complete(completer, 'mv') == ['mv']


def test_complete_arguments(memory_dm):
    setup_notes(memory_dm)
    completer = DaimonCompleter(memory_dm)
    assert complete(completer, 'p ') == ['foo', 'work/standup']
    assert complete(completer, 'd wo') == ['work/standup']
    assert complete(completer, 'e ') == ['foo', 'work/', 'work/standup', 'work/archive/']
    assert complete(completer, 'lp ') == ['work/', 'work/archive/']
    assert complete(completer, 'mv foo w') == ['work/', 'work/archive/']
    assert complete(completer, 'mv  foo  ') == ['work/', 'work/archive/']
    assert complete(completer, 'mv foo work/ extra') == []
    assert complete(completer, 'la ') == []
    assert complete(completer, 'bogus ') == []


def test_completion_start_position(memory_dm):
    setup_notes(memory_dm)
    completions = list(DaimonCompleter(memory_dm).get_completions(Document('p work/st'), None))
    assert [(c.text, c.start_position) for c in completions] == [('work/standup', -7)]


def test_completion_is_not_cached(memory_dm):
    completer = DaimonCompleter(memory_dm)
    assert complete(completer, 'p ') == []
    memory_dm.create_note('fresh', 'x')
    assert complete(completer, 'p ') == ['fresh']


def test_completion_listing_failure(memory_dm, mocker):
    mocker.patch.object(memory_dm, 'list_all_notes', side_effect=NotFoundError('Project does not exist', '.'))
    assert complete(DaimonCompleter(memory_dm), 'p ') == []


def session_with(*responses):
    session = Mock()
    session.prompt.side_effect = responses
    return session


def test_run(fs_dm, capsys):
    session = session_with('n foo hello world', '', '   ', 'p foo', 'bogus', 'n "unterminated', KeyboardInterrupt(),
                           'n bar "quoted words"', 'q', 'n never reached')
    run(fs_dm, session)
    out, err = capsys.readouterr()
    assert out.startswith('daimon: A handy little note-taking assistant\n')
    assert '\nhello world\n\n' in out
    assert "ERROR: I don't understand: bogus\n" in err
    assert 'ERROR: No closing quotation\n' in err
    assert Path('/notes/bar.md').read_text() == 'quoted words\n'
    assert not Path('/notes/never.md').exists()
    assert session.prompt.call_count == 9


def test_run_reports_errors_and_continues(memory_dm, capsys):
    session = session_with('p missing', 'n', 'n ok fine', 'exit')
    run(memory_dm, session)
    out, err = capsys.readouterr()
    assert 'ERROR: could not read note: Note does not exist: missing\n' in err
    assert 'ERROR: not enough arguments. Usage: n <NOTE_NAME> <NOTE_CONTENT>\n' in err
    assert 'ERROR' not in out
    assert memory_dm.read_note('ok') == b'fine\n'


def test_run_stops_on_eof(memory_dm):
    session = session_with('n a b', EOFError())
    run(memory_dm, session)
    assert memory_dm.list_notes() == ['a']
