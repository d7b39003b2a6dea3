import os
from pathlib import Path
import pytest
from daimon.conf import FSStoreConf
from daimon.models import Entry
from daimon.stores.base import NotFoundError, StoreIOError


def store():
    return FSStoreConf(root='/notes').instantiate()


def test_resolve(fs):
    s = store()
    assert s.root == '/notes/'
    assert s.resolve('.') == '/notes/'
    assert s.resolve('a/b') == '/notes/a/b'
    assert s.resolve('a//b/./c') == '/notes/a/b/c'
    assert s.resolve('a/../b') == '/notes/b'
    assert s.resolve_note('a/b') == '/notes/a/b.md'


def test_ensure_dir_sets_mode_on_every_created_directory(fs):
    os.umask(0o022)
    store().ensure_dir('a/b')
    for path in ['/notes', '/notes/a', '/notes/a/b']:
        assert os.stat(path).st_mode & 0o777 == 0o750


def test_ensure_dir_blocked_by_file(fs):
    fs.create_file('/notes/a')
    with pytest.raises(StoreIOError) as exc:
        store().ensure_dir('a/b')
    assert exc.value.path == '/notes/a/b'
    assert isinstance(exc.value.cause, OSError)


def test_write_append_creates_files(fs):
    store().write_append('work/standup', 'fixed it\n')
    assert Path('/notes/work/standup.md').read_text() == 'fixed it\n'
    assert Path('/notes/work').is_dir()


def test_rename_moves_file(fs):
    fs.create_file('/notes/old.md', contents='hi\n')
    store().rename('old', 'sub/new')
    assert not Path('/notes/old.md').exists()
    assert Path('/notes/sub/new.md').read_text() == 'hi\n'


def test_rename_overwrites_destination(fs):
    fs.create_file('/notes/one.md', contents='one\n')
    fs.create_file('/notes/two.md', contents='two\n')
    store().rename('one', 'two')
    assert Path('/notes/two.md').read_text() == 'one\n'


def test_remove_tree_missing_is_noop(fs):
    fs.create_dir('/notes')
    store().remove_tree('never/existed')


def test_list_dir_skips_unaddressable_entries(fs):
    fs.create_file('/notes/visible.md')
    fs.create_file('/notes/.hidden.md')
    fs.create_file('/notes/.md')
    fs.create_file('/notes/readme.txt')
    fs.create_dir('/notes/.git')
    fs.create_dir('/notes/project')
    fs.create_dir('/notes/odd.md')
    assert set(store().list_dir('.')) == {Entry('visible'), Entry('project', is_project=True),
                                          Entry('odd.md', is_project=True)}


def test_list_dir_does_not_treat_symlinks_to_directories_as_projects(fs):
    fs.create_dir('/elsewhere')
    fs.create_dir('/notes/real')
    fs.create_symlink('/notes/linked', '/elsewhere')
    assert list(store().list_dir('.')) == [Entry('real', is_project=True)]


def test_list_dir_on_note_file(fs):
    fs.create_file('/notes/note')
    with pytest.raises(NotFoundError):
        list(store().list_dir('note'))


def test_write_append_closes_real_file_when_write_fails(fs, mocker):
    s = store()
    opened = []
    original = s.open_for_append

    def open_for_append(logical):
        file = original(logical)
        opened.append(file)
        return file

    mocker.patch.object(s, 'open_for_append', side_effect=open_for_append)
    with pytest.raises(TypeError):
        s.write_append('note', 12)
    assert opened[0].closed
