import pytest
from daimon.conf import DaimonConf, FSStoreConf, MemoryStoreConf


@pytest.fixture
def notes_env(fs, monkeypatch):
    """Points DAIMON_DIR at /notes on the fake filesystem and clears editor/history overrides."""
    monkeypatch.setenv('DAIMON_DIR', '/notes')
    monkeypatch.delenv('EDITOR', raising=False)
    monkeypatch.delenv('DAIMON_HISTORY', raising=False)
    fs.create_dir('/notes')
    return fs


@pytest.fixture
def fs_dm(fs):
    return DaimonConf(store_conf=FSStoreConf(root='/notes'), history_path=None).instantiate()


@pytest.fixture
def memory_dm():
    return DaimonConf(store_conf=MemoryStoreConf(), history_path=None).instantiate()
