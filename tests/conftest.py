"""Shared fixtures: fake afl-fuzz and target builds on disk."""

import stat

import pytest


def _make_binary(path, content=b"\x7fELF"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def make_binary():
    return _make_binary


@pytest.fixture
def afl_fuzz(tmp_path):
    return _make_binary(tmp_path / "afl" / "afl-fuzz")


@pytest.fixture
def target(tmp_path):
    return _make_binary(tmp_path / "build" / "target")


@pytest.fixture
def san_target(tmp_path):
    return _make_binary(tmp_path / "build" / "target_asan")


@pytest.fixture
def cmplog_target(tmp_path):
    return _make_binary(tmp_path / "build" / "target_cmplog")


@pytest.fixture
def dictionary(tmp_path):
    path = tmp_path / "fuzz.dict"
    path.write_text('kw1="GET"\nkw2="POST"\n')
    return path


@pytest.fixture
def campaign_dirs(tmp_path):
    return tmp_path / "corpus", tmp_path / "findings"
