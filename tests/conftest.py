"""Shared fixtures for emlmbox tests."""

import pytest


SAMPLE_MBOX = (
    b"From a@b Mon Jan  1 00:00:00 2024\n"
    b"Subject: hi\n"
    b"\n"
    b">From the start\n"
    b"\n"
    b"From c@d Tue Jan  2 00:00:00 2024\n"
    b"Subject: two\n"
    b"body\n"
)


@pytest.fixture
def sample_bytes():
    return SAMPLE_MBOX


@pytest.fixture
def sample_mbox(tmp_path, sample_bytes):
    path = tmp_path / "sample.mbox"
    path.write_bytes(sample_bytes)
    return path


@pytest.fixture
def eml_dir(tmp_path):
    """Directory with three eml files created out of lexical order."""
    directory = tmp_path / "eml"
    directory.mkdir()
    (directory / "b.eml").write_bytes(b"Subject: second\n\nFrom the middle\n")
    (directory / "a.eml").write_bytes(b"Subject: first\r\n\r\nhello\r\n")
    (directory / "c.eml").write_bytes(b"Subject: third\n\n>From quoted\n>>From twice\n")
    return directory
