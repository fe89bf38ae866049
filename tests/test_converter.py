import pytest

from emlmbox.converter import eml_to_mbox, find_eml_files, iter_eml_messages, mbox_to_eml
from emlmbox.core import IoFailure, MalformedMbox, OutputExists, PLACEHOLDER_SEPARATOR


def eml_files(directory):
    return sorted(path.name for path in directory.iterdir())


def test_find_eml_files_order(eml_dir):
    (eml_dir / "sub").mkdir()
    (eml_dir / "sub" / "d.EML").write_bytes(b"Subject: fourth\n")
    (eml_dir / "notes.txt").write_bytes(b"not mail")

    found = find_eml_files(eml_dir)

    assert [path.relative_to(eml_dir).as_posix() for path in found] == [
        "a.eml", "b.eml", "c.eml", "sub/d.EML",
    ]


def test_find_eml_files_missing_directory(tmp_path):
    with pytest.raises(IoFailure) as excinfo:
        find_eml_files(tmp_path / "nope")
    assert excinfo.value.path == str(tmp_path / "nope")


def test_find_eml_files_rejects_file(tmp_path):
    path = tmp_path / "single.eml"
    path.write_bytes(b"x\n")
    with pytest.raises(IoFailure):
        find_eml_files(path)


def test_iter_eml_messages_missing_file(tmp_path):
    with pytest.raises(IoFailure):
        list(iter_eml_messages([tmp_path / "gone.eml"]))


def test_eml_to_mbox(eml_dir, tmp_path):
    output = tmp_path / "out.mbox"

    progress = eml_to_mbox(eml_dir, output)

    data = output.read_bytes()
    assert progress.exported_messages == 3
    assert progress.total_messages == 3
    assert progress.is_complete
    assert data.startswith(PLACEHOLDER_SEPARATOR + b"Subject: first\r\n")
    assert data.count(PLACEHOLDER_SEPARATOR) == 3
    assert b"\n>From the middle\n" in data
    assert b"\n>>From quoted\n>>>From twice\n" in data


def test_eml_mbox_eml_round_trip(eml_dir, tmp_path):
    mbox_path = tmp_path / "out.mbox"
    extracted = tmp_path / "extracted"

    eml_to_mbox(eml_dir, mbox_path)
    progress = mbox_to_eml(mbox_path, extracted)

    assert progress.exported_messages == 3
    assert eml_files(extracted) == ["0000.eml", "0001.eml", "0002.eml"]
    for original, copy in zip(["a.eml", "b.eml", "c.eml"], eml_files(extracted)):
        assert (extracted / copy).read_bytes() == (eml_dir / original).read_bytes()


def test_empty_directory_gives_empty_mbox(tmp_path):
    source = tmp_path / "empty"
    source.mkdir()
    output = tmp_path / "out.mbox"

    progress = eml_to_mbox(source, output)

    assert progress.exported_messages == 0
    assert output.read_bytes() == b""


def test_existing_mbox_needs_overwrite(eml_dir, tmp_path):
    output = tmp_path / "out.mbox"
    output.write_bytes(b"old")

    with pytest.raises(OutputExists):
        eml_to_mbox(eml_dir, output)
    assert output.read_bytes() == b"old"

    eml_to_mbox(eml_dir, output, overwrite=True)
    assert output.read_bytes().startswith(PLACEHOLDER_SEPARATOR)


def test_mbox_output_cannot_be_directory(eml_dir, tmp_path):
    with pytest.raises(IoFailure):
        eml_to_mbox(eml_dir, tmp_path, overwrite=True)


def test_mbox_to_eml(sample_mbox, tmp_path):
    output = tmp_path / "out"

    progress = mbox_to_eml(sample_mbox, output)

    assert progress.exported_messages == 2
    assert eml_files(output) == ["0000.eml", "0001.eml"]
    assert (output / "0000.eml").read_bytes() == b"Subject: hi\n\nFrom the start\n"
    assert (output / "0001.eml").read_bytes() == b"Subject: two\nbody"


def test_mbox_to_eml_numbering(sample_mbox, tmp_path):
    output = tmp_path / "out"
    mbox_to_eml(sample_mbox, output, precision=6, start_number=10)
    assert eml_files(output) == ["000010.eml", "000011.eml"]


def test_mbox_to_eml_bad_precision(sample_mbox, tmp_path):
    with pytest.raises(ValueError):
        mbox_to_eml(sample_mbox, tmp_path / "out", precision=0)


def test_mbox_to_eml_existing_directory(sample_mbox, tmp_path):
    output = tmp_path / "out"
    output.mkdir()
    mbox_to_eml(sample_mbox, output)

    with pytest.raises(OutputExists):
        mbox_to_eml(sample_mbox, output)

    progress = mbox_to_eml(sample_mbox, output, overwrite=True)
    assert progress.exported_messages == 2
    assert eml_files(output) == ["0000.eml", "0001.eml"]


def test_mbox_to_eml_missing_input(tmp_path):
    output = tmp_path / "out"
    with pytest.raises(IoFailure):
        mbox_to_eml(tmp_path / "missing.mbox", output)
    assert not output.exists()


def test_mbox_to_eml_malformed(tmp_path):
    source = tmp_path / "bad.mbox"
    source.write_bytes(b"Subject: lonely\n\nno separator here\n")
    with pytest.raises(MalformedMbox):
        mbox_to_eml(source, tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_mbox_to_eml_empty_input(tmp_path):
    source = tmp_path / "empty.mbox"
    source.write_bytes(b"")
    output = tmp_path / "out"

    progress = mbox_to_eml(source, output)

    assert progress.exported_messages == 0
    assert output.is_dir()
    assert eml_files(output) == []


def test_failed_eml_write_leaves_no_partial_file(sample_mbox, tmp_path):
    output = tmp_path / "out"
    output.mkdir()
    (output / "0000.eml").mkdir()

    with pytest.raises(IoFailure):
        mbox_to_eml(sample_mbox, output, overwrite=True)

    assert eml_files(output) == ["0000.eml"]
    assert (output / "0000.eml").is_dir()


def test_progress_callback(eml_dir, tmp_path):
    seen = []
    eml_to_mbox(
        eml_dir,
        tmp_path / "out.mbox",
        progress_callback=lambda progress: seen.append(
            (progress.exported_messages, progress.total_messages, progress.current_message)
        ),
    )
    assert [count for count, _, _ in seen] == [1, 2, 3]
    assert all(total == 3 for _, total, _ in seen)
    assert seen[0][2] == str(eml_dir / "a.eml")


def test_unterminated_eml_survives_round_trip(tmp_path):
    source = tmp_path / "eml"
    source.mkdir()
    (source / "a.eml").write_bytes(b"Subject: x\n\nbody without newline")
    (source / "b.eml").write_bytes(b"Subject: y\r\n\r\nends in a carriage return\r")

    eml_to_mbox(source, tmp_path / "out.mbox")
    mbox_to_eml(tmp_path / "out.mbox", tmp_path / "back")

    assert (tmp_path / "back" / "0000.eml").read_bytes() == b"Subject: x\n\nbody without newline"
    assert (tmp_path / "back" / "0001.eml").read_bytes() == b"Subject: y\r\n\r\nends in a carriage return\r"


def test_failed_export_removes_files_it_added(sample_mbox, tmp_path):
    output = tmp_path / "out"
    output.mkdir()
    (output / "0001.eml").mkdir()

    with pytest.raises(IoFailure):
        mbox_to_eml(sample_mbox, output, overwrite=True)

    assert eml_files(output) == ["0001.eml"]


def test_failed_eml_read_removes_mbox(eml_dir, tmp_path):
    (eml_dir / "z.eml").symlink_to(tmp_path / "nowhere.eml")
    output = tmp_path / "out.mbox"

    with pytest.raises(IoFailure) as excinfo:
        eml_to_mbox(eml_dir, output)

    assert excinfo.value.path == str(eml_dir / "z.eml")
    assert not output.exists()
