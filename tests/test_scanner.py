import pytest

from offset_sampler.errors import InputError
from offset_sampler.scanner import (
    FileMapping,
    iter_buffered_line_offsets,
    iter_mapped_line_offsets,
    open_input,
)


def buffered_offsets(path, max_line_length=65536):
    with open_input(path) as handle:
        return list(iter_buffered_line_offsets(handle, max_line_length))


def mapped_offsets(path, chunk_size=1 << 24):
    with FileMapping(path) as mapping:
        return list(iter_mapped_line_offsets(mapping, chunk_size=chunk_size))


@pytest.mark.parametrize(
    "content, buffered, mapped",
    [
        (b"", [], []),
        (b"abc", [0], []),
        (b"\n\n\n", [0, 1, 2], [0, 1, 2]),
        (b"a\nbb\nccc\n", [0, 2, 5], [0, 2, 5]),
        (b"a\nbb\nccc", [0, 2, 5], [0, 2]),
    ],
)
def test_scanners_agree_except_on_unterminated_last_line(make_file, content, buffered, mapped):
    path = make_file(content)
    assert buffered_offsets(path) == buffered
    assert mapped_offsets(path) == mapped


def test_mapped_scan_across_chunk_boundaries(make_file):
    path = make_file(b"a\nbb\nccc\n")
    assert mapped_offsets(path, chunk_size=3) == [0, 2, 5]
    assert mapped_offsets(path, chunk_size=1) == [0, 2, 5]


def test_buffered_scan_splits_lines_longer_than_cap(make_file):
    path = make_file(b"abcdefghij\nxy\n")
    assert buffered_offsets(path, max_line_length=4) == [0, 4, 8, 11]


def test_mapped_scan_ignores_cap(make_file):
    path = make_file(b"abcdefghij\nxy\n")
    assert mapped_offsets(path) == [0, 11]


def test_buffered_scan_with_progress_bar(make_file, capsys):
    path = make_file(b"one\ntwo\n")
    with open_input(path) as handle:
        assert list(iter_buffered_line_offsets(handle, progress=True)) == [0, 4]
    assert "Scanning" in capsys.readouterr().err


def test_open_input_rejects_stdin():
    with pytest.raises(InputError, match="Stdin"):
        with open_input("-"):
            pass


def test_open_input_missing_file(tmp_path):
    with pytest.raises(InputError):
        with open_input(str(tmp_path / "missing.txt")):
            pass


def test_mapping_rejects_stdin():
    with pytest.raises(InputError, match="Stdin"):
        with FileMapping("-"):
            pass


def test_mapping_missing_file(tmp_path):
    with pytest.raises(InputError):
        with FileMapping(str(tmp_path / "missing.txt")):
            pass


def test_mapping_exposes_size_and_view(make_file):
    path = make_file(b"hello\n")
    with FileMapping(path) as mapping:
        assert mapping.size == 6
        assert mapping.view[:5] == b"hello"
        assert mapping.descriptor >= 0


def test_empty_file_maps_to_empty_view(make_file):
    with FileMapping(make_file(b"")) as mapping:
        assert mapping.size == 0
        assert mapping.view == b""


def test_mapping_released_when_body_raises(make_file):
    path = make_file(b"hello\n")
    with pytest.raises(RuntimeError):
        with FileMapping(path) as mapping:
            view = mapping.view
            raise RuntimeError("boom")
    assert view.closed
    assert mapping.view == b""
