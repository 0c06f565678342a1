from pathlib import Path

from gastos.discovery import list_ofx_files


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


def test_lists_ofx_files_recursively_ignoring_suffix_case(tmp_path: Path):
    a = _touch(tmp_path / "jan.ofx")
    b = _touch(tmp_path / "2024" / "fev.OFX")
    c = _touch(tmp_path / "2024" / "mar" / "cartao.Ofx")
    _touch(tmp_path / "notes.txt")
    _touch(tmp_path / "extrato.ofx.bak")

    assert list_ofx_files(tmp_path) == sorted([a, b, c])


def test_missing_directory_yields_no_files(tmp_path: Path):
    assert list_ofx_files(tmp_path / "does-not-exist") == []


def test_file_instead_of_directory_yields_no_files(tmp_path: Path):
    f = _touch(tmp_path / "single.ofx")
    assert list_ofx_files(f) == []


def test_symlinked_file_is_listed(tmp_path: Path):
    real = _touch(tmp_path / "data" / "real.ofx")
    inbox = tmp_path / "inbox"
    inbox.mkdir()
    link = inbox / "link.ofx"
    link.symlink_to(real)

    assert list_ofx_files(inbox) == [link]
