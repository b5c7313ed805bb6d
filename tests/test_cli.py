from listiq.cli import main
from listiq.data.store import SqlStateStore
from listiq.workspace import ComparisonWorkspace


def test_payment(capsys):
    assert main(["payment", "--price", "120000", "--down", "0", "--rate", "0", "--term", "10"]) == 0
    out = capsys.readouterr().out
    assert "$    1,000.00" in out
    assert "Total:" in out


def test_export_and_import(tmp_path, capsys, listings):
    db = f"sqlite:///{tmp_path / 'cli.db'}"
    ws = ComparisonWorkspace(SqlStateStore(db))
    ws.properties.extend(listings)
    ws.save_search("Austin")

    assert main(["--db", db, "export", "Austin", "--code"]) == 0
    code = capsys.readouterr().out.strip()

    other = f"sqlite:///{tmp_path / 'other.db'}"
    assert main(["--db", other, "import", code]) == 0
    assert 'Imported "Austin (Imported)" with 3 properties.' in capsys.readouterr().out

    assert main(["--db", other, "export", "Austin (Imported)"]) == 0
    assert '"listiq-shared-search"' in capsys.readouterr().out


def test_export_unknown(tmp_path, capsys):
    assert main(["--db", f"sqlite:///{tmp_path / 'cli.db'}", "export", "Nope"]) == 1
    assert "No saved search" in capsys.readouterr().err


def test_import_garbage(tmp_path, capsys):
    assert main(["--db", f"sqlite:///{tmp_path / 'cli.db'}", "import", "garbage"]) == 1
    assert "Invalid import code" in capsys.readouterr().err
