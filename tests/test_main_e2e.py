import pytest


def test_pack_and_unpack_roundtrip(tmp_path, values_file, m, capsys):
    values = [0, 2, 4, 10, 11, 125, 32767, 32768, 32769]
    src = values_file(values)
    packed = tmp_path / "out.sq"

    assert m.main(["pack", str(src), "-o", str(packed)]) == 0
    assert packed.exists() and packed.stat().st_size > 0
    stats = capsys.readouterr().out
    assert "Size after packing" in stats

    dest = tmp_path / "back.txt"
    assert m.main(["unpack", str(packed), "-o", str(dest)]) == 0
    assert [int(x) for x in dest.read_text().split()] == values


def test_delta_pack_to_stdout(tmp_path, values_file, m, capsys):
    values = [3, 0, 0, 3, 1, 2, 3, 3, 2, 1]
    src = values_file(values)
    packed = tmp_path / "out.sq"

    assert m.pack_file(str(src), str(packed), delta=True, quiet=True)
    assert capsys.readouterr().out == ""

    assert m.unpack_file(str(packed), None, delta=True)
    assert capsys.readouterr().out == "".join(f"{v}\n" for v in values)


def test_pack_empty_input(tmp_path, values_file, m):
    src = values_file([])
    packed = tmp_path / "empty.sq"
    assert m.pack_file(str(src), str(packed), delta=False, quiet=False)

    dest = tmp_path / "back.txt"
    assert m.unpack_file(str(packed), str(dest), delta=False)
    assert dest.read_text() == ""


@pytest.mark.parametrize("values", [[5, 3, 9], [1, 1 << 30]])
def test_pack_reports_rejected_values(tmp_path, values_file, m, capsys, values):
    src = values_file(values)
    packed = tmp_path / "out.sq"
    assert m.main(["p", str(src), "-o", str(packed)]) == 1
    assert "[!]" in capsys.readouterr().out
    assert not packed.exists()


def test_missing_and_corrupt_files(tmp_path, m, capsys):
    assert not m.pack_file(
        str(tmp_path / "nope.txt"), str(tmp_path / "x.sq"), False, True
    )
    assert not m.unpack_file(str(tmp_path / "nope.sq"), None, False)

    bad = tmp_path / "bad.sq"
    bad.write_bytes(b"\x80")
    assert not m.unpack_file(str(bad), None, False)
    out = capsys.readouterr().out
    assert out.count("[!]") == 3


def test_unwritable_output_reports_error(tmp_path, values_file, m, capsys):
    src = values_file([1, 2, 3])
    missing_dir = tmp_path / "nodir" / "o.sq"
    assert m.main(["pack", str(src), "-o", str(missing_dir)]) == 1
    assert "[!]" in capsys.readouterr().out

    packed = tmp_path / "ok.sq"
    assert m.main(["pack", str(src), "-o", str(packed), "-q"]) == 0
    assert m.main(["unpack", str(packed), "-o", str(tmp_path)]) == 1
    assert "[!]" in capsys.readouterr().out
