import csv
import json

from rngkit.bench.throughput import _parse_num_list, bench_one, main


def test_parse_num_list_suffixes():
    assert _parse_num_list("64, 1k,2M,,") == [64, 1000, 2_000_000]


def test_bench_one_counts_refills():
    point = bench_one("int", 64, 160)
    assert point.kind == "int"
    assert point.ops == 160
    # 16 draws per refill, plus the odd rejection
    assert point.refills >= 10


def test_main_writes_reports(tmp_path, capsys):
    out_csv = tmp_path / "bench.csv"
    out_json = tmp_path / "bench.json"
    rc = main(["--buffer-sizes", "64,256", "--ops", "50", "--kinds", "bool,string16",
               "--csv", str(out_csv), "--json", str(out_json)])
    assert rc == 0
    assert "ops/s" in capsys.readouterr().out
    with open(out_csv, newline="") as f:
        rows = list(csv.reader(f))
    assert len(rows) == 1 + 4
    data = json.loads(out_json.read_text())
    assert {(p["kind"], p["buffer_size"]) for p in data} == {
        ("bool", 64), ("string16", 64), ("bool", 256), ("string16", 256)
    }


def test_main_rejects_unknown_kind(capsys):
    assert main(["--kinds", "uuid", "--ops", "1"]) == 2
    assert "unknown kinds" in capsys.readouterr().err
