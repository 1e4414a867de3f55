"""
Smoke test for the benchmark CLI with generated demo keys.
"""

from __future__ import annotations

from symmetric_encryption import benchmark
from symmetric_encryption.config import ACTIVE_KEY_IDS_ENV_VAR, KEYS_ENV_VAR


def test_run_benchmark_with_demo_keys(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(KEYS_ENV_VAR, raising=False)
    monkeypatch.delenv(ACTIVE_KEY_IDS_ENV_VAR, raising=False)
    monkeypatch.setattr("builtins.input", lambda prompt="": "20")

    benchmark.run_benchmark()

    out = capsys.readouterr().out
    assert "generated demo keys" in out
    assert "20/20 records need re-encryption" in out
    assert "Re-encrypted 20 records, 0 still stale" in out
    assert "[ERROR]" not in out
    assert "BENCHMARK COMPLETE" in out
