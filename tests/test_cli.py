from __future__ import annotations

import json

import pytest

from zec_staking import cli, yields
from zec_staking.params import DEFAULT_PARAMS, ScaleMode
from zec_staking.share import CopyResult


@pytest.fixture(autouse=True)
def fixed_supply(monkeypatch):
    monkeypatch.setattr(
        yields, "DEFAULT_CONSTANTS", yields.StakingConstants(total_shielded_zec=3_000_000.0)
    )


def _session(*argv: str):
    args = cli.build_parser().parse_args(list(argv))
    return cli.build_session(args)


def test_build_session_defaults():
    assert _session().params == DEFAULT_PARAMS


def test_build_session_applies_url_then_flags():
    session = _session("--url", "ps=40&c=5&dz=100", "--commission", "8", "--scale", "block")

    assert session.params.pct_shielded_staked == 40.0
    assert session.params.commission_pct == 8.0
    assert session.params.delegator_zec == 100.0
    assert session.params.scale_mode is ScaleMode.BLOCK


def test_build_session_reset_ignores_url():
    session = _session("--url", "c=50", "--reset")
    assert session.params == DEFAULT_PARAMS


def test_build_session_legacy_share():
    session = _session("--pct-staked", "50", "--legacy-share", "2")
    assert session.params.delegator_zec == pytest.approx(30_000.0)


def test_build_session_explicit_amount_beats_legacy_share():
    session = _session("--legacy-share", "2", "--delegator-zec", "75")
    assert session.params.delegator_zec == 75.0


def test_build_session_clamps_flags():
    session = _session("--commission", "400", "--pool-growth", "-2")

    assert session.params.commission_pct == 100.0
    assert session.params.pool_growth_pct == 0.0


def test_main_emits_json(capsys):
    exit_code = cli.main(["--json", "--months", "2", "--base-url", "https://calc.example.org/"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert payload["params"]["delegator_zec"] == 60.0
    assert payload["metrics"]["per_day_zec"] == pytest.approx(0.02592)
    assert len(payload["projection"]) == 2
    assert payload["share_url"].startswith("https://calc.example.org/?")


def test_main_prints_tables(capsys):
    cli.main(["--months", "1"])

    out = capsys.readouterr().out
    assert "Annualized yield" in out
    assert "Share link" in out


def test_months_must_be_non_negative():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--months", "-1"])


def test_main_json_with_copy_keeps_stdout_valid(monkeypatch, capsys):
    copied = []

    def fake_copy(url):
        copied.append(url)
        return CopyResult(ok=True, method="clipboard", message="Copied share link via pbcopy")

    monkeypatch.setattr(cli, "copy_link", fake_copy)

    cli.main(["--json", "--copy", "--months", "0"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["copy"]["ok"] is True
    assert payload["copy"]["method"] == "clipboard"
    assert payload["copy"]["fallback_path"] is None
    assert copied == [payload["share_url"]]
