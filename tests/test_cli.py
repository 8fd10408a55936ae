from __future__ import annotations

import json

from font_grabber import cli
from font_grabber.acquisition import BROWSER, STATIC
from font_grabber.catalog import FontCatalog


def test_cli_prints_catalog(monkeypatch, capsys) -> None:
    calls = []

    def fake_detect(url, acquirer):
        calls.append((url, acquirer.name))
        return FontCatalog(computed_fonts=["Inter"])

    monkeypatch.setattr(cli, "detect_fonts", fake_detect)

    assert cli.main(["example.com"]) == 0
    assert calls == [("https://example.com", STATIC)]
    out = json.loads(capsys.readouterr().out)
    assert out["fonts"]["computedFonts"] == [{"name": "Inter", "type": "computed-font"}]


def test_cli_browser_flag_and_failure(monkeypatch, capsys) -> None:
    def failing(url, acquirer):
        assert acquirer.name == BROWSER
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "detect_fonts", failing)

    assert cli.main(["https://example.com", "--browser"]) == 1
    assert "Failed to detect fonts: boom" in capsys.readouterr().err
