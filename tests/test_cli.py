from __future__ import annotations

import logging

from vocab_cards.__main__ import build_parser, main


def test_list_command_prints_lessons(temp_store, capsys, monkeypatch):
    monkeypatch.setenv("VOCAB_CARDS_DATA_DIR", str(temp_store.data_dir))

    code = main(["list", "--data-dir", str(temp_store.data_dir)])

    assert code == 0
    assert capsys.readouterr().out.split() == ["lesson1", "lesson2"]


def test_list_command_reports_missing_directory(tmp_path, capsys, monkeypatch):
    monkeypatch.setenv("VOCAB_CARDS_DATA_DIR", str(tmp_path))
    code = main(["list", "--data-dir", str(tmp_path / "nowhere")])

    assert code == 1
    assert "cannot read data directory" in capsys.readouterr().err


def test_serve_arguments():
    args = build_parser().parse_args(["serve", "--port", "4000", "--host", "0.0.0.0"])
    assert (args.command, args.port, args.host) == ("serve", 4000, "0.0.0.0")


def test_configure_logging_installs_one_handler():
    from vocab_cards.logging_setup import configure_logging

    configure_logging("DEBUG")
    logger = configure_logging("warning")

    assert logger.name == "vocab_cards"
    assert logger.level == logging.WARNING
    assert len(logger.handlers) == 1
