import pytest

pytest.importorskip("PyQt6.QtCore")

from lyric_scroll import main as main_module  # noqa: E402


def test_arg_parser_defaults(tmp_path):
    args = main_module.build_arg_parser().parse_args([str(tmp_path / "song.lrc")])
    assert args.speed == 1.0
    assert args.line_height == 42
    assert args.viewport_height is None
    assert args.offset_steps == 0


def test_missing_file_returns_error(tmp_path):
    assert main_module.main([str(tmp_path / "missing.lrc")]) == 1


def test_plays_short_file_to_the_end(tmp_path, caplog):
    lrc = tmp_path / "song.lrc"
    lrc.write_text("[00:00.00]One\n[00:00.10]Two\n", encoding="utf-8")
    settings = tmp_path / "settings.json"
    settings.write_text('{"user_scroll_quiet_period_ms": 500}', encoding="utf-8")

    with caplog.at_level("INFO", logger="lyric_scroll.main"):
        exit_code = main_module.main([str(lrc), "--speed", "10", "--settings", str(settings)])

    assert exit_code == 0
    assert "Reproducción simulada terminada" in caplog.text
    assert "[2/2] [00:00.10]Two" in caplog.text
