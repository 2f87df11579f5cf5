from pathlib import Path

import pytest

from canvasgrab import cli
from canvasgrab.providers import detect_provider
from canvasgrab.providers.bookwalker import DEFAULT_URL, BookwalkerProvider, RunResult


class RecordingProvider:
    calls = []
    result = RunResult()

    @staticmethod
    def can_handle(url):
        return True

    def fetch(self, url, options, *, headless=True, chrome=None):
        self.calls.append((url, options, headless, chrome))
        return self.result


@pytest.fixture
def recorder(monkeypatch):
    RecordingProvider.calls = []
    RecordingProvider.result = RunResult()
    monkeypatch.setattr(cli, "detect_provider", lambda url: RecordingProvider)
    return RecordingProvider


def test_detect_provider():
    assert detect_provider(DEFAULT_URL) is BookwalkerProvider
    assert detect_provider("https://example.com/doc") is None


def test_defaults(recorder):
    cli.main([])
    url, options, headless, chrome = recorder.calls[0]
    assert url == DEFAULT_URL
    assert options.output_dir == Path(".")
    assert options.settle == "poll"
    assert headless is True
    assert chrome is None


def test_flags(recorder, tmp_path):
    cli.main([
        "https://bookwalker.jp/x/",
        "-o", str(tmp_path),
        "--timeout", "5",
        "--settle", "fixed",
        "--settle-delay", "2",
        "--headed",
    ])
    url, options, headless, _ = recorder.calls[0]
    assert url == "https://bookwalker.jp/x/"
    assert options.output_dir == tmp_path
    assert (options.timeout, options.settle, options.settle_delay) == (5.0, "fixed", 2.0)
    assert headless is False


def test_failed_run_exits_non_zero(recorder):
    recorder.result = RunResult(failure=RuntimeError("boom"))
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 1


def test_unsupported_url(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["https://example.com/doc"])
    assert excinfo.value.code == 1
    assert "no provider can handle URL" in capsys.readouterr().err


def test_missing_system_chrome(recorder, monkeypatch, capsys):
    monkeypatch.setattr(cli, "find_chrome", lambda: None)
    with pytest.raises(SystemExit):
        cli.main(["--chrome"])
    assert recorder.calls == []
    assert "could not find Google Chrome" in capsys.readouterr().err


def test_bad_settle_mode(recorder):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--settle", "sometimes"])
    assert excinfo.value.code == 2
