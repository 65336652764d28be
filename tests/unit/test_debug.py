import core.debug as debug


class TestDebugLog:
    def test_silent_when_disabled(self, monkeypatch, capsys):
        monkeypatch.setattr(debug, "_DEBUG", False)
        debug.debug_log("hidden")
        assert capsys.readouterr().out == ""

    def test_prints_when_enabled(self, monkeypatch, capsys):
        monkeypatch.setattr(debug, "_DEBUG", True)
        monkeypatch.setattr(debug, "LOG_FILE_NAME", "smp_debug_test.log")
        try:
            debug.debug_log("visible")
            assert "[DEBUG] visible" in capsys.readouterr().out
        finally:
            log = debug.Path(debug.__file__).resolve().parents[1] / "smp_debug_test.log"
            if log.exists():
                log.unlink()
