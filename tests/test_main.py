import locale

from movie_search import main


def test_init_locale_uses_environment_collation(monkeypatch) -> None:
    calls = []
    monkeypatch.setattr(main.locale, "setlocale", lambda *args: calls.append(args))

    main.init_locale()

    assert calls == [(locale.LC_COLLATE, "")]


def test_init_locale_tolerates_missing_locale(monkeypatch, caplog) -> None:
    def fail(*_args):
        raise locale.Error("unsupported locale setting")

    monkeypatch.setattr(main.locale, "setlocale", fail)

    main.init_locale()

    assert "Could not set collation locale" in caplog.text
