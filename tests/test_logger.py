import logging

from movie_search.logger import setup_logging


def test_setup_logging_levels(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)
    monkeypatch.setenv("LOG_LEVEL", "debug")

    setup_logging()

    assert root.level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING
    assert logging.getLogger("telegram").level == logging.WARNING


def test_setup_logging_unknown_level_defaults_to_info(monkeypatch) -> None:
    root = logging.getLogger()
    monkeypatch.setattr(root, "level", root.level)

    setup_logging("verbose")

    assert root.level == logging.INFO
