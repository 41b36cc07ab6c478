import logging
from pathlib import Path

from hskdeck.config import DEFAULT_STORAGE_PATH, Settings, configure_logging, load_settings


def test_defaults_without_flags_or_environment() -> None:
    settings = load_settings({})
    assert settings == Settings()
    assert settings.storage_path == DEFAULT_STORAGE_PATH
    assert settings.lookup_command == "hskindex"
    assert settings.return_to_menu is False
    assert settings.log_file is None


def test_environment_overrides_defaults() -> None:
    settings = load_settings({"HSKDECK_STORAGE": "/data/hsk.json", "HSKDECK_LOOKUP": "cedict", "HSKDECK_LOG": "x.log"})
    assert settings.storage_path == Path("/data/hsk.json")
    assert settings.lookup_command == "cedict"
    assert settings.log_file == Path("x.log")


def test_flags_override_environment() -> None:
    settings = load_settings(
        {"HSKDECK_STORAGE": "/data/hsk.json", "HSKDECK_LOOKUP": "cedict"},
        storage="local.json",
        lookup_command="hskindex2",
        return_to_menu=True,
    )
    assert settings.storage_path == Path("local.json")
    assert settings.lookup_command == "hskindex2"
    assert settings.return_to_menu is True


def test_blank_environment_values_fall_back() -> None:
    settings = load_settings({"HSKDECK_STORAGE": "  ", "HSKDECK_LOOKUP": ""})
    assert settings.storage_path == DEFAULT_STORAGE_PATH
    assert settings.lookup_command == "hskindex"


def test_configure_logging_writes_package_logs_to_file(tmp_path: Path) -> None:
    log_path = tmp_path / "hskdeck.log"
    package_logger = logging.getLogger("hskdeck")
    before = list(package_logger.handlers)
    try:
        configure_logging(log_path)
        logging.getLogger("hskdeck.store").debug("loaded %d levels", 2)
        for handler in package_logger.handlers:
            handler.flush()
        assert "DEBUG hskdeck.store: loaded 2 levels" in log_path.read_text(encoding="utf-8")
    finally:
        for handler in package_logger.handlers:
            if handler not in before:
                handler.close()
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)


def test_configure_logging_without_file_adds_nothing() -> None:
    package_logger = logging.getLogger("hskdeck")
    before = list(package_logger.handlers)
    configure_logging(None)
    assert package_logger.handlers == before
