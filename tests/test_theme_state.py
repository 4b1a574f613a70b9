import pytest

from conftest import MemoryPreferences
from drishti.shared.domain.theme.theme_state import ThemeState, detect_os_dark_mode
from drishti.shared.infrastructure.persistence.duckdb_service import DuckDBPersistenceService


class BrokenPreferences:
    def get_preference(self, key):
        raise OSError("storage unavailable")

    def set_preference(self, key, value):
        raise OSError("storage unavailable")


@pytest.mark.parametrize(
    "stored, os_dark, expected",
    [
        ("dark", False, True),
        ("light", True, False),
        (None, True, True),
        (None, False, False),
    ],
)
def test_initial_value_precedence(stored, os_dark, expected):
    prefs = MemoryPreferences({"theme": stored} if stored else None)

    theme = ThemeState(prefs, os_preference=lambda: os_dark)

    assert theme.dark is expected


def test_unrecognised_stored_value_means_light():
    theme = ThemeState(MemoryPreferences({"theme": "purple"}), os_preference=lambda: True)

    assert theme.dark is False


def test_toggle_persists_and_applies():
    prefs = MemoryPreferences()
    applied = []
    theme = ThemeState(prefs, os_preference=lambda: False, on_apply=applied.append)

    assert theme.toggle() is True
    assert prefs.values["theme"] == "dark"
    assert theme.toggle() is False
    assert prefs.values["theme"] == "light"
    assert applied == [True, False]


def test_persisted_value_survives_a_restart():
    prefs = MemoryPreferences()
    ThemeState(prefs, os_preference=lambda: False).toggle()

    assert ThemeState(prefs, os_preference=lambda: False).dark is True


def test_custom_preference_key():
    prefs = MemoryPreferences()
    ThemeState(prefs, key="ui.theme", os_preference=lambda: False).set(True)

    assert prefs.values == {"ui.theme": "dark"}


def test_storage_failures_never_raise():
    theme = ThemeState(BrokenPreferences(), os_preference=lambda: True)

    assert theme.dark is True
    assert theme.toggle() is False


def test_failing_os_probe_defaults_to_light():
    def probe():
        raise RuntimeError("no display")

    assert ThemeState(MemoryPreferences(), os_preference=probe).dark is False


def test_os_probe_override_and_gtk_variant(monkeypatch):
    assert detect_os_dark_mode(True) is True

    monkeypatch.setenv("GTK_THEME", "Adwaita:dark")
    assert detect_os_dark_mode() is True
    assert detect_os_dark_mode(False) is False

    monkeypatch.setenv("GTK_THEME", "Adwaita")
    assert detect_os_dark_mode() is False


def test_failing_apply_callback_does_not_escape_toggle():
    prefs = MemoryPreferences()

    def apply(dark):
        raise RuntimeError("window gone")

    theme = ThemeState(prefs, os_preference=lambda: False, on_apply=apply)

    assert theme.toggle() is True
    assert prefs.values["theme"] == "dark"


def test_toggle_survives_restart_on_duckdb_file(tmp_path):
    db_path = str(tmp_path / "prefs.duckdb")

    service = DuckDBPersistenceService(db_path)
    service.start()
    theme = ThemeState(service, os_preference=lambda: False)
    theme.toggle()
    theme.toggle()
    theme.toggle()
    service.close()

    reopened = DuckDBPersistenceService(db_path)
    reopened.start()
    try:
        assert reopened.get_preference("theme") == "dark"
        assert ThemeState(reopened, os_preference=lambda: False).dark is True
    finally:
        reopened.close()
