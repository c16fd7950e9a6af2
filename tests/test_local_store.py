from counselor_dashboard.state.settings_store import SettingsStore
from counselor_dashboard.storage.local_store import LocalSlot, get_conn

import pytest


def test_empty_slot_loads_none(slot_factory):
    assert slot_factory("empty").load() is None


def test_save_overwrites(slot_factory):
    slot = slot_factory("a")
    slot.save({"n": 1})
    slot.save({"n": 2})
    assert slot.load() == {"n": 2}


def test_clear(slot_factory):
    slot = slot_factory("a")
    slot.save({"n": 1})
    slot.clear()
    assert slot.load() is None


def test_corrupt_blob_reads_as_empty(db_file):
    slot = LocalSlot("bad", db_file=db_file)
    with get_conn(db_file) as conn:
        conn.execute("INSERT INTO slots(name, value) VALUES(?, ?)", ("bad", "{not json"))
    assert slot.load() is None


# -----------------------------
# settings store
# -----------------------------
def test_settings_defaults():
    s = SettingsStore()
    assert (s.currency, s.dark_mode, s.language, s.timezone) == ("GHS", False, "en", "Africa/Accra")


def test_settings_persist(slot_factory):
    s = SettingsStore(slot_factory("settings-storage"))
    s.set_currency("USD")
    s.set_language("fr")
    s.set_timezone("Europe/London")
    assert s.toggle_dark_mode() is True

    restored = SettingsStore(slot_factory("settings-storage"))

    assert restored.currency == "USD"
    assert restored.language == "fr"
    assert restored.timezone == "Europe/London"
    assert restored.dark_mode is True
    assert slot_factory("settings-storage").load()["darkMode"] is True


@pytest.mark.parametrize(
    "setter, value",
    [("set_currency", "JPY"), ("set_language", "de"), ("set_timezone", "Mars/Base")],
)
def test_settings_reject_unknown_values(setter, value):
    s = SettingsStore()
    with pytest.raises(ValueError):
        getattr(s, setter)(value)


def test_settings_reset_clears_slot(slot_factory):
    s = SettingsStore(slot_factory("settings-storage"))
    s.set_currency("EUR")
    s.toggle_dark_mode()

    s.reset()

    assert (s.currency, s.dark_mode) == ("GHS", False)
    assert slot_factory("settings-storage").load() is None
    assert SettingsStore(slot_factory("settings-storage")).currency == "GHS"
