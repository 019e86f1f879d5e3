"""Tests for storage/profile_store (dbm store + JSON backup)."""

import dbm
import json
import threading

import pytest

from interactive_learning.models.user_profile import UserProfile
from interactive_learning.storage.profile_store import USER_PROFILE_KEY, ProfileStore


@pytest.fixture
def store(tmp_path):
    return ProfileStore(tmp_path)


def _registered_profile(**overrides) -> UserProfile:
    data = {
        "language": "Español",
        "name": "Ana",
        "favorite_topic": "Solar",
        "motivation": "curiosity",
    }
    data.update(overrides)
    return UserProfile(**data)


class TestLoad:
    def test_defaults_when_nothing_saved(self, store):
        profile = store.load()
        assert profile == UserProfile()
        assert profile.login_count == 0
        assert profile.solar_score == 0

    def test_new_user_is_not_registered(self, store):
        assert store.is_registered() is False

    def test_falls_back_to_backup_when_store_missing(self, tmp_path):
        store = ProfileStore(tmp_path)
        store.backup_path.write_text(
            json.dumps({"name": "Luca", "language": "Italiano", "windEnergyScore": 80}),
            encoding="utf-8",
        )
        profile = store.load()
        assert profile.name == "Luca"
        assert profile.wind_energy_score == 80
        assert profile.solar_score == 0

    def test_corrupt_backup_gives_defaults(self, store):
        store.backup_path.write_text("{not json", encoding="utf-8")
        assert store.load() == UserProfile()

    def test_corrupt_store_entry_gives_defaults(self, store):
        with dbm.open(str(store.db_path), "c") as db:
            db[USER_PROFILE_KEY] = b"garbage"
        assert store.load() == UserProfile()

    def test_out_of_range_score_gives_defaults(self, store):
        store.backup_path.write_text(json.dumps({"solarScore": 250}), encoding="utf-8")
        assert store.load() == UserProfile()

    def test_unknown_keys_ignored(self, store):
        store.backup_path.write_text(
            json.dumps({"name": "Ana", "legacyField": True}), encoding="utf-8"
        )
        assert store.load().name == "Ana"


class TestSave:
    def test_round_trip(self, store):
        profile = _registered_profile(solar_score=60, login_count=3)
        store.save(profile)
        assert store.load() == profile

    def test_writes_camel_case_backup(self, store):
        store.save(_registered_profile(wind_energy_score=40))
        data = json.loads(store.backup_path.read_text(encoding="utf-8"))
        assert data["favoriteTopic"] == "Solar"
        assert data["windEnergyScore"] == 40
        assert "lastLoginDate" in data

    def test_overwrites_instead_of_accumulating(self, store):
        store.save(_registered_profile(name="First"))
        store.save(_registered_profile(name="Second"))
        assert store.load().name == "Second"
        data = json.loads(store.backup_path.read_text(encoding="utf-8"))
        assert data["name"] == "Second"

    def test_backup_failure_does_not_lose_profile(self, store, monkeypatch):
        def fail(payload):
            raise OSError("disk full")

        monkeypatch.setattr(store, "_write_backup", fail)
        profile = _registered_profile(solar_score=80)
        store.save(profile)
        assert not store.backup_path.exists()
        assert store.load() == profile

    def test_store_wins_over_backup(self, store):
        store.save(_registered_profile(name="Primary"))
        store.backup_path.write_text(json.dumps({"name": "Stale"}), encoding="utf-8")
        assert store.load().name == "Primary"

    def test_no_temp_files_left_behind(self, store, tmp_path):
        store.save(_registered_profile())
        store.save(_registered_profile())
        leftovers = [p for p in tmp_path.iterdir() if p.suffix == ".json"]
        assert leftovers == [store.backup_path]


class TestUpdate:
    def test_merges_fields(self, store):
        store.save(_registered_profile())
        updated = store.update(solar_score=60)
        assert updated.solar_score == 60
        assert updated.name == "Ana"
        assert store.load().solar_score == 60

    def test_rejects_invalid_values(self, store):
        with pytest.raises(ValueError):
            store.update(wind_energy_score=101)
        assert store.load().wind_energy_score == 0


class TestRegistration:
    def test_registered_after_name_and_language(self, store):
        store.update(name="Ana", language="Español")
        assert store.is_registered() is True

    @pytest.mark.parametrize(
        "name,language",
        [("", "Español"), ("Ana", ""), ("   ", "Español"), ("Ana", "\t ")],
    )
    def test_blank_fields_not_registered(self, store, name, language):
        store.update(name=name, language=language)
        assert store.is_registered() is False


class TestRecordLogin:
    def test_increments_count_and_stamps_date(self, store):
        first = store.record_login()
        second = store.record_login()
        assert first.login_count == 1
        assert second.login_count == 2
        assert second.last_login_date != ""

    def test_preserves_onboarding_answers(self, store):
        store.save(_registered_profile(login_count=1))
        profile = store.record_login()
        assert profile.login_count == 2
        assert profile.name == "Ana"
        assert profile.language == "Español"
        assert profile.favorite_topic == "Solar"
        assert profile.motivation == "curiosity"


class TestClear:
    def test_restores_defaults(self, store):
        store.save(_registered_profile(solar_score=90))
        store.clear()
        assert store.load() == UserProfile()
        assert not store.backup_path.exists()

    def test_clear_without_data(self, store):
        store.clear()
        assert store.load() == UserProfile()


class TestSharedLock:
    def test_stores_on_one_path_share_a_lock(self, tmp_path):
        first = ProfileStore(tmp_path)
        second = ProfileStore(tmp_path)
        other = ProfileStore(tmp_path / "elsewhere")
        assert first._lock is second._lock
        assert first._lock is not other._lock

    def test_concurrent_logins_from_two_stores(self, tmp_path):
        ProfileStore(tmp_path).save(_registered_profile())
        stores = [ProfileStore(tmp_path), ProfileStore(tmp_path)]

        def login_many(store):
            for _ in range(100):
                store.record_login()

        threads = [threading.Thread(target=login_many, args=(s,)) for s in stores]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        profile = ProfileStore(tmp_path).load()
        assert profile.login_count == 200
        assert profile.name == "Ana"
        assert profile.language == "Español"
