"""
Unit tests for the local document store.

Covers the key/value file, the mock document, demo-mode sign-in and
sessions, plan upgrades, data variations and the export/import path into
the relational database.
"""

import json
from datetime import datetime, timedelta

import pytest

from fitcoach.models.profile import Profile, TrainerProfile
from fitcoach.models.user import User
from fitcoach.services.auth import AuthService
from fitcoach.services.local_storage import (
    AUTH_KEY,
    DATA_VERSION,
    DEMO_TRAINER_ID,
    STORAGE_KEY,
    InvalidCredentialsError,
    KeyValueFile,
    LocalDataError,
    LocalDataStore,
    RecordNotFoundError,
    UserAlreadyExistsError,
    create_mock_data,
    import_into_database,
    parse_iso,
    to_iso,
    to_millis,
)

NOW = datetime(2024, 5, 15, 12, 0, 0)


class Clock:
    """Mutable clock for moving time forward inside a test."""

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def store(tmp_path, clock):
    return LocalDataStore(KeyValueFile(str(tmp_path / "storage.json")), clock=clock, session_hours=24)


class TestKeyValueFile:
    """Test the file-backed key/value storage."""

    def test_set_get_and_remove(self, tmp_path):
        storage = KeyValueFile(str(tmp_path / "kv.json"))

        assert storage.get_item("missing") is None

        storage.set_item("a", "1")
        storage.set_item("b", "2")
        assert storage.get_item("a") == "1"

        storage.remove_item("a")
        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_values_survive_a_new_instance(self, tmp_path):
        path = str(tmp_path / "kv.json")
        KeyValueFile(path).set_item("key", "value")

        assert KeyValueFile(path).get_item("key") == "value"

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        """
        Test a corrupt storage file.

        This test ensures that an unreadable file behaves like an empty
        store instead of raising.
        """
        path = tmp_path / "kv.json"
        path.write_text("{not json", encoding="utf-8")

        storage = KeyValueFile(str(path))

        assert storage.get_item("anything") is None
        storage.set_item("fresh", "yes")
        assert json.loads(path.read_text(encoding="utf-8")) == {"fresh": "yes"}


class TestTimestamps:
    def test_to_iso_uses_milliseconds_and_z_suffix(self):
        assert to_iso(datetime(2024, 5, 1, 9, 0, 0, 123456)) == "2024-05-01T09:00:00.123Z"

    def test_parse_iso_round_trip(self):
        value = datetime(2024, 5, 1, 9, 30, 0)
        assert parse_iso(to_iso(value)) == value
        assert parse_iso(None) is None
        assert parse_iso("") is None

    def test_to_millis(self):
        assert to_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000


class TestMockData:
    def test_mock_document_shape(self):
        """
        Test the demo document.

        This test ensures that the mock data holds the three demo accounts,
        the five-student roster and activity for the demo trainer.
        """
        data = create_mock_data(NOW)

        assert data["dataVersion"] == DATA_VERSION
        assert data["auth_session"] is None
        assert len(data["users"]) == 8
        assert len(data["students"]) == 5
        assert len(data["sessions"]) == 6
        assert len(data["payments"]) == 3
        assert {s["trainer_id"] for s in data["students"]} == {DEMO_TRAINER_ID}
        assert data["trainer_profiles"][0]["plan"] == "pro"

    def test_sessions_embed_student_names(self):
        data = create_mock_data(NOW)
        first = data["sessions"][0]
        assert first["profiles"] == {"first_name": "Ana", "last_name": "Silva"}


class TestLocalDataStoreDocument:
    def test_initialize_data_seeds_once(self, store):
        assert store.get_data() is None

        store.initialize_data()
        data = store.get_data()
        data["students"] = []
        store.set_data(data)
        store.initialize_data()

        assert store.get_data()["students"] == []

    def test_set_data_stamps_last_updated(self, store, clock):
        store.initialize_data()
        clock.now = NOW + timedelta(hours=1)

        store.set_data(store.get_data())

        assert store.get_data()["lastUpdated"] == to_iso(clock.now)

    def test_mode_flag(self, store):
        assert store.should_use_local_storage() is False

        store.enable_local_storage_mode()
        assert store.should_use_local_storage() is True
        assert store.get_data() is not None

        store.disable_local_storage_mode()
        assert store.should_use_local_storage() is False

    def test_clear_data_removes_document_and_session(self, store):
        store.initialize_data()
        store.quick_login("trainer")

        store.clear_data()

        assert store.get_data() is None
        assert store.get_current_session() is None
        assert store.storage.get_item(STORAGE_KEY) is None

    def test_corrupt_document_reads_as_none(self, store):
        store.storage.set_item(STORAGE_KEY, "{broken")
        assert store.get_data() is None


class TestLocalDataStoreAuth:
    def test_sign_in_known_email(self, store):
        """
        Test demo sign-in.

        This test ensures that any known email starts a session with mock
        tokens valid for the configured number of hours.
        """
        store.initialize_data()

        session = store.sign_in("trainer@fitcoach.com", "whatever")

        assert session["user"]["id"] == DEMO_TRAINER_ID
        assert session["access_token"] == f"mock_token_{DEMO_TRAINER_ID}_{to_millis(NOW)}"
        assert session["refresh_token"].startswith(f"mock_refresh_{DEMO_TRAINER_ID}_")
        assert session["expires_at"] == to_millis(NOW) + 24 * 60 * 60 * 1000
        assert store.get_current_session() == session

    def test_sign_in_unknown_email(self, store):
        store.initialize_data()

        with pytest.raises(InvalidCredentialsError):
            store.sign_in("nobody@example.com", "x")

    def test_expired_session_is_signed_out(self, store, clock):
        store.initialize_data()
        store.sign_in("admin@fitcoach.com", "admin123")

        clock.now = NOW + timedelta(hours=25)

        assert store.get_current_session() is None
        assert store.storage.get_item(AUTH_KEY) is None

    def test_sign_up_trainer_starts_on_free_plan(self, store):
        session = store.sign_up("new@example.com", "pw123456", "New", "Trainer", "trainer")

        user_id = session["user"]["id"]
        assert user_id == f"trainer_{to_millis(NOW)}"
        trainer_profile = store.get_trainer_profile_by_user_id(user_id)
        assert trainer_profile["plan"] == "free"
        assert trainer_profile["max_students"] == 3
        assert trainer_profile["ai_credits"] == 0
        assert store.get_profile_by_user_id(user_id)["role"] == "trainer"
        assert store.get_current_trainer_id() == user_id

    def test_sign_up_student_is_attached_to_demo_trainer(self, store):
        session = store.sign_up("pupil@example.com", "pw123456", "Pupil", "One", "student")

        student_profile = store.get_student_profile_by_user_id(session["user"]["id"])
        assert student_profile["trainer_id"] == DEMO_TRAINER_ID
        assert student_profile["status"] == "active"

    def test_sign_up_duplicate_email(self, store):
        store.initialize_data()

        with pytest.raises(UserAlreadyExistsError):
            store.sign_up("trainer@fitcoach.com", "pw", "Dup", "User", "trainer")

    def test_quick_login(self, store):
        store.initialize_data()

        session = store.quick_login("student")

        assert session["user"]["email"] == "student@fitcoach.com"

    def test_quick_login_unknown_role(self, store):
        store.initialize_data()

        with pytest.raises(LocalDataError):
            store.quick_login("superuser")

    def test_quick_login_without_data(self, store):
        with pytest.raises(RecordNotFoundError):
            store.quick_login("admin")

    def test_current_trainer_defaults_to_demo_trainer(self, store):
        store.initialize_data()
        assert store.get_current_trainer_id() == DEMO_TRAINER_ID

        store.quick_login("admin")
        assert store.get_current_trainer_id() == DEMO_TRAINER_ID

    def test_demo_credentials_are_a_copy(self, store):
        credentials = store.get_demo_credentials()
        credentials["admin"]["password"] = "changed"

        assert store.get_demo_credentials()["admin"]["password"] == "admin123"


class TestLocalDataStoreMutations:
    def test_upgrade_trainer_plan(self, store):
        store.initialize_data()

        trainer_profile = store.upgrade_trainer_plan(DEMO_TRAINER_ID, "elite")

        assert trainer_profile["plan"] == "elite"
        assert trainer_profile["max_students"] == 0
        assert trainer_profile["ai_credits"] == 100
        assert trainer_profile["active_until"] == to_iso(NOW + timedelta(days=30))
        assert store.get_trainer_profile_by_user_id(DEMO_TRAINER_ID)["plan"] == "elite"

    def test_upgrade_unknown_plan(self, store):
        store.initialize_data()

        with pytest.raises(LocalDataError):
            store.upgrade_trainer_plan(DEMO_TRAINER_ID, "platinum")

    def test_upgrade_unknown_trainer(self, store):
        store.initialize_data()

        with pytest.raises(RecordNotFoundError):
            store.upgrade_trainer_plan("trainer_missing", "pro")

    def test_update_student_profile_keeps_id(self, store):
        store.initialize_data()

        updated = store.update_student_profile("student_1", {"id": "hijack", "status": "paused"})

        assert updated["id"] == "student_1"
        assert updated["status"] == "paused"
        assert store.get_student_profile_by_user_id("student_1")["status"] == "paused"

    def test_update_unknown_student_profile(self, store):
        store.initialize_data()

        with pytest.raises(RecordNotFoundError):
            store.update_student_profile("student_missing", {"status": "paused"})

    @pytest.mark.parametrize(
        "variation, expected",
        [
            ("full", {"students": 5, "sessions": 6, "payments": 3}),
            ("minimal", {"students": 1, "sessions": 2, "payments": 1}),
            ("empty", {"students": 0, "sessions": 0, "payments": 0}),
        ],
    )
    def test_data_variations(self, store, variation, expected):
        store.add_data_variation(variation)

        data = store.get_data()
        for key, count in expected.items():
            assert len(data[key]) == count
        assert len(data["users"]) == 8

    def test_unknown_data_variation(self, store):
        with pytest.raises(LocalDataError):
            store.add_data_variation("huge")


class TestExportImport:
    def test_export_for_database(self, store):
        assert store.export_for_database() == {}

        store.initialize_data()
        export = store.export_for_database()

        assert len(export["payment_intents"]) == 3
        assert "profiles" not in export["sessions"][0]
        assert set(export["diet_plans"][0]) == {"id", "trainer_id", "student_id", "name", "created_at"}

    def test_import_into_database(self, store, db_session):
        """
        Test importing the demo document into the database.

        This test ensures that every exported row is inserted, demo accounts
        keep their demo password and a second import inserts nothing.
        """
        store.initialize_data()

        summary = import_into_database(db_session, store.export_for_database())

        assert summary["users"] == 8
        assert summary["profiles"] == 8
        assert summary["trainer_profiles"] == 1
        assert summary["student_profiles"] == 6
        assert summary["sessions"] == 6
        assert summary["payment_intents"] == 3
        assert summary["notifications"] == 3
        assert summary["system_settings"] == 3

        trainer = db_session.query(User).filter(User.email == "trainer@fitcoach.com").first()
        assert AuthService.verify_password("trainer123", trainer.hashed_password)
        assert db_session.query(TrainerProfile).filter(TrainerProfile.id == DEMO_TRAINER_ID).count() == 1
        assert db_session.query(Profile).count() == 8

        again = store.import_into_database(db_session)
        assert all(count == 0 for count in again.values())
