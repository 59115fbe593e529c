"""Local document store.

A file-backed stand-in for browser localStorage used in demo mode and tests.
Everything lives in one JSON document under the ``fitcoach_data`` key; the
signed-in session lives under ``fitcoach_auth``. The document mirrors the
relational schema closely enough to be exported and imported into the
database.
"""

import json
import os
import tempfile
import threading
from copy import deepcopy
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from fitcoach.core.config import settings
from fitcoach.db.base_class import to_naive_utc, utcnow
from fitcoach.models import (
    DietPlan,
    Notification,
    PaymentIntent,
    PaymentMethod,
    PaymentStatus,
    Profile,
    SessionStatus,
    StudentProfile,
    StudentStatus,
    SystemSetting,
    TrainerPlan,
    TrainerProfile,
    TrainingSession,
    User,
    UserRole,
    WorkoutPlan,
)
from fitcoach.services.auth import AuthService
from fitcoach.services.base import transaction
from fitcoach.services.plan_limits import PLAN_LIMITS, get_plan_limits
from fitcoach.utils.logger import storage_logger

STORAGE_KEY = "fitcoach_data"
AUTH_KEY = "fitcoach_auth"
USE_LOCAL_STORAGE_KEY = "fitcoach_use_localStorage"

DATA_VERSION = "2.0.0"

DEMO_ADMIN_ID = "admin_123"
DEMO_TRAINER_ID = "trainer_123"
DEMO_STUDENT_ID = "student_123"

DEMO_CREDENTIALS = {
    "admin": {"email": "admin@fitcoach.com", "password": "admin123"},
    "trainer": {"email": "trainer@fitcoach.com", "password": "trainer123"},
    "student": {"email": "student@fitcoach.com", "password": "student123"},
}

DEMO_USER_IDS = {
    "admin": DEMO_ADMIN_ID,
    "trainer": DEMO_TRAINER_ID,
    "student": DEMO_STUDENT_ID,
}

DOCUMENT_ARRAYS = (
    "users",
    "profiles",
    "trainer_profiles",
    "student_profiles",
    "students",
    "sessions",
    "payments",
    "diet_plans",
    "workout_plans",
    "notifications",
    "system_settings",
)

VARIATION_ARRAYS = ("students", "sessions", "payments", "diet_plans", "workout_plans")
MINIMAL_SLICES = {"students": 1, "sessions": 2, "payments": 1, "diet_plans": 1, "workout_plans": 1}

EPOCH = datetime(1970, 1, 1)


class LocalDataError(Exception):
    """Base error for the local document store."""


class RecordNotFoundError(LocalDataError):
    pass


class InvalidCredentialsError(LocalDataError):
    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class UserAlreadyExistsError(LocalDataError):
    def __init__(self, message: str = "User already exists"):
        super().__init__(message)


def to_iso(value: datetime) -> str:
    """Millisecond ISO-8601 UTC string, e.g. ``2024-05-01T09:00:00.000Z``."""
    value = to_naive_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return to_naive_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def to_millis(value: datetime) -> int:
    return int((to_naive_utc(value) - EPOCH).total_seconds() * 1000)


def _stamp(value: Optional[str]) -> datetime:
    return parse_iso(value) or utcnow()


class KeyValueFile:
    """
    String key/value pairs persisted as a single JSON object on disk.

    Mirrors the browser localStorage API. A missing file reads as empty; an
    unreadable or corrupt file is logged and also reads as empty.
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.RLock()

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = json.load(f)
        except (OSError, ValueError) as e:
            storage_logger.error(f"Error reading storage file: {e}", "FILE", path=self.path)
            return {}
        if not isinstance(content, dict):
            storage_logger.error("Storage file does not hold an object", "FILE", path=self.path)
            return {}
        return content

    def _write(self, content: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".fitcoach-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(content, f)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            content = self._read()
            content[key] = value
            self._write(content)

    def remove_item(self, key: str) -> None:
        with self._lock:
            content = self._read()
            if key in content:
                del content[key]
                self._write(content)


def _name(first_name: str, last_name: str) -> Dict[str, str]:
    return {"first_name": first_name, "last_name": last_name}


ROSTER = [
    # id, first name, last name, email, gender, days since joining
    ("student_1", "Ana", "Silva", "ana.silva@example.com", "female", 5),
    ("student_2", "Carlos", "Santos", "carlos.santos@example.com", "male", 10),
    ("student_3", "Maria", "Costa", "maria.costa@example.com", "female", 15),
    ("student_4", "João", "Oliveira", "joao.oliveira@example.com", "male", 2),
    ("student_5", "Fernanda", "Lima", "fernanda.lima@example.com", "female", 1),
]


def create_mock_data(now: datetime) -> Dict[str, Any]:
    """Demo document: three demo accounts, a roster of five students and their activity."""
    day = timedelta(days=1)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow = today + day
    next_week = today + 7 * day
    yesterday = now - day
    last_month = now - timedelta(days=30)
    stamp = to_iso(now)

    def at(moment: datetime) -> str:
        return to_iso(moment)

    users = [
        {
            "id": user_id,
            "email": DEMO_CREDENTIALS[role]["email"],
            "created_at": at(last_month),
            "email_confirmed_at": at(last_month),
            "last_sign_in_at": stamp,
        }
        for role, user_id in DEMO_USER_IDS.items()
    ]
    profiles = [
        {"id": DEMO_ADMIN_ID, "first_name": "Admin", "last_name": "FitCoach",
         "phone": "+55 11 99999-9999", "role": "admin"},
        {"id": DEMO_TRAINER_ID, "first_name": "Personal", "last_name": "Trainer",
         "phone": "+55 11 98888-8888", "role": "trainer"},
        {"id": DEMO_STUDENT_ID, "first_name": "Ana", "last_name": "Silva",
         "phone": "+55 11 97777-7777", "role": "student"},
    ]
    for profile in profiles:
        profile.update(created_at=at(last_month), updated_at=stamp)

    student_profiles = [
        {
            "id": DEMO_STUDENT_ID,
            "trainer_id": DEMO_TRAINER_ID,
            "gender": "female",
            "menstrual_cycle_tracking": True,
            "start_date": at(last_month),
            "status": "active",
            "created_at": at(last_month),
            "updated_at": stamp,
        }
    ]
    students = []
    for student_id, first_name, last_name, email, gender, days in ROSTER:
        joined = at(now - days * day)
        users.append({
            "id": student_id,
            "email": email,
            "created_at": joined,
            "email_confirmed_at": joined,
            "last_sign_in_at": None,
        })
        profiles.append({
            "id": student_id, "first_name": first_name, "last_name": last_name,
            "phone": None, "role": "student", "created_at": joined, "updated_at": stamp,
        })
        student_profiles.append({
            "id": student_id,
            "trainer_id": DEMO_TRAINER_ID,
            "gender": gender,
            "menstrual_cycle_tracking": False,
            "start_date": joined,
            "status": "active",
            "created_at": joined,
            "updated_at": stamp,
        })
        students.append({
            "id": student_id,
            "trainer_id": DEMO_TRAINER_ID,
            "status": "active",
            "created_at": joined,
            "profiles": _name(first_name, last_name),
        })

    names = {s["id"]: s["profiles"] for s in students}

    def session(session_id, student_id, scheduled_at, duration, status, created_at, updated_at=None):
        return {
            "id": session_id,
            "trainer_id": DEMO_TRAINER_ID,
            "student_id": student_id,
            "scheduled_at": at(scheduled_at),
            "duration_minutes": duration,
            "status": status,
            "created_at": at(created_at),
            "updated_at": at(updated_at) if updated_at else stamp,
            "profiles": dict(names[student_id]),
        }

    sessions = [
        session("session_1", "student_1", today.replace(hour=9), 60, "scheduled", now - 3 * day),
        session("session_2", "student_2", today.replace(hour=14, minute=30), 45, "scheduled", now - 2 * day),
        session("session_3", "student_3", tomorrow.replace(hour=10), 60, "scheduled", yesterday),
        session("session_4", "student_4", next_week.replace(hour=16), 50, "scheduled", now),
        session("session_5", "student_1", yesterday, 60, "completed", yesterday - day, yesterday),
        session("session_6", "student_2", yesterday - day, 45, "completed", yesterday - 2 * day, yesterday - day),
    ]

    payments = [
        {"id": "payment_1", "trainer_id": DEMO_TRAINER_ID, "amount": 15000,
         "status": "succeeded", "created_at": at(now - 5 * day)},
        {"id": "payment_2", "trainer_id": DEMO_TRAINER_ID, "amount": 12000,
         "status": "succeeded", "created_at": at(now - 10 * day)},
        {"id": "payment_3", "trainer_id": DEMO_TRAINER_ID, "amount": 18000,
         "status": "succeeded", "created_at": at(now - 15 * day)},
    ]

    def plan(plan_id, student_id, name, created_at):
        return {
            "id": plan_id,
            "trainer_id": DEMO_TRAINER_ID,
            "student_id": student_id,
            "name": name,
            "created_at": at(created_at),
            "profiles": dict(names[student_id]),
        }

    diet_plans = [
        plan("diet_1", "student_1", "Weight Loss Plan", now - 3 * day),
        plan("diet_2", "student_3", "Muscle Gain Diet", now - 7 * day),
        plan("diet_3", "student_5", "Detox Plan", yesterday),
    ]
    workout_plans = [
        plan("workout_1", "student_2", "Strength Training", now - 4 * day),
        plan("workout_2", "student_4", "Intensive Cardio", now - 2 * day),
        plan("workout_3", "student_1", "Functional Training", yesterday),
    ]

    notifications = [
        {"id": "notif_1", "user_id": DEMO_TRAINER_ID, "title": "New session scheduled",
         "message": "Ana Silva booked a session for today at 09:00", "type": "session",
         "read": False, "created_at": at(now - timedelta(hours=2))},
        {"id": "notif_2", "user_id": DEMO_STUDENT_ID, "title": "New workout plan",
         "message": "Your personal trainer created a new workout plan for you", "type": "workout",
         "read": False, "created_at": at(now - timedelta(hours=4))},
        {"id": "notif_3", "user_id": DEMO_ADMIN_ID, "title": "New trainer registered",
         "message": "A new personal trainer joined the platform", "type": "user",
         "read": True, "created_at": at(yesterday)},
    ]

    system_settings = [
        {"id": "setting_1", "key": "platform_commission", "value": "10",
         "description": "Platform commission in percent"},
        {"id": "setting_2", "key": "max_free_students", "value": "5",
         "description": "Maximum number of students on the free plan"},
        {"id": "setting_3", "key": "ai_credits_per_month", "value": "50",
         "description": "AI credits per month on the pro plan"},
    ]
    for setting in system_settings:
        setting.update(created_at=at(last_month), updated_at=stamp)

    return {
        "auth_session": None,
        "users": users,
        "profiles": profiles,
        "trainer_profiles": [
            {
                "id": DEMO_TRAINER_ID,
                "plan": "pro",
                "max_students": 40,
                "ai_credits": 25,
                "active_until": at(now + 30 * day),
                "avatar_url": None,
                "bio": "Personal trainer focused on weight loss and hypertrophy",
                "whatsapp_number": "+5511988888888",
                "created_at": at(last_month),
                "updated_at": stamp,
            }
        ],
        "student_profiles": student_profiles,
        "students": students,
        "sessions": sessions,
        "payments": payments,
        "diet_plans": diet_plans,
        "workout_plans": workout_plans,
        "notifications": notifications,
        "system_settings": system_settings,
        "lastUpdated": stamp,
        "dataVersion": DATA_VERSION,
    }


class LocalDataStore:
    """
    Demo-mode data layer over a ``KeyValueFile``.

    Args:
        storage: The key/value file holding the document and the session
        clock: Returns the current naive UTC time; injectable for tests
        session_hours: Lifetime of a local session
    """

    def __init__(
        self,
        storage: KeyValueFile,
        clock: Callable[[], datetime] = utcnow,
        session_hours: Optional[int] = None,
    ):
        self.storage = storage
        self.clock = clock
        self.session_hours = session_hours or settings.LOCAL_SESSION_HOURS

    @classmethod
    def from_settings(cls) -> "LocalDataStore":
        return cls(KeyValueFile(settings.LOCAL_STORAGE_PATH))

    def _now_millis(self) -> int:
        return to_millis(self.clock())

    # Mode flag

    def should_use_local_storage(self) -> bool:
        return self.storage.get_item(USE_LOCAL_STORAGE_KEY) == "true"

    def enable_local_storage_mode(self) -> None:
        self.storage.set_item(USE_LOCAL_STORAGE_KEY, "true")
        self.initialize_data()

    def disable_local_storage_mode(self) -> None:
        self.storage.set_item(USE_LOCAL_STORAGE_KEY, "false")

    # Document

    def initialize_data(self) -> None:
        """Seed the mock document when none exists yet."""
        if self.get_data() is None:
            storage_logger.info("Seeding mock data", "INIT")
            self.set_data(create_mock_data(self.clock()))

    def get_data(self) -> Optional[Dict[str, Any]]:
        raw = self.storage.get_item(STORAGE_KEY)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            storage_logger.error(f"Error reading document: {e}", "READ")
            return None

    def set_data(self, data: Dict[str, Any]) -> None:
        data["lastUpdated"] = to_iso(self.clock())
        self.storage.set_item(STORAGE_KEY, json.dumps(data))

    def _require_data(self) -> Dict[str, Any]:
        data = self.get_data()
        if data is None:
            raise LocalDataError("No local data available")
        return data

    # Sessions

    def _create_auth_session(self, user: Dict[str, Any]) -> Dict[str, Any]:
        millis = self._now_millis()
        return {
            "user": user,
            "access_token": f"mock_token_{user['id']}_{millis}",
            "refresh_token": f"mock_refresh_{user['id']}_{millis}",
            "expires_at": millis + self.session_hours * 60 * 60 * 1000,
            "token_type": "bearer",
        }

    def _set_auth_session(self, session: Dict[str, Any]) -> None:
        self.storage.set_item(AUTH_KEY, json.dumps(session))

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Start a session for a known email. Passwords are not checked in demo mode."""
        user = next((u for u in self.get_users() if u["email"] == email), None)
        if user is None:
            storage_logger.warning("Unknown email", "SIGN_IN", email=email)
            raise InvalidCredentialsError()

        session = self._create_auth_session(user)
        self._set_auth_session(session)
        storage_logger.success("Signed in", "SIGN_IN", user_id=user["id"])
        return session

    def sign_up(self, email: str, password: str, first_name: str, last_name: str, role: str) -> Dict[str, Any]:
        self.initialize_data()
        data = self._require_data()

        if any(u["email"] == email for u in data["users"]):
            raise UserAlreadyExistsError()

        now = self.clock()
        stamp = to_iso(now)
        user_id = f"{role}_{to_millis(now)}"

        user = {
            "id": user_id,
            "email": email,
            "created_at": stamp,
            "email_confirmed_at": stamp,
            "last_sign_in_at": stamp,
        }
        data["users"].append(user)
        data["profiles"].append({
            "id": user_id,
            "first_name": first_name,
            "last_name": last_name,
            "phone": None,
            "role": role,
            "created_at": stamp,
            "updated_at": stamp,
        })

        if role == "trainer":
            limits = PLAN_LIMITS[TrainerPlan.free]
            data["trainer_profiles"].append({
                "id": user_id,
                "plan": "free",
                "max_students": limits.max_students,
                "ai_credits": limits.ai_credits,
                "active_until": None,
                "avatar_url": None,
                "bio": None,
                "whatsapp_number": None,
                "created_at": stamp,
                "updated_at": stamp,
            })
        elif role == "student":
            data["student_profiles"].append({
                "id": user_id,
                "trainer_id": DEMO_TRAINER_ID,
                "gender": None,
                "menstrual_cycle_tracking": False,
                "start_date": stamp,
                "status": "active",
                "created_at": stamp,
                "updated_at": stamp,
            })

        self.set_data(data)
        storage_logger.success("Signed up", "SIGN_UP", user_id=user_id, role=role)

        session = self._create_auth_session(user)
        self._set_auth_session(session)
        return session

    def sign_out(self) -> None:
        self.storage.remove_item(AUTH_KEY)

    def get_current_session(self) -> Optional[Dict[str, Any]]:
        raw = self.storage.get_item(AUTH_KEY)
        if not raw:
            return None
        try:
            session = json.loads(raw)
        except ValueError as e:
            storage_logger.error(f"Error reading auth session: {e}", "SESSION")
            return None

        if self._now_millis() > session.get("expires_at", 0):
            storage_logger.info("Session expired", "SESSION")
            self.sign_out()
            return None
        return session

    def quick_login(self, role: str) -> Dict[str, Any]:
        """Sign in as one of the demo accounts."""
        user_id = DEMO_USER_IDS.get(role)
        if user_id is None:
            raise LocalDataError(f"Unknown demo role: {role}")
        user = next((u for u in self.get_users() if u["id"] == user_id), None)
        if user is None:
            raise RecordNotFoundError(f"{role.capitalize()} user not found")

        session = self._create_auth_session(user)
        self._set_auth_session(session)
        return session

    # Lookups

    def get_users(self) -> List[Dict[str, Any]]:
        data = self.get_data()
        return data.get("users", []) if data else []

    def get_profiles(self) -> List[Dict[str, Any]]:
        data = self.get_data()
        return data.get("profiles", []) if data else []

    def get_profile_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        return next((p for p in self.get_profiles() if p["id"] == user_id), None)

    def get_trainer_profile_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        data = self.get_data()
        if not data:
            return None
        return next((tp for tp in data["trainer_profiles"] if tp["id"] == user_id), None)

    def get_student_profile_by_user_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        data = self.get_data()
        if not data:
            return None
        return next((sp for sp in data["student_profiles"] if sp["id"] == user_id), None)

    def get_current_trainer_id(self) -> str:
        """The signed-in trainer, or the demo trainer for anyone else."""
        session = self.get_current_session()
        if session:
            profile = self.get_profile_by_user_id(session["user"]["id"])
            if profile and profile.get("role") == "trainer":
                return session["user"]["id"]
        return DEMO_TRAINER_ID

    @staticmethod
    def get_demo_credentials() -> Dict[str, Dict[str, str]]:
        return deepcopy(DEMO_CREDENTIALS)

    # Mutations

    def upgrade_trainer_plan(self, trainer_id: str, new_plan: str) -> Dict[str, Any]:
        try:
            plan = TrainerPlan(new_plan)
        except ValueError:
            raise LocalDataError(f"Unknown plan: {new_plan}")
        data = self._require_data()
        trainer_profile = next((tp for tp in data["trainer_profiles"] if tp["id"] == trainer_id), None)
        if trainer_profile is None:
            raise RecordNotFoundError("Trainer profile not found")

        limits = get_plan_limits(plan)
        now = self.clock()
        trainer_profile.update(
            plan=plan.value,
            max_students=limits.max_students,
            ai_credits=limits.ai_credits,
            active_until=to_iso(now + timedelta(days=30)),
            updated_at=to_iso(now),
        )
        self.set_data(data)
        storage_logger.info("Trainer plan upgraded", "PLAN", trainer_id=trainer_id, plan=plan.value)
        return trainer_profile

    def update_student_profile(self, student_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        data = self._require_data()
        student_profile = next((sp for sp in data["student_profiles"] if sp["id"] == student_id), None)
        if student_profile is None:
            raise RecordNotFoundError("Student profile not found")

        updates = {k: v for k, v in updates.items() if k != "id"}
        student_profile.update(updates, updated_at=to_iso(self.clock()))
        self.set_data(data)
        return student_profile

    def add_data_variation(self, variation: str) -> None:
        """Replace the document with the full, minimal or empty demo data set."""
        if variation not in ("empty", "minimal", "full"):
            raise LocalDataError(f"Unknown data variation: {variation}")

        data = create_mock_data(self.clock())
        if variation == "empty":
            for key in VARIATION_ARRAYS:
                data[key] = []
        elif variation == "minimal":
            for key, count in MINIMAL_SLICES.items():
                data[key] = data[key][:count]
        self.set_data(data)
        storage_logger.info("Data variation applied", "VARIATION", variation=variation)

    def clear_data(self) -> None:
        self.storage.remove_item(STORAGE_KEY)
        self.storage.remove_item(AUTH_KEY)
        storage_logger.warning("Local data cleared", "CLEAR")

    # Export

    def export_for_database(self) -> Dict[str, Any]:
        """The document reshaped into relational tables."""
        data = self.get_data()
        if not data:
            return {}

        return {
            "users": [dict(u) for u in data["users"]],
            "profiles": [dict(p) for p in data["profiles"]],
            "trainer_profiles": [dict(tp) for tp in data["trainer_profiles"]],
            "student_profiles": [
                {key: sp.get(key) for key in (
                    "id", "trainer_id", "gender", "menstrual_cycle_tracking",
                    "start_date", "status", "created_at", "updated_at",
                )}
                for sp in data["student_profiles"]
            ],
            "sessions": [
                {key: s.get(key) for key in (
                    "id", "trainer_id", "student_id", "scheduled_at",
                    "duration_minutes", "status", "created_at", "updated_at",
                )}
                for s in data["sessions"]
            ],
            "payment_intents": [dict(p) for p in data["payments"]],
            "diet_plans": [
                {key: p.get(key) for key in ("id", "trainer_id", "student_id", "name", "created_at")}
                for p in data["diet_plans"]
            ],
            "workout_plans": [
                {key: p.get(key) for key in ("id", "trainer_id", "student_id", "name", "created_at")}
                for p in data["workout_plans"]
            ],
            "notifications": [dict(n) for n in data["notifications"]],
            "system_settings": [dict(s) for s in data["system_settings"]],
        }

    def import_into_database(self, db: Session) -> Dict[str, int]:
        return import_into_database(db, self.export_for_database())


def import_into_database(db: Session, export: Dict[str, Any]) -> Dict[str, int]:
    """
    Insert an exported document into the relational database.

    Rows whose id (or user email, or setting key) already exists are skipped,
    so importing twice is harmless. A document user whose email belongs to a
    different database account is dropped together with every row owned by
    that user; students of a dropped trainer are imported unassigned. Demo
    accounts get their demo password; everyone else gets the temporary
    student password.

    Returns:
        Number of rows inserted per table
    """
    summary: Dict[str, int] = {}
    passwords = {c["email"]: c["password"] for c in DEMO_CREDENTIALS.values()}
    hashes: Dict[str, str] = {}

    def password_hash(email: str) -> str:
        password = passwords.get(email, settings.STUDENT_TEMP_PASSWORD)
        if password not in hashes:
            hashes[password] = AuthService.get_password_hash(password)
        return hashes[password]

    def insert(table: str, model, rows: List[Dict[str, Any]], build: Callable[[Dict[str, Any]], Any]) -> None:
        count = 0
        for row in rows:
            if db.query(model).filter(model.id == row["id"]).first():
                continue
            db.add(build(row))
            count += 1
        db.flush()
        summary[table] = count

    with transaction(db, "importing local data"):
        new_users = []
        skipped = set()
        for u in export.get("users", []):
            existing = db.query(User).filter(User.email == u["email"]).first()
            if existing is None:
                new_users.append(u)
            elif existing.id != u["id"]:
                skipped.add(u["id"])
                storage_logger.warning("Email already registered", "IMPORT", user_id=u["id"], email=u["email"])

        def owned(table: str, *keys: str) -> List[Dict[str, Any]]:
            rows = export.get(table, [])
            return [r for r in rows if not any(r.get(key) in skipped for key in keys)]

        student_profiles = [
            dict(sp, trainer_id=None) if sp.get("trainer_id") in skipped else sp
            for sp in owned("student_profiles", "id")
        ]

        insert("users", User, new_users, lambda u: User(
            id=u["id"],
            email=u["email"],
            hashed_password=password_hash(u["email"]),
            is_active=True,
            email_confirmed_at=parse_iso(u.get("email_confirmed_at")),
            last_sign_in_at=parse_iso(u.get("last_sign_in_at")),
            created_at=_stamp(u.get("created_at")),
        ))
        insert("profiles", Profile, owned("profiles", "id"), lambda p: Profile(
            id=p["id"],
            first_name=p.get("first_name") or "",
            last_name=p.get("last_name") or "",
            phone=p.get("phone"),
            role=UserRole(p["role"]),
            created_at=_stamp(p.get("created_at")),
        ))
        insert("trainer_profiles", TrainerProfile, owned("trainer_profiles", "id"), lambda tp: TrainerProfile(
            id=tp["id"],
            plan=TrainerPlan(tp.get("plan") or "free"),
            max_students=tp.get("max_students") or 0,
            ai_credits=tp.get("ai_credits") or 0,
            active_until=parse_iso(tp.get("active_until")),
            avatar_url=tp.get("avatar_url"),
            bio=tp.get("bio"),
            whatsapp_number=tp.get("whatsapp_number"),
            created_at=_stamp(tp.get("created_at")),
        ))
        insert("student_profiles", StudentProfile, student_profiles, lambda sp: StudentProfile(
            id=sp["id"],
            trainer_id=sp.get("trainer_id"),
            gender=sp.get("gender"),
            menstrual_cycle_tracking=bool(sp.get("menstrual_cycle_tracking")),
            start_date=parse_iso(sp.get("start_date")),
            status=StudentStatus(sp.get("status") or "active"),
            created_at=_stamp(sp.get("created_at")),
        ))
        insert("sessions", TrainingSession, owned("sessions", "trainer_id", "student_id"), lambda s: TrainingSession(
            id=s["id"],
            trainer_id=s["trainer_id"],
            student_id=s["student_id"],
            scheduled_at=parse_iso(s["scheduled_at"]),
            duration_minutes=s.get("duration_minutes") or 60,
            status=SessionStatus(s.get("status") or "scheduled"),
            created_at=_stamp(s.get("created_at")),
            updated_at=_stamp(s.get("updated_at")),
        ))
        insert("payment_intents", PaymentIntent, owned("payment_intents", "trainer_id", "student_id"), lambda p: PaymentIntent(
            id=p["id"],
            trainer_id=p["trainer_id"],
            student_id=p.get("student_id"),
            amount=int(p["amount"]),
            currency=p.get("currency") or settings.CURRENCY,
            method=PaymentMethod(p.get("method") or "credit_card"),
            fee_percent=p.get("fee_percent") or 0,
            status=PaymentStatus(p.get("status") or "pending"),
            description=p.get("description"),
            created_at=_stamp(p.get("created_at")),
        ))
        insert("diet_plans", DietPlan, owned("diet_plans", "trainer_id", "student_id"), lambda p: DietPlan(
            id=p["id"],
            trainer_id=p["trainer_id"],
            student_id=p["student_id"],
            name=p["name"],
            is_paid=False,
            created_at=_stamp(p.get("created_at")),
        ))
        insert("workout_plans", WorkoutPlan, owned("workout_plans", "trainer_id", "student_id"), lambda p: WorkoutPlan(
            id=p["id"],
            trainer_id=p["trainer_id"],
            student_id=p.get("student_id"),
            name=p["name"],
            muscle_groups=[],
            is_template=False,
            created_at=_stamp(p.get("created_at")),
        ))
        insert("notifications", Notification, owned("notifications", "user_id"), lambda n: Notification(
            id=n["id"],
            user_id=n["user_id"],
            title=n["title"],
            message=n["message"],
            type=n.get("type") or "system",
            read=bool(n.get("read")),
            created_at=_stamp(n.get("created_at")),
        ))
        new_settings = [
            s for s in export.get("system_settings", [])
            if not db.query(SystemSetting).filter(SystemSetting.key == s["key"]).first()
        ]
        insert("system_settings", SystemSetting, new_settings, lambda s: SystemSetting(
            id=s["id"],
            key=s["key"],
            value=s["value"],
            description=s.get("description"),
            created_at=_stamp(s.get("created_at")),
        ))

    storage_logger.success("Local data imported", "IMPORT", **summary)
    return summary
