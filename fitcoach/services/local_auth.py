from typing import Any, Callable, Dict, List, Optional

from fitcoach.services.local_storage import LocalDataStore
from fitcoach.utils.logger import storage_logger

AuthListener = Callable[[Optional[Dict[str, Any]]], None]


class LocalAuthService:
    """
    Authentication for demo mode, backed by the local document store.

    Listeners registered with ``on_auth_state_change`` are told about every
    sign-in and sign-out with the current user (or ``None``).
    """

    def __init__(self, store: LocalDataStore):
        self.store = store
        self._listeners: List[AuthListener] = []
        self.store.initialize_data()

    def _notify(self, user: Optional[Dict[str, Any]]) -> None:
        for listener in list(self._listeners):
            listener(user)

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        session = self.store.sign_in(email, password)
        self._notify(session["user"])
        return session

    def sign_up(self, email: str, password: str, first_name: str, last_name: str, role: str = "trainer") -> Dict[str, Any]:
        session = self.store.sign_up(email, password, first_name, last_name, role)
        self._notify(session["user"])
        return session

    def quick_login(self, role: str) -> Dict[str, Any]:
        session = self.store.quick_login(role)
        storage_logger.info("Quick login", "AUTH", role=role, user_id=session["user"]["id"])
        self._notify(session["user"])
        return session

    def sign_out(self) -> None:
        self.store.sign_out()
        self._notify(None)

    def get_current_session(self) -> Optional[Dict[str, Any]]:
        return self.store.get_current_session()

    def get_current_user(self) -> Optional[Dict[str, Any]]:
        session = self.store.get_current_session()
        return session["user"] if session else None

    def get_user_context(self) -> Optional[Dict[str, Any]]:
        """Current user with their profile and role-specific profile."""
        user = self.get_current_user()
        if user is None:
            return None

        return {
            "user": user,
            "profile": self.store.get_profile_by_user_id(user["id"]),
            "trainer_profile": self.store.get_trainer_profile_by_user_id(user["id"]),
            "student_profile": self.store.get_student_profile_by_user_id(user["id"]),
        }

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """
        Subscribe to auth changes. The callback fires immediately with the
        current user.

        Returns:
            A function that removes the subscription
        """
        self._listeners.append(callback)
        callback(self.get_current_user())

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe
