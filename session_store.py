"""
Mock accounts, session and credits on top of a local JSON key-value store.

Nothing here is real authentication: it only models who is logged in and how
many generation credits they have left.
"""
import json
import hashlib
from pathlib import Path

from config import Config
from shorts_types import User

SESSION_KEY = "autoshorts_user"
USERS_KEY = "autoshorts_db_users"


class AuthError(ValueError):
    """Sign-up / log-in rejected; the message is meant for the user."""


class StoreError(RuntimeError):
    """The local session store file could not be read or written."""


def _log(msg: str) -> None:
    print(f"[SESSION] {msg}")


class JsonStore:
    """Key-value store persisted as a single JSON object on disk."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StoreError(f"Could not read session store {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Session store {self.path} does not hold a JSON object")
        return data

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self.path)
        except OSError as e:
            raise StoreError(f"Could not write session store {self.path}: {e}") from e

    def get(self, key: str, default=None):
        return self._load().get(key, default)

    def set(self, key: str, value) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


def _hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class AccountService:
    """Sign-up / log-in against the mock account table, plus credit bookkeeping."""

    def __init__(self, store: JsonStore):
        self.store = store

    def _users(self) -> dict:
        return self.store.get(USERS_KEY, {})

    def _save_session(self, user: User) -> User:
        self.store.set(SESSION_KEY, user.to_dict())
        return user

    def _save_account(self, user: User) -> None:
        users = self._users()
        record = users.get(user.email)
        if record is None:
            return
        record.update(credits=user.credits, isPremium=user.is_premium, isCreator=user.is_creator)
        users[user.email] = record
        self.store.set(USERS_KEY, users)

    def current_user(self) -> User | None:
        data = self.store.get(SESSION_KEY)
        return User.from_dict(data) if data else None

    def sign_up(self, email: str, password: str, confirm_password: str) -> User:
        email = email.strip().lower()
        if password != confirm_password:
            raise AuthError("Passwords do not match.")
        users = self._users()
        if email in users:
            raise AuthError("An account with this email already exists.")
        users[email] = {
            "password": _hash_password(password),
            "credits": Config.starting_credits,
            "isPremium": False,
            "isCreator": False,
        }
        self.store.set(USERS_KEY, users)
        _log(f"Created account {email}")
        return self._save_session(User(email=email, credits=Config.starting_credits))

    def log_in(self, email: str, password: str) -> User:
        email = email.strip().lower()
        record = self._users().get(email)
        if not record or record.get("password") != _hash_password(password):
            raise AuthError("Invalid email or password.")
        _log(f"Logged in as {email}")
        return self._save_session(User(
            email=email,
            credits=record.get("credits", 0),
            is_premium=record.get("isPremium", False),
            is_creator=record.get("isCreator", False),
        ))

    def social_log_in(self, email: str) -> User:
        """
        Mock third-party log-in: no password.

        First log-in creates a password-less account row with starting credits; later
        log-ins restore that row. Emails registered with a password are rejected.
        """
        email = email.strip().lower()
        users = self._users()
        record = users.get(email)
        if record is not None and record.get("password") is not None:
            raise AuthError("This email is registered with a password. Log in with your password.")
        if record is None:
            record = {
                "password": None,
                "credits": Config.starting_credits,
                "isPremium": False,
                "isCreator": False,
            }
            users[email] = record
            self.store.set(USERS_KEY, users)
        _log(f"Logged in as {email} (social)")
        return self._save_session(User(
            email=email,
            credits=record.get("credits", 0),
            is_premium=record.get("isPremium", False),
            is_creator=record.get("isCreator", False),
        ))

    def log_out(self) -> None:
        self.store.remove(SESSION_KEY)
        _log("Logged out")

    @staticmethod
    def needs_paywall(user: User | None) -> bool:
        return user is not None and user.credits <= 0 and not user.is_premium

    def consume_credit(self, user: User) -> User:
        """Charge one generation credit (premium users are never charged)."""
        if user.is_premium:
            return user
        user.credits = max(0, user.credits - 1)
        self._save_account(user)
        _log(f"{user.email}: {user.credits} credit(s) left")
        return self._save_session(user)

    def upgrade(self, user: User) -> User:
        user.is_premium = True
        user.credits = Config.premium_credits
        self._save_account(user)
        _log(f"{user.email} upgraded to premium")
        return self._save_session(user)
