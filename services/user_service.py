from models import User
from storage import Storage


def create_user(storage: Storage, username: str, password: str) -> User:
    """Create a new user.

    - username: unique, surrounding whitespace is dropped
    - password: stored as given (no hashing at this layer)
    """
    username = (username or "").strip()
    if not username:
        raise ValueError("Username cannot be empty.")
    if not password:
        raise ValueError("Password cannot be empty.")

    return storage.create_user({"username": username, "password": password})


def get_user_by_username(storage: Storage, username: str) -> User | None:
    return storage.get_user_by_username((username or "").strip())
