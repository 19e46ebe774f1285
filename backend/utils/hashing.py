# backend/utils/hashing.py
import bcrypt

# Cost factor for admin passwords; reset tokens use a cheaper one
PASSWORD_ROUNDS = 12
TOKEN_ROUNDS = 10


def get_password_hash(password: str, rounds: int = PASSWORD_ROUNDS) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed hash stored in the database
        return False
