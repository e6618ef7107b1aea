"""Password hashing with the ``bcrypt`` library (>=4.0).

Work factor comes from BCRYPT_ROUNDS; the test suite lowers it to keep hashing fast.
Hashes embed their own cost, so changing the setting never breaks existing logins.
"""

import bcrypt

from config.settings import settings


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
