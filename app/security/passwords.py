from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """Return Argon2 hash for plain_password."""
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a candidate password against a stored hash."""
    try:
        return pwd_context.verify(plain_password, stored_hash)
    except ValueError:
        # Malformed or unknown hash in the database
        return False
