import bcrypt


BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes of a secret
MAX_PASSWORD_BYTES = 72


class PasswordHashError(Exception):
    """Raised when a stored hash cannot be used for verification."""


def is_password_encodable(password: str) -> bool:
    try:
        password.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def is_password_too_long(password: str) -> bool:
    return len(password.encode("utf-8", errors="surrogatepass")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Check ``password`` against a bcrypt hash in constant time.

    Returns False for a mismatch, including passwords no stored hash could
    have been made from (unencodable or over the bcrypt limit). A malformed
    hash raises PasswordHashError so it is not mistaken for bad credentials.
    """
    if not is_password_encodable(password) or is_password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise PasswordHashError("Stored password hash is malformed") from exc
