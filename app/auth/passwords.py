import bcrypt

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases reject longer input
    return password.encode()[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (10 rounds)."""
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_secret(password), password_hash.encode())
    except ValueError:
        return False
