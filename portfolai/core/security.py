# Bearer credentials for the API: HS256 JWTs signed with SECRET_KEY, plus
# bcrypt password hashing for the signup/login flow.

from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from portfolai.core.config import settings

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    return pwd_context.hash(password_bytes.decode("utf-8", errors="ignore"))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode("utf-8")[:72]
    return pwd_context.verify(password_bytes.decode("utf-8", errors="ignore"), hashed_password)


def create_access_token(data: dict[str, str | datetime], expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, str]:
    """Decode and verify a token. Raises jose.JWTError on a bad signature or expiry."""
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
