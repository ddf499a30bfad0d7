# src/auth/services.py
import logging

from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
from config import settings

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token."""
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        return encoded_jwt

    @staticmethod
    def decode_member_uid(token: str) -> Optional[str]:
        """Return the member uid carried in ``sub``, or None for an invalid or expired token."""
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM], options={"verify_exp": True})
        except JWTError as e:
            logger.info(f"Rejected access token: {str(e)}")
            return None
        uid = payload.get("sub")
        if not isinstance(uid, str) or not uid:
            return None
        return uid
