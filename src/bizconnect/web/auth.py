"""
Admin authentication
Bearer tokens are decoded per request and handed to the view as an explicit
AdminContext argument; nothing about the caller is kept in global state.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Dict, Optional, Tuple

import bcrypt
from flask import request
from jose import ExpiredSignatureError, JWTError, jwt

from ..auction.errors import BizConnectError, ForbiddenError, UnauthorizedError, ValidationError
from ..config import settings
from .serializers import error_response

logger = logging.getLogger(__name__)

TOKEN_TYPE = 'admin'


@dataclass(frozen=True)
class AdminContext:
    """The authenticated admin for the current request"""
    id: str
    username: str


def get_password_hash(password: str) -> str:
    """Hash password with bcrypt (BCRYPT_ROUNDS in settings)"""
    # Bcrypt has a 72 byte limit
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    password_bytes = plain_password.encode('utf-8')[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))


def create_admin_token(admin: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT for an admin account"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.ADMIN_TOKEN_EXPIRE_HOURS)
    )
    claims = {
        'sub': str(admin['id']),
        'username': admin['username'],
        'type': TOKEN_TYPE,
        'exp': expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_admin_token(token: str) -> AdminContext:
    """
    Decode and check an admin token

    Raises:
        UnauthorizedError if the token is invalid or expired
        ForbiddenError if the token is not an admin token
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Admin token has expired")
    except JWTError:
        raise UnauthorizedError("Invalid admin token")

    if payload.get('type') != TOKEN_TYPE:
        raise ForbiddenError()

    return AdminContext(id=payload.get('sub'), username=payload.get('username'))


def bearer_token(header: Optional[str]) -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header"""
    if not header:
        return None
    scheme, _, token = header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def authenticate_admin(store, username: str, password: str) -> Tuple[str, Dict]:
    """
    Check admin credentials against the store

    Returns:
        Tuple of (token, admin row without the password hash)
    """
    if not username or not password:
        raise ValidationError("Username and password are required")

    admin = store.get_admin_by_username(username)
    if admin is None or not verify_password(password, admin['password_hash']):
        logger.warning("Admin login failed for %s", username)
        raise UnauthorizedError("Invalid credentials")
    if not admin.get('is_active', True):
        logger.warning("Admin login refused for inactive account %s", username)
        raise UnauthorizedError("Admin account is inactive")

    logger.info("Admin %s logged in", username)
    admin = {key: value for key, value in admin.items() if key != 'password_hash'}
    return create_admin_token(admin), admin


def admin_required(view):
    """Decorator: authenticate the request and pass `admin` to the view"""
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = bearer_token(request.headers.get('Authorization'))
        try:
            if token is None:
                raise UnauthorizedError()
            kwargs['admin'] = decode_admin_token(token)
        except BizConnectError as e:
            return error_response(e)
        return view(*args, **kwargs)
    return wrapper
