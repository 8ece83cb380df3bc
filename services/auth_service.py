"""Account sign-up/sign-in and per-connection auth state."""

import asyncio
import re
import uuid
from typing import AsyncIterator, List, Optional

import bcrypt
from pymongo.errors import DuplicateKeyError, PyMongoError

from config.settings import settings
from schemas.auth import AuthUser
from services.forms import validate_credentials
from utils.errors import AuthError, ReadError, WriteError
from utils.logger import setup_logger

logger = setup_logger(__name__)

# bcrypt only uses the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], password_hash.encode("utf-8"))
    except ValueError:
        return False


class AuthService:
    """E-mail/password accounts stored in the users collection."""

    def __init__(self, users_collection):
        self.users = users_collection

    async def sign_up(self, email: str, password: str) -> AuthUser:
        validate_credentials(email, password)
        email = email.strip().lower()
        if not EMAIL_PATTERN.match(email):
            raise AuthError("The e-mail address is badly formatted.")
        if len(password) < settings.min_password_length:
            raise AuthError(f"Password should be at least {settings.min_password_length} characters.")

        uid = uuid.uuid4().hex
        try:
            await self.users.insert_one({
                "_id": uid,
                "email": email,
                "password_hash": hash_password(password),
            })
        except DuplicateKeyError:
            raise AuthError("The e-mail address is already in use by another account.")
        except PyMongoError as e:
            logger.error(f"Error creating account: {e}", exc_info=True)
            raise WriteError("Could not create the account. Please try again.", cause=e) from e

        logger.info(f"Created account {uid}")
        return AuthUser(uid=uid, email=email)

    async def sign_in(self, email: str, password: str) -> AuthUser:
        validate_credentials(email, password)
        email = email.strip().lower()
        try:
            account = await self.users.find_one({"email": email})
        except PyMongoError as e:
            logger.error(f"Error reading account: {e}", exc_info=True)
            raise ReadError("Could not sign in. Please try again.", cause=e) from e

        if not account or not verify_password(password, account.get("password_hash", "")):
            raise AuthError("Invalid e-mail or password.")
        return AuthUser(uid=str(account["_id"]), email=account["email"])


class AuthSession:
    """Auth state of one client connection, observable as a stream."""

    def __init__(self, service: AuthService):
        self.service = service
        self.user: Optional[AuthUser] = None
        self._subscribers: List[asyncio.Queue] = []

    def _publish(self) -> None:
        for queue in self._subscribers:
            queue.put_nowait(self.user)

    async def sign_up(self, email: str, password: str) -> AuthUser:
        self.user = await self.service.sign_up(email, password)
        self._publish()
        return self.user

    async def sign_in(self, email: str, password: str) -> AuthUser:
        self.user = await self.service.sign_in(email, password)
        self._publish()
        return self.user

    async def sign_out(self) -> None:
        if self.user is not None:
            logger.info(f"User {self.user.uid} signed out")
        self.user = None
        self._publish()

    async def observe_auth_state(self) -> AsyncIterator[Optional[AuthUser]]:
        """Yield the current user (or None), then every change."""
        queue: asyncio.Queue = asyncio.Queue()
        self._subscribers.append(queue)
        try:
            yield self.user
            while True:
                yield await queue.get()
        finally:
            self._subscribers.remove(queue)
