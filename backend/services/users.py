# services/users.py — Registration, login and profile
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from auth import AuthService, UserRegister
from errors import ConflictError, NotFoundError
from models import User
from schemas import UserOut, ProfileUpdate, TokenResponse, user_out
from services.common import commit
from services.identity import IdentityResolver

logger = logging.getLogger("nexboard.users")


class UserService:
    def __init__(self, db: AsyncSession, identities: Optional[IdentityResolver] = None):
        self.db = db
        self.identities = identities or IdentityResolver(db)

    async def register(self, data: UserRegister) -> UserOut:
        email = data.email.lower()
        try:
            await self.identities.user_by_email(email)
        except NotFoundError:
            pass
        else:
            raise ConflictError("email already exists")

        user = User(
            name=data.name,
            email=email,
            password_hash=AuthService.hash_password(data.password),
        )
        self.db.add(user)
        await commit(self.db, "email already exists")
        logger.info(f"User {user.external_id} registered")
        return user_out(user)

    async def authenticate(self, email: str, password: str) -> Optional[TokenResponse]:
        """Returns a token for valid credentials, ``None`` otherwise."""
        try:
            user = await self.identities.user_by_email(email.lower())
        except NotFoundError:
            return None
        if not AuthService.verify_password(password, user.password_hash):
            return None
        return TokenResponse(
            token=AuthService.token_for(user.external_id, user.email),
            user=user_out(user),
        )

    async def get_profile(self, external_id: str) -> UserOut:
        user = await self.identities.user(external_id)
        return user_out(user)

    async def update_profile(self, external_id: str, data: ProfileUpdate) -> UserOut:
        user = await self.identities.user(external_id)
        user.name = data.name
        user.avatar_url = data.avatar_url
        await commit(self.db)
        return user_out(user)
