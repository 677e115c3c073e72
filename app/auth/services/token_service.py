from app.auth.models.user import User
from app.core import redis as redis_module
from app.core import security
from app.core.config import settings


class TokenService:
    """Issues token pairs and tracks live refresh tokens in Redis."""

    @staticmethod
    def issue_pair(user: User) -> tuple[str, str]:
        claims = {"sub": str(user.id), "email": user.email, "role": user.role}
        return security.create_access_token(claims), security.create_refresh_token(claims)

    async def store_refresh_token(self, token: str, user_id: str) -> None:
        ttl_seconds = settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
        await redis_module.store_refresh_token(security.hash_token(token), user_id, ttl_seconds)

    async def is_refresh_token_live(self, token: str, user_id: str) -> bool:
        """True when the token was issued by us, not yet rotated and belongs to ``user_id``."""
        data = await redis_module.get_refresh_token(security.hash_token(token))
        return bool(data) and data.get("user_id") == user_id

    async def revoke_refresh_token(self, token: str) -> None:
        await redis_module.revoke_refresh_token(security.hash_token(token))


token_service = TokenService()
