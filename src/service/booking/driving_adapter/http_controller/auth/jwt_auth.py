"""
Bearer token verification

Tokens are issued by the identity provider; this service only verifies them
with the shared secret and reads the ``sub`` claim as the opaque user id.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import attrs
import jwt

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import AuthenticationError


@attrs.frozen
class CurrentUser:
    id: str
    email: Optional[str] = None


class JwtAuth:
    def __init__(self, *, settings: Settings) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM

    def create_jwt_token(
        self, *, user_id: str, email: Optional[str] = None, expires_in: timedelta = timedelta(days=7)
    ) -> str:
        """Used by seed scripts and tests; production tokens come from the identity provider."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {'sub': user_id, 'iat': now, 'exp': now + expires_in}
        if email:
            payload['email'] = email
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError('Token expired')
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

    def get_current_user_from_jwt(self, token: Optional[str]) -> CurrentUser:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        user_id = payload.get('sub')
        if not user_id:
            raise AuthenticationError('Invalid token')
        return CurrentUser(id=str(user_id), email=payload.get('email'))
