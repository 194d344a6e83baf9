from datetime import timedelta

import jwt
import pytest

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import CurrentUser, JwtAuth


@pytest.mark.unit
class TestJwtAuth:
    @pytest.fixture
    def jwt_auth(self, test_settings: Settings) -> JwtAuth:
        return JwtAuth(settings=test_settings)

    def test_sub_claim_is_the_user_id(self, jwt_auth: JwtAuth) -> None:
        token = jwt_auth.create_jwt_token(user_id='user-1', email='guest@example.com')

        user = jwt_auth.get_current_user_from_jwt(token)

        assert user == CurrentUser(id='user-1', email='guest@example.com')

    def test_missing_token(self, jwt_auth: JwtAuth) -> None:
        with pytest.raises(AuthenticationError, match='Not authenticated'):
            jwt_auth.get_current_user_from_jwt(None)

    def test_expired_token(self, jwt_auth: JwtAuth) -> None:
        token = jwt_auth.create_jwt_token(user_id='user-1', expires_in=timedelta(seconds=-1))

        with pytest.raises(AuthenticationError, match='Token expired'):
            jwt_auth.get_current_user_from_jwt(token)

    def test_token_signed_with_another_key(self, jwt_auth: JwtAuth) -> None:
        token = jwt.encode({'sub': 'user-1'}, 'some-other-key', algorithm='HS256')

        with pytest.raises(AuthenticationError, match='Invalid token'):
            jwt_auth.get_current_user_from_jwt(token)

    def test_token_without_subject(self, jwt_auth: JwtAuth) -> None:
        token = jwt.encode(
            {'email': 'guest@example.com'}, jwt_auth.secret, algorithm=jwt_auth.algorithm
        )

        with pytest.raises(AuthenticationError, match='Invalid token'):
            jwt_auth.get_current_user_from_jwt(token)
