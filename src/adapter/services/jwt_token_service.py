import logging
import secrets
import uuid
from datetime import UTC, datetime
from typing import Callable, Optional, Tuple
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from libs.result import Result, Return
from src.adapter.services.key_manager import KeyManager
from src.app.services.password_service import hash_token
from src.app.services.token_service import ITokenService, TokenClaims, TokenPair, TokenSettings
from src.domain import errors
from src.domain.entities import Role

logger = logging.getLogger(__name__)

ALGORITHM = "RS256"
REFRESH_TOKEN_BYTES = 32

_DECODE_OPTIONS = {
    "verify_aud": False,  # audience intersection is checked explicitly below
    "require_exp": True,
    "require_iat": True,
    "require_nbf": True,
    "require_iss": True,
    "require_sub": True,
    "require_jti": True,
    "leeway": 0,
}


def _utc_now() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(ITokenService):
    """
    RS256 access tokens signed with the KeyManager's current key.

    The key id travels in the token header so verification picks the
    matching public key even after a rotation.
    """

    def __init__(
        self,
        key_manager: KeyManager,
        settings: Optional[TokenSettings] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._keys = key_manager
        self._settings = settings or TokenSettings()
        self._clock = clock

    @property
    def settings(self) -> TokenSettings:
        return self._settings

    def generate_access_token(
        self, user_id: UUID, tenant_id: UUID, email: str, role: Role
    ) -> Tuple[str, datetime]:
        now = self._clock()
        expires_at = now + self._settings.access_token_ttl
        claims = {
            "sub": str(user_id),
            "iss": self._settings.issuer,
            "aud": list(self._settings.audience),
            "iat": int(now.timestamp()),
            "nbf": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid.uuid4()),
            "tenant_id": str(tenant_id),
            "role": Role.parse(role).value,
            "email": email,
        }
        kid, private_pem = self._keys.signing_key()
        token = jwt.encode(claims, private_pem, algorithm=ALGORITHM, headers={"kid": kid})
        return token, expires_at

    def generate_refresh_token(self) -> str:
        return secrets.token_urlsafe(REFRESH_TOKEN_BYTES)

    def generate_token_pair(
        self, user_id: UUID, tenant_id: UUID, email: str, role: Role
    ) -> Tuple[TokenPair, str]:
        access_token, expires_at = self.generate_access_token(user_id, tenant_id, email, role)
        refresh_token = self.generate_refresh_token()
        pair = TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(self._settings.access_token_ttl.total_seconds()),
            expires_at=expires_at,
        )
        return pair, hash_token(refresh_token)

    def validate_token(self, token: str) -> Result[TokenClaims]:
        try:
            header = jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError:
            return Return.err(errors.TOKEN_MALFORMED)

        if header.get("alg") != ALGORITHM:
            return Return.err(errors.TOKEN_INVALID)

        public_pem = self._keys.public_key(header.get("kid"))
        if public_pem is None:
            logger.warning("Token signed with unknown kid=%s", header.get("kid"))
            return Return.err(errors.TOKEN_INVALID)

        try:
            payload = jwt.decode(
                token,
                public_pem,
                algorithms=[ALGORITHM],
                issuer=self._settings.issuer,
                options=_DECODE_OPTIONS,
            )
        except ExpiredSignatureError:
            return Return.err(errors.TOKEN_EXPIRED)
        except JWTError:
            return Return.err(errors.TOKEN_INVALID)

        audience = payload.get("aud")
        if isinstance(audience, str):
            audience = [audience]
        if not audience or not set(audience) & set(self._settings.audience):
            return Return.err(errors.TOKEN_INVALID)

        try:
            claims = TokenClaims(
                user_id=UUID(payload["sub"]),
                tenant_id=UUID(payload["tenant_id"]),
                role=Role.parse(payload["role"]),
                email=payload.get("email", ""),
                issuer=payload["iss"],
                audience=audience,
                issued_at=datetime.fromtimestamp(payload["iat"], UTC),
                not_before=datetime.fromtimestamp(payload["nbf"], UTC),
                expires_at=datetime.fromtimestamp(payload["exp"], UTC),
                token_id=payload["jti"],
            )
        except (KeyError, TypeError, ValueError):
            return Return.err(errors.TOKEN_INVALID)

        return Return.ok(claims)
