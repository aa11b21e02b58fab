"""
Validate Token Use Case

Turns a bearer access token into an AuthContext.
"""

from libs.result import Result, Return
from src.app.services.token_service import ITokenService
from .dtos import AuthContext


class ValidateTokenUseCase:
    """
    Stateless access token check - no database round trip.

    Business Rules:
    - TOKEN_MALFORMED, TOKEN_EXPIRED and TOKEN_INVALID stay distinct so
      clients can tell "log in again" from "bad token"
    """

    def __init__(self, token_service: ITokenService):
        self.token_service = token_service

    def execute(self, token: str) -> Result[AuthContext]:
        result = self.token_service.validate_token(token)
        if result.is_err():
            return Return.err(result.error)
        return Return.ok(AuthContext.from_claims(result.value))
