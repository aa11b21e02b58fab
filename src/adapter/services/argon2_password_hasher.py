from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError as Argon2InvalidHash
from argon2.exceptions import VerificationError, VerifyMismatchError

from src.app.services.password_service import IPasswordHasher, InvalidHashError

DEFAULT_MEMORY_COST_KIB = 64 * 1024
DEFAULT_TIME_COST = 3
DEFAULT_PARALLELISM = 4
DEFAULT_SALT_LENGTH = 16
DEFAULT_HASH_LENGTH = 32


class Argon2PasswordHasher(IPasswordHasher):
    """Argon2id hashing via argon2-cffi; PHC strings embed parameters and salt"""

    def __init__(
        self,
        memory_cost: int = DEFAULT_MEMORY_COST_KIB,
        time_cost: int = DEFAULT_TIME_COST,
        parallelism: int = DEFAULT_PARALLELISM,
        salt_len: int = DEFAULT_SALT_LENGTH,
        hash_len: int = DEFAULT_HASH_LENGTH,
    ):
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=hash_len,
            salt_len=salt_len,
            type=Type.ID,
        )
        self._dummy_hash = self._hasher.hash("dummy-password-for-timing")

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except Argon2InvalidHash as exc:
            raise InvalidHashError("Malformed password hash") from exc
        except VerificationError:
            return False

    def dummy_verify(self, password: str) -> None:
        self.verify(password, self._dummy_hash)
