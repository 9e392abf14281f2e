from cryptography.hazmat.primitives.kdf.scrypt import Scrypt
from cryptography.exceptions import InvalidKey
import base64
import os

class PasswordHashingStrategy:
    """
    Strategy class for password hashing using the scrypt KDF.
    Hashes are stored as "<salt>$<key>", both urlsafe base64 encoded.
    """
    SALT_BYTES = 16

    def __init__(self, n: int = 2**14, r: int = 8, p: int = 1, length: int = 32):
        self._n = n
        self._r = r
        self._p = p
        self._length = length

    def _kdf(self, salt: bytes) -> Scrypt:
        return Scrypt(salt=salt, length=self._length, n=self._n, r=self._r, p=self._p)

    def hash(self, password: str) -> str:
        salt = os.urandom(self.SALT_BYTES)
        key = self._kdf(salt).derive(password.encode("utf-8"))
        return "$".join([
            base64.urlsafe_b64encode(salt).decode("utf-8"),
            base64.urlsafe_b64encode(key).decode("utf-8"),
        ])

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed or "$" not in hashed:
            return False
        salt_b64, key_b64 = hashed.split("$", 1)
        try:
            salt = base64.urlsafe_b64decode(salt_b64.encode("utf-8"))
            key = base64.urlsafe_b64decode(key_b64.encode("utf-8"))
            self._kdf(salt).verify(password.encode("utf-8"), key)
            return True
        except (InvalidKey, ValueError):
            return False
