import hashlib
import logging

from ociextract.exceptions import DigestMismatchError

logger = logging.getLogger(__name__)

SHA256_PREFIX = "sha256:"


def is_sha256_digest(digest: str) -> bool:
    return digest.startswith(SHA256_PREFIX)


def verify_sha256(checksum: str, data: bytes):
    data_checksum = f"{SHA256_PREFIX}{hashlib.sha256(data).hexdigest()}"
    if checksum != data_checksum:
        raise DigestMismatchError(checksum, data_checksum)


class DigestVerifier:
    """
    Hashes a blob while it is streamed and compares it with the expected digest.
    Digests of other algorithms than sha256 are accepted unchecked.
    """

    def __init__(self, digest: str):
        self.digest = digest
        self._hash = hashlib.sha256() if is_sha256_digest(digest) else None
        if self._hash is None:
            logger.debug(f"Not verifying digest {digest}, unsupported algorithm")

    def update(self, chunk: bytes):
        if self._hash is not None:
            self._hash.update(chunk)

    def verify(self):
        if self._hash is None:
            return
        actual = f"{SHA256_PREFIX}{self._hash.hexdigest()}"
        if actual != self.digest:
            raise DigestMismatchError(self.digest, actual)
