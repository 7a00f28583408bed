"""DA batch headers of codec versions 3 and 4, and decoding of any version."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .codec import keccak256
from .errors import BatchError
from .legacy_batch import DABatchV0, DABatchV1, DABatchV2

_HASH_SIZE = 32
_ZERO_HASH = bytes(_HASH_SIZE)


def _u64(data: bytes, start: int) -> int:
    return int.from_bytes(data[start : start + 8], "big")


def _hash_at(data: bytes, start: int) -> bytes:
    return bytes(data[start : start + _HASH_SIZE])


@dataclass
class DABatchV3:
    """Version 3 batch header: fixed 193 bytes, no skipped message bitmap."""

    VERSION: ClassVar[int] = 3
    SIZE: ClassVar[int] = 193

    version: int = 3
    batch_index: int = 0
    l1_message_popped: int = 0
    total_l1_message_popped: int = 0
    data_hash: bytes = _ZERO_HASH
    blob_versioned_hash: bytes = _ZERO_HASH
    parent_batch_hash: bytes = _ZERO_HASH
    last_block_timestamp: int = 0
    blob_data_proof: tuple[bytes, bytes] = (_ZERO_HASH, _ZERO_HASH)

    def encode(self) -> bytes:
        """Return the wire form of the header."""
        return b"".join(
            (
                bytes([self.version]),
                self.batch_index.to_bytes(8, "big"),
                self.l1_message_popped.to_bytes(8, "big"),
                self.total_l1_message_popped.to_bytes(8, "big"),
                self.data_hash,
                self.blob_versioned_hash,
                self.parent_batch_hash,
                self.last_block_timestamp.to_bytes(8, "big"),
                self.blob_data_proof[0],
                self.blob_data_proof[1],
            )
        )

    def hash(self) -> bytes:
        """Keccak-256 of the encoded header."""
        return keccak256(self.encode())

    @classmethod
    def from_bytes(cls, data: bytes) -> DABatchV3:
        """Decode a header; raise BatchError if ``data`` is too short."""
        data = bytes(data)
        if len(data) < cls.SIZE:
            raise BatchError(
                "InvalidDABatchData",
                version=cls.VERSION,
                want_at_least=cls.SIZE,
                got=len(data),
            )
        return cls(
            version=data[0],
            batch_index=_u64(data, 1),
            l1_message_popped=_u64(data, 9),
            total_l1_message_popped=_u64(data, 17),
            data_hash=_hash_at(data, 25),
            blob_versioned_hash=_hash_at(data, 57),
            parent_batch_hash=_hash_at(data, 89),
            last_block_timestamp=_u64(data, 121),
            blob_data_proof=(_hash_at(data, 129), _hash_at(data, 161)),
        )


@dataclass
class DABatchV4(DABatchV3):
    """Version 4 batch header: same layout as version 3, optional compression."""

    VERSION: ClassVar[int] = 4

    version: int = 4

    @classmethod
    def from_bytes(cls, data: bytes) -> DABatchV4:
        """Decode a header; raise BatchError if ``data`` is too short."""
        batch = super().from_bytes(data)
        assert isinstance(batch, DABatchV4)
        return batch


DABatch = Union[DABatchV0, DABatchV1, DABatchV2, DABatchV3, DABatchV4]

_CODECS: dict[int, type] = {
    0: DABatchV0,
    1: DABatchV1,
    2: DABatchV2,
    3: DABatchV3,
    4: DABatchV4,
}


def decode_batch(data: bytes) -> DABatch:
    """Decode a batch header of any known version, chosen by its first byte."""
    data = bytes(data)
    if not data:
        raise ValueError("empty batch header")
    codec = _CODECS.get(data[0])
    if codec is None:
        raise BatchError("UnknownBatchVersion", version=data[0])
    return codec.from_bytes(data)