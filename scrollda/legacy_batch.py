"""DA batch headers of codec versions 0, 1 and 2."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol

from .codec import construct_skipped_bitmap, keccak256
from .errors import BatchError

_HASH_SIZE = 32
_ZERO_HASH = bytes(_HASH_SIZE)


class ParentBatch(Protocol):
    """What a new batch needs to know about the batch before it."""

    @property
    def batch_index(self) -> int: ...

    @property
    def total_l1_message_popped(self) -> int: ...

    def hash(self) -> bytes: ...


def _u64(data: bytes, start: int) -> int:
    return int.from_bytes(data[start : start + 8], "big")


def _hash_at(data: bytes, start: int) -> bytes:
    return bytes(data[start : start + _HASH_SIZE])


def compute_batch_data_hash(
    chunks: Sequence[Any], total_l1_message_popped_before: int
) -> bytes:
    """Keccak-256 of the concatenated chunk hashes of a batch."""
    data = bytearray()
    popped = total_l1_message_popped_before
    for chunk in chunks:
        try:
            chunk_hash = chunk.hash(popped)
        except BatchError as err:
            raise BatchError("BuildChunkHash") from err
        popped += chunk.num_l1_messages(popped)
        data += chunk_hash
    return keccak256(bytes(data))


@dataclass
class DABatchV0:
    """Version 0 batch header: 89 bytes followed by the skipped L1 message bitmap."""

    VERSION: ClassVar[int] = 0
    MIN_SIZE: ClassVar[int] = 89

    version: int = 0
    batch_index: int = 0
    l1_message_popped: int = 0
    total_l1_message_popped: int = 0
    data_hash: bytes = _ZERO_HASH
    parent_batch_hash: bytes = _ZERO_HASH
    skipped_l1_message_bitmap: bytes = b""

    def encode(self) -> bytes:
        """Return the wire form of the header."""
        return b"".join(
            (
                bytes([self.version]),
                self.batch_index.to_bytes(8, "big"),
                self.l1_message_popped.to_bytes(8, "big"),
                self.total_l1_message_popped.to_bytes(8, "big"),
                self.data_hash,
                self.parent_batch_hash,
                self.skipped_l1_message_bitmap,
            )
        )

    def hash(self) -> bytes:
        """Keccak-256 of the encoded header."""
        return keccak256(self.encode())

    @classmethod
    def from_bytes(cls, data: bytes) -> DABatchV0:
        """Decode a header; raise BatchError if ``data`` is too short."""
        data = bytes(data)
        if len(data) < cls.MIN_SIZE:
            raise BatchError(
                "InvalidDABatchData",
                version=cls.VERSION,
                want_at_least=cls.MIN_SIZE,
                got=len(data),
            )
        return cls(
            version=data[0],
            batch_index=_u64(data, 1),
            l1_message_popped=_u64(data, 9),
            total_l1_message_popped=_u64(data, 17),
            data_hash=_hash_at(data, 25),
            parent_batch_hash=_hash_at(data, 57),
            skipped_l1_message_bitmap=data[89:],
        )

    @classmethod
    def build(cls, parent: ParentBatch, chunks: Sequence[Any]) -> DABatchV0:
        """Build the batch that follows ``parent`` from ``chunks``."""
        batch_index = parent.batch_index + 1
        popped_before = parent.total_l1_message_popped
        bitmap, popped_after = construct_skipped_bitmap(
            batch_index, chunks, popped_before
        )
        data_hash = compute_batch_data_hash(chunks, popped_before)
        return cls(
            version=cls.VERSION,
            batch_index=batch_index,
            l1_message_popped=popped_after - popped_before,
            total_l1_message_popped=popped_after,
            data_hash=data_hash,
            parent_batch_hash=parent.hash(),
            skipped_l1_message_bitmap=bitmap,
        )


@dataclass
class DABatchV1:
    """Version 1 batch header: adds the blob versioned hash, 121 bytes plus bitmap."""

    VERSION: ClassVar[int] = 1
    MIN_SIZE: ClassVar[int] = 121

    version: int = 1
    batch_index: int = 0
    l1_message_popped: int = 0
    total_l1_message_popped: int = 0
    data_hash: bytes = _ZERO_HASH
    blob_versioned_hash: bytes = _ZERO_HASH
    parent_batch_hash: bytes = _ZERO_HASH
    skipped_l1_message_bitmap: bytes = b""

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
                self.skipped_l1_message_bitmap,
            )
        )

    def hash(self) -> bytes:
        """Keccak-256 of the encoded header."""
        return keccak256(self.encode())

    @classmethod
    def from_bytes(cls, data: bytes) -> DABatchV1:
        """Decode a header; raise BatchError if ``data`` is too short."""
        data = bytes(data)
        if len(data) < cls.MIN_SIZE:
            raise BatchError(
                "InvalidDABatchData",
                version=cls.VERSION,
                want_at_least=cls.MIN_SIZE,
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
            skipped_l1_message_bitmap=data[121:],
        )


@dataclass
class DABatchV2(DABatchV1):
    """Version 2 batch header: same layout as version 1, payload zstd-compressed."""

    VERSION: ClassVar[int] = 2

    version: int = 2

    @classmethod
    def from_bytes(cls, data: bytes) -> DABatchV2:
        """Decode a header; raise BatchError if ``data`` is too short."""
        batch = super().from_bytes(data)
        assert isinstance(batch, DABatchV2)
        return batch