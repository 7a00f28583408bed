"""Low-level helpers for the DA batch wire formats."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Sequence
from typing import Any

from Crypto.Hash import keccak

from .errors import BatchError, DataCompatibilityError

BYTES_PER_FIELD_ELEMENT = 32
FIELD_ELEMENTS_PER_BLOB = 4096
BYTES_PER_BLOB = BYTES_PER_FIELD_ELEMENT * FIELD_ELEMENTS_PER_BLOB
MAX_BLOB_PAYLOAD_SIZE = 126976
BLOCK_CONTEXT_SIZE = 60
BLS_MODULUS = int(
    "73eda753299d7d483339d80809a1d80553bda402fffe5bfeffffffff00000001", 16
)


def keccak256(data: bytes) -> bytes:
    """Return the 32-byte Keccak-256 digest of ``data``."""
    digest = keccak.new(digest_bits=256)
    digest.update(bytes(data))
    return digest.digest()


def sha256(data: bytes) -> bytes:
    """Return the 32-byte SHA-256 digest of ``data``."""
    return hashlib.sha256(bytes(data)).digest()


def calc_blob_hash(version: int, data: bytes) -> bytes:
    """Return sha256(data) with its first byte replaced by ``version``."""
    digest = bytearray(sha256(data))
    digest[0] = version
    return bytes(digest)


def _read_word(data: bytes, offset: int) -> int:
    if offset < 0 or offset + 32 > len(data):
        raise ValueError(
            f"abi word at offset {offset} is out of range (length {len(data)})"
        )
    return int.from_bytes(data[offset : offset + 32], "big")


def solidity_parse_bytes(offset: int, data: bytes) -> bytes:
    """Read an ABI-encoded ``bytes`` value whose head word sits at ``offset``."""
    data = bytes(data)
    data_offset = _read_word(data, offset)
    length = _read_word(data, data_offset)
    start = data_offset + 32
    if start + length > len(data):
        raise ValueError(
            f"abi bytes of length {length} at {start} exceed data length {len(data)}"
        )
    return data[start : start + length]


def solidity_parse_array_bytes(offset: int, data: bytes) -> list[bytes]:
    """Read an ABI-encoded ``bytes[]`` value whose head word sits at ``offset``."""
    data = bytes(data)
    len_offset = _read_word(data, offset)
    count = _read_word(data, len_offset)
    tail = data[len_offset + 32 :]
    return [solidity_parse_bytes(i * 32, tail) for i in range(count)]


def decode_block_numbers(data: bytes) -> list[int] | None:
    """Return the block numbers of an encoded chunk, or None if it is malformed."""
    if not data:
        return None
    num_blocks = data[0]
    body = bytes(data[1:])
    if len(body) < num_blocks * BLOCK_CONTEXT_SIZE:
        return None
    return [
        int.from_bytes(body[start : start + 8], "big")
        for start in range(0, num_blocks * BLOCK_CONTEXT_SIZE, BLOCK_CONTEXT_SIZE)
    ]


def check_chunks_size(chunks: Sequence[Any], max_chunks: int) -> None:
    """Raise BatchError unless there are between 1 and ``max_chunks`` chunks."""
    if len(chunks) > max_chunks:
        raise BatchError("TooManyChunks", max=max_chunks)
    if not chunks:
        raise BatchError("MissingChunks")


def make_blob_canonical(blob_bytes: bytes) -> bytes:
    """Spread a payload over 32-byte field elements, 31 bytes each, top byte zero."""
    if len(blob_bytes) > MAX_BLOB_PAYLOAD_SIZE:
        raise BatchError("OversizedBatchPayload", size=len(blob_bytes))
    blob = bytearray(BYTES_PER_BLOB)
    for index, start in enumerate(range(0, len(blob_bytes), 31)):
        piece = blob_bytes[start : start + 31]
        position = index * BYTES_PER_FIELD_ELEMENT + 1
        blob[position : position + len(piece)] = piece
    return bytes(blob)


def _grow(words: list[int], index: int) -> None:
    words.extend([0] * (index + 1 - len(words)))


def construct_skipped_bitmap(
    batch_index: int,
    chunks: Iterable[Any],
    total_l1_message_popped_before: int,
) -> tuple[bytes, int]:
    """Build the skipped L1 message bitmap of a batch.

    ``chunks`` yield objects with ``blocks``; each block has ``txs`` whose
    items expose ``l1_msg``, ``nonce`` and ``tx_hash``. Returns the bitmap as
    big-endian 256-bit words and the next L1 queue index.
    """
    words: list[int] = []
    base_index = total_l1_message_popped_before
    next_index = total_l1_message_popped_before

    for chunk_id, chunk in enumerate(chunks):
        for block_id, block in enumerate(chunk.blocks):
            for tx in block.txs:
                if not tx.l1_msg:
                    continue
                current_index = tx.nonce
                if current_index < next_index:
                    raise BatchError(
                        "InvalidL1Nonce",
                        expect=next_index,
                        current=current_index,
                        batch_id=batch_index,
                        chunk_id=chunk_id,
                        block_id=block_id,
                        tx_hash=tx.tx_hash,
                    )
                for skipped_index in range(next_index, current_index):
                    quo, rem = divmod(skipped_index - base_index, 256)
                    _grow(words, quo)
                    words[quo] |= 1 << rem
                _grow(words, (current_index - base_index) // 256)
                next_index = current_index + 1

    bitmap = b"".join(word.to_bytes(32, "big") for word in words)
    return bitmap, next_index


_CONTENT_SIZE_SKIP = (2, 3, 5, 9)


def check_compressed_data_compatibility(data: bytes) -> None:
    """Raise DataCompatibilityError unless ``data`` is a frame of compressed zstd blocks."""
    data = bytes(data)
    if len(data) < 16:
        raise DataCompatibilityError("SizeTooSmall", data=data)

    frame_header = data[0]
    if frame_header & 63 != 32:
        raise DataCompatibilityError("UnexpectedHeaderType", header=frame_header)

    position = _CONTENT_SIZE_SKIP[frame_header >> 6]
    is_last = False
    while len(data) - position > 3 and not is_last:
        b0, b1, b2 = data[position : position + 3]
        is_last = b0 & 1 == 1
        blk_ty = (b0 >> 1) & 3
        blk_size = (b2 * 65536 + b1 * 256 + b0) >> 3
        if blk_ty != 2:
            raise DataCompatibilityError(
                "UnexpectedBlkType", blk_ty=blk_ty, blk_size=blk_size, is_last=is_last
            )
        remaining = len(data) - position
        if remaining < 3 + blk_size:
            raise DataCompatibilityError(
                "WrongDataLen", len=remaining, min=3 + blk_size
            )
        position += 3 + blk_size

    if not is_last:
        raise DataCompatibilityError("UnexpectedEndBeforeLastBlock")