"""Commit and finalize calldata of Scroll batches."""

from __future__ import annotations

from dataclasses import dataclass, field

from .batch import DABatch, decode_batch
from .codec import decode_block_numbers, solidity_parse_array_bytes, solidity_parse_bytes
from .errors import BatchError


def _word_at(data: bytes, index: int) -> bytes:
    start = index * 32
    if start + 32 > len(data):
        raise ValueError(
            f"calldata word {index} is out of range (length {len(data)})"
        )
    return bytes(data[start : start + 32])


@dataclass(frozen=True)
class Finalize:
    """The arguments of a batch finalization."""

    batch: DABatch
    prev_state_root: bytes | None
    new_state_root: bytes
    new_withdrawal_root: bytes

    @classmethod
    def from_calldata(cls, data: bytes) -> Finalize:
        """Parse finalize calldata (without the selector)."""
        data = bytes(data)
        batch = decode_batch(solidity_parse_bytes(0, data))
        index = 1
        prev_state_root = None
        if batch.version <= 2:
            prev_state_root = _word_at(data, index)
            index += 1
        new_state_root = _word_at(data, index)
        new_withdrawal_root = _word_at(data, index + 1)
        return cls(
            batch=batch,
            prev_state_root=prev_state_root,
            new_state_root=new_state_root,
            new_withdrawal_root=new_withdrawal_root,
        )

    def assert_poe(
        self,
        prev_state_root: bytes,
        new_state_root: bytes,
        withdrawal_root: bytes,
        batch_hash: bytes,
    ) -> None:
        """Raise AssertionError unless a proof of execution matches this finalization."""
        if self.prev_state_root is not None and self.prev_state_root != prev_state_root:
            raise AssertionError("prev_state_root mismatch")
        if self.new_state_root != new_state_root:
            raise AssertionError("new_state_root mismatch")
        if self.new_withdrawal_root != withdrawal_root:
            raise AssertionError("withdrawal_root mismatch")
        if self.batch.hash() != batch_hash:
            raise AssertionError("batch_hash mismatch")


@dataclass
class BatchTask:
    """A batch to prove: its parent header and the block numbers of each chunk."""

    chunks: list[list[int]] = field(default_factory=list)
    parent_batch_header: DABatch | None = None

    @classmethod
    def from_calldata(cls, data: bytes) -> BatchTask:
        """Parse commit calldata (without the selector)."""
        data = bytes(data)
        parent_bytes = solidity_parse_bytes(32, data)
        chunks_bytes = solidity_parse_array_bytes(64, data)
        try:
            parent = decode_batch(parent_bytes)
        except BatchError as err:
            raise BatchError("ParseBatchTaskFromCalldata") from err
        chunks = []
        for chunk_bytes in chunks_bytes:
            numbers = decode_block_numbers(chunk_bytes)
            if numbers is None:
                raise BatchError("InvalidBlockNumbers", data=chunk_bytes)
            chunks.append(numbers)
        return cls(chunks=chunks, parent_batch_header=parent)

    def id(self) -> int:
        """Index of the batch, one past its parent's."""
        if self.parent_batch_header is None:
            raise ValueError("batch task has no parent batch header")
        return self.parent_batch_header.batch_index + 1

    def block_numbers(self) -> list[int]:
        return [number for chunk in self.chunks for number in chunk]

    def start(self) -> int | None:
        """First block of the first chunk, if any."""
        if not self.chunks or not self.chunks[0]:
            return None
        return self.chunks[0][0]

    def end(self) -> int | None:
        """Last block of the last chunk, if any."""
        if not self.chunks or not self.chunks[-1]:
            return None
        return self.chunks[-1][-1]