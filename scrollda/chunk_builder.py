"""Chunks encoded with the L1 queue position taken into account, and their builder."""

from __future__ import annotations

from dataclasses import dataclass, field

from .codec import BLOCK_CONTEXT_SIZE, keccak256
from .errors import BatchError

_U16_MAX = 0xFFFF
_HASHED_BLOCK_CONTEXT_SIZE = 58
_MAX_BLOCKS_PER_CHUNK = 255


@dataclass
class BatchChunkBlockTx:
    """A transaction with its encoded form."""

    l1_msg: bool
    nonce: int
    tx_hash: bytes
    encoded: bytes = b""


@dataclass
class BatchChunkBlock:
    """A block of a chunk."""

    number: int
    timestamp: int
    base_fee: int | None
    gas_limit: int
    hash: bytes
    txs: list[BatchChunkBlockTx] = field(default_factory=list)

    def num_l1_msg(self, total_l1_msg_popped_before: int) -> int:
        """Number of L1 queue entries this block pops, skipped ones included."""
        last_queue_index = None
        for tx in self.txs:
            if tx.l1_msg:
                last_queue_index = tx.nonce
        if last_queue_index is None:
            return 0
        return last_queue_index - total_l1_msg_popped_before + 1

    def num_l2_txs(self) -> int:
        return sum(1 for tx in self.txs if not tx.l1_msg)

    def encode(self, total_l1_msg_popped_before: int) -> bytes:
        """Return the 60-byte block context."""
        num_l1 = self.num_l1_msg(total_l1_msg_popped_before)
        if num_l1 > _U16_MAX:
            raise BatchError("NumL1TxTooLarge")
        num_txs = num_l1 + self.num_l2_txs()
        if num_txs > _U16_MAX:
            raise BatchError("NumTxTooLarge")
        base_fee = (self.base_fee or 0).to_bytes(32, "big")
        return b"".join(
            (
                self.number.to_bytes(8, "big"),
                self.timestamp.to_bytes(8, "big"),
                base_fee,
                self.gas_limit.to_bytes(8, "big"),
                num_txs.to_bytes(2, "big"),
                num_l1.to_bytes(2, "big"),
            )
        )


@dataclass
class BatchChunk:
    """A run of consecutive blocks."""

    blocks: list[BatchChunkBlock] = field(default_factory=list)

    def encode(self, total_l1_msg_popped_before: int) -> bytes:
        """Return the block count, the block contexts and the length-prefixed L2 txs."""
        num_blocks = len(self.blocks)
        if num_blocks == 0 or num_blocks > _MAX_BLOCKS_PER_CHUNK:
            raise BatchError("InvalidNumBlock", num_blocks=num_blocks)

        contexts = bytearray([num_blocks])
        l2_tx_data = bytearray()
        for block in self.blocks:
            block_bytes = block.encode(total_l1_msg_popped_before)
            total_l1_msg_popped_before += block.num_l1_msg(total_l1_msg_popped_before)
            if len(block_bytes) != BLOCK_CONTEXT_SIZE:
                raise BatchError("InvalidBlockBytes", data=block_bytes)
            contexts += block_bytes
            for tx in block.txs:
                if tx.l1_msg:
                    continue
                l2_tx_data += len(tx.encoded).to_bytes(4, "big")
                l2_tx_data += tx.encoded
        return bytes(contexts + l2_tx_data)

    def hash(self, version: int, total_l1_msg_popped_before: int) -> bytes:
        """Chunk hash; L2 tx hashes are included only for version 0."""
        try:
            chunk_bytes = self.encode(total_l1_msg_popped_before)
        except BatchError as err:
            raise BatchError("EncodeBatchChunk") from err

        data = bytearray()
        for i in range(chunk_bytes[0]):
            start = 1 + BLOCK_CONTEXT_SIZE * i
            data += chunk_bytes[start : start + _HASHED_BLOCK_CONTEXT_SIZE]
        for block in self.blocks:
            data += b"".join(tx.tx_hash for tx in block.txs if tx.l1_msg)
            if version == 0:
                data += b"".join(tx.tx_hash for tx in block.txs if not tx.l1_msg)
        return keccak256(bytes(data))


class BatchChunkBuilder:
    """Groups blocks into chunks following an expected layout of block numbers."""

    def __init__(self, numbers: list[list[int]]) -> None:
        self.numbers = numbers
        self.chunks: list[BatchChunk] = []
        self._current_chunk_id = 0
        self._current_block_id = 0

    def add_block(self, block: BatchChunkBlock) -> None:
        """Append ``block``; raise ValueError if it is unknown or out of order."""
        for chunk_id, chunk in enumerate(self.numbers):
            for block_id, number in enumerate(chunk):
                if number != block.number:
                    continue
                expect_chunk_id = self._current_chunk_id
                expect_block_id = self._current_block_id
                if expect_block_id == len(self.numbers[self._current_chunk_id]):
                    expect_chunk_id += 1
                    expect_block_id = 0
                if expect_block_id != block_id or expect_chunk_id != chunk_id:
                    raise ValueError(
                        f"unexpected block, want=[{expect_block_id}.{expect_chunk_id}], "
                        f"got=[{block_id}.{chunk_id}]"
                    )
                if block_id == 0:
                    self.chunks.append(BatchChunk())
                self.chunks[chunk_id].blocks.append(block)
                self._current_chunk_id = chunk_id
                self._current_block_id = block_id + 1
                return
        raise ValueError("unknown block")