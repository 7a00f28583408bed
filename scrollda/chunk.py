"""Blocks and chunks of the v0 and v1 DA codecs (shared by later versions)."""

from __future__ import annotations

from dataclasses import dataclass, field

from .codec import BLOCK_CONTEXT_SIZE, keccak256
from .errors import BatchError

_HASHED_BLOCK_CONTEXT_SIZE = 58
_MAX_BLOCKS_PER_CHUNK = 255


@dataclass
class BlockTx:
    """A transaction as seen by the DA codec."""

    l1_msg: bool
    nonce: int
    tx_hash: bytes
    rlp: bytes = b""


@dataclass
class Block:
    """A block context together with its transactions."""

    number: int
    timestamp: int
    base_fee: int | None
    gas_limit: int
    hash: bytes
    txs: list[BlockTx] = field(default_factory=list)

    def num_l1_messages(self, total_l1_message_popped_before: int) -> int:
        """Number of L1 queue entries this block pops, skipped ones included."""
        last_queue_index = None
        for tx in self.txs:
            if tx.l1_msg:
                last_queue_index = tx.nonce
        if last_queue_index is None:
            return 0
        return last_queue_index - total_l1_message_popped_before + 1

    def encode(self) -> bytes:
        """Return the 60-byte block context."""
        num_l1 = sum(1 for tx in self.txs if tx.l1_msg) & 0xFFFF
        base_fee = (self.base_fee or 0).to_bytes(32, "big")
        return b"".join(
            (
                self.number.to_bytes(8, "big"),
                self.timestamp.to_bytes(8, "big"),
                base_fee,
                self.gas_limit.to_bytes(8, "big"),
                (len(self.txs) & 0xFFFF).to_bytes(2, "big"),
                num_l1.to_bytes(2, "big"),
            )
        )


@dataclass
class ChunkV0:
    """A run of consecutive blocks, hashed the v0 way."""

    blocks: list[Block] = field(default_factory=list)

    def add_block(self, block: Block) -> None:
        self.blocks.append(block)

    def last_block(self) -> Block:
        if not self.blocks:
            raise BatchError("TooFewBlocksInLastChunk")
        return self.blocks[-1]

    def encode(self, total_l1_message_popped_before: int) -> bytes:
        """Return the block count, the block contexts and the length-prefixed L2 txs."""
        num_blocks = len(self.blocks)
        if num_blocks == 0 or num_blocks > _MAX_BLOCKS_PER_CHUNK:
            raise BatchError("InvalidNumBlock", num_blocks=num_blocks)

        contexts = bytearray([num_blocks])
        l2_tx_data = bytearray()
        for block in self.blocks:
            block_bytes = block.encode()
            if len(block_bytes) != BLOCK_CONTEXT_SIZE:
                raise BatchError("InvalidBlockBytes", data=block_bytes)
            contexts += block_bytes
            for tx in block.txs:
                if tx.l1_msg:
                    continue
                l2_tx_data += len(tx.rlp).to_bytes(4, "big")
                l2_tx_data += tx.rlp
        return bytes(contexts + l2_tx_data)

    def hash(self, total_l1_message_popped_before: int) -> bytes:
        """Hash of the block contexts followed by each block's L1 then L2 tx hashes."""
        try:
            chunk_bytes = self.encode(total_l1_message_popped_before)
        except BatchError as err:
            raise BatchError("EncodeBatchChunk") from err

        data = bytearray()
        for i in range(chunk_bytes[0]):
            start = 1 + BLOCK_CONTEXT_SIZE * i
            data += chunk_bytes[start : start + _HASHED_BLOCK_CONTEXT_SIZE]
        for block in self.blocks:
            data += b"".join(tx.tx_hash for tx in block.txs if tx.l1_msg)
            data += b"".join(tx.tx_hash for tx in block.txs if not tx.l1_msg)
        return keccak256(bytes(data))

    def num_l1_messages(self, total_l1_message_popped_before: int) -> int:
        """Number of L1 queue entries popped by all blocks of the chunk."""
        total = 0
        for block in self.blocks:
            in_block = block.num_l1_messages(total_l1_message_popped_before)
            total += in_block
            total_l1_message_popped_before += in_block
        return total


@dataclass
class ChunkV1(ChunkV0):
    """A chunk hashed the v1 way: L2 tx hashes are left out."""

    def hash(self, total_l1_message_popped_before: int) -> bytes:
        """Hash of all block contexts followed by all L1 tx hashes."""
        data = bytearray()
        for block in self.blocks:
            data += block.encode()[:_HASHED_BLOCK_CONTEXT_SIZE]
        for block in self.blocks:
            data += b"".join(tx.tx_hash for tx in block.txs if tx.l1_msg)
        return keccak256(bytes(data))