import pytest

from scrollda.chunk import Block, BlockTx, ChunkV0, ChunkV1
from scrollda.codec import decode_block_numbers
from scrollda.errors import BatchError


def _hash(n):
    return bytes([n]) * 32


def _l1(nonce):
    return BlockTx(l1_msg=True, nonce=nonce, tx_hash=_hash(nonce + 1))


def _l2(tag, rlp):
    return BlockTx(l1_msg=False, nonce=0, tx_hash=_hash(200 + tag), rlp=rlp)


def _block(number, txs, base_fee=7):
    return Block(
        number=number, timestamp=1000 + number, base_fee=base_fee,
        gas_limit=30_000_000, hash=_hash(number), txs=txs,
    )


def test_block_encode_layout():
    block = _block(42, [_l1(0), _l2(1, b"\x01\x02")], base_fee=None)
    enc = block.encode()
    assert len(enc) == 60
    assert enc[0:8] == (42).to_bytes(8, "big")
    assert enc[8:16] == (1042).to_bytes(8, "big")
    assert enc[16:48] == bytes(32)
    assert enc[48:56] == (30_000_000).to_bytes(8, "big")
    assert enc[56:58] == len(block.txs).to_bytes(2, "big")
    assert enc[58:60] == (1).to_bytes(2, "big")


def test_block_num_l1_messages_counts_skipped():
    block = _block(1, [_l1(5), _l2(0, b"x"), _l1(7)])
    assert block.num_l1_messages(5) == 3
    assert _block(1, [_l2(0, b"x")]).num_l1_messages(5) == 0


def test_chunk_encode_roundtrip_block_numbers():
    chunk = ChunkV0()
    for n in (10, 11, 12):
        chunk.add_block(_block(n, [_l2(n, bytes([n]) * 3)]))
    enc = chunk.encode(0)
    assert decode_block_numbers(enc) == [10, 11, 12]
    assert len(enc) == 1 + 3 * 60 + 3 * (4 + 3)


def test_chunk_encode_l2_data_after_contexts():
    chunk = ChunkV0([_block(1, [_l1(0), _l2(0, b"abc")])])
    enc = chunk.encode(0)
    assert enc[61:] == (3).to_bytes(4, "big") + b"abc"


@pytest.mark.parametrize("count", [0, 256])
def test_chunk_encode_invalid_num_blocks(count):
    chunk = ChunkV0([_block(i, []) for i in range(count)])
    with pytest.raises(BatchError) as info:
        chunk.encode(0)
    assert info.value == BatchError("InvalidNumBlock", num_blocks=count)


def test_chunk_hash_wraps_encode_error():
    with pytest.raises(BatchError) as info:
        ChunkV0().hash(0)
    assert info.value.kind == "EncodeBatchChunk"
    assert info.value.__cause__.kind == "InvalidNumBlock"


def test_last_block():
    chunk = ChunkV0([_block(1, []), _block(2, [])])
    assert chunk.last_block().number == 2
    with pytest.raises(BatchError) as info:
        ChunkV0().last_block()
    assert info.value.kind == "TooFewBlocksInLastChunk"


def test_chunk_num_l1_messages_accumulates():
    chunk = ChunkV0([_block(1, [_l1(0), _l1(1)]), _block(2, [_l1(3)])])
    per_block = chunk.blocks[0].num_l1_messages(0)
    assert chunk.num_l1_messages(0) == per_block + chunk.blocks[1].num_l1_messages(per_block)


def test_v0_v1_hash_agree_without_l2_single_block():
    blocks = [_block(3, [_l1(0), _l1(1)])]
    assert ChunkV0(list(blocks)).hash(0) == ChunkV1(list(blocks)).hash(0)


def test_v0_v1_hash_differ_with_l2():
    blocks = [_block(3, [_l1(0), _l2(0, b"zz")])]
    assert ChunkV0(list(blocks)).hash(0) != ChunkV1(list(blocks)).hash(0)


def test_v1_hash_ignores_l2_tx_hashes():
    a = ChunkV1([_block(3, [_l1(0), _l2(0, b"zz")])])
    b = ChunkV1([_block(3, [_l1(0), _l2(9, b"yy")])])
    assert a.hash(0) == b.hash(0)
    assert len(a.hash(0)) == 32