import pytest

from scrollda.batch import DABatchV3
from scrollda.batch_task import BatchTask, Finalize
from scrollda.chunk import Block, ChunkV0
from scrollda.errors import BatchError
from scrollda.legacy_batch import DABatchV0


def _word(value):
    return value.to_bytes(32, "big")


def _pad(data):
    return data + bytes(-len(data) % 32)


def _enc_bytes(data):
    return _word(len(data)) + _pad(data)


def _enc_bytes_array(items):
    encoded = [_enc_bytes(item) for item in items]
    heads = b""
    offset = 32 * len(items)
    for item in encoded:
        heads += _word(offset)
        offset += len(item)
    return _word(len(items)) + heads + b"".join(encoded)


def _commit_calldata(parent, chunks, bitmap=b""):
    tails = [_enc_bytes(parent), _enc_bytes_array(chunks), _enc_bytes(bitmap)]
    offset = 32 * 4
    heads = _word(0)
    for tail in tails:
        heads += _word(offset)
        offset += len(tail)
    return heads + b"".join(tails)


def _chunk_bytes(numbers):
    chunk = ChunkV0(
        [Block(number=n, timestamp=n * 3, base_fee=None, gas_limit=1000, hash=bytes(32)) for n in numbers]
    )
    return chunk.encode(0)


def _parent():
    return DABatchV0(batch_index=41, total_l1_message_popped=5)


def test_from_calldata_reads_chunks_and_parent():
    parent = _parent()
    data = _commit_calldata(parent.encode(), [_chunk_bytes([10, 11]), _chunk_bytes([12])])
    task = BatchTask.from_calldata(data)
    assert task.chunks == [[10, 11], [12]]
    assert task.parent_batch_header == parent
    assert task.id() == 42
    assert task.start() == 10
    assert task.end() == 12
    assert task.block_numbers() == [10, 11, 12]


def test_from_calldata_truncated_chunk():
    bad = _chunk_bytes([10, 11])[:100]
    data = _commit_calldata(_parent().encode(), [bad])
    with pytest.raises(BatchError) as info:
        BatchTask.from_calldata(data)
    assert info.value.kind == "InvalidBlockNumbers"
    assert info.value.data == bad


def test_from_calldata_empty_chunk():
    data = _commit_calldata(_parent().encode(), [b""])
    with pytest.raises(BatchError) as info:
        BatchTask.from_calldata(data)
    assert info.value.kind == "InvalidBlockNumbers"


def test_from_calldata_bad_parent():
    data = _commit_calldata(bytes(20), [_chunk_bytes([1])])
    with pytest.raises(BatchError) as info:
        BatchTask.from_calldata(data)
    assert info.value.kind == "ParseBatchTaskFromCalldata"
    assert info.value.__cause__.kind == "InvalidDABatchData"


def test_start_end_without_blocks():
    task = BatchTask(chunks=[], parent_batch_header=_parent())
    assert task.start() is None
    assert task.end() is None
    assert task.block_numbers() == []
    assert BatchTask(chunks=[[]], parent_batch_header=_parent()).start() is None


def _finalize_calldata(header, roots):
    head_len = 32 * (1 + len(roots))
    return _word(head_len) + b"".join(roots) + _enc_bytes(header)


def _mismatch_message(fin, *args):
    with pytest.raises(Exception) as info:
        fin.assert_poe(*args)
    return info.type, str(info.value)


def test_finalize_v0_has_prev_state_root():
    header = _parent()
    prev, new, withdraw = b"\x01" * 32, b"\x02" * 32, b"\x03" * 32
    fin = Finalize.from_calldata(_finalize_calldata(header.encode(), [prev, new, withdraw]))
    assert fin.batch == header
    assert fin.prev_state_root == prev
    assert fin.new_state_root == new
    assert fin.new_withdrawal_root == withdraw
    assert fin.assert_poe(prev, new, withdraw, header.hash()) is None
    kind, message = _mismatch_message(fin, new, new, withdraw, header.hash())
    assert kind is AssertionError
    assert "prev_state_root mismatch" in message


def test_finalize_v3_has_no_prev_state_root():
    header = DABatchV3(batch_index=9)
    new, withdraw = b"\x02" * 32, b"\x03" * 32
    fin = Finalize.from_calldata(_finalize_calldata(header.encode(), [new, withdraw]))
    assert fin.prev_state_root is None
    assert fin.new_state_root == new
    assert fin.new_withdrawal_root == withdraw
    assert fin.assert_poe(b"\xff" * 32, new, withdraw, header.hash()) is None
    kind, message = _mismatch_message(fin, b"\xff" * 32, new, withdraw, bytes(32))
    assert kind is AssertionError
    assert "batch_hash mismatch" in message
    kind, message = _mismatch_message(fin, b"\xff" * 32, new, new, header.hash())
    assert kind is AssertionError
    assert "withdrawal_root mismatch" in message


def test_finalize_truncated_calldata():
    data = _finalize_calldata(_parent().encode(), [b"\x01" * 32])
    with pytest.raises(ValueError):
        Finalize.from_calldata(data[:40])