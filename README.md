# scrollda

`scrollda` is a library for working with Scroll rollup batches. It covers:

- batch headers of codec versions 0 to 4: `DABatchV0`, `DABatchV1`, `DABatchV2` (`scrollda.legacy_batch`), `DABatchV3`, `DABatchV4` and `decode_batch` (`scrollda.batch`);
- blocks and chunks and their hashes: `BlockTx`, `Block`, `ChunkV0`, `ChunkV1` (`scrollda.chunk`), plus `BatchChunk`, `BatchChunkBlock`, `BatchChunkBlockTx` and `BatchChunkBuilder` (`scrollda.chunk_builder`);
- commit and finalize calldata: `BatchTask` and `Finalize` (`scrollda.batch_task`);
- the hardfork schedule: `HardforkConfig` and `SpecId` (`scrollda.hardfork`);
- wire-format helpers in `scrollda.codec`: `keccak256`, `sha256`, `calc_blob_hash`, `solidity_parse_bytes`, `solidity_parse_array_bytes`, `decode_block_numbers`, `make_blob_canonical`, `construct_skipped_bitmap`, `check_chunks_size`, `check_compressed_data_compatibility`;
- prover-side helpers: an expiring store with lock placeholders (`scrollda.da.DaManager`), an async task table that deduplicates work (`scrollda.task_manager.TaskManager`) and a JSON configuration loader (`scrollda.config.Config`).

Errors are raised as `scrollda.errors.BatchError` and `scrollda.errors.DataCompatibilityError`. Both are `ValueError` subclasses, and each carries a `kind` name and its `fields`.

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Decoding a batch header

```python
from scrollda.batch import decode_batch

header = decode_batch(raw_header_bytes)   # the first byte selects the version
print(header.batch_index, header.hash().hex())
assert header.encode() == raw_header_bytes
```

An unknown version byte, or a header shorter than its version needs, raises `BatchError`. Empty input raises `ValueError`.

## Building a version 0 batch

```python
from scrollda.chunk import Block, BlockTx, ChunkV0
from scrollda.legacy_batch import DABatchV0

chunk = ChunkV0()
chunk.add_block(Block(number=1, timestamp=0, base_fee=None, gas_limit=0,
                      hash=bytes(32), txs=[BlockTx(False, 0, bytes(32), b"\x01")]))
batch = DABatchV0.build(parent_header, [chunk])
```

`DABatchV0.build` works out the skipped L1 message bitmap, the data hash and the popped-message counts from the parent header.

## Reading calldata

```python
from scrollda.batch_task import BatchTask, Finalize

task = BatchTask.from_calldata(commit_calldata[4:])   # strip the 4-byte selector
print(task.id(), task.start(), task.end(), task.block_numbers())

fin = Finalize.from_calldata(finalize_calldata[4:])
fin.assert_poe(prev_state_root, new_state_root, withdrawal_root, batch_hash)
```

`Finalize.assert_poe` raises `AssertionError` on the first value that does not match. The previous state root is only checked for batch versions up to 2.

## Hardforks

```python
from scrollda.hardfork import HardforkConfig

cfg = HardforkConfig.default_from_chain_id(534352)
cfg.get_spec_id(block_number)              # SpecId.PRE_BERNOULLI / BERNOULLI / CURIE
cfg.batch_version(block_number, timestamp) # 0 to 4
cfg.check_migration(block_number)          # ValueError at the Curie block
```

A chain id that is not in the table logs a warning and enables every fork.

## Data-availability store

```python
from scrollda.da import DaManager, DaItemLockStatus

da = DaManager()
da.try_lock([key], 120)   # [DaItemLockStatus.LOCKED] the first time
da.put(key, payload, 120) # fills the placeholder
da.get(key)               # payload until it expires
```

Locking a key again gives `FAILED` while only the placeholder is there, and `EXIST` once data has been put. Every lock attempt or put extends the item's lifetime. Expired items are dropped on each write.

## Task deduplication

```python
from scrollda.task_manager import TaskManager

tasks = TaskManager(100)                 # remembers at most 100 tasks
cached = await tasks.process_task(key)   # None: this caller computes it
if cached is None:
    await tasks.update_task(key, result)
```

Other callers of the same key wait for the result. They poll every `poll_interval` seconds (5 by default).

## Configuration

```python
from scrollda.config import Config, get_timeout

cfg = Config.read_file("config/prover.json")
cfg.server.body_limit, cfg.l2_timeout_secs
get_timeout(cfg.l2_timeout_secs)         # timedelta, or None for 0
```

Missing fields take their defaults: body limit 52428800, 10 workers, queue size 256 and an L2 timeout of 60 seconds. A malformed field raises `ValueError`.

## What it does not do

- There is no command-line program and no JSON-RPC server. The package is a library only.
- It does not execute blocks, fetch traces or produce proofs.
- Batch headers of versions 1 to 4 can be decoded and encoded, but not built from chunks. That would need the blob payload: zstd compression and KZG commitments, and neither is included. Only `DABatchV0.build` builds a header.
</content>