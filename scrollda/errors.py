"""Errors raised while decoding, encoding and building DA batches."""

from __future__ import annotations

from typing import Any, ClassVar

_BATCH_ERROR_FIELDS: dict[str, tuple[str, ...]] = {
    "UnknownBatchVersion": ("version",),
    "InvalidDABatchData": ("version", "want_at_least", "got"),
    "InvalidBlockNumbers": ("data",),
    "InvalidBlockBytes": ("data",),
    "InvalidNumBlock": ("num_blocks",),
    "InvalidL1Nonce": (
        "expect",
        "current",
        "batch_id",
        "chunk_id",
        "block_id",
        "tx_hash",
    ),
    "MismatchBatchVersionAndBlock": ("block_batch_version", "parent_batch_version"),
    "TooManyChunks": ("max",),
    "MissingChunks": (),
    "TooFewBlocksInLastChunk": (),
    "NumL1TxTooLarge": (),
    "NumTxTooLarge": (),
    "OversizedBatchPayload": ("size",),
    "ZstdEncode": ("message",),
    "KzgError": ("message",),
    "UnexpectedBlock": ("want", "got"),
    "UnknownBlock": (),
    # wraps a DataCompatibilityError
    "ZstdDataCompatibility": ("error",),
    # context kinds: raised ``from`` the underlying error
    "ParseBatchTaskFromCalldata": (),
    "EncodeBatchChunk": (),
    "BuildChunkHash": (),
}

_DATA_COMPATIBILITY_FIELDS: dict[str, tuple[str, ...]] = {
    "SizeTooSmall": ("data",),
    "UnexpectedHeaderType": ("header",),
    "UnexpectedBlkType": ("blk_ty", "blk_size", "is_last"),
    "WrongDataLen": ("len", "min"),
    "UnexpectedEndBeforeLastBlock": (),
}


def _format_value(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return repr(value)


def _freeze(value: Any) -> Any:
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, list):
        return tuple(value)
    return value


class _KindError(ValueError):
    """An error identified by a kind name carrying a fixed set of fields."""

    _FIELDS: ClassVar[dict[str, tuple[str, ...]]] = {}

    def __init__(self, kind: str, **fields: Any) -> None:
        expected = self._FIELDS.get(kind)
        if expected is None:
            raise ValueError(f"unknown {type(self).__name__} kind: {kind!r}")
        if set(fields) != set(expected):
            raise TypeError(
                f"{type(self).__name__}.{kind} takes fields {expected}, got {tuple(fields)}"
            )
        super().__init__(kind)
        self.kind = kind
        self.fields = {name: _freeze(fields[name]) for name in expected}
        for name, value in self.fields.items():
            setattr(self, name, value)

    def __str__(self) -> str:
        if not self.fields:
            return self.kind
        inner = ", ".join(f"{k}={_format_value(v)}" for k, v in self.fields.items())
        return f"{self.kind}({inner})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.kind == other.kind and self.fields == other.fields

    def __hash__(self) -> int:
        return hash((type(self), self.kind, tuple(self.fields.items())))


class DataCompatibilityError(_KindError):
    """A compressed blob payload does not have the expected zstd layout."""

    _FIELDS = _DATA_COMPATIBILITY_FIELDS


class BatchError(_KindError):
    """A DA batch, chunk or block could not be decoded, encoded or built."""

    _FIELDS = _BATCH_ERROR_FIELDS