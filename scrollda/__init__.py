"""Scroll rollup DA batch codecs, chunk hashing, hardfork rules and prover bookkeeping."""

__version__ = "0.1.0"