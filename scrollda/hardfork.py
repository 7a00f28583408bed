"""Hardfork schedule of the Scroll networks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

logger = logging.getLogger(__name__)

SCROLL_MAINNET_CHAIN_ID = 534352
SCROLL_TESTNET_CHAIN_ID = 534351


class SpecId(IntEnum):
    """EVM specifications of the Scroll networks, oldest first."""

    PRE_BERNOULLI = 0
    BERNOULLI = 1
    CURIE = 2


_HARDFORK_HEIGHTS: dict[int, dict[SpecId, int]] = {
    SCROLL_TESTNET_CHAIN_ID: {SpecId.BERNOULLI: 3747132, SpecId.CURIE: 4740239},
    SCROLL_MAINNET_CHAIN_ID: {SpecId.BERNOULLI: 5220340, SpecId.CURIE: 7096836},
}

_DARWIN = "darwin"
_DARWIN_V2 = "darwin_v2"

_HARDFORK_TIMES: dict[int, dict[str, int]] = {
    SCROLL_TESTNET_CHAIN_ID: {_DARWIN: 1723622400, _DARWIN_V2: 1724832000},
    SCROLL_MAINNET_CHAIN_ID: {_DARWIN: 1724227200, _DARWIN_V2: 1725264000},
}


@dataclass(frozen=True)
class HardforkConfig:
    """Block heights and timestamps at which the forks activate."""

    bernoulli_block: int = 0
    curie_block: int = 0
    curie_darwin_time: int = 0
    curie_darwin_v2_time: int = 0

    @classmethod
    def default_from_chain_id(cls, chain_id: int) -> HardforkConfig:
        """Return the known schedule for ``chain_id``; unknown chains enable every fork."""
        heights = _HARDFORK_HEIGHTS.get(chain_id)
        times = _HARDFORK_TIMES.get(chain_id)
        if heights is None or times is None:
            logger.warning(
                "Chain id %d not found in hardfork heights, "
                "all forks are enabled by default",
                chain_id,
            )
            return cls()
        return cls(
            bernoulli_block=heights.get(SpecId.BERNOULLI, 0),
            curie_block=heights.get(SpecId.CURIE, 0),
            curie_darwin_time=times.get(_DARWIN, 0),
            curie_darwin_v2_time=times.get(_DARWIN_V2, 0),
        )

    def get_spec_id(self, block_number: int) -> SpecId:
        """Return the EVM specification in force at ``block_number``."""
        if block_number < self.bernoulli_block:
            return SpecId.PRE_BERNOULLI
        if block_number < self.curie_block:
            return SpecId.BERNOULLI
        return SpecId.CURIE

    def check_migration(self, block_number: int) -> None:
        """Raise ValueError at the Curie block, whose state migration is unsupported."""
        if block_number == self.curie_block:
            raise ValueError(f"unsupported curie migrate at height #{block_number}")

    def batch_version(self, number: int, timestamp: int) -> int:
        """Return the DA batch codec version for a block."""
        if number < self.bernoulli_block:
            return 0
        if number < self.curie_block:
            return 1
        if timestamp < self.curie_darwin_time:
            return 2
        if timestamp < self.curie_darwin_v2_time:
            return 3
        return 4