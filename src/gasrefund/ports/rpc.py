# gasrefund/ports/rpc.py
from __future__ import annotations

from typing import Protocol, Sequence
from ..domain.models import BlockHeader, LogEntry, Receipt, TransactionHandle
from ..domain.value_types import Address, Topic, TxHash


class ChainClient(Protocol):
    """Port defining the contract for an Ethereum JSON-RPC client.

    Every method raises ``NetworkError`` on failure; there is no retry.
    """

    async def get_block_by_number(self, number: int | None) -> BlockHeader:
        """Return the header of block ``number``, or of the latest block when None."""

    async def filter_logs(
        self,
        from_block: int,
        to_block: int,
        addresses: Sequence[Address],
        topics: Sequence[Sequence[Topic]],
    ) -> list[LogEntry]:
        """Return logs for [from_block, to_block] inclusive, in node order.

        ``topics`` is position-indexed; an empty sequence matches anything.
        """

    async def get_transaction_by_hash(self, tx_hash: TxHash) -> TransactionHandle:
        """Return the transaction handle for ``tx_hash``."""

    async def get_transaction_sender(self, tx: TransactionHandle, block_hash: str, index: int) -> Address:
        """Return the sender of ``tx`` as included in ``block_hash`` at position ``index``."""

    async def get_transaction_receipt(self, tx_hash: TxHash) -> Receipt:
        """Return effectiveGasPrice and gasUsed for ``tx_hash``."""
