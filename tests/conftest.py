from __future__ import annotations

from collections import Counter
from typing import Sequence

import pytest
from eth_utils import to_checksum_address

from gasrefund.domain.catalog import DISTRIBUTE_PAYOUTS_T0, EXECUTION_SUCCESS_T0, project_id_topic
from gasrefund.domain.errors import NetworkError
from gasrefund.domain.models import (
    BlockHeader, EventGroup, LogEntry, Receipt, TransactionHandle,
)
from gasrefund.domain.value_types import Address, Topic, TxHash

SENDER_A = to_checksum_address("0x" + "aa" * 20)
SENDER_B = to_checksum_address("0x" + "bb" * 20)
GWEI = 10**9

MULTISIG = EventGroup(
    label="Execute multisig tx",
    addresses=(Address(to_checksum_address("0x" + "01" * 20)),),
    topics=((EXECUTION_SUCCESS_T0,),),
)
PAYOUTS = EventGroup(
    label="Distribute JuiceboxDAO payouts",
    addresses=(Address(to_checksum_address("0x" + "02" * 20)), Address(to_checksum_address("0x" + "03" * 20))),
    topics=((DISTRIBUTE_PAYOUTS_T0,), (), (), (project_id_topic(1),)),
)


def tx_hash(n: int) -> TxHash:
    return TxHash("0x" + f"{n:064x}")


def block_hash(n: int) -> str:
    return "0x" + f"{n + 0xB10C:064x}"


class FakeChain:
    """In-memory ChainClient: logs are keyed by the group's address tuple."""

    def __init__(self, *, start: BlockHeader, latest: BlockHeader) -> None:
        self.blocks = {start.number: start}
        self.latest = latest
        self.logs: dict[tuple[Address, ...], list[LogEntry]] = {}
        self.txs: dict[TxHash, tuple[Address, Receipt]] = {}
        self.calls: Counter[str] = Counter()
        self.log_queries: list[tuple[int, int, tuple[Address, ...]]] = []
        self.fail_on: str | None = None
        self.closed = False

    def add_log(self, group: EventGroup, h: TxHash, block: int) -> None:
        entries = self.logs.setdefault(tuple(group.addresses), [])
        entries.append(LogEntry(
            tx_hash=h, block_hash=block_hash(block),
            block_number=block, log_index=len(entries), transaction_index=int(h, 16) % 100,
        ))

    def add_tx(self, group: EventGroup, n: int, sender: str, gas_used: int, gas_price: int, block: int) -> TxHash:
        h = tx_hash(n)
        self.add_log(group, h, block)
        self.txs[h] = (Address(sender), Receipt(h, effective_gas_price=gas_price, gas_used=gas_used))
        return h

    def _hit(self, name: str) -> None:
        self.calls[name] += 1
        if self.fail_on == name:
            raise NetworkError(f"{name}: boom")

    async def get_block_by_number(self, number: int | None) -> BlockHeader:
        self._hit("latest" if number is None else "block")
        return self.latest if number is None else self.blocks[number]

    async def filter_logs(self, from_block: int, to_block: int, addresses: Sequence[Address],
                          topics: Sequence[Sequence[Topic]]) -> list[LogEntry]:
        self._hit("filter_logs")
        self.log_queries.append((from_block, to_block, tuple(addresses)))
        return list(self.logs.get(tuple(addresses), []))

    async def get_transaction_by_hash(self, tx_hash: TxHash) -> TransactionHandle:
        self._hit("tx")
        return TransactionHandle(tx_hash=tx_hash)

    async def get_transaction_sender(self, tx: TransactionHandle, block_hash: str, index: int) -> Address:
        self._hit("sender")
        return self.txs[tx.tx_hash][0]

    async def get_transaction_receipt(self, tx_hash: TxHash) -> Receipt:
        self._hit("receipt")
        return self.txs[tx_hash][1]

    async def aclose(self) -> None:
        self.closed = True


class MemorySink:
    def __init__(self) -> None:
        self.writes: list[tuple[str, str]] = []

    def write(self, report_text: str, bundle_json: str) -> None:
        self.writes.append((report_text, bundle_json))


T0 = 1_704_067_200     # Mon, 01 Jan 2024 00:00:00 GMT
T1 = 1_704_153_600     # Tue, 02 Jan 2024 00:00:00 GMT


@pytest.fixture
def chain() -> FakeChain:
    return FakeChain(start=BlockHeader(100, T0), latest=BlockHeader(200, T1))


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()
