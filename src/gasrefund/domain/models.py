from __future__ import annotations
import json
from dataclasses import dataclass, field
from .value_types import Address, Topic, TxHash

@dataclass(slots=True, frozen=True)
class EventGroup:
    label: str
    addresses: tuple[Address, ...]
    # topics[i] matches log topic position i; () = any value
    topics: tuple[tuple[Topic, ...], ...]

@dataclass(slots=True, frozen=True)
class BlockRange:
    start: int
    end: int
    def span(self) -> int: return self.end - self.start + 1

@dataclass(slots=True, frozen=True)
class BlockHeader:
    number: int
    timestamp: int

@dataclass(slots=True, frozen=True)
class LogEntry:
    tx_hash: TxHash
    block_hash: str
    block_number: int
    log_index: int
    transaction_index: int

@dataclass(slots=True, frozen=True)
class TransactionHandle:
    tx_hash: TxHash
    sender: Address | None = None
    block_hash: str | None = None

@dataclass(slots=True, frozen=True)
class Receipt:
    tx_hash: TxHash
    effective_gas_price: int
    gas_used: int

    @property
    def gas_cost_wei(self) -> int:
        return self.effective_gas_price * self.gas_used

@dataclass(slots=True, frozen=True)
class TxRecord:
    sender: Address
    gas_cost_wei: int

@dataclass(slots=True, frozen=True)
class TxDetail:
    label: str
    tx_hash: TxHash
    gas_cost_wei: int
    block_number: int

@dataclass(slots=True)
class Reimbursements:
    """Aggregate state of one run.

    ``included`` is the dedup set keyed by transaction hash, ``details`` the
    per-sender detail blocks in attribution order. Totals are always derived
    from ``included`` so both views share the same sender keys.
    """
    included: dict[TxHash, TxRecord] = field(default_factory=dict)
    details: dict[Address, list[TxDetail]] = field(default_factory=dict)

    def __contains__(self, tx_hash: object) -> bool:
        return tx_hash in self.included

    def add(self, label: str, tx_hash: TxHash, sender: Address, gas_cost_wei: int, block_number: int) -> None:
        if tx_hash in self.included:
            raise ValueError(f"transaction already attributed: {tx_hash}")
        self.details.setdefault(sender, []).append(TxDetail(label, tx_hash, gas_cost_wei, block_number))
        self.included[tx_hash] = TxRecord(sender, gas_cost_wei)

    def totals(self) -> dict[Address, int]:
        out: dict[Address, int] = {}
        for rec in self.included.values():
            out[rec.sender] = out.get(rec.sender, 0) + rec.gas_cost_wei
        return out

    def grand_total(self) -> int:
        return sum(rec.gas_cost_wei for rec in self.included.values())

@dataclass(slots=True, frozen=True)
class BundleMeta:
    name: str
    description: str

@dataclass(slots=True, frozen=True)
class BundleTransaction:
    to: str
    value: str      # decimal wei, big ints as strings

@dataclass(slots=True, frozen=True)
class TransactionBundle:
    chain_id: str
    created_at: int
    meta: BundleMeta
    transactions: tuple[BundleTransaction, ...]

    def to_dict(self) -> dict:
        return {
            "chainId": self.chain_id,
            "createdAt": self.created_at,
            "meta": {"name": self.meta.name, "description": self.meta.description},
            "transactions": [{"to": t.to, "value": t.value} for t in self.transactions],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))
