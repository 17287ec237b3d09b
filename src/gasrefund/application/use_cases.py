from __future__ import annotations
import logging, time
from dataclasses import dataclass
from typing import Sequence

from ..config import Settings
from ..domain.catalog import EVENT_GROUPS
from ..domain.errors import ConfigurationError
from ..domain.models import BlockHeader, BlockRange, EventGroup, Reimbursements
from ..ports.rpc import ChainClient
from ..ports.storage import OutputSink
from .rendering import build_bundle, render_report

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RunSummary:
    block_range: BlockRange
    senders: int
    transactions: int
    total_wei: int


async def resolve_block_range(rpc: ChainClient, start_block: int) -> tuple[BlockRange, BlockHeader, BlockHeader]:
    """Fetch both bounding blocks; ``latest`` is read exactly once per run."""
    start = await rpc.get_block_by_number(start_block)
    latest = await rpc.get_block_by_number(None)
    if start.number > latest.number:
        raise ConfigurationError(f"start block {start.number} is ahead of the latest block {latest.number}")
    return BlockRange(start.number, latest.number), start, latest


async def collect_reimbursements(
    rpc: ChainClient,
    groups: Sequence[EventGroup],
    block_range: BlockRange,
) -> Reimbursements:
    """Attribute the gas of every matching transaction to its sender.

    Groups are queried in order and logs are walked in node order. A
    transaction already attributed (by an earlier log or an earlier group)
    is skipped, so the first group that reaches it keeps the label.
    """
    reimb = Reimbursements()
    for group in groups:
        logs = await rpc.filter_logs(block_range.start, block_range.end, group.addresses, group.topics)
        added = 0
        for lg in logs:
            if lg.tx_hash in reimb:
                continue
            tx = await rpc.get_transaction_by_hash(lg.tx_hash)
            sender = await rpc.get_transaction_sender(tx, lg.block_hash, lg.transaction_index)
            receipt = await rpc.get_transaction_receipt(lg.tx_hash)
            gas = receipt.gas_cost_wei
            reimb.add(group.label, lg.tx_hash, sender, gas, lg.block_number)
            added += 1
            log.debug("%s %s log=%d:%d sender=%s gas=%d", group.label, lg.tx_hash, lg.block_number, lg.log_index, sender, gas)
        log.info("%s: %d logs, %d new transactions", group.label, len(logs), added)
    return reimb


async def run_reimbursement(
    settings: Settings,
    rpc: ChainClient,
    sink: OutputSink,
    *,
    groups: Sequence[EventGroup] = EVENT_GROUPS,
    now: int | None = None,
) -> RunSummary:
    """Fetch, aggregate and render; the sink is only called once everything succeeded."""
    block_range, start, latest = await resolve_block_range(rpc, settings.start_block)
    log.info("block range %d..%d (%d blocks)", block_range.start, block_range.end, block_range.span())

    reimb = await collect_reimbursements(rpc, groups, block_range)

    report = render_report(reimb, start, latest)
    bundle = build_bundle(reimb, block_range, int(time.time()) if now is None else now)
    sink.write(report, bundle.to_json())

    return RunSummary(
        block_range=block_range,
        senders=len(reimb.details),
        transactions=len(reimb.included),
        total_wei=reimb.grand_total(),
    )
