from __future__ import annotations

from eth_utils import to_checksum_address

from ..domain.catalog import CHAIN_ID, REPORT_TITLE
from ..domain.models import (
    BlockHeader, BlockRange, BundleMeta, BundleTransaction, Reimbursements, TransactionBundle,
)
from .utils import _rfc1123, wei_to_eth_str


def render_report(reimb: Reimbursements, start: BlockHeader, latest: BlockHeader) -> str:
    """Markdown-ish report: header, then one section per sender in attribution order."""
    totals = reimb.totals()
    parts: list[str] = [
        f"# {REPORT_TITLE}\n\n",
        f"From {_rfc1123(start.timestamp)} to {_rfc1123(latest.timestamp)} "
        f"(block {start.number} to block {latest.number})\n\n",
    ]
    for sender, details in reimb.details.items():
        parts.append(f"## Summary for {to_checksum_address(sender)}\n\n")
        parts.append(f"Total gas to reimburse: {wei_to_eth_str(totals[sender])} ETH\n\n")
        parts.append("### Transactions\n\n")
        for d in details:
            parts.append(
                f"Type: {d.label}\nTxHash: {d.tx_hash}\n"
                f"Gas: {wei_to_eth_str(d.gas_cost_wei)} ETH\nBlock: {d.block_number}\n\n"
            )
    return "".join(parts)


def build_bundle(reimb: Reimbursements, block_range: BlockRange, created_at: int) -> TransactionBundle:
    return TransactionBundle(
        chain_id=CHAIN_ID,
        created_at=int(created_at),
        meta=BundleMeta(
            name=REPORT_TITLE,
            description=f"Gas reimbursements from block {block_range.start} to {block_range.end}",
        ),
        transactions=tuple(
            BundleTransaction(to=to_checksum_address(sender), value=str(total))
            for sender, total in reimb.totals().items()
        ),
    )
