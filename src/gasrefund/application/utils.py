from datetime import datetime, timezone
from decimal import Decimal
from email.utils import format_datetime

from eth_utils import from_wei


def wei_to_eth_str(wei: int) -> str:
    """Exact ether amount in positional notation (never 1E-7 style)."""
    return f"{Decimal(from_wei(wei, 'ether')):f}"


def _rfc1123(ts: int) -> str:
    # English day/month names regardless of LC_TIME
    return format_datetime(datetime.fromtimestamp(ts, timezone.utc), usegmt=True)
