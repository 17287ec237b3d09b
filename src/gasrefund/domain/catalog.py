from __future__ import annotations

from eth_utils import to_checksum_address

from .models import EventGroup
from .value_types import Address, Topic

START_BLOCK = 18_949_176
CHAIN_ID = "1"
REPORT_TITLE = "JuiceboxDAO Gas Reimbursements"

# Topic0 constants (lowercase, with "0x")
EXECUTION_SUCCESS_T0          = Topic("0x442e715f626346e8c54381002da614f62bee8d27386535b2521ec8540898556e")
DISTRIBUTE_PAYOUTS_T0         = Topic("0xc41a8d26c70cfcf1b9ea10f82482ac947b8be5bea2750bc729af844bbfde1e28")
DISTRIBUTE_RESERVED_TOKENS_T0 = Topic("0xb12d7a78048433f69fe6d30145bf08aad8e82985b96e4db6d5c6a7e94d57086e")


def project_id_topic(project_id: int) -> Topic:
    """uint256 indexed projectId as a 32-byte topic."""
    return Topic("0x" + project_id.to_bytes(32, "big").hex())


def _addr(s: str) -> Address: return Address(to_checksum_address(s))


JUICEBOX_PROJECT_ID = project_id_topic(1)

EVENT_GROUPS: tuple[EventGroup, ...] = (
    EventGroup(
        label="Execute multisig tx",
        addresses=(_addr("0xAF28bcB48C40dBC86f52D459A6562F658fc94B1e"),),
        topics=((EXECUTION_SUCCESS_T0,),),
    ),
    EventGroup(
        label="Distribute JuiceboxDAO payouts",
        addresses=(
            _addr("0xFA391De95Fcbcd3157268B91d8c7af083E607A5C"),   # JBETHPaymentTerminal3_1
            _addr("0x457cD63bee88ac01f3cD4a67D5DCc921D8C0D573"),   # JBETHPaymentTerminal3_1_1
            _addr("0x1d9619E10086FdC1065B114298384aAe3F680CC0"),   # JBETHPaymentTerminal3_1_2
        ),
        topics=((DISTRIBUTE_PAYOUTS_T0,), (), (), (JUICEBOX_PROJECT_ID,)),
    ),
    EventGroup(
        label="Distribute JuiceboxDAO reserved tokens",
        addresses=(
            _addr("0xFFdD70C318915879d5192e8a0dcbFcB0285b3C98"),   # JBController
            _addr("0xA139D37275d1fF7275e6F33821898934Bc8Cb7B6"),   # JBController3_0_1
            _addr("0x97a5b9D9F0F7cD676B69f584F29048D0Ef4BB59b"),   # JBController3_1
        ),
        topics=((DISTRIBUTE_RESERVED_TOKENS_T0,), (), (), (JUICEBOX_PROJECT_ID,)),
    ),
)
