from __future__ import annotations
import asyncio, time, httpx
from typing import Any, Callable, Sequence
from eth_utils import to_checksum_address
from ..domain.errors import NetworkError, RPCTimeoutError
from ..domain.models import BlockHeader, LogEntry, Receipt, TransactionHandle
from ..domain.value_types import Address, Topic, TxHash
from ..ports.rpc import ChainClient

def _to_hex_block(n: int) -> str: return hex(int(n))
def _quantity(x: Any) -> int:
    if isinstance(x, int): return x
    try:
        return int(str(x), 16)
    except ValueError:
        raise NetworkError(f"invalid hex quantity {x!r}") from None

def _build_topics_param(topics: Sequence[Sequence[Topic]]) -> list[list[str] | None]:
    # empty position -> null (wildcard)
    return [[str(t).lower() for t in pos] if pos else None for pos in topics]

def _as_dict(res: Any, method: str) -> dict:
    if not isinstance(res, dict):
        raise NetworkError(f"{method}: unexpected result {res!r}")
    return res

def _checksum(addr: Any, method: str) -> Address:
    try:
        return Address(to_checksum_address(addr))
    except (ValueError, TypeError) as e:
        raise NetworkError(f"{method}: invalid address {addr!r}") from e

def _field(obj: dict, key: str, method: str) -> Any:
    try:
        return obj[key]
    except (KeyError, TypeError):
        raise NetworkError(f"{method}: response is missing '{key}'") from None

class HttpxRPC(ChainClient):
    """JSON-RPC client bound to a single deadline shared by every request.

    The deadline starts when the client is built. Each request, body included,
    must finish within whatever time is left; once nothing is left, requests
    fail with ``RPCTimeoutError`` before touching the network.
    """
    def __init__(
        self,
        rpc_url: str,
        deadline_s: float = 10.0,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.rpc_url = rpc_url
        self._clock = clock
        self.deadline = clock() + deadline_s
        self._next_id = 0
        self.client = httpx.AsyncClient(
            http2=True,
            timeout=httpx.Timeout(deadline_s),
            transport=transport,
        )

    def remaining(self) -> float:
        return self.deadline - self._clock()

    async def _post(self, payload: dict, remaining: float) -> Any:
        r = await self.client.post(self.rpc_url, json=payload, timeout=httpx.Timeout(remaining))
        r.raise_for_status()
        return r.json()

    async def _call(self, method: str, params: list) -> Any:
        remaining = self.remaining()
        if remaining <= 0:
            raise RPCTimeoutError(f"{method}: request deadline exceeded")
        self._next_id += 1
        payload = {"jsonrpc":"2.0","id":self._next_id,"method":method,"params":params}
        try:
            data = await asyncio.wait_for(self._post(payload, remaining), remaining)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise RPCTimeoutError(f"{method}: request deadline exceeded") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"{method}: {type(e).__name__}: {e}") from e
        except ValueError as e:
            raise NetworkError(f"{method}: invalid JSON response") from e
        if not isinstance(data, dict):
            raise NetworkError(f"{method}: unexpected response {data!r}")
        if "error" in data:
            err = data["error"]
            if isinstance(err, dict):
                raise NetworkError(f"{method} RPC error code={err.get('code')} message={err.get('message')}")
            raise NetworkError(f"{method} RPC error: {err}")
        return data.get("result")

    async def get_block_by_number(self, number: int | None) -> BlockHeader:
        tag = "latest" if number is None else _to_hex_block(number)
        res = await self._call("eth_getBlockByNumber", [tag, False])
        if res is None:
            raise NetworkError(f"eth_getBlockByNumber: block {tag} not found")
        res = _as_dict(res, "eth_getBlockByNumber")
        return BlockHeader(
            number=_quantity(_field(res, "number", "eth_getBlockByNumber")),
            timestamp=_quantity(_field(res, "timestamp", "eth_getBlockByNumber")),
        )

    async def filter_logs(
        self,
        from_block: int,
        to_block: int,
        addresses: Sequence[Address],
        topics: Sequence[Sequence[Topic]],
    ) -> list[LogEntry]:
        params = [{
            "address": [str(a) for a in addresses],
            "fromBlock": _to_hex_block(from_block),
            "toBlock": _to_hex_block(to_block),
            "topics": _build_topics_param(topics),
        }]
        res = await self._call("eth_getLogs", params)
        if res is None:
            return []
        if not isinstance(res, list):
            raise NetworkError(f"eth_getLogs: unexpected result {res!r}")
        typed: list[LogEntry] = []
        for rl in res:
            try:
                typed.append(LogEntry(
                    tx_hash=TxHash(rl["transactionHash"].lower()),
                    block_hash=rl["blockHash"].lower(),
                    block_number=_quantity(rl["blockNumber"]),
                    log_index=_quantity(rl["logIndex"]),
                    transaction_index=_quantity(rl["transactionIndex"]),
                ))
            except (KeyError, TypeError, AttributeError, ValueError) as e:
                raise NetworkError(f"eth_getLogs: malformed log entry {rl!r}") from e
        return typed

    async def get_transaction_by_hash(self, tx_hash: TxHash) -> TransactionHandle:
        res = await self._call("eth_getTransactionByHash", [tx_hash])
        if res is None:
            raise NetworkError(f"eth_getTransactionByHash: transaction {tx_hash} not found")
        res = _as_dict(res, "eth_getTransactionByHash")
        return TransactionHandle(
            tx_hash=TxHash(str(_field(res, "hash", "eth_getTransactionByHash")).lower()),
            sender=res.get("from"),
            block_hash=str(res.get("blockHash") or "").lower() or None,
        )

    async def get_transaction_sender(self, tx: TransactionHandle, block_hash: str, index: int) -> Address:
        # the node already told us who sent it, provided it was mined in this block
        if tx.sender and tx.block_hash and tx.block_hash == block_hash.lower():
            return _checksum(tx.sender, "eth_getTransactionByHash")
        res = await self._call("eth_getTransactionByBlockHashAndIndex", [block_hash, hex(index)])
        if res is None:
            raise NetworkError(f"eth_getTransactionByBlockHashAndIndex: nothing at {block_hash}[{index}]")
        res = _as_dict(res, "eth_getTransactionByBlockHashAndIndex")
        found = str(_field(res, "hash", "eth_getTransactionByBlockHashAndIndex")).lower()
        if found != tx.tx_hash.lower():
            raise NetworkError(f"transaction {tx.tx_hash} is not at {block_hash}[{index}] (found {found})")
        return _checksum(_field(res, "from", "eth_getTransactionByBlockHashAndIndex"), "eth_getTransactionByBlockHashAndIndex")

    async def get_transaction_receipt(self, tx_hash: TxHash) -> Receipt:
        res = await self._call("eth_getTransactionReceipt", [tx_hash])
        if res is None:
            raise NetworkError(f"eth_getTransactionReceipt: receipt for {tx_hash} not found")
        res = _as_dict(res, "eth_getTransactionReceipt")
        return Receipt(
            tx_hash=tx_hash,
            effective_gas_price=_quantity(_field(res, "effectiveGasPrice", "eth_getTransactionReceipt")),
            gas_used=_quantity(_field(res, "gasUsed", "eth_getTransactionReceipt")),
        )

    async def aclose(self) -> None:
        await self.client.aclose()
