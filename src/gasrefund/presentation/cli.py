import asyncio, logging
import typer
from rich.console import Console
from rich.logging import RichHandler
from ..adapters.file_sink import FileOutputSink
from ..adapters.rpc_httpx import HttpxRPC
from ..application.use_cases import run_reimbursement
from ..application.utils import wei_to_eth_str
from ..config import load_settings
from ..domain.errors import GasRefundError

app = typer.Typer(add_completion=False)
console = Console(stderr=True)
log = logging.getLogger("gasrefund")

def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )

@app.command()
def run():
    """Build report.txt and bundle.json for gas spent on the catalogued events."""
    _configure_logging()

    async def main():
        settings = load_settings()
        rpc = HttpxRPC(settings.rpc_url, deadline_s=settings.request_deadline_s)
        try:
            return await run_reimbursement(
                settings, rpc, FileOutputSink(settings.report_path, settings.bundle_path),
            )
        finally:
            await rpc.aclose()

    try:
        res = asyncio.run(main())
    except GasRefundError as e:
        log.error("Error: %s", e)
        raise typer.Exit(code=1)

    console.print(
        f"[bold]done[/]: {res.transactions} txs • {res.senders} senders • "
        f"{wei_to_eth_str(res.total_wei)} ETH (blocks {res.block_range.start:,}-{res.block_range.end:,})"
    )

if __name__ == "__main__":
    app()
