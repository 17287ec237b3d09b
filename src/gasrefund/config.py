# gasrefund/config.py
from __future__ import annotations
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from dotenv.parser import parse_stream

from .domain.catalog import START_BLOCK
from .domain.errors import ConfigurationError

REQUEST_DEADLINE_S = 10.0
REPORT_PATH = "report.txt"
BUNDLE_PATH = "bundle.json"


@dataclass(slots=True, frozen=True)
class Settings:
    rpc_url: str
    start_block: int = START_BLOCK
    request_deadline_s: float = REQUEST_DEADLINE_S
    report_path: str = REPORT_PATH
    bundle_path: str = BUNDLE_PATH


def _load_env_file(path: str) -> None:
    # python-dotenv only warns on bad lines; a half-read env file is fatal here
    try:
        with open(path, encoding="utf-8") as f:
            for binding in parse_stream(f):
                if binding.error:
                    raise ConfigurationError(
                        f"{path}:{binding.original.line}: cannot parse {binding.original.string.strip()!r}"
                    )
    except OSError as e:
        raise ConfigurationError(f"cannot read {path}: {e.strerror or e}") from e
    load_dotenv(path, override=False)


def load_settings(env_file: str = ".env") -> Settings:
    """Read RPC_URL, loading ``env_file`` first when it exists."""
    if os.path.exists(env_file):
        _load_env_file(env_file)
    rpc_url = (os.environ.get("RPC_URL") or "").strip()
    if not rpc_url:
        raise ConfigurationError("RPC_URL not set")
    return Settings(rpc_url=rpc_url)
