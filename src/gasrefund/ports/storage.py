# gasrefund/ports/storage.py
from __future__ import annotations

from typing import Protocol


class OutputSink(Protocol):
    """Port for persisting the two documents produced by a run."""

    def write(self, report_text: str, bundle_json: str) -> None:
        """Persist both documents, or neither (raises ``FileWriteError``)."""
