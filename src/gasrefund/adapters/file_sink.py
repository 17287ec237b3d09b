from __future__ import annotations
import os
from ..domain.errors import FileWriteError
from ..ports.storage import OutputSink

class FileOutputSink(OutputSink):
    """Writes report and bundle next to each other, replacing previous runs.

    Both documents land in ``.tmp`` files first and are only moved into place
    once both writes succeeded.
    """
    def __init__(self, report_path: str, bundle_path: str) -> None:
        self.report_path = report_path
        self.bundle_path = bundle_path

    def write(self, report_text: str, bundle_json: str) -> None:
        pending = [(self.report_path, report_text), (self.bundle_path, bundle_json)]
        tmps: list[str] = []
        try:
            for path, text in pending:
                os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
                tmp = path + ".tmp"
                with open(tmp, "w", encoding="utf-8") as f:
                    tmps.append(tmp)
                    f.write(text)
            for path, _ in pending:
                os.replace(path + ".tmp", path)
        except OSError as e:
            for tmp in tmps:
                if os.path.isfile(tmp):
                    os.remove(tmp)
            raise FileWriteError(f"cannot write {e.filename or 'output'}: {e.strerror or e}") from e
