from __future__ import annotations
from typing import NewType

Address = NewType("Address", str)   # 0x-prefixed, checksummed when rendered
TxHash  = NewType("TxHash", str)    # 66-char 0x-hash, lowercase
Topic   = NewType("Topic", str)     # 66-char 0x-hash, lowercase
