from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EmailReportSettings:
    recipient: Optional[str] = None
    body: Optional[str] = None
