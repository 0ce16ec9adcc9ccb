from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


# === Result of the file-read step ===


class LookupStatus(str, Enum):
    FOUND = "found"
    MISSING = "missing"
    NOT_A_FILE = "not_a_file"
    UNREADABLE = "unreadable"


@dataclass(frozen=True)
class DocumentLookup:
    status: LookupStatus
    path: Path
    stat: Optional[os.stat_result] = None
    detail: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def status_code(self) -> int:
        if self.status is LookupStatus.FOUND:
            return 200
        if self.status is LookupStatus.UNREADABLE:
            return 500
        return 404
