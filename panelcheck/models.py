"""Panel Check - Data models"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class Quota:
    """Disk quota in megabytes as reported by the control panel"""
    used_mb: Optional[float] = None
    limit_mb: Optional[float] = None
    unlimited: bool = False


@dataclass
class AccountProfile:
    """Resolved account facts; optional facts hold sentinel strings"""
    username: str
    primary_domain: str
    local_a_record: str
    public_a_record: str
    quota: Quota
    php_version: str
    php_log_path: str


@dataclass(frozen=True)
class AccessHit:
    """One access log line projected onto the fields the report ranks"""
    domain: str
    ip: str
    method: Optional[str]
    uri: Optional[str]
    raw: str
    timestamp: Optional[str] = None


@dataclass(frozen=True)
class LogWindow:
    """Today's access log lines, read once and shared by every traffic table"""
    date_token: str
    hits: Tuple[AccessHit, ...] = ()

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self):
        return iter(self.hits)


@dataclass(frozen=True)
class FrequencyTable:
    """(key, count) pairs sorted by count, truncated to a fixed size"""
    label: str
    entries: Tuple[Tuple[str, int], ...]

    @classmethod
    def from_keys(cls, keys: Iterable[str], limit: int, label: str = 'Key') -> 'FrequencyTable':
        counts = Counter(keys)
        return cls(label=label, entries=tuple(counts.most_common(limit)))

    def __bool__(self) -> bool:
        return bool(self.entries)

    def lines(self) -> List[str]:
        return [f"{count:>7} {key}" for key, count in self.entries]


@dataclass
class ReportBlock:
    """A titled chunk of a section: plain lines, a table, or both"""
    heading: Optional[str] = None
    lines: List[str] = field(default_factory=list)
    table: Optional[FrequencyTable] = None
    error: bool = False


@dataclass
class Section:
    """One health report section, rendered under its own header"""
    title: str
    blocks: List[ReportBlock] = field(default_factory=list)

    def add(self, heading: Optional[str] = None, lines: Iterable[str] = (),
            table: Optional[FrequencyTable] = None, error: bool = False) -> ReportBlock:
        block = ReportBlock(heading=heading, lines=list(lines), table=table, error=error)
        self.blocks.append(block)
        return block

    @property
    def headings(self) -> List[str]:
        return [b.heading for b in self.blocks if b.heading]

    @property
    def body_lines(self) -> List[str]:
        body = []
        for block in self.blocks:
            if block.heading:
                body.append(f"{block.heading}:")
            body.extend(block.lines)
            if block.table:
                body.extend(block.table.lines())
        return body
