"""
Data models and structures for the multi-format converter.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


@dataclass
class XmlElement:
    """Order-preserving XML element.

    A leaf has no children and may carry text; a branch has children and its
    text is ignored.
    """
    tag: str
    children: List["XmlElement"] = field(default_factory=list)
    text: str = ""

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def append(self, child: "XmlElement") -> None:
        self.children.append(child)


class ElementShape(Enum):
    """Value shape an XML element maps to."""
    SCALAR = "scalar"  # leaf, text is coerced
    LIST = "list"  # one distinct child tag, repeated
    MAP = "map"  # anything else


@dataclass
class ConversionResult:
    """Outcome of a single conversion."""
    source_format: str
    target_format: str
    lossy: bool = False
    flattened_fields: List[str] = field(default_factory=list)
    records: int = 0  # CSV rows read or written, 0 for non-tabular pairs
    bytes_written: int = 0
    source_path: Optional[Path] = None
    dest_path: Optional[Path] = None
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def duration(self) -> float:
        """Get conversion duration in seconds."""
        end = self.end_time or time.time()
        return end - self.start_time

    def finish(self) -> "ConversionResult":
        """Record the end time and return self."""
        if self.end_time is None:
            self.end_time = time.time()
        return self
