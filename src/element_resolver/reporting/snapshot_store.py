"""
Snapshot Store - Persist failure snapshots to disk.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
import logging
import re

logger = logging.getLogger(__name__)


@dataclass
class SavedSnapshot:
    """
    A snapshot written to disk.
    
    Attributes:
        path: File path to the snapshot
        target: Target description whose resolution failed
        timestamp: When the snapshot was saved
    """
    path: Path
    target: str
    timestamp: datetime


class SnapshotStore:
    """
    Write failure snapshots under one directory.
    
    Example:
        >>> store = SnapshotStore("./snapshots")
        >>> path = store.save(png_bytes, target="#submit")
    """
    
    def __init__(self, output_dir: str | Path, format: str = "png"):
        """
        Initialize the snapshot store.
        
        Args:
            output_dir: Directory to save snapshots
            format: File extension for saved images
        """
        self.output_dir = Path(output_dir)
        self.format = format
        self._saved: list[SavedSnapshot] = []
        self.output_dir.mkdir(parents=True, exist_ok=True)
    
    @staticmethod
    def slugify(target: str, max_length: int = 40) -> str:
        slug = re.sub(r"[^A-Za-z0-9]+", "-", target).strip("-").lower()
        return slug[:max_length] or "target"
    
    def save(self, data: bytes, target: str) -> Path:
        """Write ``data`` and return its path."""
        timestamp = datetime.now()
        filename = (
            f"resolve_failed_{timestamp.strftime('%Y%m%d_%H%M%S_%f')}_"
            f"{self.slugify(target)}.{self.format}"
        )
        path = self.output_dir / filename
        path.write_bytes(data)
        
        self._saved.append(SavedSnapshot(path=path, target=target, timestamp=timestamp))
        logger.debug(f"Saved failure snapshot: {path}")
        return path
    
    def get_snapshots(self) -> list[SavedSnapshot]:
        """Get all saved snapshots."""
        return self._saved.copy()
