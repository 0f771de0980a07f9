"""
Library Scanner Module

Walks a music folder, extracts a Track for every supported audio file and
reclaims cover art that no track references any more.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set

from rift.domain.models import Track
from .metadata_extractor import MetadataExtractor

logger = logging.getLogger(__name__)

# Supported audio formats
SUPPORTED_FORMATS = {
    ".mp3", ".flac", ".alac", ".wav", ".m4a", ".ogg", ".aac"
}


def normalize_formats(formats: Iterable[str]) -> Set[str]:
    """Turn ``["mp3", ".FLAC"]`` into ``{".mp3", ".flac"}``."""
    result = set()
    for fmt in formats:
        fmt = str(fmt).strip().lower()
        if fmt:
            result.add(fmt if fmt.startswith(".") else f".{fmt}")
    return result


@dataclass
class ScanProgress:
    """Progress information for a scan operation."""
    total_files: int = 0
    scanned_files: int = 0
    current_file: str = ""

    @property
    def progress_percent(self) -> float:
        if self.total_files == 0:
            return 0.0
        return (self.scanned_files / self.total_files) * 100


@dataclass
class ScanResult:
    """Result of a directory scan."""
    path: Path
    tracks: Dict[str, Track] = field(default_factory=dict)
    files_found: int = 0
    files_skipped: int = 0
    covers_removed: int = 0
    root_missing: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def track_count(self) -> int:
        return len(self.tracks)


class LibraryScanner:
    """
    Scans directories for audio files.

    Features:
    - Recursive discovery that never follows directory symlinks
    - Extension allow-list
    - Optional parallel metadata extraction
    - Orphaned cover sweep after a full scan
    """

    def __init__(
        self,
        extractor: MetadataExtractor,
        supported_formats: Optional[Iterable[str]] = None,
        max_workers: int = 1,
    ):
        """
        Initialize the scanner.

        Args:
            extractor: Per-file metadata extractor
            supported_formats: Extensions to index, with or without the dot
            max_workers: Parallel extraction workers (1 = extract inline)
        """
        self.extractor = extractor
        self.supported_formats = normalize_formats(supported_formats or SUPPORTED_FORMATS)
        self.max_workers = max(1, int(max_workers or 1))

    def scan(
        self,
        root: Path,
        progress_callback: Optional[Callable[[ScanProgress], None]] = None,
    ) -> ScanResult:
        """
        Scan a directory tree into a fresh path -> Track mapping.

        A missing root is not an error: the result is empty and carries a
        warning. Files that cannot be read are skipped and logged.

        Args:
            root: Directory to scan
            progress_callback: Called after every processed file

        Returns:
            ScanResult: Results of the scan
        """
        start_time = time.monotonic()
        root = Path(root).expanduser()
        result = ScanResult(path=root)

        if not root.is_dir():
            message = f"Music directory does not exist: {root}"
            logger.warning(message)
            result.root_missing = True
            result.warnings.append(message)
            return result

        logger.info(f"Indexing music from: {root}")

        audio_files = list(self.discover_files(root))
        result.files_found = len(audio_files)
        progress = ScanProgress(total_files=len(audio_files))

        for file_path, track in self._extract_all(audio_files):
            progress.scanned_files += 1
            progress.current_file = str(file_path)

            if track is None:
                result.files_skipped += 1
                result.errors.append(f"Skipped unreadable file: {file_path}")
            else:
                result.tracks[track.path] = track

            if progress_callback:
                progress_callback(progress)

        result.duration_seconds = time.monotonic() - start_time
        logger.info(
            f"Indexed {result.track_count} songs "
            f"({result.files_skipped} skipped) in {result.duration_seconds:.2f}s"
        )
        return result

    def discover_files(self, root: Path) -> Iterator[Path]:
        """
        Yield supported audio files below ``root``.

        Directory symlinks are not followed, so link cycles cannot cause an
        endless walk. Unreadable directories are logged and skipped.
        """
        def on_error(error: OSError) -> None:
            logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=False):
            dirnames.sort()
            for filename in sorted(filenames):
                file_path = Path(dirpath) / filename
                if self._is_audio_file(file_path):
                    yield file_path

    def sweep_covers(self, tracks: Iterable[Track]) -> int:
        """
        Delete cached covers not referenced by ``tracks``.

        Returns:
            int: Number of cache files removed
        """
        return self.extractor.cover_cache.sweep(track.cover for track in tracks)

    def _extract_all(self, audio_files: List[Path]) -> Iterator[tuple[Path, Optional[Track]]]:
        if self.max_workers == 1 or len(audio_files) < 2:
            for file_path in audio_files:
                yield file_path, self._extract_one(file_path)
            return

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="rift-scan") as executor:
            yield from zip(audio_files, executor.map(self._extract_one, audio_files))

    def _extract_one(self, file_path: Path) -> Optional[Track]:
        try:
            return self.extractor.extract(file_path)
        except Exception as e:
            # One bad file must not abort the whole scan.
            logger.warning(f"Error processing {file_path}: {e}", exc_info=True)
            return None

    def _is_audio_file(self, path: Path) -> bool:
        """Check if a file is a supported audio format."""
        return path.suffix.lower() in self.supported_formats
