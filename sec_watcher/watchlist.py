"""Loading the ticker watch list."""

import csv
import logging
from pathlib import Path

from sec_watcher.errors import WatchlistError

logger = logging.getLogger(__name__)


def find_watchlist(directory: Path, pattern: str = "*.csv") -> Path | None:
    """
    Locate the single watch-list file in ``directory``.

    Returns:
        Path to the file, or None if there is none

    Raises:
        WatchlistError: If more than one file matches
    """
    matches = sorted(p for p in Path(directory).glob(pattern) if p.is_file())
    if len(matches) > 1:
        names = ", ".join(p.name for p in matches)
        raise WatchlistError(f"Expected one watch-list file in {directory}, found {len(matches)}: {names}")
    return matches[0] if matches else None


def read_tickers(path: Path) -> set[str]:
    """Read tickers from the first column of a headerless CSV. Case is kept."""
    tickers: set[str] = set()
    with open(path, newline="", encoding="utf-8-sig") as f:
        for row in csv.reader(f):
            if row and row[0].strip():
                tickers.add(row[0].strip())
    return tickers


def load_watchlist(directory: Path, pattern: str = "*.csv") -> set[str]:
    """
    Load the unique tickers of the watch list in ``directory``.

    No file yields an empty set. More than one file is a configuration
    error raised before any network activity.
    """
    path = find_watchlist(directory, pattern)
    if path is None:
        logger.warning("No watch-list file matching %s in %s; watching nothing", pattern, directory)
        return set()

    tickers = read_tickers(path)
    logger.info("Loaded %d ticker(s) from %s", len(tickers), path)
    return tickers
