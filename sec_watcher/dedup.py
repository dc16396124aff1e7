"""In-memory record of filings already alerted during this run."""


class DedupStore:
    """Append-only set of accession numbers.

    Keys are written once and never removed. Nothing is persisted; a new
    process starts with an empty store.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def add(self, accession_number: str) -> None:
        """Record an accession number. Adding a known one changes nothing."""
        self._seen.add(accession_number)

    def __contains__(self, accession_number: object) -> bool:
        return accession_number in self._seen

    def __len__(self) -> int:
        return len(self._seen)
