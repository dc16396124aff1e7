"""Per-registrant detection of filings dated today."""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import ValidationError

from sec_watcher.client import SECClient
from sec_watcher.errors import RegistryError
from sec_watcher.models import Company, FilingRecord

logger = logging.getLogger(__name__)

RECENT_FIELDS = ("accessionNumber", "filingDate", "form", "primaryDocument")


def document_link(archive_base_url: str, cik: str, accession_number: str, primary_document: str) -> str:
    """Build the archive URL of a filing's primary document.

    ``accession_number`` may be given with or without dashes.
    """
    accession_no_dashes = accession_number.replace("-", "")
    return f"{archive_base_url.rstrip('/')}/{cik}/{accession_no_dashes}/{primary_document}"


def parse_recent_filings(
    payload: Mapping[str, Any],
    company: Company,
    archive_base_url: str,
    filed_on: date | None = None,
) -> list[FilingRecord]:
    """
    Materialize the submissions "recent" block into FilingRecords.

    EDGAR returns the recent filings as parallel arrays. Each kept index
    becomes one record, so accession, date, form and document always come
    from the same position. Order is preserved (EDGAR lists newest first).

    With ``filed_on`` set, indices are selected by comparing the raw
    ``filingDate`` strings first; entries filed on other days are never
    validated.

    Args:
        payload: Submissions JSON for one registrant
        company: The watched registrant the payload belongs to
        archive_base_url: Base of the document link
        filed_on: Keep only entries filed on this date (default: keep all)

    Returns:
        One FilingRecord per kept entry in the recent block

    Raises:
        RegistryError: If the recent block is missing or misaligned, or a kept entry is invalid
    """
    try:
        recent = payload["filings"]["recent"]
        columns = [recent[field] for field in RECENT_FIELDS]
    except (KeyError, TypeError) as e:
        raise RegistryError(f"Submissions for CIK {company.cik} lack field {e}") from e

    lengths = {len(column) for column in columns}
    if len(lengths) > 1:
        raise RegistryError(
            f"Submissions for CIK {company.cik} have misaligned recent arrays: "
            + ", ".join(f"{name}={len(col)}" for name, col in zip(RECENT_FIELDS, columns))
        )

    rows = zip(*columns)
    if filed_on is not None:
        wanted = filed_on.isoformat()
        rows = (row for row in rows if row[1] == wanted)

    tickers = payload.get("tickers") or []
    ticker = tickers[0] if tickers else company.ticker
    name = payload.get("name") or company.name

    records: list[FilingRecord] = []
    try:
        for accession, filed, form, document in rows:
            accession_number = accession.replace("-", "")
            records.append(
                FilingRecord(
                    registrant_name=name,
                    ticker=ticker,
                    cik=company.cik,
                    accession_number=accession_number,
                    filing_date=filed,
                    form_type=form,
                    document_link=document_link(archive_base_url, company.cik, accession_number, document),
                )
            )
    except (AttributeError, ValidationError) as e:
        raise RegistryError(f"Invalid filing entry for CIK {company.cik}: {e}") from e

    return records


class FilingPoller:
    """Fetch a registrant's submissions and keep the filings dated today."""

    def __init__(self, client: SECClient, archive_base_url: str) -> None:
        self._client = client
        self._archive_base_url = archive_base_url

    def poll(self, company: Company, today: date) -> list[FilingRecord]:
        """
        Return today's filings for ``company``, newest first.

        An empty list means the registrant filed nothing today. Entries
        from earlier days are not parsed.

        Raises:
            RegistryError: If the submissions fetch fails or the payload is malformed
        """
        payload = self._client.fetch_submissions(company.cik)
        todays = parse_recent_filings(payload, company, self._archive_base_url, filed_on=today)

        if todays:
            logger.debug("%s (CIK %s) has %d filing(s) dated %s", company.ticker, company.cik, len(todays), today)
        return todays
