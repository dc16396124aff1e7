"""Data models for SEC Filing Watcher."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class Company(BaseModel):
    """Represents a watched registrant with ticker, CIK, and name."""

    model_config = ConfigDict(frozen=True)

    ticker: str
    cik: str = Field(pattern=r"^\d{10}$")
    name: str


class FilingRecord(BaseModel):
    """A filing detected today, ready to be alerted on."""

    model_config = ConfigDict(frozen=True)

    registrant_name: str
    ticker: str
    cik: str = Field(pattern=r"^\d{10}$")
    accession_number: str  # dash-stripped; the dedup key
    filing_date: date
    form_type: str
    document_link: str


class RunSummary(BaseModel):
    """Counters reported when a session ends."""

    registrants: int = 0
    passes: int = 0
    alerts: int = 0
