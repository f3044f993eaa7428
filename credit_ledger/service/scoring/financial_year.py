"""
Financial Year rules for the Credit Ledger.

A financial year runs from the first day of `financial_year_start_month`
(April by default) to the last day of the month before it in the next
calendar year. It is identified by the calendar year in which it starts:
2025-11-16 and 2026-03-31 both belong to FY 2025, 2026-04-01 to FY 2026.
"""

from datetime import date, datetime

from .settings import ScoringSettings, scoring_settings


def _local_date(moment: datetime | date, settings: ScoringSettings) -> date:
    if isinstance(moment, datetime):
        if moment.tzinfo is not None:
            moment = moment.astimezone(settings.zone)
        return moment.date()
    return moment


def financial_year_start(
    moment: datetime | date,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Get the start-year of the financial year containing a date.

    Args:
        moment: A date, or a datetime (aware values are converted to the
            ledger timezone first)
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Calendar year in which that financial year begins
    """
    day = _local_date(moment, settings)
    if day.month >= settings.financial_year_start_month:
        return day.year
    return day.year - 1


def same_financial_year(
    first: datetime | date,
    second: datetime | date,
    settings: ScoringSettings = scoring_settings,
) -> bool:
    """Check whether two moments fall in the same financial year."""
    return financial_year_start(first, settings) == financial_year_start(second, settings)


def financial_year_label(
    moment: datetime | date,
    settings: ScoringSettings = scoring_settings,
) -> str:
    """Human-readable label such as "FY2025-26"."""
    start = financial_year_start(moment, settings)
    if settings.financial_year_start_month == 1:
        return f"FY{start}"
    return f"FY{start}-{(start + 1) % 100:02d}"
