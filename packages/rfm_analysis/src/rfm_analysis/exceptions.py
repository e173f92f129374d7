"""Exception hierarchy for rfm_analysis."""

from __future__ import annotations


class RFMError(Exception):
    """Base exception for all rfm_analysis errors."""


class ConfigError(RFMError):
    """Invalid or missing configuration."""


class ParameterValidationError(RFMError):
    """Run parameters rejected before any row is processed."""


class DataLoadError(RFMError):
    """Failed to load or parse the data file."""


class EmptyInputError(DataLoadError):
    """The dataset contains no rows at all."""

    def __init__(self, message: str = "The dataset contains no rows.") -> None:
        super().__init__(message)


class NoMatchingRecordsError(RFMError):
    """Rows were supplied but none survived normalization and filtering."""

    def __init__(self, total_rows: int, rejected: dict[str, int] | None = None) -> None:
        self.total_rows = total_rows
        self.rejected = dict(rejected or {})
        super().__init__(
            f"No transactions in the selected period and segments "
            f"({total_rows} rows read, none retained)"
        )


class StorageError(RFMError):
    """Saved analysis could not be read or written."""


class AnalysisNotFoundError(StorageError):
    """No saved analysis with the requested id."""

    def __init__(self, analysis_id: str) -> None:
        self.analysis_id = analysis_id
        super().__init__(f"Analysis not found: {analysis_id}")
