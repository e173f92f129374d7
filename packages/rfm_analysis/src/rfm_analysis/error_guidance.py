"""User-friendly error guidance for people running the analysis."""

from __future__ import annotations

from rfm_analysis.exceptions import (
    AnalysisNotFoundError,
    ConfigError,
    DataLoadError,
    EmptyInputError,
    NoMatchingRecordsError,
    ParameterValidationError,
    StorageError,
)

# Subclasses must precede their parents.
ERROR_GUIDANCE: list[tuple[type[Exception], str, str]] = [
    (EmptyInputError, "Empty File", "The spreadsheet has no rows -- export it again and retry"),
    (
        NoMatchingRecordsError,
        "No Matching Transactions",
        "Widen the lookback window or select other segments, "
        "and check the file has Client, Date and Tags columns",
    ),
    (ParameterValidationError, "Invalid Parameters", "Select at least one segment and 1+ months"),
    (PermissionError, "File Locked", "Close the file in Excel and try again"),
    (FileNotFoundError, "File Not Found", "Check the file path"),
    (DataLoadError, "Unreadable File", "Upload an Excel (.xlsx) or CSV export"),
    (ConfigError, "Setup Issue", "Check config.yaml and the command-line options"),
    (AnalysisNotFoundError, "Not Found", "List saved analyses to find a valid id"),
    (StorageError, "Storage Error", "Check the saved analyses folder is writable"),
]


def get_error_guidance(exc: Exception) -> tuple[str, str]:
    """Return (title, user_message) for a given exception.

    Uses isinstance() so subclass exceptions are caught by their parent.
    """
    for exc_type, title, message in ERROR_GUIDANCE:
        if isinstance(exc, exc_type):
            return title, message
    return "Unexpected Error", "An unexpected error occurred. Check the log output for details."
