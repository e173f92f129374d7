"""Report writers for RFM results."""
