class AnalysisError(Exception):
    """Raised when CV analysis fails for a reason other than missing experience."""
