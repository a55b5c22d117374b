class CancelPrRunsError(Exception):
    """
    Base class for errors raised while cancelling workflow runs for pull requests.
    """


class ConfigError(CancelPrRunsError):
    """
    The configuration is missing or invalid.
    Raised before any request is sent to GitHub.
    """


class FetchError(CancelPrRunsError):
    """
    Listing pull requests, check suites, or workflow runs failed.
    """


class CancelError(CancelPrRunsError):
    """
    A request to cancel a single workflow run failed.
    This is always logged and never propagated past the run that failed.
    """

    def __init__(self, run_id: int, message: str) -> None:
        super().__init__(message)
        self.run_id = run_id
