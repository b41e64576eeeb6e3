"""Exception types raised by the analytics engine."""


class ContestGraphError(Exception):
    """Base class for contest-graph errors."""


class MalformedRecordError(ContestGraphError):
    """Source rows cannot be turned into contest records.

    Only the dataframe conversion helpers raise this; the engine itself
    assumes every record it receives carries two non-empty identities.
    """


class ComputationFailure(ContestGraphError):
    """A centrality computation failed to produce a result."""

    def __init__(self, metric: str, message: str) -> None:
        super().__init__(f"{metric}: {message}")
        self.metric = metric


class ExportFailure(ContestGraphError):
    """The merged report could not be written to its destination."""
