"""Error taxonomy shared by the workflows and the transport layer.

Each error carries the HTTP status it maps to and a human-readable message
that is returned to clients verbatim as ``{"error": message}``.
"""


class BillReaderError(Exception):
    """Base class for every expected failure of a request."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UploadRejected(BillReaderError):
    """Missing file, wrong content type or oversize upload."""

    status_code = 400


class ExtractionFailed(BillReaderError):
    """Document text could not be read."""


class NotLegislation(BillReaderError):
    """Classification stage answered no; a client rejection, not a fault."""

    status_code = 400


class GenerationFailed(BillReaderError):
    """Provider call errored or timed out."""


class DecodeFailed(BillReaderError):
    """Provider output was not a JSON object."""


class SearchUnparseable(DecodeFailed):
    pass


class YearMismatch(BillReaderError):
    status_code = 400

    def __init__(self, requested: str, found: str):
        super().__init__(
            f"No bill matching your criteria was found for the year {requested}. "
            f"The search found a bill from {found} instead. Please try again with "
            "different search parameters or without specifying a year."
        )
        self.requested = requested
        self.found = found


class QueryRejected(BillReaderError):
    status_code = 400


class MissingJurisdiction(QueryRejected):
    pass


class InsufficientQuery(QueryRejected):
    pass
