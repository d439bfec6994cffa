"""
Errors raised by the ESG record services.

Views translate these into HTTP responses; nothing here is fatal to the
process.
"""


class ESGRecordError(Exception):
    """Base class for ESG record failures."""
    status_code = 400

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def as_response_data(self):
        data = {'error': self.message}
        if self.context:
            data['details'] = self.context
        return data


class InvalidPatchError(ESGRecordError, ValueError):
    """Unknown category/section or malformed patch payload."""
    status_code = 400


class RecordNotFoundError(ESGRecordError):
    """No ESG record (or owner) for a read, submit, review or override."""
    status_code = 404


class RecordLockedError(ESGRecordError):
    """Patch rejected because the record is no longer editable."""
    status_code = 409


class ConcurrentUpdateError(ESGRecordError):
    """The record kept changing underneath a patch until retries ran out."""
    status_code = 409
