from collections import namedtuple


class MutationResult:
    """
    Outcome of a store write. Truthy on success, falsy on failure, so callers
    that only need a yes/no answer can test it directly.
    """

    def __init__(self, ok, data=None, error=None, details=None):
        self.ok = ok
        self.data = data
        self.error = error
        self.details = details

    @classmethod
    def success(cls, data=None):
        return cls(True, data=data)

    @classmethod
    def failure(cls, error, details=None):
        return cls(False, error=str(error), details=details)

    def __bool__(self):
        return self.ok

    def __repr__(self):
        if self.ok:
            return f"<MutationResult ok data={self.data!r}>"
        return f"<MutationResult failed error={self.error!r}>"


class UploadResult(namedtuple('UploadResult', ['url', 'error'])):
    """Public URL of a stored asset, or a message explaining why it was not stored"""

    @property
    def ok(self):
        return self.url is not None


class RefreshReport:
    def __init__(self):
        self.refreshed = []
        self.failed = []

    @property
    def complete(self):
        return not self.failed

    def as_dict(self):
        return {'refreshed': list(self.refreshed), 'failed': list(self.failed)}

    def __repr__(self):
        return f"<RefreshReport refreshed={len(self.refreshed)} failed={self.failed}>"
