"""Exception hierarchy for memkit."""


class MemkitError(Exception):
    """Base class for memkit errors."""


class StorageUnavailableError(MemkitError):
    """A required storage backend could not be opened."""


class ImportValidationError(MemkitError, ValueError):
    """An import payload failed validation.

    Carries the full list of validation messages.
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Import failed")
