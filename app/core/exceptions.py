"""Exceptions raised by the clinic search service."""


class ClinicSearchError(Exception):
    """Base exception for the clinic search service."""
    pass


class RecordStoreError(ClinicSearchError):
    """Raised when clinic records cannot be fetched from the record store."""
    pass


class SupersededRequestError(ClinicSearchError):
    """Raised when a newer request from the same session replaced this one."""
    pass
