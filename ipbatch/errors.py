"""
Exception types raised by ipbatch.
"""


class IPBatchError(Exception):
    """Base class for all ipbatch errors."""


class ArgumentError(IPBatchError):
    """Raised when the command line cannot be parsed."""


class InputError(IPBatchError):
    """Raised when no usable addresses were supplied."""


class LookupFailedError(IPBatchError):
    """Raised when a single address lookup fails, aborting the batch."""

    def __init__(self, ip_address: str, message: str):
        super().__init__(f"Lookup failed for {ip_address}: {message}")
        self.ip_address = ip_address
