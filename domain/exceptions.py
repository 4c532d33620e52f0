#!/usr/bin/env python3


class NetworkAnalyticsError(Exception):
    """Base error for the network analytics core"""


class InvalidInputError(NetworkAnalyticsError, ValueError):
    """Raised when a record is structurally unusable (missing names, IDs, out-of-range values)"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field
