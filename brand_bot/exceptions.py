"""
Exceptions raised while extracting brand data.

Only InvalidUrl is meant to reach the end user. The others are caught
inside the extraction pipeline, which degrades to a less specific result.
"""

from typing import Optional


class BrandBotError(Exception):
    """Base exception for all brand extraction errors"""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self):
        text = super().__str__()
        if self.cause:
            text += f" (caused by: {type(self.cause).__name__}: {self.cause})"
        return text


class InvalidUrl(BrandBotError):
    """User input could not be turned into an absolute website URL"""
    pass


class FetchFailure(BrandBotError):
    """Target website was unreachable or answered with an error status"""
    pass


class ProbeFailure(BrandBotError):
    """A single reachability check failed"""
    pass


class CacheUnavailable(BrandBotError):
    """Cache store could not be read or written"""
    pass


class ParseFailure(BrandBotError):
    """A structured-data block was present but malformed"""
    pass


class ExtractionCancelled(BrandBotError):
    """Caller abandoned the extraction before it finished"""
    pass
