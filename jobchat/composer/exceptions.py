"""Composer exceptions.

All composer exceptions inherit from ComposerError so callers can catch the
whole family with one except clause.
"""


class ComposerError(Exception):
    """Base exception for response composition errors."""

    pass


class GenerativeCallError(ComposerError):
    """Raised when the generative model call fails, times out or is misconfigured.

    The composer converts this into an apology while still delivering the
    deterministic match list.
    """

    def __init__(self, message: str, error_type: str = "unknown"):
        self.error_type = error_type
        super().__init__(message)


class PromptRenderError(ComposerError):
    """Raised when a prompt or reply template fails to render."""

    pass
