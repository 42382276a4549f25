"""Panel Check - Exceptions"""

class PanelCheckError(Exception):
    """Base exception for all panelcheck errors."""


class UsageError(PanelCheckError):
    """Raised when the command line is missing its required input."""


class ResolutionError(PanelCheckError):
    """Raised when a token cannot be mapped to a hosted account and domain."""


class CommandError(PanelCheckError):
    """Raised when an external command is missing, times out, or fails."""
