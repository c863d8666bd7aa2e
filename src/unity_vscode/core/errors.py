"""Exceptions raised by the integration services."""


class IntegrationError(Exception):
    """Base class for integration failures."""
    pass


class ProjectFileError(IntegrationError):
    """Raised when a solution or project file cannot be read or written."""
    pass


class UpdateCheckError(IntegrationError):
    """Raised when fetching or verifying remote content fails."""
    pass


class UnterminatedBlockError(ProjectFileError):
    """Raised when a project file has a block without its end marker."""
    pass
