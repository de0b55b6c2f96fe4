"""
Error taxonomy for the orchestrator
"""


class ValidationError(ValueError):
    """Malformed or empty request, rejected before the core runs."""


class ProviderError(Exception):
    """Base class for failures inside a provider adapter."""

    def __init__(self, tool: str, message: str):
        super().__init__(message)
        self.tool = tool
        self.message = message

    def __str__(self) -> str:
        return f"{self.tool}: {self.message}"


class ProviderUnavailable(ProviderError):
    """The provider could not be reached or answered with an error status."""


class ProviderMalformed(ProviderError):
    """The provider answered with a payload we cannot interpret."""


class OrchestrationFailure(RuntimeError):
    """Unexpected fault in the orchestration logic itself."""
