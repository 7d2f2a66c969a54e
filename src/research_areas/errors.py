"""Exceptions raised by the research gate."""


class ResearchAreasError(Exception):
    """Base class for research gate errors."""


class DuplicateCategoryError(ResearchAreasError):
    """Raised when a category key is registered twice."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Category '{category}' is already registered")


class UnknownCategoryError(ResearchAreasError):
    """Raised when a mapping targets a category the registry does not know."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"Unknown category '{category}'")


class InvalidOverrideError(ResearchAreasError):
    """Raised when a user override cannot be applied."""

    def __init__(self, label: str, reason: str):
        self.label = label
        self.reason = reason
        message = f"Invalid override '{label}': {reason}" if label else f"Invalid override: {reason}"
        super().__init__(message)


class BridgeError(ResearchAreasError):
    """Raised when the host bridge rejects a write."""

    def __init__(self, endpoint: str, reason: str):
        self.endpoint = endpoint
        self.reason = reason
        super().__init__(f"Bridge {endpoint} failed: {reason}")
