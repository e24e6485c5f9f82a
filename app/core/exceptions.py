"""Domain exceptions raised by the generation services."""

from typing import List, Optional


class TestGeneratorError(Exception):
    """Base exception for test generator errors."""

    __test__ = False

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(message)


class ContentValidationError(TestGeneratorError):
    """Raised when submitted content is missing or too short to process."""
    pass


class NoRequirementsFoundError(TestGeneratorError):
    """Raised when the content holds no parsable requirements table."""

    def __init__(self):
        super().__init__(
            "No requirements found in the content",
            suggestion=(
                "Please ensure you have a requirements table with Requirement ID, "
                "Business Requirement, and Acceptance Criteria columns."
            ),
        )


class AIServiceError(TestGeneratorError):
    """Raised when the AI provider is unavailable or returns nothing usable."""
    pass


class GenerationFailedError(TestGeneratorError):
    """Raised when no requirement produced any generated test content.

    Attributes:
        requirement_ids: ids of the requirements that failed
    """

    def __init__(self, requirement_ids: List[str]):
        self.requirement_ids = requirement_ids
        super().__init__(
            "Failed to generate test cases for any requirements",
            suggestion="Please try again",
        )
