from abc import ABC, abstractmethod


class IAIService(ABC):
    """Interface for AI/LLM operations"""

    @abstractmethod
    async def extract_requirements(self, content: str, context: str = "") -> str:
        """Extract business requirements from a document as a pipe table"""
        pass

    @abstractmethod
    async def generate_tests(self, prompt: str, context: str = "") -> str:
        """Generate Gherkin test scenarios for a single requirement"""
        pass

    @abstractmethod
    async def refine_tests(self, content: str, feedback: str, context: str = "") -> str:
        """Improve existing Gherkin content based on feedback"""
        pass

    def is_configured(self) -> bool:
        return True
