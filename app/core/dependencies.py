from fastapi import Depends
from app.repositories.interfaces.ai_service import IAIService
from app.repositories.interfaces.jira_service import IJiraService

from app.repositories.implementations.openai_service import OpenAIService
from app.repositories.implementations.jira_service import AtlassianJiraService

from app.services.coverage_validator import CoverageValidator
from app.services.requirements_parser import RequirementsTableParser
from app.services.test_generation_service import TestGenerationService


class Container:
    """Dependency injection container"""

    def __init__(self):
        self._ai_service = None
        self._jira_service = None

    def ai_service(self) -> IAIService:
        """Get AI service instance (singleton)"""
        if self._ai_service is None:
            self._ai_service = OpenAIService()
        return self._ai_service

    def jira_service(self) -> IJiraService:
        """Get JIRA service instance (singleton)"""
        if self._jira_service is None:
            self._jira_service = AtlassianJiraService()
        return self._jira_service

    def requirements_parser(self) -> RequirementsTableParser:
        return RequirementsTableParser()

    def coverage_validator(self) -> CoverageValidator:
        return CoverageValidator()

    def test_generation_service(self, ai_service: IAIService, jira_service: IJiraService) -> TestGenerationService:
        """Get test generation service instance"""
        return TestGenerationService(
            ai_service=ai_service,
            jira_service=jira_service,
            parser=self.requirements_parser(),
            validator=self.coverage_validator(),
        )


# Global container instance
container = Container()


# Dependency providers for FastAPI
def get_ai_service() -> IAIService:
    """FastAPI dependency for AI service"""
    return container.ai_service()


def get_jira_service() -> IJiraService:
    """FastAPI dependency for JIRA service"""
    return container.jira_service()


def get_requirements_parser() -> RequirementsTableParser:
    return container.requirements_parser()


def get_test_generation_service(
    ai_service: IAIService = Depends(get_ai_service),
    jira_service: IJiraService = Depends(get_jira_service),
) -> TestGenerationService:
    """FastAPI dependency for test generation service"""
    return container.test_generation_service(ai_service, jira_service)
