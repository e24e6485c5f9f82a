import asyncio
from typing import List, Optional
from openai import OpenAI, OpenAIError
import structlog
from app.core.exceptions import AIServiceError
from app.repositories.interfaces.ai_service import IAIService
from app.config.settings import settings

logger = structlog.get_logger()


EXTRACTION_SYSTEM_PROMPT = (
    "You are a business analyst. Extract the business requirements from the provided document.\n"
    "Reply with a Markdown table ONLY, using exactly these columns:\n"
    "| Requirement ID | Business Requirement | Acceptance Criteria | Complexity |\n"
    "Write the Complexity column as: CC: <int>, Decision Points: <int>, Activities: <int>, Paths: <int>"
)

GENERATION_SYSTEM_PROMPT = (
    "You are an expert QA engineer. Write Gherkin test scenarios for the requirement provided. "
    "Start with '# Feature: <name>' and '# Complexity: <annotation>' comment lines, "
    "then one 'Scenario:' or 'Scenario Outline:' block per execution path. "
    "Reply with the Gherkin content only."
)

REFINEMENT_SYSTEM_PROMPT = (
    "You are an expert test case reviewer. Improve the Gherkin scenarios based on the feedback "
    "while keeping their requirement ids and core purpose. Reply with the Gherkin content only."
)


class OpenAIService(IAIService):
    """OpenAI-compatible chat completions implementation of AI service"""

    def __init__(self):
        self.model = settings.openai_model
        self.temperature = settings.openai_temperature
        self.client: Optional[OpenAI] = None
        if settings.openai_api_key:
            self.client = OpenAI(
                base_url=settings.openai_base_url,
                api_key=settings.openai_api_key,
                timeout=settings.openai_timeout_seconds,
            )

    def is_configured(self) -> bool:
        return self.client is not None

    async def extract_requirements(self, content: str, context: str = "") -> str:
        """Extract requirements table (async wrapper)"""
        prompt = f"Document content:\n{content}"
        if context:
            prompt = f"Context: {context}\n\n{prompt}"
        return await self._complete(EXTRACTION_SYSTEM_PROMPT, prompt, operation="extract_requirements")

    async def generate_tests(self, prompt: str, context: str = "") -> str:
        """Generate Gherkin scenarios (async wrapper)"""
        if context:
            prompt = f"{prompt}\n\nAdditional Context:\n{context}"
        return await self._complete(GENERATION_SYSTEM_PROMPT, prompt, operation="generate_tests")

    async def refine_tests(self, content: str, feedback: str, context: str = "") -> str:
        """Refine Gherkin scenarios (async wrapper)"""
        prompt = f"Current test cases:\n{content}\n\nFeedback:\n{feedback}"
        if context:
            prompt += f"\n\nAdditional Context:\n{context}"
        return await self._complete(REFINEMENT_SYSTEM_PROMPT, prompt, operation="refine_tests")

    async def _complete(self, system_prompt: str, user_prompt: str, operation: str) -> str:
        if not self.is_configured():
            raise AIServiceError(
                "AI service is not configured",
                suggestion="Please configure OPENAI_API_KEY to use AI generation",
            )

        def sync_call() -> str:
            response = self.client.chat.completions.create(
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                model=self.model,
            )
            return self._extract_text(response.choices)

        try:
            logger.info("Calling AI service", operation=operation, model=self.model, prompt_length=len(user_prompt))
            content = await asyncio.get_running_loop().run_in_executor(None, sync_call)
        except OpenAIError as e:
            logger.error("AI service call failed", operation=operation, error=str(e))
            raise AIServiceError(f"AI service call failed: {e}", suggestion="Please try again") from e

        if not content.strip():
            logger.error("No content received from AI service", operation=operation)
            raise AIServiceError(
                "No content received from AI service",
                suggestion="The AI service did not return any content. Please try again.",
            )
        logger.info("AI service response received", operation=operation, content_length=len(content))
        return _strip_code_fence(content)

    @staticmethod
    def _extract_text(choices: List) -> str:
        # support different response shapes
        if not choices:
            return ""
        choice = choices[0]
        message = getattr(choice, "message", None)
        if message is not None and getattr(message, "content", None):
            return message.content
        return getattr(choice, "text", "") or ""


def _strip_code_fence(content: str) -> str:
    """Remove a surrounding ```gherkin / ```markdown fence if the model added one."""
    text = content.strip()
    if text.startswith("```") and text.endswith("```"):
        lines = text.split("\n")
        return "\n".join(lines[1:-1]).strip()
    return text
