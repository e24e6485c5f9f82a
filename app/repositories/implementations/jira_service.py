import re
import httpx
from typing import Optional, Dict, Any
import structlog
from app.repositories.interfaces.jira_service import IJiraService
from app.config.settings import settings

logger = structlog.get_logger()


def extract_plain_text(desc: Any) -> str:
    """Flatten an Atlassian Document Format node (or plain string) to text."""
    if isinstance(desc, str):
        return desc
    if not isinstance(desc, dict) or "content" not in desc:
        return ""

    text_parts = []

    def extract(node):
        if isinstance(node, dict):
            if node.get("type") == "text":
                text_parts.append(node.get("text", ""))
            elif node.get("type") == "hardBreak":
                text_parts.append("\n")
            elif "content" in node:
                for child in node["content"]:
                    extract(child)
                if node.get("type") in ("paragraph", "heading", "listItem"):
                    text_parts.append("\n")
        elif isinstance(node, list):
            for item in node:
                extract(item)

    extract(desc["content"])
    return re.sub(r"[ \t]*\n[ \t]*", "\n", "".join(text_parts)).strip()


def split_acceptance_criteria(text: str) -> tuple:
    """Split description text into (description, acceptance criteria), stripping Jira markup."""
    split = re.split(r"Acceptance Criteria[:\n]+", text, maxsplit=1, flags=re.IGNORECASE)
    description = split[0].strip()
    acceptance_criteria = split[1].strip() if len(split) > 1 else ""
    # Remove Jira image/file markup
    acceptance_criteria = re.sub(r"!\S+?\.(jpg|png|jpeg|gif)[^!]*!", "", acceptance_criteria, flags=re.IGNORECASE)
    # Remove Jira smart links: [text|url|smart-link] or [text|url]
    acceptance_criteria = re.sub(r"\[.*?\|.*?\]", "", acceptance_criteria)
    acceptance_criteria = "\n".join(line for line in acceptance_criteria.splitlines() if line.strip())
    return description, acceptance_criteria


class AtlassianJiraService(IJiraService):
    """Atlassian JIRA Cloud implementation of JIRA service"""

    def __init__(self):
        self.base_url = settings.jira_base_url
        self.username = settings.jira_username
        self.api_token = settings.jira_api_token
        self.auth = (self.username, self.api_token) if self.username and self.api_token else None

    async def get_issue(self, issue_key: str) -> Optional[Dict[str, Any]]:
        """Get JIRA issue details and return a simplified dict."""
        if not self.is_configured():
            logger.warning("JIRA service not configured")
            return None
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    f"{self.base_url}/rest/api/3/issue/{issue_key}",
                    auth=self.auth,
                    headers={"Accept": "application/json"},
                    timeout=30,
                )
            if response.status_code != 200:
                logger.error("Failed to get JIRA issue",
                             issue_key=issue_key,
                             status_code=response.status_code)
                return None

            issue_data = response.json()
            fields = issue_data.get("fields", {})
            description, acceptance_criteria = split_acceptance_criteria(
                extract_plain_text(fields.get("description"))
            )
            if not acceptance_criteria:
                custom_ac_field = fields.get("customfield_10000")
                if custom_ac_field:
                    acceptance_criteria = str(custom_ac_field).strip()

            return {
                "id": issue_data.get("id"),
                "key": issue_data.get("key"),
                "summary": fields.get("summary", ""),
                "description": description,
                "acceptance_criteria": acceptance_criteria,
                "issue_type": (fields.get("issuetype") or {}).get("name", ""),
                "status": (fields.get("status") or {}).get("name", ""),
                "priority": (fields.get("priority") or {}).get("name", ""),
            }
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error getting JIRA issue", issue_key=issue_key, error=str(e))
            return None

    def is_configured(self) -> bool:
        """Check if JIRA service is properly configured"""
        return bool(self.base_url and self.username and self.api_token)
