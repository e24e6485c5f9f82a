from abc import ABC, abstractmethod
from typing import Optional, Dict, Any


class IJiraService(ABC):
    """Interface for JIRA integration operations"""

    @abstractmethod
    async def get_issue(self, issue_key: str) -> Optional[Dict[str, Any]]:
        """Get simplified JIRA issue details"""
        pass

    @abstractmethod
    def is_configured(self) -> bool:
        """Check if JIRA credentials are present"""
        pass
