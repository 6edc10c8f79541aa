"""
Outbound messaging collaborators.
Interfaces the dispatch engine depends on; adapters live in infrastructure.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from billing.domain.models.dispatch import ChunkResult


class OutboundMessageSender(ABC):
    """
    Delivers one message to a chunk of recipients in a single provider call.
    The engine does not care whether this is email, SMS or push.
    """

    @abstractmethod
    async def send_chunk(self, recipients: Sequence[str], subject: str, body: str) -> ChunkResult:
        """
        Send the same subject and body to every recipient.

        Returns the recipients the provider rejected. Raises TransportError
        when the call as a whole fails. Timeouts are the sender's concern.
        """
        pass


class TemplateRenderer(ABC):
    """Turns a template id and variables into a rendered message body."""

    @abstractmethod
    def render(self, template_id: str, variables: Mapping[str, Any]) -> str:
        """Render a template. Raises ConfigurationError for unknown templates."""
        pass
