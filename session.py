import logging
from typing import List, Optional, Tuple

from config import ApiKeyStore
from conversation import ConversationStore
from documents import DocumentCatalog
from llm import CompletionClient, CompletionError
from models import ASSISTANT_ROLE, USER_ROLE, DocumentDescriptor
from presenter import Presenter
from prompt import build_system_prompt
from renderer import MessageRenderer, escape_html

logger = logging.getLogger(__name__)

CONFIGURE_KEY_NOTICE = (
    "Veuillez configurer votre clé API Groq en cliquant sur le bouton ⚙️ en bas à droite."
)
CLEARED_NOTICE = "Conversation effacée. Comment puis-je vous aider ?"
ERROR_TEMPLATE = (
    "Erreur : {error}. Veuillez vérifier la configuration de votre clé API et réessayer."
)


class ChatSession:
    """
    One conversation between a user and the assistant.

    Owns the history and the renderer; everything that touches the outside
    world (completion endpoint, API key, document list, display) is injected.

    Args:
        client: Sends message lists to the completion endpoint.
        key_store: Provides the API key and whether one is configured.
        catalog: Supplies the documents listed in the system prompt.
        presenter: Receives the bubbles and typing indicator to display.
        renderer: Formats assistant replies; a default one is created if omitted.
    """

    def __init__(
        self,
        client: CompletionClient,
        key_store: ApiKeyStore,
        catalog: DocumentCatalog,
        presenter: Presenter,
        renderer: Optional[MessageRenderer] = None,
    ):
        self.client = client
        self.key_store = key_store
        self.catalog = catalog
        self.presenter = presenter
        self.renderer = renderer or MessageRenderer()
        self.store = ConversationStore()
        self._documents: List[DocumentDescriptor] = []
        self._system_prompt = build_system_prompt(self._documents)

    @property
    def documents(self) -> Tuple[DocumentDescriptor, ...]:
        return tuple(self._documents)

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    async def initialize(self) -> None:
        """Load the document list and tell the user if the API key is still missing."""
        self._documents = await self.catalog.load()
        self._system_prompt = build_system_prompt(self._documents)
        logger.info(f"System prompt updated with {len(self._documents)} documents")

        if not self.key_store.is_configured():
            self.presenter.show_message(ASSISTANT_ROLE, escape_html(CONFIGURE_KEY_NOTICE))

    async def send(self, text: str) -> None:
        """
        Send one user message and display the assistant's answer.

        Blank input is ignored. Without an API key only a notice is shown. A
        failed completion is reported as an assistant bubble; it is not
        recorded in the history, while the user's own turn is kept.

        Args:
            text: The raw text typed by the user.
        """
        message = text.strip()
        if not message:
            return

        if not self.key_store.is_configured():
            logger.warning("Message not sent: API key is not configured")
            self.presenter.show_message(ASSISTANT_ROLE, escape_html(CONFIGURE_KEY_NOTICE))
            return

        self.store.append_user(message)
        self.presenter.show_message(USER_ROLE, escape_html(message))
        self.presenter.show_typing()

        messages = self.store.build_request_messages(self._system_prompt)
        try:
            answer = await self.client.send(messages, self.key_store.get_api_key())
        except Exception as e:
            if isinstance(e, CompletionError):
                logger.error(f"Error processing message: {e}")
            else:
                logger.exception("Unexpected error while processing message")
            self.presenter.hide_typing()
            self.presenter.show_message(
                ASSISTANT_ROLE, self.renderer.render(ERROR_TEMPLATE.format(error=e))
            )
            return

        self.store.append_assistant(answer)
        self.presenter.hide_typing()
        self.presenter.show_message(ASSISTANT_ROLE, self.renderer.render(answer))

    def clear(self) -> None:
        self.store.clear()
        self.presenter.reset()
        self.presenter.show_message(ASSISTANT_ROLE, escape_html(CLEARED_NOTICE))
