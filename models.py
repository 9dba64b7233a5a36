from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

SYSTEM_ROLE = "system"
USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """
    A single chat turn in OpenAI message format.

    Attributes:
        role (Role): Who authored the message: "system", "user" or "assistant".
        content (str): The raw, unformatted text of the message.

    Instances are frozen; a message never changes once it has been created.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str

    def to_payload(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


class DocumentDescriptor(BaseModel):
    """
    A report available to the assistant.

    Attributes:
        name (str): File name, e.g. "RPT_SafetyMeasures_S12_v1.2.pdf".
        path (str): Path inside the document repository.
        url (Optional[str]): Direct download URL, when known.
        size (Optional[int]): File size in bytes, when known.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    url: Optional[str] = None
    size: Optional[int] = None


class ChatRequest(BaseModel):
    message: str


class ApiKeyRequest(BaseModel):
    api_key: str


class PresenterEvent(BaseModel):
    """
    One UI instruction emitted by a chat session.

    Attributes:
        kind: "message", "typing", "typing_done" or "reset".
        role: Bubble author for "message" events ("user" or "assistant").
        html: Ready-to-insert HTML for "message" events.
    """

    kind: Literal["message", "typing", "typing_done", "reset"]
    role: Optional[str] = None
    html: Optional[str] = None


class ChatResponse(BaseModel):
    events: List[PresenterEvent]


class ConfigStatus(BaseModel):
    configured: bool


class DocumentList(BaseModel):
    total: int
    documents: List[DocumentDescriptor]
