import logging

from fastapi import APIRouter, HTTPException, Request

from models import (
    ApiKeyRequest,
    ChatRequest,
    ChatResponse,
    ConfigStatus,
    DocumentList,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
async def send_message(request: Request, payload: ChatRequest):
    """
    Send a user message to the assistant.

    Args:
        request: FastAPI request context, used to access the chat session.
        payload: ChatRequest containing the user's message.

    Returns:
        The display events produced while handling the message, in order:
        the user bubble, typing start/stop and the assistant bubble (or an
        error bubble). A blank message yields no events.

    Notes:
        - The app serves a single client: one session and one presenter are
          shared by all requests, so overlapping `/chat` calls may receive
          each other's events.
        - Events are drained even when handling fails, so a failed request
          never leaks its events into the next response.
    """
    session = request.app.state.session
    try:
        await session.send(payload.message)
    finally:
        events = request.app.state.presenter.drain()
    return ChatResponse(events=events)


@router.delete("/chat/history", response_model=ChatResponse)
async def clear_history(request: Request):
    """
    Forget the conversation and return the events that reset the chat window.
    """
    try:
        request.app.state.session.clear()
    finally:
        events = request.app.state.presenter.drain()
    return ChatResponse(events=events)


@router.get("/documents", response_model=DocumentList)
async def list_documents(request: Request):
    """
    List the reports referenced in the system prompt.

    Returns:
        A JSON object containing:
            - total: Number of documents
            - documents: name, path, url and size of each document
    """
    documents = request.app.state.session.documents
    return DocumentList(total=len(documents), documents=list(documents))


@router.get("/config", response_model=ConfigStatus)
async def config_status(request: Request):
    return ConfigStatus(configured=request.app.state.key_store.is_configured())


@router.put("/config/api-key", response_model=ConfigStatus)
async def set_api_key(request: Request, payload: ApiKeyRequest):
    """
    Store the API key used for completion requests.

    Raises:
        HTTPException: 422 if the key is blank.
    """
    key_store = request.app.state.key_store
    try:
        key_store.set_api_key(payload.api_key)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    logger.info("🔑 API key updated")
    return ConfigStatus(configured=key_store.is_configured())


@router.delete("/config/api-key", response_model=ConfigStatus)
async def clear_api_key(request: Request):
    key_store = request.app.state.key_store
    key_store.clear_api_key()
    logger.info("🔑 API key removed")
    return ConfigStatus(configured=key_store.is_configured())
