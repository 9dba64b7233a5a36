from contextlib import asynccontextmanager

from fastapi import FastAPI
from router import router

from config import ApiKeyStore, AppConfig
from documents import DocumentCatalog
from llm import CompletionClient
from presenter import BufferedPresenter
from renderer import MessageRenderer
from session import ChatSession


def create_app(config: AppConfig) -> FastAPI:
    """
    Assemble the chat service: one session wired to the configured endpoint.

    The document list is fetched when the application starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.session.initialize()
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.config = config
    app.state.key_store = ApiKeyStore(config.groq_api_key)
    app.state.presenter = BufferedPresenter()
    app.state.session = ChatSession(
        client=CompletionClient(config),
        key_store=app.state.key_store,
        catalog=DocumentCatalog(config.documents_api_url),
        presenter=app.state.presenter,
        renderer=MessageRenderer(icon_src=config.bullet_icon_src),
    )

    app.include_router(router)
    return app


app = create_app(AppConfig.load())
