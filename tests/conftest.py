import pytest

from config import AppConfig, ModelConfig, ModelType


@pytest.fixture(autouse=True)
def no_token_counting(monkeypatch):
    # Keeps tiktoken from fetching its encoding during tests.
    monkeypatch.setattr("llm.count_tokens", lambda messages: 0)


@pytest.fixture
def make_config():
    def _make(model_type=ModelType.HTTP, api_key=None):
        return AppConfig(
            model=ModelConfig(
                name="test-model",
                url="https://llm.test/openai/v1",
                model_type=model_type,
                temperature=1.0,
                top_p=1.0,
                max_response_tokens=8192,
                timeout=5.0,
            ),
            groq_api_key=api_key,
            documents_api_url="https://api.github.test/contents/documents",
            bullet_icon_src="documents/egis.png",
            log_level=20,
        )

    return _make


class FakeCompletionClient:
    def __init__(self, answer="Bonjour", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def send(self, messages, api_key):
        self.calls.append((messages, api_key))
        if self.error is not None:
            raise self.error
        return self.answer


class FakeCatalog:
    def __init__(self, documents=None):
        self.documents = documents or []

    async def load(self):
        return list(self.documents)


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def fake_catalog():
    return FakeCatalog()
