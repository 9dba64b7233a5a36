import pytest
from pydantic import ValidationError

from conversation import ConversationStore
from models import Message


def test_new_store_has_only_system_message():
    store = ConversationStore()
    assert store.build_request_messages("Prompt") == [{"role": "system", "content": "Prompt"}]


def test_request_messages_follow_append_order():
    store = ConversationStore()
    store.append_user("Question 1")
    store.append_assistant("Réponse 1")
    store.append_user("Question 2")

    messages = store.build_request_messages("Prompt")

    assert messages == [
        {"role": "system", "content": "Prompt"},
        {"role": "user", "content": "Question 1"},
        {"role": "assistant", "content": "Réponse 1"},
        {"role": "user", "content": "Question 2"},
    ]


def test_building_twice_gives_equal_results():
    store = ConversationStore()
    store.append_user("Q")
    assert store.build_request_messages("P") == store.build_request_messages("P")


def test_returned_list_is_a_copy():
    store = ConversationStore()
    store.append_user("Q")

    first = store.build_request_messages("P")
    first.append({"role": "user", "content": "injected"})
    first[1]["content"] = "changed"

    assert store.build_request_messages("P") == [
        {"role": "system", "content": "P"},
        {"role": "user", "content": "Q"},
    ]
    assert len(store) == 1


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_user_text_is_ignored(text):
    store = ConversationStore()
    store.append_user(text)
    assert len(store) == 0


def test_empty_assistant_text_is_kept():
    store = ConversationStore()
    store.append_assistant("")
    assert store.messages == (Message(role="assistant", content=""),)


def test_clear_keeps_system_message():
    store = ConversationStore()
    store.append_user("Q")
    store.append_assistant("A")

    store.clear()

    assert len(store) == 0
    assert store.build_request_messages("P") == [{"role": "system", "content": "P"}]


def test_messages_are_immutable():
    store = ConversationStore()
    store.append_user("Q")
    with pytest.raises(ValidationError):
        store.messages[0].content = "changed"


def test_message_rejects_unknown_role():
    with pytest.raises(ValidationError):
        Message(role="tool", content="x")
