from functools import lru_cache

import tiktoken


@lru_cache(maxsize=1)
def _encoding() -> tiktoken.Encoding:
    # Loaded on first use; tiktoken fetches the BPE ranks the first time.
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(messages: list[dict]) -> int:
    """
    Estimate the total number of tokens in a list of chat messages.

    Args:
        messages: List of chat messages (each must have a "content" field).

    Returns:
        An integer representing the total number of tokens in all message contents.

    Notes:
        - Uses the cl100k_base tokenizer; counts for non-OpenAI models are approximate.
        - Does not account for role/metadata token overhead.
    """
    full_text = "".join([m["content"] or "" for m in messages])
    return len(_encoding().encode(full_text))
