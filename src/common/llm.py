import warnings
from typing import Any, Iterator

import litellm
from litellm import completion as litellm_completion

warnings.filterwarnings("ignore", message="Pydantic serializer warnings")
litellm.drop_params = True


def completion(
    model: str,
    messages: list[dict],
    stream: bool = False,
    temperature: float = 0.0,
    max_tokens: int = 8192,
    **kwargs,
) -> Any:
    params = {
        "model": model,
        "messages": messages,
        "stream": stream,
        "temperature": temperature,
        "max_tokens": max_tokens,
        **kwargs,
    }
    return litellm_completion(**params)


def stream_text(
    model: str,
    messages: list[dict],
    temperature: float = 0.0,
    max_tokens: int = 8192,
    completion_fn=None,
    **kwargs,
) -> Iterator[str]:
    """Yield the text deltas of a streamed completion, skipping empty chunks."""
    fn = completion_fn or completion
    stream = fn(
        model=model,
        messages=messages,
        stream=True,
        temperature=temperature,
        max_tokens=max_tokens,
        **kwargs,
    )

    for chunk in stream:
        if not chunk.choices:
            continue
        delta = chunk.choices[0].delta
        content = getattr(delta, "content", None)
        if content:
            yield content


def get_model_info(model: str) -> dict:
    try:
        return litellm.get_model_info(model)
    except Exception:
        return {}


def supports_reasoning(model: str) -> bool:
    info = get_model_info(model)
    return bool(info.get("supports_reasoning", False))
