from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from archlab.agent.llm_client import LLMClient
from archlab.tests.utils import mock_openai_client


@pytest.mark.asyncio
async def test_llm_client_returns_raw_text():
    mock_client_instance, mock_completions = mock_openai_client('```json\n{"name": "Alice"}\n```')

    with patch("archlab.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        with patch("archlab.agent.llm_client.settings.LLM_API_KEY", "dummy_key"):
            client = LLMClient(model_name="test-model")

            result = await client.generate_text(
                system_prompt="You are a helpful assistant.",
                user_prompt="Give me Alice's details",
            )

    assert result == '```json\n{"name": "Alice"}\n```'
    mock_completions.create.assert_called_once()
    kwargs = mock_completions.create.call_args.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["messages"][0] == {"role": "system", "content": "You are a helpful assistant."}
    assert kwargs["messages"][1]["content"] == "Give me Alice's details"
    assert "temperature" in kwargs


@pytest.mark.asyncio
async def test_llm_client_omits_temperature_for_gpt5():
    mock_client_instance, mock_completions = mock_openai_client("{}")

    with patch("archlab.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="gpt-5-mini", api_key="dummy_key")
        await client.generate_text("system", "user")

    assert "temperature" not in mock_completions.create.call_args.kwargs


@pytest.mark.asyncio
async def test_llm_client_rejects_empty_choices():
    mock_client_instance, mock_completions = mock_openai_client("{}")
    mock_completions.create.return_value.choices = []

    with patch("archlab.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance):
        client = LLMClient(model_name="test-model", api_key="dummy_key")
        with pytest.raises(ValueError, match="returned no output"):
            await client.generate_text("system", "user")


@pytest.mark.asyncio
async def test_llm_client_does_not_retry_provider_errors():
    mock_completions = MagicMock()
    mock_completions.create = AsyncMock(side_effect=RuntimeError("connection reset"))
    mock_client_instance = AsyncMock()
    mock_client_instance.chat = MagicMock(completions=mock_completions)

    with patch("archlab.agent.llm_client.AsyncOpenAI", return_value=mock_client_instance) as openai_cls:
        client = LLMClient(model_name="test-model", api_key="dummy_key")
        with pytest.raises(RuntimeError, match="connection reset"):
            await client.generate_text("system", "user")

    assert mock_completions.create.await_count == 1
    assert openai_cls.call_args.kwargs["max_retries"] == 0
