"""Unit tests for the analysis service.

Tests cover:
- Validation before any storage or provider call
- File resolution order and skipping
- Request adaptation per model class
- Empty-output diagnostic and artifact detection
"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from fileanalyst.api.exceptions import NoReadableContentError, ValidationError
from fileanalyst.llm import LLMClient, LLMResponse, ProviderError, Usage
from fileanalyst.llm.providers.openai import OpenAIProvider
from fileanalyst.models.analysis import AnalysisRequest, ArtifactKind
from fileanalyst.models.files import FileCategory
from fileanalyst.models.user import UserIdentity
from fileanalyst.services import analysis_service
from fileanalyst.services.storage_service import StorageService

USER = UserIdentity(id="user-1")


def make_response(text: str, usage: Usage | None = None, model: str = "gpt-5-2025-08-07") -> LLMResponse:
    return LLMResponse(
        text=text,
        usage=usage or Usage(input_tokens=100, output_tokens=20, total_tokens=120),
        model=model,
        provider="openai",
        latency_ms=250,
    )


def make_client(response: LLMResponse | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock(spec=LLMClient)
    client.default_model = "gpt-5-2025-08-07"
    client.generate = AsyncMock(return_value=response, side_effect=error)
    return client


@pytest.fixture
def storage(tmp_path: Path) -> StorageService:
    service = StorageService(uploads_dir=tmp_path)
    for category, name, content in [
        (FileCategory.FARM_DATA, "a.csv", b"field,yield\nNorth,7.2\n"),
        (FileCategory.FARM_DATA, "b.csv", b"field,rain\nNorth,410\n"),
        (FileCategory.CERTIFICATION_REQUIREMENTS, "rules.txt", b"No synthetic inputs."),
    ]:
        path = tmp_path / USER.id / category.value / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return service


class TestValidation:
    """Tests for request validation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "request_data,message",
        [
            ({"selectedFiles": [], "prompt": "Summarize"}, "select at least one"),
            ({"selectedFiles": ["a.csv"], "prompt": ""}, "enter a prompt"),
            ({"selectedFiles": ["a.csv"], "prompt": "   \n\t"}, "enter a prompt"),
        ],
    )
    async def test_rejected_before_any_call(self, request_data, message):
        """Test invalid requests never touch storage or the provider."""
        storage = MagicMock(spec=StorageService)
        storage.resolve_file_text = AsyncMock()
        client = make_client(make_response("unused"))

        with pytest.raises(ValidationError) as exc_info:
            await analysis_service.analyze(
                USER, AnalysisRequest(**request_data), storage=storage, client=client
            )

        assert message in exc_info.value.message
        storage.resolve_file_text.assert_not_awaited()
        client.generate.assert_not_awaited()


class TestFileResolution:
    """Tests for resolving selected files."""

    @pytest.mark.asyncio
    async def test_selection_order_preserved(self, storage):
        """Test sections follow the caller's order, not storage order."""
        client = make_client(make_response("ok"))

        await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["b.csv", "a.csv"], prompt="Compare"),
            storage=storage,
            client=client,
        )

        llm_request = client.generate.call_args.args[0]
        user_message = llm_request.messages[1].content
        assert user_message.index("=== File: b.csv ===") < user_message.index("=== File: a.csv ===")
        assert "field,rain\nNorth,410" in user_message

    @pytest.mark.asyncio
    async def test_missing_files_skipped(self, storage):
        """Test unresolvable files are skipped when others resolve."""
        client = make_client(make_response("ok"))

        await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["ghost.csv", "rules.txt"], prompt="Check"),
            storage=storage,
            client=client,
        )

        user_message = client.generate.call_args.args[0].messages[1].content
        assert "ghost.csv" not in user_message
        assert "=== File: rules.txt ===\nNo synthetic inputs." in user_message

    @pytest.mark.asyncio
    async def test_no_readable_content(self, storage):
        """Test the provider is not called when nothing resolves."""
        client = make_client(make_response("unused"))

        with pytest.raises(NoReadableContentError) as exc_info:
            await analysis_service.analyze(
                USER,
                AnalysisRequest(selectedFiles=["ghost.csv", "phantom.csv"], prompt="Check"),
                storage=storage,
                client=client,
            )

        assert exc_info.value.file_names == ["ghost.csv", "phantom.csv"]
        client.generate.assert_not_awaited()


class TestBuildLLMRequest:
    """Tests for request adaptation."""

    def test_uses_default_model(self):
        """Test the baseline model applies when none is requested."""
        request = analysis_service.build_llm_request(
            AnalysisRequest(selectedFiles=["a.csv"], prompt="Go"),
            [("a.csv", "x,y")],
            default_model="gpt-5-2025-08-07",
        )
        assert request.model == "gpt-5-2025-08-07"
        assert request.temperature == 0.7
        assert request.max_tokens == 2000
        assert request.messages[0].role == "system"

    def test_empty_files_rejected(self):
        """Test building without any resolved file."""
        with pytest.raises(NoReadableContentError):
            analysis_service.build_llm_request(
                AnalysisRequest(selectedFiles=["a.csv"], prompt="Go"), [], default_model="gpt-4o"
            )

    @pytest.mark.parametrize(
        "model,max_tokens,expected",
        [
            ("gpt-5-2025-08-07", 200, {"max_completion_tokens": 1000}),
            ("o3-mini", 3500, {"max_completion_tokens": 3500}),
            ("gpt-4o", 200, {"max_tokens": 200, "temperature": 0.2}),
            ("unlisted-model", 50, {"max_tokens": 50, "temperature": 0.2}),
        ],
    )
    def test_outbound_body_per_model(self, model, max_tokens, expected):
        """Test the provider body shape for each model class."""
        llm_request = analysis_service.build_llm_request(
            AnalysisRequest(
                selectedFiles=["a.csv"], prompt="Go", model=model, maxTokens=max_tokens, temperature=0.2
            ),
            [("a.csv", "x,y")],
            default_model="gpt-5-2025-08-07",
        )

        body = OpenAIProvider(api_key="test-key").build_request(llm_request)

        for key, value in expected.items():
            assert body[key] == value
        if "temperature" not in expected:
            assert "temperature" not in body


class TestFinalizeText:
    """Tests for empty-output handling."""

    def test_text_trimmed(self):
        """Test surrounding whitespace is removed."""
        text, substituted = analysis_service.finalize_text("  hi \n", Usage(), 2000)
        assert text == "hi"
        assert substituted is False

    def test_empty_with_reasoning_tokens(self):
        """Test the diagnostic names the configured cap."""
        text, substituted = analysis_service.finalize_text("", Usage(reasoning_tokens=42), 1500)
        assert substituted is True
        assert "1500" in text

    def test_empty_with_output_tokens(self):
        """Test output tokens alone also trigger the diagnostic."""
        _, substituted = analysis_service.finalize_text("   ", Usage(output_tokens=3), 2000)
        assert substituted is True

    def test_empty_without_tokens(self):
        """Test empty output with no usage stays empty."""
        text, substituted = analysis_service.finalize_text("", Usage(), 2000)
        assert text == ""
        assert substituted is False


class TestAnalyze:
    """End-to-end service tests with a mocked client."""

    @pytest.mark.asyncio
    async def test_result_with_csv_artifact(self, storage):
        """Test statistics and a detected CSV artifact."""
        usage = Usage(input_tokens=100, output_tokens=20, reasoning_tokens=8, total_tokens=120)
        client = make_client(make_response("field,yield\nNorth,7.2\n", usage=usage))

        result = await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["a.csv"], prompt="Return a table"),
            storage=storage,
            client=client,
        )

        assert result.generatedText == "field,yield\nNorth,7.2"
        assert result.artifact.kind == ArtifactKind.CSV
        assert result.artifact.content == "field,yield\nNorth,7.2"
        assert result.statistics.inputTokens == 100
        assert result.statistics.outputTokens == 20
        assert result.statistics.reasoningTokens == 8
        assert result.statistics.totalTokens == 120
        assert result.statistics.processingTime >= 0
        assert result.statistics.processingTime == round(result.statistics.processingTime, 2)
        assert result.model == "gpt-5-2025-08-07"

    @pytest.mark.asyncio
    async def test_empty_reasoning_output(self, storage):
        """Test the diagnostic replaces empty text and counts are kept."""
        usage = Usage(input_tokens=100, output_tokens=0, reasoning_tokens=42, total_tokens=142)
        client = make_client(make_response("", usage=usage))

        result = await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["a.csv"], prompt="Go", maxTokens=300),
            storage=storage,
            client=client,
        )

        assert result.generatedText
        assert "1000" in result.generatedText
        assert result.statistics.reasoningTokens == 42
        assert result.artifact is None

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self, storage):
        """Test provider failures reach the caller unchanged."""
        error = ProviderError("OpenAI API error: 500 - boom", status_code=500, body="boom")
        client = make_client(error=error)

        with pytest.raises(ProviderError) as exc_info:
            await analysis_service.analyze(
                USER,
                AnalysisRequest(selectedFiles=["a.csv"], prompt="Go"),
                storage=storage,
                client=client,
            )

        assert exc_info.value is error
        assert client.generate.await_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "model,max_tokens",
        [("gpt-5-2025-08-07", 300), ("o3-mini", 2500), ("gpt-4o", 300)],
    )
    async def test_diagnostic_names_the_sent_cap(self, storage, model, max_tokens):
        """Test the diagnostic quotes the same limit the provider body carries."""
        client = make_client(make_response("", usage=Usage(reasoning_tokens=5)))

        result = await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["a.csv"], prompt="Go", model=model, maxTokens=max_tokens),
            storage=storage,
            client=client,
        )

        llm_request = client.generate.call_args.args[0]
        body = OpenAIProvider(api_key="test-key").build_request(llm_request)
        sent_cap = body.get("max_completion_tokens", body.get("max_tokens"))
        assert f"({sent_cap} tokens)" in result.generatedText

    @pytest.mark.asyncio
    async def test_deeply_nested_json_keeps_result(self, storage):
        """Test undecodable nesting still returns the text without an artifact."""
        text = '{"a":' + "[" * 100000 + "]" * 100000 + "}"
        client = make_client(make_response(text))

        result = await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["a.csv"], prompt="Go"),
            storage=storage,
            client=client,
        )

        assert result.generatedText == text
        assert result.artifact is None

    @pytest.mark.asyncio
    async def test_result_is_frozen(self, storage):
        """Test results cannot be mutated after construction."""
        client = make_client(make_response("Plain answer."))

        result = await analysis_service.analyze(
            USER,
            AnalysisRequest(selectedFiles=["a.csv"], prompt="Go"),
            storage=storage,
            client=client,
        )

        assert result.artifact is None
        with pytest.raises(Exception):
            result.generatedText = "changed"
