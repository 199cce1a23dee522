"""Unit tests for CLI wiring and the chat screen."""
import pytest
import typer
from rich.console import Console
from typer.testing import CliRunner

from conftest import FakeDialogueService, FakeToneService
from tonechat.cli.app import app
from tonechat.cli.providers import (
    build_orchestrator,
    get_dialogue_service,
    get_speech_bridge,
    get_tone_service,
    get_turn_timeout,
)
from tonechat.dialogue import AssistantDialogueService, DialogueSession, OpenAIDialogueService
from tonechat.orchestrator import DEFAULT_BRANCH_TIMEOUT, TurnOrchestrator
from tonechat.tone import ToneScorer, WatsonToneService
from tonechat.ui import ToneChatApp
from tonechat.ui.widgets import ChatHistoryWidget, ChatInputBar, TonePanel

ENV_VARS = (
    "DIALOGUE_PROVIDER",
    "ASSISTANT_URL",
    "ASSISTANT_APIKEY",
    "ASSISTANT_WORKSPACE_ID",
    "ASSISTANT_VERSION",
    "TONE_PROVIDER",
    "TONE_URL",
    "TONE_APIKEY",
    "TONE_VERSION",
    "OPENAI_API_KEY",
    "TONECHAT_SPEECH",
    "TONECHAT_TURN_TIMEOUT",
)

quiet = Console(quiet=True)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every tonechat variable from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestProviders:
    """Tests for environment-driven service creation."""

    def test_assistant_dialogue_from_env(self, clean_env):
        clean_env.setenv("ASSISTANT_APIKEY", "k")
        clean_env.setenv("ASSISTANT_WORKSPACE_ID", "ws")
        clean_env.setenv("ASSISTANT_URL", "https://assistant.example.com")

        service = get_dialogue_service(quiet)
        assert isinstance(service, AssistantDialogueService)

    def test_openai_dialogue_from_env(self, clean_env):
        clean_env.setenv("DIALOGUE_PROVIDER", "openai")
        clean_env.setenv("OPENAI_API_KEY", "sk-test")

        assert isinstance(get_dialogue_service(quiet), OpenAIDialogueService)

    def test_missing_dialogue_config_exits(self, clean_env):
        with pytest.raises(typer.Exit):
            get_dialogue_service(quiet)

    def test_unknown_dialogue_provider_exits(self, clean_env):
        clean_env.setenv("DIALOGUE_PROVIDER", "eliza")
        with pytest.raises(typer.Exit):
            get_dialogue_service(quiet)

    def test_watson_tone_from_env(self, clean_env):
        clean_env.setenv("TONE_APIKEY", "k")
        clean_env.setenv("TONE_URL", "https://tone.example.com")

        assert isinstance(get_tone_service(quiet), WatsonToneService)

    def test_speech_disabled_without_key(self, clean_env):
        assert get_speech_bridge(quiet) is None

    def test_speech_disabled_by_flag(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("TONECHAT_SPEECH", "0")
        assert get_speech_bridge(quiet) is None

    @pytest.mark.parametrize("raw, expected", [
        (None, DEFAULT_BRANCH_TIMEOUT),
        ("5", 5.0),
        ("0", None),
        ("soon", DEFAULT_BRANCH_TIMEOUT),
    ])
    def test_turn_timeout(self, clean_env, raw, expected):
        if raw is not None:
            clean_env.setenv("TONECHAT_TURN_TIMEOUT", raw)
        assert get_turn_timeout() == expected

    def test_build_orchestrator_without_speech(self, clean_env):
        clean_env.setenv("DIALOGUE_PROVIDER", "openai")
        clean_env.setenv("TONE_PROVIDER", "openai")
        clean_env.setenv("OPENAI_API_KEY", "sk-test")

        orchestrator = build_orchestrator(quiet, speech=False)
        assert isinstance(orchestrator, TurnOrchestrator)
        assert orchestrator.speech is None


class TestCommands:
    """Tests for the Typer commands."""

    def test_no_args_shows_help(self):
        result = CliRunner().invoke(app, [])
        assert "chat" in result.output
        assert "tone" in result.output

    def test_tone_without_config_fails(self, clean_env):
        result = CliRunner().invoke(app, ["tone", "I am furious"])
        assert result.exit_code == 1

    def test_say_without_speech_fails(self, clean_env):
        result = CliRunner().invoke(app, ["say", "hello"])
        assert result.exit_code == 1


class TestChatScreen:
    """Tests for the Textual chat screen."""

    @pytest.mark.asyncio
    async def test_greeting_and_turn_render(self):
        orchestrator = TurnOrchestrator(
            dialogue=DialogueSession(FakeDialogueService()),
            tone=ToneScorer(FakeToneService(scores={"I am furious": 0.9})),
        )
        chat_app = ToneChatApp(orchestrator, greet=True)

        async with chat_app.run_test() as pilot:
            await chat_app.workers.wait_for_complete()
            await pilot.pause()
            chat = chat_app.query_one("#chat-history", ChatHistoryWidget)
            tone_panel = chat_app.query_one("#tone-panel", TonePanel)
            assert chat.get_last_response() == "Hello, how can I help?"
            assert not tone_panel.display

            chat_app.on_chat_input_bar_submitted(ChatInputBar.Submitted("I am furious"))
            await orchestrator.wait_idle()
            await pilot.pause()

            assert chat.get_last_response() == "reply to I am furious"
            assert tone_panel.display
            assert orchestrator.anger_series == (0.9,)

            chat_app.action_clear_chat()
            await chat_app.workers.wait_for_complete()
            await pilot.pause()
            assert orchestrator.records == ()
            assert not tone_panel.display
