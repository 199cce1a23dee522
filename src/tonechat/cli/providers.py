"""Provider factory functions for CLI.

Centralizes creation of the dialogue, tone and speech services from
environment variables. Hides configuration details from command
implementations.
"""

import os
from typing import Any

from rich.console import Console

from ..dialogue import DialogueService, DialogueSession, create_dialogue_service
from ..orchestrator import DEFAULT_BRANCH_TIMEOUT, RGBColor, TurnOrchestrator
from ..speech import SpeechBridge, create_speech_recognizer, create_speech_synthesizer
from ..tone import ToneScorer, ToneService, create_tone_service
from ..ui.config import AGENT_TEXT_COLOR, USER_ALERT_COLOR, USER_NEUTRAL_COLOR

# Default console for output
_console = Console()


def _fail(con: Console, message: str) -> None:
    import typer

    con.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(code=1)


def get_dialogue_service(console: Console | None = None) -> DialogueService:
    """Create the dialogue service from environment variables.

    Raises:
        SystemExit: If the provider is unknown or not configured

    Environment variables:
        DIALOGUE_PROVIDER: assistant or openai (default: assistant)
        ASSISTANT_URL: Assistant service URL (assistant provider)
        ASSISTANT_APIKEY: Assistant API key (assistant provider)
        ASSISTANT_WORKSPACE_ID: Workspace id (assistant provider)
        ASSISTANT_VERSION: API version date (default: 2018-09-20)
        OPENAI_API_KEY: OpenAI API key (openai provider)
        OPENAI_CHAT_MODEL: OpenAI model (default: gpt-4o-mini)
        DIALOGUE_INSTRUCTIONS: Optional system instructions (openai provider)
    """
    con = console or _console
    provider = os.getenv("DIALOGUE_PROVIDER", "assistant").lower()

    if provider in ("assistant", "watson"):
        config: dict[str, Any] = {
            "api_key": os.getenv("ASSISTANT_APIKEY"),
            "workspace_id": os.getenv("ASSISTANT_WORKSPACE_ID"),
            "url": os.getenv("ASSISTANT_URL"),
        }
        missing = [key for key, value in config.items() if not value]
        if missing:
            _fail(con, f"Assistant dialogue provider is missing: {', '.join(missing)}")
        if os.getenv("ASSISTANT_VERSION"):
            config["version"] = os.getenv("ASSISTANT_VERSION")
        return create_dialogue_service("assistant", **config)

    if provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            _fail(con, "OPENAI_API_KEY not set in environment")
        return create_dialogue_service(
            "openai",
            api_key=api_key,
            model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini"),
            instructions=os.getenv("DIALOGUE_INSTRUCTIONS"),
        )

    _fail(con, f"Unknown dialogue provider: {provider}")


def get_tone_service(console: Console | None = None) -> ToneService:
    """Create the tone service from environment variables.

    Environment variables:
        TONE_PROVIDER: watson or openai (default: watson)
        TONE_URL: Tone analyzer URL (watson provider)
        TONE_APIKEY: Tone analyzer API key (watson provider)
        TONE_VERSION: API version date (default: 2016-05-19)
        OPENAI_API_KEY: OpenAI API key (openai provider)
        OPENAI_TONE_MODEL: OpenAI model (default: gpt-4o-mini)
    """
    con = console or _console
    provider = os.getenv("TONE_PROVIDER", "watson").lower()

    if provider == "watson":
        api_key = os.getenv("TONE_APIKEY")
        url = os.getenv("TONE_URL")
        if not api_key or not url:
            _fail(con, "TONE_APIKEY and TONE_URL must be set for the watson tone provider")
        config: dict[str, Any] = {"api_key": api_key, "url": url}
        if os.getenv("TONE_VERSION"):
            config["version"] = os.getenv("TONE_VERSION")
        return create_tone_service("watson", **config)

    if provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            _fail(con, "OPENAI_API_KEY not set in environment")
        return create_tone_service(
            "openai",
            api_key=api_key,
            model=os.getenv("OPENAI_TONE_MODEL", "gpt-4o-mini"),
        )

    _fail(con, f"Unknown tone provider: {provider}")


def get_speech_bridge(
    console: Console | None = None,
    with_microphone: bool = True
) -> SpeechBridge | None:
    """Create the speech bridge from environment variables.

    Returns:
        SpeechBridge, or None if speech is disabled or not configured

    Environment variables:
        TONECHAT_SPEECH: set to 0 to disable speech (default: 1)
        OPENAI_API_KEY: OpenAI API key (required for speech)
        OPENAI_TTS_MODEL: Synthesis model (default: gpt-4o-mini-tts)
        OPENAI_TTS_VOICE: Synthesis voice (default: alloy)
        OPENAI_STT_MODEL: Transcription model (default: gpt-4o-mini-transcribe)
    """
    con = console or _console
    if os.getenv("TONECHAT_SPEECH", "1") == "0":
        return None

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        con.print("[yellow]Warning: OPENAI_API_KEY not set, speech features disabled[/yellow]")
        return None

    try:
        from ..speech.microphone import MicrophoneSource
        from ..speech.player import SoundDevicePlayer
    except OSError as e:
        # sounddevice raises OSError when the PortAudio library is missing
        con.print(f"[yellow]Warning: audio unavailable ({e}), speech features disabled[/yellow]")
        return None

    synthesizer = create_speech_synthesizer(
        "openai",
        api_key=api_key,
        model=os.getenv("OPENAI_TTS_MODEL", "gpt-4o-mini-tts"),
        voice=os.getenv("OPENAI_TTS_VOICE", "alloy"),
    )

    recognizer = None
    source_factory = None
    if with_microphone:
        recognizer = create_speech_recognizer(
            "openai",
            api_key=api_key,
            model=os.getenv("OPENAI_STT_MODEL", "gpt-4o-mini-transcribe"),
        )
        source_factory = MicrophoneSource

    return SpeechBridge(
        synthesizer=synthesizer,
        player=SoundDevicePlayer(),
        recognizer=recognizer,
        source_factory=source_factory,
    )


def get_turn_timeout() -> float | None:
    """Per-branch timeout in seconds; 0 disables it.

    Environment variables:
        TONECHAT_TURN_TIMEOUT: seconds (default: 15)
    """
    raw = os.getenv("TONECHAT_TURN_TIMEOUT")
    if raw is None:
        return DEFAULT_BRANCH_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_BRANCH_TIMEOUT
    return value if value > 0 else None


def build_orchestrator(console: Console | None = None, speech: bool = True) -> TurnOrchestrator:
    """Wire every service into a TurnOrchestrator."""
    con = console or _console
    return TurnOrchestrator(
        dialogue=DialogueSession(get_dialogue_service(con)),
        tone=ToneScorer(get_tone_service(con)),
        speech=get_speech_bridge(con) if speech else None,
        branch_timeout=get_turn_timeout(),
        neutral_color=RGBColor.from_hex(USER_NEUTRAL_COLOR),
        alert_color=RGBColor.from_hex(USER_ALERT_COLOR),
        agent_color=RGBColor.from_hex(AGENT_TEXT_COLOR),
    )
