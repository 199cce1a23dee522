"""Unit tests for the speech module."""
import asyncio
import io

import httpx
import numpy as np
import pytest
import soundfile as sf

from conftest import FakePlayer, FakeSynthesizer, QueueSource
from tonechat.errors import PlaybackError, ServiceError, TransportError
from tonechat.speech import (
    OpenAISpeechRecognizer,
    OpenAISpeechSynthesizer,
    RecognitionSettings,
    SpeechBridge,
    SpeechRecognizer,
    SpeechSynthesizer,
    create_speech_recognizer,
    create_speech_synthesizer,
)
from tonechat.speech.providers.openai import pcm_to_wav


async def settle(rounds: int = 5) -> None:
    """Let queued callbacks and tasks run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def chunk_stream(chunks: list[bytes]):
    for chunk in chunks:
        yield chunk


def recognizer_with(handler) -> OpenAISpeechRecognizer:
    return OpenAISpeechRecognizer(
        api_key="sk-test",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def transcribing_bridge(handler) -> tuple[SpeechBridge, list[QueueSource]]:
    """A bridge whose recognizer calls the transcription API through handler."""
    sources: list[QueueSource] = []

    def source_factory() -> QueueSource:
        sources.append(QueueSource())
        return sources[-1]

    bridge = SpeechBridge(
        synthesizer=FakeSynthesizer(),
        player=FakePlayer(),
        recognizer=recognizer_with(handler),
        source_factory=source_factory,
    )
    return bridge, sources


class BrokenStopPlayer(FakePlayer):
    """Player whose device fails every stop."""

    def stop(self):
        raise PlaybackError("device lost", source="player")


class TestSpeechInterfaces:
    """Tests for the abstract speech interfaces."""

    def test_synthesizer_is_abstract(self):
        with pytest.raises(TypeError):
            SpeechSynthesizer()  # type: ignore

    def test_recognizer_is_abstract(self):
        with pytest.raises(TypeError):
            SpeechRecognizer()  # type: ignore


class TestSpeak:
    """Tests for outbound speech through the bridge."""

    @pytest.mark.asyncio
    async def test_speak_plays_synthesized_audio(self, speech_bridge, player):
        await speech_bridge.speak("Hello there")

        assert [clip.data for clip in player.played] == [b"Hello there"]
        assert speech_bridge.is_speaking

    @pytest.mark.asyncio
    async def test_blank_text_is_not_spoken(self, speech_bridge, player):
        await speech_bridge.speak("   ")
        assert player.played == []

    @pytest.mark.asyncio
    async def test_newest_speak_wins(self):
        """Test that audio from a superseded speak() is never played."""
        player = FakePlayer()
        bridge = SpeechBridge(synthesizer=FakeSynthesizer(delay=0.01), player=player)

        first = asyncio.create_task(bridge.speak("first reply"))
        await settle()
        await bridge.speak("second reply")
        await first

        assert [clip.data for clip in player.played] == [b"second reply"]

    @pytest.mark.asyncio
    async def test_stop_speaking_discards_in_flight_synthesis(self):
        player = FakePlayer()
        bridge = SpeechBridge(synthesizer=FakeSynthesizer(delay=0.01), player=player)

        task = asyncio.create_task(bridge.speak("reply"))
        await settle()
        bridge.stop_speaking()
        await task

        assert player.played == []
        assert not bridge.is_speaking

    @pytest.mark.asyncio
    async def test_synthesis_errors_propagate(self, player):
        bridge = SpeechBridge(
            synthesizer=FakeSynthesizer(error=ServiceError("voice unavailable")),
            player=player,
        )
        with pytest.raises(ServiceError):
            await bridge.speak("reply")
        assert player.played == []

    @pytest.mark.asyncio
    async def test_stop_speaking_logs_device_error(self):
        """Test that a failing device stop is reported as a warning."""
        events = []
        bridge = SpeechBridge(synthesizer=FakeSynthesizer(), player=BrokenStopPlayer())
        bridge.set_debug_callback(lambda level, component, message: events.append((level, component)))

        bridge.stop_speaking()
        await bridge.close()

        assert events == [("warning", "Speech"), ("warning", "Speech")]


class TestListening:
    """Tests for microphone recognition sessions."""

    @pytest.mark.asyncio
    async def test_partials_replace_input_text(self, speech_bridge, sources):
        """Test that each partial replaces the field and the final is delivered on stop."""
        field: list[str] = []
        session = speech_bridge.start_listening()
        task = asyncio.create_task(speech_bridge.listen_into(field.append, session))

        sources[0].push(b"turn")
        await settle()
        sources[0].push(b"it")
        await settle()
        sources[0].push(b"off")
        await settle()
        speech_bridge.stop_listening()
        text = await task

        assert field == ["turn", "turn it", "turn it off", "turn it off"]
        assert text == "turn it off"
        assert session.final_transcript.text == "turn it off"
        assert not speech_bridge.is_listening

    @pytest.mark.asyncio
    async def test_new_session_cancels_previous(self, speech_bridge, sources):
        """Test that a replaced session emits nothing after the new one starts."""
        first_field: list[str] = []
        first = speech_bridge.start_listening()
        first_task = asyncio.create_task(speech_bridge.listen_into(first_field.append, first))
        sources[0].push(b"hello")
        await settle()

        second = speech_bridge.start_listening()
        await first_task

        assert first.cancelled
        assert sources[0].closed
        assert first_field == ["hello"]
        assert first.final_transcript is None
        assert speech_bridge.is_listening
        assert second.session_id == first.session_id + 1

        second.cancel()

    @pytest.mark.asyncio
    async def test_listening_stops_playback(self, speech_bridge, player):
        await speech_bridge.speak("long reply")
        assert speech_bridge.is_speaking

        session = speech_bridge.start_listening()
        assert not speech_bridge.is_speaking
        session.cancel()

    def test_listening_requires_recognizer(self, player):
        bridge = SpeechBridge(synthesizer=FakeSynthesizer(), player=player)

        assert not bridge.can_listen
        with pytest.raises(RuntimeError):
            bridge.start_listening()

    @pytest.mark.asyncio
    async def test_close_cancels_session(self, speech_bridge, sources):
        session = speech_bridge.start_listening()
        await speech_bridge.close()

        assert session.cancelled
        assert sources[0].closed

    @pytest.mark.asyncio
    async def test_cancel_skips_final_transcription(self):
        """Test that a replaced session never sends its buffered audio for transcription."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(200, json={"text": "should not be heard"})

        bridge, sources = transcribing_bridge(handler)
        field: list[str] = []
        first = bridge.start_listening()
        first_task = asyncio.create_task(bridge.listen_into(field.append, first))
        # Well below one interim step, so only a final transcript could call out
        sources[0].push(b"\x00" * 64)
        await settle()

        second = bridge.start_listening()
        await first_task
        await settle()

        assert first.cancelled
        assert calls == []
        assert field == []
        assert first.final_transcript is None

        second.cancel()
        await bridge.close()

    @pytest.mark.asyncio
    async def test_stop_still_transcribes_once(self):
        """Test that a graceful stop sends the buffered audio exactly once."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(200, json={"text": " all done "})

        bridge, sources = transcribing_bridge(handler)
        field: list[str] = []
        session = bridge.start_listening()
        task = asyncio.create_task(bridge.listen_into(field.append, session))
        sources[0].push(b"\x00" * 64)
        await settle()

        bridge.stop_listening()
        text = await task
        await bridge.close()

        assert len(calls) == 1
        assert text == "all done"
        assert session.final_transcript.is_final


class TestSoundDevicePlayer:
    """Tests for local playback error reporting."""

    def test_device_error_on_stop_is_playback_error(self, monkeypatch):
        try:
            from tonechat.speech import player as player_module
        except OSError:
            pytest.skip("PortAudio library not available")

        def failing_stop():
            raise player_module.sd.PortAudioError("device lost")

        monkeypatch.setattr(player_module.sd, "stop", failing_stop)
        with pytest.raises(PlaybackError, match="device lost"):
            player_module.SoundDevicePlayer().stop()


class TestPcmToWav:
    """Tests for wrapping captured PCM in a WAV container."""

    def test_round_trip_samples(self):
        settings = RecognitionSettings(sample_rate=8000)
        samples = np.array([0, 1000, -1000, 32767], dtype=np.int16)

        wav = pcm_to_wav(samples.tobytes(), settings)
        decoded, rate = sf.read(io.BytesIO(wav), dtype="int16")

        assert rate == 8000
        assert decoded.tolist() == samples.tolist()

    def test_trailing_partial_frame_dropped(self):
        settings = RecognitionSettings(channels=2)
        wav = pcm_to_wav(b"\x01\x00\x02\x00\x03", settings)
        decoded, _ = sf.read(io.BytesIO(wav), dtype="int16")

        assert decoded.shape == (1, 2)


class TestOpenAISpeechRecognizer:
    """Tests for incremental transcription over the request/response API."""

    @pytest.mark.asyncio
    async def test_interim_then_final(self):
        """Test interim transcripts at each interval and one final transcript."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request.url.path)
            return httpx.Response(200, json={"text": f" draft {len(calls)} "})

        # 0.01 s at 16 kHz mono 16-bit = 320 bytes per interim step
        settings = RecognitionSettings(interim_interval=0.01)
        recognizer = recognizer_with(handler)
        partials = [
            partial
            async for partial in recognizer.recognize(chunk_stream([b"\x00" * 320] * 2), settings)
        ]
        await recognizer.close()

        assert [partial.text for partial in partials] == ["draft 1", "draft 2", "draft 3"]
        assert [partial.is_final for partial in partials] == [False, False, True]
        assert all(path.endswith("/audio/transcriptions") for path in calls)

    @pytest.mark.asyncio
    async def test_final_only_without_interim_results(self):
        handler_calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            handler_calls.append(1)
            return httpx.Response(200, json={"text": "done"})

        settings = RecognitionSettings(interim_results=False, interim_interval=0.01)
        recognizer = recognizer_with(handler)
        partials = [
            partial
            async for partial in recognizer.recognize(chunk_stream([b"\x00" * 320] * 3), settings)
        ]
        await recognizer.close()

        assert len(handler_calls) == 1
        assert partials[0].is_final and partials[0].text == "done"

    @pytest.mark.asyncio
    async def test_no_audio_no_transcript(self):
        recognizer = recognizer_with(lambda request: httpx.Response(200, json={"text": "x"}))
        partials = [p async for p in recognizer.recognize(chunk_stream([]), RecognitionSettings())]
        await recognizer.close()

        assert partials == []

    @pytest.mark.asyncio
    async def test_auth_failure_is_transport_error(self):
        recognizer = recognizer_with(
            lambda request: httpx.Response(401, json={"error": {"message": "bad key"}})
        )
        with pytest.raises(TransportError):
            async for _ in recognizer.recognize(chunk_stream([b"\x00" * 64]), RecognitionSettings()):
                pass
        await recognizer.close()


class TestOpenAISpeechSynthesizer:
    """Tests for OpenAI text to speech."""

    @pytest.mark.asyncio
    async def test_synthesize_returns_wav_bytes(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, content=b"RIFF....WAVE", headers={"content-type": "audio/wav"})

        synthesizer = OpenAISpeechSynthesizer(
            api_key="sk-test",
            voice="nova",
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        clip = await synthesizer.synthesize("Hello")
        await synthesizer.close()

        assert clip.data == b"RIFF....WAVE"
        assert clip.content_type == "audio/wav"
        assert requests[0].url.path.endswith("/audio/speech")


class TestSpeechFactory:
    """Tests for the speech factories."""

    def test_create_openai_synthesizer(self):
        assert isinstance(create_speech_synthesizer("openai", api_key="sk-test"), OpenAISpeechSynthesizer)

    def test_create_openai_recognizer(self):
        assert isinstance(create_speech_recognizer("openai", api_key="sk-test"), OpenAISpeechRecognizer)

    def test_missing_api_key_fails(self):
        with pytest.raises(TypeError):
            create_speech_synthesizer("openai")

    def test_unknown_provider_fails(self):
        with pytest.raises(ValueError):
            create_speech_recognizer("sphinx")
