"""Main CLI application using Typer."""
import asyncio

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..dialogue import DialogueSession
from ..errors import ToneChatError
from ..tone import ToneScorer
from .providers import build_orchestrator, get_dialogue_service, get_speech_bridge, get_tone_service

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="tonechat",
    help="Voice chat with a dialogue service and tone-aware message bubbles",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()


@app.command()
def chat(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show the log panel at this level (debug, info, warning, error)"
    ),
    speech: bool = typer.Option(
        True,
        "--speech/--no-speech",
        help="Speak replies aloud and enable dictation"
    ),
    greet: bool = typer.Option(
        True,
        "--greet/--no-greet",
        help="Open the conversation with the agent's greeting"
    ),
):
    """Start the interactive chat screen."""
    from ..ui import run_chat_tui

    orchestrator = build_orchestrator(console, speech=speech)
    asyncio.run(run_chat_tui(orchestrator, log_level=log_level, greet=greet))


@app.command()
def tone(
    text: str = typer.Argument(..., help="Text to analyze"),
):
    """Analyze the tone of a text and print the three category vectors."""
    async def _tone():
        scorer = ToneScorer(get_tone_service(console))
        try:
            record = await scorer.score(text, turn_id=1)
        except ToneChatError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await scorer.close()

        table = Table(title="Tone", show_header=True, header_style="bold")
        table.add_column("Category", style="cyan")
        table.add_column("Tone")
        table.add_column("Score", justify="right")

        for category, scores in (
            ("emotion", record.emotion),
            ("language", record.language),
            ("social", record.social),
        ):
            for index, score in enumerate(scores):
                table.add_row(category if index == 0 else "", score.label, f"{score.score:.3f}")

        console.print(table)
        console.print(f"[bold red]Anger:[/] {record.anger:.3f}")

    asyncio.run(_tone())


@app.command()
def say(
    text: str = typer.Argument(..., help="Text to speak"),
):
    """Synthesize text and play it on the default output device."""
    async def _say():
        bridge = get_speech_bridge(console, with_microphone=False)
        if bridge is None:
            console.print("[red]Error: speech is not configured[/red]")
            raise typer.Exit(code=1)
        try:
            await bridge.speak(text)
            while bridge.is_speaking:
                await asyncio.sleep(0.1)
        except ToneChatError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await bridge.close()

    asyncio.run(_say())


@app.command()
def ask(
    utterances: list[str] = typer.Argument(..., help="One or more utterances, sent in order"),
):
    """Send utterances to the dialogue service in one session and print the replies."""
    async def _ask():
        session = DialogueSession(get_dialogue_service(console))
        try:
            for utterance in utterances:
                reply = await session.send(utterance)
                console.print(Panel(
                    reply.reply_text or "[dim](empty reply)[/dim]",
                    title=f"[bold]{utterance}[/bold]",
                    border_style="blue",
                ))
        except ToneChatError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await session.close()

    asyncio.run(_ask())


if __name__ == "__main__":
    app()
