"""Command line entry point.

Usage:
    critique-engine critique board.json
    critique-engine critique board.json --tone aggressive --simplified --themed
    critique-engine synthesize --log-path data/analysis_log.csv
    critique-engine split response.txt
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv

from critique_engine.board import StaticBoard, load_board
from critique_engine.config import EngineSettings
from critique_engine.llm import ProviderGenerationBackend, get_provider
from critique_engine.models import SessionSnapshot, SessionState, SimplificationLevel, Tone
from critique_engine.session import SynthesisCoordinator
from critique_engine.storage import CSVAnalysisLogStore
from critique_engine.synthesis import load_synthesized_points, split_points

logger = logging.getLogger(__name__)

app = typer.Typer(help="Critique synthesis and variant cache engine")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Load .env and configure logging."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def _print_points(title: str, points) -> None:
    print(f"\n{title}")
    print("=" * len(title))
    for i, point in enumerate(points, 1):
        print(f"{i:2d}. {point}")


def _print_snapshot(snapshot: SessionSnapshot) -> None:
    title = f"Critique ({snapshot.simplification.value}, {snapshot.tone.value})"
    if snapshot.themed_grouping is None:
        _print_points(title, snapshot.active_points)
        return

    print(f"\n{title}")
    print("=" * len(title))
    # Groups, not names: reconciliation can leave two groups under one name
    for group in snapshot.themed_grouping.groups:
        marker = "" if group.theme.selected else " (deselected)"
        print(f"\n[{group.theme.name}]{marker}")
        for point in group.points:
            print(f"  - {point}")


async def _run_session(
    coordinator: SynthesisCoordinator,
    board: StaticBoard,
    tone: Tone,
    simplified: bool,
    themed: bool,
    publish: bool,
) -> SessionSnapshot:
    snapshot = await coordinator.submit_notes(board.decisions)
    if snapshot.state is not SessionState.READY:
        return snapshot

    if simplified:
        await coordinator.set_simplification(SimplificationLevel.SIMPLIFIED)
    if tone is not Tone.NORMAL:
        await coordinator.set_tone(tone)
    coordinator.set_themed_display(themed)

    if publish:
        await coordinator.publish_to_board()

    await coordinator.drain()
    return coordinator.snapshot()


@app.command()
def critique(
    board_path: Path = typer.Argument(..., help="Board export JSON"),
    tone: Tone = typer.Option(Tone.NORMAL, "--tone", "-t", help="Tone of the critique"),
    simplified: bool = typer.Option(False, "--simplified", "-s", help="Simplified variant"),
    themed: bool = typer.Option(False, "--themed", help="Group points by board themes"),
    publish: bool = typer.Option(
        False, "--publish", help="Write the points back into the board file as artifacts"
    ),
    provider: str = typer.Option(None, "--provider", "-p", help="openai, anthropic or gemini"),
    model: str = typer.Option(None, "--model", "-m", help="Model override for the provider"),
    log_path: Path = typer.Option(None, "--log-path", help="CSV analysis log"),
    output_json: bool = typer.Option(False, "--json", help="Print the snapshot as JSON"),
) -> None:
    """Run one critique session against a board export."""
    settings = EngineSettings.from_env()

    try:
        board = load_board(board_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if not board.decisions:
        logger.error(f"No design decisions in {board_path}")
        raise typer.Exit(1)

    try:
        llm = get_provider(provider or settings.provider, model or settings.model)
    except ValueError as e:
        logger.error(f"Failed to initialize provider: {e}")
        raise typer.Exit(1)

    backend = ProviderGenerationBackend(llm)
    coordinator = SynthesisCoordinator(
        backend,
        board=board,
        log_store=CSVAnalysisLogStore(log_path or settings.log_path),
        settings=settings,
    )

    snapshot = asyncio.run(_run_session(coordinator, board, tone, simplified, themed, publish))

    if snapshot.state is not SessionState.READY:
        logger.error(f"Critique failed: {snapshot.error}")
        raise typer.Exit(1)

    if output_json:
        print(json.dumps(snapshot.to_dict(), indent=2, ensure_ascii=False))
    else:
        _print_snapshot(snapshot)
        if snapshot.error:
            print(f"\n⚠️  {snapshot.error}")

    if publish:
        data = json.loads(board_path.read_text(encoding="utf-8"))
        data["artifacts"] = data.get("artifacts", []) + board.artifacts
        board_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(f"Wrote {len(board.artifacts)} artifacts to {board_path}")

    print(
        f"\n💰 {backend.calls} generation calls, {backend.total_tokens:,} tokens, "
        f"${backend.total_cost_usd:.4f}"
    )


@app.command()
def synthesize(
    log_path: Path = typer.Option(None, "--log-path", help="CSV analysis log"),
    cap: int = typer.Option(None, "--cap", help="Maximum number of points"),
) -> None:
    """Print the synthesized point set of every logged analysis run."""
    settings = EngineSettings.from_env()
    path = log_path or settings.log_path
    if not path.exists():
        logger.error(f"Analysis log not found: {path}")
        raise typer.Exit(1)

    points = asyncio.run(
        load_synthesized_points(
            CSVAnalysisLogStore(path),
            cap=settings.synthesis_cap if cap is None else cap,
            threshold=settings.merge_threshold,
            topic_word_count=settings.topic_word_count,
        )
    )
    _print_points(f"Synthesized points ({len(points)})", points)


@app.command()
def split(
    input_path: Path = typer.Argument(..., help="File with raw generated text"),
) -> None:
    """Split raw generated text into points."""
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        raise typer.Exit(1)

    points = split_points(input_path.read_text(encoding="utf-8"))
    _print_points(f"{len(points)} points", points)


if __name__ == "__main__":
    app()
