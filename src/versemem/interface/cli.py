"""versemem CLI: manage and review the verse memorization collection."""

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer

from versemem.application.config import AppConfig, resolve_config
from versemem.application.memorization.scheduler import MemorizationScheduler
from versemem.domain.errors import MemorizationError
from versemem.domain.memorization.models import Level, MemorizationItem
from versemem.infrastructure.codec import item_to_dict

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="versemem: spaced-repetition memorization for Bible verses.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage versemem configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, MemorizationItem):
        data = item_to_dict(value)
        data["accuracy"] = value.accuracy
        return data
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    if is_dataclass(value):
        return asdict(value)
    return value


def _emit(value: Any) -> None:
    typer.echo(json.dumps(_to_jsonable(value), indent=2, ensure_ascii=False, default=str))


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj["config"]


def _run(ctx: typer.Context, action: Callable[[MemorizationScheduler], Awaitable[T]]) -> T:
    """Open the configured scheduler, run `action` and map domain errors to exit 1."""
    from versemem.application.factory import get_scheduler

    async def runner() -> T:
        scheduler = await get_scheduler(_config(ctx))
        return await action(scheduler)

    try:
        return asyncio.run(runner())
    except MemorizationError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from None


def _query(ctx: typer.Context, action: Callable[[MemorizationScheduler], T]) -> T:
    async def wrapped(scheduler: MemorizationScheduler) -> T:
        return action(scheduler)

    return _run(ctx, wrapped)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    backend: Annotated[
        str | None, typer.Option(help="Storage backend: json, sqlite, memory.")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding the memorization store.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for versemem."""
    ctx.ensure_object(dict)
    try:
        config = resolve_config({"backend": backend, "data_dir": data_dir})
    except ValueError as e:
        typer.secho(f"Invalid configuration: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from None

    level = config.verbose + verbose
    if level >= 3:
        logging.getLogger().setLevel(logging.DEBUG)
    elif level >= 2:
        logging.getLogger().setLevel(logging.INFO)
    ctx.obj["config"] = config


# ---------------------------------------------------------------------------
# Collection commands
# ---------------------------------------------------------------------------


@app.command()
def add(
    ctx: typer.Context,
    reference: Annotated[str, typer.Argument(help="Verse citation, e.g. 'John 3:16'.")],
    text: Annotated[str, typer.Argument(help="Full verse text.")],
    category: Annotated[str | None, typer.Option(help="Optional category.")] = None,
):
    """[bold green]Add[/bold green] a verse to memorize."""
    _emit(_run(ctx, lambda s: s.add_item(reference.strip(), text.strip(), category=category)))


@app.command("list")
def list_items(
    ctx: typer.Context,
    level: Annotated[
        Level | None, typer.Option(case_sensitive=False, help="Only items at this level.")
    ] = None,
):
    """List memorized verses in the order they were added."""
    if level is None:
        _emit(_query(ctx, lambda s: s.list_all()))
    else:
        _emit(_query(ctx, lambda s: s.list_by_level(level)))


@app.command()
def due(ctx: typer.Context):
    """List verses due for review now."""
    _emit(_query(ctx, lambda s: s.list_due_for_review()))


@app.command()
def review(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID.")],
    quality: Annotated[
        int, typer.Argument(min=0, max=5, help="Recall quality, 0 (blackout) to 5 (perfect).")
    ],
    hints: Annotated[int, typer.Option(min=0, help="Hints used during the review.")] = 0,
    time_ms: Annotated[int, typer.Option(min=0, help="Time spent reviewing (ms).")] = 0,
):
    """Record a review and show the new schedule."""
    _emit(
        _run(
            ctx,
            lambda s: s.review(item_id, quality, hints_used=hints, time_spent_ms=time_ms),
        )
    )


@app.command()
def reset(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """Start memorizing a verse over."""
    _emit(_run(ctx, lambda s: s.reset_item(item_id)))


@app.command()
def remove(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """Remove a verse from the collection."""
    _run(ctx, lambda s: s.remove_item(item_id))
    _emit({"removed": item_id})


@app.command()
def category(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID.")],
    name: Annotated[str | None, typer.Argument(help="Category; omit to clear.")] = None,
):
    """Set or clear a verse's category."""
    _emit(_run(ctx, lambda s: s.set_category(item_id, name)))


@app.command()
def categories(ctx: typer.Context):
    """List known categories."""
    _emit(_query(ctx, lambda s: s.list_categories()))


# ---------------------------------------------------------------------------
# Progress commands
# ---------------------------------------------------------------------------


@app.command()
def stats(ctx: typer.Context):
    """Show counts per level, items due and average ease."""
    _emit(_query(ctx, lambda s: s.get_statistics()))


@app.command()
def streak(ctx: typer.Context):
    """Show the current and longest daily review streak."""
    _emit(_query(ctx, lambda s: s.get_streak()))


@app.command()
def achievements(ctx: typer.Context):
    """Show achievement progress."""
    _emit(_query(ctx, lambda s: s.get_achievements()))


@app.command()
def analytics(ctx: typer.Context):
    """Show time spent, accuracy and weekly activity."""
    _emit(_query(ctx, lambda s: s.get_progress_analytics()))


# ---------------------------------------------------------------------------
# Exercise commands
# ---------------------------------------------------------------------------


@app.command()
def blanks(
    ctx: typer.Context,
    item_id: Annotated[str, typer.Argument(help="Item ID.")],
    count: Annotated[int | None, typer.Option(min=1, help="Number of blanks.")] = None,
):
    """Fill-in-the-blank exercise."""
    n = count or _config(ctx).blank_count
    _emit(_query(ctx, lambda s: s.fill_in_blank(item_id, n)))


@app.command()
def tips(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """Memorization tips for a verse."""
    size = _config(ctx).chunk_size
    _emit(_query(ctx, lambda s: s.memorization_tips(item_id, size)))


@app.command("first-letter")
def first_letter(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """First-letter prompt for a verse."""
    _emit(_query(ctx, lambda s: s.first_letter_exercise(item_id)))


@app.command()
def scramble(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """Word scramble exercise."""
    _emit(_query(ctx, lambda s: s.word_scramble(item_id)))


@app.command()
def reveal(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """Progressive reveal stages for a verse."""
    _emit(_query(ctx, lambda s: s.progressive_reveal(item_id)))


@app.command()
def typing(ctx: typer.Context, item_id: Annotated[str, typer.Argument(help="Item ID.")]):
    """Typing prompt for a verse."""
    _emit(_query(ctx, lambda s: s.typing_exercise(item_id)))


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display the resolved configuration as JSON."""
    config = ctx.obj["config"]
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    app()
