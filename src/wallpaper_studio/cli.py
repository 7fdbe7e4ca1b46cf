"""Command line interface for Wallpaper Studio."""
from __future__ import annotations

from functools import partial
from io import BytesIO
from pathlib import Path
from typing import Optional

import typer
import yaml
from dotenv import load_dotenv
from PIL import Image, UnidentifiedImageError

from . import gemini_client
from .config import StudioConfig
from .media_library import MediaLibrary
from .pexels.api_client import PexelsAPIClient, PexelsSettings
from .permissions import PermissionGate, PermissionStatus, PromptPermissionGate, StaticPermissionGate
from .persistence import WallpaperSaver
from .screens import Error, GalleryScreen, GenerateScreen
from .screens.gallery import SearchFn
from .screens.generate import GenerateFn
from .utils import setup_logging

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="Browse stock wallpapers or generate new ones with Gemini.")


def _notify(title: str, message: str) -> None:
    color = typer.colors.GREEN if title == "Wallpaper Saved" else typer.colors.YELLOW
    if title == "Error":
        color = typer.colors.RED
    typer.secho(f"{title}: {message}", fg=color)


def _make_search(config: StudioConfig) -> SearchFn:
    settings = PexelsSettings.from_env()
    client = PexelsAPIClient(api_key=settings.api_key, search=config.search)
    return client.search_images


def _make_generator(config: StudioConfig) -> GenerateFn:
    # fail early on a missing key instead of on first use
    gemini_client.GeminiSettings.from_env()
    return partial(gemini_client.generate_wallpaper, spec=config.generation)


def _make_gate(assume_yes: bool) -> PermissionGate:
    if assume_yes:
        return StaticPermissionGate(PermissionStatus.GRANTED)
    return PromptPermissionGate(
        lambda: typer.confirm("Allow Wallpaper Studio to save images to your media library?", default=True)
    )


@app.callback()
def _init(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a studio YAML config."),
    assume_yes: bool = typer.Option(False, "--yes", "-y", help="Grant media library access without asking."),
) -> None:
    """Initialize logging and shared objects for all commands."""

    setup_logging(level=10 if verbose else 20)  # 10=DEBUG, 20=INFO
    config = StudioConfig.load(config_path) if config_path else StudioConfig.default()
    gate = _make_gate(assume_yes)
    saver = WallpaperSaver(
        library=MediaLibrary(config.library.root),
        permissions=gate,
        staging_dir=config.library.staging_dir,
        album=config.library.album,
    )
    ctx.obj = {"config": config, "permissions": gate, "saver": saver}


def _build_or_exit(factory, config: StudioConfig):
    try:
        return factory(config)
    except RuntimeError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


@app.command()
def browse(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Search keywords (defaults to config)."),
    save: Optional[int] = typer.Option(None, "--save", "-s", help="1-based position of the wallpaper to save."),
) -> None:
    """Fetch a random page of portrait wallpapers and optionally save one."""

    config: StudioConfig = ctx.obj["config"]
    screen = GalleryScreen(
        search=_build_or_exit(_make_search, config),
        saver=ctx.obj["saver"],
        permissions=ctx.obj["permissions"],
        query=query or config.search.query,
        ratio=config.ratio,
        notify=_notify,
    )
    screen.mount()
    if isinstance(screen.state, Error):
        raise typer.Exit(code=1)

    for pos, candidate in enumerate(screen.candidates, start=1):
        typer.echo(f"[{pos:2d}] #{candidate.id} {candidate.width}x{candidate.height} {candidate.display_url}")

    if save is None:
        return
    try:
        screen.select_index(save - 1)
    except IndexError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    outcome = screen.save_selected()
    if outcome is None or not outcome.success:
        raise typer.Exit(code=1)


@app.command()
def generate(
    ctx: typer.Context,
    prompt: str = typer.Argument(..., help="What kind of wallpaper do you want?"),
    save: bool = typer.Option(False, "--save", "-s", help="Save the generated wallpaper to the library."),
) -> None:
    """Generate a wallpaper from a text prompt and optionally save it."""

    config: StudioConfig = ctx.obj["config"]
    screen = GenerateScreen(
        generate=_build_or_exit(_make_generator, config),
        saver=ctx.obj["saver"],
        permissions=ctx.obj["permissions"],
        notify=_notify,
    )
    screen.mount()
    typer.echo("Crafting your perfect wallpaper...")
    screen.generate(prompt)

    image = screen.image
    if image is None:
        raise typer.Exit(code=1)

    try:
        with Image.open(BytesIO(image.decode())) as img:
            typer.echo(f"Generated {image.mime_type} image, {img.width}x{img.height}")
    except (UnidentifiedImageError, OSError, ValueError):
        typer.echo(f"Generated {image.mime_type} image")

    if save:
        outcome = screen.save()
        if outcome is None or not outcome.success:
            raise typer.Exit(code=1)


@app.command(name="config")
def show_config(ctx: typer.Context) -> None:
    """Print the effective configuration."""

    typer.echo(yaml.safe_dump(ctx.obj["config"].to_dict(), sort_keys=False).rstrip())


@app.command()
def album(ctx: typer.Context) -> None:
    """List wallpapers saved to the configured album."""

    config: StudioConfig = ctx.obj["config"]
    library = MediaLibrary(config.library.root)
    assets = library.album_assets(config.library.album)
    typer.echo(f"Album '{config.library.album}': {len(assets)} wallpaper(s)")
    for asset in assets:
        typer.echo(f"  {asset.created_at}  {asset.filename}")


if __name__ == "__main__":  # pragma: no cover
    app()
