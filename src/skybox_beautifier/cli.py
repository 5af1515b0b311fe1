"""Command-line interface for Skybox Beautifier."""

import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .core.extract import ExtractionConfig, FaceExtractor, FaceResult, FailurePolicy
from .core.layout import FACE_ORDER, FaceLayout, available_layouts, parse_layout, resolve_regions
from .utils.image import DEFAULT_MAX_PIXELS, set_max_image_pixels, suggest_face_size
from .utils.profiler import global_profiler

BANNER_COLORS = ["bright_magenta", "bright_blue", "bright_cyan", "bright_green", "bright_yellow"]


class ProgressBar:
    """Simple progress bar for CLI operations."""

    def __init__(self, total_steps: int, description: str = "Processing"):
        self.total_steps = total_steps
        self.current_step = 0
        self.failed_steps = 0
        self.description = description
        self.start_time = time.time()

    def update(self, step_name: str, failed: bool = False) -> None:
        """Update progress bar with current step."""
        self.current_step += 1
        if failed:
            self.failed_steps += 1
        percentage = (self.current_step / self.total_steps) * 100
        elapsed = time.time() - self.start_time

        bar_length = 30
        filled_length = int(bar_length * self.current_step // self.total_steps)
        bar = "█" * filled_length + "░" * (bar_length - filled_length)

        click.echo(
            f"\r{self.description}: [{bar}] {percentage:.1f}% - {step_name}",
            nl=False,
        )

        if self.current_step == self.total_steps:
            if self.failed_steps:
                click.echo(f" ✗ {self.failed_steps} failed ({elapsed:.1f}s)")
            else:
                click.echo(f" ✓ Complete ({elapsed:.1f}s)")


def welcome() -> None:
    """Show the welcome banner."""
    title = "Skybox Beautifier"
    click.echo("".join(
        click.style(char, fg=BANNER_COLORS[i % len(BANNER_COLORS)], bold=True)
        for i, char in enumerate(title)
    ) + f" v{__version__}")
    click.secho(
        "Hello, I'm here to help you convert a skybox texture to multiple faces!",
        fg="bright_cyan",
    )
    click.echo()


def print_parameters(parameters: dict) -> None:
    """Echo the chosen parameters."""
    click.secho("\nProcessing with the following parameters:\n", bg="bright_cyan", fg="black")

    for key, value in parameters.items():
        click.secho(f"• {click.style(key, bold=True)}: {value}", fg="bright_cyan")

    click.echo()


def prompt_layout() -> FaceLayout:
    """Ask for one of the known layouts."""
    click.echo("Available texture layouts:")
    for name, description in available_layouts():
        click.echo(f"  {name}: {description}")

    names = [name for name, _ in available_layouts()]
    value = click.prompt(
        "Select the texture layout",
        type=click.Choice(names),
        default=names[0],
    )
    return parse_layout(value)


@click.command()
@click.option(
    "-s",
    "--source",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Skybox texture path (prompted if omitted)",
)
@click.option(
    "-f",
    "--face-size",
    type=click.IntRange(min=1),
    help="Face size in pixels (prompted if omitted)",
)
@click.option(
    "-d",
    "--save-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the face images (prompted if omitted)",
)
@click.option(
    "-l",
    "--layout",
    type=click.Choice([layout.value for layout in FaceLayout]),
    help="Texture layout (prompted if omitted)",
)
@click.option("-y", "--yes", is_flag=True, help="Skip the confirmation prompt")
@click.option(
    "--policy",
    default=FailurePolicy.WAIT_ALL.value,
    type=click.Choice([policy.value for policy in FailurePolicy]),
    help="Join policy when a face fails (default: wait-all)",
)
@click.option(
    "--cleanup-on-failure",
    is_flag=True,
    help="Remove already written faces when extraction fails (wait-all only)",
)
@click.option(
    "--workers",
    default=len(FACE_ORDER),
    type=click.IntRange(1, len(FACE_ORDER)),
    help=f"Concurrent face jobs (default: {len(FACE_ORDER)})",
)
@click.option(
    "--max-pixels",
    default=DEFAULT_MAX_PIXELS,
    type=click.IntRange(min=1),
    help=f"Largest texture Pillow will decode, in pixels (default: {DEFAULT_MAX_PIXELS})",
)
@click.option("--no-banner", is_flag=True, help="Skip the welcome banner")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--profile", is_flag=True, help="Print a performance profile")
def main(
    source: Optional[Path],
    face_size: Optional[int],
    save_dir: Optional[Path],
    layout: Optional[str],
    yes: bool,
    policy: str,
    cleanup_on_failure: bool,
    workers: int,
    max_pixels: int,
    no_banner: bool,
    verbose: bool,
    profile: bool,
) -> None:
    """Slice a cross skybox texture into six face images.

    Examples:
        skybox-beautifier
        skybox-beautifier -s sky.png -f 512 -d faces -l top-front-bottom -y
        skybox-beautifier -s sky.png -l top-right-bottom --policy fail-fast
    """
    # Configure logging
    if verbose:
        logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    else:
        logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')

    try:
        config = ExtractionConfig(
            failure_policy=FailurePolicy(policy),
            max_workers=workers,
            cleanup_on_failure=cleanup_on_failure,
        )
    except ValueError as e:
        raise click.UsageError(str(e))

    set_max_image_pixels(max_pixels)

    if not no_banner:
        click.clear()
        welcome()

    if source is None:
        source = click.prompt(
            "Enter the texture path",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
        )

    if face_size is None:
        try:
            suggested = suggest_face_size(source)
        except RuntimeError:
            suggested = None
        face_size = click.prompt(
            "Enter the face size",
            type=click.IntRange(min=1),
            default=suggested,
        )

    if save_dir is None:
        save_dir = click.prompt(
            "Enter the save directory",
            type=click.Path(file_okay=False, path_type=Path),
        )

    face_layout = parse_layout(layout) if layout else prompt_layout()

    if not yes and not click.confirm("Are all parameters correct?", default=True):
        click.secho("Process aborted!", bg="red", fg="white")
        sys.exit(1)

    print_parameters({
        "path": source,
        "faceSize": face_size,
        "savePath": save_dir,
        "layout": face_layout.description,
    })

    regions = resolve_regions(face_size, face_layout)
    save_dir.mkdir(parents=True, exist_ok=True)

    progress = ProgressBar(len(FACE_ORDER), "Processing, do not interrupt")

    def on_face_done(result: FaceResult) -> None:
        status = "done" if result.ok else "failed"
        progress.update(f"{result.face.value} {status}", failed=not result.ok)

    extractor = FaceExtractor(config=config)
    outcome = extractor.extract_faces(source, save_dir, regions, on_face_done=on_face_done)

    if outcome.success:
        click.echo(f"\n✅ Success! Saved image faces at {outcome.saved_directory}")
        click.secho(f"Process took {outcome.elapsed_ms:.0f} ms", fg="bright_blue")
    else:
        click.echo("\n❌ Failed to process skybox!", err=True)
        click.echo(f"{outcome.failed_face.value} face: {outcome.cause}", err=True)

        for failure in outcome.failures:
            if failure.face is not outcome.failed_face:
                click.echo(f"{failure.face.value} face: {failure.error}", err=True)

        if outcome.removed:
            click.echo(f"Removed {len(outcome.removed)} partially written faces", err=True)

        if verbose:
            import traceback

            traceback.print_exception(
                type(outcome.cause), outcome.cause, outcome.cause.__traceback__
            )

    if profile:
        click.echo()
        global_profiler.print_summary("Performance Profile")


if __name__ == "__main__":
    main()
