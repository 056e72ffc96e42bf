"""
cli.py

Command line front end: render a gradient or cellular noise field to an image.
"""

import logging
import secrets
from typing import Optional

import numpy as np
import typer
from rich.console import Console
from rich.progress import Progress, BarColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from .config import (
    DEFAULT_CLI_OCTAVES,
    DEFAULT_NUM_POINTS,
    DEFAULT_POINT_GEN_ALGORITHM,
    DEFAULT_POINT_SELECTION_CRITERIA,
    DEFAULT_STARTING_OCTAVE_INDEX,
    DEFAULT_WORLEY_SEED,
    load_field_config,
    load_render_settings,
    setup_logging,
)
from .errors import ConfigurationError, NoiseError
from .perlin import GradientNoiseField
from .render import halving_weights, normalize_map, sample_field, save_noise_map
from .worley import WorleyField

app = typer.Typer(help="Render tileable Perlin and Worley noise.")
console = Console()
logger = logging.getLogger(__name__)


def parse_weights(weights: str):
    try:
        return [float(w) for w in weights.split(",") if w.strip()]
    except ValueError as ve:
        raise ConfigurationError(f"Invalid octave weights {weights!r}: {ve}") from ve


def _fresh_seed() -> str:
    seed = secrets.token_hex(8)
    console.print(f"Using random seed [bold cyan]{seed}[/bold cyan]")
    return seed


def _render(field, size: int, output: str, normalize: bool, title: str):
    """Sample ``field``, write the image and print a summary table."""
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task(f"[green]Sampling {title}...", total=size)
        noise_map = sample_field(field, size, progress=lambda _row: progress.advance(task))

    raw_min, raw_max, raw_mean = float(np.min(noise_map)), float(np.max(noise_map)), float(np.mean(noise_map))
    if normalize:
        noise_map = normalize_map(noise_map)
    save_noise_map(noise_map, output)

    table = Table(title=f"{title} noise")
    table.add_column("Size", justify="right", style="cyan", no_wrap=True)
    table.add_column("Min", style="magenta")
    table.add_column("Max", style="magenta")
    table.add_column("Mean", style="magenta")
    table.add_column("Output", style="green")
    table.add_row(f"{size}x{size}", f"{raw_min:.4f}", f"{raw_max:.4f}", f"{raw_mean:.4f}", output)
    console.print(table)
    logger.info(f"Saved {title} noise to {output}")


def _settings(size: Optional[int], output: Optional[str], verbose: bool):
    """Merge command line options over the environment render settings."""
    try:
        settings = load_render_settings()
    except ConfigurationError as e:
        setup_logging(verbose)
        logger.error(f"Invalid render settings: {e}")
        raise typer.Exit(code=1)
    setup_logging(verbose or settings.verbose)
    return (
        settings.size if size is None else size,
        settings.output if output is None else output,
    )


@app.command()
def perlin(
    seed: Optional[str] = typer.Option(None, "--seed", "-s", help="Permutation seed; canonical table when omitted."),
    random_seed: bool = typer.Option(False, "--random-seed", help="Draw a fresh seed and print it."),
    start_octave: int = typer.Option(DEFAULT_STARTING_OCTAVE_INDEX, "--start-octave", help="Index of the first octave."),
    octaves: int = typer.Option(DEFAULT_CLI_OCTAVES, "--octaves", help="Number of octaves with halving weights."),
    weights: Optional[str] = typer.Option(None, "--weights", "-w", help="Comma separated octave weights."),
    scale_x: float = typer.Option(1.0, "--scale-x", help="Grid scale along x."),
    scale_y: float = typer.Option(1.0, "--scale-y", help="Grid scale along y."),
    size: Optional[int] = typer.Option(None, "--size", help="Image side in pixels."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="PNG or TIFF file to write."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output."),
):
    """
    Render multi-octave gradient noise.
    """
    size, output = _settings(size, output, verbose)
    try:
        octave_weights = parse_weights(weights) if weights else halving_weights(octaves)
        field = GradientNoiseField.create(
            starting_octave_index=start_octave,
            octave_weights=octave_weights,
            seed=_fresh_seed() if random_seed else seed,
            scale=(scale_x, scale_y),
        )
        _render(field, size, output, normalize=False, title="Perlin")
    except (NoiseError, ValueError) as e:
        logger.error(f"Perlin rendering failed: {e}")
        raise typer.Exit(code=1)


@app.command()
def worley(
    seed: str = typer.Option(DEFAULT_WORLEY_SEED, "--seed", "-s", help="Seed for random point placement."),
    random_seed: bool = typer.Option(False, "--random-seed", help="Draw a fresh seed and print it."),
    points: int = typer.Option(DEFAULT_NUM_POINTS, "--points", "-p", help="Number of feature points."),
    algorithm: str = typer.Option(DEFAULT_POINT_GEN_ALGORITHM, "--algorithm", "-a", help="random, halton or hammersley."),
    criteria: str = typer.Option(
        DEFAULT_POINT_SELECTION_CRITERIA,
        "--criteria",
        "-c",
        help="closest, second_closest or second_minus_closest.",
    ),
    normalize: bool = typer.Option(True, "--normalize/--no-normalize", help="Stretch the distances to [0, 1]."),
    size: Optional[int] = typer.Option(None, "--size", help="Image side in pixels."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="PNG or TIFF file to write."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output."),
):
    """
    Render cellular distance noise.
    """
    size, output = _settings(size, output, verbose)
    try:
        field = WorleyField.create(
            seed=_fresh_seed() if random_seed else seed,
            num_points=points,
            point_gen_algorithm=algorithm,
            point_selection_criteria=criteria,
        )
        _render(field, size, output, normalize=normalize, title="Worley")
    except (NoiseError, ValueError) as e:
        logger.error(f"Worley rendering failed: {e}")
        raise typer.Exit(code=1)


@app.command()
def render(
    file: str = typer.Option(..., "--file", "-f", help="JSON field description with a 'type' of perlin or worley."),
    size: Optional[int] = typer.Option(None, "--size", help="Image side in pixels."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="PNG or TIFF file to write."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output."),
):
    """
    Render a field described by a JSON configuration file.
    """
    size, output = _settings(size, output, verbose)
    try:
        kind, options = load_field_config(file)
        if kind == "perlin":
            field = GradientNoiseField.from_config(options)
        else:
            field = WorleyField.from_config(options)
        _render(field, size, output, normalize=kind == "worley", title=kind.capitalize())
    except (NoiseError, ValueError, FileNotFoundError) as e:
        logger.error(f"Rendering {file} failed: {e}")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
