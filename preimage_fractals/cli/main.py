"""
Command-line interface for pre-image rendering.

Renders backward orbits of the quadratic map and of arbitrary polynomial
maps, the self-similar branching tree, and lists polynomial roots.
"""

import logging
import re
import sys
import time
from pathlib import Path
from typing import List, Optional

import click

from .. import __version__
from ..api import FractalRenderer, RenderConfig
from ..core.complex_number import ComplexValue
from ..core.fractal_types import SQUARE_PRESETS, FractalRegistry
from ..core.polynomial import ComplexPolynomial
from ..core.solver import solve_all
from ..rendering.coloring import PALETTES

logger = logging.getLogger(__name__)


def parse_complex(text: str) -> ComplexValue:
    """
    Parse a complex number typed on the command line.

    Accepts ``"re,im"`` pairs (``"0.3,-1"``) as well as Python complex
    literals (``"1+2j"``, ``"-0.5"``, ``"2j"``).

    Raises:
        ValueError: if the text is neither
    """
    text = text.strip()
    if ',' in text:
        parts = [p.strip() for p in text.split(',')]
        if len(parts) != 2:
            raise ValueError(f"Invalid complex number '{text}': use 're,im' or '1+2j'")
        return ComplexValue(float(parts[0]), float(parts[1]))
    try:
        return ComplexValue.of(complex(text.replace(' ', '')))
    except ValueError:
        raise ValueError(f"Invalid complex number '{text}': use 're,im' or '1+2j'") from None


def parse_coefficients(text: str) -> List[ComplexValue]:
    """Parse coefficients, highest order first, separated by ';' or whitespace."""
    tokens = [t for t in re.split(r'[;\s]+', text.strip()) if t]
    if not tokens:
        raise ValueError("No coefficients given")
    return [parse_complex(t) for t in tokens]


def _render_config(ctx, **overrides) -> RenderConfig:
    """Configuration from ``--config`` with command-line overrides applied."""
    config_file = ctx.obj.get('config_file')
    config = RenderConfig.from_file(config_file) if config_file else RenderConfig()

    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)

    config.validate()
    return config


def _fail(ctx, e: Exception):
    click.echo(f"Error: {e}", err=True)
    if ctx.obj.get('verbose'):
        import traceback
        traceback.print_exc()
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--config', type=click.Path(exists=True), help='Configuration file path (JSON)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, config, verbose, quiet):
    """
    Pre-image fractals - render backward orbits of complex maps.

    Every point has several pre-images under a polynomial map. Following
    them backwards level by level traces out the Julia set of the map.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')

    if version:
        click.echo(f"preimage-fractals v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            sys.exit(0)
    elif ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())

    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose


@main.command()
@click.argument('output', type=click.Path())
@click.option('--c', 'c_text', default='0,1', show_default=True,
              help='Map constant c as "re,im", a literal like 1+2j, or a preset name')
@click.option('--z0', default='1', show_default=True, help='Start point')
@click.option('--depth', '-d', type=int, help='Maximal tree depth')
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--palette', type=click.Choice(list(PALETTES.keys())), help='Color points by depth')
@click.pass_context
def square(ctx, output, c_text, z0, depth, width, palette):
    """
    Render the pre-images of z0 under z -> z^2 + c.

    OUTPUT: Output image file path
    """
    try:
        if c_text in SQUARE_PRESETS:
            params = SQUARE_PRESETS[c_text].to_dict()
            click.echo(f"Using preset: {c_text}")
        else:
            c = parse_complex(c_text)
            params = {'c_real': c.real, 'c_imag': c.imag}
        fractal = FractalRegistry.create_fractal('square', **params)
        start = parse_complex(z0)

        config = _render_config(ctx, max_depth=depth, width=width, palette=palette,
                                color_by_depth=True if palette else None)
        _render(fractal, start, config, output)

    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.argument('output', type=click.Path())
@click.argument('coefficients')
@click.option('--z0', default='1', show_default=True, help='Start point')
@click.option('--seed', help='First starting point of every root search (chosen per point by default)')
@click.option('--eps2', type=float, default=1e-15, show_default=True,
              help='Squared residual tolerance of the root search')
@click.option('--depth', '-d', type=int, help='Maximal tree depth')
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--palette', type=click.Choice(list(PALETTES.keys())), help='Color points by depth')
@click.pass_context
def polynomial(ctx, output, coefficients, z0, seed, eps2, depth, width, palette):
    """
    Render the pre-images of z0 under a polynomial map.

    OUTPUT: Output image file path

    COEFFICIENTS: Coefficients, highest order first, e.g. "1 0 -0.5,0.2"
    """
    try:
        s = parse_complex(seed) if seed is not None else None
        fractal = FractalRegistry.create_fractal(
            'polynomial',
            coefficients=[c.to_tuple() for c in parse_coefficients(coefficients)],
            eps2=eps2,
            seed_real=s.real if s is not None else None,
            seed_imag=s.imag if s is not None else None,
        )
        click.echo(fractal.get_description())
        start = parse_complex(z0)

        config = _render_config(ctx, max_depth=depth, width=width, palette=palette,
                                color_by_depth=True if palette else None)
        _render(fractal, start, config, output)

    except Exception as e:
        _fail(ctx, e)


def _render(fractal, start: ComplexValue, config: RenderConfig, output: str):
    renderer = FractalRenderer(config)

    click.echo(f"Rendering {fractal.name} pre-images of {start}...")
    start_time = time.time()

    renderer.render(fractal, start, Path(output))

    click.echo(f"Render complete: {time.time() - start_time:.2f}s")
    click.echo(f"Saved: {output}")


@main.command()
@click.argument('output', type=click.Path())
@click.option('--depth', '-d', type=click.IntRange(2, 12, clamp=True), default=10, show_default=True,
              help='Maximal tree depth (2-12)')
@click.option('--spread', '-s', type=click.IntRange(2, 10, clamp=True), default=2, show_default=True,
              help='Branches per node (2-10)')
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--palette', type=click.Choice(list(PALETTES.keys())), help='Color points by depth')
@click.pass_context
def backtrace(ctx, output, depth, spread, width, palette):
    """
    Render a self-similar tree with SPREAD branches per node.

    OUTPUT: Output image file path
    """
    try:
        config = _render_config(ctx, max_depth=depth, width=width, palette=palette,
                                color_by_depth=True if palette else None)
        renderer = FractalRenderer(config)

        result = renderer.render_branching_tree(spread, Path(output))
        click.echo(f"Drew {result.drawn} points ({result.width}x{result.height})")
        click.echo(f"Saved: {output}")

    except Exception as e:
        _fail(ctx, e)


@main.command()
@click.argument('coefficients')
@click.option('--seed', default='0', show_default=True, help='Starting point of the root search')
@click.option('--eps2', type=float, default=1e-15, show_default=True,
              help='Squared residual tolerance')
@click.option('--max-iter', type=int, help='Maximal Newton steps per root')
@click.pass_context
def roots(ctx, coefficients, seed, eps2, max_iter: Optional[int]):
    """
    List the roots of a polynomial.

    COEFFICIENTS: Coefficients, highest order first, e.g. "1 0 -2"
    """
    try:
        p = ComplexPolynomial(*parse_coefficients(coefficients))
        zeros = solve_all(p, parse_complex(seed), eps2, max_iter)

        click.echo(f"p(z) = {p}")
        for zero in zeros:
            click.echo(f"  {zero.value}  (multiplicity {zero.multiplicity})")

    except Exception as e:
        _fail(ctx, e)


@main.command(name='list')
@click.pass_context
def list_fractals(ctx):
    """List fractal types, presets and palettes."""
    click.echo("Available fractal types:")
    for name, description in FractalRegistry.list_fractals().items():
        click.echo(f"  {name}")
        if ctx.obj.get('verbose'):
            click.echo(f"    {description}")

    click.echo("\nSquare map presets:")
    for name, params in SQUARE_PRESETS.items():
        click.echo(f"  {name}: c = {params.c}")

    click.echo("\nColor palettes:")
    for name, palette in PALETTES.items():
        click.echo(f"  {name}: {palette.name}")


if __name__ == '__main__':
    main()
