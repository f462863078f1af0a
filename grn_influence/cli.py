"""
Command-line interface for GRN Influence.

Usage:
    python -m grn_influence --config configs/run.yaml
    grn-influence --config configs/run.yaml
"""

import sys
from pathlib import Path

import click

from . import __version__
from .pipeline import InfluencePipeline, PipelineConfig


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    required=True,
    help="Path to YAML configuration file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Override output directory from config",
)
@click.option(
    "--verbose/--quiet",
    "-v/-q",
    default=True,
    help="Enable/disable verbose output",
)
@click.version_option(version=__version__, prog_name="grn-influence")
def main(config: str, output: str, verbose: bool) -> None:
    """
    GRN Influence - TF influence scoring over a regulatory network

    Loads a GRN and TF scores, propagates scores through the network and
    writes the result tables.

    Example:
        python -m grn_influence --config configs/run.yaml
    """
    click.echo(f"GRN Influence v{__version__}")
    click.echo("=" * 50)

    config_path = Path(config)
    click.echo(f"Loading config: {config_path}")

    try:
        pipeline_config = PipelineConfig.from_yaml(str(config_path))

        # Apply overrides
        if output:
            pipeline_config.output_dir = output
        pipeline_config.verbose = verbose

        pipeline = InfluencePipeline(pipeline_config)
        result = pipeline.run()

        click.echo("")
        click.echo(result.summary)
        if pipeline_config.output_dir:
            click.echo(f"Results: {pipeline_config.output_dir}")

    except (FileNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
