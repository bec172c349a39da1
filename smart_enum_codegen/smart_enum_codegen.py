import json
import logging

import click

from .cli_utils import reconstruct_command_line
from .compilation import CompilationLoadError, load_compilation_file
from .pipeline import FragmentValidationError, GeneratorConfig, OutputMode, SmartEnumGenerator, write_sources


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--no-validate", is_flag=True, default=False, help="Skip tree-sitter validation of generated files")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every pipeline decision")
@click.argument("compilation", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output_dir", default=None, type=click.Path(file_okay=False, resolve_path=True))
def smart_enum_codegen(config, force, no_validate, verbose, compilation, output_dir):
    """Generate smart enum sources for a COMPILATION document into OUTPUT_DIR."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            try:
                config = GeneratorConfig.from_dict(json.load(f))
            except (json.JSONDecodeError, TypeError, ValueError) as e:
                raise click.ClickException(f"Invalid config {config}: {e}") from e
    else:
        config = GeneratorConfig()

    # CLI flags override the config file
    if force:
        config.output.mode = OutputMode.FORCE
    if no_validate:
        config.output.validate_before_write = False
    config.generation_command = reconstruct_command_line(smart_enum_codegen)

    try:
        loaded = load_compilation_file(compilation)
    except CompilationLoadError as e:
        raise click.ClickException(str(e)) from e

    result = SmartEnumGenerator(config).run(loaded)

    try:
        written = write_sources(result.sources, output_dir, config.output)
    except (FileExistsError, FragmentValidationError) as e:
        raise click.ClickException(str(e)) from e

    for item in written:
        click.echo(f"{'wrote' if item.changed else 'unchanged'} {item.path}")
