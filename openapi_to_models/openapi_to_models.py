import logging

import click

from .pipeline import GenerationError, PipelineGenerator, StyleRegistry, load_config
from .pipeline.loader import load_spec


@click.command()
@click.option("--output-dir", "-o", default=None, type=click.Path(file_okay=False), help="Directory receiving the generated modules")
@click.option("--style", "-s", default=None, type=str, help="Generation style (dataclass, dataclasses_json, pydantic)")
@click.option("--project-dir", default=None, type=click.Path(file_okay=False), help="Project root, scanned for existing modules")
@click.option("--config", "-c", default=None, type=click.Path(dir_okay=False), help="YAML configuration file")
@click.option("--changed-only", is_flag=True, default=False, help="Only regenerate schemas changed since the last run")
@click.option("--continue-on-error", is_flag=True, default=False, help="Keep going when a schema fails")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug messages")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only log warnings and errors")
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
def openapi_to_models(output_dir, style, project_dir, config, changed_only, continue_on_error, verbose, quiet, input_path):
    """Generate Python models from the schemas of an OpenAPI / Swagger document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        generator_config = load_config(config, project_dir or ".")

        # Command line options win over the configuration file
        if output_dir is not None:
            generator_config.output_dir = output_dir
        if style is not None:
            generator_config.style = style
        if project_dir is not None:
            generator_config.project_dir = project_dir
        if changed_only:
            generator_config.changed_only = True
        if continue_on_error:
            generator_config.fail_fast = False

        document = load_spec(input_path)
        generator = PipelineGenerator(document, generator_config, StyleRegistry.default())
        result = generator.generate()
    except (GenerationError, OSError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Output directory: {result.output_directory}")
    click.echo(
        f"Schemas processed: {result.schemas_processed} (enums: {result.enums_processed}), "
        f"created: {result.files_created}, updated: {result.files_updated}, unchanged: {result.files_unchanged}"
    )
    if result.files_deleted:
        click.echo(f"Deleted: {len(result.files_deleted)}")
    if result.warnings or result.errors:
        click.echo(f"Warnings: {len(result.warnings)}, errors: {len(result.errors)}")
    if result.failures:
        for failure in result.failures:
            click.echo(f"Failed: {failure.schema_name}: {failure.error}", err=True)
        raise click.ClickException(f"{len(result.failures)} schema(s) could not be generated")
