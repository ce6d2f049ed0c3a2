"""Context Processor CLI: a thin wrapper over ContextStore."""

import click

from context_processor import __version__

from .common import CliState


@click.group()
@click.version_option(version=__version__, package_name="context-processor")
@click.option("--root", type=click.Path(file_okay=False), default=None, help="Storage directory (default ./contexts).")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), default=None, help="YAML/JSON config file.")
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
@click.pass_context
def main(ctx: click.Context, root: str | None, config_file: str | None, log_level: str | None) -> None:
    """Context Processor: save, search and preprocess tagged documents."""
    ctx.obj = CliState(root=root, config_file=config_file, log_level=log_level)


from .docs_cmd import delete, find, list_cmd, load, save, search
from .health_cmd import health
from .models_cmd import model_info, models

main.add_command(save)
main.add_command(load)
main.add_command(list_cmd)
main.add_command(search)
main.add_command(find)
main.add_command(delete)
main.add_command(models)
main.add_command(model_info)
main.add_command(health)
