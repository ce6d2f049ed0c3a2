"""context-processor health: report storage and operation health."""

import click

from .common import echo_json


@click.command()
@click.pass_obj
def health(state) -> None:
    """Check the storage directory and print a health summary (exit 1 if unhealthy)."""
    from context_processor.core.health import check_health

    status = check_health(state.get_store())
    echo_json(status.to_dict())
    if not status.healthy:
        raise SystemExit(1)
