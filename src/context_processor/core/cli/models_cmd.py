"""Model catalog commands."""

import click

from .common import domain_errors, echo_json


@click.command()
@click.pass_obj
def models(state) -> None:
    """List available preprocessing models."""
    store = state.get_store()
    catalog = [m.to_dict() for m in store.list_models()]
    echo_json({"models": catalog, "total": len(catalog)})


@click.command("model-info")
@click.argument("name")
@click.pass_obj
def model_info(state, name) -> None:
    """Show one model's description and strategies."""
    store = state.get_store()
    with domain_errors():
        echo_json(store.get_model_info(name).to_dict())
