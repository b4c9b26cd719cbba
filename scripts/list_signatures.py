#!/usr/bin/python3
import click

from deterministic.chains import ChainConfigResolver
from deterministic.constants import SUPPORTED_PROXY_KINDS
from deterministic.options import proxy_kind_option, root_option
from deterministic.params import signatures_filepath
from deterministic.signatures import SignatureStore


@click.command(name="list-signatures")
@root_option
@proxy_kind_option
def cli(root, proxy_kind):
    """List the signed and pending chain ids of every proxy kind."""
    for kind in SUPPORTED_PROXY_KINDS:
        if proxy_kind and proxy_kind != kind:
            continue
        store = SignatureStore.load(signatures_filepath(root, kind))
        chain_configs = ChainConfigResolver(root).resolve(kind)
        click.secho(f"\n{kind}", fg="green")

        click.secho(f"    Signed ({len(store)})", fg="yellow")
        for chain_id in store.chain_ids():
            click.secho(f"        {chain_id}: {store.get(chain_id)[:18]}...", fg="cyan")

        # chain ids that have a resolved config, but no signature yet
        pending = [chain_id for chain_id in chain_configs if chain_id not in store]
        click.secho(f"    Pending ({len(pending)})", fg="yellow")
        for chain_id in pending:
            click.secho(f"        {chain_id}", fg="red")

        if chain_configs.invalid:
            click.secho(f"    Invalid ({len(chain_configs.invalid)})", fg="yellow")
            for chain_id, error in sorted(chain_configs.invalid.items()):
                click.secho(f"        {chain_id}: {error}", fg="red")


if __name__ == "__main__":
    cli()
