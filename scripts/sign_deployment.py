#!/usr/bin/python3
import os

import click
from dotenv import load_dotenv

from deterministic.constants import DOTENV_FILENAME, SIGNER_PRIVATE_KEY_ENVVAR
from deterministic.options import (
    chain_id_argument,
    interactive_option,
    private_key_option,
    root_option,
)
from deterministic.signer import DeploymentSigner, FlowOutcome, Signer


@click.command(name="sign-deployment")
@chain_id_argument
@root_option
@private_key_option
@interactive_option
def cli(chain_id, root, private_key, interactive):
    """Sign the deterministic proxy deployments of CHAIN_ID and store the signatures."""
    load_dotenv(root / DOTENV_FILENAME)
    private_key = private_key or os.environ.get(SIGNER_PRIVATE_KEY_ENVVAR)
    if not private_key:
        raise click.UsageError(
            f"No signer key provided; use --private-key or set {SIGNER_PRIVATE_KEY_ENVVAR}."
        )
    try:
        signer = Signer.from_private_key(private_key)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'--private-key'")

    deployment_signer = DeploymentSigner(signer=signer, root=root, interactive=interactive)
    results = deployment_signer.run(chain_id)

    click.secho(f"\nChain ID {chain_id}", fg="green")
    for result in results:
        if result.outcome == FlowOutcome.SIGNED:
            click.secho(f"    {result.proxy_kind}: {result.signature}", fg="cyan")
        else:
            click.secho(f"    {result.proxy_kind}: skipped ({result.reason})", fg="yellow")


if __name__ == "__main__":
    cli()
