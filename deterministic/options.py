from pathlib import Path

import click

from deterministic.constants import (
    ROOT_DIR_ENVVAR,
    SIGNER_PRIVATE_KEY_ENVVAR,
    SUPPORTED_PROXY_KINDS,
)
from deterministic.types import CHAIN_ID

chain_id_argument = click.argument("chain_id", type=CHAIN_ID)

root_option = click.option(
    "--root",
    "-r",
    help="Directory holding chainConfigs/, addresses/ and deterministicConfig/",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    envvar=ROOT_DIR_ENVVAR,
    default=Path.cwd,
    show_default="current directory",
)

private_key_option = click.option(
    "--private-key",
    "-k",
    help=f"Hex private key of the signer; defaults to ${SIGNER_PRIVATE_KEY_ENVVAR}",
    type=click.STRING,
    required=False,
)

interactive_option = click.option(
    "--interactive",
    "-i",
    help="Confirm every request before it is signed",
    is_flag=True,
    default=False,
)

proxy_kind_option = click.option(
    "--proxy-kind",
    "-p",
    help="Proxy kind",
    type=click.Choice(SUPPORTED_PROXY_KINDS),
    required=False,
)
