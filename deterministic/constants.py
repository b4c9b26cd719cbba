#
# Filesystem
#

ROOT_DIR_ENVVAR = "DETERMINISTIC_CONFIG_ROOT"

CHAIN_CONFIGS_DIRNAME = "chainConfigs"
ADDRESSES_DIRNAME = "addresses"
DETERMINISTIC_CONFIG_DIRNAME = "deterministicConfig"

PARAMS_FILENAME = "params.json"
SIGNATURES_FILENAME = "signatures.json"
DOTENV_FILENAME = ".env"

#
# Credentials
#

SIGNER_PRIVATE_KEY_ENVVAR = "SIGNER_PRIVATE_KEY"

#
# Proxy kinds
#

FACTORY_PROXY = "factoryProxy"
PREMINT_EXECUTOR_PROXY = "premintExecutorProxy"
UPGRADE_GATE = "upgradeGate"

# signing order within a single run
SUPPORTED_PROXY_KINDS = [FACTORY_PROXY, PREMINT_EXECUTOR_PROXY, UPGRADE_GATE]

#
# Descriptor keys
#

CHAIN_OWNER_KEY = "FACTORY_OWNER"

# proxy kind -> implementation address key in the address descriptor
IMPLEMENTATION_ADDRESS_KEYS = {
    FACTORY_PROXY: "FACTORY_IMPL",
    PREMINT_EXECUTOR_PROXY: "PREMINTER_IMPL",
}

#
# EIP-712
#

DOMAIN_NAME = "DeterministicProxyDeployer"
DOMAIN_VERSION = "1"

CREATE_PROXY_PRIMARY_TYPE = "createProxy"
CREATE_GENERIC_CONTRACT_PRIMARY_TYPE = "createGenericContract"

UPGRADE_GATE_INITIALIZE_SIGNATURE = "initialize(address)"

SIGNATURE_SIZE = 65  # r (32) + s (32) + v (1)
