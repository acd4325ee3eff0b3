from pathlib import Path

# Location of the generated fabric-ca client descriptor
CA_CLIENT_CONFIG_PATH = Path("/tmp/client-config.json")
CA_CLIENT_CONFIG_MODE = 0o644

# Build-path placeholder replaced in certificate paths
GOPATH_PLACEHOLDER = "$GOPATH"
GOPATH_ENV_VAR = "GOPATH"

# Name of the package-wide logger configured by ClientConfig.init_config
LOGGER_NAME = "fabricconfig"
LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(name)s] %(levelname).4s : %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Settings keys
LOGGING_LEVEL_KEY = "client.logging.level"
PEERS_KEY = "client.peers"
TLS_ENABLED_KEY = "client.tls.enabled"
SECURITY_ENABLED_KEY = "client.security.enabled"
SECURITY_HASH_ALGORITHM_KEY = "client.security.hashAlgorithm"
SECURITY_LEVEL_KEY = "client.security.level"
TCERT_BATCH_SIZE_KEY = "client.tcert.batch.size"
ORDERER_HOST_KEY = "client.orderer.host"
ORDERER_PORT_KEY = "client.orderer.port"
ORDERER_TLS_SERVER_HOST_OVERRIDE_KEY = "client.orderer.tls.serverhostoverride"
ORDERER_TLS_CERTIFICATE_KEY = "client.orderer.tls.certificate"
FABRIC_CA_KEY = "client.fabricCA"
FABRIC_CA_ID_KEY = "client.fabricCA.id"
KEYSTORE_PATH_KEY = "client.keystore.path"
