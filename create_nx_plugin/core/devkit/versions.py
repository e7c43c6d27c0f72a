"""Package versions written into scaffolded manifests."""

NX_VERSION = "15.8.9"
NX_PLUGIN_PACKAGE = "@nrwl/nx-plugin"

TSLIB_VERSION = "^2.3.0"
TYPESCRIPT_VERSION = "~4.9.5"
JEST_VERSION = "^29.4.1"
TS_JEST_VERSION = "^29.0.5"
TYPES_JEST_VERSION = "^29.4.0"
TYPES_NODE_VERSION = "18.11.9"
ESLINT_VERSION = "~8.15.0"
TYPESCRIPT_ESLINT_VERSION = "^5.36.1"
PRETTIER_VERSION = "^2.6.2"
SWC_CORE_VERSION = "~1.3.35"
SWC_HELPERS_VERSION = "~0.4.14"
NX_CLOUD_VERSION = "latest"
