import os

# Service identity (log envelope `service`, metric prefix)
SERVICE_NAME = os.getenv("SERVICE_NAME", "tv_gateway")

# Listening port of the gateway process
DEFAULT_PORT = int(os.getenv("PORT", "8090"))

# Request logging skips these paths (health probes, scrapes)
REQUEST_LOG_SUPPRESS_PATHS = ("/healthz", "/readyz", "/metrics")

# Root document of the TV client, relative to the public root
INDEX_FILENAME = "index.html"

# Fixed-width hash prefix some platform builds glue onto asset filenames
ASSET_HASH_PREFIX_LEN = 8

# Telemetry beacons (gen_204 / device_204). The TV client expects the gateway
# to replay exactly this anonymous, logged-out identity upstream.
TELEMETRY_BEACONS = ("gen_204", "device_204")
TELEMETRY_PARAMS: dict[str, str] = {
    "app_anon_id": "a8d9033a-9d84-4178-a37f-8bf49003bc66",
    "firstactive": "1456804800",
    "prevactive": "1456804800",
    "firstactivegeo": "US",
    "loginstate": "0",
    "firstlogin": "0",
    "prevlogin": "0",
    "c": "TVHTML5",
    "cver": "5.20150715",
    "ctheme": "CLASSIC",
    "label": "c96c1c11",
}
TELEMETRY_FAILURE_STATUS = "Failed to fetch data from YouTube"

# InnerTube endpoint names proxied by /api/*
INNERTUBE_ENDPOINTS = ("browse", "guide", "next", "search")
