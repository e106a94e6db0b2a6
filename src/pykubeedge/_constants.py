"""Internal constants shared across the library."""

# KubeEdge device event namespace. Topics are ``<prefix><device id><suffix>``.
DEVICE_TOPIC_PREFIX = "$hw/events/device/"

STATE_UPDATE_SUFFIX = "/state/update"
TWIN_UPDATE_SUFFIX = "/twin/update"
TWIN_CLOUD_UPDATE_SUFFIX = "/twin/cloud_update"

DEFAULT_TWIN_FIELD = "CPU_Temperatur"
UPDATED_TYPE = "Updated"

#: Seconds between the edge publish and the cloud publish of one update.
DEFAULT_SYNC_DELAY: float = 2.0

DEFAULT_MQTT_PORT = 1883
DEFAULT_MQTTS_PORT = 8883
DEFAULT_KEEPALIVE = 60

PLAIN_SCHEMES: frozenset[str] = frozenset({"tcp", "mqtt"})
TLS_SCHEMES: frozenset[str] = frozenset({"ssl", "tls", "mqtts", "tcps"})
WS_SCHEMES: frozenset[str] = frozenset({"ws"})
WSS_SCHEMES: frozenset[str] = frozenset({"wss"})
