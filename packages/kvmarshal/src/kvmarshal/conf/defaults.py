"""Default configuration values for kvmarshal decoders."""

DEFAULTS: dict[str, object] = {
    "SEPARATOR": "/",
    "SLICE_SEPARATOR": ",",
    "TAG": "kv",
    "PREFIX": "",
}
