# for reference:
#   https://json-schema.org/understanding-json-schema/reference/object
#   https://github.com/opencontainers/image-spec/blob/main/manifest.md
#   https://github.com/opencontainers/image-spec/blob/main/image-index.md

schema_url = "http://json-schema.org/draft-07/schema"

descriptorProperties = {
    "mediaType": {"type": "string"},
    "digest": {"type": "string"},
    "size": {"type": "integer", "minimum": 0},
}

descriptor = {
    "type": "object",
    "required": ["mediaType", "digest", "size"],
    "properties": descriptorProperties,
}

platformProperties = {
    "architecture": {"type": "string"},
    "os": {"type": "string"},
    "os.version": {"type": "string"},
    "variant": {"type": "string"},
}

manifestMetaProperties = {
    "mediaType": {"type": "string"},
    "digest": {"type": "string"},
    "size": {"type": "integer", "minimum": 0},
    "platform": {"type": "object", "properties": platformProperties},
    "annotations": {"type": ["object", "null"]},
}

indexProperties = {
    "schemaVersion": {"type": "number"},
    "mediaType": {"type": "string"},
    "subject": {"type": ["null", "object"]},
    "manifests": {
        "type": "array",
        "items": {
            "type": "object",
            "required": ["digest"],
            "properties": manifestMetaProperties,
        },
    },
    "annotations": {"type": ["object", "null", "array"]},
}

index = {
    "$schema": schema_url,
    "title": "Index Schema",
    "type": "object",
    "required": [
        "schemaVersion",
        "manifests",
    ],
    "properties": indexProperties,
    "additionalProperties": True,
}

manifestProperties = {
    "schemaVersion": {"type": "number"},
    "mediaType": {"type": "string"},
    "config": descriptor,
    "layers": {"type": "array", "items": descriptor},
    "annotations": {"type": ["object", "null"]},
}

manifest = {
    "$schema": schema_url,
    "title": "Manifest Schema",
    "type": "object",
    "required": [
        "schemaVersion",
        "config",
        "layers",
    ],
    "properties": manifestProperties,
    "additionalProperties": True,
}
