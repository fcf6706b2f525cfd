"""Constants for fixture naming and media type handling."""

# Fixture naming
DEFAULT_EXTENSION = ".json"
DIGEST_LENGTH = 6
FULL_DESCRIPTOR_SUFFIX = ".response.json"

# Simple media types, in loader candidate order
SIMPLE_MEDIA_TYPES = {
    ".json": "application/json",
    ".html": "text/html",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".tsv": "text/tab-separated-values",
}

# Media types recorded in simplified form, mapped to the fixture extension
MEDIA_TYPE_EXTENSIONS = {
    media_type: extension for extension, media_type in SIMPLE_MEDIA_TYPES.items()
}

# Response headers that describe the wire encoding rather than the body
ENCODING_HEADERS = ("content-encoding", "transfer-encoding", "content-length")

DEFAULT_REDACTED_HEADERS = ("set-cookie",)
