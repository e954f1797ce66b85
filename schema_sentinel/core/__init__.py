# Core modules for schema-sentinel
from .config import Settings, get_settings
from .errors import (
    NetworkError,
    NotFoundError,
    ParseError,
    SchemaAssertionError,
    SentinelError,
)
from .resources import FileResourceReader, Fetcher, HttpFetcher, ResourceReader
