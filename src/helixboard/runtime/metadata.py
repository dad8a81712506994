"""
Schema and query metadata for the active data source.

In local-file mode metadata is parsed from the helixdb-cfg files; in
local-introspect and cloud mode it is fetched from HelixDB's /introspect
endpoint. Nothing is cached: every call re-reads or re-fetches.

Failures degrade instead of propagating: an unreadable file or a failed
introspection yields an empty schema, no endpoints, or an empty parameter
catalogue, and is logged.
"""

from __future__ import annotations

import logging

from ..core.defs import DataSource, QueryDefinition
from ..core.errors import RemoteMetadataError, SchemaLoadError
from ..core.params import catalogue_from_introspection, catalogue_from_queries
from ..core.query_parser import endpoints_from_queries, parse_queries_file, query_from_introspection
from ..core.query_types import ApiEndpointInfo
from ..core.schema_parser import parse_schema_file
from ..core.schema_types import SchemaDocument
from .helix_client import HelixClient

logger = logging.getLogger(__name__)


class MetadataProvider:
    """
    Loads schema/query metadata for an explicit DataSource.

    Usage:
        provider = MetadataProvider(DataSource.LOCAL_FILE, client,
                                    schema_path="helixdb-cfg/schema.hx",
                                    queries_path="helixdb-cfg/queries.hx")
        schema = await provider.get_schema()
        catalogue = await provider.get_param_catalogue("getUserById")
    """

    def __init__(
        self,
        source: DataSource,
        client: HelixClient,
        *,
        schema_path: str,
        queries_path: str,
    ):
        self.source = source
        self.client = client
        self.schema_path = schema_path
        self.queries_path = queries_path

    async def get_schema(self) -> SchemaDocument:
        """Schema document, or an empty one if it cannot be loaded."""
        if not self.source.is_remote:
            try:
                return parse_schema_file(self.schema_path)
            except SchemaLoadError as e:
                logger.warning(f"Error parsing schema: {e}")
                return SchemaDocument()

        try:
            data = await self.client.fetch_introspect()
        except RemoteMetadataError as e:
            logger.warning(f"Error fetching schema from {self.client.base_url}: {e}")
            return SchemaDocument()
        return data.schema_document

    async def get_queries(self) -> list[QueryDefinition]:
        """All known query definitions, or [] if they cannot be loaded."""
        if not self.source.is_remote:
            try:
                return parse_queries_file(self.queries_path)
            except SchemaLoadError as e:
                logger.warning(f"Error getting endpoints: {e}")
                return []

        try:
            data = await self.client.fetch_introspect()
        except RemoteMetadataError as e:
            logger.warning(f"Error fetching endpoints from {self.client.base_url}: {e}")
            return []
        return [query_from_introspection(query) for query in data.queries]

    async def get_endpoints(self) -> list[ApiEndpointInfo]:
        return endpoints_from_queries(await self.get_queries())

    async def get_param_catalogue(self, query_name: str) -> dict[str, str]:
        """
        Parameter types (name -> type text) of a single query.

        An empty catalogue means every query-string value stays a raw string.
        """
        if not self.source.is_remote:
            try:
                queries = parse_queries_file(self.queries_path)
            except SchemaLoadError as e:
                logger.warning(f"Could not read query definitions for parameter types: {e}")
                return {}
            return catalogue_from_queries(queries, query_name)

        try:
            data = await self.client.fetch_introspect()
        except RemoteMetadataError as e:
            logger.warning(f"Could not fetch introspect data for parameter types: {e}")
            return {}
        return catalogue_from_introspection(data, query_name)
