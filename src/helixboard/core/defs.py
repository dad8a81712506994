"""
Core dataclass definitions for Helixboard.

These describe the parsed query definitions and the data-source mode the
server runs in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DataSource(str, Enum):
    """Where schema and query metadata come from."""
    LOCAL_INTROSPECT = "local-introspect"
    LOCAL_FILE = "local-file"
    CLOUD = "cloud"

    @property
    def is_remote(self) -> bool:
        return self is not DataSource.LOCAL_FILE


@dataclass
class QueryParameter:
    """A declared query parameter: `name: Type`."""
    name: str
    param_type: str

    @property
    def is_path_param(self) -> bool:
        """id-like parameters become path segments of the derived endpoint."""
        return self.name == "id" or self.name.endswith("_id")


@dataclass
class QueryDefinition:
    """
    A query parsed from `QUERY name (params) => Return`.

    http_method and endpoint_path are derived from the query name by
    convention (see query_parser.determine_http_method).
    """
    name: str
    parameters: list[QueryParameter] = field(default_factory=list)
    http_method: str = "GET"
    endpoint_path: str = ""

    @property
    def path_parameters(self) -> list[QueryParameter]:
        return [param for param in self.parameters if param.is_path_param]
