"""
Parser for Helix schema definitions (schema.hx).

Grammar (line oriented, `//` comments and blank lines ignored):

    N::User {
        name: String,
        age: I32
    }

    V::Embedding {
        vector: [F64]
    }

    E::Follows {
        From: User,
        To: User,
        Properties: {
            since: String
        }
    }

Blocks may also be written on one line: `N::User { name: String, age: I32 }`.

The parser is permissive: malformed lines inside a block are skipped, an
unterminated block simply ends at end of input, and unknown top-level
lines are ignored. Only an unreadable file is a hard error.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Optional

from .errors import SchemaGrammarError, SchemaLoadError
from .schema_types import DanglingReference, EdgeType, NodeType, SchemaDocument, VectorType


NODE_PREFIX = "N::"
VECTOR_PREFIX = "V::"
EDGE_PREFIX = "E::"

_PROPERTIES_OPEN = re.compile(r"^Properties\s*:\s*\{$")

# A line handler consumes one body line and returns True once the block is closed.
LineHandler = Callable[[str], bool]


# =============================================================================
# Public API
# =============================================================================


def parse_schema(content: str) -> SchemaDocument:
    """
    Parse schema text into a SchemaDocument.

    Args:
        content: Contents of a schema.hx file

    Returns:
        SchemaDocument with nodes, edges and vectors in source order
    """
    document = SchemaDocument()
    lines = content.splitlines()
    index = 0

    while index < len(lines):
        line = lines[index].strip()

        if not line or line.startswith("//"):
            index += 1
        elif line.startswith(NODE_PREFIX):
            node, index = parse_node_block(lines, index)
            document.nodes.append(node)
        elif line.startswith(VECTOR_PREFIX):
            vector, index = parse_vector_block(lines, index)
            document.vectors.append(vector)
        elif line.startswith(EDGE_PREFIX):
            edge, index = parse_edge_block(lines, index)
            document.edges.append(edge)
        else:
            index += 1

    return document


def parse_schema_file(path: str | Path) -> SchemaDocument:
    """
    Read and parse a schema file.

    Raises:
        SchemaLoadError: If the file cannot be read
    """
    return parse_schema(read_definition_file(path))


def read_definition_file(path: str | Path) -> str:
    """
    Read a schema or query definition file as UTF-8 text.

    Raises:
        SchemaLoadError: If the file is missing or unreadable
    """
    path = Path(path)

    if not path.exists():
        raise SchemaLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise SchemaLoadError(f"Not a file: {path}", str(path))

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaLoadError(f"Cannot read file: {e}", str(path)) from e


def parse_property_line(line: str) -> Optional[tuple[str, str]]:
    """
    Parse a `name: Type[,]` property line.

    Bracketed array types are rewritten to the `Array<T>` display form.

    Examples:
        "name: String"  -> ("name", "String")
        "age: I32,"     -> ("age", "I32")
        "scores: [F64]" -> ("scores", "Array<F64>")
        "invalid line"  -> None
    """
    clean_line = line.strip().rstrip(",")

    name, colon, prop_type = clean_line.partition(":")
    if not colon:
        return None

    name = name.strip()
    prop_type = prop_type.strip()

    if prop_type.startswith("[") and prop_type.endswith("]"):
        prop_type = f"Array<{prop_type[1:-1]}>"

    return name, prop_type


# =============================================================================
# Block parsers
# =============================================================================


def parse_node_block(lines: list[str], index: int) -> tuple[NodeType, int]:
    """
    Parse an `N::` (or `V::`) block starting at lines[index].

    Returns:
        Tuple of (node, index of the first line after the block)

    Raises:
        SchemaGrammarError: If lines[index] does not open a node block
    """
    header = lines[index].strip()
    prefix = _match_prefix(header, (NODE_PREFIX, VECTOR_PREFIX), "node")

    properties: dict[str, str] = {}
    index = _read_block(lines, index, _property_handler(properties))

    node = NodeType(
        name=_block_name(header, prefix),
        node_type="N" if prefix == NODE_PREFIX else "V",
        properties=properties,
    )
    return node, index


def parse_vector_block(lines: list[str], index: int) -> tuple[VectorType, int]:
    """
    Parse a `V::` (or `N::`) block starting at lines[index].

    Raises:
        SchemaGrammarError: If lines[index] does not open a vector block
    """
    header = lines[index].strip()
    prefix = _match_prefix(header, (VECTOR_PREFIX, NODE_PREFIX), "vector")

    properties: dict[str, str] = {}
    index = _read_block(lines, index, _property_handler(properties))

    vector = VectorType(
        name=_block_name(header, prefix),
        vector_type="V" if prefix == VECTOR_PREFIX else "N",
        properties=properties,
    )
    return vector, index


def parse_edge_block(lines: list[str], index: int) -> tuple[EdgeType, int]:
    """
    Parse an `E::` block starting at lines[index].

    Recognizes `From: X`, `To: Y` and a nested `Properties: { ... }` section;
    anything else inside the block is ignored.

    Raises:
        SchemaGrammarError: If lines[index] does not open an edge block
    """
    header = lines[index].strip()
    prefix = _match_prefix(header, (EDGE_PREFIX,), "edge")

    state = {"from": "", "to": "", "in_properties": False}
    properties: dict[str, str] = {}
    add_property = _property_handler(properties)

    def handle(line: str) -> bool:
        if state["in_properties"]:
            if line == "}":
                state["in_properties"] = False
                return False
            return add_property(line)

        if line == "}":
            return True
        if line.startswith("From:"):
            state["from"] = _endpoint_value(line, "From:")
        elif line.startswith("To:"):
            state["to"] = _endpoint_value(line, "To:")
        elif _PROPERTIES_OPEN.match(line):
            state["in_properties"] = True
        return False

    index = _read_block(lines, index, handle)

    edge = EdgeType(
        name=_block_name(header, prefix),
        from_node=state["from"],
        to_node=state["to"],
        properties=properties,
    )
    return edge, index


# =============================================================================
# Reference validation
# =============================================================================


def validate_references(document: SchemaDocument) -> list[DanglingReference]:
    """
    Report edge endpoints that name no declared node or vector type.

    This is a separate pass; parse_schema never calls it.
    """
    known = document.type_names
    dangling: list[DanglingReference] = []

    for edge in document.edges:
        for end, target in (("from", edge.from_node), ("to", edge.to_node)):
            if target not in known:
                dangling.append(DanglingReference(edge=edge.name, end=end, target=target))

    return dangling


# =============================================================================
# Helpers
# =============================================================================


def _match_prefix(header: str, prefixes: tuple[str, ...], kind: str) -> str:
    for prefix in prefixes:
        if header.startswith(prefix):
            return prefix
    raise SchemaGrammarError(f"Invalid {kind} definition", header)


def _block_name(header: str, prefix: str) -> str:
    return header[len(prefix):].split("{", 1)[0].strip()


def _endpoint_value(line: str, label: str) -> str:
    return line[len(label):].strip().rstrip(",").strip()


def _property_handler(properties: dict[str, str]) -> LineHandler:
    def handle(line: str) -> bool:
        if line == "}":
            return True
        parsed = parse_property_line(line)
        if parsed is not None:
            name, prop_type = parsed
            properties[name] = prop_type
        return False

    return handle


def _read_block(lines: list[str], index: int, handle: LineHandler) -> int:
    """
    Feed the body of the block opened at lines[index] to handle.

    Text after the opening brace on the header line is split into pseudo
    lines first, so single-line blocks go through the same handler.

    Returns:
        Index of the first line after the block (len(lines) if unterminated)
    """
    _, _, remainder = lines[index].strip().partition("{")
    index += 1

    for piece in _split_inline(remainder):
        if handle(piece):
            return index

    while index < len(lines):
        line = lines[index].strip()
        index += 1

        if not line or line.startswith("//"):
            continue
        if handle(line):
            break

    return index


def _split_inline(text: str) -> list[str]:
    """
    Split inline block text into body lines.

    "name: String, age: I32 }" -> ["name: String", "age: I32", "}"]
    "Properties: { since: String } }" -> ["Properties: {", "since: String", "}", "}"]
    """
    pieces: list[str] = []
    current = ""

    for char in text:
        if char == "{":
            pieces.append(f"{current.strip()} {{".strip())
            current = ""
        elif char == "}":
            pieces.append(current.strip())
            pieces.append("}")
            current = ""
        elif char == ",":
            pieces.append(current.strip())
            current = ""
        else:
            current += char

    pieces.append(current.strip())
    return [piece for piece in pieces if piece and not piece.startswith("//")]
