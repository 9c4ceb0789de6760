"""Cell coercion and JSON output using orjson.

SQLite hands back int, float, str, bytes and None. Result cells are restricted
to a closed set (text, number, boolean, null), so anything outside it is
converted here at the boundary:

- bytes, bytearray, memoryview → UTF-8 text, or base64 when not decodable
- Decimal → float
- datetime, date, time, UUID → ISO/string form via orjson
- anything else → str()
"""

import base64
import datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence

import orjson

from query_workbench.models.query import Cell


def _decode_binary(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return base64.b64encode(data).decode("ascii")


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation

    Raises:
        TypeError: If object cannot be serialized
    """
    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    if isinstance(obj, (bytes, bytearray)):
        return _decode_binary(bytes(obj))

    if isinstance(obj, memoryview):
        return _decode_binary(obj.tobytes())

    if isinstance(obj, Decimal):
        return float(obj)

    if isinstance(obj, set):
        return list(obj)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def coerce_cell(value: Any) -> Cell:
    """
    Convert one engine value into a result cell.

    Args:
        value: Raw value returned by the driver

    Returns:
        A str, int, float, bool or None
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value

    if isinstance(value, (bytes, bytearray, memoryview, Decimal)):
        return _default_handler(value)

    try:
        converted = orjson.loads(orjson.dumps(value, default=_default_handler))
    except TypeError:
        return str(value)

    if converted is None or isinstance(converted, (bool, int, float, str)):
        return converted
    # Containers have no cell form
    return str(value)


def coerce_row(row: Iterable[Any]) -> list[Cell]:
    """Coerce every value of a driver row."""
    return [coerce_cell(value) for value in row]


def coerce_rows(rows: Sequence[Iterable[Any]]) -> list[list[Cell]]:
    """Coerce all driver rows."""
    return [coerce_row(row) for row in rows]


def dumps(obj: Any, indent: bool = False) -> str:
    """
    Serialize object to JSON string using orjson.

    Args:
        obj: Object to serialize
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string
    """
    option = orjson.OPT_INDENT_2 if indent else None
    return orjson.dumps(obj, default=_default_handler, option=option).decode("utf-8")
