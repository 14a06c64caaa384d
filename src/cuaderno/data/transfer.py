"""Export and import of notebook documents as JSON files."""

import json
import re
from datetime import date
from typing import Any

from ..errors import InvalidDatasetError
from .normalize import validate_document

EXPORT_BASENAME = "cuaderno_datos"
IMPORT_ERROR_MESSAGE = (
    "No pude importar ese archivo. Asegúrate que sea un JSON exportado por esta app."
)


def safe_filename(name: str | None) -> str:
    """Reduce a name to filename-safe characters (max 50)."""
    return re.sub(r"[^\w\-]+", "_", name or "cuaderno")[:50]


def export_filename(today: date | None = None) -> str:
    """Default file name for an export, e.g. cuaderno_datos_2024-05-01.json."""
    day = today or date.today()
    return f"{safe_filename(EXPORT_BASENAME)}_{day.isoformat()}.json"


def dumps_document(document: dict[str, Any]) -> str:
    return json.dumps(document, ensure_ascii=False, indent=2)


def parse_document(text: str) -> dict[str, Any]:
    """Parse an exported file.

    Raises:
        InvalidDatasetError: If the text is not JSON or does not have a
            categories list.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDatasetError(IMPORT_ERROR_MESSAGE) from e

    try:
        validate_document(document)
    except InvalidDatasetError as e:
        raise InvalidDatasetError(IMPORT_ERROR_MESSAGE) from e
    return document
