"""
Drill Team Choreographer - File Operations Service

This module handles file I/O for drill documents.
Separates file operations from UI logic.

File layout (JSON):
    {
        "version": "1.0.0",
        "format": "drill-json",
        "drill": { ...Drill.to_dict()... }
    }
"""

import json
import logging
from datetime import datetime, timezone

from constants import DRILL_FILE_VERSION, DRILL_FILE_FORMAT, DRILL_FILE_EXTENSION
from models.drill import Drill
from utils.coordinate_transforms import normalized_to_meters

logger = logging.getLogger(__name__)


class DrillFormatError(ValueError):
    """Raised when a document is not a valid drill file"""


def validate_drill_file(data) -> bool:
    """Check the envelope of a parsed drill file"""
    if not isinstance(data, dict):
        return False
    drill = data.get('drill')
    return (
        data.get('version') == DRILL_FILE_VERSION
        and data.get('format') == DRILL_FILE_FORMAT
        and isinstance(drill, dict)
        and isinstance(drill.get('frames'), list)
    )


def serialize_drill(drill: Drill) -> str:
    """Drill to JSON text. The written modifiedAt is the time of the call."""
    drill_data = drill.to_dict()
    drill_data['metadata']['modifiedAt'] = datetime.now(timezone.utc).isoformat()
    document = {
        'version': DRILL_FILE_VERSION,
        'format': DRILL_FILE_FORMAT,
        'drill': drill_data,
    }
    return json.dumps(document, indent=2)


def _migrate_normalized_positions(drill_data):
    """Convert positions stored as 0-1 fractions (old documents) to meters"""
    for frame in drill_data.get('frames', []):
        for horse in frame.get('horses', []):
            position = horse.get('position') or {}
            meters = normalized_to_meters(float(position.get('x', 0.5)), float(position.get('y', 0.5)))
            horse['position'] = {'x': meters.x, 'y': meters.y}
    drill_data.pop('units', None)


def deserialize_drill(text: str) -> Drill:
    """Parse JSON text into a Drill

    Raises:
        DrillFormatError: Malformed JSON, wrong version/format or bad fields
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DrillFormatError(f"Invalid drill file - not JSON: {e}") from e

    if not validate_drill_file(data):
        raise DrillFormatError("Invalid drill file format")

    drill_data = data['drill']
    if drill_data.get('units') == 'normalized':
        logger.info("Migrating normalized positions to meters")
        _migrate_normalized_positions(drill_data)

    try:
        return Drill.from_dict(drill_data)
    except (KeyError, TypeError, ValueError) as e:
        raise DrillFormatError(f"Invalid drill data: {e}") from e


def save_drill_to_file(drill: Drill, filename):
    """Save a drill to a .drill.json file

    Args:
        drill: Drill to save
        filename: Path to save file

    Raises:
        OSError: If file write fails
    """
    text = serialize_drill(drill)

    with open(filename, 'w', encoding='utf-8') as f:
        f.write(text)

    logger.info(f"Drill saved to {filename}")


def load_drill_from_file(filename) -> Drill:
    """Load and parse a drill file

    Args:
        filename: Path to drill file

    Returns:
        Parsed Drill

    Raises:
        OSError: If file read fails
        DrillFormatError: If the content is not a valid drill
    """
    with open(filename, 'r', encoding='utf-8') as f:
        text = f.read()

    drill = deserialize_drill(text)

    logger.info(f"Drill loaded from {filename}")
    return drill


def default_filename(drill: Drill) -> str:
    return f"{drill.name}{DRILL_FILE_EXTENSION}"
