"""
config.py

Default values, JSON schemas for field configurations, environment-driven
render settings and the logging setup used by the command line.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from dotenv import load_dotenv
from jsonschema import validate, ValidationError, SchemaError
from rich.logging import RichHandler

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# --- Gradient noise ---
DEFAULT_STARTING_OCTAVE_INDEX = 4
DEFAULT_OCTAVE_WEIGHTS = (1.0, 0.5, 0.25, 0.125, 0.0625)
DEFAULT_SCALE = (1.0, 1.0)
# Tuning constant applied to every octave before its contribution is clamped
# to [-1, 1]. It has no derivation, it only raises contrast.
CONTRAST = 1.2

# --- Cellular noise ---
DEFAULT_NUM_POINTS = 100
DEFAULT_WORLEY_SEED = "defaultseed"
DEFAULT_POINT_GEN_ALGORITHM = "random"
DEFAULT_POINT_SELECTION_CRITERIA = "closest"

# --- Rendering ---
DEFAULT_RENDER_SIZE = 256
DEFAULT_RENDER_OUTPUT = "noise.png"
DEFAULT_CLI_OCTAVES = 5

_SEED_SCHEMA = {"type": ["string", "number"]}

PERLIN_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "startingOctaveIndex": {"type": "integer", "minimum": 0},
        "octaveWeights": {
            "type": "array",
            "items": {"type": "number", "minimum": 0},
            "minItems": 1,
        },
        "seed": _SEED_SCHEMA,
        "scale": {
            "type": "object",
            "properties": {
                "x": {"type": "number", "exclusiveMinimum": 0},
                "y": {"type": "number", "exclusiveMinimum": 0},
            },
            "required": ["x", "y"],
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}

WORLEY_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "seed": _SEED_SCHEMA,
        "numPoints": {"type": "integer", "minimum": 1},
        "pointGenAlgorithm": {"type": "string"},
        "pointSelectionCriteria": {"type": "string"},
    },
    "additionalProperties": False,
}

FIELD_FILE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "type": {"enum": ["perlin", "worley"]},
    },
    "required": ["type"],
}

FIELD_SCHEMAS = {
    "perlin": PERLIN_SCHEMA,
    "worley": WORLEY_SCHEMA,
}


def setup_logging(verbose: bool):
    """
    Sets up logging configuration with RichHandler.
    If verbose is True, set log level to DEBUG, else INFO.
    """
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )
    return logging.getLogger("tilenoise")


def validate_config(config: Dict[str, Any], schema: Dict[str, Any], name: str = "field"):
    """Validate ``config`` against ``schema``, turning schema errors into ConfigurationError."""
    try:
        validate(instance=config, schema=schema)
        logger.debug(f"{name} configuration validation successful.")
    except ValidationError as ve:
        logger.error(f"{name} configuration validation error: {ve.message}")
        raise ConfigurationError(f"Invalid {name} configuration: {ve.message}") from ve
    except SchemaError as se:
        logger.error(f"Invalid JSON Schema for {name}: {se.message}")
        raise


def integral(value):
    """JSON Schema counts ``4.0`` as an integer; hand such values on as ``int``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def load_field_config(config_file: str) -> Tuple[str, Dict[str, Any]]:
    """
    Load a field description such as ``{"type": "worley", "numPoints": 64}``.

    Returns:
    --------
    tuple
        The field type (``"perlin"`` or ``"worley"``) and the remaining options,
        already validated against the schema of that field type.
    """
    try:
        with open(config_file, "r") as f:
            data = json.load(f)
        logger.debug(f"Successfully loaded field configuration from {config_file}")
    except FileNotFoundError:
        logger.error(f"Configuration file not found: {config_file}")
        raise
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON format in configuration file {config_file}: {e}")
        raise ConfigurationError(f"Invalid JSON in {config_file}: {e}") from e

    validate_config(data, FIELD_FILE_SCHEMA, "field file")
    kind = data["type"]
    options = {k: v for k, v in data.items() if k != "type"}
    validate_config(options, FIELD_SCHEMAS[kind], kind)
    return kind, options


@dataclass
class RenderSettings:
    size: int = DEFAULT_RENDER_SIZE
    output: str = DEFAULT_RENDER_OUTPUT
    verbose: bool = False


def load_render_settings() -> RenderSettings:
    """Read render defaults from the environment (and a ``.env`` file, if present)."""
    load_dotenv()

    try:
        settings = RenderSettings(
            size=int(os.getenv("TILENOISE_SIZE", str(DEFAULT_RENDER_SIZE))),
            output=os.getenv("TILENOISE_OUTPUT", DEFAULT_RENDER_OUTPUT),
            verbose=os.getenv("TILENOISE_VERBOSE", "False").lower() in ["true", "1", "t"],
        )
    except ValueError as ve:
        logger.error(f"Type conversion error: {ve}")
        raise ConfigurationError(f"Invalid render settings in environment: {ve}") from ve

    if settings.size <= 0:
        raise ConfigurationError(f"TILENOISE_SIZE must be positive, got {settings.size}")
    return settings
