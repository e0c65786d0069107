"""Driver Overrides chunk reader.

The Driver Overrides chunk lists driver settings (or driver experiments)
per component. Reading it keeps only the settings the user has overridden:

    {
      "IsDriverExperiments": false,
      "Components": [
        {
          "Component": "Dxc",
          "Structures": [
            {"Structure": "Compiler", "SettingName": "...", "Description": "...",
             "Current": ..., "UserOverride": ..., "Supported": true}
          ]
        }
      ]
    }

A setting with an empty structure name is grouped under "Misc.".
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from system_info.codes import ReadStatus
from system_info.kernel.chunk_file import (
    ChunkFile,
    ChunkNotFoundError,
    ChunkVersionError,
    read_chunk_text,
)
from system_info.kernel.coercion import (
    SystemInfoDecodeError,
    get_value,
    iter_elements,
    parse_json,
)
from system_info._internal.canonical_json import canonical_dumps

logger = logging.getLogger(__name__)

DRIVER_OVERRIDES_CHUNK_IDENTIFIER = "DriverOverrides"
DRIVER_OVERRIDES_CHUNK_VERSION = 3  # Current Driver Overrides chunk version
DRIVER_OVERRIDES_CHUNK_VERSION_MIN = 2  # Oldest supported chunk version
DRIVER_OVERRIDES_CHUNK_VERSION_MAX = DRIVER_OVERRIDES_CHUNK_VERSION

MISC_STRUCTURE = "Misc."  # Name used for unnamed structures

NODE_IS_DRIVER_EXPERIMENTS = "IsDriverExperiments"
NODE_COMPONENTS = "Components"
NODE_COMPONENT = "Component"
NODE_STRUCTURES = "Structures"
NODE_STRUCTURE = "Structure"
NODE_USER_OVERRIDE = "UserOverride"
NODE_SUPPORTED = "Supported"


class OverridesResult(BaseModel):
    """Result of reading Driver Overrides. ``text`` is "" unless ``ok``."""
    ok: bool
    text: str = ""
    code: ReadStatus = ReadStatus.OK
    message: Optional[str] = None


def _failure(code: ReadStatus, message: str) -> OverridesResult:
    logger.debug("driver overrides read failed (%s): %s", code.value, message)
    return OverridesResult(ok=False, code=code, message=message)


def _child(parent: Any, name: str) -> Any:
    return parent.get(name) if isinstance(parent, dict) else None


def _is_user_modified(setting: Any, is_experiments: bool) -> bool:
    if not isinstance(setting, dict) or setting.get(NODE_USER_OVERRIDE) is None:
        return False
    # Experiments the driver reports as unsupported never take effect.
    if is_experiments and not get_value(setting, NODE_SUPPORTED, True):
        return False
    return True


def _filter_components(structure: Any, is_experiments: bool) -> List[Dict[str, Any]]:
    components = []
    for component_node in iter_elements(_child(structure, NODE_COMPONENTS)):
        settings = []
        for setting in iter_elements(_child(component_node, NODE_STRUCTURES)):
            if not _is_user_modified(setting, is_experiments):
                continue
            setting = dict(setting)
            setting[NODE_STRUCTURE] = get_value(setting, NODE_STRUCTURE, "") or MISC_STRUCTURE
            settings.append(setting)

        if settings:
            components.append({
                NODE_COMPONENT: get_value(component_node, NODE_COMPONENT, ""),
                NODE_STRUCTURES: settings,
            })
    return components


def parse_driver_overrides(text: str, version: int) -> OverridesResult:
    """
    Filter Driver Overrides JSON down to the user-modified settings.

    Args:
        text: Driver Overrides JSON text
        version: Version of the chunk the text came from

    Returns:
        OverridesResult whose ``text`` is the filtered document as compact JSON.
    """
    if not DRIVER_OVERRIDES_CHUNK_VERSION_MIN <= version <= DRIVER_OVERRIDES_CHUNK_VERSION_MAX:
        return _failure(
            ReadStatus.UNSUPPORTED_CHUNK_VERSION,
            f"Unsupported Driver Overrides version {version}",
        )

    try:
        structure = parse_json(text)
    except ValueError as e:
        return _failure(ReadStatus.PARSE_ERROR, f"Failed to parse Driver Overrides JSON: {e}")

    if not isinstance(structure, dict):
        return _failure(ReadStatus.PARSE_ERROR, "Driver Overrides JSON must be an object")

    try:
        is_experiments = get_value(structure, NODE_IS_DRIVER_EXPERIMENTS, False)
        components = _filter_components(structure, is_experiments)
    except SystemInfoDecodeError as e:
        return _failure(ReadStatus.PARSE_ERROR, f"Failed to decode Driver Overrides: {e}")

    return OverridesResult(
        ok=True,
        text=canonical_dumps({
            NODE_IS_DRIVER_EXPERIMENTS: is_experiments,
            NODE_COMPONENTS: components,
        }),
    )


def is_driver_overrides_chunk_present(chunk_file: ChunkFile) -> bool:
    """Check whether a chunk file carries a Driver Overrides chunk."""
    return chunk_file.contains_chunk(DRIVER_OVERRIDES_CHUNK_IDENTIFIER)


def read_driver_overrides_chunk(chunk_file: ChunkFile) -> OverridesResult:
    """Read and filter the Driver Overrides chunk of an open chunk file."""
    try:
        text = read_chunk_text(
            chunk_file,
            DRIVER_OVERRIDES_CHUNK_IDENTIFIER,
            max_version=DRIVER_OVERRIDES_CHUNK_VERSION_MAX,
            min_version=DRIVER_OVERRIDES_CHUNK_VERSION_MIN,
        )
    except ChunkNotFoundError as e:
        return _failure(ReadStatus.CHUNK_NOT_FOUND, str(e))
    except ChunkVersionError as e:
        return _failure(ReadStatus.UNSUPPORTED_CHUNK_VERSION, str(e))

    return parse_driver_overrides(text, chunk_file.get_chunk_version(DRIVER_OVERRIDES_CHUNK_IDENTIFIER))
