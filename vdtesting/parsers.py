"""
Parsers for the flat, comma and newline delimited step inputs.
"""

import re
from typing import List

from .exceptions import DataFormatError
from .schemas import DeviceSpec, EnvVar, RoboDirective


def parse_lines(raw: str) -> List[str]:
    """Return the trimmed, non-blank lines of a multiline input."""
    lines = []
    for line in raw.splitlines():
        line = line.strip()
        if line:
            lines.append(line)
    return lines


def _split_fields(line: str, count: int, what: str) -> List[str]:
    fields = line.split(",")
    if len(fields) != count:
        raise DataFormatError(f"Invalid {what} configuration: {line} (expected {count} comma separated fields)")
    return fields


def parse_devices(raw: str) -> List[DeviceSpec]:
    """
    Parse `model,apiLevel,locale,orientation` lines.

    Args:
        raw: Multiline device list, one device per line

    Returns:
        Devices in input order

    Raises:
        DataFormatError: If a non-blank line does not have exactly 4 fields
    """
    devices = []
    for line in parse_lines(raw):
        model, api_level, locale, orientation = _split_fields(line, 4, "test device")
        devices.append(DeviceSpec(model=model, api_level=api_level, locale=locale, orientation=orientation))
    return devices


def parse_directives(raw: str) -> List[RoboDirective]:
    """Parse `resourceName,inputText,actionType` lines into robo directives."""
    directives = []
    for line in parse_lines(raw):
        resource_name, input_text, action_type = _split_fields(line, 3, "directive")
        directives.append(
            RoboDirective(resource_name=resource_name, input_text=input_text, action_type=action_type)
        )
    return directives


def parse_scalar_list(raw: str) -> List[str]:
    """Split a comma separated list after trimming the surrounding whitespace."""
    return raw.strip().split(",")


def parse_int_list(raw: str) -> List[int]:
    """Split a comma separated list of integers."""
    values = []
    for token in parse_scalar_list(raw):
        values.append(parse_int(token))
    return values


def parse_int(raw: str) -> int:
    """Parse a base-10 integer with an optional sign and nothing else around it."""
    if not re.fullmatch(r"[+-]?[0-9]+", raw):
        raise DataFormatError(f"Failed to parse string({raw}) to integer")
    return int(raw)


def parse_env_vars(raw: str) -> List[EnvVar]:
    """
    Parse `KEY=VALUE` lines.

    Lines without `=` are skipped. Only the first `=` separates key and value,
    so `A=1=2` yields key `A` and value `1=2`.
    """
    env_vars = []
    for line in parse_lines(raw):
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        env_vars.append(EnvVar(key=key, value=value))
    return env_vars
