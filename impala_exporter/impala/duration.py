#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import re

from impala_exporter.exceptions import DurationParseError

# Impala renders query durations as e.g. "1h2m", "1m30s", "12s305ms" or "500ms". Every component is optional.
# "m" followed by "s" is always the millisecond unit.
DURATION_REGEX = re.compile(r"(?:(?P<hours>\d+)h)?(?:(?P<minutes>\d+)m(?!s))?(?:(?P<seconds>\d+)s)?(?:(?P<ms>\d+)ms)?")


def parse_duration(duration: str) -> float:
    """
    Convert an Impala duration string to seconds.
    Parsing is lenient: only the leading components are considered, anything unrecognized contributes nothing,
    and a string without any known component is 0 seconds.
    Raises DurationParseError if the value is not a string at all.
    """
    if not isinstance(duration, str):
        raise DurationParseError(duration)

    match = DURATION_REGEX.match(duration)
    assert match is not None  # every group is optional, so the empty prefix always matches

    total_seconds = 0.0
    if match["hours"] is not None:
        total_seconds += int(match["hours"]) * 60 * 60
    if match["minutes"] is not None:
        total_seconds += int(match["minutes"]) * 60
    if match["seconds"] is not None:
        total_seconds += int(match["seconds"])
    if match["ms"] is not None:
        total_seconds += int(match["ms"]) / 1000
    return total_seconds
