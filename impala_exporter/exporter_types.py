#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from typing import List

import configargparse
import humanfriendly


def positive_integer(value_str: str) -> int:
    value = int(value_str)
    if value <= 0:
        raise configargparse.ArgumentTypeError("invalid positive integer value: {!r}".format(value))
    return value


def port_number(value_str: str) -> int:
    value = int(value_str)
    if not 0 < value < 65536:
        raise configargparse.ArgumentTypeError(f"invalid port number {value!r} (out of range 1-65535)")
    return value


def positive_timespan(value_str: str) -> float:
    """
    Human friendly timespan in seconds, e.g. "10", "10s", "1m" or "1.5s".
    """
    try:
        value = humanfriendly.parse_timespan(value_str)
    except humanfriendly.InvalidTimespan as e:
        raise configargparse.ArgumentTypeError(str(e))
    if value <= 0:
        raise configargparse.ArgumentTypeError("invalid positive timespan value: {!r}".format(value_str))
    return value


def targets_list(value_str: str) -> List[str]:
    targets = [target.strip() for target in value_str.split(",") if target.strip()]
    if not targets:
        raise configargparse.ArgumentTypeError(
            "Impala servers should be a single address, or comma separated list of addresses f.e."
            " 10.11.18.16:25000,10.11.18.17:25000"
        )
    return targets
