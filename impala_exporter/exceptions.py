#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from typing import Optional


class ImpalaRequestError(Exception):
    def __init__(self, target: str, endpoint: str, reason: str):
        super().__init__(f"Request to {target!r} ({endpoint}) failed: {reason}")
        self.target = target
        self.endpoint = endpoint
        self.reason = reason


class ImpalaFetchError(ImpalaRequestError):
    """
    The target could not be reached, timed out or answered with an error status.
    """

    def __init__(self, target: str, endpoint: str, reason: str, status_code: Optional[int] = None):
        super().__init__(target, endpoint, reason)
        self.status_code = status_code


class ImpalaDecodeError(ImpalaRequestError):
    """
    The target answered, but the body is not JSON or does not have the expected shape.
    """


class DurationParseError(Exception):
    def __init__(self, duration: object):
        super().__init__(f"Cannot parse duration {duration!r}")
        self.duration = duration


class NoTargetsConfiguredError(Exception):
    pass
