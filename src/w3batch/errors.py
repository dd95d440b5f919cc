"""Exception hierarchy for w3batch."""

# ruff: noqa: N818 - names follow the batch pipeline's error taxonomy
from typing import Union


class W3BatchException(Exception):
    """Base exception for all w3batch errors."""

    step = "pipeline"

    def __init__(self, message: str, code: int, hint: Union[str, None] = None):
        self.message = message
        self.code = code
        self.hint = hint
        super().__init__(self.message)


class ConfigMissing(W3BatchException):
    """Required configuration absent or unusable."""

    step = "config"

    ERR_MISSING_VALUE = 1001
    ERR_INVALID_VALUE = 1002
    ERR_INVALID_ADDRESS = 1003


class TransportError(W3BatchException):
    """Connection or remote call failure."""

    step = "submit"

    ERR_UNREACHABLE = 2001
    ERR_NODE_ERROR = 2002
    ERR_CLOSED = 2003


class EncodeError(W3BatchException):
    """Arguments do not fit a known shape."""

    step = "encode"

    ERR_UNKNOWN_SHAPE = 3001
    ERR_INVALID_ARGS = 3002
    ERR_INVALID_ADDRESS = 3003
    ERR_EMPTY_BATCH = 3004


class DecodeError(W3BatchException):
    """Response bytes do not match the expected shape."""

    step = "decode"

    ERR_MALFORMED = 4001
    ERR_COUNT_MISMATCH = 4002


class ExecutionRevertedError(W3BatchException):
    """The aggregation call itself reverted."""

    step = "submit"

    ERR_REVERTED = 5001
