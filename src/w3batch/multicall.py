from typing import Tuple, List, Union, Optional, Any, NamedTuple, Iterable
import logging
import time

import eth_utils

from .codec import SignatureCodec
from .errors import DecodeError, EncodeError

MULTICALL3_ADDRESS = '0xcA11bde05977b3631167028862bE2a173976CA11'


class Call(NamedTuple):
    """One encoded read against a target contract. Batch position is the only correlation key."""
    target: str
    data: bytes
    shape: Optional[str] = None


class AggregateResponse(NamedTuple):
    block_number: int
    return_data: Tuple[bytes, ...]


def _checksum(target: str) -> str:
    try:
        return eth_utils.to_checksum_address(target)
    except (ValueError, TypeError) as e:
        raise EncodeError(
            "Invalid target address: {!r}".format(target),
            EncodeError.ERR_INVALID_ADDRESS,
            hint="Address must be a 0x-prefixed hex string of 40 characters",
        ) from e


def _call_data(data: Union[bytes, str]) -> bytes:
    """Raw call data, 0x-prefixed hex strings accepted"""
    try:
        if isinstance(data, str):
            return eth_utils.to_bytes(hexstr=data)
        return bytes(data)
    except (ValueError, TypeError) as e:
        raise EncodeError(
            "Invalid call data: {!r}".format(data),
            EncodeError.ERR_INVALID_ARGS,
            hint="Call data must be bytes or a 0x-prefixed hex string",
        ) from e


class Multicall3:
    """
    Batches read calls into a single Multicall3 aggregate() eth_call.
    aggregate() requires every inner call to succeed: one failing call reverts the whole batch.
    """

    AGGREGATE_SHAPE = 'aggregate'

    def __init__(self, transport, address: str = MULTICALL3_ADDRESS, codec: Optional[SignatureCodec] = None,
                 calls: Optional[List[Call]] = None, logger: Union[logging.Logger, None] = None):
        """
        :param transport: object exposing call(target, data, block_identifier) -> bytes
        :param address: (optional) address of the Multicall3 contract
        :param codec: (optional) SignatureCodec holding the 'aggregate' shape and the per-call shapes
        :param calls: (optional) initial calls
        :param logger: (optional) logging.Logger
        """
        self.transport = transport
        self.address = _checksum(address)
        self.codec = SignatureCodec() if codec is None else codec
        self.calls: List[Call] = [] if calls is None else list(calls)
        self.logger = logger

    def add(self, target: str, shape_id: str, args=None) -> Call:
        """
        Encode a call with the codec and append it to the batch
        :return: the queued Call
        """
        call = Call(_checksum(target), self.codec.encode(shape_id, args), shape_id)
        self.calls.append(call)
        return call

    def build_batch(self, calls: Optional[Iterable[Call]] = None) -> bytes:
        """
        Encode aggregate((address,bytes)[]) with the calls in their given order
        :param calls: (optional) calls to encode, defaults to the queued calls
        :return: call data for the Multicall3 contract
        """
        calls = self.calls if calls is None else list(calls)
        if not calls:
            raise EncodeError("Cannot aggregate an empty batch", EncodeError.ERR_EMPTY_BATCH)
        pairs = [(_checksum(call.target), _call_data(call.data)) for call in calls]
        return self.codec.encode(Multicall3.AGGREGATE_SHAPE, [pairs])

    def submit(self, payload: bytes, block_identifier: Union[str, int] = 'latest') -> bytes:
        """
        eth_call the Multicall3 contract, no value attached
        :raise TransportError: the node could not be reached or answered with an error
        :raise ExecutionRevertedError: the aggregate call reverted
        """
        start = time.time()
        raw = self.transport.call(self.address, payload, block_identifier)
        if self.logger is not None:
            self.logger.debug("Multicall executed in {:.3f}s ({} bytes)".format(time.time() - start, len(raw)))
        return raw

    def unpack_batch(self, raw: bytes) -> AggregateResponse:
        block_number, return_data = self.codec.decode(Multicall3.AGGREGATE_SHAPE, raw)
        return AggregateResponse(block_number, tuple(return_data))

    def unpack_call_result(self, raw: bytes, shape_id: str) -> Any:
        return self.codec.decode(shape_id, raw)

    def call(self, block_identifier: Union[str, int] = 'latest') -> Tuple[int, List[Any]]:
        """
        Run the queued calls as one aggregate and decode every result
        :return: (block number, results in call order). Calls without a shape yield their raw bytes
        """
        response = self.unpack_batch(self.submit(self.build_batch(), block_identifier))
        if len(response.return_data) != len(self.calls):
            raise DecodeError(
                "Expected {} results, got {}".format(len(self.calls), len(response.return_data)),
                DecodeError.ERR_COUNT_MISMATCH,
            )
        if self.logger is not None:
            self.logger.debug("Aggregated {} calls at block {}".format(len(self.calls), response.block_number))
        outputs = []
        for call, output in zip(self.calls, response.return_data):
            outputs.append(output if call.shape is None else self.unpack_call_result(output, call.shape))
        return response.block_number, outputs
