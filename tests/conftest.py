import pytest
from eth_abi import decode, encode
from eth_utils import to_checksum_address

from w3batch.config import DEFAULT_CONTRACTS

TOKEN = DEFAULT_CONTRACTS["token"]
HOLDER = DEFAULT_CONTRACTS["holder"]
AGGREGATOR = DEFAULT_CONTRACTS["aggregator"]
OTHER_TOKEN = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"

SYMBOL_SELECTOR = bytes.fromhex("95d89b41")
DECIMALS_SELECTOR = bytes.fromhex("313ce567")
BALANCE_OF_SELECTOR = bytes.fromhex("70a08231")

BALANCE = 1234567890123456789
BLOCK_NUMBER = 19000000


class EchoTransport:
    """Fake transport answering aggregate() with canned per-call return data."""

    def __init__(self, responses, block_number=BLOCK_NUMBER, aggregator=AGGREGATOR, error=None, drop=0):
        self.responses = responses
        self.block_number = block_number
        self.aggregator = aggregator
        self.error = error
        self.drop = drop
        self.requests = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.closed = True

    def call(self, target, data, block_identifier="latest"):
        self.requests.append((target, bytes(data), block_identifier))
        if self.error is not None:
            raise self.error
        assert target == self.aggregator
        (pairs,) = decode(["(address,bytes)[]"], bytes(data)[4:])
        return_data = [self.responses[(to_checksum_address(addr), bytes(payload))] for addr, payload in pairs]
        if self.drop:
            return_data = return_data[:-self.drop]
        return encode(["uint256", "bytes[]"], [self.block_number, return_data])


def token_responses(token=TOKEN, symbol="DAI", decimals=18, balance=BALANCE, holder=HOLDER):
    balance_call = BALANCE_OF_SELECTOR + encode(["address"], [holder])
    return {
        (token, SYMBOL_SELECTOR): encode(["string"], [symbol]),
        (token, DECIMALS_SELECTOR): encode(["uint8"], [decimals]),
        (token, balance_call): encode(["uint256"], [balance]),
    }


@pytest.fixture
def responses():
    table = token_responses()
    table.update(token_responses(token=OTHER_TOKEN, symbol="USDC", decimals=6, balance=42_000000))
    return table


@pytest.fixture
def echo_transport(responses):
    return EchoTransport(responses)
