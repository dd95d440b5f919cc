"""Fetch token symbol, decimals and one holder's balance in a single Multicall3 round trip."""

import logging
import sys
from typing import List, Mapping, NamedTuple, Optional, Union

from .config import load_settings
from .errors import W3BatchException
from .formatting import format_units
from .logging_config import setup_logging
from .multicall import Multicall3
from .transport import Web3Transport

logger = logging.getLogger(__name__)


class TokenReport(NamedTuple):
    block_number: int
    symbol: str
    decimals: int
    balance: int
    holder: str


def fetch_token_report(transport, contracts: Mapping[str, str],
                       block_identifier: Union[str, int] = 'latest') -> TokenReport:
    """Read symbol(), decimals() and balanceOf(holder) from contracts['token'] as one aggregate call."""
    multicall = Multicall3(transport, contracts['aggregator'], logger=logger)
    token = contracts['token']
    holder = contracts['holder']

    multicall.add(token, 'symbol')
    multicall.add(token, 'decimals')
    multicall.add(token, 'balanceOf', holder)

    block_number, (symbol, decimals, balance) = multicall.call(block_identifier)
    return TokenReport(block_number, symbol, decimals, balance, holder)


def format_report(report: TokenReport) -> List[str]:
    return [
        "Block Number: {}".format(report.block_number),
        "Token Symbol: {}".format(report.symbol),
        "Token Decimals: {}".format(report.decimals),
        "Balance of {}: {} {}".format(report.holder, format_units(report.balance, report.decimals), report.symbol),
    ]


def main(env_file: Optional[str] = '.env') -> int:
    setup_logging()
    try:
        settings = load_settings(env_file)
        setup_logging(settings.log_level)
        with Web3Transport.connect(settings.rpc_url, settings.timeout, label='rpc', logger=logger) as transport:
            report = fetch_token_report(transport, settings.contracts)
    except W3BatchException as e:
        logger.error("%s failed [%s]: %s%s", e.step, e.code, e.message,
                     " (hint: {})".format(e.hint) if e.hint else "")
        return 1

    for line in format_report(report):
        print(line)
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
