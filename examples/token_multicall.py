import os
import sys
import logging
from w3batch.multicall import Multicall3
from w3batch.transport import Web3Transport
from w3batch.formatting import format_units

if __name__ == "__main__":
    log_format = '[%(levelname)s] %(asctime)s|%(name)s|%(filename)s:%(lineno)d: %(message)s'
    logging.basicConfig(level=logging.DEBUG, format=log_format, stream=sys.stderr)
    logging.getLogger("urllib3.connectionpool").disabled = True
    logger = logging.getLogger("Token multicall")

    rpc = os.environ.get('MAINNET_RPC_URL', 'https://ethereum.publicnode.com')

    dai = '0x6B175474E89094C44Da98b954EedeAC495271d0F'  # DAI contract address
    usdc = '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48'  # USDC contract address
    vitalik = '0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045'  # vitalik.eth

    with Web3Transport.connect(rpc, logger=logger) as transport:
        multicall = Multicall3(transport, logger=logger)

        for token in (dai, usdc):
            multicall.add(token, 'symbol')
            multicall.add(token, 'decimals')
            multicall.add(token, 'balanceOf', vitalik)

        block_number, results = multicall.call()

    print("Block {}".format(block_number))
    for i in range(0, len(results), 3):
        symbol, decimals, balance = results[i:i + 3]
        print("Vitalik holds {} {}".format(format_units(balance, decimals), symbol))
