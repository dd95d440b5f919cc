from typing import Union
import logging

import requests
from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from .errors import ExecutionRevertedError, TransportError

DEFAULT_TIMEOUT = 10


class Web3Transport:
    """
    Read-only eth_call channel over a single Web3 HTTP connection
    """

    def __init__(self, _web3: Web3, session: Union[requests.Session, None] = None, label: Union[str, None] = None,
                 logger: Union[logging.Logger, None] = None):
        """
        :param _web3: connected Web3 instance
        :param session: (optional) HTTP session owned by this transport, closed on close()
        :param label: (optional) name used in logs
        :param logger: (optional) logging.Logger
        """
        self.web3 = _web3
        self.session = session
        self.label = hex(id(self)) if label is None else label
        self.logger = logger
        self.closed = False

    @classmethod
    def connect(cls, rpc_url: str, timeout: float = DEFAULT_TIMEOUT, label: Union[str, None] = None,
                logger: Union[logging.Logger, None] = None) -> 'Web3Transport':
        """
        Open an HTTP connection to rpc_url. Provider level retries are disabled
        """
        session = requests.Session()
        provider = Web3.HTTPProvider(
            rpc_url,
            request_kwargs={'timeout': timeout},
            session=session,
            exception_retry_configuration=None,
        )
        return cls(Web3(provider), session, label, logger)

    def __repr__(self):
        return '{}{}'.format(self.label, ' (closed)' if self.closed else '')

    def __enter__(self) -> 'Web3Transport':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def call(self, target: str, data: bytes, block_identifier: Union[str, int] = 'latest') -> bytes:
        """
        eth_call target with data, no value transfer
        :param block_identifier: (default: 'latest') block number or tag to evaluate against
        :return: raw return bytes
        """
        if self.closed:
            raise TransportError("Transport {} is closed".format(self.label), TransportError.ERR_CLOSED)
        if self.logger is not None:
            self.logger.debug("eth_call {} via {} at {}".format(target, self, block_identifier))
        try:
            result = self.web3.eth.call({'to': target, 'data': data}, block_identifier)
        except ContractLogicError as e:
            raise ExecutionRevertedError(
                "Call to {} reverted: {}".format(target, e.message or e),
                ExecutionRevertedError.ERR_REVERTED,
                hint="aggregate() fails the whole batch when any inner call fails",
            ) from e
        except (requests.RequestException, OSError) as e:
            # MissingSchema and InvalidURL are also ValueErrors
            raise TransportError(
                "Cannot reach node via {}: {}".format(self, e),
                TransportError.ERR_UNREACHABLE,
                hint="Check the RPC URL and network connectivity",
            ) from e
        except (Web3Exception, ValueError) as e:
            raise TransportError(
                "Node rejected call to {}: {}".format(target, e),
                TransportError.ERR_NODE_ERROR,
            ) from e
        return bytes(result)

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self.session is not None:
            self.session.close()
        if self.logger is not None:
            self.logger.debug("Closed {}".format(self))
