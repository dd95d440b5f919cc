from unittest.mock import patch

import pytest

from w3batch.config import DEFAULT_CONTRACTS, contract_table
from w3batch.errors import ExecutionRevertedError
from w3batch.main import TokenReport, fetch_token_report, format_report, main

from conftest import BALANCE, BLOCK_NUMBER, HOLDER, OTHER_TOKEN, EchoTransport


@pytest.fixture
def no_env_file(tmp_path):
    return str(tmp_path / "missing.env")


class TestFetchTokenReport:
    def test_report(self, echo_transport):
        report = fetch_token_report(echo_transport, DEFAULT_CONTRACTS)

        assert report == TokenReport(BLOCK_NUMBER, "DAI", 18, BALANCE, HOLDER)
        assert len(echo_transport.requests) == 1

    def test_injected_table(self, echo_transport):
        """Test the token address comes from the injected table."""
        report = fetch_token_report(echo_transport, contract_table({"token": OTHER_TOKEN}))

        assert report.symbol == "USDC"
        assert report.decimals == 6


class TestFormatReport:
    def test_lines(self):
        lines = format_report(TokenReport(BLOCK_NUMBER, "DAI", 18, BALANCE, HOLDER))

        assert lines == [
            "Block Number: {}".format(BLOCK_NUMBER),
            "Token Symbol: DAI",
            "Token Decimals: 18",
            "Balance of {}: 1.234567890123456789 DAI".format(HOLDER),
        ]


class TestMain:
    def test_success(self, monkeypatch, capsys, echo_transport, no_env_file):
        monkeypatch.setenv("MAINNET_RPC_URL", "http://rpc.example")
        with patch("w3batch.main.Web3Transport") as mock_transport:
            mock_transport.connect.return_value = echo_transport

            assert main(no_env_file) == 0

        mock_transport.connect.assert_called_once()
        assert mock_transport.connect.call_args[0][0] == "http://rpc.example"
        assert echo_transport.closed
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 4
        assert out[3] == "Balance of {}: 1.234567890123456789 DAI".format(HOLDER)

    def test_missing_rpc_url(self, monkeypatch, capsys, no_env_file):
        """Test no connection is attempted without an RPC URL."""
        monkeypatch.delenv("MAINNET_RPC_URL", raising=False)
        with patch("w3batch.main.Web3Transport") as mock_transport:
            assert main(no_env_file) == 1

        mock_transport.connect.assert_not_called()
        assert capsys.readouterr().out == ""

    def test_reverted(self, monkeypatch, capsys, responses, no_env_file):
        """Test a reverted aggregate prints nothing and still closes the connection."""
        monkeypatch.setenv("MAINNET_RPC_URL", "http://rpc.example")
        transport = EchoTransport(responses, error=ExecutionRevertedError("reverted", ExecutionRevertedError.ERR_REVERTED))
        with patch("w3batch.main.Web3Transport") as mock_transport:
            mock_transport.connect.return_value = transport

            assert main(no_env_file) == 1

        assert transport.closed
        assert capsys.readouterr().out == ""

    def test_error_logged_with_step(self, monkeypatch, caplog, responses, no_env_file):
        monkeypatch.setenv("MAINNET_RPC_URL", "http://rpc.example")
        transport = EchoTransport(responses, error=ExecutionRevertedError("reverted", ExecutionRevertedError.ERR_REVERTED))
        with patch("w3batch.main.Web3Transport") as mock_transport:
            mock_transport.connect.return_value = transport
            main(no_env_file)

        assert "submit failed [5001]: reverted" in caplog.text
