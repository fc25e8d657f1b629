"""
Unit tests for configuration and option types
"""

import logging
import os
import unittest
from unittest.mock import patch

from chain_rpc.config import (
    Config,
    LoggingConfig,
    RpcConfig,
    get_config,
    reload_config,
    setup_logging,
)
from chain_rpc.errors import ConfigurationError
from chain_rpc.types import ContractCallRequest, RetryOptions, RpcRequest, RpcResult


class TestRpcConfig(unittest.TestCase):
    """Tests for environment-driven RPC settings"""

    def test_defaults(self):
        """Unset variables fall back to built-in defaults"""
        with patch.dict(os.environ, {}, clear=True):
            cfg = RpcConfig()

        self.assertEqual(cfg.node_url, "")
        self.assertEqual(cfg.max_retries, 3)
        self.assertEqual(cfg.base_delay_ms, 400.0)
        self.assertEqual(cfg.jitter_min, 0.7)
        self.assertEqual(cfg.jitter_max, 1.3)
        self.assertEqual(cfg.max_delay_ms, 30_000.0)
        self.assertEqual(cfg.timeout_ms, 10_000.0)
        self.assertEqual(cfg.batch_size, 10)
        self.assertEqual(cfg.commitment, "confirmed")

    def test_env_overrides(self):
        env = {
            "NODE_URL": "https://evm.example.com/jsonrpc",
            "SOLANA_NODE_URL": "https://sol.example.com",
            "MAX_RETRIES": "5",
            "BASE_DELAY_MS": "250",
            "RPC_BATCH_SIZE": "25",
            "SOLANA_COMMITMENT": "finalized",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = RpcConfig()

        self.assertEqual(cfg.node_url, "https://evm.example.com/jsonrpc")
        self.assertEqual(cfg.solana_node_url, "https://sol.example.com")
        self.assertEqual(cfg.max_retries, 5)
        self.assertEqual(cfg.base_delay_ms, 250.0)
        self.assertEqual(cfg.batch_size, 25)
        self.assertEqual(cfg.commitment, "finalized")

    def test_solana_url_falls_back_to_node_url(self):
        with patch.dict(os.environ, {"NODE_URL": "https://node.example.com"}, clear=True):
            cfg = RpcConfig()

        self.assertEqual(cfg.solana_node_url, "https://node.example.com")

    def test_invalid_numbers_fall_back_with_warning(self):
        with patch.dict(os.environ, {"MAX_RETRIES": "three", "TIMEOUT_MS": "soon"}, clear=True):
            with self.assertLogs("chain_rpc.config", level="WARNING") as logs:
                cfg = RpcConfig()

        self.assertEqual(cfg.max_retries, 3)
        self.assertEqual(cfg.timeout_ms, 10_000.0)
        self.assertTrue(any("MAX_RETRIES" in line for line in logs.output))

    def test_get_config_returns_container(self):
        cfg = get_config()
        self.assertIsInstance(cfg, Config)
        self.assertIsInstance(cfg.rpc, RpcConfig)
        self.assertIsInstance(cfg.logging, LoggingConfig)


class TestReloadConfig(unittest.TestCase):
    """Tests for re-reading the environment"""

    def tearDown(self):
        reload_config()

    def test_reload_picks_up_environment(self):
        before = get_config()
        env = {"NODE_URL": "https://reloaded.example.com", "MAX_RETRIES": "9", "LOG_LEVEL": "DEBUG"}
        with patch.dict(os.environ, env, clear=True):
            reloaded = reload_config()

        self.assertIsNot(reloaded, before)
        self.assertIs(get_config(), reloaded)
        self.assertEqual(reloaded.rpc.node_url, "https://reloaded.example.com")
        self.assertEqual(reloaded.rpc.solana_node_url, "https://reloaded.example.com")
        self.assertEqual(reloaded.rpc.max_retries, 9)
        self.assertEqual(reloaded.logging.level, logging.DEBUG)


class TestSetupLogging(unittest.TestCase):
    """Tests for logger setup"""

    def test_console_only(self):
        log_config = LoggingConfig(log_file="", log_level="DEBUG", console_output=True)
        logger = setup_logging(log_config, logger_name="chain_rpc_test_console")

        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], logging.StreamHandler)

    def test_file_handler_created(self):
        import tempfile
        from logging.handlers import RotatingFileHandler

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "nested", "rpc.log")
            log_config = LoggingConfig(log_file=path, log_level="INFO", console_output=False)
            logger = setup_logging(log_config, logger_name="chain_rpc_test_file")
            try:
                self.assertEqual(len(logger.handlers), 1)
                self.assertIsInstance(logger.handlers[0], RotatingFileHandler)
                self.assertTrue(os.path.exists(path))
            finally:
                for handler in logger.handlers[:]:
                    handler.close()
                    logger.removeHandler(handler)

    def test_level_property(self):
        self.assertEqual(LoggingConfig(log_level="warning").level, logging.WARNING)
        self.assertEqual(LoggingConfig(log_level="bogus").level, logging.INFO)


class TestRetryOptions(unittest.TestCase):
    """Tests for RetryOptions defaults and validation"""

    def test_defaults_from_config(self):
        opts = RetryOptions()
        rpc = get_config().rpc

        self.assertEqual(opts.retries, rpc.max_retries)
        self.assertEqual(opts.base_delay_ms, rpc.base_delay_ms)
        self.assertEqual(opts.timeout_ms, rpc.timeout_ms)

    def test_with_retries(self):
        opts = RetryOptions.with_retries(7)
        self.assertEqual(opts.retries, 7)
        self.assertEqual(opts.attempts, 7)

    def test_attempts_never_below_one(self):
        self.assertEqual(RetryOptions(retries=0).attempts, 1)

    def test_timeout_seconds(self):
        self.assertEqual(RetryOptions(timeout_ms=2500).timeout_seconds, 2.5)

    def test_replace_keeps_other_fields(self):
        opts = RetryOptions(retries=4, base_delay_ms=100)
        changed = opts.replace(retries=1)

        self.assertEqual(changed.retries, 1)
        self.assertEqual(changed.base_delay_ms, 100)
        self.assertEqual(opts.retries, 4)

    def test_invalid_values_raise(self):
        with self.assertRaises(ConfigurationError):
            RetryOptions(base_delay_ms=0)
        with self.assertRaises(ConfigurationError):
            RetryOptions(timeout_ms=-1)
        with self.assertRaises(ConfigurationError):
            RetryOptions(jitter_min=1.5, jitter_max=1.0)
        with self.assertRaises(ConfigurationError):
            RetryOptions(max_delay_ms=-5)


class TestRequestTypes(unittest.TestCase):
    """Tests for request and result types"""

    def test_request_payload(self):
        req = RpcRequest("eth_getBalance", ["0x" + "ab" * 20, "latest"])
        payload = req.to_payload(3)

        self.assertEqual(payload["jsonrpc"], "2.0")
        self.assertEqual(payload["method"], "eth_getBalance")
        self.assertEqual(payload["id"], 3)
        self.assertEqual(payload["params"][1], "latest")

    def test_result_constructors(self):
        ok = RpcResult.ok("0x01")
        failed = RpcResult.failed("execution reverted", 3)

        self.assertTrue(ok.is_success)
        self.assertEqual(ok.value, "0x01")
        self.assertFalse(failed.is_success)
        self.assertEqual(failed.error, "execution reverted")
        self.assertEqual(failed.code, 3)

    def test_contract_call_request_defaults(self):
        req = ContractCallRequest("0x" + "11" * 20, "decimals()")
        self.assertEqual(tuple(req.args), ())


if __name__ == "__main__":
    unittest.main()
