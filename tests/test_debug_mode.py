"""
Tests for debug mode functionality.
"""

import unittest
import os
import sys
from io import StringIO
from unittest.mock import patch
from ipbatch.config import config
from ipbatch.debug import debug_logger, debug_lookup_method


class TestDebugConfiguration(unittest.TestCase):
    """Test debug configuration functionality."""

    def test_debug_mode_disabled_by_default(self):
        """Test that debug mode is disabled by default."""
        with patch.dict(os.environ, {}, clear=True):
            self.assertFalse(config.is_debug_mode())
            self.assertEqual(config.get_debug_level(), 'off')

    def test_debug_mode_enabled_by_environment(self):
        """Test debug mode enabled by environment variable."""
        test_cases = [
            ('true', True),
            ('1', True),
            ('yes', True),
            ('on', True),
            ('false', False),
            ('0', False),
            ('no', False),
            ('off', False),
        ]

        for value, expected in test_cases:
            with patch.dict(os.environ, {'IPBATCH_DEBUG': value}):
                self.assertEqual(config.is_debug_mode(), expected)

    def test_debug_levels(self):
        """Test different debug levels."""
        with patch.dict(os.environ, {'IPBATCH_DEBUG': 'true'}):
            for level in ['basic', 'detailed', 'verbose']:
                with patch.dict(os.environ, {'IPBATCH_DEBUG_LEVEL': level}):
                    self.assertEqual(config.get_debug_level(), level)

            with patch.dict(os.environ, {'IPBATCH_DEBUG_LEVEL': 'invalid'}):
                self.assertEqual(config.get_debug_level(), 'basic')


class TestDebugLogger(unittest.TestCase):
    """Test debug logger functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.original_stderr = sys.stderr
        self.captured_stderr = StringIO()
        sys.stderr = self.captured_stderr

    def tearDown(self):
        """Clean up test fixtures."""
        sys.stderr = self.original_stderr

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'basic'})
    def test_basic_logging(self):
        """Test basic debug logging."""
        debug_logger.log('basic', 'Test message')

        output = self.captured_stderr.getvalue()
        self.assertIn('[DEBUG', output)
        self.assertIn('Test message', output)

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'false'})
    def test_no_output_when_disabled(self):
        """Test nothing is printed when debug mode is off."""
        debug_logger.log('basic', 'Should not appear')
        self.assertEqual(self.captured_stderr.getvalue(), '')

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'basic'})
    def test_level_filtering(self):
        """Test messages above the current level are suppressed."""
        debug_logger.log('detailed', 'Detailed message')
        self.assertNotIn('Detailed message', self.captured_stderr.getvalue())

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'verbose'})
    def test_verbose_data_output(self):
        """Test verbose mode prints data as JSON."""
        debug_logger.log('basic', 'With data', {'key': 'value', 'count': 2})

        output = self.captured_stderr.getvalue()
        self.assertIn('"key": "value"', output)

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'basic'})
    def test_tokens_redacted(self):
        """Test tokens in debug messages are masked."""
        debug_logger.log('basic', 'GET https://ipinfo.io/8.8.8.8?token=supersecret1')

        output = self.captured_stderr.getvalue()
        self.assertNotIn('supersecret1', output)
        self.assertIn('[REDACTED]', output)

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'detailed'})
    def test_config_info_masks_token(self):
        """Test configuration dump never shows the raw token."""
        debug_logger.log_config_info('abcdef123456')

        output = self.captured_stderr.getvalue()
        self.assertIn('Current configuration', output)
        self.assertNotIn('abcdef123456', output)
        self.assertIn('ab...56', output)


class TestDebugLookupMethod(unittest.TestCase):
    """Test the lookup debug decorator."""

    class FakeClient:
        @debug_lookup_method
        def lookup(self, ip_address):
            if ip_address == 'bad':
                raise RuntimeError('boom')
            return {'ip': ip_address}

    def setUp(self):
        self.original_stderr = sys.stderr
        self.captured_stderr = StringIO()
        sys.stderr = self.captured_stderr
        self.client = self.FakeClient()

    def tearDown(self):
        sys.stderr = self.original_stderr

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'false'})
    def test_passthrough_when_disabled(self):
        self.assertEqual(self.client.lookup('8.8.8.8'), {'ip': '8.8.8.8'})
        self.assertEqual(self.captured_stderr.getvalue(), '')

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'basic'})
    def test_logs_call_and_result(self):
        self.assertEqual(self.client.lookup('8.8.8.8'), {'ip': '8.8.8.8'})

        output = self.captured_stderr.getvalue()
        self.assertIn('8.8.8.8', output)
        self.assertIn('dict(1 keys)', output)

    @patch.dict(os.environ, {'IPBATCH_DEBUG': 'true', 'IPBATCH_DEBUG_LEVEL': 'basic'})
    def test_logs_and_reraises_errors(self):
        with self.assertRaises(RuntimeError):
            self.client.lookup('bad')

        self.assertIn('RuntimeError: boom', self.captured_stderr.getvalue())


if __name__ == '__main__':
    unittest.main()
