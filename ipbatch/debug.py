"""
Debug utilities for ipbatch.

This module provides debugging output for lookup calls, batch progress and
configuration when debug mode is enabled.
"""

import sys
import time
import json
from typing import Any, Dict, Optional, Callable
from functools import wraps
from .config import config
from .security import redact_secrets, mask_token


class DebugLogger:
    """Debug logger for low-level diagnostics."""

    def __init__(self):
        """Initialize debug logger."""
        self.start_time = time.time()
        self.lookup_count = 0

    def log(self, level: str, message: str, data: Optional[Dict[str, Any]] = None):
        """
        Log debug message with optional data.

        Args:
            level: Debug level ('basic', 'detailed', 'verbose')
            message: Debug message
            data: Optional data to include
        """
        if not config.is_debug_mode():
            return

        current_level = config.get_debug_level()

        level_hierarchy = {'basic': 0, 'detailed': 1, 'verbose': 2}
        if level_hierarchy.get(level, 0) > level_hierarchy.get(current_level, 0):
            return

        timestamp = time.time() - self.start_time
        prefix = f"[DEBUG +{timestamp:.3f}s]"

        print(f"{prefix} {redact_secrets(message)}", file=sys.stderr)

        if data and current_level in ('detailed', 'verbose'):
            self._print_data(data, current_level)

    def _print_data(self, data: Dict[str, Any], level: str):
        """Print debug data with appropriate formatting."""
        try:
            if level == 'verbose':
                formatted = json.dumps(data, indent=2, default=str)
                for line in formatted.split('\n'):
                    print(f"[DEBUG]   {redact_secrets(line)}", file=sys.stderr)
            else:
                for key, value in data.items():
                    if isinstance(value, dict):
                        print(f"[DEBUG]   {key}: {len(value)} items", file=sys.stderr)
                    elif isinstance(value, list):
                        print(f"[DEBUG]   {key}: [{len(value)} items]", file=sys.stderr)
                    elif isinstance(value, str) and len(value) > 100:
                        print(f"[DEBUG]   {key}: '{value[:97]}...'", file=sys.stderr)
                    else:
                        print(f"[DEBUG]   {key}: {redact_secrets(str(value))}", file=sys.stderr)
        except (TypeError, ValueError):
            print("[DEBUG]   <data formatting error>", file=sys.stderr)

    def log_lookup_call(self, ip_address: str):
        """Log the start of a single lookup."""
        self.lookup_count += 1
        self.log('basic', f"Lookup #{self.lookup_count}: {ip_address}")

    def log_lookup_result(self, ip_address: str, result: Any, execution_time: float):
        """Log a completed lookup."""
        self.log('basic', f"Lookup result: {ip_address} -> {self._summarize_result(result)} ({execution_time:.3f}s)")

        if config.get_debug_level() in ('detailed', 'verbose'):
            self.log('detailed', f"Full result data for {ip_address}:", {'result': result})

    def log_lookup_error(self, ip_address: str, error: Exception, execution_time: float):
        """Log a failed lookup."""
        error_type = type(error).__name__
        error_msg = str(error)[:100]

        self.log('basic', f"Lookup error: {ip_address} -> {error_type}: {error_msg} ({execution_time:.3f}s)")

    def _summarize_result(self, result: Any) -> str:
        """Create a summary of the result for logging."""
        if result is None:
            return "None"
        elif isinstance(result, dict):
            return f"dict({len(result)} keys)"
        elif isinstance(result, list):
            return f"list({len(result)} items)"
        elif isinstance(result, str):
            return f"str({len(result)} chars)"
        else:
            return f"{type(result).__name__}({result})"

    def log_batch_start(self, total: int, max_workers: int):
        """Log start of a batch."""
        self.log('basic', f"Starting batch of {total} lookups with {max_workers} workers")

    def log_batch_complete(self, total: int, returned: int, total_time: float):
        """Log completion of a batch."""
        self.log('basic', f"Completed batch: {returned}/{total} results, {total_time:.3f}s total")

    def log_config_info(self, token: Optional[str] = None):
        """Log current configuration in debug mode."""
        if not config.is_debug_mode():
            return

        debug_info = {
            'debug_level': config.get_debug_level(),
            'service_url': config.get_service_url(),
            'request_timeout': config.get_request_timeout(),
            'max_workers': config.get_max_workers(),
            'token': mask_token(token),
        }

        self.log('detailed', "Current configuration:", debug_info)


def debug_lookup_method(func: Callable) -> Callable:
    """
    Decorator to add debug logging to lookup methods.

    The wrapped method must take the IP address as its first positional
    argument. Calls, results and errors are logged when debug mode is
    enabled; exceptions are always re-raised.
    """
    @wraps(func)
    def wrapper(self, ip_address, *args, **kwargs):
        if not config.is_debug_mode():
            return func(self, ip_address, *args, **kwargs)

        debug_logger.log_lookup_call(ip_address)

        start_time = time.time()
        try:
            result = func(self, ip_address, *args, **kwargs)
            execution_time = time.time() - start_time
            debug_logger.log_lookup_result(ip_address, result, execution_time)
            return result
        except Exception as e:
            execution_time = time.time() - start_time
            debug_logger.log_lookup_error(ip_address, e, execution_time)
            raise

    return wrapper


# Global debug logger instance
debug_logger = DebugLogger()
