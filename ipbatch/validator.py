"""
Input handling utilities.

Turns the positional command-line argument into the ordered list of
addresses for a batch. Addresses are not validated beyond being non-empty;
anything malformed is left for the lookup service to reject.
"""

import ipaddress
import logging
import re
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r'\r?\n')


class InputValidator:
    """Builds address lists from a literal address or a ``.txt`` file."""

    def is_file_input(self, value: str) -> bool:
        """
        Check whether the input names an address file.

        Args:
            value: Positional input argument

        Returns:
            True if the value ends in ``.txt`` (case-insensitive)
        """
        return value.lower().endswith('.txt')

    def split_lines(self, content: str) -> List[str]:
        """
        Split file content into addresses.

        Lines are split on ``\\r\\n`` or ``\\n``; blank and whitespace-only
        lines are dropped and surviving lines are stripped.
        """
        return [line.strip() for line in _LINE_SPLIT.split(content) if line.strip()]

    def read_address_file(self, path: str) -> List[str]:
        """
        Read an address file.

        Raises:
            OSError: If the file cannot be read
        """
        content = Path(path).read_text(encoding='utf-8')
        return self.split_lines(content)

    def load_addresses(self, value: str) -> List[str]:
        """
        Build the address list for a run.

        Args:
            value: A single address, or a path ending in ``.txt``

        Returns:
            Addresses in input order
        """
        if self.is_file_input(value):
            addresses = self.read_address_file(value)
            logger.info(f"Read {len(addresses)} addresses from {value}")
        else:
            addresses = [value]

        for address in addresses:
            if not self.is_valid_ip(address):
                logger.warning(f"Input does not look like an IP address: {address}")

        return addresses

    def is_valid_ip(self, ip_string: str) -> bool:
        """
        Validate if a string represents a valid IP address.

        Args:
            ip_string: String representation of an IP address

        Returns:
            True if valid IPv4 or IPv6 address, False otherwise
        """
        try:
            ipaddress.ip_address(ip_string.strip())
            return True
        except ValueError:
            return False
