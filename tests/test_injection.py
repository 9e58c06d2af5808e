#!/usr/bin/env python3
"""
Unit tests for the process-wide console.
"""

import unittest
from unittest.mock import Mock, patch

from logging_console.injection import install_console, get_console, reset_console


class TestConsoleInjection(unittest.TestCase):
    """Test cases for install_console, get_console and reset_console."""

    def setUp(self):
        reset_console()

    def tearDown(self):
        reset_console()

    def test_installed_console_returned(self):
        console = Mock()
        install_console(console)

        self.assertIs(get_console(), console)
        self.assertIs(get_console(), console)

    def test_explicit_console_wins(self):
        install_console(Mock())
        explicit = Mock()

        self.assertIs(get_console(explicit), explicit)

    @patch('logging_console.injection.LoggingConsole')
    def test_default_console_created_once(self, mock_console_class):
        """Test that a default console is created lazily and then reused."""
        first = get_console()
        second = get_console()

        self.assertIs(first, mock_console_class.return_value)
        self.assertIs(first, second)
        mock_console_class.assert_called_once_with()

    def test_reset_closes_installed_console(self):
        console = Mock()
        install_console(console)

        reset_console()

        console.close.assert_called_once_with()
        with patch('logging_console.injection.LoggingConsole') as mock_console_class:
            self.assertIs(get_console(), mock_console_class.return_value)


if __name__ == '__main__':
    unittest.main()
