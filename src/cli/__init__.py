"""
CLI Module

Command-line interface for the Finmap query server using Click.
Each command group is organized into its own module for maintainability.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from cli.market import market


__all__ = ["market"]
