"""
Snapshot providers.

This package contains provider implementations for retrieving exchange
snapshots and company profiles (public data repositories, local mirror).

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""
