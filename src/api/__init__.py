"""
MCP (Model Context Protocol) Server Module

Provides FastAPI-based MCP server that exposes exchange snapshot query tools
to LLM applications.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""
