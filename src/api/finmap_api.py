#!/usr/bin/env python3
"""
MCP Server for Finmap market data

Provides Model Context Protocol access to daily exchange snapshots:
- Supported exchanges and their data coverage
- Sectors and tickers listed on an exchange for a date
- Fuzzy company search
- Market and sector overviews (totals published with each snapshot)
- Single-ticker market data and stock rankings
- US company profiles

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

import json
import logging
import os
import sys
import time
from datetime import datetime
from typing import Any, Literal

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, ValidationError


# Add parent directory (src/) to path so imports work from src/api/
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Local application imports
import constants as const
import util
from errors import FinmapError
from finmap_service import FinmapService
from response_builder import format_error


# Configure logging using util.setup_logger with custom log file
util.setup_logger(name=None, level=None, console=True, log_file=const.API_LOG_FILE)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Finmap MCP Server",
    description="Model Context Protocol server answering structured queries over daily stock exchange snapshots",
    version=const.VERSION,
)

# Track server startup time for debugging
SERVER_START_TIME = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "mcp-session-id"],
    expose_headers=["Mcp-Session-Id"],
    max_age=86400,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing information"""
    start_time = time.time()
    client_host = request.client.host if request.client else "unknown"

    logger.info(f"Method: {request.method} | Path: {request.url.path} | Client: {client_host}")

    try:
        response = await call_next(request)
        duration = time.time() - start_time
        logger.info(f"Status: {response.status_code} | Duration: {duration:.3f}s")
        return response
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"Request failed after {duration:.3f}s: {e!s}", exc_info=True)
        raise


# ============================================================================
# MCP Protocol Models
# ============================================================================


class ToolInputSchema(BaseModel):
    """Schema for tool input parameters"""

    type: str = "object"
    properties: dict[str, Any]
    required: list[str] | None = []


class Tool(BaseModel):
    """MCP Tool definition"""

    name: str
    title: str
    description: str
    inputSchema: ToolInputSchema


class ToolCallRequest(BaseModel):
    """Request model for tool execution"""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolCallResponse(BaseModel):
    """Response model for tool execution"""

    content: list[dict[str, Any]]
    isError: bool = False


# ============================================================================
# Tool Argument Models
# ============================================================================

StockExchange = Literal["amex", "nasdaq", "nyse", "us-all", "lse", "moex", "bist"]
USExchange = Literal["amex", "nasdaq", "nyse"]
SortField = Literal["priceChangePct", "marketCap", "value", "volume", "numTrades"]
SortOrder = Literal["asc", "desc"]


class ListExchangesRequest(BaseModel):
    """Request model for listing exchanges (no arguments)"""


class SnapshotRequest(BaseModel):
    """Exchange plus optional date parts; omitted parts default to today"""

    stockExchange: StockExchange = Field(
        ..., description="Stock exchange: amex, nasdaq, nyse, us-all, lse, moex, bist"
    )
    year: int | None = Field(None, ge=const.MIN_YEAR, description="Year (2012 or later), defaults to current year")
    month: int | None = Field(None, ge=1, le=12, description="Month (1-12), defaults to current month")
    day: int | None = Field(None, ge=1, le=31, description="Day (1-31), defaults to current day")


class SectorFilterRequest(SnapshotRequest):
    sector: str | None = Field(None, description="Filter by specific sector")

    def model_post_init(self, __context):
        # Convert empty strings to None
        if self.sector == "":
            self.sector = None


class ListTickersRequest(SectorFilterRequest):
    """Request model for listing tickers grouped by sector"""

    englishNames: bool = Field(True, description="Use English names if available")


class SearchCompaniesRequest(SnapshotRequest):
    """Request model for company search"""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"stockExchange": "nasdaq", "query": "apple"}]}
    )

    query: str = Field(..., description="Search term (partial ticker or company name)")
    limit: int = Field(const.DEFAULT_LIMIT, ge=1, le=const.MAX_SEARCH_LIMIT, description="Maximum results")


class StockDataRequest(SnapshotRequest):
    """Request model for single-ticker market data"""

    ticker: str = Field(..., description="Stock ticker symbol (case-sensitive)")


class RankStocksRequest(SectorFilterRequest):
    """Request model for ranking stocks"""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"stockExchange": "nyse", "sortBy": "marketCap"},
                {"stockExchange": "moex", "sortBy": "priceChangePct", "order": "asc", "limit": 20},
            ]
        }
    )

    sortBy: SortField = Field(..., description="Sort by: marketCap, priceChangePct, volume, value, numTrades")
    order: SortOrder = Field(const.DEFAULT_SORT_ORDER, description="Sort order: asc or desc")
    limit: int = Field(const.DEFAULT_LIMIT, ge=1, le=const.MAX_RANK_LIMIT, description="Number of results")
    ticker: str | None = Field(None, description="Rank a single ticker only (case-sensitive)")

    def model_post_init(self, __context):
        super().model_post_init(__context)
        if self.ticker == "":
            self.ticker = None


class CompanyProfileRequest(BaseModel):
    """Request model for US company profiles"""

    exchange: USExchange = Field(..., description="US exchange: amex, nasdaq, nyse")
    ticker: str = Field(..., description="Stock ticker symbol (case-sensitive)")


# ============================================================================
# MCP Server Implementation
# ============================================================================


class MCPServer:
    """Core MCP Server implementation"""

    def __init__(self, service: FinmapService | None = None):
        logger.info("Initializing MCP Server...")

        self.tools: dict[str, Tool] = {}
        self.arguments: dict[str, type[BaseModel]] = {}
        self.service = service or FinmapService()

        self._initialize_defaults()
        logger.info(f"MCP Server initialized with {len(self.tools)} tools")

    def _initialize_defaults(self):
        """Register the query tools"""
        self.register_tool(
            "list_exchanges",
            "List exchanges",
            "Return supported exchanges with IDs, names, country, currency, earliest available date, and update frequency.",
            ListExchangesRequest,
        )
        self.register_tool(
            "list_sectors",
            "List sectors",
            "List available business sectors for an exchange on a specific date, including item counts.",
            SnapshotRequest,
        )
        self.register_tool(
            "list_tickers",
            "List tickers by sector",
            "Return company tickers and names for an exchange on a specific date, grouped by sector.",
            ListTickersRequest,
        )
        self.register_tool(
            "search_companies",
            "Search companies",
            "Find companies by partial name or ticker on an exchange and return best matches",
            SearchCompaniesRequest,
        )
        self.register_tool(
            "get_market_overview",
            "Market overview",
            "Get total market cap, volume, value, and performance for an exchange on a specific date with a sector breakdown.",
            SnapshotRequest,
        )
        self.register_tool(
            "get_sectors_overview",
            "Sector performance",
            "Get aggregated performance metrics by sector for an exchange on a specific date.",
            SectorFilterRequest,
        )
        self.register_tool(
            "get_stock_data",
            "Stock data by ticker",
            "Get detailed market data for a specific ticker on an exchange and date, including price, change, volume, value, market cap, and trades.",
            StockDataRequest,
        )
        self.register_tool(
            "rank_stocks",
            "Rank stocks",
            "Rank stocks on an exchange by a chosen metric (marketCap, priceChangePct, volume, value, numTrades) for a specific date with order and limit.",
            RankStocksRequest,
        )
        self.register_tool(
            "get_company_profile",
            "Company profile (US)",
            "Get business description, industry, and background for a US-listed company by ticker.",
            CompanyProfileRequest,
        )

    def register_tool(self, name: str, title: str, description: str, arguments: type[BaseModel]):
        """Register a tool whose input schema is derived from its argument model"""
        schema = arguments.model_json_schema()
        self.tools[name] = Tool(
            name=name,
            title=title,
            description=description,
            inputSchema=ToolInputSchema(
                properties=schema.get("properties", {}),
                required=schema.get("required", []),
            ),
        )
        self.arguments[name] = arguments

    @staticmethod
    def _error(message: str) -> ToolCallResponse:
        return ToolCallResponse(content=[{"type": "text", "text": message}], isError=True)

    @staticmethod
    def _document(document: dict[str, Any]) -> ToolCallResponse:
        text = json.dumps(document, indent=2, ensure_ascii=False)
        return ToolCallResponse(content=[{"type": "text", "text": text, "data": document}], isError=False)

    def execute_tool(self, name: str, arguments: dict[str, Any]) -> ToolCallResponse:
        """Execute a tool by name"""
        logger.info(f"Executing tool: {name}")
        logger.debug(f"Tool arguments: {arguments}")

        if name not in self.tools:
            logger.warning(f"Tool not found: {name}")
            return self._error(format_error(f"Tool '{name}' not found"))

        try:
            args = self.arguments[name].model_validate(arguments)
        except ValidationError as e:
            logger.warning(f"{name}: invalid arguments: {e}")
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}" for err in e.errors()
            )
            return self._error(format_error(f"Invalid arguments for {name}: {details}"))

        try:
            return self._document(self._dispatch(name, args))

        except (FinmapError, ValueError) as e:
            logger.warning(f"{name} failed: {e}")
            return self._error(format_error(e))
        except Exception as e:
            logger.error(f"Error executing tool '{name}': {e}", exc_info=True)
            return self._error(format_error(e))

    def _dispatch(self, name: str, args: Any) -> dict[str, Any]:
        service = self.service

        if name == "list_exchanges":
            return service.list_exchanges()

        if name == "get_company_profile":
            return service.get_company_profile(args.exchange, args.ticker)

        exchange = args.stockExchange
        date_parts = {"year": args.year, "month": args.month, "day": args.day}

        if name == "list_sectors":
            return service.list_sectors(exchange, **date_parts)

        if name == "list_tickers":
            return service.list_tickers(
                exchange, **date_parts, sector=args.sector, english_names=args.englishNames
            )

        if name == "search_companies":
            return service.search_companies(exchange, args.query, **date_parts, limit=args.limit)

        if name == "get_market_overview":
            return service.get_market_overview(exchange, **date_parts)

        if name == "get_sectors_overview":
            return service.get_sectors_overview(exchange, **date_parts, sector=args.sector)

        if name == "get_stock_data":
            return service.get_stock_data(exchange, args.ticker, **date_parts)

        if name == "rank_stocks":
            return service.rank_stocks(
                exchange,
                args.sortBy,
                **date_parts,
                order=args.order,
                limit=args.limit,
                sector=args.sector,
                ticker=args.ticker,
            )

        raise ValueError(f"Tool '{name}' has no handler")


# Initialize MCP Server
mcp_server = MCPServer()

# ============================================================================
# API Endpoints
# ============================================================================


@app.get("/")
async def root():
    """Root endpoint with server information"""
    return {
        "name": const.SERVER_NAME,
        "version": const.VERSION,
        "protocolVersion": "2024-11-05",
        "description": "MCP server for daily stock exchange snapshots: sectors, tickers, search, overviews, rankings and US company profiles",
        "info": const.INFO,
        "capabilities": {
            "tools": {"available": len(mcp_server.tools), "list": list(mcp_server.tools.keys())},
        },
    }


@app.get("/tools/list", response_model=dict[str, list[Tool]])
async def list_tools():
    """List all available tools"""
    return {"tools": list(mcp_server.tools.values())}


@app.post("/tools/call", response_model=ToolCallResponse)
def call_tool(request: ToolCallRequest):
    """Execute a tool"""
    return mcp_server.execute_tool(request.name, request.arguments)


@app.get("/health")
async def health_check():
    """Health check endpoint with startup time"""
    uptime = None
    if SERVER_START_TIME:
        uptime_delta = datetime.now() - datetime.strptime(SERVER_START_TIME, "%Y-%m-%d %H:%M:%S")
        uptime = str(uptime_delta).split(".")[0]  # Remove microseconds

    return {
        "status": "healthy",
        "startup_time": SERVER_START_TIME,
        "uptime": uptime,
        "current_time": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }


# ============================================================================
# Individual Tool Endpoints (OpenAPI-compatible wrappers)
# ============================================================================


@app.post("/tools/list_exchanges", response_model=ToolCallResponse)
def list_exchanges_endpoint():
    """EXCHANGES: Supported exchanges with currency, earliest available date and update frequency."""
    return mcp_server.execute_tool("list_exchanges", {})


@app.post("/tools/list_sectors", response_model=ToolCallResponse)
def list_sectors_endpoint(request: SnapshotRequest):
    """SECTORS: Business sectors of an exchange on a date with the number of securities in each."""
    return mcp_server.execute_tool("list_sectors", request.model_dump(exclude_none=True))


@app.post("/tools/list_tickers", response_model=ToolCallResponse)
def list_tickers_endpoint(request: ListTickersRequest):
    """TICKERS: Tickers and company names grouped by sector, sorted by ticker within each sector."""
    return mcp_server.execute_tool("list_tickers", request.model_dump(exclude_none=True))


@app.post("/tools/search_companies", response_model=ToolCallResponse)
def search_companies_endpoint(request: SearchCompaniesRequest):
    """SEARCH: Best ticker/name matches for a partial ticker or company name."""
    return mcp_server.execute_tool("search_companies", request.model_dump(exclude_none=True))


@app.post("/tools/get_market_overview", response_model=ToolCallResponse)
def get_market_overview_endpoint(request: SnapshotRequest):
    """MARKET OVERVIEW: Whole-market totals plus the per-sector breakdown."""
    return mcp_server.execute_tool("get_market_overview", request.model_dump(exclude_none=True))


@app.post("/tools/get_sectors_overview", response_model=ToolCallResponse)
def get_sectors_overview_endpoint(request: SectorFilterRequest):
    """SECTOR PERFORMANCE: Aggregated metrics per sector, optionally for one sector only."""
    return mcp_server.execute_tool("get_sectors_overview", request.model_dump(exclude_none=True))


@app.post("/tools/get_stock_data", response_model=ToolCallResponse)
def get_stock_data_endpoint(request: StockDataRequest):
    """STOCK DATA: Prices, change, volume, value, market cap and trades for one ticker."""
    return mcp_server.execute_tool("get_stock_data", request.model_dump(exclude_none=True))


@app.post("/tools/rank_stocks", response_model=ToolCallResponse)
def rank_stocks_endpoint(request: RankStocksRequest):
    """RANKING: Top stocks by market cap, price change, value, volume or number of trades."""
    return mcp_server.execute_tool("rank_stocks", request.model_dump(exclude_none=True))


@app.post("/tools/get_company_profile", response_model=ToolCallResponse)
def get_company_profile_endpoint(request: CompanyProfileRequest):
    """COMPANY PROFILE: Business description and background for a US-listed company."""
    return mcp_server.execute_tool("get_company_profile", request.model_dump(exclude_none=True))


# ============================================================================
# Main Entry Point
# ============================================================================


def run(host: str = const.API_HOST, port: int = const.API_PORT):
    """Start the API server (blocking)"""
    global SERVER_START_TIME
    SERVER_START_TIME = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    logger.info("=" * 60)
    logger.info("Starting Finmap MCP Server")
    logger.info(f"STARTUP TIME: {SERVER_START_TIME}")
    logger.info(f"Logging to: {const.API_LOG_FILE}")
    logger.info(f"Server will run on: http://{host}:{port}")
    logger.info("=" * 60)

    try:
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error(f"Server crashed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    run()
