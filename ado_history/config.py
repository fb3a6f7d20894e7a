"""Configuration management for the Azure DevOps history MCP server."""
import os

from dotenv import load_dotenv
from fastmcp import FastMCP

from .utils.helpers import DEFAULT_HOST

load_dotenv()

# Global MCP instance - accessible everywhere
mcp = FastMCP("azure-devops-history")

# Azure DevOps configuration
ADO_HOST = os.getenv("ADO_HOST", DEFAULT_HOST)
ADO_ORG = os.getenv("ADO_ORG")
ADO_PROJECT = os.getenv("ADO_PROJECT")
ADO_PAT = os.getenv("ADO_PAT")  # PAT with Code (read) / Test Management (read)
ADO_TOKEN_FILE = os.getenv("ADO_TOKEN_FILE")  # written by ado-history-token
ADO_DRY_RUN = os.getenv("ADO_DRY_RUN", "").strip().lower() in ("1", "true", "yes", "on")
ADO_LOG_LEVEL = os.getenv("ADO_LOG_LEVEL", "INFO").upper()


def require_settings() -> None:
    """Stop the server when the connection settings are incomplete."""
    if not all([ADO_ORG, ADO_PROJECT]) or not (ADO_PAT or ADO_TOKEN_FILE):
        raise SystemExit("Missing env vars: ADO_ORG / ADO_PROJECT / ADO_PAT or ADO_TOKEN_FILE")
    if ADO_PAT and ADO_TOKEN_FILE:
        raise SystemExit("Set only one of ADO_PAT / ADO_TOKEN_FILE")
