"""Shared plumbing for MCP tools."""
from ..config import ADO_PAT, ADO_TOKEN_FILE
from ..credentials import Credential, build_credential


def server_credential() -> Credential:
    """
    Build the credential for one tool call from ADO_PAT or ADO_TOKEN_FILE.

    A fresh Credential is built per call; nothing is cached between tool calls.
    """
    return build_credential(token=ADO_PAT or None, token_file=ADO_TOKEN_FILE or None)
