"""
Shared fixtures.

- protector: a FernetSecretProtector with a fixed identity and a low PBKDF2
  iteration count so key derivation stays fast.
- credential: an in-memory PAT credential.
- http: builds httpx clients backed by MockTransport and records every
  request they send.
"""
import httpx
import pytest

from ado_history.credentials import Credential
from ado_history.protect import FernetSecretProtector

TEST_PAT = "pat-1234567890"


@pytest.fixture
def protector():
    return FernetSecretProtector(identity="alice@machine-1", iterations=1_000)


@pytest.fixture
def credential():
    return Credential.from_token(TEST_PAT)


class FakeAzureDevOps:
    def __init__(self):
        self.sent = []

    def client(self, status=200, json=None, text=None, headers=None, error=None):
        def handler(request):
            self.sent.append(request)
            if error is not None:
                raise error(f"simulated {error.__name__}", request=request)
            if json is not None:
                return httpx.Response(status, json=json, headers=headers)
            return httpx.Response(status, text=text or "", headers=headers)

        return httpx.Client(transport=httpx.MockTransport(handler))

    @property
    def last(self):
        return self.sent[-1]


@pytest.fixture
def http():
    return FakeAzureDevOps()


@pytest.fixture
def tool_fn():
    """Unwraps the plain function behind an @mcp.tool() registration."""
    return lambda tool: getattr(tool, "fn", tool)
