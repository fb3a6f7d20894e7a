"""Azure DevOps history client: PAT auth, request dispatch and history queries."""
from .client import ApiResponse, call_api, call_api_raw, encode_auth, prepare_request
from .credentials import (
    AuthSource,
    Credential,
    InteractiveSource,
    TokenFileSource,
    TokenSource,
    build_credential,
)
from .errors import (
    AdoError,
    AuthError,
    DecryptError,
    InvalidArgumentError,
    NotFoundError,
    RequestError,
)
from .history import (
    ResultGroupBy,
    get_changeset,
    get_changeset_changes,
    get_changeset_history,
    get_test_history,
)
from .protect import FernetSecretProtector, SecretProtector
from .token_store import create_token_file
from .utils.helpers import base_uri
