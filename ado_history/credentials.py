"""Build PAT credentials from a plaintext token, a token file, or a prompt."""
import getpass
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from .errors import InvalidArgumentError, NotFoundError
from .protect import SecretProtector, default_protector

logger = logging.getLogger(__name__)

# Azure DevOps ignores the user name in PAT basic auth
IDENTITY = ""
PROMPT_LABEL = "personal access token: "

Prompt = Callable[[], str]


class Secret:
    """Holds a sensitive string without exposing it through repr/str."""

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    def get_secret_value(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return "Secret('**********')"

    __str__ = __repr__


@dataclass(frozen=True)
class Credential:
    """An (identity, secret) pair for a single invocation."""

    secret: Secret = field(repr=False)
    identity: str = IDENTITY

    @classmethod
    def from_token(cls, token: str) -> "Credential":
        return cls(secret=Secret(token))

    @contextmanager
    def reveal(self) -> Iterator[str]:
        """Expose the plaintext token for the duration of the block."""
        plaintext = self.secret.get_secret_value()
        try:
            yield plaintext
        finally:
            del plaintext


@dataclass(frozen=True)
class TokenSource:
    token: str = field(repr=False)


@dataclass(frozen=True)
class TokenFileSource:
    path: Path


@dataclass(frozen=True)
class InteractiveSource:
    pass


AuthSource = Union[TokenSource, TokenFileSource, InteractiveSource]


def prompt_secret() -> str:
    """Ask for the PAT on the terminal without echoing it."""
    return getpass.getpass(PROMPT_LABEL)


def resolve_source(
        token: Optional[str] = None,
        token_file: Optional[Union[str, Path]] = None,
) -> AuthSource:
    """Map the mutually exclusive ``token`` / ``token_file`` inputs to an AuthSource."""
    if token is not None and token_file is not None:
        raise InvalidArgumentError("Pass either 'token' or 'token_file', not both")
    if token is not None:
        if not token:
            raise InvalidArgumentError("'token' is empty")
        return TokenSource(token)
    if token_file is not None:
        if not str(token_file):
            raise InvalidArgumentError("'token_file' is empty")
        return TokenFileSource(Path(token_file))
    return InteractiveSource()


def read_token_file(path: Union[str, Path], protector: Optional[SecretProtector] = None) -> str:
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"Token file not found or not a regular file: {path}")

    protector = protector or default_protector()
    return protector.unprotect(path.read_bytes())


def credential_from_source(
        source: AuthSource,
        *,
        protector: Optional[SecretProtector] = None,
        prompt: Optional[Prompt] = None,
) -> Credential:
    if isinstance(source, TokenSource):
        return Credential.from_token(source.token)

    if isinstance(source, TokenFileSource):
        logger.debug("Reading token file %s", source.path)
        return Credential.from_token(read_token_file(source.path, protector))

    if isinstance(source, InteractiveSource):
        secret = (prompt or prompt_secret)()
        if not secret:
            raise InvalidArgumentError("No personal access token was entered")
        return Credential.from_token(secret)

    raise InvalidArgumentError(f"Unsupported credential source: {source!r}")


def build_credential(
        token: Optional[str] = None,
        token_file: Optional[Union[str, Path]] = None,
        *,
        protector: Optional[SecretProtector] = None,
        prompt: Optional[Prompt] = None,
) -> Credential:
    """
    Create a Credential from exactly one source.

    - token: plaintext PAT, wrapped as-is.
    - token_file: file written by ``create_token_file``; decrypted with
      ``protector`` (user/machine bound by default).
    - neither: prompts for the token without echo.

    Raises:
        InvalidArgumentError: both ``token`` and ``token_file`` were given,
            or one of them was given but empty.
        NotFoundError: ``token_file`` is missing or not a regular file.
        DecryptError: ``token_file`` cannot be decrypted here.
    """
    source = resolve_source(token, token_file)
    return credential_from_source(source, protector=protector, prompt=prompt)
