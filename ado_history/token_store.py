"""Write an encrypted personal access token to disk."""
import argparse
import logging
import os
from pathlib import Path
from typing import Optional, Union

from .credentials import Prompt, prompt_secret
from .errors import InvalidArgumentError
from .protect import SecretProtector, default_protector

logger = logging.getLogger(__name__)


def create_token_file(
        path: Union[str, Path],
        *,
        protector: Optional[SecretProtector] = None,
        prompt: Optional[Prompt] = None,
) -> None:
    """
    Prompt for a PAT and store it encrypted at ``path``.

    The file can only be decrypted by the same OS user on the same machine
    (with the default protector). Raises OSError if ``path`` is not writable.
    """
    path = Path(path)
    protector = protector or default_protector()

    blob = protector.protect(_read_secret(prompt))

    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(blob)

    logger.info("Stored encrypted token in %s", path)


def _read_secret(prompt: Optional[Prompt]) -> str:
    secret = (prompt or prompt_secret)()
    if not secret:
        raise InvalidArgumentError("No personal access token was entered")
    return secret


def main(argv=None) -> None:
    """Entry point for ``ado-history-token``."""
    parser = argparse.ArgumentParser(
        description="Store an Azure DevOps personal access token encrypted for this user and machine.",
    )
    parser.add_argument("path", help="Where to write the encrypted token file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    create_token_file(args.path)


if __name__ == "__main__":
    main()
