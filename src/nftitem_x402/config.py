"""Environment and env-file configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values, load_dotenv

from .constants import API_BASE, MNEMONIC_ENV, PRIVATE_KEY_ENV
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    api_base: str = API_BASE
    private_key: Optional[str] = None
    mnemonic: Optional[str] = None

    def __repr__(self) -> str:
        # Keep secrets out of tracebacks and logs.
        return (
            f"Settings(api_base={self.api_base!r}, "
            f"private_key={'<set>' if self.private_key else None}, "
            f"mnemonic={'<set>' if self.mnemonic else None})"
        )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_settings(
    env_file: Optional[Union[str, "os.PathLike[str]"]] = None,
    environ: Optional[Mapping[str, str]] = None,
    api_base: str = API_BASE,
) -> Settings:
    """Build ``Settings`` from the process environment.

    When ``env_file`` is given it is loaded first. Variables already present in
    the environment take precedence over the file. With an explicit
    ``environ`` mapping the file is merged into a copy instead of being loaded
    into ``os.environ``.
    """
    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ConfigurationError(f"env file not found: {path}")
        logger.debug("loading env file %s", path)
        if environ is None:
            load_dotenv(path)
        else:
            file_values = {k: v for k, v in dotenv_values(path).items() if v is not None}
            environ = {**file_values, **environ}

    env = os.environ if environ is None else environ
    return Settings(
        api_base=api_base,
        private_key=_clean(env.get(PRIVATE_KEY_ENV)),
        mnemonic=_clean(env.get(MNEMONIC_ENV)),
    )
