""" Server settings read from the environment, with an optional .env file
    loaded through python-dotenv.
"""
import os
import dotenv
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

TRANSPORTS = ("http", "stdio", "sse", "streamable-http")

ENV_HOST = "CALC_MCP_HOST"
ENV_PORT = "CALC_MCP_PORT"
ENV_TRANSPORT = "CALC_MCP_TRANSPORT"
ENV_LOG_LEVEL = "CALC_MCP_LOG_LEVEL"


def parse_port(value) -> int:
    """Return `value` as a TCP port number or raise ValueError."""
    try:
        port = int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Port must be an integer (got {value!r})") from e
    if not 1 <= port <= 65535:
        raise ValueError(f"Port number must be between 1 and 65535 (got {port})")
    return port


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 8085
    transport: str = "http"
    log_level: str = "INFO"

    def __post_init__(self):
        parse_port(self.port)
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Unknown transport {self.transport!r}; expected one of {', '.join(TRANSPORTS)}")

    @classmethod
    def from_env(cls, env_file: Optional[str] = ".env",
                 environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        A `.env` file is loaded first when one can be found; variables already
        set in the process environment win over the file.
        """
        if env_file:
            keys_path = dotenv.find_dotenv(env_file, usecwd=True)
            if keys_path:
                dotenv.load_dotenv(keys_path)
                logger.debug("Loaded settings file %s", keys_path)

        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            host=env.get(ENV_HOST, defaults.host),
            port=parse_port(env.get(ENV_PORT, defaults.port)),
            transport=env.get(ENV_TRANSPORT, defaults.transport).lower(),
            log_level=env.get(ENV_LOG_LEVEL, defaults.log_level).upper(),
        )
