# sandbox_io/config.py
from pathlib import Path
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Game root (None -> current working directory at first use)
    GAME_ROOT: Path | None = None

    # Save-data discovery
    DOCUMENTS_DIR: Path | None = None                 # None -> platform documents dir
    SAVE_DATA_SUBPATH: str = "My Games/Into The Breach"
    COMPAT_SAVE_DATA_PATH: str = "../../steamapps/compatdata/590380/pfx"  # Proton prefix
    FALLBACK_SAVE_DATA_PATH: str = "user"
    MARKER_FILE_NAME: str = "io_test.txt"

    # HTTP MCP transport
    MCP_HTTP_ENABLED: bool = True
    MCP_HTTP_HOST: str = "127.0.0.1"
    MCP_HTTP_PORT: int = 8080
    MCP_HTTP_PATH: str = "/mcp"

    # Security: Bearer token and allowed origins
    MCP_HTTP_BEARER_TOKEN: str = "change-me"         # set in .env for prod
    MCP_HTTP_ALLOWED_ORIGINS: str = "http://localhost, http://127.0.0.1"
    MCP_HTTP_ALLOW_NO_ORIGIN: bool = True            # allow non-browser clients

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
