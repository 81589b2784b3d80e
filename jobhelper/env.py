import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_STORE_PATH = "data/store.json"


def load_env() -> None:
    """Load .env from the working directory if present.

    Variables already set in the environment win over the file.
    """
    env_path = Path.cwd() / ".env"
    if not env_path.exists():
        return
    load_dotenv(dotenv_path=env_path, override=False)


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()
