import json
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

# Settings file in the home directory; a config.json next to this module
# supplies defaults underneath it.
CONFIG_PATH = Path.home() / ".gnuplot-pipe" / "config.json"
_LOCAL_CONFIG_PATH = Path(__file__).resolve().parent / "config.json"
_user_config: dict = {}


def _read_settings(path: Path) -> dict:
    """Parsed settings from one file; missing or unreadable files count as empty."""
    if not path.is_file():
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}


def _load_config() -> dict:
    return {**_read_settings(_LOCAL_CONFIG_PATH), **_read_settings(CONFIG_PATH)}


def get(key: str, default=None):
    """Look up a setting; nested keys are joined with dots, as in ``get("a.b")``."""
    node = _user_config
    for part in key.split("."):
        if not isinstance(node, dict):
            return default
        node = node.get(part)
    return default if node is None else node


_user_config = _load_config()


# ---- Data directory (log files) ---------------------------------------------

_data_dir: Optional[Path] = None


def get_data_dir() -> Path:
    """Directory holding the log files.

    ``GNUPLOT_PIPE_DIR`` wins over the ``data_dir`` setting; without either
    it is ``~/.gnuplot-pipe``. The first answer is kept for the process.
    """
    global _data_dir
    if _data_dir is not None:
        return _data_dir
    env_val = os.environ.get("GNUPLOT_PIPE_DIR")
    if env_val:
        _data_dir = Path(env_val).expanduser().resolve()
    else:
        configured = get("data_dir")
        if configured:
            _data_dir = Path(configured).expanduser().resolve()
        else:
            _data_dir = Path.home() / ".gnuplot-pipe"
    return _data_dir


def _reset_data_dir() -> None:
    """Forget the remembered data directory; tests point it elsewhere."""
    global _data_dir
    _data_dir = None


# ---- Staging directory --------------------------------------------------------

def get_tmp_dir() -> str:
    """Return the directory where plot data files are staged.

    Resolution order: ``TMPDIR`` env var > ``"tmp_dir"`` config key > ``"."``.
    Not cached, so a changed ``TMPDIR`` is honoured by the next staged file.
    """
    env_val = os.environ.get("TMPDIR")
    if env_val:
        return env_val
    return get("tmp_dir", ".")


# ---- Engine / session config --------------------------------------------------
ENGINE_NAME = get("engine", "gnuplot")              # binary looked up on PATH
DISPLAY_VAR = get("display_var", "DISPLAY")         # advisory check at session open
MAX_TEMP_FILES = int(get("max_temp_files", 64))     # registry holds at most MAX - 1
CLOSE_TIMEOUT = float(get("close_timeout", 5.0))    # seconds to wait for engine exit
TMP_PREFIX = get("tmp_prefix", "gnuplot-i-")
