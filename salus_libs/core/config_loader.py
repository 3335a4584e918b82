import json
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import dotenv_values

from .project_paths import get_project_root

_DOTENV_CACHE: Dict[Path, Dict[str, str]] = {}


def load_root_config() -> Dict[str, Any]:
    """
    加载项目根目录 `config.json`（不依赖工作目录）。

    注意：
    - 配置优先级应由调用方实现：环境变量 > .env > config.json
    """
    return load_json(get_project_root() / "config.json")


def load_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_dotenv_vars(env_path: Optional[Path] = None) -> Dict[str, str]:
    """
    Key/value pairs of the project `.env`, without touching `os.environ`.

    Empty values are dropped. Results are cached per file.
    """
    path = env_path or (get_project_root() / ".env")
    if path in _DOTENV_CACHE:
        return _DOTENV_CACHE[path]

    values: Dict[str, str] = {}
    if path.exists():
        for key, val in dotenv_values(path).items():
            if val is not None and val.strip():
                values[key] = val.strip()

    _DOTENV_CACHE[path] = values
    return values
