import os
import random
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Set

from salus_libs.core.config_loader import load_dotenv_vars


@dataclass
class APIKeyManager:
    """
    API Key 管理器（原子能力）

    - several keys, read from the environment and the project `.env`
    - random or first-available selection
    - failed keys are skipped until every key has failed once
    """

    key_env_vars: List[str] = field(default_factory=lambda: ["GEMINI_API_KEY", "GOOGLE_API_KEY"])
    keys: List[str] = field(default_factory=list)
    failed_keys: Set[str] = field(default_factory=set)
    load_environment: bool = True

    def __post_init__(self) -> None:
        self._lock = threading.Lock()
        loaded: List[str] = []
        if self.load_environment:
            dotenv = load_dotenv_vars()
            for name in self.key_env_vars:
                loaded.append((os.getenv(name) or "").strip())
                loaded.append(dotenv.get(name, "").strip())
        loaded.extend(k.strip() for k in self.keys if k)
        # 去重（保持顺序）
        self.keys = list(dict.fromkeys(k for k in loaded if k))

    def get_key(self, random_select: bool = True) -> Optional[str]:
        with self._lock:
            available = [k for k in self.keys if k not in self.failed_keys]
            if not available:
                self.failed_keys.clear()
                available = list(self.keys)
            if not available:
                return None
            return random.choice(available) if random_select else available[0]

    def mark_failed(self, key: str) -> None:
        with self._lock:
            if key in self.keys:
                self.failed_keys.add(key)

    def available_count(self) -> int:
        with self._lock:
            return len([k for k in self.keys if k not in self.failed_keys])

    def has_keys(self) -> bool:
        return bool(self.keys)


_default_manager: Optional[APIKeyManager] = None


def get_default_api_key_manager() -> APIKeyManager:
    global _default_manager
    if _default_manager is None:
        _default_manager = APIKeyManager()
    return _default_manager
