"""
Utility functions for the todos browser.
Config loading and typed accessors with defaults.
"""

from pathlib import Path
from functools import lru_cache

import yaml


# --- Configuration Loading ---

@lru_cache(maxsize=1)
def load_config() -> dict:
    """Load app configuration from YAML file.

    Cached for the process lifetime. Restart the app to pick up YAML changes.
    """
    config_path = Path(__file__).parent / "config" / "app.yaml"
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def get_api_config() -> dict:
    """Get todos API settings (base URL, path, timeout, retries)."""
    config = load_config()
    api = config.get("api", {})
    return {
        "base_url": api.get("base_url", "https://jsonplaceholder.typicode.com"),
        "todos_path": api.get("todos_path", "/todos"),
        "timeout_seconds": float(api.get("timeout_seconds", 30)),
        "max_retries": int(api.get("max_retries", 2)),
        "retry_delay_seconds": float(api.get("retry_delay_seconds", 1.0)),
    }


def get_highlight_markup() -> tuple[str, str]:
    """Get (open_tag, close_tag) for search highlight spans."""
    config = load_config()
    highlight = config.get("highlight", {})
    tag = highlight.get("tag", "mark")
    background = highlight.get("background")
    open_tag = f'<{tag} style="background: {background};">' if background else f"<{tag}>"
    return open_tag, f"</{tag}>"


def get_page_config() -> dict:
    """Get page title, icon and caption."""
    config = load_config()
    page = config.get("page", {})
    return {
        "title": page.get("title", "Todos"),
        "icon": page.get("icon", "☑"),
        "caption": page.get("caption"),
    }
