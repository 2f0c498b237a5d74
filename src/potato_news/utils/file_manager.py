"""Small filesystem helpers: ids, output filenames, JSON files, retention sweeps."""

import json
import os
import re
import secrets
import shutil
import time
from datetime import datetime
from typing import Any, Optional

from potato_news.domain.models import GeneratedContent, NewsItem


def generate_id() -> str:
    """16 hex characters."""
    return secrets.token_hex(8)


def slugify(text: str, max_length: int = 40) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")
    return slug[:max_length].rstrip("-") or "untitled"


def format_video_filename(news_item: NewsItem, content: Optional[GeneratedContent] = None) -> str:
    """<date>_<category>_<slug>_<id8>.mp4 for a news story."""
    date = datetime.now().strftime("%Y%m%d")
    category = slugify(news_item.get("category", "news"), 20)
    slug = slugify(news_item.get("title", ""))
    short_id = ((content or {}).get("id") or news_item.get("id") or generate_id())[:8]
    return f"{date}_{category}_{slug}_{short_id}.mp4"


def save_json(data: Any, directory: str, filename: str) -> str:
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, filename)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return file_path


def load_json(file_path: str) -> Any:
    with open(file_path, "r", encoding="utf-8") as f:
        return json.load(f)


def clean_directory(directory: str, age_hours: float = 24, suffixes: Optional[tuple] = None) -> int:
    """
    Remove entries in `directory` last modified more than `age_hours` ago.
    Sub-directories (frame sequences) are removed whole. `suffixes` limits the
    sweep to files with those extensions. Returns the number of entries removed.
    """
    if not os.path.isdir(directory):
        return 0

    cutoff = time.time() - age_hours * 3600
    removed = 0
    for name in os.listdir(directory):
        path = os.path.join(directory, name)
        try:
            if os.path.getmtime(path) >= cutoff:
                continue
            if os.path.isdir(path):
                if suffixes:
                    continue
                shutil.rmtree(path)
            else:
                if suffixes and not name.lower().endswith(suffixes):
                    continue
                os.remove(path)
            removed += 1
        except OSError as e:
            print(f"  ⚠️  Could not remove {path}: {e}")

    if removed:
        print(f"  🧹 Removed {removed} old entries from {directory}")
    return removed
