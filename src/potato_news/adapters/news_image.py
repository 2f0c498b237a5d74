"""
Downloads the image attached to a news story so the studio can show it under
the anchor. Any failure just means the video goes out without one.
"""

import hashlib
import io
import os
from collections import OrderedDict
from typing import Optional

import requests
from PIL import Image, ImageEnhance, ImageFilter, ImageOps

from potato_news import config
from potato_news.domain.models import NewsItem
from potato_news.ports.interfaces import INewsImageSource
from potato_news.utils.file_manager import clean_directory

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
MIN_IMAGE_BYTES = 1000
PROCESSED_SIZE = (1280, 720)
IMAGE_SUFFIXES = (".jpg", ".png")


class NewsImageFetcher(INewsImageSource):
    """requests-based downloader with an in-process cache keyed by URL."""

    def __init__(
        self,
        images_dir: Optional[str] = None,
        timeout: float = config.HTTP_TIMEOUT,
        max_cache_entries: int = config.IMAGE_CACHE_MAX_ENTRIES,
        session: Optional[requests.Session] = None,
    ):
        self.images_dir = images_dir or config.IMAGES_DIR
        self.timeout = timeout
        self.max_cache_entries = max_cache_entries
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self._cache: "OrderedDict[str, str]" = OrderedDict()
        os.makedirs(self.images_dir, exist_ok=True)

    @staticmethod
    def url_hash(url: str) -> str:
        return hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]

    def fetch_news_image(self, news_item: NewsItem) -> Optional[str]:
        """Local path of the story's processed image, or None."""
        url = (news_item or {}).get("image_url")
        if not url:
            print("  ℹ️  News item has no image URL, skipping image")
            return None

        key = self.url_hash(url)
        cached = self._cache.get(key)
        if cached and os.path.exists(cached):
            self._cache.move_to_end(key)
            print(f"  🖼️  Using cached image: {cached}")
            return cached

        image_path = os.path.join(self.images_dir, f"news_{key}.jpg")
        if not os.path.exists(image_path):
            print(f"  🖼️  Downloading news image: {url[:80]}")
            try:
                response = self.session.get(url, timeout=self.timeout)
                response.raise_for_status()
            except requests.exceptions.Timeout:
                print(f"  ⚠️  Image download timed out after {self.timeout:.0f}s: {url[:80]}")
                return None
            except requests.exceptions.RequestException as e:
                print(f"  ⚠️  Image download failed: {e}")
                return None

            if len(response.content) < MIN_IMAGE_BYTES:
                print(f"  ⚠️  Downloaded image too small ({len(response.content)} bytes), skipping")
                return None
            try:
                self._process_image(response.content, image_path)
            except (OSError, ValueError) as e:
                print(f"  ⚠️  Could not process image from {url[:80]}: {e}")
                return None
            print(f"  ✅ Saved news image: {image_path} ({len(response.content) // 1024} KB)")

        self._remember(key, image_path)
        return image_path

    def _process_image(self, data: bytes, output_path: str) -> None:
        with Image.open(io.BytesIO(data)) as img:
            img = ImageOps.fit(img.convert("RGB"), PROCESSED_SIZE, Image.Resampling.LANCZOS)
        img = img.filter(ImageFilter.SHARPEN)
        img = ImageEnhance.Brightness(img).enhance(1.05)
        img = ImageEnhance.Color(img).enhance(1.2)
        img.save(output_path, "JPEG", quality=90)

    def _remember(self, key: str, path: str) -> None:
        self._cache[key] = path
        self._cache.move_to_end(key)
        while len(self._cache) > self.max_cache_entries:
            self._cache.popitem(last=False)

    def cleanup_old_images(self, max_age_hours: float = config.FRAME_RETENTION_HOURS) -> int:
        print(f"  🧹 Cleaning up images older than {max_age_hours} hours")
        return clean_directory(self.images_dir, max_age_hours, IMAGE_SUFFIXES)
