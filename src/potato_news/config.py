import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


# Video Configuration
VIDEO_WIDTH = int(os.getenv("VIDEO_WIDTH", "1080"))
VIDEO_HEIGHT = int(os.getenv("VIDEO_HEIGHT", "1920"))  # Vertical format for Shorts/TikTok (9:16)
FRAME_RATE = int(os.getenv("FRAME_RATE", "30"))
VIDEO_QUALITY = int(os.getenv("VIDEO_QUALITY", "23"))  # x264 CRF, lower = better

# Videos at or below this many seconds of speech use the short-format layout and timings
SHORT_FORMAT_THRESHOLD = float(os.getenv("SHORT_FORMAT_THRESHOLD", "15"))

# Pre-render the 9-step rotation lattice instead of the 5-step one (smoother head movement, 135 sprites)
USE_FINER_ROTATIONS = _env_bool("USE_FINER_ROTATIONS")

# External encoder
FFMPEG_BINARY = os.getenv("FFMPEG_BINARY", "ffmpeg")
FFPROBE_BINARY = os.getenv("FFPROBE_BINARY", "ffprobe")

# Network
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))
IMAGE_CACHE_MAX_ENTRIES = int(os.getenv("IMAGE_CACHE_MAX_ENTRIES", "30"))

# Retention sweep for rendered frames and downloaded images
FRAME_RETENTION_HOURS = float(os.getenv("FRAME_RETENTION_HOURS", "24"))

# Storage directories
STORAGE_PATH = os.getenv("STORAGE_PATH", "storage")
AUDIO_DIR = os.path.join(STORAGE_PATH, "audio")
FRAMES_DIR = os.path.join(STORAGE_PATH, "frames")
VIDEOS_DIR = os.path.join(STORAGE_PATH, "videos")
IMAGES_DIR = os.path.join(STORAGE_PATH, "images")

TEMP_DIR = os.getenv("TEMP_DIR", "temp")
FRAME_LIBRARY_DIR = os.path.join(TEMP_DIR, "frame_library")

# Asset directories (custom artwork; anything missing is drawn programmatically)
ASSETS_PATH = os.getenv("ASSETS_PATH", "assets")
CHARACTER_BODY_DIR = os.path.join(ASSETS_PATH, "character", "body")
CHARACTER_EYES_DIR = os.path.join(ASSETS_PATH, "character", "eyes")
CHARACTER_MOUTH_DIR = os.path.join(ASSETS_PATH, "character", "mouth")
CHARACTER_ACCESSORIES_DIR = os.path.join(ASSETS_PATH, "character", "accessories")
STUDIO_BACKGROUNDS_DIR = os.path.join(ASSETS_PATH, "studio", "backgrounds")
STUDIO_PROPS_DIR = os.path.join(ASSETS_PATH, "studio", "props")
SOUND_EFFECTS_DIR = os.getenv("SOUND_EFFECTS_DIR", os.path.join(ASSETS_PATH, "audio"))


def ensure_storage_dirs() -> None:
    """Create the storage, cache and sound-effect directories if they don't exist."""
    for directory in (AUDIO_DIR, FRAMES_DIR, VIDEOS_DIR, IMAGES_DIR, FRAME_LIBRARY_DIR):
        os.makedirs(directory, exist_ok=True)
    os.makedirs(os.path.join(SOUND_EFFECTS_DIR, "categories"), exist_ok=True)
