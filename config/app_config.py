"""
Application Configuration

Values come from the environment; a local `.env` file is loaded first.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from dotenv import load_dotenv

load_dotenv()  # Automatically loads from `.env`


class ClassifyMode(str, Enum):
    """How /api/classify picks the service and classifier ids"""
    FIXED = "fixed"         # configured classifier ids
    REQUEST = "request"     # classifier_id from the request, keywords when absent
    KEYWORDS = "keywords"   # keyword-extraction service only


def _split_ids(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class AppConfig:
    """Runtime configuration passed to the application factory"""

    # ============================================
    # Visual Recognition (classifier training and scoring)
    # ============================================
    visual_recognition_url: str = "https://gateway.watsonplatform.net/visual-recognition-beta/api"
    visual_recognition_username: str = "<username>"
    visual_recognition_password: str = "<password>"
    visual_recognition_version_date: str = "2015-12-02"

    # ============================================
    # Alchemy Vision (keyword extraction)
    # ============================================
    alchemy_url: str = "https://gateway-a.watsonplatform.net/calls"
    alchemy_key: str = "<alchemy-key>"

    # ============================================
    # Classification / training behaviour
    # ============================================
    classifier_ids: List[str] = field(default_factory=lambda: ["Test01_1000695352"])
    classify_mode: ClassifyMode = ClassifyMode.FIXED
    min_training_images: int = 10
    classifier_ttl_seconds: float = 0
    remote_timeout_seconds: float = 60.0

    # ============================================
    # Filesystem
    # ============================================
    uploads_dir: str = "./uploads"
    static_dir: str = "./public"
    datasets_path: str = "./public/data/datasets.json"

    # ============================================
    # Server / logging
    # ============================================
    port: int = 3000
    logging_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from environment variables"""
        defaults = cls()
        return cls(
            visual_recognition_url=os.getenv("VISUAL_RECOGNITION_URL", defaults.visual_recognition_url),
            visual_recognition_username=os.getenv("VISUAL_RECOGNITION_USERNAME", defaults.visual_recognition_username),
            visual_recognition_password=os.getenv("VISUAL_RECOGNITION_PASSWORD", defaults.visual_recognition_password),
            visual_recognition_version_date=os.getenv(
                "VISUAL_RECOGNITION_VERSION_DATE", defaults.visual_recognition_version_date
            ),
            alchemy_url=os.getenv("ALCHEMY_URL", defaults.alchemy_url),
            alchemy_key=os.getenv("ALCHEMY_KEY", defaults.alchemy_key),
            classifier_ids=_split_ids(os.getenv("CLASSIFIER_IDS", ",".join(defaults.classifier_ids))),
            classify_mode=ClassifyMode(os.getenv("CLASSIFY_MODE", defaults.classify_mode.value).lower()),
            min_training_images=int(os.getenv("MIN_TRAINING_IMAGES", str(defaults.min_training_images))),
            classifier_ttl_seconds=float(os.getenv("CLASSIFIER_TTL_SECONDS", str(defaults.classifier_ttl_seconds))),
            remote_timeout_seconds=float(os.getenv("REMOTE_TIMEOUT_SECONDS", str(defaults.remote_timeout_seconds))),
            uploads_dir=os.getenv("UPLOADS_DIR", defaults.uploads_dir),
            static_dir=os.getenv("STATIC_DIR", defaults.static_dir),
            datasets_path=os.getenv("DATASETS_PATH", defaults.datasets_path),
            port=int(os.getenv("VCAP_APP_PORT") or os.getenv("PORT") or defaults.port),
            logging_level=os.getenv("LOGGING_LEVEL", defaults.logging_level).upper(),
        )


# ============================================
# Display Configuration
# ============================================

def print_config(config: AppConfig):
    """Print current configuration (for debugging)"""
    print()
    print("=" * 60)
    print("Visual Recognition Demo Configuration")
    print("=" * 60)
    print(f"Visual Recognition URL: {config.visual_recognition_url}")
    print(f"Version Date: {config.visual_recognition_version_date}")
    print(f"Alchemy URL: {config.alchemy_url}")
    print(f"Classify Mode: {config.classify_mode.value}")
    print(f"Classifier IDs: {', '.join(config.classifier_ids)}")
    print(f"Uploads Dir: {config.uploads_dir}")
    print(f"Static Dir: {config.static_dir}")
    print(f"Port: {config.port}")
    print(f"Logging Level: {config.logging_level}")
    print("=" * 60)
    print()
