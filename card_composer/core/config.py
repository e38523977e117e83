"""
Application configuration settings.

Responsibilities:
- Load environment variables (and a local .env file)
- Define paths for the template and optional layout override
- Configure API settings (host, port, upload limit)
- Configure rendering (font, colours, panel style, JPEG quality)

Settings are built once at startup and passed explicitly to the services;
nothing reads the environment at request time.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv
from PIL import ImageColor

from card_composer.models.layout import DEFAULT_LAYOUT, Layout

PROJECT_ROOT = Path(__file__).resolve().parents[2]
TEMPLATE_DIR = PROJECT_ROOT / "assets" / "templates"

# Levels understood by both the logging setup and uvicorn.
LOG_LEVELS = ("critical", "error", "warning", "info", "debug")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}")


def _get_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}")


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    PROJECT_NAME = "Agent Card Composer"

    host: str = "0.0.0.0"
    port: int = 3000

    font_family: str = "DejaVuSans-Bold.ttf"
    jpeg_quality: int = 90
    text_color: str = "#000000"
    text_bg_enabled: bool = True
    text_bg_color: str = "#ffffff"
    text_bg_opacity: float = 0.85  # 0..1
    text_bg_radius: int = 6
    text_bg_padding_ratio: float = 0.6

    template_path: Path = TEMPLATE_DIR / "default.png"
    layout: Layout = DEFAULT_LAYOUT

    max_upload_bytes: int = 20 * 1024 * 1024  # 20MB
    log_level: str = "INFO"
    log_file: Optional[str] = None
    cors_origins: Tuple[str, ...] = field(default=("*",))

    def __post_init__(self):
        if not 0 <= self.jpeg_quality <= 100:
            raise ValueError(f"JPEG_QUALITY must be within 0..100, got {self.jpeg_quality}")
        if not 0.0 <= self.text_bg_opacity <= 1.0:
            raise ValueError(f"TEXT_BG_OPACITY must be within 0..1, got {self.text_bg_opacity}")
        if self.text_bg_radius < 0:
            raise ValueError(f"TEXT_BG_RADIUS must not be negative, got {self.text_bg_radius}")
        if self.text_bg_padding_ratio < 0:
            raise ValueError(
                f"TEXT_BG_PADDING_RATIO must not be negative, got {self.text_bg_padding_ratio}"
            )
        if self.max_upload_bytes <= 0:
            raise ValueError(f"MAX_UPLOAD_BYTES must be positive, got {self.max_upload_bytes}")
        if not 0 < self.port < 65536:
            raise ValueError(f"PORT must be within 1..65535, got {self.port}")
        if self.log_level.lower() not in LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )
        for variable, color in (("TEXT_COLOR", self.text_color), ("TEXT_BG_COLOR", self.text_bg_color)):
            try:
                ImageColor.getrgb(color)
            except ValueError:
                raise ValueError(f"{variable} is not a valid colour: {color!r}")
        # Accept plain strings for convenience; store a Path.
        object.__setattr__(self, "template_path", Path(self.template_path))

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ`` (the .env file is
                only loaded when reading the real environment)

        Returns:
            Immutable Settings instance

        Raises:
            ValueError: If a variable is malformed or out of range
        """
        if env is None:
            load_dotenv()
            env = os.environ

        template_name = env.get("TEMPLATE_NAME") or "default"
        template_path = env.get("TEMPLATE_PATH") or str(TEMPLATE_DIR / f"{template_name}.png")

        layout = DEFAULT_LAYOUT
        layout_path = env.get("LAYOUT_PATH")
        if layout_path:
            try:
                layout = Layout.from_file(layout_path)
            except (OSError, ValueError) as e:
                raise ValueError(f"LAYOUT_PATH {layout_path!r} could not be loaded: {e}")

        origins = tuple(
            origin.strip()
            for origin in (env.get("CORS_ORIGINS") or "*").split(",")
            if origin.strip()
        )

        return cls(
            host=env.get("HOST") or cls.host,
            port=_get_int(env, "PORT", cls.port),
            font_family=env.get("FONT_FAMILY") or cls.font_family,
            jpeg_quality=_get_int(env, "JPEG_QUALITY", cls.jpeg_quality),
            text_color=env.get("TEXT_COLOR") or cls.text_color,
            text_bg_enabled=_get_bool(env, "TEXT_BG_ENABLED", cls.text_bg_enabled),
            text_bg_color=env.get("TEXT_BG_COLOR") or cls.text_bg_color,
            text_bg_opacity=_get_float(env, "TEXT_BG_OPACITY", cls.text_bg_opacity),
            text_bg_radius=_get_int(env, "TEXT_BG_RADIUS", cls.text_bg_radius),
            text_bg_padding_ratio=_get_float(env, "TEXT_BG_PADDING_RATIO", cls.text_bg_padding_ratio),
            template_path=Path(template_path),
            layout=layout,
            max_upload_bytes=_get_int(env, "MAX_UPLOAD_BYTES", cls.max_upload_bytes),
            log_level=env.get("LOG_LEVEL") or cls.log_level,
            log_file=env.get("LOG_FILE") or None,
            cors_origins=origins or ("*",),
        )
