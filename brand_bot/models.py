from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .config import DEFAULT_BRAND_COLOR, DEFAULT_INDUSTRY
from .utils.color import normalize_hex_color


class LogoSource(str, Enum):
    """Strategy that produced a logo candidate"""
    LOGO_SERVICE = "logo_service"
    NAVIGATION_IMAGE = "navigation_image"
    LOGO_ATTRIBUTE = "logo_attribute"
    STRUCTURED_DATA = "structured_data"
    INLINE_SVG = "inline_svg"
    TOUCH_ICON = "touch_icon"
    ICON_LINK = "icon_link"
    COMMON_PATH = "common_path"
    OPEN_GRAPH = "open_graph"
    TWITTER_CARD = "twitter_card"
    SVG_REFERENCE = "svg_reference"
    PNG_REFERENCE = "png_reference"
    FAVICON_SERVICE = "favicon_service"


@dataclass(frozen=True)
class CandidateLogo:
    url: str
    source: LogoSource


@dataclass(frozen=True)
class KnownBrandEntry:
    domain: str
    logo_url: Optional[str] = None
    brand_color: Optional[str] = None
    industry: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.logo_url and self.brand_color)


@dataclass
class ExtractionResult:
    logo_url: str
    brand_color: str
    source_url: str
    industry: str
    alternative_logo_urls: List[str] = field(default_factory=list)

    def to_record(self) -> dict:
        """
        Convert to the cache store layout

        Returns:
            dict: Record with the `website_data` column names
        """
        return {
            'url': self.source_url,
            'logo': self.logo_url,
            'brand_color': self.brand_color,
            'industry': self.industry,
            'alternativeLogos': list(self.alternative_logo_urls),
        }

    @classmethod
    def from_record(cls, record: dict) -> "ExtractionResult":
        # Older records may hold raw CSS values
        brand_color = normalize_hex_color(record.get('brand_color')) or DEFAULT_BRAND_COLOR
        return cls(
            logo_url=record['logo'],
            brand_color=brand_color,
            source_url=record['url'],
            industry=record.get('industry') or DEFAULT_INDUSTRY,
            alternative_logo_urls=list(record.get('alternativeLogos') or []),
        )
