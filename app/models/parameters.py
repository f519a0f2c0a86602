"""Per-item configuration structs for every ScreenshotOne operation."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

Operation = Literal["screenshot", "full_page", "pdf", "scrolling_screenshot", "short_video"]
Source = Literal["url", "html", "markdown"]
ResponseType = Literal["json", "by_format", "empty"]
ImageFormat = Literal["png", "jpg", "webp"]
VideoFormat = Literal["mp4", "gif"]

CACHE_TTL_MIN = 14_400  # 4 hours
CACHE_TTL_MAX = 2_592_000  # 30 days
MIN_SCROLL_DELAY_MS = 400


class ItemParameters(BaseModel):
    """Settings shared by every operation: content source, response type, cache."""

    model_config = ConfigDict(extra="ignore")

    operation: Operation
    source: Source = "url"
    url: Optional[str] = None
    html: Optional[str] = None
    markdown: Optional[str] = None
    response_type: ResponseType = "json"
    cache: bool = False
    cache_ttl: int = Field(
        default=0,
        description="Cache time-to-live in seconds; 0 keeps the remote default.",
    )
    cache_key: str = ""

    @model_validator(mode="after")
    def _check_cache_ttl(self) -> "ItemParameters":
        ttl = self.cache_ttl
        if self.cache and ttl != 0 and not CACHE_TTL_MIN <= ttl <= CACHE_TTL_MAX:
            raise ValueError(
                f"cache_ttl must be 0 or between {CACHE_TTL_MIN} and {CACHE_TTL_MAX} seconds"
            )
        return self

    @property
    def content(self) -> Optional[str]:
        """Value of the content field selected by ``source``."""
        return getattr(self, self.source)


class ScreenshotOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    format: ImageFormat = "jpg"
    full_page: bool = False


class FullPageOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    format: ImageFormat = "jpg"
    full_page_scroll_delay: Optional[int] = Field(
        default=None,
        ge=MIN_SCROLL_DELAY_MS,
        description="Delay between scroll steps in milliseconds.",
    )


class PdfOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    pdf_landscape: bool = False
    pdf_print_background: bool = False


class ScrollingScreenshotOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    video_format: VideoFormat = "mp4"
    duration: int = Field(gt=0, description="Video duration in seconds.")
    scroll_complete: bool = False


class ShortVideoOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    video_format: VideoFormat = "mp4"
    duration: int = Field(gt=0, description="Video duration in seconds.")
    scenario: Optional[str] = None


OPTIONS_BY_OPERATION = {
    "screenshot": ScreenshotOptions,
    "full_page": FullPageOptions,
    "pdf": PdfOptions,
    "scrolling_screenshot": ScrollingScreenshotOptions,
    "short_video": ShortVideoOptions,
}
