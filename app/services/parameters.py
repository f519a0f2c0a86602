"""Parameter mapping: per-item configuration -> ScreenshotOne request spec."""

import logging
from typing import Any, Dict, Literal, Mapping, NamedTuple, Optional, Tuple

from pydantic import BaseModel, ValidationError

from app.models.parameters import (
    OPTIONS_BY_OPERATION,
    FullPageOptions,
    ItemParameters,
    PdfOptions,
    ScreenshotOptions,
    ScrollingScreenshotOptions,
    ShortVideoOptions,
)
from app.services.errors import NodeOperationError

logger = logging.getLogger(__name__)

Endpoint = Literal["take", "animate"]

SOURCES = ("url", "html", "markdown")


class RequestSpec(NamedTuple):
    endpoint: Endpoint
    source: str
    content: str
    extra: Dict[str, Optional[str]]
    scenario: Optional[str] = None


def parse_item_parameters(
    raw: Mapping[str, Any], item_index: int
) -> Tuple[ItemParameters, BaseModel]:
    """Validate one raw item into its common parameters and operation options.

    Raises:
        NodeOperationError: for an unsupported operation or source, a missing
            content field, or options that fail validation.
    """
    operation = raw.get("operation")
    if not isinstance(operation, str) or operation not in OPTIONS_BY_OPERATION:
        raise NodeOperationError(f'The operation "{operation}" is not supported', item_index)

    source = raw.get("source", "url")
    if not isinstance(source, str) or source not in SOURCES:
        raise NodeOperationError(f'The source "{source}" is not supported', item_index)

    # Only the content field named by the source is validated and sent
    selected = {key: value for key, value in raw.items() if key not in SOURCES or key == source}

    try:
        params = ItemParameters.model_validate(selected)
        options = OPTIONS_BY_OPERATION[operation].model_validate(raw)
    except ValidationError as exc:
        raise NodeOperationError(_describe_validation_error(exc), item_index) from exc

    if not params.content:
        raise NodeOperationError(f'The parameter "{source}" is required', item_index)

    return params, options


def build_request_spec(params: ItemParameters, options: BaseModel) -> RequestSpec:
    """Map validated parameters onto the endpoint and query parameters to send."""
    extra: Dict[str, Optional[str]] = {"response_type": params.response_type}
    endpoint: Endpoint = "take"
    scenario = None

    if isinstance(options, ScreenshotOptions):
        extra["format"] = options.format
        extra["full_page"] = _flag(options.full_page)
    elif isinstance(options, FullPageOptions):
        extra["format"] = options.format
        extra["full_page"] = "true"
        extra["full_page_scroll"] = "true"
        extra["full_page_scroll_delay"] = _optional_str(options.full_page_scroll_delay)
    elif isinstance(options, PdfOptions):
        extra["format"] = "pdf"
        extra["pdf_landscape"] = _flag(options.pdf_landscape)
        extra["pdf_print_background"] = _flag(options.pdf_print_background)
    elif isinstance(options, ScrollingScreenshotOptions):
        extra["format"] = options.video_format
        extra["scroll_complete"] = _flag(options.scroll_complete)
        extra["duration"] = str(options.duration)
    elif isinstance(options, ShortVideoOptions):
        endpoint = "animate"
        scenario = options.scenario or None
        extra["format"] = options.video_format
        extra["duration"] = str(options.duration)
    else:
        raise TypeError(f"Unexpected options type: {type(options).__name__}")

    extra.update(_cache_params(params))

    return RequestSpec(
        endpoint=endpoint,
        source=params.source,
        content=params.content or "",
        extra=extra,
        scenario=scenario,
    )


def map_item(raw: Mapping[str, Any], item_index: int) -> RequestSpec:
    """Validate *raw* and build its :class:`RequestSpec` in one step."""
    params, options = parse_item_parameters(raw, item_index)
    spec = build_request_spec(params, options)
    logger.debug(
        "Mapped item %d: operation=%s endpoint=%s", item_index, params.operation, spec.endpoint
    )
    return spec


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _cache_params(params: ItemParameters) -> Dict[str, Optional[str]]:
    if not params.cache:
        return {}
    return {
        "cache": "true",
        "cache_ttl": str(params.cache_ttl) if params.cache_ttl > 0 else None,
        "cache_key": params.cache_key or None,
    }


def _flag(value: bool) -> Optional[str]:
    """Boolean toggles are only sent when enabled."""
    return "true" if value else None


def _optional_str(value: Optional[int]) -> Optional[str]:
    return str(value) if value else None


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "item"
        parts.append(f"{location}: {error['msg']}")
    return "Invalid parameters – " + "; ".join(parts)
