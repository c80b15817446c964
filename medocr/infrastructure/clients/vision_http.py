"""OCR adapter over the Google Cloud Vision REST ``images:annotate`` endpoint."""

from __future__ import annotations

import base64
import time
from pathlib import Path
from typing import Any

import httpx

from medocr.core.logging import get_logger
from medocr.domain.pipeline.classifier import infer_block_type
from medocr.domain.pipeline.errors import (
    InvalidInputError,
    NoTextDetectedError,
    NotConfiguredError,
    VendorCallFailedError,
)
from medocr.domain.pipeline.models import (
    BoundingBox,
    ImageSize,
    OcrMetadata,
    OcrOptions,
    OcrResult,
    TextBlock,
)

SERVICE_NAME = "Google Cloud Vision"

logger = get_logger(__name__)


class VisionOcrClient:
    def __init__(
        self,
        api_key: str | None,
        *,
        base_url: str = "https://vision.googleapis.com",
        timeout_seconds: float = 30.0,
        confidence_threshold: float = 0.80,
        default_languages: list[str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._confidence_threshold = confidence_threshold
        self._default_languages = list(default_languages or ["en"])
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_seconds,
            transport=self._transport,
        )

    async def extract_text(self, image_path: str, options: OcrOptions | None = None) -> OcrResult:
        if not self.configured:
            raise NotConfiguredError(SERVICE_NAME)

        path = Path(image_path)
        if not path.is_file():
            raise InvalidInputError(f"Image not found: {image_path}")

        languages = (options.languages if options and options.languages else None) or self._default_languages
        start = time.perf_counter()
        payload = {
            "requests": [
                {
                    "image": {"content": base64.b64encode(path.read_bytes()).decode("ascii")},
                    "features": [{"type": "DOCUMENT_TEXT_DETECTION"}],
                    "imageContext": {"languageHints": languages},
                }
            ]
        }

        try:
            async with self._client() as client:
                resp = await client.post("/v1/images:annotate", params={"key": self._api_key}, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise VendorCallFailedError(
                SERVICE_NAME,
                f"HTTP {e.response.status_code}",
                details={"status_code": e.response.status_code},
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise VendorCallFailedError(SERVICE_NAME, str(e) or type(e).__name__) from e

        responses = data.get("responses") if isinstance(data, dict) else None
        response = responses[0] if isinstance(responses, list) and responses else {}
        error = response.get("error")
        if error:
            raise VendorCallFailedError(SERVICE_NAME, str(error.get("message") or error), details=error)

        annotation = response.get("fullTextAnnotation") or {}
        if not annotation.get("text"):
            raise NoTextDetectedError()

        result = self._to_result(annotation, languages, time.perf_counter() - start)
        if result.confidence < self._confidence_threshold:
            logger.warning(
                "ocr_low_confidence",
                extra={
                    "image_path": image_path,
                    "confidence": result.confidence,
                    "threshold": self._confidence_threshold,
                },
            )
        logger.info(
            "ocr_completed",
            extra={
                "image_path": image_path,
                "blocks": len(result.blocks),
                "confidence": result.confidence,
                "duration_s": result.metadata.processing_time,
            },
        )
        return result

    def _to_result(self, annotation: dict[str, Any], languages: list[str], elapsed: float) -> OcrResult:
        blocks: list[TextBlock] = []
        detected: list[str] = []
        image_size: ImageSize | None = None

        for page in annotation.get("pages") or []:
            if image_size is None and page.get("width") and page.get("height"):
                image_size = ImageSize(width=int(page["width"]), height=int(page["height"]))
            for lang in (page.get("property") or {}).get("detectedLanguages") or []:
                code = lang.get("languageCode")
                if code and code not in detected:
                    detected.append(code)
            for block in page.get("blocks") or []:
                text = _block_text(block)
                blocks.append(
                    TextBlock(
                        text=text,
                        type=infer_block_type(text),
                        confidence=block.get("confidence"),
                        bounding_box=_bounding_box(block.get("boundingBox")),
                    )
                )

        # Blocks without a reported confidence are left out of the mean.
        scores = [b.confidence for b in blocks if b.confidence]
        confidence = sum(scores) / len(scores) if scores else 0.0
        confidence = min(max(confidence, 0.0), 1.0)

        return OcrResult(
            text=annotation["text"],
            confidence=confidence,
            blocks=blocks,
            detected_languages=detected or list(dict.fromkeys(languages)),
            metadata=OcrMetadata(
                image_size=image_size,
                processing_time=elapsed,
                low_confidence=confidence < self._confidence_threshold,
            ),
        )

    def health_check(self) -> dict[str, Any]:
        return {
            "status": "operational" if self.configured else "not_configured",
            "ready": self.configured,
        }


def _block_text(block: dict[str, Any]) -> str:
    paragraphs = []
    for paragraph in block.get("paragraphs") or []:
        words = [
            "".join(symbol.get("text", "") for symbol in word.get("symbols") or [])
            for word in paragraph.get("words") or []
        ]
        paragraphs.append(" ".join(words))
    return "\n".join(paragraphs)


def _bounding_box(poly: dict[str, Any] | None) -> BoundingBox | None:
    vertices = (poly or {}).get("vertices") or []
    if len(vertices) < 3:
        return None
    # Vision omits zero coordinates from vertices.
    x0, y0 = vertices[0].get("x", 0), vertices[0].get("y", 0)
    x2, y2 = vertices[2].get("x", 0), vertices[2].get("y", 0)
    return BoundingBox(x=x0, y=y0, width=x2 - x0, height=y2 - y0)
