"""Translation utilities for the clipboard translator."""

from __future__ import annotations

import json
import logging
import socket
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any

AUTO_DETECT = "auto"
REQUEST_TIMEOUT = 10.0

logger = logging.getLogger("cliptranslator.translation")


class TranslationError(RuntimeError):
    """Raised when the translation service cannot complete a request."""


@dataclass(frozen=True)
class TranslationRequest:
    text: str
    source_language: str
    target_language: str


def parse_translation_payload(data: Any) -> str:
    """Join the translated fragments of a ``translate_a/single`` response.

    The body is a nested list whose first element holds one list per segment;
    the first item of every segment is the translated fragment.
    """

    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        raise TranslationError("Unexpected translation response structure")

    fragments = []
    for segment in data[0]:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            fragments.append(segment[0])

    translated_text = "".join(fragments)
    if not translated_text:
        raise TranslationError("Translation response did not contain any text")
    return translated_text


class GoogleTranslateClient:
    """Minimal client for the unofficial Google Translate web API."""

    endpoint = "https://translate.googleapis.com/translate_a/single"
    user_agent = "Mozilla/5.0"

    def __init__(self, timeout: float = REQUEST_TIMEOUT) -> None:
        self.timeout = timeout

    def build_url(self, text: str, src: str, dest: str) -> str:
        params = {
            "client": "gtx",
            "sl": src or AUTO_DETECT,
            "tl": dest,
            "dt": "t",
            "q": text,
        }
        return f"{self.endpoint}?{urllib.parse.urlencode(params)}"

    def translate(self, text: str, src: str, dest: str) -> str:
        if not text:
            raise TranslationError("Cannot translate empty text")

        request = urllib.request.Request(
            self.build_url(text, src, dest),
            headers={"User-Agent": self.user_agent},
        )

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = getattr(response, "status", 200)
                payload = response.read()
        except (socket.timeout, TimeoutError) as exc:
            raise TranslationError(f"Request to Google Translate timed out after {self.timeout:g}s") from exc
        except urllib.error.HTTPError as exc:
            raise TranslationError(f"Google Translate responded with HTTP {exc.code}") from exc
        except urllib.error.URLError as exc:
            if isinstance(exc.reason, (socket.timeout, TimeoutError)):
                raise TranslationError(
                    f"Request to Google Translate timed out after {self.timeout:g}s"
                ) from exc
            raise TranslationError("Network error while contacting Google Translate") from exc
        except OSError as exc:
            raise TranslationError("Network error while contacting Google Translate") from exc

        if not 200 <= status < 300:
            raise TranslationError(f"Google Translate responded with HTTP {status}")

        try:
            data = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TranslationError("Invalid response from Google Translate") from exc

        translated_text = parse_translation_payload(data)
        logger.debug("Translated %d characters %s->%s", len(text), src, dest)
        return translated_text
