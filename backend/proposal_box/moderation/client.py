"""LLM-backed moderation client that classifies and refines draft proposals."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol
from urllib import error as urllib_error
from urllib import request as urllib_request

from pydantic import AliasChoices, BaseModel, Field, StrictBool, ValidationError

from proposal_box.config import get_settings
from proposal_box.schema.categories import CATEGORY_VALUES, Category, normalize_category
from proposal_box.schemas.moderation import ModerationVerdict

logger = logging.getLogger(__name__)

_MODERATION_JSON_SCHEMA: dict[str, Any] = {
    "name": "proposal_moderation",
    "strict": True,
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "isAppropriate": {"type": "boolean"},
            "category": {"type": "string", "enum": list(CATEGORY_VALUES)},
            "tags": {"type": "array", "items": {"type": "string"}},
            "refinedTitle": {"type": ["string", "null"]},
            "refinedContent": {"type": ["string", "null"]},
            "advice": {"type": ["string", "null"]},
        },
        "required": ["isAppropriate", "category", "tags", "refinedTitle", "refinedContent", "advice"],
    },
}
MODERATION_PROMPT_VERSION = "school_rules.v1"
_PROMPT_FILES: dict[str, Path] = {
    "school_rules.v1": Path(__file__).resolve().parent / "prompts" / "school_rules_v1.txt",
}

TAG_MARKERS = ("#", "＃")
UNAVAILABLE_ADVICE = "The AI check is temporarily unavailable. Please wait a moment and try again."
DEFAULT_APPROVED_ADVICE = "Check complete. No problems found."
DEFAULT_REJECTED_ADVICE = "Some points need revision. Please review the guidelines and edit your proposal."


class ModerationError(RuntimeError):
    """Raised when moderation is misconfigured or the provider response is invalid."""


class ModerationTransport(Protocol):
    """Protocol for pluggable moderation providers."""

    def classify_structured(self, title: str, content: str) -> dict[str, Any]:
        """Return the provider's raw structured verdict payload."""


@dataclass(slots=True)
class OpenAIModerationTransport:
    """Minimal OpenAI Chat Completions transport using stdlib HTTP."""

    api_key: str
    model: str
    base_url: str = "https://api.openai.com/v1"
    timeout_seconds: int = 30

    def classify_structured(self, title: str, content: str) -> dict[str, Any]:
        """Call OpenAI and return the parsed JSON verdict."""

        user_prompt = json.dumps(
            {
                "task": "Classify, tag, judge, and refine this proposal.",
                "title": title,
                "content": content,
            },
            ensure_ascii=False,
        )
        payload = {
            "model": self.model,
            "temperature": 0,
            "response_format": {
                "type": "json_schema",
                "json_schema": _MODERATION_JSON_SCHEMA,
            },
            "messages": [
                {"role": "system", "content": _get_moderation_system_prompt()},
                {"role": "user", "content": user_prompt},
            ],
        }
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        req = urllib_request.Request(
            url=url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
        )

        try:
            with urllib_request.urlopen(req, timeout=self.timeout_seconds) as resp:
                raw = resp.read().decode("utf-8")
        except urllib_error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise ModerationError(f"OpenAI HTTP {exc.code}: {detail}") from exc
        except urllib_error.URLError as exc:
            raise ModerationError(f"OpenAI request failed: {exc.reason}") from exc
        except TimeoutError as exc:
            raise ModerationError(f"OpenAI request timed out after {self.timeout_seconds}s") from exc

        try:
            decoded = json.loads(raw)
            message = decoded["choices"][0]["message"]
            refusal = message.get("refusal")
            if isinstance(refusal, str) and refusal.strip():
                raise ModerationError(f"OpenAI refused moderation request: {refusal.strip()}")
            content_text = message["content"]
            if not isinstance(content_text, str) or not content_text.strip():
                raise TypeError("OpenAI response content is empty")
            parsed = json.loads(content_text)
        except ModerationError:
            raise
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as exc:
            raise ModerationError("OpenAI returned an unexpected or non-JSON response") from exc
        if not isinstance(parsed, dict):
            raise ModerationError("OpenAI verdict payload is not a JSON object")
        return parsed


@lru_cache(maxsize=4)
def _get_moderation_system_prompt(version: str = MODERATION_PROMPT_VERSION) -> str:
    prompt_file = _PROMPT_FILES.get(version)
    if prompt_file is None:
        raise ModerationError(f"Moderation prompt version is not registered: {version}")
    try:
        prompt_text = prompt_file.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ModerationError(f"Failed to load moderation prompt file: {prompt_file}") from exc
    if not prompt_text:
        raise ModerationError(f"Moderation prompt file is empty: {prompt_file}")
    return prompt_text


class _RawVerdict(BaseModel):
    approved: StrictBool = Field(validation_alias=AliasChoices("isAppropriate", "approved"))
    category: str
    tags: list[str]
    refined_title: str | None = Field(default=None, validation_alias=AliasChoices("refinedTitle", "refined_title"))
    refined_content: str | None = Field(
        default=None,
        validation_alias=AliasChoices("refinedContent", "refined_content"),
    )
    advice: str | None = None


def unavailable_verdict() -> ModerationVerdict:
    """Fail-closed verdict returned whenever classification cannot complete."""

    return ModerationVerdict(approved=False, category=Category.OTHER, tags=(), advice=UNAVAILABLE_ADVICE)


class ModerationClient:
    """Single-attempt classifier that never raises and never approves on error."""

    def __init__(self, transport: ModerationTransport | None) -> None:
        self._transport = transport

    @property
    def model_name(self) -> str:
        if self._transport is None:
            return "unconfigured"
        return str(getattr(self._transport, "model", self._transport.__class__.__name__))

    def classify(self, title: str, content: str) -> ModerationVerdict:
        """Classify one (title, content) pair; fail closed on any error."""

        try:
            if self._transport is None:
                raise ModerationError("Moderation transport is not configured")
            raw_payload = self._transport.classify_structured(title, content)
            validated = _RawVerdict.model_validate(raw_payload)
        except ValidationError as exc:
            logger.warning(
                "moderation.invalid_payload model=%s errors=%d",
                self.model_name,
                exc.error_count(),
            )
            return unavailable_verdict()
        except Exception:
            logger.exception("moderation.classify_failed model=%s", self.model_name)
            return unavailable_verdict()

        advice = _clean_text(validated.advice)
        if not advice:
            advice = DEFAULT_APPROVED_ADVICE if validated.approved else DEFAULT_REJECTED_ADVICE
        verdict = ModerationVerdict(
            approved=validated.approved,
            category=normalize_category(validated.category),
            tags=normalize_tags(validated.tags),
            refined_title=_clean_text(validated.refined_title) or None,
            refined_content=(validated.refined_content or "").strip() or None,
            advice=advice,
        )
        logger.info(
            "moderation.classified model=%s approved=%s category=%s tags=%d",
            self.model_name,
            verdict.approved,
            verdict.category.value,
            len(verdict.tags),
        )
        return verdict


def normalize_tags(raw_tags: list[str]) -> tuple[str, ...]:
    """Prefix each tag with the marker, drop blanks and duplicates, keep order."""

    seen: set[str] = set()
    result: list[str] = []
    for raw in raw_tags:
        body = "".join(str(raw).split())
        while body.startswith(TAG_MARKERS):
            body = body[1:]
        if not body:
            continue
        tag = f"#{body}"
        if tag in seen:
            continue
        seen.add(tag)
        result.append(tag)
    return tuple(result)


def get_default_moderation_client() -> ModerationClient:
    """Return a moderation client wired from settings.

    Without an API key the client has no transport and every check fails closed.
    """

    settings = get_settings()
    if not settings.openai_api_key:
        logger.warning("moderation.unconfigured reason=missing_openai_api_key")
        return ModerationClient(None)
    return ModerationClient(
        OpenAIModerationTransport(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.moderation_timeout_seconds,
        )
    )


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.strip().split())
