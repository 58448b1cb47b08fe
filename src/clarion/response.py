"""Response extraction: provider reply to a single text outcome.

Extraction happens in two steps:

1. ``decode_response`` validates the raw HTTP reply into exactly one of the
   known response shapes (``ResponseShape``).
2. ``describe`` renders a shape as an ``Outcome``.

Neither step raises. Provider errors, blocks and odd finishes all come back
as descriptive text; the caller decides which kinds to escalate.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from clarion.constants import DIAGNOSTIC_PREFIX_CHARS, NORMAL_FINISH_REASON

if TYPE_CHECKING:
    from clarion.config import ConnectionMethod

logger = logging.getLogger(__name__)

OutcomeKind = Literal[
    "answer",
    "blocked",
    "abnormal_finish",
    "error_body",
    "provider_error",
    "unparseable",
    "unrecognized",
]


@dataclass(frozen=True)
class Outcome:
    """The text result of one provider call, tagged with how it was reached."""

    text: str
    kind: OutcomeKind


# =============================================================================
# Provider response models (read-only, provider-defined)
# =============================================================================


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


def _objects_only(v: Any) -> Any:
    """Drop non-object entries from a list; leave anything else to validation."""
    if isinstance(v, list):
        return [item for item in v if isinstance(item, dict)]
    return v


class _Part(_WireModel):
    text: Any = None


class _Content(_WireModel):
    parts: list[_Part] | None = None

    @field_validator("parts", mode="before")
    @classmethod
    def skip_non_object_parts(cls, v: Any) -> Any:
        return _objects_only(v)


class _SafetyRating(_WireModel):
    category: Any = None
    probability: Any = None

    def summary(self) -> str:
        return f"{self.category}: {self.probability}"


class _Rated(_WireModel):
    safety_ratings: list[_SafetyRating] | None = Field(None, alias="safetyRatings")

    @field_validator("safety_ratings", mode="before")
    @classmethod
    def skip_non_object_ratings(cls, v: Any) -> Any:
        return _objects_only(v)


class _Candidate(_Rated):
    content: _Content | None = None
    finish_reason: str | None = Field(None, alias="finishReason")


class _PromptFeedback(_Rated):
    block_reason: str | None = Field(None, alias="blockReason")


# =============================================================================
# Response shapes
# =============================================================================


@dataclass(frozen=True)
class Unparseable:
    """The body was not valid JSON."""

    status_code: int
    reason: str
    raw_text: str


@dataclass(frozen=True)
class HTTPFailure:
    """Non-2xx status with a decoded body."""

    status_code: int
    reason: str
    body: Any


@dataclass(frozen=True)
class Success:
    text: str


@dataclass(frozen=True)
class Blocked:
    reason: str
    safety_ratings: tuple[str, ...] = ()


@dataclass(frozen=True)
class AbnormalFinish:
    reason: str
    safety_ratings: tuple[str, ...] = ()


@dataclass(frozen=True)
class ErrorBody:
    """A 2xx reply that carries an ``error`` object."""

    message: str | None


@dataclass(frozen=True)
class Unrecognized:
    """A decodable reply matching none of the known shapes.

    ``malformed`` is set when the body did not fit the response schema at all.
    """

    malformed: bool = False


ResponseShape = (
    Unparseable
    | HTTPFailure
    | Success
    | Blocked
    | AbnormalFinish
    | ErrorBody
    | Unrecognized
)


# =============================================================================
# Decode
# =============================================================================


def decode_response(status_code: int, reason: str, content: bytes) -> ResponseShape:
    """Classify a raw HTTP reply into one response shape.

    Precedence: undecodable body, error status, text parts, prompt block,
    abnormal finish, error object. The first match wins.

    Only the leading candidate and the prompt feedback are validated, each on
    its own. A malformed section is treated as absent so that it cannot hide
    a usable answer elsewhere in the body.
    """
    try:
        data = json.loads(content)
    except ValueError:
        return Unparseable(
            status_code=status_code,
            reason=reason,
            raw_text=content.decode("utf-8", errors="replace"),
        )

    if not 200 <= status_code < 300:
        return HTTPFailure(status_code=status_code, reason=reason, body=data)

    if not isinstance(data, dict):
        logger.debug("Response body is a JSON %s, not an object", type(data).__name__)
        return Unrecognized(malformed=True)

    first, candidate_ok = _leading_candidate(data.get("candidates"))
    texts = _text_parts(first)
    if texts:
        return Success(text="".join(texts))

    feedback, feedback_ok = _validate_section(
        _PromptFeedback, data.get("promptFeedback"), "promptFeedback"
    )
    if feedback is not None and feedback.block_reason:
        return Blocked(
            reason=feedback.block_reason,
            safety_ratings=_summaries(feedback.safety_ratings),
        )

    if (
        first is not None
        and first.finish_reason
        and first.finish_reason != NORMAL_FINISH_REASON
    ):
        return AbnormalFinish(
            reason=first.finish_reason,
            safety_ratings=_summaries(first.safety_ratings),
        )

    error = data.get("error")
    if _is_set(error):
        message = error.get("message") if isinstance(error, dict) else None
        return ErrorBody(message=message if isinstance(message, str) else None)

    return Unrecognized(malformed=not (candidate_ok and feedback_ok))


def _leading_candidate(raw: Any) -> tuple[_Candidate | None, bool]:
    if raw is None:
        return None, True
    if not isinstance(raw, list):
        logger.debug("Ignoring non-list candidates: %s", type(raw).__name__)
        return None, False
    if not raw:
        return None, True
    return _validate_section(_Candidate, raw[0], "candidates[0]")


def _validate_section(model: type[Any], raw: Any, name: str) -> tuple[Any, bool]:
    """Validate one response section; returns ``(value, ok)``."""
    if raw is None:
        return None, True
    try:
        return model.model_validate(raw), True
    except ValidationError as e:
        logger.debug("Ignoring malformed %s: %s", name, e)
        return None, False


def _text_parts(candidate: _Candidate | None) -> list[str]:
    if candidate is None or candidate.content is None or not candidate.content.parts:
        return []
    return [p.text for p in candidate.content.parts if isinstance(p.text, str) and p.text]


def _is_set(value: Any) -> bool:
    """JSON truthiness: only null, false, 0 and "" count as missing."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def _summaries(ratings: list[_SafetyRating] | None) -> tuple[str, ...]:
    return tuple(r.summary() for r in ratings or ())


# =============================================================================
# Render
# =============================================================================


def describe(shape: ResponseShape, connection_method: ConnectionMethod) -> Outcome:
    """Render a response shape as human-readable text."""
    proxied = connection_method == "proxy"

    match shape:
        case Unparseable(status_code=status, reason=reason, raw_text=raw):
            return Outcome(
                f"API Error ({status} {reason}). Response: {_truncate(raw)}",
                "unparseable",
            )
        case HTTPFailure(status_code=status, reason=reason, body=body):
            return Outcome(
                _http_failure_text(connection_method, status, reason, body),
                "provider_error",
            )
        case Success(text=text):
            return Outcome(text, "answer")
        case Blocked(reason=reason, safety_ratings=ratings):
            text = f"Request blocked by API: {reason}"
            if ratings:
                text += f" - Details: {', '.join(ratings)}"
            return Outcome(text, "blocked")
        case AbnormalFinish(reason=reason, safety_ratings=ratings):
            text = f"Request finished unexpectedly. Reason: {reason}"
            if ratings:
                text += f" (Safety Ratings: {', '.join(ratings)})"
            return Outcome(text, "abnormal_finish")
        case ErrorBody(message=message):
            prefix = "Proxied " if proxied else ""
            return Outcome(
                f"{prefix}Gemini API Error: {message or 'Unknown error'}",
                "error_body",
            )
        case Unrecognized(malformed=True):
            which = "proxied " if proxied else ""
            return Outcome(
                f"Error: Failed to process {which}Gemini response content.",
                "unrecognized",
            )
        case _:
            which = "proxied " if proxied else ""
            return Outcome(f"Error: Could not parse {which}Gemini response.", "unrecognized")


def extract(
    status_code: int,
    reason: str,
    content: bytes,
    *,
    connection_method: ConnectionMethod,
) -> Outcome:
    """Reduce a raw HTTP reply to a single text outcome. Never raises."""
    return describe(decode_response(status_code, reason, content), connection_method)


def _http_failure_text(
    connection_method: ConnectionMethod, status: int, reason: str, body: Any
) -> str:
    text = f"API Error via {connection_method} ({status} {reason})"
    error = body.get("error") if isinstance(body, dict) else None
    if _is_set(error):
        if isinstance(error, str):
            return f"{text}: {error}"
        message = error.get("message") if isinstance(error, dict) else None
        if message:
            return f"{text}: {message}"
        return f"{text}. Response: {_truncate(_compact_json(error))}"
    if _is_set(body):
        return f"{text}. Response: {_truncate(_compact_json(body))}"
    return text


def _compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def _truncate(text: str) -> str:
    return text[:DIAGNOSTIC_PREFIX_CHARS]
