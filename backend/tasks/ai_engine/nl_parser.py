# tasks/ai_engine/nl_parser.py
"""
External Task Parser
====================

Turns free-form task input ("call the bank tomorrow at 3pm, urgent") into a
structured task draft via the OpenAI Chat Completions API.

The parser is an opaque external call from the application's point of
view: it never raises on API trouble and always returns a contract

    {
        "parsed": {...} | None,
        "confidence": float,        # 0.0 on any failure
        "error_code": str,          # only present on failure
        "error_message": str,       # only present on failure
    }

Error Codes:
------------
- INVALID_INPUT: empty or oversized input
- PARSER_NOT_CONFIGURED: no API key
- RATE_LIMIT / QUOTA_EXCEEDED / TIMEOUT / CONNECTION_ERROR: API trouble
- PARSE_ERROR: the model returned something unusable
- UNEXPECTED_ERROR: anything else
"""

from __future__ import annotations

import datetime
import json
import logging
import re
from typing import Any, Dict, List, Optional

from django.conf import settings
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    OpenAI,
    RateLimitError,
)

from lifeboard.dates import get_canonical_tz

logger = logging.getLogger(__name__)

VALID_PRIORITIES = ("high", "mid", "low")
DEFAULT_PRIORITY = "mid"
DEFAULT_CONFIDENCE = 0.5

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class ExternalTaskParser:
    """
    OpenAI-backed parser for natural-language task input.

    Initialization never raises: a missing key leaves ``is_configured``
    False and every ``parse`` call returns a PARSER_NOT_CONFIGURED contract.
    """

    DEFAULT_MODEL: str = "gpt-4o-mini"
    DEFAULT_TEMPERATURE: float = 0.1
    DEFAULT_MAX_TOKENS: int = 500
    DEFAULT_TIMEOUT: float = 10.0
    MAX_INPUT_LENGTH: int = 500

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        **client_kwargs: Any,
    ) -> None:
        self.model: str = model or getattr(settings, "OPENAI_MODEL", None) or self.DEFAULT_MODEL
        self.timeout: float = timeout or self.DEFAULT_TIMEOUT
        self._client_kwargs: Dict[str, Any] = client_kwargs

        self.api_key: Optional[str] = None
        self.client: Optional[OpenAI] = None
        self.is_configured: bool = False
        self.configuration_error: Optional[str] = None

        self._configure(api_key)

    def _configure(self, api_key: Optional[str] = None) -> None:
        resolved_key = api_key or getattr(settings, "OPENAI_API_KEY", None) or ""
        if not resolved_key:
            self.configuration_error = (
                "OPENAI_API_KEY is not configured. "
                "Set the OPENAI_API_KEY environment variable or Django setting."
            )
            logger.warning(f"ExternalTaskParser: {self.configuration_error}")
            return

        try:
            self.api_key = resolved_key
            self.client = OpenAI(api_key=self.api_key, **self._client_kwargs)
            self.is_configured = True
            self.configuration_error = None
            logger.info(f"ExternalTaskParser initialized with model={self.model}")
        except Exception as e:
            self.configuration_error = f"Failed to initialize OpenAI client: {str(e)}"
            logger.error(f"ExternalTaskParser: {self.configuration_error}")
            self.client = None
            self.is_configured = False

    def parse(self, text: str, now: Optional[datetime.datetime] = None) -> Dict[str, Any]:
        """
        Parse one line of task input.

        Args:
            text: Raw user input.
            now: Reference moment for relative dates ("tomorrow"); defaults
                 to the current time in the canonical timezone.
        """
        text = (text or "").strip()
        if not text:
            return self._get_error_response("INVALID_INPUT", "Input is empty")
        if len(text) > self.MAX_INPUT_LENGTH:
            return self._get_error_response(
                "INVALID_INPUT", f"Input exceeds {self.MAX_INPUT_LENGTH} characters"
            )

        if not self.is_configured or self.client is None:
            logger.warning(
                f"ExternalTaskParser.parse called but parser not configured. "
                f"Reason: {self.configuration_error}"
            )
            return self._get_error_response(
                "PARSER_NOT_CONFIGURED",
                self.configuration_error or "Parser not available",
            )

        local_now = (now or datetime.datetime.now(datetime.timezone.utc)).astimezone(get_canonical_tz())
        messages = self._build_messages(text, local_now)

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.DEFAULT_TEMPERATURE,
                max_tokens=self.DEFAULT_MAX_TOKENS,
                response_format={"type": "json_object"},
                timeout=self.timeout,
            )
            raw_content: str = response.choices[0].message.content or ""
            logger.debug(f"ExternalTaskParser: Raw response: {raw_content[:200]}...")

            result = self._validate_and_parse_response(raw_content)
            logger.info(
                f"ExternalTaskParser: Parsed '{result['parsed']['title']}' "
                f"(confidence={result['confidence']:.2f})"
            )
            return result

        except AuthenticationError as e:
            logger.error(f"OpenAI authentication failed: {e}")
            return self._get_error_response(
                "PARSER_NOT_CONFIGURED", "Invalid API key or authentication failed"
            )

        except RateLimitError as e:
            # OpenAI reports an exhausted quota as a 429 too
            if getattr(e, "code", None) == "insufficient_quota":
                logger.error(f"OpenAI quota exhausted: {e}")
                return self._get_error_response(
                    "QUOTA_EXCEEDED", "AI features are temporarily unavailable"
                )
            logger.warning(f"OpenAI rate limit exceeded: {e}")
            return self._get_error_response("RATE_LIMIT", "Rate limit exceeded, please retry later")

        except APITimeoutError as e:
            logger.warning(f"OpenAI API timeout: {e}")
            return self._get_error_response("TIMEOUT", "API request timed out")

        except APIConnectionError as e:
            logger.error(f"OpenAI connection error: {e}")
            return self._get_error_response("CONNECTION_ERROR", "Could not connect to OpenAI API")

        except APIStatusError as e:
            logger.error(f"OpenAI API status error: {e.status_code} - {e}")
            return self._get_error_response(
                f"API_ERROR_{e.status_code}", f"OpenAI API error (status {e.status_code})"
            )

        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Task parse response rejected: {e}")
            return self._get_error_response("PARSE_ERROR", str(e))

        except Exception as e:
            logger.exception(f"Unexpected error in ExternalTaskParser: {e}")
            return self._get_error_response(
                "UNEXPECTED_ERROR", f"Unexpected error: {type(e).__name__}"
            )

    def _build_messages(self, text: str, local_now: datetime.datetime) -> List[Dict[str, str]]:
        json_structure_example = json.dumps({
            "title": "string",
            "description": None,
            "scheduled_date": "YYYY-MM-DD",
            "scheduled_time": "HH:MM or null",
            "scheduled_end_time": "HH:MM or null",
            "priority": "high | mid | low",
            "confidence": 0.9,
        })

        system_prompt = (
            "You are a task parser for a productivity app. "
            "Extract task information from natural language input.\n\n"
            f"Today's date: {local_now.date().isoformat()} ({local_now.strftime('%A')})\n"
            f"Current time: {local_now.strftime('%H:%M')}\n\n"
            "RULES:\n"
            "1. The title is concise and contains no date or time words.\n"
            "2. Priority is 'high' for urgent/important wording, 'low' for 'later'/'someday', else 'mid'.\n"
            "3. Resolve relative dates (today, tomorrow, next Monday) against today's date. "
            "If no date is given, use today's date.\n"
            "4. Times are 24-hour HH:MM. If a duration is mentioned, compute scheduled_end_time.\n"
            "5. Use confidence 0.9-1.0 for clear input and 0.5-0.7 for ambiguous input.\n"
            "6. Return ONLY valid JSON. No markdown, no commentary.\n"
            f"7. The output must strictly follow this schema: {json_structure_example}"
        )

        return [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": f'Parse this task input: "{text}"'},
        ]

    def _validate_and_parse_response(self, raw_json: str) -> Dict[str, Any]:
        """
        Normalize the model's JSON into a task draft.

        Malformed optional fields are dropped rather than rejected; only a
        missing title makes the whole response unusable.

        Raises:
            ValueError: empty response or no title.
        """
        if not raw_json:
            raise ValueError("Empty response from AI")

        data = json.loads(raw_json)
        if not isinstance(data, dict):
            raise ValueError("AI response is not a JSON object")

        title = str(data.get("title") or "").strip()
        if not title:
            raise ValueError("AI response has no task title")

        description = data.get("description")
        description = str(description).strip() or None if description else None

        scheduled_date = data.get("scheduled_date")
        if not (isinstance(scheduled_date, str) and _DATE_RE.match(scheduled_date)):
            scheduled_date = None
        else:
            try:
                datetime.date.fromisoformat(scheduled_date)
            except ValueError:
                scheduled_date = None

        scheduled_time = self._clean_time(data.get("scheduled_time"))
        scheduled_end_time = self._clean_time(data.get("scheduled_end_time"))
        if scheduled_end_time and (not scheduled_time or scheduled_end_time <= scheduled_time):
            scheduled_end_time = None

        priority = data.get("priority")
        if priority not in VALID_PRIORITIES:
            priority = DEFAULT_PRIORITY

        confidence = data.get("confidence")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)) or not 0.0 <= confidence <= 1.0:
            confidence = DEFAULT_CONFIDENCE

        return {
            "parsed": {
                "title": title[:200],
                "description": description,
                "scheduled_date": scheduled_date,
                "scheduled_time": scheduled_time,
                "scheduled_end_time": scheduled_end_time,
                "priority": priority,
            },
            "confidence": float(confidence),
        }

    @staticmethod
    def _clean_time(value: Any) -> Optional[str]:
        if isinstance(value, str) and _TIME_RE.match(value):
            return value
        return None

    def _get_error_response(self, error_code: str, error_message: str) -> Dict[str, Any]:
        return {
            "parsed": None,
            "confidence": 0.0,
            "error_code": error_code,
            "error_message": error_message,
        }

    def health_check(self) -> Dict[str, Any]:
        return {
            "is_configured": self.is_configured,
            "model": self.model,
            "timeout": self.timeout,
            "configuration_error": self.configuration_error,
        }
