# tasks/ai_engine/cache.py

import datetime
import hashlib
import json
import logging
from typing import Any, Callable, Dict

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)


class ParseCache:
    """
    Caches natural-language parse results so repeated input does not hit
    the external parser again.

    The key covers the whitespace-normalized input text and the reference
    date, since "tomorrow" resolves differently on different days. Letter
    case is kept because it carries into the parsed title. Only successful
    parses are stored; cache backend failures fall through to a live parse.
    """

    def __init__(
        self,
        ttl: int = 3600,
        version: str = "v1",
        cache_alias: str = "default",
    ):
        """
        Args:
            ttl: Time-to-live in seconds, overridden by NL_PARSE_CACHE_TTL.
            version: Bump to invalidate entries after a prompt change.
            cache_alias: The Django cache alias to use.
        """
        self.ttl = getattr(settings, 'NL_PARSE_CACHE_TTL', ttl)
        self.version = version
        self.cache_alias = cache_alias

    @property
    def cache(self):
        return caches[self.cache_alias]

    def get_or_parse(
        self,
        text: str,
        reference_date: datetime.date,
        parse_func: Callable[[], Dict[str, Any]],
    ) -> Dict[str, Any]:
        cache_key = self._generate_key(text, reference_date)

        try:
            cached_result = self.cache.get(cache_key)
            if cached_result is not None:
                logger.debug(f"Parse cache hit: {cache_key}")
                return cached_result
        except Exception as e:
            logger.error(f"Parse cache retrieval failure: {str(e)}")

        logger.info(f"Parse cache miss: {cache_key}. Invoking parser.")
        result = parse_func()

        if result.get("error_code") is None and result.get("parsed"):
            try:
                self.cache.set(cache_key, result, timeout=self.ttl)
            except Exception as e:
                logger.error(f"Parse cache persistence failure: {str(e)}")

        return result

    def _generate_key(self, text: str, reference_date: datetime.date) -> str:
        payload = {
            "text": " ".join(text.split()),
            "reference_date": reference_date.isoformat(),
            "version": self.version,
        }
        serialized_payload = json.dumps(payload, sort_keys=True)
        hash_digest = hashlib.sha256(serialized_payload.encode()).hexdigest()
        return f"nl_parse_{self.version}_{hash_digest}"
