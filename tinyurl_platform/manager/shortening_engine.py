"""
ShorteningEngine module for TinyURL Platform.

Responsibilities:
    - Create short codes for long URLs, reusing an active mapping for the same URL
    - Compute expiry from a per-call override or the configured default
    - Resolve codes to mappings, rejecting unknown and expired codes
    - Count successful resolutions and report outcomes to metrics

Design notes:
    - Stateless between calls; all durable state lives behind the storage contract.
    - No in-process locking. Code uniqueness is enforced by storage (`Conflict`),
      and hit counts use storage's atomic `increment_hit_count`.
    - Two concurrent creates for the same new URL can both insert a row. Add a
      UNIQUE(long_url) constraint upstream if exactly-once per URL is required.
    - Dedupe matches the exact long URL string; no canonicalization is applied.
    - Time comes from an injectable clock so expiry can be tested deterministically.

LLM Prompt Example:
    "Design a URL shortening service whose create path is idempotent per active
    long URL, whose resolve path counts hits atomically, and whose collaborators
    (storage, metrics, clock) are all injected."
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..analytics.base import BaseMetrics
from ..config import REDIRECT_PATH, ShortenerConfig
from ..errors import Conflict, ExhaustedRetries, Gone, NotFound
from ..models import UrlMapping, utcnow
from ..storage.base import BaseStorage
from .code_generator import CodeGenerator

log = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class ShorteningEngine:
    """
    Coordinates creation and resolution rules for short links.
    """

    def __init__(
        self,
        storage: BaseStorage,
        config: Optional[ShortenerConfig] = None,
        metrics: Optional[BaseMetrics] = None,
        code_generator: Optional[CodeGenerator] = None,
        clock: Clock = utcnow,
    ):
        """
        Initialize the engine with its collaborators.

        Args:
            storage (BaseStorage): Persistence backend.
            config (Optional[ShortenerConfig]): Engine settings; defaults apply when omitted.
            metrics (Optional[BaseMetrics]): Receives resolution outcomes (optional).
            code_generator (Optional[CodeGenerator]): Code source (optional).
            clock (Clock): Returns the current UTC time.
        """
        self.storage = storage
        self.config = config or ShortenerConfig()
        self.metrics = metrics
        self.code_generator = code_generator or CodeGenerator()
        self.clock = clock

    # ---------------------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------------------
    def _observe(self, event: str) -> None:
        """Report an outcome to metrics; metrics failures never affect the caller."""
        if self.metrics is None:
            return
        try:
            self.metrics.observe(event)
        except Exception:
            log.exception("Metrics observe(%r) failed", event)

    def compute_expires_at(self, now: datetime, expiry_days: Optional[int] = None) -> Optional[datetime]:
        """
        Expiry for a mapping created at `now`.

        A positive `expiry_days` wins; otherwise a positive configured default
        applies; otherwise the mapping never expires.

        Raises:
            ValueError: If the resulting expiry is past the largest representable date.
        """
        if expiry_days is not None and expiry_days > 0:
            days = expiry_days
        elif self.config.default_expiry_days > 0:
            days = self.config.default_expiry_days
        else:
            return None
        try:
            return now + timedelta(days=days)
        except OverflowError as exc:
            raise ValueError(f"expiry of {days} days is out of range") from exc

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create(self, long_url: str, expiry_days: Optional[int] = None) -> UrlMapping:
        """
        Shorten a long URL, or return the existing active mapping for it.

        Rules:
            - An active mapping for exactly this URL is returned unchanged.
            - Otherwise a fresh code is allocated against storage's existence check,
              expiry is computed and a new mapping with zero hits is saved.
            - If the save hits a code conflict, allocation is re-run, up to
              `config.max_retries` saves in total.

        Args:
            long_url (str): URL to shorten, already validated by the caller.
            expiry_days (Optional[int]): Lifetime override in days; ignored unless > 0.

        Returns:
            UrlMapping: The persisted (or pre-existing) mapping.

        Raises:
            ExhaustedRetries: If no free code was found within the retry bound.
            Conflict: If every save attempt collided on the code.
            ValueError: If the expiry is out of range.
        """
        now = self.clock()
        existing = self.storage.find_active_by_long_url(long_url, now)
        if existing is not None:
            log.debug("Reusing active mapping %s for %s", existing.code, long_url)
            return existing

        expires_at = self.compute_expires_at(now, expiry_days)
        last_conflict: Optional[Conflict] = None
        for attempt in range(1, self.config.max_retries + 1):
            code = self.code_generator.generate_unique_code(
                self.storage.exists_by_code,
                length=self.config.code_length,
                max_retries=self.config.max_retries,
            )
            mapping = UrlMapping(
                code=code,
                long_url=long_url,
                created_at=now,
                expires_at=expires_at,
                hit_count=0,
            )
            try:
                saved = self.storage.save(mapping)
            except Conflict as exc:
                log.warning("Code %s taken at save time (attempt %d/%d)", code, attempt, self.config.max_retries)
                last_conflict = exc
                continue
            log.info("Created short code %s (expires_at=%s)", saved.code, saved.expires_at)
            return saved

        if last_conflict is None:
            raise ExhaustedRetries(self.config.max_retries)
        raise last_conflict

    def resolve(self, code: str) -> UrlMapping:
        """
        Resolve a code for redirection and count the hit.

        Returns:
            UrlMapping: The mapping with its updated hit count.

        Raises:
            NotFound: If no mapping exists for the code.
            Gone: If the mapping has expired.
        """
        mapping = self.storage.find_by_code(code)
        if mapping is None:
            self._observe("not_found")
            raise NotFound(code)

        if mapping.is_expired(self.clock()):
            self._observe("expired")
            raise Gone(code, mapping.expires_at)

        new_count = self.storage.increment_hit_count(code)
        if new_count is None:
            # Row disappeared between the read and the increment
            self._observe("not_found")
            raise NotFound(code)

        mapping.hit_count = new_count
        self._observe("success")
        return mapping

    def get_metadata(self, code: str) -> Optional[UrlMapping]:
        """Read a mapping by code without side effects; expired mappings are included."""
        return self.storage.find_by_code(code)

    def build_short_url(self, code: str) -> str:
        """Compose the public short link for a code."""
        return f"{self.config.base_url.rstrip('/')}{REDIRECT_PATH}{code}"
