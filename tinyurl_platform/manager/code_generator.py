"""
Short-code generation for tinyurl_platform.

Provided:
- CodeGenerator.generate_code: random Base62 string of a given length
- CodeGenerator.generate_unique_code: retry `generate_code` until a caller-supplied
  existence check reports the code as free, up to a bound

Notes:
- Randomness comes from `secrets`, so codes are not predictable from earlier codes.
  They are still not designed to resist enumeration of the keyspace.
- The generator knows nothing about storage. Callers inject the existence check
  as a plain callable, e.g. `storage.exists_by_code`.
- At the default length of 6 the keyspace is 62**6 (about 5.68e10) codes, so
  exhausting the retry bound indicates a nearly full keyspace or a broken check.

LLM Prompt Example:
    "Explain why decoupling random code generation from the existence check
    keeps the generator pure, and how a retry bound turns an unbounded loop
    into an observable failure."
"""

import logging
import secrets
import string
from typing import Callable

from ..errors import ExhaustedRetries

log = logging.getLogger(__name__)

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
DEFAULT_CODE_LENGTH = 6
DEFAULT_MAX_RETRIES = 5

ExistsCheck = Callable[[str], bool]  # (code) -> True if already taken


class CodeGenerator:
    """Random Base62 code generator with bounded collision retries."""

    def __init__(self, alphabet: str = BASE62_ALPHABET):
        self.alphabet = alphabet

    def generate_code(self, length: int = DEFAULT_CODE_LENGTH) -> str:
        """
        Return `length` characters drawn uniformly and independently from the alphabet.

        Raises:
            ValueError: If length is smaller than 1.
        """
        if length < 1:
            raise ValueError("length must be at least 1")
        return "".join(secrets.choice(self.alphabet) for _ in range(length))

    def generate_unique_code(
        self,
        exists_check: ExistsCheck,
        length: int = DEFAULT_CODE_LENGTH,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ) -> str:
        """
        Generate codes until `exists_check(code)` is False.

        Args:
            exists_check (ExistsCheck): Returns True when a code is already in use.
            length (int): Code length.
            max_retries (int): Maximum number of attempts.

        Returns:
            str: The first generated code reported as free.

        Raises:
            ExhaustedRetries: If every one of the `max_retries` attempts collided.
        """
        for attempt in range(1, max_retries + 1):
            code = self.generate_code(length)
            if not exists_check(code):
                return code
            log.info("Code collision on attempt %d/%d", attempt, max_retries)
        raise ExhaustedRetries(max_retries)
