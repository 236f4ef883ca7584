"""
HTTP response value object: a status code and reason phrase on top of
the Message basics.

    Response()                                # 200 OK
    Response(404)                             # 404 Not Found
    Response().with_status(418, "Short")      # custom reason phrase
"""

from copy import copy
from typing import Any, Mapping, Optional
import re

from .message import HeaderValue, Message
from .status_codes import reason_phrase


_THREE_DIGITS = re.compile(r"\A\d{3}\Z")


class Response(Message):
    """Immutable HTTP response."""

    def __init__(
        self,
        status: Optional[int] = None,
        body: Any = None,
        headers: Optional[Mapping[str, HeaderValue]] = None,
        protocol: Optional[str] = None,
    ):
        super().__init__(body, headers, protocol)
        self._status_code = 200
        self._reason_phrase = ""
        if status is not None:
            self._set_status(status)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason_phrase(self) -> str:
        """The custom phrase if one was given, else the standard one (or "")."""
        return self._reason_phrase or reason_phrase(self._status_code)

    def with_status(self, code: int, reason_phrase: str = "") -> "Response":
        new = copy(self)
        new._set_status(code, reason_phrase)
        return new

    def _set_status(self, code: Any, phrase: str = "") -> None:
        if not isinstance(phrase, str):
            raise TypeError(
                f'Invalid reason phrase provided; must be a string, "{type(phrase).__name__}" received.'
            )
        # digit strings such as "404" are accepted too
        text = str(int(code)) if isinstance(code, int) else code
        if isinstance(code, bool) or not isinstance(text, str) or not _THREE_DIGITS.match(text):
            raise ValueError(
                f"Invalid status code provided; must be a 3-digit integer result code, "
                f'"{code!r}" received.'
            )
        code = int(code)
        if not 100 <= code <= 599:
            raise ValueError("Invalid status code provided; must be between 100 and 599.")
        self._status_code = code
        self._reason_phrase = phrase
