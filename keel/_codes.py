from __future__ import annotations

from enum import IntEnum

__all__ = ["codes"]


class codes(IntEnum):
    """
    HTTP status codes understood by the API server client.

    This class extends IntEnum to provide status codes with associated phrase descriptions.
    Each enum member has both an integer value and a phrase attribute for human-readable descriptions.

    Only the codes the error classifier branches on are listed; any other integer
    is still handled through the range helpers below.
    """

    _ignore_ = ["phrase"]
    phrase: str = ""

    def __new__(cls, value: int, phrase: str = "") -> codes:
        """
        Create a new codes enum member with both value and phrase.

        Args:
            value: The integer HTTP status code
            phrase: Human-readable description of the status

        Returns:
            A new codes enum member with the phrase attribute set
        """
        obj = int.__new__(cls, value)
        obj._value_ = value
        obj.phrase = phrase
        return obj

    def __str__(self) -> str:
        """Return string representation of the status code value."""
        return str(self.value)

    @classmethod
    def get_reason_phrase(cls, value: int) -> str:
        """
        Get the reason phrase for a given status code value.

        Args:
            value: The integer status code value to look up

        Returns:
            The reason phrase string, or empty string if code not listed

        Example:
            >>> codes.get_reason_phrase(404)
            'Not Found'
            >>> codes.get_reason_phrase(299)
            ''
        """
        try:
            return codes(value).phrase
        except ValueError:
            return ""

    @classmethod
    def is_success(cls, value: int) -> bool:
        """
        Check if a status code indicates success (2xx range).

        Args:
            value: The status code to check

        Returns:
            True if the code is in the 200-299 range, False otherwise
        """
        return 200 <= value <= 299

    @classmethod
    def is_client_error(cls, value: int) -> bool:
        """
        Check if a status code indicates a client error (4xx range).

        Args:
            value: The status code to check

        Returns:
            True if the code is in the 400-499 range, False otherwise
        """
        return 400 <= value <= 499

    @classmethod
    def is_server_error(cls, value: int) -> bool:
        """
        Check if a status code indicates a server error (5xx range).

        Args:
            value: The status code to check

        Returns:
            True if the code is in the 500-599 range, False otherwise
        """
        return 500 <= value <= 599

    @classmethod
    def is_error(cls, value: int) -> bool:
        """
        Check if a status code indicates any kind of error (4xx or 5xx range).

        Args:
            value: The status code to check

        Returns:
            True if the code is in the 400-599 range, False otherwise
        """
        return 400 <= value <= 599

    OK = 200, "OK"
    CREATED = 201, "Created"
    ACCEPTED = 202, "Accepted"

    BAD_REQUEST = 400, "Bad Request"
    UNAUTHORIZED = 401, "Unauthorized"
    FORBIDDEN = 403, "Forbidden"
    NOT_FOUND = 404, "Not Found"
    """
    The named resource (or its collection) does not exist on the server.
    """

    CONFLICT = 409, "Conflict"
    """
    Raised by the server for stale resourceVersion writes and for creates of an
    already existing name. The client never retries these.
    """

    GONE = 410, "Gone"
    """
    The requested resourceVersion is too old to resume a watch from;
    callers must relist.
    """

    UNPROCESSABLE_ENTITY = 422, "Unprocessable Entity"
    TOO_MANY_REQUESTS = 429, "Too Many Requests"

    INTERNAL_SERVER_ERROR = 500, "Internal Server Error"
    SERVICE_UNAVAILABLE = 503, "Service Unavailable"
    GATEWAY_TIMEOUT = 504, "Gateway Timeout"


# Include lower-case styles for `requests` compatibility.
for code in codes:
    setattr(codes, code._name_.lower(), int(code))
