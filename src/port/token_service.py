"""Port definition for bearer token issuance."""

from typing import Protocol


class TokenService(Protocol):
    def issue(self, subject_id: str) -> str: ...
    def verify(self, token: str) -> str | None: ...
