from typing import Optional


class FetchError(Exception):
    """Sollevata per status HTTP non 2xx o errori di rete (nessun retry)."""

    def __init__(self, message: str, status: Optional[int] = None, body: str = "") -> None:
        self.status = status
        self.body = body
        detail = f"HTTP {status}: {body[:300]}" if status is not None else message
        super().__init__(f"{message} ({detail})" if status is not None else detail)
