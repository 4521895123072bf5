class PreviewError(Exception):
    """Base class for errors raised by the preview pipeline."""


class InvalidURL(PreviewError):
    """The requested URL is missing or does not look like a URL."""

    def __init__(self, url: str | None = None) -> None:
        super().__init__(f"Invalid URL: {url!r}")
        self.url = url


class NoMetadataFound(PreviewError):
    """Neither the static nor the rendered fetch produced any metadata."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No metadata found for {url}")
        self.url = url


class TransientFetchFailure(PreviewError):
    """A fetch stage failed; callers recover by moving to the next stage."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetching {url} failed: {reason}")
        self.url = url
        self.reason = reason
