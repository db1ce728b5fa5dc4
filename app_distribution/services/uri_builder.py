import httpx


class UriBuilder:
    """Resolves paths like ``bundle/3/download`` against the public base URL."""

    def __init__(self, base_url: str):
        base = httpx.URL(base_url)
        if not base.scheme or not base.host:
            raise httpx.InvalidURL(f"Base URL must be absolute: {base_url!r}")
        # keep a trailing slash so join() appends instead of replacing the last segment
        if not base.path.endswith("/"):
            base = base.copy_with(path=base.path + "/")
        self.base_url = base

    def uri_for(self, path: str) -> httpx.URL:
        return self.base_url.join(path.lstrip("/"))
