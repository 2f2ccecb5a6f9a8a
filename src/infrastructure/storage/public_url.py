"""
Public URL convention for stored objects.

AWS (virtual-hosted style):   https://{bucket}.s3.amazonaws.com/{key}
S3-compatible (path style):   {public_base_url}/{bucket}/{key}
"""

from urllib.parse import quote, unquote, urlsplit

S3_DOMAIN = "s3.amazonaws.com"


def build_public_url(bucket: str, key: str, base_url: str | None = None) -> str:
    encoded_key = quote(key, safe="/")
    if base_url:
        return f"{base_url.rstrip('/')}/{bucket}/{encoded_key}"
    return f"https://{bucket}.{S3_DOMAIN}/{encoded_key}"


def parse_public_url(url: str, base_url: str | None = None) -> tuple[str, str]:
    """Inverse of build_public_url: returns (bucket, key)."""
    if base_url:
        prefix = base_url.rstrip("/") + "/"
        if not url.startswith(prefix):
            raise ValueError(f"URL does not start with {prefix}: {url}")
        bucket, _, encoded_key = url[len(prefix):].partition("/")
        if not bucket or not encoded_key:
            raise ValueError(f"Not an object URL: {url}")
        return bucket, unquote(encoded_key)

    parts = urlsplit(url)
    suffix = "." + S3_DOMAIN
    host = parts.hostname or ""
    if parts.scheme != "https" or not host.endswith(suffix):
        raise ValueError(f"Not an S3 object URL: {url}")
    bucket = host[: -len(suffix)]
    key = unquote(parts.path.lstrip("/"))
    if not bucket or not key:
        raise ValueError(f"Not an S3 object URL: {url}")
    return bucket, key
