"""Domain -> political lean resolution for web evidence sources.

Lookup is exact normalized host first, then the parent domain (last two
labels). There is no substring matching: "notcnn.com" is unknown even
though "cnn.com" is in the table.

The table is replaced wholesale by reload(): a JSON object mapping domain to
lean is fetched from an http(s) URL or read from a file, validated, then
swapped in with a single reference assignment. In-flight lookups keep using
the table they started with. On any failure the previous table stays.
"""

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import httpx
from loguru import logger

from truthcheck_system.config.media_bias import DEFAULT_BIAS_MAP, UNKNOWN, VALID_LEANS
from truthcheck_system.exceptions import BiasSnapshotError


def normalize_host(domain_or_url: str) -> str:
    """
    Normalize a domain or URL to a bare lowercase host.

    Inputs without a scheme are treated as hosts. A leading "www." and then
    a leading "m." label are stripped.

    Examples:
        >>> normalize_host("https://www.BBC.co.uk/news")
        'bbc.co.uk'
        >>> normalize_host("m.foxnews.com")
        'foxnews.com'
    """
    value = (domain_or_url or "").strip()
    if not value:
        return ""
    if not value.lower().startswith(("http://", "https://")):
        value = f"https://{value}"

    try:
        host = urlparse(value).hostname or ""
    except ValueError:
        return ""

    host = host.lower()
    if host.startswith("www."):
        host = host[4:]
    if host.startswith("m."):
        host = host[2:]
    return host


def parent_domain(host: str) -> str:
    """Last two dot-separated labels of host."""
    labels = host.split(".")
    return ".".join(labels[-2:]) if len(labels) >= 2 else host


def validate_snapshot(data: Any) -> Dict[str, str]:
    """
    Validate and normalize a bias snapshot.

    Raises:
        BiasSnapshotError: If data is not a non-empty object or any value is
            outside {left, center, right}. The snapshot is rejected whole.
    """
    if not isinstance(data, Mapping) or not data:
        raise BiasSnapshotError("Bias snapshot must be a non-empty JSON object")

    table: Dict[str, str] = {}
    for domain, lean in data.items():
        if not isinstance(domain, str) or not isinstance(lean, str):
            raise BiasSnapshotError(f"Invalid bias entry: {domain!r} -> {lean!r}")
        lean = lean.strip().lower()
        if lean not in VALID_LEANS:
            raise BiasSnapshotError(f"Invalid lean {lean!r} for {domain!r}")
        host = normalize_host(domain)
        if not host:
            raise BiasSnapshotError(f"Invalid domain {domain!r}")
        table[host] = lean
    return table


class DomainBiasResolver:
    """
    Classifies domains as left, center, right or unknown.

    Usage:
        resolver = DomainBiasResolver()
        resolver.classify("edition.cnn.com")  # "left"
        await resolver.reload("https://example.org/bias.json")

    Attributes:
        snapshot_path: Optional file the last good snapshot is persisted to
        source: Where the current table came from ("default", a URL or a path)
    """

    def __init__(
        self,
        table: Optional[Mapping[str, str]] = None,
        snapshot_path: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        fetch_timeout: float = 10.0,
    ):
        """
        Initialize the resolver.

        Args:
            table: Initial domain -> lean mapping (defaults to DEFAULT_BIAS_MAP)
            snapshot_path: When set and the file exists, the resolver warm-starts
                from it; successful reloads are written back to it
            http_client: Optional shared httpx client for URL reloads
            fetch_timeout: Timeout for URL reloads in seconds
        """
        self.logger = logger.bind(component="DomainBiasResolver")
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._http_client = http_client
        self.fetch_timeout = fetch_timeout

        self._table: Dict[str, str] = dict(table if table is not None else DEFAULT_BIAS_MAP)
        self.source = "default"

        if table is None and self.snapshot_path and self.snapshot_path.exists():
            self._warm_start()

        self.logger.info(
            "DomainBiasResolver initialized",
            domains=len(self._table),
            source=self.source,
        )

    def _warm_start(self) -> None:
        try:
            self._table = self._read_file(self.snapshot_path)
            self.source = str(self.snapshot_path)
        except BiasSnapshotError as e:
            self.logger.warning(f"Ignoring persisted bias snapshot: {e}")

    @property
    def table(self) -> Dict[str, str]:
        """Copy of the current table."""
        return dict(self._table)

    def classify(self, domain_or_url: str) -> str:
        """
        Classify a domain or URL.

        Returns:
            "left", "center", "right" or "unknown"
        """
        host = normalize_host(domain_or_url)
        if not host:
            return UNKNOWN

        table = self._table
        lean = table.get(host)
        if lean is not None:
            return lean
        return table.get(parent_domain(host), UNKNOWN)

    async def reload(self, source: str) -> bool:
        """
        Replace the table from a JSON snapshot.

        Args:
            source: http(s) URL or local file path

        Returns:
            True if the table was swapped, False if the previous table was kept
        """
        try:
            if source.lower().startswith(("http://", "https://")):
                new_table = await self._fetch_url(source)
            else:
                new_table = self._read_file(Path(source))
        except BiasSnapshotError as e:
            self.logger.warning(f"Bias reload failed, keeping previous table: {e}")
            return False

        self._table = new_table
        self.source = source
        self.logger.info("Bias table reloaded", domains=len(new_table), source=source)
        self._persist(new_table)
        return True

    async def _fetch_url(self, url: str) -> Dict[str, str]:
        try:
            if self._http_client is not None:
                response = await self._http_client.get(url, timeout=self.fetch_timeout)
            else:
                async with httpx.AsyncClient(timeout=self.fetch_timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise BiasSnapshotError(f"Could not fetch {url}: {e}") from e
        return validate_snapshot(data)

    @staticmethod
    def _read_file(path: Path) -> Dict[str, str]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise BiasSnapshotError(f"Could not read {path}: {e}") from e
        return validate_snapshot(data)

    def _persist(self, table: Dict[str, str]) -> None:
        if self.snapshot_path is None:
            return
        try:
            self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            self.snapshot_path.write_text(
                json.dumps(table, indent=2, sort_keys=True), encoding="utf-8"
            )
        except OSError as e:
            self.logger.warning(f"Could not persist bias snapshot: {e}")
