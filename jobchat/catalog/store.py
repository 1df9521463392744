"""Read-only job catalog loaded once at startup."""

import json
import warnings
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple, Union
from urllib.parse import quote

from pydantic import ValidationError

from jobchat.domain.models import JobPosting
from jobchat.logging import get_logger

from .exceptions import CatalogLoadError, CatalogLoadWarning

logger = get_logger(__name__, component="catalog")

DEFAULT_FALLBACK_URL_BASE = "https://careerclinician.com/jobs/"


def build_fallback_url(job_id: str, base: str = DEFAULT_FALLBACK_URL_BASE) -> str:
    """Deterministic posting URL for sources that do not carry one."""
    return f"{base}{quote(job_id, safe='')}"


class Catalog:
    """Immutable, ordered collection of job postings with id lookup.

    Catalog order is the source file order and is used as the final ranking
    tie-break, so it is preserved exactly.
    """

    def __init__(self, postings: Iterable[JobPosting] = (), source: Optional[str] = None):
        self._postings: Tuple[JobPosting, ...] = tuple(postings)
        self._by_id = {}
        for posting in self._postings:
            if posting.job_id in self._by_id:
                raise CatalogLoadError(f"duplicate job_id {posting.job_id!r}", source)
            self._by_id[posting.job_id] = posting
        self.source = source

    def get_by_id(self, job_id: str) -> Optional[JobPosting]:
        """Return the posting with this id, or None when it does not exist."""
        return self._by_id.get(job_id)

    def all(self) -> Tuple[JobPosting, ...]:
        """All postings in catalog order. The tuple and its items are read-only."""
        return self._postings

    def __len__(self) -> int:
        return len(self._postings)

    def __iter__(self) -> Iterator[JobPosting]:
        return iter(self._postings)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._by_id

    def __repr__(self) -> str:
        return f"Catalog(jobs={len(self)}, source={self.source!r})"


def parse_catalog(
    records: Any,
    fallback_url_base: str = DEFAULT_FALLBACK_URL_BASE,
    source: Optional[str] = None,
) -> Catalog:
    """Validate raw records into a Catalog.

    Accepts either a list of posting objects or an object with a "jobs" list.

    Raises:
        CatalogLoadError: If the structure or any record is malformed
    """
    if isinstance(records, dict) and "jobs" in records:
        records = records["jobs"]

    if not isinstance(records, list):
        raise CatalogLoadError(
            f"expected a list of postings, got {type(records).__name__}", source
        )

    postings: List[JobPosting] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise CatalogLoadError(f"record {index} is not an object", source)
        try:
            posting = JobPosting.model_validate(record)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise CatalogLoadError(f"record {index} is invalid: {problems}", source) from e

        if posting.url is None:
            posting = posting.model_copy(
                update={"url": build_fallback_url(posting.job_id, fallback_url_base)}
            )
        postings.append(posting)

    return Catalog(postings, source=source)


def load_catalog(
    source: Union[str, Path],
    fallback_url_base: str = DEFAULT_FALLBACK_URL_BASE,
) -> Catalog:
    """Load the catalog from a JSON file.

    Any read or parse failure degrades to an empty catalog: a
    CatalogLoadWarning is emitted and a warning logged, but nothing is raised.

    Args:
        source: Path to the JSON job list
        fallback_url_base: Prefix for URLs derived from job ids

    Returns:
        Loaded Catalog (possibly empty)
    """
    path = Path(source)

    try:
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except OSError as e:
            raise CatalogLoadError(f"cannot read catalog: {e.strerror or e}", str(path)) from e
        except json.JSONDecodeError as e:
            raise CatalogLoadError(f"invalid JSON: {e}", str(path)) from e
        except UnicodeDecodeError as e:
            raise CatalogLoadError(f"invalid encoding, expected UTF-8: {e.reason} at byte {e.start}", str(path)) from e

        catalog = parse_catalog(records, fallback_url_base=fallback_url_base, source=str(path))

    except CatalogLoadError as e:
        warnings.warn(f"Catalog unavailable, serving an empty catalog: {e}", CatalogLoadWarning, stacklevel=2)
        logger.warning(
            "Catalog load failed; continuing with an empty catalog",
            extra={
                "event": "catalog.load.failed",
                "source": str(path),
                "reason": e.reason,
            },
        )
        return Catalog((), source=str(path))

    logger.info(
        f"Catalog loaded with {len(catalog)} jobs",
        extra={
            "event": "catalog.loaded",
            "source": str(path),
            "job_count": len(catalog),
        },
    )
    return catalog


def postings_to_dicts(postings: Sequence[JobPosting]) -> List[dict]:
    """Public JSON-ready form of a sequence of postings."""
    return [posting.to_public_dict() for posting in postings]
