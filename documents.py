import logging
import re
from typing import Iterable, List, Optional

import httpx

from models import DocumentDescriptor

logger = logging.getLogger(__name__)

_FALLBACK_NAMES = [
    "RPT_SafetyMeasures_Anthochoriou_v1.2.pdf",
    "RPT_SafetyMeasures_Dyo Korifes_v1.2.pdf",
    "RPT_SafetyMeasures_Kalamion_v1.2.pdf",
    "RPT_SafetyMeasures_Neochoriou_v1.2.pdf",
    "RPT_SafetyMeasures_S10_Vermiou_v1.2.pdf",
    "RPT_SafetyMeasures_S12_v1.2.pdf",
    "RPT_SafetyMeasures_S13_Polymylou_v1.2.pdf",
    "RPT_SafetyMeasures_S1N_Ag.Nikolaos_v1.2.pdf",
    "RPT_SafetyMeasures_S1-Panagias_v1.2.pdf",
    "RPT_SafetyMeasures_S1-Seliani_v1.2.pdf",
    "RPT_SafetyMeasures_S2-Agnaderou_v1.2.pdf",
    "RPT_SafetyMeasures_S2-Paramythias_v1.2.pdf",
    "RPT_SafetyMeasures_S3-Grika_v1.2.pdf",
    "RPT_SafetyMeasures_Symvolou_v1.2.pdf",
    "RPT_SafetyMeasures_T8-Dematiou_v1.2.pdf",
]

FALLBACK_DOCUMENTS: List[DocumentDescriptor] = [
    DocumentDescriptor(name=name, path=f"documents/{name}") for name in _FALLBACK_NAMES
]


def extract_site_name(filename: str) -> str:
    """
    Derive a readable site name from a report file name.

    Example:
        "RPT_SafetyMeasures_S1-Panagias_v1.2.pdf" -> "S1 Panagias"
    """
    name = re.sub(r"\.pdf$", "", filename, flags=re.IGNORECASE)
    name = re.sub(r"RPT_SafetyMeasures_", "", name, count=1, flags=re.IGNORECASE)
    name = re.sub(r"_v\d+\.\d+$", "", name, flags=re.IGNORECASE)
    name = re.sub(r"[_-]", " ", name)
    return name.strip()


def deduplicate(documents: Iterable[DocumentDescriptor]) -> List[DocumentDescriptor]:
    """Drop repeated paths, keeping the first occurrence and the original order."""
    seen = set()
    unique = []
    for doc in documents:
        if doc.path in seen:
            continue
        seen.add(doc.path)
        unique.append(doc)
    return unique


def _parse_listing(files) -> List[DocumentDescriptor]:
    """
    Map a GitHub contents API listing to PDF document descriptors.

    Raises:
        ValueError: If the payload is not a list of file entries.
    """
    if not isinstance(files, list):
        raise ValueError("expected a list of files")

    documents = []
    for entry in files:
        try:
            name = entry["name"]
            if not (name.endswith(".pdf") or name.endswith(".PDF")):
                continue
            documents.append(
                DocumentDescriptor(
                    name=name,
                    path=entry["path"],
                    url=entry.get("download_url"),
                    size=entry.get("size"),
                )
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"unexpected file entry: {e}")
    return documents


class DocumentCatalog:
    """
    Lists the reports the assistant can refer to.

    The list comes from the GitHub contents API of the document repository; when
    that is unreachable or returns something unexpected, the built-in
    `FALLBACK_DOCUMENTS` are used instead. Either way the result is deduplicated
    by path.

    Args:
        api_url: Contents API URL of the documents folder.
        fallback: Documents to use when the API is unavailable.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used instead of the network (tests).
    """

    def __init__(
        self,
        api_url: str,
        fallback: Optional[List[DocumentDescriptor]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.fallback = FALLBACK_DOCUMENTS if fallback is None else fallback
        self.timeout = timeout
        self.transport = transport

    async def load(self) -> List[DocumentDescriptor]:
        logger.info(f"📂 Loading document list from {self.api_url}")
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                resp = await client.get(
                    self.api_url, headers={"Accept": "application/vnd.github+json"}
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Could not reach the document repository: {e}")
            return self._use_fallback()

        if not resp.is_success:
            logger.warning(
                f"⚠️  Document repository returned {resp.status_code}, using fallback list"
            )
            return self._use_fallback()

        try:
            documents = _parse_listing(resp.json())
        except ValueError as e:
            logger.warning(f"⚠️  Unexpected document listing ({e}), using fallback list")
            return self._use_fallback()

        documents = deduplicate(documents)
        logger.info(f"✅ {len(documents)} documents loaded from the repository")
        return documents

    def _use_fallback(self) -> List[DocumentDescriptor]:
        documents = deduplicate(self.fallback)
        logger.info(f"📋 Using fallback list: {len(documents)} documents")
        return documents
