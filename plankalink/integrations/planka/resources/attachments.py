"""
Attachment operations.

Uploads stream from disk; URL uploads stream the download into a per-call
temporary directory, hand the file to `upload`, and always remove it.

Usage:
    attachment = await client.attachments.upload("card-1", "/tmp/report.pdf")
    attachment = await client.attachments.upload_from_url(
        "card-1", "https://example.com/logo"
    )
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
import time
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

from plankalink.integrations.base import (
    EmptyDownloadError,
    LocalFileNotFoundError,
    TransportError,
)
from plankalink.integrations.planka.included import Included
from plankalink.integrations.planka.resources.base import (
    PlankaTransport,
    Resource,
    operation,
)
from plankalink.integrations.planka.schemas import (
    INTEGRATION,
    Attachment,
    CardDetailEnvelope,
    CardParams,
    DeleteAttachmentParams,
    ItemEnvelope,
    UploadAttachmentFromUrlParams,
    UploadAttachmentParams,
    validate,
)

logger = logging.getLogger(__name__)

# Some hosts reject httpx's default agent
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; KanbanMCP/1.0)"
TEMP_DIR_NAME = "plankalink-attachments"
FALLBACK_EXTENSION = ".bin"

MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
    "image/bmp": ".bmp",
    "image/tiff": ".tiff",
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-excel": ".xls",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.ms-powerpoint": ".ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ".pptx",
    "application/zip": ".zip",
    "application/json": ".json",
    "application/xml": ".xml",
    "text/plain": ".txt",
    "text/csv": ".csv",
    "text/html": ".html",
    "text/markdown": ".md",
    "audio/mpeg": ".mp3",
    "video/mp4": ".mp4",
}

_BASENAME_EXTENSION = re.compile(r"\.[A-Za-z0-9]{2,4}$")
_URL_EXTENSION = re.compile(
    r"\.(jpg|jpeg|png|gif|pdf|doc|docx|txt|svg)(?=$|[?#])", re.IGNORECASE
)


def resolve_filename(
    url: str,
    content_type: str | None = None,
    filename: str | None = None,
) -> str:
    """
    Pick the file name for a downloaded attachment.

    Priority:
        1. explicit filename (basename only; ignored if it is empty or dots)
        2. URL path basename carrying a 2-4 character extension
        3. extension from the response content type
        4. extension matched in the URL string
        5. `.bin`

    A name without an extension is the URL basename, or
    `download_<epoch millis>` when the URL has none.
    """
    if filename:
        # Never let a caller-supplied name escape the temp directory
        cleaned = Path(filename).name
        if cleaned.strip(". "):
            return cleaned

    basename = Path(unquote(urlparse(url).path)).name
    if _BASENAME_EXTENSION.search(basename):
        return basename

    stem = basename or f"download_{int(time.time() * 1000)}"
    return stem + guess_extension(url, content_type)


def guess_extension(url: str, content_type: str | None = None) -> str:
    """Extension from the content type, then the URL, then `.bin`."""
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in MIME_EXTENSIONS:
            return MIME_EXTENSIONS[mime]

    match = _URL_EXTENSION.search(url)
    if match:
        return "." + match.group(1).lower()

    return FALLBACK_EXTENSION


class AttachmentOperations(Resource):
    """Upload, list and delete card attachments."""

    def __init__(
        self,
        transport: PlankaTransport,
        *,
        temp_dir: str | Path | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        download_timeout: float = 60.0,
        download_transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            transport: Planka transport
            temp_dir: Root for temporary downloads (defaults to the OS temp dir)
            user_agent: User-Agent sent when downloading
            download_timeout: Timeout for URL downloads in seconds
            download_transport: Optional httpx transport for downloads
        """
        super().__init__(transport)
        self._temp_dir = Path(temp_dir) if temp_dir else Path(tempfile.gettempdir()) / TEMP_DIR_NAME
        self._user_agent = user_agent
        self._download_timeout = download_timeout
        self._download_transport = download_transport

    @property
    def temp_dir(self) -> Path:
        return self._temp_dir

    @operation("upload attachment")
    async def upload(self, card_id: str, file_path: str) -> Attachment:
        """
        Upload a local file as an attachment.

        Raises:
            OperationError: wrapping LocalFileNotFoundError when the file is
                missing (checked before any network call), TransportError or
                ValidationError
        """
        params = self._params(UploadAttachmentParams, card_id=card_id, file_path=file_path)

        if not Path(params.file_path).is_file():
            raise LocalFileNotFoundError(params.file_path, INTEGRATION)

        logger.info(f"[{INTEGRATION}] Uploading {params.file_path} to card {params.card_id}")

        token = await self._transport.get_token()
        raw = await self._transport.upload_file(
            f"/api/cards/{params.card_id}/attachments",
            params.file_path,
            token=token,
        )
        attachment = validate(ItemEnvelope[Attachment], raw).item

        logger.info(f"[{INTEGRATION}] Uploaded attachment {attachment.id}")
        return attachment

    @operation("upload attachment from URL")
    async def upload_from_url(
        self,
        card_id: str,
        url: str,
        filename: str | None = None,
    ) -> Attachment:
        """
        Download a URL and upload it as an attachment.

        The download is written to a fresh directory under `temp_dir` and
        removed afterwards whatever the outcome.
        """
        params = self._params(
            UploadAttachmentFromUrlParams, card_id=card_id, url=url, filename=filename
        )

        workdir: Path | None = None
        try:
            self._temp_dir.mkdir(parents=True, exist_ok=True)
            workdir = Path(tempfile.mkdtemp(prefix="upload-", dir=self._temp_dir))

            temp_path = await self._download(params.url, workdir, params.filename)
            return await self.upload(params.card_id, str(temp_path))
        finally:
            if workdir is not None:
                self._cleanup(workdir)

    async def _download(self, url: str, workdir: Path, filename: str | None) -> Path:
        """Stream `url` into `workdir` and return the written file."""
        logger.info(f"[{INTEGRATION}] Downloading {url}")

        async with httpx.AsyncClient(
            timeout=self._download_timeout,
            follow_redirects=True,
            headers={"User-Agent": self._user_agent, "Accept": "*/*"},
            transport=self._download_transport,
        ) as client:
            try:
                async with client.stream("GET", url) as response:
                    if response.is_error:
                        raise TransportError(
                            f"Failed to download file from {url}: "
                            f"HTTP {response.status_code} {response.reason_phrase}",
                            INTEGRATION,
                            status_code=response.status_code,
                        )

                    name = resolve_filename(url, response.headers.get("content-type"), filename)
                    temp_path = workdir / name

                    size = 0
                    with open(temp_path, "wb") as fh:
                        async for chunk in response.aiter_bytes():
                            fh.write(chunk)
                            size += len(chunk)
            except httpx.RequestError as e:
                raise TransportError(f"Failed to download file from {url}: {e}", INTEGRATION) from e

        if size == 0:
            raise EmptyDownloadError(url, INTEGRATION)

        logger.info(f"[{INTEGRATION}] Downloaded {size} bytes to {temp_path}")
        return temp_path

    @staticmethod
    def _cleanup(workdir: Path) -> None:
        try:
            shutil.rmtree(workdir)
        except OSError as e:
            logger.warning(f"[{INTEGRATION}] Failed to clean up temp files in {workdir}: {e}")

    @operation("delete attachment")
    async def delete(self, attachment_id: str) -> dict[str, bool]:
        """Delete an attachment; not-found handling is the server's."""
        params = self._params(DeleteAttachmentParams, id=attachment_id)

        logger.info(f"[{INTEGRATION}] Deleting attachment {params.id}")
        await self._transport.request(f"/api/attachments/{params.id}", method="DELETE")
        return {"success": True}

    @operation("get attachments")
    async def list_for_card(self, card_id: str) -> list[Attachment]:
        """Attachments side-loaded on the card detail response."""
        params = self._params(CardParams, card_id=card_id)

        card = await self._call(CardDetailEnvelope, f"/api/cards/{params.card_id}")
        return Included(card.included).entities("attachments", Attachment)
