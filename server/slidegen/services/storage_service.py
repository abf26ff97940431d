import logging
import os
import uuid
from typing import Optional

import aiofiles

from slidegen.config import settings

logger = logging.getLogger(__name__)


class ExportStorage:
    """Exported decks on local disk, one directory per export.

    Keys look like ``exports/<uuid>/<filename>`` and resolve under
    ``/api/files/`` (see ``main.serve_file``).
    """

    prefix = "exports"

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = base_dir or settings.storage_dir

    def new_key(self, filename: str) -> str:
        # basename only, so a crafted filename can't escape the export directory
        return f"{self.prefix}/{uuid.uuid4()}/{os.path.basename(filename)}"

    async def save(self, filename: str, data: bytes) -> str:
        """Write an exported file and return its storage key."""
        key = self.new_key(filename)
        full_path = os.path.join(self.base_dir, key)
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        async with aiofiles.open(full_path, "wb") as f:
            await f.write(data)
        logger.info(f"Saved export {key} ({len(data)} bytes)")
        return key

    def url_for(self, key: str) -> str:
        return f"/api/files/{key}"
