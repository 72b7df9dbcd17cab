import hashlib
import logging
import shutil
from pathlib import Path, PurePosixPath

from fastapi import UploadFile

from accounts.utils.config import settings


logger = logging.getLogger(__name__)

GRAVATAR_BASE_URL = "https://s.gravatar.com/avatar"
GRAVATAR_SIZE = 100
# URL prefix the avatars dir is served under, whatever its location on disk
AVATARS_URL_PREFIX = "avatars"


def gravatar_url(email: str) -> str:
    """Default avatar for an address, derived from its md5 hash."""
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"{GRAVATAR_BASE_URL}/{digest}?s={GRAVATAR_SIZE}"


def ensure_storage_dirs() -> None:
    Path(settings.temp_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.avatars_dir).mkdir(parents=True, exist_ok=True)


def receive_upload(upload: UploadFile) -> Path:
    """Write an uploaded file into the temp dir under its original name."""
    filename = Path(upload.filename or "").name
    if filename in ("", ".", ".."):
        raise ValueError("Uploaded file has no filename")

    temp_dir = Path(settings.temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    temp_path = temp_dir / filename
    upload.file.seek(0)
    with temp_path.open("wb") as out:
        shutil.copyfileobj(upload.file, out)
    return temp_path


def publish_avatar(temp_path: Path) -> str:
    """Move a received upload into the public avatars dir.

    An existing avatar with the same filename is replaced. Returns the path
    under the served prefix, e.g. ``avatars/me.png``.
    """
    avatars_dir = Path(settings.avatars_dir)
    avatars_dir.mkdir(parents=True, exist_ok=True)
    target = avatars_dir / temp_path.name
    shutil.move(str(temp_path), str(target))
    logger.info("Stored avatar %s", target)
    return str(PurePosixPath(AVATARS_URL_PREFIX, temp_path.name))
