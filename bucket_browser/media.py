from typing import Dict, List, Optional, Sequence

from bucket_browser.models import Entry

CATEGORIES: Dict[str, List[str]] = {
    "image": ["jpg", "jpeg", "png", "gif", "bmp", "webp", "svg", "ico"],
    "video": ["mp4", "webm", "ogg", "avi", "mov", "mkv"],
    "audio": ["mp3", "wav", "ogg", "flac", "aac"],
    "document": ["pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx"],
    "code": ["js", "ts", "tsx", "jsx", "py", "java", "c", "cpp", "h", "go", "rs"],
    "text": ["txt", "md", "json", "xml", "yaml", "yml", "csv"],
    "archive": ["zip", "rar", "7z", "tar", "gz"],
}

PREVIEWABLE = {
    "jpg", "jpeg", "png", "gif", "bmp", "webp", "svg", "pdf",
    "txt", "md", "json", "xml", "html", "css", "js", "ts", "tsx", "jsx",
    "mp4", "webm", "ogg", "mp3", "wav",
}

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def file_extension(name: str) -> str:
    parts = name.split(".")
    return parts[-1].lower() if len(parts) > 1 else ""


def file_category(name: str) -> str:
    # first match wins, so ".ogg" is video
    ext = file_extension(name)
    for category, extensions in CATEGORIES.items():
        if ext in extensions:
            return category
    return "other"


def is_previewable(name: str) -> bool:
    return file_extension(name) in PREVIEWABLE


def is_media_file(name: str) -> bool:
    return file_category(name) in ("image", "video")


def media_entries(entries: Sequence[Entry]) -> List[Entry]:
    """Slideshow sequence: image and video files in listing order."""
    return [e for e in entries if not e.is_folder and is_media_file(e.name)]


def media_index(entries: Sequence[Entry], path: str) -> int:
    for i, entry in enumerate(media_entries(entries)):
        if entry.full_path == path:
            return i
    return -1


def format_file_size(size: Optional[int]) -> str:
    if size is None:
        return "-"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    if value.is_integer():
        return f"{int(value)} {SIZE_UNITS[unit]}"
    return f"{value:.2f} {SIZE_UNITS[unit]}"


def describe(entry: Entry) -> dict:
    """Entry JSON plus the display hints the slideshow needs."""
    item = entry.to_json()
    item["category"] = "folder" if entry.is_folder else file_category(entry.name)
    item["previewable"] = not entry.is_folder and is_previewable(entry.name)
    item["sizeLabel"] = format_file_size(entry.size)
    return item
