"""Small presentation helpers shared by the HTTP and MCP surfaces."""
import re
from typing import Optional

DAY_NAMES = {
    "1": "Strength",
    "2": "Power",
    "3": "Endurance",
}

_YOUTUBE_PATTERN = re.compile(
    r"^.*((youtu\.be/)|(v/)|(/u/\w/)|(embed/)|(watch\?))\??v?=?([^#&?]*).*"
)


def day_display_text(day: str) -> str:
    return DAY_NAMES.get(str(day), str(day))


def youtube_video_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    m = _YOUTUBE_PATTERN.match(url)
    if m and len(m.group(7)) == 11:
        return m.group(7)
    return None


def youtube_embed_url(url: Optional[str]) -> Optional[str]:
    video_id = youtube_video_id(url)
    return f"https://www.youtube.com/embed/{video_id}" if video_id else None


def youtube_thumbnail_url(url: Optional[str]) -> Optional[str]:
    video_id = youtube_video_id(url)
    return f"https://img.youtube.com/vi/{video_id}/0.jpg" if video_id else None
