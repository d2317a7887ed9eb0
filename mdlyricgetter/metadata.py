from dataclasses import asdict, dataclass

from .const import DEFAULT_ARTIST_FILTER, UNKNOWN_TITLE
from .tags import Comment, ExtendedText, LyricsEntry, TagField, TagView, TextFrame

LYRICS_LABEL = 'lyrics'
BLOCK_SEPARATOR = '\n\n'

__all__ = [
    'DEFAULT_ARTIST_FILTER',
    'TrackMetadata',
    'extract_metadata',
    'match_artist',
    'resolve_artist',
    'resolve_title',
    'collect_lyrics',
]


@dataclass(frozen=True)
class TrackMetadata:
    artist: str
    title: str
    lyrics: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'TrackMetadata':
        return cls(artist=data['artist'], title=data['title'], lyrics=data['lyrics'])


def extract_metadata(tag: TagView, needle: str) -> TrackMetadata | None:
    """
    Build the record for a track whose artist matches and that carries lyrics.

    Returns None otherwise; use match_artist to tell the two cases apart.
    """
    artist = match_artist(tag, needle)
    if artist is None:
        return None

    lyrics = collect_lyrics(tag)
    if lyrics is None:
        return None

    return TrackMetadata(artist=artist, title=resolve_title(tag), lyrics=lyrics)


def match_artist(tag: TagView, needle: str) -> str | None:
    artist = resolve_artist(tag)
    if artist is None or not _matches_artist(artist, needle):
        return None

    return artist


def resolve_artist(tag: TagView) -> str | None:
    """
    The artist, falling back to the album artist when the artist is missing or blank.
    """
    for candidate in (tag.artist, tag.album_artist):
        if candidate and candidate.strip():
            return candidate.strip()

    return None


def _matches_artist(artist: str, needle: str) -> bool:
    normalized_needle = needle.strip().lower()
    return not normalized_needle or normalized_needle in artist.lower()


def resolve_title(tag: TagView) -> str:
    title = (tag.title or '').strip()
    return title or UNKNOWN_TITLE


def collect_lyrics(tag: TagView) -> str | None:
    """
    Gather the lyrics blocks of all lyrics-bearing fields.

    Blocks are trimmed, empty ones dropped and duplicates removed, keeping the first occurrence.
    """
    blocks: dict[str, None] = {}

    for field in tag.fields:
        text = _lyrics_text(field)
        if text is None:
            continue

        text = text.strip()
        if text:
            blocks.setdefault(text)

    if not blocks:
        return None

    return BLOCK_SEPARATOR.join(blocks)


def _lyrics_text(field: TagField) -> str | None:
    if isinstance(field, LyricsEntry):
        return field.text
    if isinstance(field, ExtendedText) and field.description.lower() == LYRICS_LABEL:
        return field.value
    if isinstance(field, Comment) and field.description.lower() == LYRICS_LABEL:
        return field.text
    if isinstance(field, TextFrame) and field.frame_id.lower() == LYRICS_LABEL:
        return field.text

    return None
