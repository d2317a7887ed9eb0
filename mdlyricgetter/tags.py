from dataclasses import dataclass
from os import PathLike

import mutagen
from mutagen import MutagenError
from mutagen.flac import VCFLACDict
from mutagen.id3 import ID3, ID3NoHeaderError
from mutagen.mp4 import MP4Tags
from mutagen.oggflac import OggFLACVComment
from mutagen.oggopus import OggOpusVComment
from mutagen.oggspeex import OggSpeexVComment
from mutagen.oggtheora import OggTheoraCommentDict
from mutagen.oggvorbis import OggVCommentDict

ID3_ARTIST = 'TPE1'
ID3_ALBUM_ARTIST = 'TPE2'
ID3_TITLE = 'TIT2'
ID3_LYRICS = 'USLT'
ID3_EXTENDED_TEXT = 'TXXX'
ID3_COMMENT = 'COMM'

MP4_ARTIST = '\xa9ART'
MP4_ALBUM_ARTIST = 'aART'
MP4_TITLE = '\xa9nam'
MP4_LYRICS = '\xa9lyr'

VORBIS_ARTIST = 'artist'
VORBIS_ALBUM_ARTIST = 'albumartist'
VORBIS_TITLE = 'title'
VORBIS_LYRICS = 'unsyncedlyrics'

MULTI_VALUE_SEPARATOR = '/'

VORBIS_COMMENT_TYPES = (
    VCFLACDict,
    OggVCommentDict,
    OggOpusVComment,
    OggFLACVComment,
    OggSpeexVComment,
    OggTheoraCommentDict,
)


class TagReadError(Exception):
    """
    Raised when a file carries no tag we are able to read.
    """

    def __init__(self, path: str | PathLike[str], message: str):
        super().__init__(message)
        self.path = path


@dataclass(frozen=True)
class LyricsEntry:
    """A dedicated lyrics field (ID3 USLT, MP4 ©lyr, Vorbis UNSYNCEDLYRICS)."""

    text: str
    description: str = ''


@dataclass(frozen=True)
class ExtendedText:
    """A user-defined text field with a free-form description (ID3 TXXX)."""

    description: str
    value: str


@dataclass(frozen=True)
class Comment:
    description: str
    text: str


@dataclass(frozen=True)
class TextFrame:
    """A plain text field addressed only by its identifier."""

    frame_id: str
    text: str


TagField = LyricsEntry | ExtendedText | Comment | TextFrame


@dataclass(frozen=True)
class TagView:
    """
    Format-independent view of the tag fields we care about.

    ``fields`` holds every lyrics-bearing candidate in tag order.
    """

    artist: str | None = None
    album_artist: str | None = None
    title: str | None = None
    fields: tuple[TagField, ...] = ()


def read_tags(path: str | PathLike[str]) -> TagView:
    """
    Read the tags of a file.

    An ID3 tag is looked up first regardless of the file extension,
    otherwise mutagen is asked to detect the container.
    Malformed files can make the format parsers fail in arbitrary ways, so any
    failure while parsing is reported as a TagReadError.
    :raise TagReadError: if the file has no readable tag.
    """
    try:
        return _from_id3(ID3(path))
    except ID3NoHeaderError:
        pass
    except (MutagenError, OSError) as e:
        raise TagReadError(path, str(e)) from e
    except Exception as e:
        raise TagReadError(path, repr(e)) from e

    try:
        file = mutagen.File(path)
    except (MutagenError, OSError) as e:
        raise TagReadError(path, str(e)) from e
    except Exception as e:
        raise TagReadError(path, repr(e)) from e

    if file is None or file.tags is None:
        raise TagReadError(path, 'no tags found')

    tags = file.tags
    if isinstance(tags, ID3):
        return _from_id3(tags)
    if isinstance(tags, MP4Tags):
        return _from_mp4(tags)
    if isinstance(tags, VORBIS_COMMENT_TYPES):
        return _from_vorbis(tags)

    raise TagReadError(path, f'unsupported tag format {type(tags).__name__}')


def _join(values) -> str | None:
    if not values:
        return None
    return MULTI_VALUE_SEPARATOR.join(str(value) for value in values)


def _from_id3(tags: ID3) -> TagView:
    def text_of(frame_id: str) -> str | None:
        frame = tags.get(frame_id)
        return _join(frame.text) if frame is not None else None

    # Dedicated lyrics frames come first, the labelled text frames follow in tag order
    fields: list[TagField] = [LyricsEntry(text=frame.text, description=frame.desc) for frame in tags.getall(ID3_LYRICS)]
    for frame in tags.values():
        if frame.FrameID == ID3_EXTENDED_TEXT:
            fields.append(ExtendedText(description=frame.desc, value='\n'.join(frame.text)))
        elif frame.FrameID == ID3_COMMENT:
            fields.append(Comment(description=frame.desc, text='\n'.join(frame.text)))

    return TagView(
        artist=text_of(ID3_ARTIST),
        album_artist=text_of(ID3_ALBUM_ARTIST),
        title=text_of(ID3_TITLE),
        fields=tuple(fields),
    )


def _from_mp4(tags: MP4Tags) -> TagView:
    return TagView(
        artist=_join(tags.get(MP4_ARTIST)),
        album_artist=_join(tags.get(MP4_ALBUM_ARTIST)),
        title=_join(tags.get(MP4_TITLE)),
        fields=tuple(LyricsEntry(text=text) for text in tags.get(MP4_LYRICS, [])),
    )


def _from_vorbis(tags) -> TagView:
    fields: list[TagField] = []
    # Iterating the comment list keeps the original tag order
    for key, value in tags:
        key = key.lower()
        if key == VORBIS_LYRICS:
            fields.append(LyricsEntry(text=value))
        else:
            fields.append(TextFrame(frame_id=key, text=value))

    return TagView(
        artist=_join(tags.get(VORBIS_ARTIST)),
        album_artist=_join(tags.get(VORBIS_ALBUM_ARTIST)),
        title=_join(tags.get(VORBIS_TITLE)),
        fields=tuple(fields),
    )
