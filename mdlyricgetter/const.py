PROGNAME = 'mdlyricgetter'
VERSION = '0.1.0'

DEFAULT_ARTIST_FILTER = 'udio'
DEFAULT_EXTENSION = 'mp3'
DEFAULT_OUTPUT_NAME = 'lyrics.txt'
UNKNOWN_TITLE = 'Unknown Title'

LOG_LEVEL_ENV = 'MDLYRICGETTER_LOG'
