"""
JPEG segment layout constants, markers, and size limits.
"""
import struct

# File magic
JPEG_MAGIC = b"\xFF\xD8"
MAGIC_PREFIX_MAX_LENGTH = 2

# Markers
SOS_MARKER = 0xFFDA  # start of scan, image data follows
APP_MARKER_MIN = 0xFFE0
APP_MARKER_MAX = 0xFFEF

# Struct formats
# Segment header: marker(2) + length(2), big endian
SEGMENT_HEADER_STRUCT = struct.Struct(">HH")
UINT16_STRUCT = struct.Struct(">H")

# Sizes
HEADER_SIZE = 2  # width of the marker and of the length field
SEGMENT_HEADER_SIZE = SEGMENT_HEADER_STRUCT.size  # 4 bytes

# Largest value the length field can carry (length field + magic + data)
DATA_MAX_SIZE = (1 << 16) - 1

# Tail chunk size used when composing output (default: 64 KiB)
DEFAULT_CHUNK_SIZE = 64 * 1024

# Vendor identifiers
TINYMETA_VENDOR = "tinymeta"
TINYMETA_GZIP_VENDOR = "tinymeta-gzip"
