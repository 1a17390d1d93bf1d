"""DBF format constants, sizes, and type codes."""

# File header
HEADER_SIZE = 32            # Fixed file header preceding the descriptor array
DESCRIPTOR_SIZE = 32        # One field descriptor block
HEADER_TRAILER_SIZE = 2     # 0x0D terminator + one padding byte before the first record

# Field descriptor layout
DESCRIPTOR_NAME_SIZE = 11   # NUL-padded field name

# Field type codes (descriptor byte 11)
TYPE_CHARACTER = b"C"
TYPE_NUMERIC = b"N"

# Null marker: a field whose trimmed text starts with this is absent
NULL_MARKER = "*"

# Rendering of a Null value for display and export
NULL_DISPLAY = "(NULL)"
