"""
Shared constants for userdic-merge.

Column names and encodings here are a compatibility contract with
downstream tools; change them only together with the readers.
"""

# =============================================================================
# Vocabulary (user dictionary) CSV
# =============================================================================

USER_DICTIONARY_COLUMN = "UserDictionary"


# =============================================================================
# Token CSV
# =============================================================================

TOKEN_CSV_HEADER = ("Token", "byte_start", "byte_end", "position", "position_length")

# utf-8-sig writes the BOM (EF BB BF) on output and strips it on input
CSV_ENCODING = "utf-8-sig"
CSV_LINE_TERMINATOR = "\n"


# =============================================================================
# Input text
# =============================================================================

TEXT_ENCODING = "utf-8"
