"""Defines constants shared by the upload and JSON helpers."""

# Size limits applied when the corresponding setting is left at 0
DEFAULT_MAX_FILE_SIZE: int = 1024 * 1024 * 1024  # 1 GiB per multipart body
DEFAULT_MAX_JSON_SIZE: int = 1024 * 1024  # 1 MiB per JSON body

# Number of leading bytes handed to libmagic for content sniffing
SNIFF_LENGTH: int = 512

# Chunk size used when streaming an upload to disk
COPY_CHUNK_SIZE: int = 1024 * 1024

# Length of the random stem given to renamed uploads
RENAMED_FILE_STEM_LENGTH: int = 25

# Permission bits for directories created by ensure_dir
DIRECTORY_MODE: int = 0o755
