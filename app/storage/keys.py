import random
import re
import string
from datetime import datetime

_UNSAFE_CHARS_RE = re.compile(r"[^a-zA-Z0-9.-]")
_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 6


def safe_name(name: str) -> str:
    """Replace every character outside ``[a-zA-Z0-9.-]`` with an underscore."""
    return _UNSAFE_CHARS_RE.sub("_", name)


def generate_file_name(filename: str, *, now: datetime, rng: random.Random) -> str:
    """Build ``{epoch_ms}-{random base36}-{safe filename}``."""
    timestamp = int(now.timestamp() * 1000)
    suffix = "".join(rng.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{timestamp}-{suffix}-{safe_name(filename)}"


def object_key(owner_id: str, generated_name: str) -> str:
    """Scope a generated file name under the owner's prefix."""
    return f"{safe_name(owner_id)}/{generated_name}"
