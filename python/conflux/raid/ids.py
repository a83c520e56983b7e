"""
Utilities for handling RAiD identifiers
"""
from typing import Tuple
from urllib.parse import urlsplit

def raid_id_parts(raid_id: str) -> Tuple[str, str]:
    """
    split a RAiD identifier URL into its handle prefix and suffix.  For example,
    ``https://raid.org/10.25.10.1234/a1b2c`` yields ``("10.25.10.1234", "a1b2c")``.  A trailing
    slash is ignored.
    :raises ValueError:  if the identifier does not have at least two path segments
    """
    path = urlsplit(raid_id or '').path
    parts = [p for p in path.strip('/').split('/') if p]
    if len(parts) < 2:
        raise ValueError("Not a recognizable RAiD identifier: " + repr(raid_id))
    return (parts[-2], parts[-1])
