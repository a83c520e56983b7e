"""
Change detection for projects that have been registered as RAiDs.

The checksum of a project is the MD5 hash of its RAiD update request, serialized as canonical JSON
with the ``identifier`` block blanked out.  Because the identifier (which carries the
registry-owned version number) is excluded, the checksum changes only when the project's own
metadata changes.  Comparing the checksum stored at the last successful sync with a freshly
computed one tells whether the project is "dirty"--that is, out of sync with the registry.
"""
import hashlib
import json
from collections.abc import Mapping

from . import ChecksumError
from .domain import RAiDInfo

def canonical_json(request: Mapping) -> str:
    """
    serialize the given request into its canonical JSON form: keys sorted, no insignificant
    whitespace, list items kept in the order given.
    """
    try:
        return json.dumps(request, sort_keys=True, separators=(',', ':'), ensure_ascii=False)
    except (TypeError, ValueError) as ex:
        raise ChecksumError("Unable to serialize RAiD request for checksumming: " + str(ex),
                            cause=ex)

def compute_hash(update_request: Mapping) -> str:
    """
    return the hex-encoded MD5 hash of the given update request, ignoring its ``identifier`` block.
    The given request is not changed.
    :raises ChecksumError:  if the request contains values that cannot be serialized as JSON
    """
    req = dict(update_request)
    req['identifier'] = None
    return hashlib.md5(canonical_json(req).encode('utf-8')).hexdigest()

def is_dirty(update_request: Mapping, raidinfo: RAiDInfo) -> bool:
    """
    return True if the given update request differs from the one last synced with the registry,
    as recorded by the checksum in ``raidinfo``.
    """
    return compute_hash(update_request) != raidinfo.checksum
