"""
Document Identifiers

Identifiers are 12 bytes rendered as 24 hex characters: a 4-byte seconds
timestamp, 5 bytes fixed per process and a 3-byte counter. Ids minted by
one process therefore sort in creation order.
"""

import itertools
import os
import random
import time

_PROCESS_UNIQUE = os.urandom(5)
_counter = itertools.count(random.randint(0, 0xFFFFFF))


def new_object_id():
    """Return a fresh 24-character hexadecimal identifier."""
    timestamp = int(time.time()) & 0xFFFFFFFF
    count = next(_counter) & 0xFFFFFF
    raw = timestamp.to_bytes(4, 'big') + _PROCESS_UNIQUE + count.to_bytes(3, 'big')
    return raw.hex()
