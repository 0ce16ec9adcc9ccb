from __future__ import annotations

import stat
from pathlib import Path
from typing import Union

from .models import DocumentLookup, LookupStatus


def lookup_document(path: Union[str, Path]) -> DocumentLookup:
    """Stat and probe the served file without raising.

    Relative paths resolve against the current working directory at call
    time, so a new file (or new content) is picked up on the next request.
    """
    path = Path(path)
    try:
        st = path.stat()
    except FileNotFoundError:
        return DocumentLookup(LookupStatus.MISSING, path, detail="no such file")
    except NotADirectoryError:
        return DocumentLookup(LookupStatus.MISSING, path, detail="parent is not a directory")
    except OSError as exc:
        return DocumentLookup(LookupStatus.UNREADABLE, path, detail=exc.strerror or str(exc))

    if not stat.S_ISREG(st.st_mode):
        return DocumentLookup(LookupStatus.NOT_A_FILE, path, stat=st, detail="not a regular file")

    # os.access() ignores permissions for root
    try:
        with open(path, "rb"):
            pass
    except FileNotFoundError:
        return DocumentLookup(LookupStatus.MISSING, path, detail="removed while probing")
    except OSError as exc:
        return DocumentLookup(LookupStatus.UNREADABLE, path, stat=st, detail=exc.strerror or str(exc))

    return DocumentLookup(LookupStatus.FOUND, path, stat=st)
