"""
Include Check - Path Prefix Resolver.

Pages reference shared resources relative to their own
location. A page directly under the corpus root uses bare
paths; a page one directory down prefixes them with "../",
two directories down with "../../", and so on.

Depth follows where a page sits in the corpus, not where a
symlink to it points.
"""

import os
from pathlib import Path
from typing import Union


PathLike = Union[str, Path]

PARENT_TOKEN = "../"


def document_depth(document: PathLike, corpus_root: PathLike) -> int:
    """
    Count the directories between corpus_root and the document.

    Raises:
        ValueError: If document is not under corpus_root
    """
    relative = Path(os.path.relpath(os.path.abspath(document), os.path.abspath(corpus_root)))
    if relative.parts[:1] == (os.pardir,) or relative == Path("."):
        raise ValueError(f"{document} is not inside corpus root {corpus_root}")
    return len(relative.parts) - 1


def prefix_for(document: PathLike, corpus_root: PathLike) -> str:
    """Get the relative prefix a document must put before canonical paths."""
    return PARENT_TOKEN * document_depth(document, corpus_root)


__all__ = ["PARENT_TOKEN", "document_depth", "prefix_for"]
