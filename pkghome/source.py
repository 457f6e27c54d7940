"""Locate the document the home page is built from."""

import os
from dataclasses import dataclass
from typing import Optional, Sequence

NONE = 'none'
LIGHTWEIGHT = 'lightweight'
RICH = 'rich'

# Index files beat READMEs, and .Rmd beats .md at each tier
HOME_CANDIDATES = ('index.Rmd', 'README.Rmd', 'index.md', 'README.md')


@dataclass(frozen=True)
class HomePageSource:
    kind: str
    path: Optional[str] = None

    @property
    def stem(self):
        if self.path is None:
            return None
        return os.path.splitext(os.path.basename(self.path))[0]


def find_first_existing(root: str, candidates: Sequence[str]) -> Optional[str]:
    for candidate in candidates:
        path = os.path.join(root, candidate)
        if os.path.isfile(path):
            return path
    return None


def resolve_home_source(pkg_path: str) -> HomePageSource:
    path = find_first_existing(pkg_path, HOME_CANDIDATES)
    if path is None:
        return HomePageSource(NONE)
    if path.endswith('.Rmd'):
        return HomePageSource(RICH, path)
    return HomePageSource(LIGHTWEIGHT, path)
