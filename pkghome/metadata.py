"""
Package metadata read from a DESCRIPTION file.
"""

import os
import re
import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from .settings import HomeConfig

logger = logging.getLogger('pkghome.metadata')

ROLE_CODES = {
    'cre': 'maintainer',
    'aut': 'author',
    'fnd': 'funder',
    'ctb': 'contributor',
    'cph': 'copyright holder',
    'ths': 'thesis advisor',
    'trl': 'translator',
}

# Roles shown in the sidebar, highest precedence first
MAIN_ROLES = ('maintainer', 'author', 'funder')

AUTHOR_ENTRY_RE = re.compile(r'\s*([^\[\],]+?)\s*\[([^\]]+)\]')
MAINTAINER_RE = re.compile(r'^\s*(.*?)\s*(?:<[^>]*>)?\s*$')
COMMENT_RE = re.compile(r'\([^)]*\)')


@dataclass(frozen=True)
class Author:
    name: str
    roles: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class PackageMetadata:
    name: str
    title: str
    description: str
    license: str
    urls: Tuple[str, ...] = ()
    bug_report_url: Optional[str] = None
    authors_by_role: Mapping[str, Tuple[Author, ...]] = field(default_factory=dict)
    home_config: HomeConfig = field(default_factory=HomeConfig)


def parse_dcf(text):
    """Parse Debian control format text into a dict of fields."""
    fields = {}
    current = None
    for line in text.splitlines():
        if not line.strip():
            continue
        if line[0] in ' \t':
            if current is None:
                raise ValueError(f"Continuation line without a field: {line!r}")
            fields[current] += '\n' + line.strip()
            continue
        key, sep, value = line.partition(':')
        if not sep:
            raise ValueError(f"Malformed DESCRIPTION line: {line!r}")
        current = key.strip()
        fields[current] = value.strip()
    return fields


def read_description(pkg_path):
    """Read the DESCRIPTION file of the package at ``pkg_path``."""
    path = os.path.join(pkg_path, 'DESCRIPTION')
    if not os.path.exists(path):
        raise FileNotFoundError(f"No DESCRIPTION file found in {pkg_path}")
    with open(path, 'r', encoding='utf-8') as f:
        return parse_dcf(f.read())


def _squash(value):
    return ' '.join(value.split())


def split_author_entries(text):
    """Split on top-level commas; commas inside [...] or (...) stay in their entry."""
    entries = []
    depth = 0
    current = []
    for char in text:
        if char in '[(':
            depth += 1
        elif char in '])' and depth:
            depth -= 1
        elif char == ',' and depth == 0:
            entries.append(''.join(current).strip())
            current = []
            continue
        current.append(char)
    entries.append(''.join(current).strip())
    return [entry for entry in entries if entry]


def parse_authors(author_field, maintainer_field=None) -> List[Author]:
    """
    Parse the plain ``Author`` field and the ``Maintainer`` field.

    Entries look like ``Jane Doe [aut, cre]``; entries without a role
    list count as authors. The person named in ``Maintainer`` always
    carries the maintainer role.
    """
    people: Dict[str, set] = {}
    order: List[str] = []

    def add(name, roles):
        name = _squash(name)
        if not name:
            return
        if name not in people:
            people[name] = set()
            order.append(name)
        people[name].update(roles)

    for entry in split_author_entries(_squash(author_field or '')):
        match = AUTHOR_ENTRY_RE.match(entry)
        if match:
            name, codes = match.groups()
            roles = [ROLE_CODES.get(code.strip(), code.strip()) for code in codes.split(',') if code.strip()]
            add(name, roles)
            continue
        for name in re.split(r'\s+and\s+', COMMENT_RE.sub('', entry)):
            add(name, ['author'])

    if maintainer_field:
        match = MAINTAINER_RE.match(_squash(maintainer_field))
        add(match.group(1), ['maintainer'])

    return [Author(name=name, roles=frozenset(people[name])) for name in order]


def group_by_role(authors: Sequence[Author]) -> Dict[str, Tuple[Author, ...]]:
    grouped: Dict[str, List[Author]] = {}
    for author in authors:
        for role in sorted(author.roles):
            grouped.setdefault(role, []).append(author)
    return {role: tuple(members) for role, members in grouped.items()}


def main_authors(authors_by_role: Mapping[str, Sequence[Author]]) -> List[Author]:
    """
    Authors shown on the home page: maintainers, then authors, then funders.

    Someone listed under several of these roles appears once, tagged
    with the highest-precedence role only.
    """
    seen = set()
    result = []
    for role in MAIN_ROLES:
        for author in authors_by_role.get(role, ()):
            if author.name in seen:
                continue
            seen.add(author.name)
            result.append(Author(name=author.name, roles=frozenset([role])))
    return result


def split_urls(value):
    if not value:
        return ()
    return tuple(url for url in re.split(r',\s+', value.strip()) if url)


def load_package(pkg_path, home_config=None) -> PackageMetadata:
    """Build PackageMetadata for the package rooted at ``pkg_path``."""
    desc = read_description(pkg_path)
    authors = parse_authors(desc.get('Author'), desc.get('Maintainer'))
    logger.debug(f"Loaded DESCRIPTION for {desc.get('Package')} with {len(authors)} people")

    return PackageMetadata(
        name=desc.get('Package', os.path.basename(os.path.abspath(pkg_path))),
        title=_squash(desc.get('Title', '')),
        description=_squash(desc.get('Description', '')),
        license=_squash(desc.get('License', '')),
        urls=split_urls(desc.get('URL')),
        bug_report_url=desc.get('BugReports') or None,
        authors_by_role=group_by_role(authors),
        home_config=home_config or HomeConfig(),
    )
