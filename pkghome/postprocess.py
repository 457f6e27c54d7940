"""
Post-processing of the rendered home page.

The page is loaded into a ``HomePage`` handle, tweaked in place and
written back to the same path. The handle owns the tree for the whole
pass; nothing keeps a reference to it after ``save``.
"""

import re
import logging
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, Tag

from .sidebar import list_with_heading

logger = logging.getLogger('pkghome.postprocess')

IMAGE_PREFIXES = (
    (re.compile(r'^vignettes/'), 'articles/'),
    (re.compile(r'^man/figures/'), 'reference/figures/'),
)


class MalformedPageError(ValueError):
    """The rendered page is missing structure the home page relies on."""


class HomePage:
    """Mutable handle on a parsed HTML page and the file it came from."""

    def __init__(self, soup: BeautifulSoup, path: Optional[str] = None, encoding: str = 'UTF-8'):
        self.soup = soup
        self.path = path
        self.encoding = encoding

    @classmethod
    def load(cls, path, encoding='UTF-8'):
        with open(path, 'r', encoding=encoding) as f:
            return cls(BeautifulSoup(f.read(), 'html.parser'), path, encoding)

    @classmethod
    def from_string(cls, markup, encoding='UTF-8'):
        return cls(BeautifulSoup(markup, 'html.parser'), None, encoding)

    def fragment(self, markup):
        """Parse ``markup`` and return its first top-level element."""
        return BeautifulSoup(markup, 'html.parser').find(True)

    def __str__(self):
        return str(self.soup)

    def save(self, path=None):
        """Write the tree back without reformatting it."""
        path = path or self.path
        if path is None:
            raise ValueError("HomePage has no path to save to")
        # Characters the encoding lacks become character references
        with open(path, 'wb') as f:
            f.write(self.soup.encode(self.encoding))
        logger.debug(f"Wrote {path}")
        return path


def is_badge_row(paragraph):
    """True if every child of ``paragraph`` is a link, ignoring whitespace between them."""
    has_link = False
    for child in paragraph.children:
        if isinstance(child, Tag):
            if child.name != 'a':
                return False
            has_link = True
        elif isinstance(child, NavigableString) and child.strip():
            return False
    return has_link


def first_body_paragraph(page):
    """The first <p> in document order that is not part of the sidebar."""
    for paragraph in page.soup.find_all('p'):
        if paragraph.find_parent('div', id='sidebar') is None:
            return paragraph
    return None


def move_badges(page):
    first_para = first_body_paragraph(page)
    if first_para is None or not is_badge_row(first_para):
        return False

    sidebar = page.soup.find('div', id='sidebar')
    if sidebar is None:
        raise MalformedPageError("Page has badges but no <div id='sidebar'>")

    badges = [str(child) for child in first_para.find_all('a', recursive=False)]
    sidebar.append(page.fragment(f"<div>{list_with_heading(badges, 'Dev status')}</div>"))
    first_para.decompose()
    logger.debug(f"Moved {len(badges)} badges to the sidebar")
    return True


def tweak_header(page, strip_header=False):
    header = page.soup.find('h1')
    if header is None:
        return
    if strip_header:
        header.decompose()
    else:
        header.wrap(page.soup.new_tag('div', attrs={'class': 'page-header'}))


def fix_image_links(page):
    for img in page.soup.find_all('img', src=True):
        src = img['src']
        for pattern, replacement in IMAGE_PREFIXES:
            src = pattern.sub(replacement, src)
        img['src'] = src


def tweak_tables(page):
    """Give every table the ``table`` class so the site stylesheet applies."""
    for table in page.soup.find_all('table'):
        classes = table.get('class') or []
        if isinstance(classes, str):
            classes = classes.split()
        if 'table' not in classes:
            table['class'] = ['table'] + list(classes)


def tweak_homepage_html(page, strip_header=False):
    move_badges(page)
    tweak_header(page, strip_header=strip_header)
    fix_image_links(page)
    tweak_tables(page)
    return page


def update_homepage_html(path, strip_header=False, encoding='UTF-8'):
    page = HomePage.load(path, encoding=encoding)
    tweak_homepage_html(page, strip_header=strip_header)
    page.save()
    return path
