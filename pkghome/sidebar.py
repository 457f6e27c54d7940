"""Sidebar for the home page: links, license and developers."""

import re
import html
import logging

from .metadata import main_authors
from .registry import on_registry, PACKAGE_URL

logger = logging.getLogger('pkghome.sidebar')

LICENSE_URLS = {
    'GPL-2': 'https://www.r-project.org/Licenses/GPL-2',
    'GPL-3': 'https://www.r-project.org/Licenses/GPL-3',
    'LGPL-2': 'https://www.r-project.org/Licenses/LGPL-2',
    'LGPL-2.1': 'https://www.r-project.org/Licenses/LGPL-2.1',
    'LGPL-3': 'https://www.r-project.org/Licenses/LGPL-3',
    'AGPL-3': 'https://www.r-project.org/Licenses/AGPL-3',
    'Artistic-2.0': 'https://www.r-project.org/Licenses/Artistic-2.0',
    'BSD_2_clause': 'https://www.r-project.org/Licenses/BSD_2_clause',
    'BSD_3_clause': 'https://www.r-project.org/Licenses/BSD_3_clause',
    'MIT': 'https://www.r-project.org/Licenses/MIT',
}

# Longest names first so LGPL-2.1 wins over LGPL-2
LICENSE_RE = re.compile(
    r'(?<![\w.-])(file LICENSE|'
    + '|'.join(re.escape(name) for name in sorted(LICENSE_URLS, key=len, reverse=True))
    + r')(?![\w.-]*\w)'
)


def list_with_heading(bullets, heading):
    if not bullets:
        return ''
    items = ''.join(f'<li>{bullet}</li>\n' for bullet in bullets)
    return f"<h2>{heading}</h2><ul class='list-unstyled'>\n{items}</ul>\n"


def link_url(text, href):
    """A sidebar link whose label may wrap after every run of slashes."""
    label = re.sub(r'(/+)', r'\1&#8203;', href)
    return f"{text} at <br /><a href='{href}'>{label}</a>"


def autolink_license(license_text):
    def replace(match):
        name = match.group(1)
        if name == 'file LICENSE':
            return "file <a href='LICENSE'>LICENSE</a>"
        return f"<a href='{LICENSE_URLS[name]}'>{name}</a>"
    return LICENSE_RE.sub(replace, license_text)


def link_registry(pkg, mirror=None, session=None, check=True):
    if not check or not on_registry(pkg.name, mirror=mirror, session=session):
        return []
    return [link_url('Download from CRAN', PACKAGE_URL.format(name=pkg.name))]


def link_github(pkg):
    for url in pkg.urls:
        if 'github' in url:
            return [link_url('Browse source code', url)]
    return []


def link_bug_report(pkg):
    if not pkg.bug_report_url:
        return []
    return [link_url('Report a bug', pkg.bug_report_url)]


def link_meta(pkg):
    return [link_url(link.text, link.href) for link in pkg.home_config.links]


def sidebar_links(pkg, mirror=None, session=None, check_registry=True):
    links = (
        link_registry(pkg, mirror=mirror, session=session, check=check_registry)
        + link_github(pkg)
        + link_bug_report(pkg)
        + link_meta(pkg)
    )
    return list_with_heading(links, 'Links')


def sidebar_license(pkg):
    return (
        '<h2>License</h2>\n'
        f'<p>{autolink_license(pkg.license)}</p>\n'
    )


def author_desc(author):
    role = next(iter(author.roles))
    return f"{html.escape(author.name)} <br />\n<small class='roles'> {role.capitalize()} </small>"


def sidebar_authors(pkg):
    authors = main_authors(pkg.authors_by_role)
    if not authors:
        return ''
    bullets = [author_desc(author) for author in authors]
    bullets.append("<a href='authors.html'>All authors...</a>")
    return list_with_heading(bullets, 'Developers')


def build_sidebar(pkg, mirror=None, session=None, check_registry=True):
    """Return the sidebar HTML, or the configured override verbatim."""
    if pkg.home_config.sidebar is not None:
        logger.debug("Using sidebar from configuration")
        return pkg.home_config.sidebar

    return (
        sidebar_links(pkg, mirror=mirror, session=session, check_registry=check_registry)
        + sidebar_license(pkg)
        + sidebar_authors(pkg)
    )
