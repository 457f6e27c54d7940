"""Package registry lookups used for the download link."""

import logging

import requests

logger = logging.getLogger('pkghome.registry')

DEFAULT_MIRROR = 'https://cran.rstudio.com'
PACKAGE_URL = 'https://cran.r-project.org/package={name}'


def registry_mirror(configured=None):
    """Return the configured mirror, falling back to the default one."""
    if not configured or configured == '@CRAN@':
        return DEFAULT_MIRROR
    return configured.rstrip('/')


def parse_package_index(text):
    """Return the set of package names listed in a PACKAGES index."""
    names = set()
    for line in text.splitlines():
        if line.startswith('Package:'):
            names.add(line.split(':', 1)[1].strip())
    return names


def on_registry(name, mirror=None, session=None, timeout=30):
    """
    Check whether ``name`` is published on the registry.

    Any network or HTTP failure counts as "not published" so that an
    offline build still succeeds.
    """
    session = session or requests.Session()
    index_url = f"{registry_mirror(mirror)}/src/contrib/PACKAGES"
    try:
        response = session.get(index_url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Could not reach package registry {index_url}: {e}")
        return False
    return name in parse_package_index(response.text)
