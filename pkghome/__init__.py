"""
pkghome - build the home page of a package documentation site.

pkghome picks the home page source (index.Rmd, README.Rmd, index.md or
README.md), renders it, assembles a sidebar from the package
DESCRIPTION and writes index.html.
"""

__version__ = "0.1.0"

from .core import HomeBuilder
from .postprocess import HomePage, MalformedPageError
from .render import ContentRenderer, RenderError, RscriptRenderer

__all__ = ['HomeBuilder', 'HomePage', 'MalformedPageError', 'ContentRenderer',
           'RenderError', 'RscriptRenderer']
