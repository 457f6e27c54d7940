"""Test configuration and fixtures for pkghome tests."""

import os
import pytest
import tempfile
import shutil
from pathlib import Path
from unittest.mock import Mock

DESCRIPTION = """Package: mypkg
Title: Tools for Testing Home Pages
Version: 1.0.0
Author: Jane Doe [aut, cre], John Roe [aut], Acme Corp [fnd, cph]
Maintainer: Jane Doe <jane@example.com>
Description: Builds things <quickly> & reliably.
    Second line of the description.
License: GPL-3
URL: https://mypkg.example.org, https://github.com/jane/mypkg
BugReports: https://github.com/jane/mypkg/issues
"""

README_MD = """# mypkg

[![CRAN](https://www.r-pkg.org/badges/version/mypkg)](https://cran.r-project.org/package=mypkg)
[![Build](https://github.com/jane/mypkg/badge.svg)](https://github.com/jane/mypkg/actions)

mypkg makes home pages.

![A plot](man/figures/plot.png)

| a | b |
|---|---|
| 1 | 2 |
"""


class FakeRenderer:
    """Stands in for the R Markdown renderer and records its calls."""

    def __init__(self, fragment="<h1>Title</h1>\n<p>Rendered body</p>", error=None):
        self.fragment = fragment
        self.error = error
        self.calls = []

    def render(self, path, options):
        self.calls.append({'path': path, 'options': dict(options), 'existed': os.path.exists(path)})
        if self.error is not None:
            raise self.error
        if options.get('output_format') == 'html_fragment':
            return self.fragment
        md_path = os.path.splitext(path)[0] + '.md'
        Path(md_path).write_text("# Regenerated\n", encoding='utf-8')
        return "# Regenerated\n"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def mock_package(temp_dir):
    """Create a package root with a DESCRIPTION file."""
    pkg_dir = Path(temp_dir) / 'mypkg'
    pkg_dir.mkdir()
    (pkg_dir / 'DESCRIPTION').write_text(DESCRIPTION, encoding='utf-8')
    return str(pkg_dir)


@pytest.fixture
def readme_package(mock_package):
    """A package with a README.md and a LICENSE file."""
    (Path(mock_package) / 'README.md').write_text(README_MD, encoding='utf-8')
    (Path(mock_package) / 'LICENSE').write_text("YEAR: 2024\nCOPYRIGHT HOLDER: Jane Doe\n", encoding='utf-8')
    return mock_package


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def mock_session():
    """A requests session whose registry index lists mypkg."""
    session = Mock()
    response = Mock()
    response.text = "Package: otherpkg\nVersion: 0.1\n\nPackage: mypkg\nVersion: 1.0.0\n"
    session.get.return_value = response
    return session


@pytest.fixture
def renderer_factory():
    """Build FakeRenderer instances with a custom fragment or error."""
    return FakeRenderer
