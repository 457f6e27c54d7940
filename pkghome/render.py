"""
Turn the home page source into an HTML fragment.

Markdown is rendered in-process with mistune. R Markdown needs an
external engine, which is injected as a ``RichMarkupRenderer`` so the
pipeline can run without R installed.
"""

import os
import html
import shutil
import logging
import subprocess
from contextlib import contextmanager
from typing import Any, Dict, Optional, Protocol

import mistune
from bs4 import BeautifulSoup

from .source import HomePageSource, NONE, LIGHTWEIGHT, RICH


class RenderError(RuntimeError):
    """The external renderer failed; the page build cannot continue."""


class RichMarkupRenderer(Protocol):
    def render(self, path: str, options: Dict[str, Any]) -> str:
        ...


# rmarkdown::render returns the output path, which we print for the parent
R_RENDER_FRAGMENT = (
    "args <- commandArgs(trailingOnly = TRUE); "
    "out <- rmarkdown::render(args[[1]], "
    "output_format = rmarkdown::html_fragment(toc = as.logical(args[[3]])), "
    "quiet = TRUE, encoding = args[[2]]); "
    "cat(out)"
)
R_RENDER_DEFAULT = (
    "args <- commandArgs(trailingOnly = TRUE); "
    "out <- rmarkdown::render(args[[1]], "
    "output_options = list(html_preview = as.logical(args[[3]])), "
    "quiet = TRUE, encoding = args[[2]]); "
    "cat(out)"
)


class RscriptRenderer:
    """Render R Markdown by running ``rmarkdown::render`` in a child R process."""

    def __init__(self, rscript='Rscript', building=True):
        self.rscript = rscript
        self.building = building
        self.logger = logging.getLogger('pkghome.render.Rscript')

    def _command(self, path, options):
        encoding = options.get('encoding', 'UTF-8')
        if options.get('output_format') == 'html_fragment':
            flag = 'TRUE' if options.get('toc', False) else 'FALSE'
            return [self.rscript, '-e', R_RENDER_FRAGMENT, path, encoding, flag]
        flag = 'TRUE' if options.get('html_preview', False) else 'FALSE'
        return [self.rscript, '-e', R_RENDER_DEFAULT, path, encoding, flag]

    def render(self, path, options):
        """Render ``path`` and return the text of the file rmarkdown produced."""
        env = os.environ.copy()
        if self.building:
            env['IN_PKGDOWN'] = 'true'

        command = self._command(path, options)
        self.logger.debug(f"Running: {' '.join(command[:2])} ... {path}")
        try:
            result = subprocess.run(command, check=True, capture_output=True, text=True, env=env)
        except FileNotFoundError as e:
            raise RenderError(f"Could not run {self.rscript}: {e}") from e
        except subprocess.CalledProcessError as e:
            raise RenderError(f"Rendering {path} failed with exit code {e.returncode}: {(e.stderr or '').strip()}") from e

        output_path = result.stdout.strip().splitlines()[-1] if result.stdout.strip() else None
        if output_path and not os.path.isabs(output_path):
            output_path = os.path.join(os.path.dirname(path), output_path)
        if not output_path or not os.path.isfile(output_path):
            raise RenderError(f"Rendering {path} did not produce an output file")

        with open(output_path, 'r', encoding=options.get('encoding', 'UTF-8')) as f:
            rendered = f.read()
        if options.get('output_format') == 'html_fragment':
            os.remove(output_path)
        return rendered


@contextmanager
def staged_copy(source_path, staging_dir):
    """Copy ``source_path`` into ``staging_dir`` for the duration of the block."""
    os.makedirs(staging_dir, exist_ok=True)
    staged = os.path.join(staging_dir, os.path.basename(source_path))
    shutil.copyfile(source_path, staged)
    try:
        yield staged
    finally:
        if os.path.exists(staged):
            os.remove(staged)


def strip_first_h1(fragment):
    soup = BeautifulSoup(fragment, 'html.parser')
    header = soup.find('h1')
    if header is None:
        return fragment
    header.decompose()
    return str(soup)


def markdown_is_fresh(rmd_path):
    """True when the sibling .md exists and is at least as new as the .Rmd."""
    md_path = os.path.splitext(rmd_path)[0] + '.md'
    if not os.path.exists(md_path):
        return False
    return os.path.getmtime(md_path) >= os.path.getmtime(rmd_path)


class ContentRenderer:
    def __init__(self, rich_renderer: Optional[RichMarkupRenderer] = None, encoding='UTF-8'):
        self.rich_renderer = rich_renderer or RscriptRenderer()
        self.encoding = encoding
        self.logger = logging.getLogger('pkghome.render.ContentRenderer')
        self.markdown_parser = self.create_markdown_parser()

    def create_markdown_parser(self):
        """Create a Mistune markdown parser with a custom renderer."""
        class CustomRenderer(mistune.HTMLRenderer):
            def __init__(self):
                super().__init__(escape=False)
            def block_code(self, code, info=None):
                escaped_code = mistune.escape(code)
                if info:
                    lang = mistune.escape(info.split(None, 1)[0])
                    return '<pre class="sourceCode {}"><code>{}</code></pre>\n'.format(lang, escaped_code)
                return '<pre><code>{}</code></pre>\n'.format(escaped_code)
        return mistune.create_markdown(
            renderer=CustomRenderer(),
            plugins=['table', 'task_lists', 'strikethrough', 'url']
        )

    def render_description(self, description):
        return '<p>{}</p>'.format(html.escape(description or ''))

    def render_markdown(self, path):
        try:
            with open(path, 'r', encoding=self.encoding) as f:
                text = f.read()
        except (IOError, OSError) as e:
            raise RenderError(f"Failed to read {path}: {e}") from e
        return self.markdown_parser(text)

    def update_readme(self, path):
        """Regenerate README.md from README.Rmd when it is missing or stale."""
        if markdown_is_fresh(path):
            self.logger.debug(f"{os.path.basename(path)} is up to date")
            return
        self.logger.info(f"Updating {os.path.splitext(os.path.basename(path))[0]}.md")
        self.rich_renderer.render(path, {'html_preview': False, 'encoding': self.encoding})

    def render_rich(self, source, staging_dir):
        if source.stem == 'README':
            self.update_readme(source.path)

        with staged_copy(source.path, staging_dir) as staged:
            fragment = self.rich_renderer.render(staged, {
                'output_format': 'html_fragment',
                'toc': False,
                'encoding': self.encoding,
            })
        return strip_first_h1(fragment)

    def render(self, source: HomePageSource, description, staging_dir):
        """Return the body HTML for ``source``."""
        if source.kind == NONE:
            return self.render_description(description)
        if source.kind == LIGHTWEIGHT:
            return self.render_markdown(source.path)
        if source.kind == RICH:
            return self.render_rich(source, staging_dir)
        raise ValueError(f"Unknown home page source kind: {source.kind}")
