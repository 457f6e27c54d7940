import os
import shutil
import logging
from datetime import datetime

import requests
from jinja2 import Environment, FileSystemLoader, TemplateNotFound, TemplateSyntaxError

from .metadata import load_package, ROLE_CODES, MAIN_ROLES
from .postprocess import update_homepage_html
from .render import ContentRenderer
from .settings import BuildOptions
from .sidebar import build_sidebar
from .source import resolve_home_source

PACKAGE_TEMPLATES = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Building home",
            "Updating ",
            "Copying LICENSE",
            "Writing authors.html",
            "Writing index.html",
            "Home page built in",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(verbose=False, log_dir=None):
    """Set up the pkghome logger: filtered console output and an optional debug log file."""
    logger = logging.getLogger('pkghome')
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not verbose:
        console_handler.addFilter(InfoFilter())
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_filename = datetime.now().strftime('pkghome_%Y-%m-%d_%H-%M-%S.log')
        file_handler = logging.FileHandler(os.path.join(log_dir, log_filename), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        logger.addHandler(file_handler)

    return logger


class HomeBuilder:
    def __init__(self, pkg_path='.', output_dir='docs', options=None, home_config=None,
                 rich_renderer=None, session=None):
        self.pkg_path = pkg_path
        self.options = options or BuildOptions()
        self.output_dir = output_dir if os.path.isabs(output_dir) else os.path.join(pkg_path, output_dir)
        self.session = session or requests.Session()
        self.logger = logging.getLogger('pkghome.HomeBuilder')

        self.pkg = load_package(pkg_path, home_config)
        self.content_renderer = ContentRenderer(rich_renderer, encoding=self.options.encoding)

        templates_dir = self.options.templates_dir or PACKAGE_TEMPLATES
        if not os.path.isdir(templates_dir):
            raise FileNotFoundError(f"Templates directory not found: {templates_dir}")
        self.env = Environment(loader=FileSystemLoader(templates_dir), autoescape=False)

    def data_home(self):
        source = resolve_home_source(self.pkg_path)
        self.logger.debug(f"Home page source: {source.kind} {source.path or ''}")
        return {
            'pagetitle': self.pkg.title,
            'sidebar': build_sidebar(
                self.pkg,
                mirror=self.options.registry_mirror,
                session=self.session,
                check_registry=self.options.check_registry,
            ),
            'source': source,
        }

    def relative_path(self):
        return '../' * self.options.depth

    def render_page(self, template_name, context, out_path):
        try:
            template = self.env.get_template(template_name)
        except (TemplateNotFound, TemplateSyntaxError) as e:
            raise RuntimeError(f"Template error for {template_name}: {e}") from e

        rendered_html = template.render(
            package=self.pkg,
            relative_path=self.relative_path(),
            encoding=self.options.encoding,
            **context
        )
        os.makedirs(os.path.dirname(out_path), exist_ok=True)
        with open(out_path, 'w', encoding=self.options.encoding, errors='xmlcharrefreplace') as output_file:
            output_file.write(rendered_html)
        self.logger.debug(f"Generated HTML: {out_path}")
        return out_path

    def copy_license(self):
        license_path = os.path.join(self.pkg_path, 'LICENSE')
        if not os.path.exists(license_path):
            return None
        self.logger.info("Copying LICENSE")
        os.makedirs(self.output_dir, exist_ok=True)
        return shutil.copy(license_path, self.output_dir)

    def build_authors(self):
        people = []
        seen = set()
        role_order = list(MAIN_ROLES) + [r for r in ROLE_CODES.values() if r not in MAIN_ROLES]
        role_order += sorted(r for r in self.pkg.authors_by_role if r not in role_order)
        for role in role_order:
            for author in self.pkg.authors_by_role.get(role, ()):
                if author.name not in seen:
                    seen.add(author.name)
                    people.append(author)

        self.logger.info("Writing authors.html")
        return self.render_page('authors.html', {
            'pagetitle': 'Authors',
            'authors': [(a.name, [r for r in role_order if r in a.roles]) for a in people],
        }, os.path.join(self.output_dir, 'authors.html'))

    def build_home(self):
        """Build index.html for the package and return its path."""
        start_time = datetime.now()
        self.logger.info("Building home")

        data = self.data_home()
        self.copy_license()
        self.build_authors()

        body = self.content_renderer.render(data['source'], self.pkg.description, self.output_dir)

        self.logger.info("Writing index.html")
        index_path = self.render_page('home.html', {
            'pagetitle': data['pagetitle'],
            'sidebar': data['sidebar'],
            'index': body,
        }, os.path.join(self.output_dir, 'index.html'))

        update_homepage_html(
            index_path,
            strip_header=self.pkg.home_config.strip_header,
            encoding=self.options.encoding,
        )

        elapsed = (datetime.now() - start_time).total_seconds()
        self.logger.info(f"Home page built in {elapsed:.3f} seconds.")
        return index_path

    def close(self):
        self.session.close()
