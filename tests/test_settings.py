"""Tests for site configuration loading."""

import os
import pytest
from pathlib import Path

from pkghome.settings import SiteSettings, HomeConfig, HomeLink, BuildOptions


class TestSiteSettings:
    """Test cases for SiteSettings."""

    def test_defaults_without_config(self, temp_dir):
        loader = SiteSettings(temp_dir)
        settings = loader.load_settings()
        assert settings['destination'] == 'docs'
        assert loader.config_file_path is None
        assert loader.home_config() == HomeConfig()

    def test_load_home_section(self, temp_dir):
        Path(temp_dir, '_pkgdown.yml').write_text(
            "destination: site\n"
            "home:\n"
            "  strip_header: true\n"
            "  links:\n"
            "  - text: Blog\n"
            "    href: https://blog.example.org\n",
            encoding='utf-8',
        )
        loader = SiteSettings(temp_dir)
        settings = loader.load_settings()
        assert settings['destination'] == 'site'
        assert loader.home_config() == HomeConfig(
            sidebar=None,
            links=[HomeLink('Blog', 'https://blog.example.org')],
            strip_header=True,
        )

    def test_config_file_precedence(self, temp_dir):
        Path(temp_dir, '_pkgdown.yaml').write_text("destination: from-yaml\n", encoding='utf-8')
        os.mkdir(os.path.join(temp_dir, 'pkgdown'))
        Path(temp_dir, 'pkgdown', '_pkgdown.yml').write_text("destination: nested\n", encoding='utf-8')
        assert SiteSettings(temp_dir).load_settings()['destination'] == 'from-yaml'

    def test_nested_config_file(self, temp_dir):
        os.mkdir(os.path.join(temp_dir, 'pkgdown'))
        Path(temp_dir, 'pkgdown', '_pkgdown.yml').write_text("destination: nested\n", encoding='utf-8')
        assert SiteSettings(temp_dir).load_settings()['destination'] == 'nested'

    def test_invalid_yaml(self, temp_dir):
        Path(temp_dir, '_pkgdown.yml').write_text("home: [unclosed\n", encoding='utf-8')
        with pytest.raises(ValueError, match="Invalid YAML"):
            SiteSettings(temp_dir).load_settings()

    def test_non_mapping_config(self, temp_dir):
        Path(temp_dir, '_pkgdown.yml').write_text("- just\n- a list\n", encoding='utf-8')
        with pytest.raises(ValueError, match="mapping"):
            SiteSettings(temp_dir).load_settings()

    def test_merge_with_args(self, temp_dir):
        loader = SiteSettings(temp_dir)
        loader.load_settings()
        merged = loader.merge_with_args({'destination': 'out', 'depth': None, 'check_registry': False})
        assert merged['destination'] == 'out'
        assert merged['depth'] == 0
        assert merged['check_registry'] is False

    def test_build_options(self):
        options = SiteSettings.build_options({
            'depth': 2,
            'encoding': 'latin-1',
            'registry_mirror': 'https://mirror.example.org',
            'check_registry': False,
            'templates': '/tmp/templates',
        })
        assert options == BuildOptions(2, 'latin-1', 'https://mirror.example.org', False, '/tmp/templates')


class TestHomeConfig:
    """Test cases for the home section."""

    def test_sidebar_override(self):
        assert HomeConfig.from_dict({'sidebar': '<p>Mine</p>'}).sidebar == '<p>Mine</p>'

    def test_link_without_href(self):
        with pytest.raises(ValueError, match="text' and 'href"):
            HomeConfig.from_dict({'links': [{'text': 'Broken'}]})

    def test_home_not_a_mapping(self):
        with pytest.raises(ValueError):
            HomeConfig.from_dict(['sidebar'])

    def test_strip_header_must_be_boolean(self):
        """Test that a quoted 'false' is rejected rather than read as true."""
        with pytest.raises(ValueError, match="strip_header"):
            HomeConfig.from_dict({'strip_header': 'false'})
        assert HomeConfig.from_dict({'strip_header': True}).strip_header is True
        assert HomeConfig.from_dict({'strip_header': False}).strip_header is False
