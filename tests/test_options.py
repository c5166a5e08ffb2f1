"""
Unit tests for the TakeOptions builder.
"""

from urllib.parse import parse_qs

import pytest

from renderscreenshot import TakeOptions
from renderscreenshot.constants import OPTION_TABLE
from renderscreenshot.options import format_value


class TestTakeOptions:
    """Test construction and copy-on-write behaviour."""

    def test_url_factory(self):
        assert TakeOptions.url("https://example.com").to_config() == {'url': 'https://example.com'}

    def test_html_factory(self):
        assert TakeOptions.html("<h1>Hi</h1>").to_config() == {'html': '<h1>Hi</h1>'}

    def test_from_config(self):
        config = {'url': 'https://example.com', 'width': 1200}

        assert TakeOptions.from_config(config).to_config() == config

    def test_setter_returns_new_instance(self):
        original = TakeOptions.url("https://example.com")
        updated = original.width(1200)

        assert updated is not original
        assert original.to_config() == {'url': 'https://example.com'}
        assert updated.to_config() == {'url': 'https://example.com', 'width': 1200}

    def test_no_aliasing_of_lists(self):
        selectors = ['.ad']
        options = TakeOptions.url("https://example.com").hide(selectors)
        selectors.append('.banner')

        assert options.to_config()['hide'] == ['.ad']

        config = options.to_config()
        config['hide'].append('.popup')
        assert options.to_config()['hide'] == ['.ad']

    def test_from_config_does_not_alias_input(self):
        config = {'url': 'https://example.com', 'headers': {'X-Test': '1'}}
        options = TakeOptions.from_config(config)
        config['headers']['X-Test'] = '2'
        config['width'] = 10

        assert options.to_config() == {'url': 'https://example.com', 'headers': {'X-Test': '1'}}

    def test_immutable(self):
        options = TakeOptions.url("https://example.com")

        with pytest.raises(AttributeError):
            options.other = 1
        with pytest.raises(TypeError):
            options._config['width'] = 10

    def test_equality(self):
        a = TakeOptions.url("https://example.com").width(10).height(20)
        b = TakeOptions.url("https://example.com").height(20).width(10)

        assert a == b
        assert a != a.height(30)

    def test_boolean_defaults(self):
        options = (TakeOptions.url("https://example.com")
                   .mobile().full_page().block_ads().dark_mode().cache_refresh())

        config = options.to_config()
        assert config['mobile'] is True
        assert config['full_page'] is True
        assert config['block_ads'] is True
        assert config['dark_mode'] is True
        assert config['cache_refresh'] is True

    def test_geolocation(self):
        assert TakeOptions().geolocation(1.5, 2.5).get('geolocation') == \
            {'latitude': 1.5, 'longitude': 2.5}
        assert TakeOptions().geolocation(1.5, 2.5, 10).get('geolocation') == \
            {'latitude': 1.5, 'longitude': 2.5, 'accuracy': 10}

    def test_auth_basic(self):
        assert TakeOptions().auth_basic("user", "pass").get('auth_basic') == \
            {'username': 'user', 'password': 'pass'}

    def test_set_unknown_key(self):
        options = TakeOptions.url("https://example.com").set('future_option', 42)

        assert 'future_option' in options
        assert options.get('future_option') == 42


class TestToParams:
    """Test nested API parameter serialization."""

    def test_viewport_grouped(self):
        params = (TakeOptions.url("https://example.com")
                  .width(1200).height(630).scale(2).mobile()
                  .to_params())

        assert params == {
            'url': 'https://example.com',
            'viewport': {'width': 1200, 'height': 630, 'scale': 2, 'mobile': True},
        }

    def test_pdf_grouped(self):
        params = (TakeOptions.url("https://example.com")
                  .format("pdf")
                  .pdf_paper_size("a4")
                  .pdf_landscape()
                  .pdf_margin_top("1cm")
                  .pdf_print_background()
                  .to_params())

        assert params == {
            'url': 'https://example.com',
            'format': 'pdf',
            'pdf': {
                'paper_size': 'a4',
                'landscape': True,
                'margin_top': '1cm',
                'print_background': True,
            },
        }

    def test_storage_grouped(self):
        params = (TakeOptions.url("https://example.com")
                  .storage_enabled()
                  .storage_path("{year}/{hash}.{ext}")
                  .storage_acl("private")
                  .to_params())

        assert params['storage'] == {
            'enabled': True,
            'path': '{year}/{hash}.{ext}',
            'acl': 'private',
        }

    def test_flat_options(self):
        params = (TakeOptions.html("<h1>Hi</h1>")
                  .wait_for("networkidle")
                  .block_urls(["*.ads.com"])
                  .hide([".cookie"])
                  .cookies([{'name': 'a', 'value': 'b'}])
                  .cache_ttl(3600)
                  .to_params())

        assert params == {
            'html': '<h1>Hi</h1>',
            'wait_for': 'networkidle',
            'block_urls': ['*.ads.com'],
            'hide': ['.cookie'],
            'cookies': [{'name': 'a', 'value': 'b'}],
            'cache_ttl': 3600,
        }

    def test_empty_groups_omitted(self):
        params = TakeOptions.url("https://example.com").to_params()

        assert 'viewport' not in params
        assert 'pdf' not in params
        assert 'storage' not in params

    def test_unknown_keys_passed_through(self):
        params = TakeOptions.url("https://example.com").set('future_option', 'on').to_params()

        assert params['future_option'] == 'on'

    def test_none_values_dropped(self):
        params = TakeOptions.from_config({'url': 'https://example.com', 'width': None}).to_params()

        assert params == {'url': 'https://example.com'}

    def test_every_known_option_serialized(self):
        config = {key: 'x' for key in OPTION_TABLE}
        params = TakeOptions.from_config(config).to_params()

        for key, spec in OPTION_TABLE.items():
            container = params if spec.group is None else params[spec.group]
            assert container[spec.param] == 'x', key


class TestToQueryString:
    """Test GET query string serialization."""

    def test_basic(self):
        query = (TakeOptions.url("https://example.com")
                 .width(1200)
                 .full_page()
                 .block_ads(False)
                 .to_query_string())

        assert parse_qs(query) == {
            'url': ['https://example.com'],
            'width': ['1200'],
            'full_page': ['true'],
            'block_ads': ['false'],
        }

    def test_url_encoded(self):
        query = TakeOptions.url("https://example.com/?a=1&b=2").to_query_string()

        assert query == "url=https%3A%2F%2Fexample.com%2F%3Fa%3D1%26b%3D2"

    def test_excludes_complex_options(self):
        query = (TakeOptions.html("<p>x</p>")
                 .hide([".a"])
                 .inject_script("x()")
                 .pdf_landscape()
                 .storage_enabled()
                 .set('future_option', 1)
                 .to_query_string())

        assert query == ""

    def test_query_eligible_options(self):
        options = (TakeOptions.url("https://example.com")
                   .wait_for_selector("#main")
                   .wait_for_timeout(500)
                   .reduced_motion()
                   .media_type("print")
                   .timezone("Europe/Lisbon")
                   .locale("pt-PT")
                   .cache_refresh())

        assert parse_qs(options.to_query_string()) == {
            'url': ['https://example.com'],
            'wait_for_selector': ['#main'],
            'wait_for_timeout': ['500'],
            'reduced_motion': ['true'],
            'media_type': ['print'],
            'timezone': ['Europe/Lisbon'],
            'locale': ['pt-PT'],
            'cache_refresh': ['true'],
        }


class TestFormatValue:
    """Test scalar formatting shared by query strings and signatures."""

    @pytest.mark.parametrize("value,expected", [
        (True, 'true'),
        (False, 'false'),
        (0, '0'),
        (1200, '1200'),
        (2.0, '2'),
        (1.5, '1.5'),
        (0.1, '0.1'),
        ('og_card', 'og_card'),
    ])
    def test_format(self, value, expected):
        assert format_value(value) == expected
