from mercado_jaci.models import DEFAULT_LOGO_URL, DEFAULT_PRIMARY_COLOR, StoreConfig
from mercado_jaci.repositories import MemoryKeyValueStore
from mercado_jaci.services import StoreConfigService


def test_default_config_when_nothing_stored(kv):
    service = StoreConfigService(kv)
    assert service.config == StoreConfig(DEFAULT_LOGO_URL, DEFAULT_PRIMARY_COLOR)
    assert service.css_variables() == {'--primary-color': '#0057b8'}


def test_update_persists_and_reloads(kv):
    service = StoreConfigService(kv)
    service.update_config(primary_color='#ff0000')

    assert kv.get('storeConfig') == {'logoUrl': DEFAULT_LOGO_URL, 'primaryColor': '#ff0000'}
    reloaded = StoreConfigService(kv)
    assert reloaded.config.primary_color == '#ff0000'
    assert reloaded.css_variables()['--primary-color'] == '#ff0000'


def test_partial_update_keeps_other_field():
    kv = MemoryKeyValueStore({'storeConfig': {'logoUrl': 'https://x/logo.png', 'primaryColor': '#123456'}})
    service = StoreConfigService(kv)
    result = service.update_config({'logo_url': 'https://y/logo.png', 'unknown': 1})

    assert result.logo_url == 'https://y/logo.png'
    assert result.primary_color == '#123456'
    assert not hasattr(result, 'unknown')


def test_no_validation_of_color():
    service = StoreConfigService(MemoryKeyValueStore())
    service.update_config(primary_color='not-a-color')
    assert service.css_variables() == {'--primary-color': 'not-a-color'}


def test_stored_garbage_falls_back_to_default():
    service = StoreConfigService(MemoryKeyValueStore({'storeConfig': 'garbage'}))
    assert service.config.primary_color == DEFAULT_PRIMARY_COLOR


def test_reload_without_write_gives_equal_record(kv):
    service = StoreConfigService(kv)
    saved = service.update_config(logo_url='https://x/logo.png', primary_color='#00aa00')
    assert StoreConfigService(kv).config == saved
