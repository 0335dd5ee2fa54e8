import json
import sys

import pytest

import mwav_config
from mwav_config import (CodecSettings, coerce_setting, get_config_path, load_config, save_config,
                         settings_from_config, settings_to_config)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / 'nested' / 'config.json'
    monkeypatch.setenv(mwav_config.CONFIG_ENV_VAR, str(path))
    return path


def test_env_var_overrides_path(config_file):
    assert get_config_path() == str(config_file)


@pytest.mark.skipif(not sys.platform.startswith('linux'), reason="XDG layout is Linux-only")
def test_xdg_path(tmp_path, monkeypatch):
    monkeypatch.delenv(mwav_config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
    assert get_config_path() == str(tmp_path / 'morsewav' / 'config.json')


def test_missing_config_is_empty(config_file):
    assert load_config() == {}


def test_corrupt_config_is_empty(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text('{not json')
    assert load_config() == {}


def test_non_object_config_is_empty(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text('[1, 2, 3]')
    assert load_config() == {}


def test_save_and_load(config_file):
    save_config({'wpm': 15, 'tone_hz': 650})
    assert json.loads(config_file.read_text()) == {'wpm': 15, 'tone_hz': 650}
    assert load_config() == {'wpm': 15, 'tone_hz': 650}


def test_settings_from_config_ignores_unknown_keys():
    settings = settings_from_config({'wpm': 12, 'character_wpm': 18, 'theme': 'dark'})
    assert settings == CodecSettings(wpm=12, character_wpm=18)


def test_settings_round_trip():
    settings = CodecSettings(signal_threshold=0.2)
    assert settings_from_config(settings_to_config(settings)) == settings


def test_settings_from_config_converts_strings():
    settings = settings_from_config({'wpm': '15', 'character_wpm': '18', 'signal_threshold': '0.2'})
    assert settings == CodecSettings(wpm=15, character_wpm=18, signal_threshold=0.2)
    assert settings_from_config({'character_wpm': 'none'}).character_wpm is None


def test_settings_from_config_skips_bad_values(caplog):
    with caplog.at_level('WARNING', logger='mwav_config'):
        settings = settings_from_config({'wpm': 'fast', 'tone_hz': None, 'sample_rate': [8000]})
    assert settings == CodecSettings()
    assert sum('ignoring config value' in r.getMessage() for r in caplog.records) == 3


def test_coerce_setting_rejects_unknown_key():
    with pytest.raises(ValueError):
        coerce_setting('colour', 'blue')
