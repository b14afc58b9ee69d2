"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix() correctly read environment variables.
   - Ensures ip_salt() reads IP_SALT and warns when it's missing outside local runs.

2. Configuration loading behavior
   - Ensures load_config() returns the lambda's section of the active backend.
   - Validates that AppConfig fetching is safely isolated via monkeypatching.
   - Ensures load_config() raises ClientError when AppConfig calls fail.
   - Ensures missing AppConfig identifiers raise KeyError.
   - Ensures the local AppConfig agent is used when running under SAM.
"""

import os
import json
import logging
from io import BytesIO
from unittest.mock import MagicMock

import pytest
import botocore

from clicklinks.utils import config


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture(autouse=True)
def _env(monkeypatch):
    """Set up environment variables for testing."""
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('APPCONFIG_AGENT_URL', raising=False)


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'active_backend': 'redis',
        'configs': {
            'test_lambda': {
                'redis': {
                    'host': 'monkey',
                    'port': 659595,
                    'db': 3
                },
                'memory': {}
            }
        },
    }
    # fmt: on


@pytest.fixture
def mock_appconfig(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client returned by boto3."""
    client = MagicMock()
    client.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    client.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', lambda service: client)
    return client


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    """Ensure app_env() returns the correct environment value from APP_ENV"""
    monkeypatch.setitem(os.environ, 'APP_ENV', 'Test')
    assert config.app_env() == 'test'


def test_app_env_defaults_to_local(monkeypatch):
    """Ensure app_env() defaults to 'local'"""
    monkeypatch.delitem(os.environ, 'APP_ENV')
    assert config.app_env() == 'local'


def test_app_name(monkeypatch):
    """Ensure app_name() returns the correct environment value from APP_NAME"""
    monkeypatch.setitem(os.environ, 'APP_NAME', 'clicklinks')
    assert config.app_name() == 'clicklinks'


def test_app_name_not_set(monkeypatch):
    """Ensure app_name() returns None when APP_NAME is not set"""
    monkeypatch.delitem(os.environ, 'APP_NAME', raising=False)
    assert config.app_name() is None


def test_app_prefix(monkeypatch):
    """Ensure app_prefix() combines APP_NAME and APP_ENV"""
    monkeypatch.setitem(os.environ, 'APP_NAME', 'clicklinks')
    monkeypatch.setitem(os.environ, 'APP_ENV', 'test')
    assert config.app_prefix() == 'clicklinks:test'


def test_app_prefix_without_app_name(monkeypatch):
    """Ensure app_prefix() is None when APP_NAME is not set"""
    monkeypatch.delitem(os.environ, 'APP_NAME', raising=False)
    assert config.app_prefix() is None


def test_ip_salt(monkeypatch):
    """Ensure ip_salt() returns IP_SALT"""
    monkeypatch.setenv('IP_SALT', 'pepper')
    assert config.ip_salt() == 'pepper'


def test_ip_salt_missing_outside_local_runs(monkeypatch, caplog):
    """Ensure a missing IP_SALT is allowed but logged when deployed"""
    monkeypatch.delenv('IP_SALT', raising=False)

    with caplog.at_level(logging.WARNING, logger='clicklinks.utils.config'):
        assert config.ip_salt() == ''

    assert 'IP_SALT is not set' in caplog.text


def test_ip_salt_missing_in_local_runs(monkeypatch, caplog):
    """Ensure a missing IP_SALT isn't reported when running locally"""
    monkeypatch.delenv('IP_SALT', raising=False)
    monkeypatch.setenv('APP_ENV', 'local')

    with caplog.at_level(logging.WARNING, logger='clicklinks.utils.config'):
        assert config.ip_salt() == ''

    assert caplog.records == []


# -------------------------------
# 2. Configuration loading behavior
# -------------------------------


def test_load_config(mock_appconfig):
    """Ensure load_config() returns {<active backend>: <lambda section>} from AppConfig"""
    result = config.load_config('test_lambda')

    assert result == {'redis': {'host': 'monkey', 'port': 659595, 'db': 3}}

    mock_appconfig.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    mock_appconfig.get_latest_configuration.assert_called_once_with(
        ConfigurationToken='monkey_token',
    )


def test_load_config_with_memory_backend(mock_appconfig, appconfig_payload):
    """Ensure the active backend selects the returned section"""
    appconfig_payload['active_backend'] = 'memory'
    mock_appconfig.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}

    assert config.load_config('test_lambda') == {'memory': {}}


def test_load_config_for_unknown_lambda(mock_appconfig):
    """Ensure a document without the lambda's section raises KeyError"""
    with pytest.raises(KeyError):
        config.load_config('unknown_lambda')


def test_missing_appconfig_raises_error(monkeypatch):
    """Ensure load_config() propagates ClientError when AppConfig returns an error."""
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)

    with pytest.raises(botocore.exceptions.ClientError):
        config.load_config('test_lambda')


def test_missing_appconfig_identifiers(monkeypatch, mock_appconfig):
    """Ensure missing AppConfig identifiers raise KeyError before calling AWS."""
    monkeypatch.delenv('APPCONFIG_ENV_ID')

    with pytest.raises(KeyError, match="Missing required environment variables: 'APPCONFIG_ENV_ID'"):
        config.load_config('test_lambda')

    mock_appconfig.start_configuration_session.assert_not_called()


def test_load_config_from_local_agent(monkeypatch, mock_appconfig, appconfig_payload):
    """Ensure the local AppConfig agent is queried when running under SAM."""
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('APP_NAME', 'clicklinks')
    monkeypatch.setenv('APPCONFIG_AGENT_URL', 'http://host.docker.internal:2772')

    response = MagicMock()
    response.__enter__.return_value = BytesIO(json.dumps(appconfig_payload).encode('utf-8'))
    urlopen = MagicMock(return_value=response)
    monkeypatch.setattr(config.urllib.request, 'urlopen', urlopen)

    result = config.load_config('test_lambda')

    assert result == {'redis': {'host': 'monkey', 'port': 659595, 'db': 3}}
    urlopen.assert_called_once_with(
        'http://host.docker.internal:2772/applications/clicklinks/environments/local/configurations/backend-config',
        timeout=5,
    )
    mock_appconfig.start_configuration_session.assert_not_called()


@pytest.mark.parametrize(
    'url',
    [
        'ftp://localhost:2772',
        'http://evil.example.com:2772',
        'http://localhost:8080',
    ],
)
def test_local_agent_url_must_be_local(monkeypatch, url):
    """Ensure unsafe agent URLs are rejected."""
    monkeypatch.setenv('APP_ENV', 'local')
    monkeypatch.setenv('APPCONFIG_AGENT_URL', url)

    with pytest.raises(ValueError):
        config.load_config('test_lambda')
