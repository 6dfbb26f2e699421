"""
Tests for AWS Session Factory

Sessions and clients are built from the default credential chain.
"""

import os
from unittest.mock import patch, MagicMock

from cost_insights.utils.aws_constants import COST_EXPLORER_REGION, AwsService
from cost_insights.utils.aws_session import (
    create_aws_session,
    create_aws_client,
    get_default_retry_config,
)


class TestCreateAwsSession:
    """Tests for create_aws_session function"""

    def test_creates_session_with_default_region(self):
        """Test that session is created with default region from settings"""
        with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
            mock_session.return_value = MagicMock()

            create_aws_session()

            mock_session.assert_called_once()
            call_kwargs = mock_session.call_args[1]
            assert call_kwargs['region_name'] == 'us-east-1'
            assert 'aws_access_key_id' not in call_kwargs
            assert 'profile_name' not in call_kwargs

    def test_creates_session_with_custom_region(self):
        """Test that session respects custom region parameter"""
        with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
            create_aws_session(region_name='eu-west-1')

            assert mock_session.call_args[1]['region_name'] == 'eu-west-1'

    def test_creates_session_with_profile_name(self):
        """Test that session can use a profile name for local development"""
        with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
            create_aws_session(profile_name='dev-profile')

            assert mock_session.call_args[1]['profile_name'] == 'dev-profile'

    def test_profile_from_environment(self):
        """Test that AWS_PROFILE in the environment reaches the session"""
        with patch.dict(os.environ, {'AWS_PROFILE': 'billing-readonly'}):
            with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
                create_aws_session()

        assert mock_session.call_args[1]['profile_name'] == 'billing-readonly'

    def test_falls_back_to_default_region_when_settings_fail(self):
        """Test that a broken configuration does not prevent session creation"""
        with patch('cost_insights.config.settings.get_settings', side_effect=ValueError("bad env")):
            with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
                create_aws_session()

        assert mock_session.call_args[1] == {'region_name': 'us-east-1'}


class TestCreateAwsClient:
    """Tests for create_aws_client function"""

    def test_creates_client_from_session(self):
        """Test that client is created from a session"""
        with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
            mock_session_instance = MagicMock()
            mock_session.return_value = mock_session_instance

            client = create_aws_client(AwsService.COST_EXPLORER, region_name=COST_EXPLORER_REGION)

            mock_session_instance.client.assert_called_once_with('ce')
            assert client is mock_session_instance.client.return_value

    def test_passes_config_to_client(self):
        """Test that botocore config is passed through"""
        config = get_default_retry_config()

        with patch('cost_insights.utils.aws_session.boto3.Session') as mock_session:
            mock_session_instance = MagicMock()
            mock_session.return_value = mock_session_instance

            create_aws_client('ce', config=config)

            mock_session_instance.client.assert_called_once_with('ce', config=config)


class TestRetryConfig:
    """Tests for get_default_retry_config function"""

    def test_defaults_from_settings(self):
        config = get_default_retry_config()

        assert config.retries == {'max_attempts': 3, 'mode': 'adaptive'}
        assert config.connect_timeout == 5
        assert config.read_timeout == 30
        assert config.region_name == 'us-east-1'

    def test_explicit_arguments_win(self):
        config = get_default_retry_config(max_attempts=7, mode='standard', read_timeout=60)

        assert config.retries == {'max_attempts': 7, 'mode': 'standard'}
        assert config.read_timeout == 60

    def test_environment_overrides(self):
        with patch.dict(os.environ, {'AWS_MAX_ATTEMPTS': '10', 'AWS_RETRY_MODE': 'STANDARD'}):
            config = get_default_retry_config()

        assert config.retries == {'max_attempts': 10, 'mode': 'standard'}

    def test_settings_failure_uses_builtin_defaults(self):
        with patch('cost_insights.config.settings.get_settings', side_effect=ValueError("bad env")):
            config = get_default_retry_config()

        assert config.retries == {'max_attempts': 3, 'mode': 'adaptive'}
        assert config.connect_timeout == 5
