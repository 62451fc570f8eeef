"""
Test suite for the blob-sas command-line interface
"""

import base64
import os
from datetime import datetime, timezone
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import pytest

from blob_sas_sdk import StorageSharedKeyCredential
from blob_sas_sdk.cli import build_resource_url, main, parse_datetime
from blob_sas_sdk.sas import BlobSasBuilder


ACCOUNT_KEY = base64.b64encode(b"cli-test-account-key").decode('ascii')
CREDENTIAL_ARGS = ['--account-name', 'acct', '--account-key', ACCOUNT_KEY]


@pytest.fixture(autouse=True)
def clean_environment():
    """Keep BLOB_SAS_* variables from the host out of CLI runs"""
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestGenerateCommand:
    """Test SAS generation from the command line"""

    def test_generate_container_sas(self, capsys):
        """Test output matches the library for the same inputs"""
        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'mycontainer',
                          '--permissions', 'r', '--expiry', '2024-01-02T03:04:05Z'])

        expected = (
            BlobSasBuilder.new()
            .set_container_name('mycontainer')
            .set_permissions('r')
            .set_expires_on(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
            .build(StorageSharedKeyCredential('acct', ACCOUNT_KEY))
        )

        assert exit_code == 0
        assert capsys.readouterr().out.strip() == expected

    def test_generate_blob_url(self, capsys):
        """Test printing a full blob URL with optional constraints"""
        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'mycontainer',
                          '--blob', 'dir/file name.txt', '--permissions', 'rw',
                          '--expires-in', '600', '--ip', '10.0.0.1-10.0.0.9',
                          '--protocol', 'https', '--content-type', 'text/plain', '--url'])

        assert exit_code == 0
        url = urlsplit(capsys.readouterr().out.strip())
        params = parse_qs(url.query)

        assert url.netloc == 'acct.blob.core.windows.net'
        assert url.path == '/mycontainer/dir/file%20name.txt'
        assert params['sr'] == ['b']
        assert params['sip'] == ['10.0.0.1-10.0.0.9']
        assert params['spr'] == ['https']
        assert params['rsct'] == ['text/plain']

    def test_credential_from_environment(self, capsys):
        """Test the credential falls back to environment variables"""
        os.environ['BLOB_SAS_CONNECTION_STRING'] = f'AccountName=envacct;AccountKey={ACCOUNT_KEY}'

        exit_code = main(['generate', '--container', 'c', '--identifier', 'policy1', '--url'])

        assert exit_code == 0
        assert capsys.readouterr().out.startswith('https://envacct.blob.core.windows.net/c?')

    def test_config_defaults_apply(self, capsys, tmp_path):
        """Test configuration file defaults reach the signer"""
        config_path = tmp_path / 'config.json'
        config_path.write_text('{"default_protocol": "https,http", "default_version": "2021-08-06"}')

        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'c', '--permissions', 'r',
                          '--config', str(config_path)])

        params = parse_qs(capsys.readouterr().out.strip())
        assert exit_code == 0
        assert params['spr'] == ['https,http']
        assert params['sv'] == ['2021-08-06']

    def test_show_string_to_sign(self, capsys):
        """Test signed fields are listed on stderr"""
        main(['generate', *CREDENTIAL_ARGS, '--container', 'c', '--permissions', 'r',
              '--expiry', '2024-01-02T03:04:05Z', '--show-string-to-sign'])

        err = capsys.readouterr().err
        assert 'canonicalized_resource: /blob/acct/c' in err
        assert 'signed_expiry: 2024-01-02T03:04:05Z' in err

    def test_missing_authorization_constraint(self, capsys):
        """Test a SAS without permissions or identifier fails"""
        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'c'])

        assert exit_code == 1
        assert 'MISSING_AUTHORIZATION_CONSTRAINT' in capsys.readouterr().err

    def test_missing_credential(self, capsys):
        """Test an unconfigured credential is reported"""
        exit_code = main(['generate', '--container', 'c', '--permissions', 'r'])

        assert exit_code == 1
        assert 'CREDENTIAL_NOT_CONFIGURED' in capsys.readouterr().err

    def test_invalid_ip_range(self, capsys):
        """Test malformed IP ranges are reported"""
        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'c',
                          '--permissions', 'r', '--ip', 'not-an-ip'])

        assert exit_code == 1
        assert 'INVALID_IP_ADDRESS' in capsys.readouterr().err

    def test_invalid_timestamp(self, capsys):
        """Test malformed timestamps are reported"""
        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'c',
                          '--permissions', 'r', '--expiry', 'tomorrow'])

        assert exit_code == 2
        assert 'Invalid ISO 8601 timestamp' in capsys.readouterr().err

    @pytest.mark.parametrize("lifetime", ["0", "-5"])
    def test_non_positive_expires_in(self, capsys, lifetime):
        """Test lifetimes that would issue an expired token are rejected"""
        exit_code = main(['generate', *CREDENTIAL_ARGS, '--container', 'c',
                          '--permissions', 'r', '--expires-in', lifetime])

        captured = capsys.readouterr()
        assert exit_code == 2
        assert '--expires-in must be a positive number of seconds' in captured.err
        assert 'sig=' not in captured.out


class TestCliHelpers:
    """Test CLI helper functions"""

    def test_parse_datetime(self):
        """Test Z suffix and explicit offsets"""
        assert parse_datetime('2024-01-02T03:04:05Z') == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert parse_datetime('2024-01-02T05:04:05+02:00').utcoffset().total_seconds() == 7200

    def test_build_resource_url(self):
        """Test default and custom endpoints"""
        assert build_resource_url('acct', 'c', None) == 'https://acct.blob.core.windows.net/c'
        assert build_resource_url('acct', 'c', 'b.txt', 'http://127.0.0.1:10000/acct/') == \
            'http://127.0.0.1:10000/acct/c/b.txt'

    def test_no_command(self, capsys):
        """Test running without a command prints help"""
        assert main([]) == 1
        assert 'usage' in capsys.readouterr().out

    def test_check_compatibility(self, capsys):
        """Test the compatibility check"""
        assert main(['--check-compatibility']) == 0
        assert 'compatible' in capsys.readouterr().out
