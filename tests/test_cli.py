"""
Tests for the command-line entry point.
"""

import json
import os
import pytest
import tempfile
import shutil
from unittest.mock import patch


class TestCli:

    @pytest.fixture
    def config_dir(self, monkeypatch):
        for var in ('TOOLBELT_ACCOUNT', 'TOOLBELT_WORKSPACE', 'TOOLBELT_TOKEN', 'TOOLBELT_CHECKPOINT_DB'):
            monkeypatch.delenv(var, raising=False)
        config_dir = tempfile.mkdtemp()
        with open(os.path.join(config_dir, 'config.json'), 'w') as f:
            json.dump({'account': 'store', 'workspace': 'dev'}, f)
        monkeypatch.setenv('TOOLBELT_CONFIG_DIR', config_dir)
        yield config_dir
        from toolbelt.logging import LoggerConfig
        LoggerConfig().reset()
        shutil.rmtree(config_dir, ignore_errors=True)

    def test_files_ls(self, config_dir, capsys):
        from toolbelt.cli import main

        project = os.path.join(config_dir, 'project')
        os.makedirs(os.path.join(project, 'react'))
        with open(os.path.join(project, 'manifest.json'), 'w') as f:
            f.write('{}')
        with open(os.path.join(project, 'react', 'index.tsx'), 'w') as f:
            f.write('')

        assert main(['files', 'ls', project]) == 0
        assert capsys.readouterr().out.splitlines() == ['manifest.json', 'react/index.tsx']

    def test_workspace_use(self, config_dir):
        from toolbelt.cli import main
        from toolbelt.conf import Config

        assert main(['workspace', 'use', 'feature']) == 0
        assert Config(config_dir=config_dir).get_workspace() == 'feature'

    def test_cancelled_import_exits_130(self, config_dir, capsys):
        from toolbelt.cli import main
        from toolbelt.errors import ImportCancelled

        with patch('toolbelt.cli.import_redirects', side_effect=ImportCancelled(1)):
            assert main(['redirects', 'import', 'redirects.csv']) == 130

        assert 'Aborted.' in capsys.readouterr().err

    def test_failed_import_exits_1(self, config_dir):
        from toolbelt.cli import main
        from toolbelt.errors import ImportFailed

        with patch('toolbelt.cli.import_redirects', side_effect=ImportFailed(11, RuntimeError("503"))):
            assert main(['redirects', 'import', 'redirects.csv']) == 1

    def test_import_gets_cancel_token(self, config_dir):
        from toolbelt.batch import CancellationToken
        from toolbelt.cli import main

        with patch('toolbelt.cli.import_redirects') as import_redirects:
            assert main(['redirects', 'import', 'redirects.csv']) == 0

        args, kwargs = import_redirects.call_args
        assert args[0] == 'redirects.csv'
        assert isinstance(kwargs['cancel_token'], CancellationToken)

    def test_workspace_delete_flags(self, config_dir):
        from toolbelt.cli import main

        with patch('toolbelt.cli.delete_workspaces', return_value=['old']) as delete:
            assert main(['workspace', 'delete', 'old', '-y', '--force']) == 0

        args, kwargs = delete.call_args
        assert args[0] == ['old']
        assert kwargs == {'yes': True, 'force': True}

    def test_requires_command(self, config_dir):
        from toolbelt.cli import main

        with pytest.raises(SystemExit):
            main([])

    def test_missing_csv_exits_1(self, config_dir, capsys):
        from toolbelt.cli import main

        missing = os.path.join(config_dir, 'missing.csv')
        with patch('toolbelt.modules.rewriter.import_redirects.ensure_index_creation'):
            assert main(['redirects', 'import', missing]) == 1

        assert 'Could not read' in capsys.readouterr().err

    def test_non_utf8_csv_exits_1(self, config_dir, capsys):
        from toolbelt.cli import main

        path = os.path.join(config_dir, 'latin1.csv')
        with open(path, 'wb') as f:
            f.write('from,to,type\n/café,/b,PERMANENT\n'.encode('latin-1'))

        with patch('toolbelt.modules.rewriter.import_redirects.ensure_index_creation'):
            assert main(['redirects', 'import', path]) == 1

        assert 'not a UTF-8 file' in capsys.readouterr().err
