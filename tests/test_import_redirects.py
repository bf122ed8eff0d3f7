"""
Tests for the redirects import command.
"""

import pytest
import tempfile
import shutil
import os
from io import StringIO
from unittest.mock import MagicMock


def make_csv(count):
    lines = ["from,to,type,endDate"]
    for i in range(count):
        lines.append(f"/old/{i},/new/{i},PERMANENT,")
    return "\n".join(lines) + "\n"


class TestImportRedirects:
    """Test suite for import_redirects."""

    @pytest.fixture
    def temp_dir(self, monkeypatch):
        temp_dir = tempfile.mkdtemp()
        for var in ('TOOLBELT_ACCOUNT', 'TOOLBELT_WORKSPACE', 'TOOLBELT_TOKEN', 'TOOLBELT_CHECKPOINT_DB'):
            monkeypatch.delenv(var, raising=False)
        yield temp_dir
        shutil.rmtree(temp_dir, ignore_errors=True)

    @pytest.fixture
    def config(self, temp_dir):
        from toolbelt.conf import Config

        config = Config(config_dir=temp_dir)
        config.set_account('store')
        config.set_workspace('dev')
        return config

    @pytest.fixture
    def csv_path(self, temp_dir):
        path = os.path.join(temp_dir, 'redirects.csv')
        with open(path, 'w', encoding='utf-8') as f:
            f.write(make_csv(250))
        return path

    @pytest.fixture
    def client(self):
        client = MagicMock()
        client.routes_index.return_value = {'id': 'index'}
        return client

    def test_imports_all_batches(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects

        out = StringIO()
        result = import_redirects(csv_path, config, client=client, out=out, sleep=MagicMock())

        assert client.submit.call_count == 3
        first_batch = client.submit.call_args_list[0].args[0]
        assert len(first_batch) == 100
        assert first_batch[0] == {'from': '/old/0', 'to': '/new/0', 'type': 'PERMANENT'}
        assert result['submitted'] == 3
        assert 'Importing routes...' in out.getvalue()
        assert 'Finished!' in out.getvalue()

    def test_rerun_of_finished_import_submits_nothing(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects

        import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())
        client.submit.reset_mock()

        result = import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())

        client.submit.assert_not_called()
        assert result['submitted'] == 0

    def test_retries_resume_where_import_failed(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects

        client.submit.side_effect = [None, RuntimeError("503"), None, None]
        sleep = MagicMock()
        out = StringIO()

        import_redirects(csv_path, config, client=client, out=out, sleep=sleep, retry_delay=10)

        assert client.submit.call_count == 4
        submitted_firsts = [c.args[0][0]['from'] for c in client.submit.call_args_list]
        assert submitted_firsts == ['/old/0', '/old/100', '/old/100', '/old/200']
        sleep.assert_called_once_with(10)
        assert 'Retrying in 10 seconds...' in out.getvalue()

    def test_exhausted_retries(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects
        from toolbelt.errors import ImportFailed

        client.submit.side_effect = RuntimeError("503")

        with pytest.raises(ImportFailed):
            import_redirects(csv_path, config, client=client, out=StringIO(),
                             sleep=MagicMock(), max_retries=2)

        assert client.submit.call_count == 3

    def test_invalid_file_imports_nothing(self, config, temp_dir, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects
        from toolbelt.batch import CheckpointManager
        from toolbelt.errors import InputValidationError

        path = os.path.join(temp_dir, 'bad.csv')
        with open(path, 'w', encoding='utf-8') as f:
            f.write("from,to,type\n/a,/b,PERMANENT\n/c,,WRONG\n")

        with pytest.raises(InputValidationError):
            import_redirects(path, config, client=client, out=StringIO(), sleep=MagicMock())

        client.submit.assert_not_called()
        assert CheckpointManager(config.checkpoint_db).load('imports') == {}

    def test_missing_index_is_created(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects
        from toolbelt.errors import RoutesIndexMissing

        client.routes_index.return_value = None

        with pytest.raises(RoutesIndexMissing):
            import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())

        client.create_routes_index.assert_called_once()
        client.submit.assert_not_called()

    def test_cancel_then_resume(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects
        from toolbelt.errors import ImportCancelled

        client.submit.side_effect = [None, KeyboardInterrupt]

        with pytest.raises(ImportCancelled):
            import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())

        client.submit.reset_mock(side_effect=True)
        import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())

        submitted_firsts = [c.args[0][0]['from'] for c in client.submit.call_args_list]
        assert submitted_firsts == ['/old/100', '/old/200']

    def test_other_workspace_starts_fresh(self, config, csv_path, client):
        from toolbelt.modules.rewriter.import_redirects import import_redirects

        import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())
        client.submit.reset_mock()

        config.set_workspace('prod')
        import_redirects(csv_path, config, client=client, out=StringIO(), sleep=MagicMock())

        assert client.submit.call_count == 3
