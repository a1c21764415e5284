#!/usr/bin/env python3
"""
Route handler tests using Flask's test client.

Tests:
- Upload endpoint: validation, size limit, basename handling, cleanup on failure
  without touching files the request never created
- Progress endpoint: unknown/known sessions, concurrent polling
- Download endpoint and pages
"""

import io
import tempfile
import threading
import unittest
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from server.files.catalog import DownloadCatalog, DownloadFile
from server.files.sessions import UploadSessionRegistry
from server.utils.config import ServerConfig
from server.web.routes import create_app, upload_basename


class RouteTestCase(unittest.TestCase):
    """Fresh registry, catalog and upload directory per test."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.upload_dir = Path(self.tmp.name) / "uploads"
        self.upload_dir.mkdir()
        self.config = ServerConfig(host='127.0.0.1', port=0, upload_dir=str(self.upload_dir))
        self.registry = UploadSessionRegistry()
        self.catalog = DownloadCatalog()
        self.client = self._make_client()

    def tearDown(self):
        self.tmp.cleanup()

    def _make_client(self):
        app = create_app(self.registry, self.catalog, self.config)
        app.testing = True
        return app.test_client()

    def _upload(self, upload_id, content, filename, client=None):
        client = client or self.client
        url = '/upload' if upload_id is None else f'/upload?uploadId={upload_id}'
        return client.post(
            url,
            data={'file': (io.BytesIO(content), filename)},
            content_type='multipart/form-data'
        )

    def _share(self, name, content):
        path = Path(self.tmp.name) / name
        path.write_bytes(content)
        return self.catalog.add_path(path)


class TestUploadEndpoint(RouteTestCase):

    def test_upload_saves_file(self):
        response = self._upload('abc123', b'hello world', 'hello.txt')
        self.assertEqual(response.status_code, 200)
        self.assertIn('hello.txt', response.get_data(as_text=True))
        self.assertEqual((self.upload_dir / 'hello.txt').read_bytes(), b'hello world')

    def test_progress_is_zero_after_completed_upload(self):
        self._upload('done1', b'x' * 5000, 'data.bin')
        response = self.client.get('/progress?uploadId=done1')
        self.assertEqual(response.get_json(), {'total': 0, 'uploaded': 0})
        self.assertEqual(len(self.registry), 0)

    def test_zero_byte_upload(self):
        response = self._upload('empty', b'', 'empty.txt')
        self.assertEqual(response.status_code, 200)
        saved = self.upload_dir / 'empty.txt'
        self.assertTrue(saved.exists())
        self.assertEqual(saved.stat().st_size, 0)
        self.assertNotIn('empty', self.registry)

    def test_missing_upload_id(self):
        response = self._upload(None, b'data', 'a.txt')
        self.assertEqual(response.status_code, 400)
        response = self._upload('', b'data', 'a.txt')
        self.assertEqual(response.status_code, 400)
        self.assertFalse((self.upload_dir / 'a.txt').exists())

    def test_get_not_allowed(self):
        response = self.client.get('/upload?uploadId=abc')
        self.assertEqual(response.status_code, 405)

    def test_missing_file_field(self):
        response = self.client.post(
            '/upload?uploadId=abc',
            data={'other': 'value'},
            content_type='multipart/form-data'
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.registry), 0)

    def test_oversized_body_rejected(self):
        self.config.max_upload_size = 1024
        client = self._make_client()
        response = self._upload('big', b'x' * 4096, 'big.bin', client=client)
        self.assertEqual(response.status_code, 413)
        self.assertFalse((self.upload_dir / 'big.bin').exists())
        self.assertEqual(len(self.registry), 0)

    def test_path_traversal_uses_basename(self):
        response = self._upload('trav', b'evil', '../../evil.txt')
        self.assertEqual(response.status_code, 200)
        self.assertEqual((self.upload_dir / 'evil.txt').read_bytes(), b'evil')
        self.assertFalse((Path(self.tmp.name) / 'evil.txt').exists())

    def test_windows_path_uses_basename(self):
        response = self._upload('win', b'img', 'C:\\Users\\me\\photo.jpg')
        self.assertEqual(response.status_code, 200)
        self.assertTrue((self.upload_dir / 'photo.jpg').exists())

    def test_upload_id_in_use(self):
        self.registry.begin('busy', 10)
        response = self._upload('busy', b'data', 'a.txt')
        self.assertEqual(response.status_code, 409)
        self.assertEqual(self.registry.snapshot('busy'), (10, 0))

    def test_io_failure_returns_500_and_ends_session(self):
        self.config.upload_dir = str(Path(self.tmp.name) / 'does-not-exist')
        client = self._make_client()
        response = self._upload('fail', b'data', 'a.txt', client=client)
        self.assertEqual(response.status_code, 500)
        self.assertNotIn('fail', self.registry)

    def test_open_failure_keeps_existing_file(self):
        existing = self.upload_dir / 'keep.txt'
        existing.write_bytes(b'operator data')
        denied = PermissionError(13, 'Permission denied')
        with patch('server.web.routes.open', side_effect=denied, create=True):
            response = self._upload('locked', b'client data', 'keep.txt')
        self.assertEqual(response.status_code, 500)
        self.assertNotIn('locked', self.registry)
        self.assertEqual(existing.read_bytes(), b'operator data')

    def test_failure_during_copy_removes_partial_file(self):
        self.config.chunk_size = 1024
        client = self._make_client()
        original_advance = self.registry.advance
        calls = []

        def failing_advance(session_id, delta):
            calls.append(delta)
            if len(calls) > 1:
                raise ConnectionResetError(104, 'Connection reset by peer')
            original_advance(session_id, delta)

        self.registry.advance = failing_advance
        response = self._upload('cut', b'z' * (8 * 1024), 'cut.bin', client=client)

        self.assertEqual(response.status_code, 500)
        self.assertGreater(len(calls), 1)
        self.assertNotIn('cut', self.registry)
        self.assertFalse((self.upload_dir / 'cut.bin').exists())

    def test_progress_observed_during_copy(self):
        """Every advance during the copy leaves uploaded within [previous, total]."""
        payload = b'p' * (10 * 1024 + 7)
        self.config.chunk_size = 1024
        client = self._make_client()
        observed = []
        original_advance = self.registry.advance

        def recording_advance(session_id, delta):
            original_advance(session_id, delta)
            observed.append(self.registry.snapshot(session_id))

        self.registry.advance = recording_advance
        response = self._upload('watch', payload, 'watch.bin', client=client)

        self.assertEqual(response.status_code, 200)
        uploaded = [u for _, u in observed]
        self.assertEqual(uploaded, sorted(uploaded))
        self.assertTrue(all(total == len(payload) for total, _ in observed))
        self.assertEqual(uploaded[-1], len(payload))


class TestUploadBasename(unittest.TestCase):

    def test_basename(self):
        self.assertEqual(upload_basename('a/b/c.txt'), 'c.txt')
        self.assertEqual(upload_basename('..\\..\\c.txt'), 'c.txt')
        self.assertEqual(upload_basename('plain.txt'), 'plain.txt')

    def test_unusable_names(self):
        for name in ('', None, '.', '..', 'dir/', '../'):
            self.assertEqual(upload_basename(name), '', repr(name))


class TestProgressEndpoint(RouteTestCase):

    def test_unknown_session_is_zero(self):
        response = self.client.get('/progress?uploadId=nope')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {'total': 0, 'uploaded': 0})

    def test_known_session(self):
        self.registry.begin('live', 1000)
        self.registry.advance('live', 250)
        response = self.client.get('/progress?uploadId=live')
        self.assertEqual(response.get_json(), {'total': 1000, 'uploaded': 250})
        self.assertEqual(response.mimetype, 'application/json')

    def test_missing_upload_id(self):
        response = self.client.get('/progress')
        self.assertEqual(response.status_code, 400)

    def test_concurrent_poll_during_upload(self):
        """Polling the same id while it uploads never shows uploaded > total."""
        self.config.chunk_size = 512
        upload_client = self._make_client()
        poll_client = self._make_client()
        payload = b'c' * (2 * 1024 * 1024)
        bad = []
        finished = threading.Event()
        result = {}

        def upload():
            try:
                result['response'] = self._upload('shared', payload, 'shared.bin', client=upload_client)
            finally:
                finished.set()

        def poll():
            while not finished.is_set():
                data = poll_client.get('/progress?uploadId=shared').get_json()
                if data['uploaded'] > data['total']:
                    bad.append(data)

        threads = [threading.Thread(target=upload), threading.Thread(target=poll)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        self.assertFalse(any(t.is_alive() for t in threads), "upload/poll deadlocked")
        self.assertEqual(bad, [])
        self.assertEqual(result['response'].status_code, 200)
        self.assertEqual(poll_client.get('/progress?uploadId=shared').get_json(),
                         {'total': 0, 'uploaded': 0})


class TestDownloadEndpoint(RouteTestCase):

    def test_download_streams_file(self):
        content = b'%PDF-1.4 fake' * 1000
        self._share('report.pdf', content)
        response = self.client.get('/download?file=report.pdf')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, content)
        self.assertEqual(response.mimetype, 'application/octet-stream')
        self.assertEqual(response.content_length, len(content))
        disposition = response.headers['Content-Disposition']
        self.assertTrue(disposition.startswith('attachment'))
        self.assertIn('report.pdf', disposition)

    def test_download_is_case_sensitive(self):
        self._share('report.pdf', b'data')
        response = self.client.get('/download?file=Report.pdf')
        self.assertEqual(response.status_code, 404)

    def test_unknown_file(self):
        response = self.client.get('/download?file=missing.txt')
        self.assertEqual(response.status_code, 404)

    def test_missing_parameter(self):
        response = self.client.get('/download')
        self.assertEqual(response.status_code, 400)

    def test_non_ascii_name(self):
        self._share('报告.txt', b'data')
        response = self.client.get('/download', query_string={'file': '报告.txt'})
        self.assertEqual(response.status_code, 200)
        self.assertIn("filename*=UTF-8''", response.headers['Content-Disposition'])
        self.assertEqual(response.data, b'data')

    def test_file_removed_after_selection(self):
        entry = self._share('gone.txt', b'data')
        Path(entry.absolute_path).unlink()
        response = self.client.get('/download?file=gone.txt')
        self.assertEqual(response.status_code, 500)

    def test_file_closed_after_head_and_get(self):
        self._share('head.txt', b'data')
        opened = []

        def tracking_open(*args, **kwargs):
            f = io.open(*args, **kwargs)
            opened.append(f)
            return f

        with patch('server.web.routes.open', side_effect=tracking_open, create=True):
            response = self.client.head('/download?file=head.txt')
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.content_length, 4)
            response.close()

            response = self.client.get('/download?file=head.txt')
            self.assertEqual(response.data, b'data')
            response.close()
        self.assertEqual(len(opened), 2)
        self.assertTrue(all(f.closed for f in opened))


class TestPages(RouteTestCase):

    def test_index_page(self):
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)
        body = response.get_data(as_text=True)
        self.assertIn('uploadId', body)
        self.assertIn('/download-page', body)

    def test_empty_download_page(self):
        response = self.client.get('/download-page')
        self.assertEqual(response.status_code, 200)
        self.assertIn('Nothing to download yet', response.get_data(as_text=True))

    def test_download_page_lists_catalog(self):
        self.catalog.add(DownloadFile('a & b.txt', '/tmp/a & b.txt', 3))
        self.catalog.add(DownloadFile('second.bin', '/tmp/second.bin', 12))
        body = self.client.get('/download-page').get_data(as_text=True)
        self.assertNotIn('Nothing to download yet', body)
        self.assertIn('a &amp; b.txt', body)
        self.assertIn('/download?file=second.bin', body)
        self.assertLess(body.index('a &amp; b.txt'), body.index('second.bin'))


if __name__ == '__main__':
    unittest.main()
