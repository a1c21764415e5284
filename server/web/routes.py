"""
HTTP route handlers.

Each request runs on its own thread; handlers only share state through the
injected UploadSessionRegistry and DownloadCatalog.
"""

import os
import shutil
import unicodedata
from functools import partial
from pathlib import Path
from urllib.parse import quote

from flask import Flask, Response, jsonify, render_template_string, request

from common.constants import Routes, QueryParams
from server.errors import SessionInUseError
from server.files.catalog import DownloadCatalog
from server.files.progress_stream import ProgressTrackingStream
from server.files.sessions import UploadSessionRegistry
from server.utils.config import ServerConfig
from server.utils.logger import logger
from server.web.pages import INDEX_PAGE, DOWNLOAD_PAGE


def upload_basename(raw_name: str) -> str:
    """Last path component of a client-supplied filename, '' if unusable."""
    name = os.path.basename((raw_name or '').replace('\\', '/')).strip()
    if name in ('', '.', '..'):
        return ''
    return name


def content_disposition_options(filename: str) -> dict:
    """
    Attachment filename options, with an RFC 5987 form for non-ASCII names.

    Same rules as werkzeug's send_file(as_attachment=True). Downloads build
    their own streaming response so that read errors after the headers are
    sent still reach the transfer log.
    """
    try:
        filename.encode('ascii')
    except UnicodeEncodeError:
        simple = unicodedata.normalize('NFKD', filename).encode('ascii', 'ignore').decode('ascii')
        return {
            'filename': simple or 'download',
            'filename*': "UTF-8''" + quote(filename, safe="!#$&+^`|~"),
        }
    return {'filename': filename}


def _stream_size(stream) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def _text(message: str, status: int):
    return Response(message, status=status, mimetype='text/plain')


class RouteHandlers:
    """Request handlers for the upload/download pages and endpoints."""

    def __init__(self, registry: UploadSessionRegistry, catalog: DownloadCatalog, config: ServerConfig):
        self.registry = registry
        self.catalog = catalog
        self.config = config

    def register(self, app: Flask):
        """Wire all routes into the application."""
        app.add_url_rule(Routes.INDEX, 'index', self.handle_index)
        app.add_url_rule(Routes.DOWNLOAD_PAGE, 'download_page', self.handle_download_page)
        app.add_url_rule(Routes.UPLOAD, 'upload', self.handle_upload, methods=['POST'])
        app.add_url_rule(Routes.PROGRESS, 'progress', self.handle_progress)
        app.add_url_rule(Routes.DOWNLOAD, 'download', self.handle_download)
        app.register_error_handler(413, self.handle_too_large)

    def handle_index(self):
        return render_template_string(INDEX_PAGE)

    def handle_download_page(self):
        return render_template_string(DOWNLOAD_PAGE, files=self.catalog.list())

    def handle_too_large(self, error):
        limit_mb = self.config.max_upload_size // (1024 * 1024)
        logger.warning(f"Rejected upload from {request.remote_addr}: body exceeds {limit_mb} MB")
        return _text(f"Upload too large (limit {limit_mb} MB)", 413)

    def handle_upload(self):
        """Stream the multipart 'file' field into the upload directory."""
        upload_id = request.args.get(QueryParams.UPLOAD_ID, '')
        if not upload_id:
            return _text("Missing uploadId parameter", 400)

        # Reading request.files enforces MAX_CONTENT_LENGTH (413)
        upload = request.files.get(QueryParams.FORM_FILE_FIELD)
        if upload is None:
            return _text("Failed to get file: no 'file' field in form", 400)

        filename = upload_basename(upload.filename)
        if not filename:
            return _text("Failed to get file: missing filename", 400)

        total_size = _stream_size(upload.stream)
        try:
            self.registry.begin(upload_id, total_size)
        except SessionInUseError as e:
            logger.warning(str(e))
            return _text(str(e), 409)

        dest = Path(self.config.upload_dir) / filename
        tracked = ProgressTrackingStream(upload.stream, partial(self.registry.advance, upload_id))
        try:
            try:
                out = open(dest, 'wb')
            except OSError as e:
                # nothing was created, leave whatever is at dest alone
                logger.log_error(f"upload {upload_id} ({filename})", e)
                return _text(f"Failed to save file: {e}", 500)

            try:
                with out:
                    shutil.copyfileobj(tracked, out, self.config.chunk_size)
            except OSError as e:
                logger.log_error(f"upload {upload_id} ({filename})", e)
                self._remove_partial(dest)
                return _text(f"Failed to save file: {e}", 500)
        finally:
            self.registry.end(upload_id)

        logger.log_upload(filename, total_size, upload_id, request.remote_addr)
        return _text(f"File uploaded successfully: {filename}", 200)

    def handle_progress(self):
        upload_id = request.args.get(QueryParams.UPLOAD_ID, '')
        if not upload_id:
            return _text("Missing uploadId parameter", 400)

        snapshot = self.registry.snapshot(upload_id)
        total, uploaded = snapshot if snapshot is not None else (0, 0)
        return jsonify(total=total, uploaded=uploaded)

    def handle_download(self):
        """Stream a catalog file as an attachment."""
        name = request.args.get(QueryParams.FILE, '')
        if not name:
            return _text("Missing file parameter", 400)

        entry = self.catalog.find(name)
        if entry is None:
            return _text("File not found", 404)

        try:
            f = open(entry.absolute_path, 'rb')
            size = os.fstat(f.fileno()).st_size
        except OSError as e:
            logger.log_error(f"download {name}", e)
            return _text("Failed to open file", 500)

        client = request.remote_addr
        chunk_size = self.config.chunk_size

        def generate():
            sent = 0
            try:
                while True:
                    chunk = f.read(chunk_size)
                    if not chunk:
                        break
                    sent += len(chunk)
                    yield chunk
            except OSError as e:
                logger.log_error(f"download {name} after {sent} bytes", e)
                return
            logger.log_download(name, sent, client)

        response = Response(generate(), mimetype='application/octet-stream')
        # the generator never runs for HEAD or an aborted response
        response.call_on_close(f.close)
        response.headers.set('Content-Disposition', 'attachment', **content_disposition_options(name))
        response.content_length = size
        return response

    @staticmethod
    def _remove_partial(path: Path):
        try:
            if path.exists():
                path.unlink()
        except OSError as e:
            logger.log_error(f"removing partial file {path}", e)


def create_app(registry: UploadSessionRegistry, catalog: DownloadCatalog, config: ServerConfig) -> Flask:
    """Build the Flask application with every route wired once."""
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = config.max_upload_size
    RouteHandlers(registry, catalog, config).register(app)
    return app
