"""
Page templates served to the phone's browser.

Rendered with Flask's Jinja2 environment, so values are autoescaped.
"""

BASE_STYLE = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body { max-width: 800px; margin: 2rem auto; padding: 0 1rem; font-family: sans-serif; }
        h1 { text-align: center; margin-bottom: 2rem; font-size: 24px; }
        .nav-link { margin-top: 2rem; text-align: center; }
        .nav-link a {
            color: #4285f4; text-decoration: none; padding: 0.8rem 1.5rem;
            border: 1px solid #4285f4; border-radius: 4px; font-size: 16px;
        }
        .nav-link a:hover { background: #4285f4; color: white; }
"""

INDEX_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>File Upload</title>
    <style>
""" + BASE_STYLE + """
        .upload-container {
            border: 2px dashed #ccc; padding: 3rem 2rem; text-align: center;
            border-radius: 8px; margin-bottom: 2rem;
        }
        #file-input { display: none; }
        .select-btn, .upload-btn {
            padding: 1.2rem 3rem; border: none; border-radius: 8px; color: white;
            cursor: pointer; margin: 0.8rem; font-size: 18px; font-weight: bold;
            min-width: 200px; height: 60px;
        }
        .select-btn { background: #4285f4; }
        .upload-btn { background: #0f9d58; }
        .progress-item { margin: 1rem 0; padding: 1rem; border: 1px solid #eee; border-radius: 4px; }
        .progress-bar { height: 20px; background: #eee; border-radius: 10px; overflow: hidden; margin-top: 0.5rem; }
        .progress-fill { height: 100%; background: #4285f4; width: 0%; transition: width 0.3s ease; }
    </style>
</head>
<body>
    <h1>Upload Files</h1>
    <div class="upload-container">
        <button class="select-btn" onclick="document.getElementById('file-input').click()">Choose files</button>
        <input type="file" id="file-input" multiple>
        <button class="upload-btn" id="upload-btn" onclick="uploadFiles()" style="display:none;">Start upload</button>
    </div>
    <div id="file-list"></div>
    <div class="nav-link">
        <a href="{{ url_for('download_page') }}">Go to downloads</a>
    </div>

    <script>
        const UPLOAD_URL = "{{ url_for('upload') }}";
        const PROGRESS_URL = "{{ url_for('progress') }}";
        let files = [];
        const fileInput = document.getElementById('file-input');
        const uploadBtn = document.getElementById('upload-btn');
        const fileList = document.getElementById('file-list');

        fileInput.addEventListener('change', function(e) {
            files = Array.from(e.target.files);
            if (files.length === 0) return;
            uploadBtn.style.display = 'inline-block';
            fileList.innerHTML = '';
            files.forEach((file, index) => {
                const item = document.createElement('div');
                item.className = 'progress-item';
                const name = document.createElement('div');
                name.textContent = file.name + ' (' + formatSize(file.size) + ')';
                item.appendChild(name);
                item.insertAdjacentHTML('beforeend',
                    '<div class="progress-bar"><div class="progress-fill" id="progress-' + index + '"></div></div>' +
                    '<div id="progress-text-' + index + '">0%</div>');
                fileList.appendChild(item);
            });
        });

        function formatSize(bytes) {
            if (bytes < 1024) return bytes + ' B';
            if (bytes < 1048576) return (bytes / 1024).toFixed(1) + ' KB';
            return (bytes / 1048576).toFixed(1) + ' MB';
        }

        function pollSaving(index, uploadId) {
            return setInterval(function() {
                fetch(PROGRESS_URL + '?uploadId=' + encodeURIComponent(uploadId))
                    .then(r => r.json())
                    .then(p => {
                        if (p.total > 0) {
                            updateProgress(index, 100, 'Saving ' + Math.round(p.uploaded / p.total * 100) + '%');
                        }
                    })
                    .catch(() => {});
            }, 500);
        }

        function uploadFiles() {
            files.forEach((file, index) => {
                const formData = new FormData();
                formData.append('file', file);
                const uploadId = Math.random().toString(36).substring(2, 15) + Date.now().toString(36);
                let poller = null;

                const xhr = new XMLHttpRequest();
                xhr.open('POST', UPLOAD_URL + '?uploadId=' + uploadId, true);
                xhr.upload.addEventListener('progress', function(e) {
                    if (e.lengthComputable) {
                        updateProgress(index, (e.loaded / e.total) * 100);
                    }
                });
                xhr.upload.addEventListener('load', function() {
                    poller = pollSaving(index, uploadId);
                });
                xhr.onloadend = function() {
                    if (poller) clearInterval(poller);
                };
                xhr.onload = function() {
                    if (xhr.status === 200) {
                        updateProgress(index, 100, 'Upload complete');
                    } else {
                        updateProgress(index, 0, 'Upload failed: ' + xhr.responseText);
                    }
                };
                xhr.onerror = function() {
                    updateProgress(index, 0, 'Upload failed (network error)');
                };
                xhr.send(formData);
            });
            uploadBtn.style.display = 'none';
            fileInput.value = '';
        }

        function updateProgress(index, percent, text = '') {
            const fill = document.getElementById('progress-' + index);
            const textEl = document.getElementById('progress-text-' + index);
            fill.style.width = percent + '%';
            textEl.textContent = text || Math.round(percent) + '%';
            if (text.startsWith('Upload failed')) fill.style.backgroundColor = '#ea4335';
            if (text === 'Upload complete') fill.style.backgroundColor = '#0f9d58';
        }
    </script>
</body>
</html>
"""

DOWNLOAD_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Downloads</title>
    <style>
""" + BASE_STYLE + """
        .file-list-container { margin-top: 2rem; border: 1px solid #eee; border-radius: 8px; overflow: hidden; }
        .file-list-header { display: flex; background: #4285f4; color: white; font-weight: bold; font-size: 16px; }
        .file-list-item { display: flex; border-bottom: 1px solid #eee; align-items: stretch; }
        .file-list-item:last-child { border-bottom: none; }
        .col-name {
            flex: 1; padding: 1.2rem 1rem; font-size: 16px; line-height: 1.6;
            white-space: normal; word-wrap: break-word; word-break: break-all; align-self: center;
        }
        .col-size { width: 100px; padding: 1.2rem 1rem; text-align: center; white-space: nowrap; align-self: center; }
        .col-op { width: 100px; padding: 1.2rem 1rem; text-align: center; align-self: center; }
        .download-btn {
            display: inline-block; background: #4285f4; color: white; padding: 0.8rem 1.5rem;
            text-decoration: none; border-radius: 6px; white-space: nowrap; font-size: 16px;
        }
        .empty-tip { padding: 2rem; text-align: center; color: #999; font-size: 16px; }
    </style>
</head>
<body>
    <h1>Downloads</h1>
    <div class="file-list-container">
        <div class="file-list-header">
            <div class="col-name">File name</div>
            <div class="col-size">Size (KB)</div>
            <div class="col-op">Action</div>
        </div>
        {% if not files %}
        <div class="empty-tip">Nothing to download yet</div>
        {% else %}
        {% for f in files %}
        <div class="file-list-item">
            <div class="col-name">{{ f.display_name }}</div>
            <div class="col-size">{{ f.size_kb }}</div>
            <div class="col-op"><a href="{{ url_for('download', file=f.display_name) }}" class="download-btn" download>Download</a></div>
        </div>
        {% endfor %}
        {% endif %}
    </div>
    <div class="nav-link">
        <a href="{{ url_for('index') }}">Go to upload page</a>
    </div>
</body>
</html>
"""
