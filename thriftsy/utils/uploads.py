import os

from flask import current_app
from werkzeug.utils import secure_filename

from thriftsy.exceptions import ValidationError
from thriftsy.utils.helpers import allowed_file, random_filename

IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}
DOCUMENT_EXTENSIONS = IMAGE_EXTENSIONS | {"pdf"}


def save_files(files, limit, allowed_extensions=IMAGE_EXTENSIONS):
    """Store uploaded files under UPLOAD_FOLDER and return their public URLs"""
    files = [f for f in files if f and f.filename]
    if len(files) > limit:
        raise ValidationError(f"At most {limit} files allowed")

    for storage in files:
        if not allowed_file(secure_filename(storage.filename), allowed_extensions):
            raise ValidationError(f"File type not allowed: {storage.filename}")

    folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(folder, exist_ok=True)

    urls = []
    for storage in files:
        name = random_filename(secure_filename(storage.filename))
        storage.save(os.path.join(folder, name))
        urls.append(f"/uploads/{name}")
    return urls


def delete_files(urls):
    """Remove stored files for the given public URLs; missing files are ignored"""
    folder = current_app.config["UPLOAD_FOLDER"]
    for url in urls:
        if not url or not url.startswith("/uploads/"):
            continue
        path = os.path.join(folder, os.path.basename(url))
        if os.path.exists(path):
            os.remove(path)
