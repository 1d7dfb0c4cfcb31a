import io
import os
import re


def _file(name, content_type, data=b"data"):
    return (io.BytesIO(data), name, content_type)


def _upload(client, *files):
    return client.post("/api/upload", data={"files": list(files)}, content_type="multipart/form-data")


def test_non_image_files_are_skipped(client, app):
    res = _upload(client, _file("photo.png", "image/png"), _file("notes.txt", "text/plain"))

    assert res.status_code == 200
    [url] = res.get_json()["urls"]
    assert url.startswith("/uploads/")
    assert url.endswith(".png")
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == [url.rsplit("/", 1)[1]]


def test_every_image_gets_a_url(client, app):
    res = _upload(
        client,
        _file("a.png", "image/png"),
        _file("b.jpeg", "image/jpeg"),
        _file("c.webp", "image/webp"),
    )

    urls = res.get_json()["urls"]
    assert len(urls) == 3
    assert len(set(urls)) == 3
    assert sorted(os.listdir(app.config["UPLOAD_FOLDER"])) == sorted(u.rsplit("/", 1)[1] for u in urls)


def test_generated_names_use_timestamp_and_suffix(client):
    res = _upload(client, _file("My Photo.PNG", "image/png"))

    [url] = res.get_json()["urls"]
    assert re.fullmatch(r"/uploads/\d{13}_[a-z0-9]{11}\.PNG", url)


def test_missing_extension_defaults_to_jpg(client):
    res = _upload(client, _file("camera-roll", "image/jpeg"))

    [url] = res.get_json()["urls"]
    assert url.endswith(".jpg")


def test_no_files_is_rejected(client):
    res = client.post("/api/upload", data={}, content_type="multipart/form-data")

    assert res.status_code == 400
    assert res.get_json() == {"error": "No files provided"}


def test_only_non_images_returns_empty_list(client):
    res = _upload(client, _file("report.pdf", "application/pdf"))

    assert res.status_code == 200
    assert res.get_json() == {"urls": []}


def test_uploaded_file_is_served(client):
    res = _upload(client, _file("a.png", "image/png", b"png-bytes"))
    [url] = res.get_json()["urls"]

    served = client.get(url)

    assert served.status_code == 200
    assert served.data == b"png-bytes"
    served.close()


def test_upload_directory_is_created(client, app):
    assert not os.path.exists(app.config["UPLOAD_FOLDER"])

    _upload(client, _file("a.png", "image/png"))

    assert os.path.isdir(app.config["UPLOAD_FOLDER"])
