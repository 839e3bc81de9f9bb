from gallery.core.upload_validation import is_image, validate_image_upload


def test_is_image():
    assert is_image("image/png")
    assert is_image("IMAGE/JPEG; charset=binary")
    assert not is_image("application/pdf")
    assert not is_image("text/plain")
    assert not is_image(None)
    assert not is_image("")


def test_rejects_non_images():
    assert validate_image_upload("application/pdf", 10) == (400, "Must be an image")
    assert validate_image_upload(None, 10) == (400, "Must be an image")


def test_rejects_empty_file():
    assert validate_image_upload("image/png", 0) == (400, "Uploaded file is empty")


def test_rejects_large_file():
    status_code, message = validate_image_upload("image/png", 11, max_size=10)
    assert status_code == 413
    assert "too large" in message


def test_accepts_image():
    assert validate_image_upload("image/webp", 1024) is None
