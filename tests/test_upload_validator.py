import pytest

from src.core.entities.image import UploadRequest, base_file_name
from src.core.interfaces.upload_validator import UploadPolicy, ValidationKind
from src.infrastructure.rules.image_upload_rules import ImageUploadValidator

MAX_SIZE = 10 * 1024 * 1024


def make_request(file_name="cat.png", content_type="image/png", size=10):
    return UploadRequest(file_name=file_name, declared_content_type=content_type, content=b"x" * size)


def test_valid_request_passes(validator):
    assert validator.validate(make_request()) is None


def test_empty_payload_rejected(validator):
    failure = validator.validate(make_request(size=0))
    assert failure.kind == ValidationKind.EMPTY_PAYLOAD


def test_size_boundary_is_inclusive(validator):
    assert validator.validate(make_request(size=MAX_SIZE)) is None

    failure = validator.validate(make_request(size=MAX_SIZE + 1))
    assert failure.kind == ValidationKind.PAYLOAD_TOO_LARGE
    assert failure.received == MAX_SIZE + 1


@pytest.mark.parametrize("content_type", ["application/pdf", "image/bmp", "text/plain", ""])
def test_unsupported_content_type_regardless_of_extension(validator, content_type):
    failure = validator.validate(make_request(file_name="photo.png", content_type=content_type))
    assert failure.kind == ValidationKind.UNSUPPORTED_CONTENT_TYPE


def test_content_type_is_case_insensitive(validator):
    assert validator.validate(make_request(content_type="IMAGE/PNG")) is None


@pytest.mark.parametrize("file_name", ["photo.exe", "photo", "photo.bmp", ".png", "photo.png.exe"])
def test_unsupported_extension(validator, file_name):
    failure = validator.validate(make_request(file_name=file_name, content_type="image/png"))
    assert failure.kind == ValidationKind.UNSUPPORTED_EXTENSION
    assert failure.received == file_name


def test_extension_is_case_insensitive(validator):
    assert validator.validate(make_request(file_name="SUNSET.JPG", content_type="image/jpeg")) is None


def test_checks_short_circuit_in_order(validator):
    # empty + bad type + bad extension: emptiness is reported first
    failure = validator.validate(make_request(file_name="a.exe", content_type="application/pdf", size=0))
    assert failure.kind == ValidationKind.EMPTY_PAYLOAD

    failure = validator.validate(make_request(file_name="a.exe", content_type="application/pdf"))
    assert failure.kind == ValidationKind.UNSUPPORTED_CONTENT_TYPE


def test_policy_can_be_substituted():
    bmp_policy = UploadPolicy(
        max_size_bytes=4,
        allowed_content_types=frozenset({"image/bmp"}),
        allowed_extensions=frozenset({".bmp"}),
    )
    validator = ImageUploadValidator(bmp_policy)

    assert validator.validate(make_request(file_name="a.bmp", content_type="image/bmp", size=4)) is None
    assert validator.validate(make_request(file_name="a.bmp", content_type="image/bmp", size=5)).kind == (
        ValidationKind.PAYLOAD_TOO_LARGE
    )
    assert validator.validate(make_request(size=1)).kind == ValidationKind.UNSUPPORTED_CONTENT_TYPE


@pytest.mark.parametrize("file_name", ["../../evil.png", "a/b.png", "..\\evil.png", "C:\\photos\\cat.png"])
def test_file_name_with_path_segments_rejected(validator, file_name):
    failure = validator.validate(make_request(file_name=file_name, content_type="image/png"))
    assert failure.kind == ValidationKind.UNSUPPORTED_EXTENSION
    assert failure.received == file_name


@pytest.mark.parametrize("file_name", ["", ".", ".."])
def test_blank_or_dot_file_names_rejected(validator, file_name):
    failure = validator.validate(make_request(file_name=file_name, content_type="image/png"))
    assert failure.kind == ValidationKind.UNSUPPORTED_EXTENSION


@pytest.mark.parametrize(
    "name,expected",
    [("../../evil.png", "evil.png"), ("a/b.png", "b.png"), ("C:\\photos\\cat.png", "cat.png"), ("cat.png", "cat.png")],
)
def test_base_file_name(name, expected):
    assert base_file_name(name) == expected


def test_oversized_payload_reports_transport_size(validator):
    request = UploadRequest(
        file_name="cat.png",
        declared_content_type="image/png",
        content=b"x" * (MAX_SIZE + 1),
        declared_length=MAX_SIZE * 3,
    )

    failure = validator.validate(request)

    assert failure.kind == ValidationKind.PAYLOAD_TOO_LARGE
    assert failure.received == MAX_SIZE * 3
