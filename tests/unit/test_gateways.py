"""Tests for the blob store and metadata store gateways."""

import pytest

from photo_variants.core.database import Base, Photo, create_db_engine, create_session_factory
from photo_variants.core.exceptions import BlobNotFoundError, FetchError, PersistError, UploadError
from photo_variants.core.gateways import S3BlobStore, SqlMetadataStore
from photo_variants.testing.fakes import FakeS3Client


@pytest.fixture
def s3_client():
    client = FakeS3Client()
    bucket = client.create_bucket("photos")
    bucket.add_object("abc/original.jpg", b"jpeg-bytes")
    bucket.add_object("abc/empty.jpg", b"")
    return client


@pytest.fixture
def session_factory():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    factory = create_session_factory(engine)
    with factory() as session:
        session.add(Photo(id="42", storage_path="abc/original.jpg"))
        session.commit()
    return factory


class TestS3BlobStore:
    """Tests for S3BlobStore."""

    def test_download(self, s3_client):
        assert S3BlobStore(s3_client).download("photos", "abc/original.jpg") == b"jpeg-bytes"

    def test_download_missing_key(self, s3_client):
        with pytest.raises(BlobNotFoundError, match="not found in bucket photos"):
            S3BlobStore(s3_client).download("photos", "abc/missing.jpg")

    def test_download_missing_bucket(self, s3_client):
        with pytest.raises(BlobNotFoundError):
            S3BlobStore(s3_client).download("other", "abc/original.jpg")

    def test_download_service_failure(self, s3_client):
        s3_client.set_failure_mode(True, "S3 unavailable")

        with pytest.raises(FetchError, match="ServiceUnavailable") as exc_info:
            S3BlobStore(s3_client).download("photos", "abc/original.jpg")
        assert not isinstance(exc_info.value, BlobNotFoundError)

    def test_download_empty_object(self, s3_client):
        with pytest.raises(FetchError, match="is empty"):
            S3BlobStore(s3_client).download("photos", "abc/empty.jpg")

    def test_upload_overwrites_by_default(self, s3_client):
        store = S3BlobStore(s3_client)

        store.upload("photos", "abc/original_thumb.webp", b"v1", "image/webp")
        store.upload("photos", "abc/original_thumb.webp", b"v2", "image/webp")

        stored = s3_client.get_bucket("photos").get_object("abc/original_thumb.webp")
        assert stored.body == b"v2"
        assert stored.content_type == "image/webp"
        assert s3_client.count("HeadObject") == 0

    def test_upload_without_upsert_refuses_existing(self, s3_client):
        store = S3BlobStore(s3_client)

        with pytest.raises(UploadError, match="already exists"):
            store.upload("photos", "abc/original.jpg", b"x", "image/webp", upsert=False)

    def test_upload_without_upsert_creates_new(self, s3_client):
        S3BlobStore(s3_client).upload("photos", "abc/new.webp", b"x", "image/webp", upsert=False)

        assert s3_client.get_bucket("photos").get_object("abc/new.webp").body == b"x"

    def test_upload_failure(self, s3_client):
        s3_client.fail_put_for("abc/original_thumb.webp")

        with pytest.raises(UploadError, match="Failed to upload"):
            S3BlobStore(s3_client).upload("photos", "abc/original_thumb.webp", b"x", "image/webp")


class TestSqlMetadataStore:
    """Tests for SqlMetadataStore."""

    def test_update_sets_variants_and_blurhash(self, session_factory):
        store = SqlMetadataStore(session_factory)

        store.update_photo("42", variants={"thumb": "abc/original_thumb.webp"}, blurhash="L00000")

        photo = store.get_photo("42")
        assert photo["variants"] == {"thumb": "abc/original_thumb.webp"}
        assert photo["blurhash"] == "L00000"

    def test_variants_are_merged(self, session_factory):
        store = SqlMetadataStore(session_factory)

        store.update_photo("42", variants={"thumb": "t1", "medium": "m1"})
        store.update_photo("42", variants={"medium": "m2", "large": "l2"})

        assert store.get_photo("42")["variants"] == {"thumb": "t1", "medium": "m2", "large": "l2"}

    def test_blurhash_left_alone_when_absent(self, session_factory):
        store = SqlMetadataStore(session_factory)

        store.update_photo("42", blurhash="first")
        store.update_photo("42", variants={"thumb": "t"})

        assert store.get_photo("42")["blurhash"] == "first"

    def test_missing_photo(self, session_factory):
        store = SqlMetadataStore(session_factory)

        with pytest.raises(PersistError, match="Photo 999 not found"):
            store.update_photo("999", variants={"thumb": "t"})
        assert store.get_photo("999") is None

    def test_database_failure(self):
        engine = create_db_engine("sqlite://")
        store = SqlMetadataStore(create_session_factory(engine))

        with pytest.raises(PersistError, match="Failed to update photo 42"):
            store.update_photo("42", blurhash="x")
