"""Tests for the S3 storage backend."""

import io
from datetime import datetime, timezone

import boto3
import pytest
from moto import mock_aws

from backbrace.config import S3Settings
from backbrace.exceptions import StorageOperationError
from backbrace.output import OutputFormatter
from backbrace.storage import DryRunStorage, LocalStorage, S3Storage, create_remote_storages
from backbrace.sync import RemoteIndex, SyncEngine, SyncStats

BUCKET = "test-backup-bucket"


@pytest.fixture
def s3_client():
    """Mock S3 with moto."""
    with mock_aws():
        client = boto3.client(
            "s3",
            region_name="us-east-1",
            aws_access_key_id="testing",
            aws_secret_access_key="testing",
        )
        client.create_bucket(Bucket=BUCKET)
        yield client


@pytest.fixture
def storage(s3_client):
    s3_client.put_object(Bucket=BUCKET, Key="files/a.txt", Body=b"a")
    s3_client.put_object(Bucket=BUCKET, Key="files/docs/readme.md", Body=b"readme")
    s3_client.put_object(Bucket=BUCKET, Key="files/docs/", Body=b"")
    s3_client.put_object(Bucket=BUCKET, Key="db/shop_2024-01-01.sql", Body=b"dump")
    return S3Storage(s3_client, BUCKET, "files")


class TestS3Storage:
    """Tests for S3Storage."""

    def test_list_recursive(self, storage):
        entries = storage.list_contents()

        assert sorted(e.path for e in entries) == ["a.txt", "docs/readme.md"]
        readme = next(e for e in entries if e.path == "docs/readme.md")
        assert readme.size == 6
        assert readme.is_directory is False
        assert readme.modified_time > 0

    def test_list_non_recursive_reports_prefixes(self, storage):
        entries = storage.list_contents(recursive=False)

        by_path = {e.path: e for e in entries}
        assert set(by_path) == {"a.txt", "docs"}
        assert by_path["docs"].is_directory is True

    def test_list_sub_prefix(self, storage):
        entries = storage.list_contents("docs")
        assert [e.path for e in entries] == ["docs/readme.md"]

    def test_list_without_prefix(self, s3_client, storage):
        entries = S3Storage(s3_client, BUCKET).list_contents()
        assert sorted(e.path for e in entries) == [
            "db/shop_2024-01-01.sql",
            "files/a.txt",
            "files/docs/readme.md",
        ]

    def test_exists(self, storage):
        assert storage.exists("a.txt") is True
        assert storage.exists("docs/readme.md") is True
        assert storage.exists("missing.txt") is False
        assert storage.exists("shop_2024-01-01.sql") is False

    def test_get_modified_time(self, storage):
        now = datetime.now(timezone.utc).timestamp()
        assert abs(storage.get_modified_time("a.txt") - now) < 600

    def test_get_modified_time_missing(self, storage):
        with pytest.raises(StorageOperationError):
            storage.get_modified_time("missing.txt")

    def test_write_and_read_stream(self, storage, s3_client):
        storage.write_stream("new/file.bin", io.BytesIO(b"payload"))

        body = s3_client.get_object(Bucket=BUCKET, Key="files/new/file.bin")["Body"]
        assert body.read() == b"payload"
        with storage.read_stream("new/file.bin") as stream:
            assert stream.read() == b"payload"

    def test_read_stream_missing(self, storage):
        with pytest.raises(StorageOperationError):
            with storage.read_stream("missing.txt"):
                pass

    def test_copy(self, storage):
        storage.copy("a.txt", "copy/a.txt")
        assert storage.exists("copy/a.txt")

    def test_delete(self, storage):
        storage.delete("a.txt")
        assert storage.exists("a.txt") is False

    def test_missing_bucket_fails(self, s3_client):
        storage = S3Storage(s3_client, "no-such-bucket", "files")

        with pytest.raises(StorageOperationError):
            storage.list_contents()


class TestCreateRemoteStorages:
    """Tests for building storages from settings."""

    def test_s3_settings(self):
        settings = S3Settings(
            key="testing",
            secret="testing",
            region="us-east-1",
            bucket=BUCKET,
            prefix="files",
            prefix_db="db",
        )

        with mock_aws():
            files, dumps = create_remote_storages(settings)

        assert isinstance(files, S3Storage)
        assert files.prefix == "files"
        assert dumps.prefix == "db"
        assert files.s3 is dumps.s3
        assert files.bucket == BUCKET

    def test_unsupported_settings(self):
        with pytest.raises(TypeError):
            create_remote_storages(object())


class TestS3Mirror:
    """Tests for mirroring onto S3 keys that are not in normalized form."""

    @pytest.fixture
    def remote(self, s3_client):
        s3_client.put_object(Bucket=BUCKET, Key="files/docs//old.txt", Body=b"old")
        return S3Storage(s3_client, BUCKET, "files")

    @pytest.fixture
    def local_dir(self, tmp_path):
        path = tmp_path / "local"
        path.mkdir()
        return path

    def make_engine(self, local_dir, remote):
        return SyncEngine(
            LocalStorage(local_dir), remote, output=OutputFormatter(quiet=True)
        )

    def keys(self, s3_client):
        response = s3_client.list_objects_v2(Bucket=BUCKET)
        return sorted(obj["Key"] for obj in response.get("Contents", []))

    def test_listing_keeps_raw_key(self, remote):
        assert [e.path for e in remote.list_contents()] == ["docs//old.txt"]
        assert remote.exists("docs//old.txt") is True
        assert remote.exists("docs/old.txt") is False

    def test_stale_key_is_deleted_once(self, s3_client, remote, local_dir):
        engine = self.make_engine(local_dir, remote)

        first = engine.sync(RemoteIndex.build(remote))
        second = engine.sync(RemoteIndex.build(remote))

        assert first == SyncStats(deleted=1)
        assert second == SyncStats()
        assert self.keys(s3_client) == []

    def test_stale_key_next_to_matching_local_file(self, s3_client, remote, local_dir):
        (local_dir / "docs").mkdir()
        (local_dir / "docs" / "old.txt").write_text("current")
        engine = self.make_engine(local_dir, remote)

        stats = engine.sync(RemoteIndex.build(remote))

        assert stats == SyncStats(sent=1, deleted=1)
        assert self.keys(s3_client) == ["files/docs/old.txt"]

    def test_dry_run_plans_the_same_delete(self, s3_client, remote, local_dir):
        dry_remote = DryRunStorage(remote)
        engine = self.make_engine(local_dir, dry_remote)

        stats = engine.sync(RemoteIndex.build(dry_remote))

        assert stats == SyncStats(deleted=1)
        assert dry_remote.operations == [("delete", "docs//old.txt")]
        assert self.keys(s3_client) == ["files/docs//old.txt"]
