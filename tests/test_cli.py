"""
Tests for the command-line interface.
"""

import pytest
from click.testing import CliRunner

from bucket_purge.main import cli
from conftest import count_keys


@pytest.fixture
def runner():
    return CliRunner()


class TestPurgeCommand:
    """Tests for `bucket-purge purge`."""

    def test_dry_run(self, runner, bucket, s3_client):
        """Test that dry run lists without deleting."""
        result = runner.invoke(cli, ["purge", bucket, "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "DRY-RUN MODE" in result.output
        assert "Would delete" in result.output
        assert count_keys(s3_client, bucket) == 25

    def test_purge_with_yes(self, runner, bucket, s3_client):
        """Test a confirmed purge."""
        result = runner.invoke(cli, ["purge", bucket, "--yes", "--batch-size", "10"])

        assert result.exit_code == 0, result.output
        assert "All objects deleted." in result.output
        assert count_keys(s3_client, bucket) == 0

    def test_prompt_declined(self, runner, bucket, s3_client):
        """Test that answering no leaves the bucket untouched."""
        result = runner.invoke(cli, ["purge", bucket], input="n\n")

        assert result.exit_code == 0
        assert "Purge cancelled by user." in result.output
        assert count_keys(s3_client, bucket) == 25

    def test_delete_bucket(self, runner, versioned_bucket, s3_client):
        """Test purging versions and removing the bucket."""
        result = runner.invoke(
            cli, ["purge", versioned_bucket, "--versions", "--delete-bucket", "--yes"]
        )

        assert result.exit_code == 0, result.output
        assert f"Bucket {versioned_bucket} deleted." in result.output
        names = [b["Name"] for b in s3_client.list_buckets()["Buckets"]]
        assert versioned_bucket not in names

    def test_missing_bucket_exits_non_zero(self, runner, mock_aws_environment):
        """Test that failures give exit code 1."""
        result = runner.invoke(cli, ["purge", "no-such-bucket", "--yes"])

        assert result.exit_code == 1
        assert "iteration" in result.output

    def test_debug_sdk_logs_botocore(self, runner, bucket, tmp_path):
        """Test that --debug-sdk writes botocore debug records."""
        log_file = tmp_path / "purge.log"
        result = runner.invoke(
            cli,
            ["--log-file", str(log_file), "purge", bucket, "--dry-run", "--debug-sdk"],
        )

        assert result.exit_code == 0, result.output
        assert "DEBUG    | botocore" in log_file.read_text()

    def test_sdk_debug_is_off_by_default(self, runner, bucket, tmp_path):
        """Test that botocore debug records are dropped without the flag."""
        log_file = tmp_path / "purge.log"
        result = runner.invoke(cli, ["--log-file", str(log_file), "purge", bucket, "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "botocore" not in log_file.read_text()

    def test_batch_size_range(self, runner, mock_aws_environment):
        """Test that batch sizes above the API limit are rejected."""
        result = runner.invoke(cli, ["purge", "b", "--batch-size", "1001", "--yes"])
        assert result.exit_code == 2


class TestValidateCommand:
    """Tests for `bucket-purge validate`."""

    def test_validate(self, runner, mock_aws_environment):
        """Test credential validation output."""
        result = runner.invoke(cli, ["validate"])

        assert result.exit_code == 0, result.output
        assert "AWS credentials are valid!" in result.output
