"""Unit tests for the Lambda entry point."""

import json
import os
from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from dns_news_digest.errors import ConfigError, FetchError
from dns_news_digest.lambda_handler import (
    get_webhook_url,
    lambda_handler,
    send_cloudwatch_metrics,
)
from dns_news_digest.models import DigestResult

ENV = {
    "RSS_FEED_URL": "https://example.com/feed",
    "SLACK_WEBHOOK_URL": "https://hooks.slack.com/services/T/B/X",
    "AWS_REGION": "us-east-1",
}


class TestLambdaHandler:
    """Unit tests for lambda_handler."""

    def test_successful_run(self):
        result = DigestResult(entries_found=2, notification_sent=True)

        with (
            patch.dict(os.environ, ENV, clear=True),
            patch("dns_news_digest.lambda_handler.run_digest", return_value=result),
            patch("dns_news_digest.lambda_handler.send_cloudwatch_metrics") as mock_metrics,
        ):
            response = lambda_handler({}, Mock(aws_request_id="req-1", function_name="digest"))

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["metrics"] == {"entries_found": 2, "messages_sent": 1, "errors": []}
        mock_metrics.assert_called_once()

    def test_failed_run_returns_500(self):
        with (
            patch.dict(os.environ, ENV, clear=True),
            patch(
                "dns_news_digest.lambda_handler.run_digest",
                side_effect=FetchError("received status code 503"),
            ),
            patch("dns_news_digest.lambda_handler.send_cloudwatch_metrics") as mock_metrics,
        ):
            response = lambda_handler({}, None)

        assert response["statusCode"] == 500
        body = json.loads(response["body"])
        assert "FetchError" in body["error"]
        assert body["metrics"]["errors"]
        mock_metrics.assert_called_once()

    def test_missing_feed_url_returns_500(self):
        with (
            patch.dict(os.environ, {}, clear=True),
            patch("dns_news_digest.lambda_handler.run_digest") as mock_run,
            patch("dns_news_digest.lambda_handler.send_cloudwatch_metrics"),
        ):
            response = lambda_handler({}, None)

        assert response["statusCode"] == 500
        mock_run.assert_not_called()

    def test_unexpected_error_returns_500_and_reports_failure(self):
        env = {"RSS_FEED_URL": "https://example.com/feed", "SLACK_WEBHOOK_SECRET_NAME": "digest-webhook"}
        client = Mock()
        client.get_secret_value.side_effect = NoCredentialsError()

        with (
            patch.dict(os.environ, env, clear=True),
            patch("boto3.client", return_value=client),
            patch("dns_news_digest.lambda_handler.run_digest") as mock_run,
            patch("dns_news_digest.lambda_handler.send_cloudwatch_metrics") as mock_metrics,
        ):
            response = lambda_handler({}, None)

        assert response["statusCode"] == 500
        body = json.loads(response["body"])
        assert "NoCredentialsError" in body["error"]
        mock_run.assert_not_called()
        sent_metrics = mock_metrics.call_args.args[0]
        assert sent_metrics["errors"] == [body["error"]]

    def test_webhook_read_from_secret_when_unset(self):
        env = {"RSS_FEED_URL": "https://example.com/feed", "SLACK_WEBHOOK_SECRET_NAME": "digest-webhook"}

        with (
            patch.dict(os.environ, env, clear=True),
            patch(
                "dns_news_digest.lambda_handler.get_webhook_url",
                return_value="https://hooks.slack.com/services/T/B/SECRET",
            ) as mock_secret,
            patch("dns_news_digest.lambda_handler.run_digest", return_value=DigestResult()) as mock_run,
            patch("dns_news_digest.lambda_handler.send_cloudwatch_metrics"),
        ):
            response = lambda_handler({}, None)

        assert response["statusCode"] == 200
        assert mock_secret.call_args.args[0] == "digest-webhook"
        slack_config = mock_run.call_args.args[1]
        assert slack_config.webhook_url == "https://hooks.slack.com/services/T/B/SECRET"


class TestGetWebhookUrl:
    """Unit tests for Secrets Manager retrieval."""

    def _client(self, secret_string):
        client = Mock()
        client.get_secret_value.return_value = {"SecretString": secret_string}
        return client

    def test_plain_string_secret(self):
        with patch("boto3.client", return_value=self._client(" https://hooks/x \n")) as mock_boto:
            assert get_webhook_url("s", "us-east-1", "exec") == "https://hooks/x"

        mock_boto.assert_called_once_with("secretsmanager", region_name="us-east-1")

    def test_json_secret(self):
        secret = json.dumps({"webhook_url": "https://hooks/json"})

        with patch("boto3.client", return_value=self._client(secret)):
            assert get_webhook_url("s", "us-east-1", "exec") == "https://hooks/json"

    @pytest.mark.parametrize("secret", ["", "   ", json.dumps({"other": "x"}), json.dumps(["a"])])
    def test_unusable_secret_raises_config_error(self, secret):
        with patch("boto3.client", return_value=self._client(secret)):
            with pytest.raises(ConfigError):
                get_webhook_url("s", "us-east-1", "exec")

    def test_client_error_raises_config_error(self):
        client = Mock()
        client.get_secret_value.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "missing"}},
            "GetSecretValue",
        )

        with patch("boto3.client", return_value=client):
            with pytest.raises(ConfigError):
                get_webhook_url("s", "us-east-1", "exec")


class TestCloudWatchMetrics:
    """Unit tests for send_cloudwatch_metrics."""

    def test_metrics_published(self):
        metrics = {"entries_found": 4, "messages_sent": 1, "errors": []}

        with patch("boto3.client") as mock_boto:
            send_cloudwatch_metrics(metrics, "us-east-1", "exec")

        mock_boto.assert_called_once_with("cloudwatch", region_name="us-east-1")
        kwargs = mock_boto.return_value.put_metric_data.call_args.kwargs
        assert kwargs["Namespace"] == "DNS-News-Digest"
        values = {metric["MetricName"]: metric["Value"] for metric in kwargs["MetricData"]}
        assert values == {"EntriesFound": 4, "MessagesSent": 1, "RunSuccess": 1}

    def test_failure_is_swallowed(self):
        metrics = {"entries_found": 0, "messages_sent": 0, "errors": ["boom"]}

        with patch("boto3.client") as mock_boto:
            mock_boto.return_value.put_metric_data.side_effect = ClientError(
                {"Error": {"Code": "AccessDenied", "Message": "no"}}, "PutMetricData"
            )
            send_cloudwatch_metrics(metrics, "us-east-1", "exec")
