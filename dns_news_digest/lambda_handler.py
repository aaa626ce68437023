"""AWS Lambda entry point for DNS News Digest."""

import json
import os
from typing import Any

import boto3
from botocore.exceptions import ClientError

from .config import Config
from .errors import ConfigError, DigestError
from .logging_config import (
    create_execution_logger,
    generate_execution_id,
    setup_structured_logging,
)
from .pipeline import run_digest

# Setup structured logging
setup_structured_logging(os.getenv("LOG_LEVEL", "INFO"))

METRICS_NAMESPACE = "DNS-News-Digest"


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Lambda handler invoked by the EventBridge schedule.

    Args:
        event: Lambda event data
        context: Lambda context object

    Returns:
        Response dictionary with status and metrics
    """
    execution_id = generate_execution_id("lambda")
    main_logger = create_execution_logger("main", execution_id)

    main_logger.log_execution_start(
        lambda_request_id=getattr(context, "aws_request_id", "unknown"),
        lambda_function_name=getattr(context, "function_name", "unknown"),
    )

    metrics = {"entries_found": 0, "messages_sent": 0, "errors": []}
    config = Config()

    try:
        feed_config = config.get_feed_config()
        slack_config = config.get_slack_config()

        if not slack_config.webhook_url and config.webhook_secret_name:
            slack_config.webhook_url = get_webhook_url(
                config.webhook_secret_name, config.aws_region, execution_id
            )

        result = run_digest(feed_config, slack_config, execution_id)

        metrics["entries_found"] = result.entries_found
        metrics["messages_sent"] = 1 if result.notification_sent else 0

    except DigestError as e:
        error_msg = f"{type(e).__name__}: {e}"
        main_logger.error(error_msg, error_type=type(e).__name__, error=str(e))
        return _failure_response(error_msg, metrics, config, execution_id, main_logger)

    except Exception as e:
        error_msg = f"Critical error in Lambda handler: {type(e).__name__}: {e}"
        main_logger.error(error_msg, error_type=type(e).__name__, error=str(e))
        return _failure_response(error_msg, metrics, config, execution_id, main_logger)

    main_logger.log_metrics(metrics)
    send_cloudwatch_metrics(metrics, config.aws_region, execution_id)
    main_logger.log_execution_end(success=True, metrics=metrics)

    return {
        "statusCode": 200,
        "body": json.dumps(
            {
                "message": "DNS News Digest execution completed",
                "execution_id": execution_id,
                "metrics": metrics,
            }
        ),
    }


def _failure_response(
    error_msg: str,
    metrics: dict[str, Any],
    config: Config,
    execution_id: str,
    main_logger,
) -> dict[str, Any]:
    """Record a failed run and build the 500 response."""
    metrics["errors"].append(error_msg)

    send_cloudwatch_metrics(metrics, config.aws_region, execution_id)
    main_logger.log_execution_end(success=False, metrics=metrics, error=error_msg)

    return {
        "statusCode": 500,
        "body": json.dumps(
            {
                "message": "DNS News Digest execution failed",
                "execution_id": execution_id,
                "error": error_msg,
                "metrics": metrics,
            }
        ),
    }


def get_webhook_url(secret_name: str, aws_region: str, execution_id: str) -> str:
    """
    Retrieve the Slack webhook URL from AWS Secrets Manager.

    Supports both plain string and JSON object secrets. The URL itself is
    never logged.

    Args:
        secret_name: Name of the secret in Secrets Manager
        aws_region: AWS region for Secrets Manager client
        execution_id: Execution ID for logging context

    Returns:
        Webhook URL

    Raises:
        ConfigError: If the secret cannot be retrieved or holds no usable value
    """
    secrets_logger = create_execution_logger("secrets_manager", execution_id)

    try:
        secrets_logger.info(
            f"Retrieving Slack webhook from Secrets Manager: {secret_name}"
        )
        secrets_client = boto3.client("secretsmanager", region_name=aws_region)
        response = secrets_client.get_secret_value(SecretId=secret_name)
    except ClientError as e:
        error_code = e.response.get("Error", {}).get("Code", "Unknown")
        secrets_logger.error(
            f"AWS Secrets Manager error retrieving {secret_name}: {error_code}"
        )
        raise ConfigError(f"Failed to retrieve secret {secret_name}") from e

    secret_value = (response.get("SecretString") or "").strip()
    if not secret_value:
        raise ConfigError(f"Secret {secret_name} contains empty value")

    try:
        secret_data = json.loads(secret_value)
    except json.JSONDecodeError:
        # Not JSON, use as plain string
        secrets_logger.info("Retrieved webhook from plain text secret")
        return secret_value

    if not isinstance(secret_data, dict):
        raise ConfigError(f"JSON secret {secret_name} must be an object")

    for key in ["webhook_url", "slack_webhook_url", "url"]:
        value = secret_data.get(key)
        if isinstance(value, str) and value.strip():
            secrets_logger.info("Retrieved webhook from JSON secret")
            return value.strip()

    raise ConfigError(f"No webhook URL found in JSON secret {secret_name}")


def send_cloudwatch_metrics(
    metrics: dict[str, Any], aws_region: str, execution_id: str
) -> None:
    """
    Send run metrics to CloudWatch.

    Failures are logged and never propagate.

    Args:
        metrics: Dictionary containing run metrics
        aws_region: AWS region for CloudWatch client
        execution_id: Execution ID for logging context
    """
    metrics_logger = create_execution_logger("cloudwatch_metrics", execution_id)
    run_success = not metrics["errors"]

    metric_data = [
        {
            "MetricName": "EntriesFound",
            "Value": metrics["entries_found"],
            "Unit": "Count",
        },
        {
            "MetricName": "MessagesSent",
            "Value": metrics["messages_sent"],
            "Unit": "Count",
        },
        {
            "MetricName": "RunSuccess",
            "Value": 1 if run_success else 0,
            "Unit": "Count",
            "Dimensions": [
                {"Name": "Status", "Value": "Success" if run_success else "Failure"}
            ],
        },
    ]

    try:
        cloudwatch = boto3.client("cloudwatch", region_name=aws_region)
        cloudwatch.put_metric_data(Namespace=METRICS_NAMESPACE, MetricData=metric_data)
        metrics_logger.info(
            "Successfully sent metrics to CloudWatch",
            metrics_sent=len(metric_data),
            namespace=METRICS_NAMESPACE,
            execution_success=run_success,
        )
    except Exception as e:
        metrics_logger.error(f"Failed to send CloudWatch metrics: {e}", error=str(e))
