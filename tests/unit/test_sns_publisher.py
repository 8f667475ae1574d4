import json
import socket
import uuid
from datetime import datetime

import pytest
from pytest_httpserver import HTTPServer
from werkzeug import Response

from localsns import config
from localsns.services.sns.models import SnsMessage, SnsStore
from localsns.services.sns.provider import SnsProvider
from localsns.services.sns.publisher import (
    HttpTopicPublisher,
    PublishDispatcher,
    SnsPublishContext,
    create_sns_notification,
)
from localsns.utils.net import get_free_tcp_port
from localsns.utils.sync import poll_condition

TOPIC_ARN = "arn:aws:sns:us-east-1:123456789012:orders"


@pytest.fixture
def subscriber():
    return _subscription("http://localhost:9000/hook", f"{TOPIC_ARN}:123456")


@pytest.fixture
def publish_dispatcher():
    dispatcher = PublishDispatcher(num_thread=4)
    yield dispatcher
    dispatcher.shutdown()


@pytest.fixture
def unresponsive_endpoint():
    """An endpoint which accepts connections but never answers."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(16)
    yield f"http://127.0.0.1:{sock.getsockname()[1]}/hook"
    sock.close()


def _subscription(endpoint, subscription_arn, topic_arn=TOPIC_ARN, protocol="http"):
    return {
        "Endpoint": endpoint,
        "TopicArn": topic_arn,
        "Owner": "",
        "Protocol": protocol,
        "SubscriptionArn": subscription_arn,
    }


def _publish_context(store: SnsStore) -> SnsPublishContext:
    return SnsPublishContext(message=SnsMessage(message="hello"), store=store)


def _received_notifications(httpserver: HTTPServer) -> list[dict]:
    return [json.loads(request.get_data()) for request, _ in httpserver.log]


class TestNotification:
    def test_create_sns_notification(self, subscriber):
        message_ctx = SnsMessage(message="hello", subject="greeting")

        notification = create_sns_notification(message_ctx, subscriber, "message-1")

        assert len(notification["Records"]) == 1
        record = notification["Records"][0]
        assert record["EventVersion"] == "1.0"
        assert record["EventSubscriptionArn"] == subscriber["SubscriptionArn"]
        assert record["EventSource"] == "aws:sns"

        sns = record["Sns"]
        timestamp = sns.pop("Timestamp")
        assert timestamp.endswith("Z")
        assert datetime.strptime(timestamp, "%Y-%m-%dT%H:%M:%S.%fZ")
        assert sns == {
            "SignatureVersion": "1",
            "Signature": "EXAMPLE",
            "SigningCertUrl": "EXAMPLE",
            "MessageId": "message-1",
            "Message": "hello",
            "MessageAttributes": {},
            "Type": "Notification",
            "UnsubscribeUrl": "EXAMPLE",
            "TopicArn": TOPIC_ARN,
            "Subject": "greeting",
        }

    def test_create_sns_notification_with_attributes(self, subscriber):
        attributes = {"color": {"Type": "String", "Value": "red"}}
        message_ctx = SnsMessage(message="hello", message_attributes=attributes)

        sns = create_sns_notification(message_ctx, subscriber, "message-1")["Records"][0]["Sns"]

        assert sns["MessageAttributes"] == attributes
        assert "Subject" not in sns


class TestHttpTopicPublisher:
    def test_publish_posts_notification(self, httpserver: HTTPServer, subscriber):
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        subscriber["Endpoint"] = httpserver.url_for("/hook")

        HttpTopicPublisher().publish(_publish_context(SnsStore()), subscriber)

        assert len(httpserver.log) == 1
        request, _ = httpserver.log[0]
        body = request.get_data()
        notification = json.loads(body)
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Content-Length"] == str(len(body))
        assert request.headers["x-amz-sns-message-type"] == "Notification"
        assert request.headers["x-amz-sns-topic-arn"] == TOPIC_ARN
        assert request.headers["x-amz-sns-subscription-arn"] == subscriber["SubscriptionArn"]
        assert request.headers["User-Agent"] == "Amazon Simple Notification Service Agent"
        assert notification["Records"][0]["Sns"]["Message"] == "hello"

        message_id = notification["Records"][0]["Sns"]["MessageId"]
        uuid.UUID(message_id)
        assert request.headers["x-amz-sns-message-id"] == message_id

    def test_publish_to_failing_endpoint_does_not_raise(
        self, httpserver: HTTPServer, subscriber
    ):
        httpserver.expect_request("/hook").respond_with_response(Response("error", status=500))
        subscriber["Endpoint"] = httpserver.url_for("/hook")

        HttpTopicPublisher().publish(_publish_context(SnsStore()), subscriber)

        assert len(httpserver.log) == 1

    @pytest.mark.parametrize(
        "endpoint",
        [
            f"http://localhost:{get_free_tcp_port()}/hook",
            "not-a-url",
            None,
        ],
    )
    def test_publish_to_unreachable_endpoint_does_not_raise(self, subscriber, endpoint):
        subscriber["Endpoint"] = endpoint

        HttpTopicPublisher().publish(_publish_context(SnsStore()), subscriber)

    def test_publish_gives_up_on_unresponsive_endpoint(
        self, subscriber, unresponsive_endpoint, monkeypatch
    ):
        monkeypatch.setattr(config, "SNS_DELIVERY_TIMEOUT", 0.5)
        subscriber["Endpoint"] = unresponsive_endpoint

        HttpTopicPublisher().publish(_publish_context(SnsStore()), subscriber)


class TestPublishDispatcher:
    def test_http_protocols_have_a_notifier(self):
        assert set(PublishDispatcher.topic_notifiers) == {"http", "https"}
        for notifier in PublishDispatcher.topic_notifiers.values():
            assert isinstance(notifier, HttpTopicPublisher)

    def test_publish_to_topic_without_subscriptions(self, publish_dispatcher):
        assert publish_dispatcher.publish_to_topic(_publish_context(SnsStore()), TOPIC_ARN) == []

    def test_publish_to_topic_fans_out(self, httpserver: HTTPServer, publish_dispatcher):
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        store = SnsStore()
        for i in range(3):
            store.add_subscription(_subscription(httpserver.url_for("/hook"), f"{TOPIC_ARN}:{i}"))
        store.add_subscription(
            _subscription(
                httpserver.url_for("/hook"), f"{TOPIC_ARN}-other:1", topic_arn=f"{TOPIC_ARN}-other"
            )
        )

        futures = publish_dispatcher.publish_to_topic(_publish_context(store), TOPIC_ARN)
        for future in futures:
            assert future.result(timeout=10) is None

        notifications = _received_notifications(httpserver)
        assert len(notifications) == 3
        subscription_arns = sorted(
            notification["Records"][0]["EventSubscriptionArn"] for notification in notifications
        )
        assert subscription_arns == [f"{TOPIC_ARN}:0", f"{TOPIC_ARN}:1", f"{TOPIC_ARN}:2"]
        for notification in notifications:
            assert notification["Records"][0]["Sns"]["TopicArn"] == TOPIC_ARN
            assert notification["Records"][0]["Sns"]["Message"] == "hello"

    def test_every_delivery_has_its_own_message_id(
        self, httpserver: HTTPServer, publish_dispatcher
    ):
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        store = SnsStore()
        store.add_subscription(_subscription(httpserver.url_for("/hook"), f"{TOPIC_ARN}:1"))
        store.add_subscription(_subscription(httpserver.url_for("/hook"), f"{TOPIC_ARN}:2"))

        for future in publish_dispatcher.publish_to_topic(_publish_context(store), TOPIC_ARN):
            future.result(timeout=10)

        assert len(httpserver.log) == 2
        message_ids = set()
        for request, _ in httpserver.log:
            message_id = json.loads(request.get_data())["Records"][0]["Sns"]["MessageId"]
            assert request.headers["x-amz-sns-message-id"] == message_id
            message_ids.add(message_id)
        assert len(message_ids) == 2

    def test_failing_delivery_does_not_affect_others(
        self, httpserver: HTTPServer, publish_dispatcher
    ):
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        store = SnsStore()
        store.add_subscription(
            _subscription(f"http://localhost:{get_free_tcp_port()}/unreachable", f"{TOPIC_ARN}:1")
        )
        store.add_subscription(
            _subscription(httpserver.url_for("/hook"), f"{TOPIC_ARN}:2", protocol="https")
        )

        for future in publish_dispatcher.publish_to_topic(_publish_context(store), TOPIC_ARN):
            assert future.exception(timeout=10) is None

        notifications = _received_notifications(httpserver)
        assert [n["Records"][0]["EventSubscriptionArn"] for n in notifications] == [
            f"{TOPIC_ARN}:2"
        ]

    def test_unresponsive_endpoints_do_not_block_other_deliveries(
        self, httpserver: HTTPServer, unresponsive_endpoint, monkeypatch
    ):
        monkeypatch.setattr(config, "SNS_DELIVERY_TIMEOUT", 1)
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        store = SnsStore()
        # more unresponsive subscribers than workers, the healthy one is scheduled last
        store.add_subscription(_subscription(unresponsive_endpoint, f"{TOPIC_ARN}:1"))
        store.add_subscription(_subscription(unresponsive_endpoint, f"{TOPIC_ARN}:2"))
        store.add_subscription(_subscription(httpserver.url_for("/hook"), f"{TOPIC_ARN}:3"))

        dispatcher = PublishDispatcher(num_thread=2)
        try:
            dispatcher.publish_to_topic(_publish_context(store), TOPIC_ARN)
            assert poll_condition(lambda: len(httpserver.log) == 1, timeout=5, interval=0.1)
        finally:
            dispatcher.shutdown()

        notification = _received_notifications(httpserver)[0]
        assert notification["Records"][0]["EventSubscriptionArn"] == f"{TOPIC_ARN}:3"


class TestProviderPublish:
    def test_publish_scenario(self, httpserver: HTTPServer):
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        provider = SnsProvider(region="us-east-1", account_id="123456789012")
        try:
            topic_arn = provider.create_topic("orders")
            assert topic_arn == TOPIC_ARN
            provider.subscribe(httpserver.url_for("/hook"), "http", topic_arn)

            provider.publish(topic_arn=topic_arn, message="hello")

            assert poll_condition(lambda: len(httpserver.log) >= 1, timeout=10, interval=0.1)
            notification = _received_notifications(httpserver)[0]
            assert notification["Records"][0]["Sns"]["Message"] == "hello"
        finally:
            provider.shutdown()

    def test_publish_after_unsubscribe(self, httpserver: HTTPServer, sns_provider):
        httpserver.expect_request("/hook", method="POST").respond_with_data("ok")
        subscription_arn = sns_provider.subscribe(httpserver.url_for("/hook"), "http", TOPIC_ARN)
        sns_provider.unsubscribe(subscription_arn)

        sns_provider.publish(topic_arn=TOPIC_ARN, message="hello")
        sns_provider.shutdown()

        assert len(httpserver.log) == 0
