import abc
import json
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List

import requests

from localsns import config
from localsns.constants import APPLICATION_JSON
from localsns.services.sns import constants as sns_constants
from localsns.services.sns.models import SnsMessage, SnsStore, SnsSubscription
from localsns.utils.strings import long_uid, to_bytes, truncate
from localsns.utils.time import timestamp_millis

LOG = logging.getLogger(__name__)


@dataclass
class SnsPublishContext:
    message: SnsMessage
    store: SnsStore


class TopicPublisher(abc.ABC):
    """
    Delivers one message to one subscription. ``publish`` runs on a worker thread of the ``PublishDispatcher``
    and never raises, a failed delivery is logged and dropped. Subclasses implement ``_publish`` for their
    transport.
    """

    def publish(self, context: SnsPublishContext, subscriber: SnsSubscription):
        """
        Runs a single delivery. Nobody waits for the outcome of a delivery, so any error is logged here.

        :param context: the publish context holding the message
        :param subscriber: the subscription to deliver to
        """
        try:
            self._publish(context=context, subscriber=subscriber)
        except Exception:
            LOG.exception(
                "Unexpected error while delivering message to subscription %s",
                subscriber.get("SubscriptionArn"),
            )

    @abc.abstractmethod
    def _publish(self, context: SnsPublishContext, subscriber: SnsSubscription):
        pass

    def prepare_message(
        self, message_context: SnsMessage, subscriber: SnsSubscription, message_id: str
    ) -> str:
        """
        Serializes the notification envelope for the given subscription.

        :param message_context: the published message
        :param subscriber: the subscription the envelope is addressed to
        :param message_id: the ID of this delivery
        :return: the envelope as JSON string
        """
        return json.dumps(create_sns_notification(message_context, subscriber, message_id))


class HttpTopicPublisher(TopicPublisher):
    """
    POSTs the notification envelope to the endpoint of an HTTP(S) subscription, together with the headers the
    real service sends. Every delivery gets a message ID of its own.
    See https://docs.aws.amazon.com/sns/latest/dg/sns-http-https-endpoint-as-subscriber.html
    """

    def _publish(self, context: SnsPublishContext, subscriber: SnsSubscription):
        message_id = long_uid()
        endpoint = subscriber["Endpoint"]
        body = to_bytes(self.prepare_message(context.message, subscriber, message_id))
        headers = {
            "Content-Type": APPLICATION_JSON,
            "Content-Length": str(len(body)),
            "x-amz-sns-message-type": context.message.type,
            "x-amz-sns-message-id": message_id,
            "x-amz-sns-topic-arn": subscriber["TopicArn"] or "",
            "x-amz-sns-subscription-arn": subscriber["SubscriptionArn"],
            "User-Agent": sns_constants.SNS_USER_AGENT,
        }
        try:
            response = requests.post(
                endpoint,
                data=body,
                headers=headers,
                timeout=config.SNS_DELIVERY_TIMEOUT,
                verify=False,
            )
            LOG.debug(
                "Delivery %s to '%s' answered with %s: %s",
                message_id,
                endpoint,
                response.status_code,
                truncate(response.text),
            )
            response.raise_for_status()
        except requests.RequestException as e:
            LOG.info("Delivery %s to '%s' failed: %s", message_id, endpoint, e)


def create_sns_notification(
    message_context: SnsMessage, subscriber: SnsSubscription, message_id: str
) -> Dict:
    """
    Builds the ``Records`` envelope delivered to a subscriber. Signature fields carry a placeholder since
    messages are never signed, and ``Subject`` is only present when the message has one.

    :param message_context: the published message
    :param subscriber: the subscription the envelope is addressed to
    :param message_id: the ID of this delivery
    :return: the envelope
    """
    sns = {
        "SignatureVersion": sns_constants.SIGNATURE_VERSION,
        "Timestamp": timestamp_millis(),
        "Signature": sns_constants.PLACEHOLDER_VALUE,
        "SigningCertUrl": sns_constants.PLACEHOLDER_VALUE,
        "MessageId": message_id,
        "Message": message_context.message,
        "MessageAttributes": message_context.message_attributes or {},
        "Type": message_context.type,
        "UnsubscribeUrl": sns_constants.PLACEHOLDER_VALUE,
        "TopicArn": subscriber["TopicArn"],
    }
    if message_context.subject is not None:
        sns["Subject"] = message_context.subject

    record = {
        "EventVersion": sns_constants.EVENT_VERSION,
        "EventSubscriptionArn": subscriber["SubscriptionArn"],
        "EventSource": sns_constants.EVENT_SOURCE,
        "Sns": sns,
    }
    return {"Records": [record]}


class PublishDispatcher:
    """
    Fans a published message out to the subscriptions of its topic. Each subscription becomes one task on a
    ``ThreadPoolExecutor``, nothing waits for the tasks to finish.
    """

    http_notifier = HttpTopicPublisher()
    # protocols are stored as given, any subscription without a dedicated notifier is delivered over HTTP
    topic_notifiers = dict.fromkeys(sns_constants.SNS_PROTOCOLS, http_notifier)

    def __init__(self, num_thread: int = 10):
        self.executor = ThreadPoolExecutor(num_thread, thread_name_prefix="sns_pub")

    def shutdown(self):
        self.executor.shutdown(wait=False)

    def publish_to_topic(self, ctx: SnsPublishContext, topic_arn: str) -> List[Future]:
        """
        Schedules one delivery per current subscription of the topic.

        :param ctx: the publish context
        :param topic_arn: the resolved topic ARN
        :return: the futures of the scheduled deliveries, they never raise
        """
        subscriptions = ctx.store.get_topic_subscriptions(topic_arn)
        if not subscriptions:
            LOG.debug("No subscriptions for topic %s, message dropped", topic_arn)

        futures = []
        for subscriber in subscriptions:
            notifier = self.topic_notifiers.get(subscriber["Protocol"], self.http_notifier)
            LOG.debug(
                "Scheduling delivery for topic %s to %s (subscription %s)",
                topic_arn,
                subscriber["Endpoint"],
                subscriber["SubscriptionArn"],
            )
            futures.append(self.executor.submit(notifier.publish, ctx, subscriber))
        return futures
