import logging
import random
from typing import List, Optional

from localsns import config
from localsns.aws.protocol.parser import MessageAttributes
from localsns.aws.protocol.serializer import (
    ResponseDocument,
    create_not_implemented_response,
    create_response,
    serialize_subscription_members,
)
from localsns.services.sns import constants as sns_constants
from localsns.services.sns.actions import (
    CreateTopic,
    ListSubscriptions,
    Publish,
    SnsAction,
    Subscribe,
    Unsubscribe,
    UnsupportedAction,
)
from localsns.services.sns.models import SnsMessage, SnsStore, SnsSubscription, SnsTopic
from localsns.services.sns.publisher import PublishDispatcher, SnsPublishContext
from localsns.utils.aws.arns import resolve_pseudo_parameters, sns_subscription_arn, sns_topic_arn

LOG = logging.getLogger(__name__)


class SnsProvider:
    """
    Provider for the supported subset of the Simple Notification Service: CreateTopic, Subscribe, Unsubscribe,
    ListSubscriptions and Publish.

    Every provider owns its own store, which starts empty, and its own publisher. Topic ARNs are built from the
    region and account ID the provider was created with, the account ID also replaces pseudo parameters like
    ``#{AWS::AccountId}`` in topic ARNs passed to Subscribe and Publish.
    """

    def __init__(
        self,
        region: str = None,
        account_id: str = None,
        publisher: Optional[PublishDispatcher] = None,
    ) -> None:
        self.region = region or config.SNS_REGION
        self.account_id = account_id or config.SNS_ACCOUNT_ID
        self._store = SnsStore()
        self._publisher = publisher or PublishDispatcher(num_thread=config.SNS_PUBLISH_WORKERS)

    def get_store(self) -> SnsStore:
        return self._store

    def shutdown(self):
        self._publisher.shutdown()

    def create_topic(self, name: str) -> str:
        topic_arn = sns_topic_arn(name, account_id=self.account_id, region_name=self.region)
        self._store.add_topic(SnsTopic(TopicArn=topic_arn))
        LOG.debug("Created topic %s", topic_arn)
        return topic_arn

    def subscribe(self, endpoint: str, protocol: str, topic_arn: str) -> str:
        topic_arn = resolve_pseudo_parameters(topic_arn, self.account_id)
        subscription_arn = sns_subscription_arn(
            topic_arn, random.randrange(sns_constants.SUBSCRIPTION_SUFFIX_BOUND)
        )
        self._store.add_subscription(
            SnsSubscription(
                Endpoint=endpoint,
                TopicArn=topic_arn,
                Owner="",
                Protocol=protocol,
                SubscriptionArn=subscription_arn,
            )
        )
        LOG.debug(
            "Subscribed '%s' with protocol '%s' to topic %s (subscription %s)",
            endpoint,
            protocol,
            topic_arn,
            subscription_arn,
        )
        return subscription_arn

    def unsubscribe(self, subscription_arn: str) -> None:
        removed = self._store.remove_subscription(subscription_arn)
        LOG.debug("Unsubscribed %s (%d subscriptions removed)", subscription_arn, removed)

    def list_subscriptions(self) -> List[SnsSubscription]:
        return self._store.list_subscriptions()

    def publish(
        self,
        topic_arn: str,
        message: str,
        subject: str = None,
        message_structure: str = None,
        message_attributes: MessageAttributes = None,
    ) -> None:
        """
        Publishes the message to every current subscription of the topic. The deliveries happen in the background,
        this method returns as soon as they are scheduled.

        :param topic_arn: the topic ARN, may contain pseudo parameters
        :param message: the message body
        :param subject: the subject of the message
        :param message_structure: the message structure
        :param message_attributes: the decoded message attributes
        """
        topic_arn = resolve_pseudo_parameters(topic_arn, self.account_id)
        message_ctx = SnsMessage(
            message=message,
            subject=subject,
            message_structure=message_structure,
            message_attributes=message_attributes,
        )
        publish_ctx = SnsPublishContext(message=message_ctx, store=self._store)
        self._publisher.publish_to_topic(publish_ctx, topic_arn)

    def dispatch(self, action: SnsAction) -> ResponseDocument:
        """
        Executes the given action and returns its response document.

        :param action: the parsed action
        :return: the response document, to be serialized with ``to_xml``
        """
        match action:
            case ListSubscriptions():
                return create_response(
                    "ListSubscriptions", serialize_subscription_members(self.list_subscriptions())
                )
            case CreateTopic(name=name):
                return create_response("CreateTopic", {"TopicArn": self.create_topic(name)})
            case Subscribe(endpoint=endpoint, protocol=protocol, topic_arn=topic_arn):
                subscription_arn = self.subscribe(endpoint, protocol, topic_arn)
                return create_response("Subscribe", {"SubscriptionArn": subscription_arn})
            case Publish():
                self.publish(
                    topic_arn=action.topic_arn,
                    message=action.message,
                    subject=action.subject,
                    message_structure=action.message_structure,
                    message_attributes=action.message_attributes,
                )
                return create_response("Publish")
            case Unsubscribe(subscription_arn=subscription_arn):
                self.unsubscribe(subscription_arn)
                return create_response("Unsubscribe")
            case UnsupportedAction(action=name):
                LOG.debug("Action %s is not implemented", name)
                return create_not_implemented_response()
