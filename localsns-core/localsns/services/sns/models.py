import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, TypedDict

MessageAttributeMap = Dict[str, Dict[str, Optional[str]]]


class SnsTopic(TypedDict):
    TopicArn: str


class SnsSubscription(TypedDict):
    """
    A subscription as returned by ListSubscriptions. The key order is the order of the elements in the response.
    """

    Endpoint: Optional[str]
    TopicArn: Optional[str]
    Owner: str
    Protocol: Optional[str]
    SubscriptionArn: str


@dataclass
class SnsMessage:
    message: Optional[str]
    message_attributes: Optional[MessageAttributeMap] = None
    message_structure: Optional[str] = None
    subject: Optional[str] = None
    type: str = "Notification"

    def __post_init__(self):
        if self.message_attributes is None:
            self.message_attributes = {}


class SnsStore:
    """
    In-memory store of topics and subscriptions. The store is accessed concurrently from the request threads of the
    server and the publisher threads, so every access is guarded by a lock, and lists handed out are copies.
    """

    topics: List[SnsTopic]
    subscriptions: List[SnsSubscription]

    def __init__(self):
        self.mutex = threading.RLock()
        self.topics = []
        self.subscriptions = []

    def add_topic(self, topic: SnsTopic) -> None:
        with self.mutex:
            self.topics.append(topic)

    def add_subscription(self, subscription: SnsSubscription) -> None:
        with self.mutex:
            self.subscriptions.append(subscription)

    def remove_subscription(self, subscription_arn: str) -> int:
        """
        Removes every subscription with the given ARN.

        :param subscription_arn: the ARN of the subscription to remove
        :return: the number of removed subscriptions
        """
        with self.mutex:
            remaining = [
                sub for sub in self.subscriptions if sub["SubscriptionArn"] != subscription_arn
            ]
            removed = len(self.subscriptions) - len(remaining)
            self.subscriptions = remaining
            return removed

    def list_topics(self) -> List[SnsTopic]:
        with self.mutex:
            return list(self.topics)

    def list_subscriptions(self) -> List[SnsSubscription]:
        with self.mutex:
            return list(self.subscriptions)

    def get_topic_subscriptions(self, topic_arn: str) -> List[SnsSubscription]:
        with self.mutex:
            return [sub for sub in self.subscriptions if sub["TopicArn"] == topic_arn]

    def reset(self) -> None:
        with self.mutex:
            self.topics = []
            self.subscriptions = []
