"""
The actions understood by the SNS provider. A decoded request is turned into exactly one of the action types
below, requests with a missing or unknown ``Action`` become an ``UnsupportedAction``. Fields which are missing in
the request are ``None``, they are not validated.
"""
from dataclasses import dataclass, field
from typing import Optional, Union

from localsns.aws.protocol.parser import MessageAttributes, RequestParams, parse_message_attributes


@dataclass
class ListSubscriptions:
    pass


@dataclass
class CreateTopic:
    name: Optional[str]


@dataclass
class Subscribe:
    endpoint: Optional[str]
    protocol: Optional[str]
    topic_arn: Optional[str]


@dataclass
class Publish:
    topic_arn: Optional[str]
    message: Optional[str]
    subject: Optional[str] = None
    message_structure: Optional[str] = None
    message_attributes: MessageAttributes = field(default_factory=dict)


@dataclass
class Unsubscribe:
    subscription_arn: Optional[str]


@dataclass
class UnsupportedAction:
    action: Optional[str]


SnsAction = Union[
    ListSubscriptions, CreateTopic, Subscribe, Publish, Unsubscribe, UnsupportedAction
]


def parse_action(params: RequestParams) -> SnsAction:
    """
    Creates the action for the given decoded request parameters.

    :param params: the flat request parameters, containing at least the ``Action``
    :return: the action to dispatch
    """
    match params.get("Action"):
        case "ListSubscriptions":
            return ListSubscriptions()
        case "CreateTopic":
            return CreateTopic(name=params.get("Name"))
        case "Subscribe":
            return Subscribe(
                endpoint=params.get("Endpoint"),
                protocol=params.get("Protocol"),
                topic_arn=params.get("TopicArn"),
            )
        case "Publish":
            return Publish(
                topic_arn=params.get("TopicArn"),
                message=params.get("Message"),
                subject=params.get("Subject"),
                message_structure=params.get("MessageStructure"),
                message_attributes=parse_message_attributes(params),
            )
        case "Unsubscribe":
            return Unsubscribe(subscription_arn=params.get("SubscriptionArn"))
        case action:
            return UnsupportedAction(action=action)
