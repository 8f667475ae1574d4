"""
Serialization of SNS responses. Every response document has a single root element ``<Operation>Response``
carrying the SNS XML namespace, followed by a ``ResponseMetadata`` element with a fresh request ID, and then
the operation specific result elements.
"""
import logging
from typing import Any, Dict, Iterable, Optional

import xmltodict

from localsns.utils.strings import long_uid

LOG = logging.getLogger(__name__)

SNS_XMLNS = "http://sns.amazonaws.com/doc/2010-03-31/"

# order of the elements of a subscription member in ListSubscriptions, SDKs rely on it
SUBSCRIPTION_MEMBER_KEYS = ("Endpoint", "TopicArn", "Owner", "Protocol", "SubscriptionArn")

ResponseDocument = Dict[str, Dict[str, Any]]


def create_attr() -> Dict[str, str]:
    return {"@xmlns": SNS_XMLNS}


def create_metadata(request_id: str = None) -> Dict[str, Any]:
    return {"ResponseMetadata": {"RequestId": request_id or long_uid()}}


def create_response(
    operation: str, result: Optional[Dict[str, Any]] = None, request_id: str = None
) -> ResponseDocument:
    """
    Creates the response document for the given operation.

    :param operation: the name of the operation, e.g. ``CreateTopic``
    :param result: the content of the ``<Operation>Result`` element, if the operation returns a result
    :param request_id: the request ID, a new one is generated if not given
    :return: the response document, which can be serialized with ``to_xml``
    """
    content = {**create_attr(), **create_metadata(request_id)}
    if result is not None:
        content[f"{operation}Result"] = result
    return {f"{operation}Response": content}


def create_not_implemented_response(request_id: str = None) -> ResponseDocument:
    return {"NotImplementedResponse": {**create_attr(), **create_metadata(request_id)}}


def serialize_subscription_members(subscriptions: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "Subscriptions": {
            "member": [
                {key: subscription.get(key) for key in SUBSCRIPTION_MEMBER_KEYS}
                for subscription in subscriptions
            ]
        }
    }


def to_xml(document: ResponseDocument, pretty: bool = False) -> str:
    """
    Serializes the given response document into XML. Values of ``None`` are serialized as empty elements.

    :param document: the response document
    :param pretty: whether to indent the output
    :return: the XML string
    """
    return xmltodict.unparse(document, full_document=False, pretty=pretty)
