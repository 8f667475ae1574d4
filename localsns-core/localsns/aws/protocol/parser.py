"""
Decoding of inbound SNS requests. Requests use the AWS query protocol: every parameter is a flat key, nested
structures are flattened into keys like ``MessageAttributes.entry.1.Value.DataType``. Some clients send the same
flat keys as a JSON object instead of a form-urlencoded body, so both are accepted.
"""
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qsl

from localsns.constants import APPLICATION_JSON
from localsns.http import Request
from localsns.utils.strings import to_str

LOG = logging.getLogger(__name__)

MESSAGE_ATTRIBUTES_PREFIX = "MessageAttributes.entry."

RequestParams = Dict[str, Any]
MessageAttributes = Dict[str, Dict[str, Optional[str]]]


def parse_request_params(request: Request) -> RequestParams:
    """
    Decodes the parameters of the given request into a flat key-value mapping. Query string arguments are read
    first, parameters from the body override them. The body is decoded as JSON object for ``application/json``
    requests, and as form-urlencoded data otherwise.

    :param request: the incoming HTTP request
    :return: a flat dict of request parameters
    """
    params: RequestParams = request.args.to_dict()

    if request.mimetype == APPLICATION_JSON:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            params.update(body)
        elif request.get_data():
            LOG.debug("Ignoring request body which is not a JSON object: %s", request.get_data())
        return params

    form = request.form.to_dict()
    if not form and request.get_data() and not request.mimetype:
        # some clients don't set a content type for their form-urlencoded payload
        form = dict(parse_qsl(to_str(request.get_data()), keep_blank_values=True))
    params.update(form)
    return params


def _extract_entry_indices(params: RequestParams, prefix: str) -> List[str]:
    """Returns the distinct entry indices among the keys with the given prefix, in the order they are first seen."""
    indices = []
    for key in params:
        if not key.startswith(prefix):
            continue
        index = key[len(prefix) :].split(".", 1)[0]
        if index not in indices:
            indices.append(index)
    return indices


def prepare_message_attributes(message_attributes: Dict[str, Dict]) -> MessageAttributes:
    """
    Converts message attributes given in their structured form, ``{Name: {DataType, StringValue, BinaryValue}}``,
    into the ``{Name: {Type, Value}}`` representation used in notifications.
    """
    attributes = {}
    for attr_name, attr in message_attributes.items():
        if not isinstance(attr, dict):
            continue
        attributes[attr_name] = {
            "Type": attr.get("DataType"),
            "Value": attr.get("BinaryValue") or attr.get("StringValue"),
        }
    return attributes


def parse_message_attributes(params: RequestParams) -> MessageAttributes:
    """
    Decodes the message attributes of a publish request. The query protocol encodes them as flattened entries::

        MessageAttributes.entry.1.Name=color
        MessageAttributes.entry.1.Value.DataType=String
        MessageAttributes.entry.1.Value.StringValue=red

    which are turned into ``{"color": {"Type": "String", "Value": "red"}}``. A binary value takes precedence over
    a string value. If the message structure is ``json``, the attributes are expected to be part of the message
    and nothing is decoded.

    :param params: the flat request parameters
    :return: a dict mapping attribute names to their type and value
    """
    if params.get("MessageStructure") == "json":
        return {}

    if isinstance(params.get("MessageAttributes"), dict):
        # JSON clients may send the attributes in their structured form
        return prepare_message_attributes(params["MessageAttributes"])

    attributes = {}
    for index in _extract_entry_indices(params, MESSAGE_ATTRIBUTES_PREFIX):
        base_key = f"{MESSAGE_ATTRIBUTES_PREFIX}{index}"
        name = params.get(f"{base_key}.Name")
        attributes[str(name)] = {
            "Type": params.get(f"{base_key}.Value.DataType"),
            "Value": params.get(f"{base_key}.Value.BinaryValue")
            or params.get(f"{base_key}.Value.StringValue"),
        }
    return attributes
