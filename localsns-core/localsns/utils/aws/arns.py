import re
from typing import Optional

# matches pseudo parameters like #{AWS::AccountId} in ARNs
PSEUDO_PARAMETER_REGEX = re.compile(r"#{AWS::([a-zA-Z]+)}")


def sns_topic_arn(topic_name: str, account_id: str, region_name: str) -> str:
    return "arn:aws:sns:%s:%s:%s" % (region_name, account_id, topic_name)


def sns_subscription_arn(topic_arn: str, suffix) -> str:
    return "%s:%s" % (topic_arn, suffix)


def resolve_pseudo_parameters(arn: Optional[str], account_id: str) -> Optional[str]:
    """
    Replaces every pseudo parameter like ``#{AWS::AccountId}`` in the given ARN with the account ID, regardless of
    the name of the parameter.

    :param arn: the ARN which may contain pseudo parameters
    :param account_id: the account ID to insert
    :return: the resolved ARN, or None if no ARN was given
    """
    if not arn:
        return arn
    return PSEUDO_PARAMETER_REGEX.sub(lambda _: account_id, arn)
