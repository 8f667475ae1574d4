import pytest
from rolo.gateway.wsgi import WsgiGateway
from werkzeug.test import Client

from localsns.aws.app import SnsGateway
from localsns.services.sns.provider import SnsProvider

TEST_REGION = "us-east-1"
TEST_ACCOUNT_ID = "123456789012"


@pytest.fixture
def sns_provider():
    provider = SnsProvider(region=TEST_REGION, account_id=TEST_ACCOUNT_ID)
    yield provider
    provider.shutdown()


@pytest.fixture
def sns_gateway(sns_provider):
    return SnsGateway(sns_provider)


@pytest.fixture
def client(sns_gateway):
    return Client(WsgiGateway(sns_gateway))
