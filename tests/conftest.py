import pytest
import uuid
from moto import mock_aws
import harness

@pytest.fixture
def aws_env(monkeypatch):
    for key in ['LOCALSTACK_ENDPOINT', 'AWS_ENDPOINT_URL', 'AWS_PROFILE', 'region', 'REGION']:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')

@pytest.fixture
def emulated(aws_env):
    # invokes answer 200 without running the code, execution is covered by invoke_local
    with mock_aws(config={'lambda': {'use_docker': False}}):
        with harness.setup():
            yield

@pytest.fixture
def uid():
    return str(uuid.uuid4())[-12:]
