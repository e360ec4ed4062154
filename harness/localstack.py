import requests
import harness

services = ['s3', 'lambda', 'iam']

def health(endpoint=None, timeout=2):
    endpoint = endpoint or harness.endpoint()
    assert endpoint, 'set LOCALSTACK_ENDPOINT, ie: http://localhost:4566'
    resp = requests.get(f'{endpoint.rstrip("/")}/_localstack/health', timeout=timeout)
    resp.raise_for_status()
    return resp.json()['services']

def available(endpoint=None, timeout=2):
    endpoint = endpoint or harness.endpoint()
    if not endpoint:
        return False
    try:
        status = health(endpoint, timeout)
    except (requests.RequestException, ValueError, KeyError):
        return False
    return all(status.get(service) in {'available', 'running'} for service in services)
