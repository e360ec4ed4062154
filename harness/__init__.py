import boto3
import botocore.config
import contextlib
import functools
import traceback
import logging
import os
import sys

stderr = lambda *a: print(*a, file=sys.stderr)

localstack_credentials = {'aws_access_key_id': 'test', 'aws_secret_access_key': 'test'}

def endpoint():
    return os.environ.get('LOCALSTACK_ENDPOINT') or os.environ.get('AWS_ENDPOINT_URL')

def region():
    for key in ['region', 'REGION']:
        if key in os.environ:
            return os.environ[key]
    return boto3.session.Session().region_name or 'us-east-1'

@functools.lru_cache(maxsize=None)
def client(name):
    kw = {}
    url = endpoint()
    if url:
        kw['endpoint_url'] = url
        kw['config'] = botocore.config.Config(s3={'addressing_style': 'path'})
        if not boto3.session.Session().get_credentials():
            kw.update(localstack_credentials)
    return boto3.client(name, region_name=region(), **kw)

@contextlib.contextmanager
def setup(exit_on_error=False):
    logging.basicConfig(level='INFO', format='%(message)s')
    logging.getLogger('botocore').setLevel('ERROR')
    client.cache_clear()
    try:
        yield
    except AssertionError as e:
        if not exit_on_error:
            raise
        logging.error('error: ' + (str(e.args[0]) if e.args else traceback.format_exc().splitlines()[-2].strip()))
        sys.exit(1)
    finally:
        client.cache_clear()
